"""
Helpers for pulling structured data out of model output.
"""

import json
import re
from typing import Any

from .exceptions import LLMResponseParseError

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def extract_json(content: str) -> Any:
    """
    Parse the JSON payload in a model response.

    Accepts bare JSON, JSON inside a fenced code block, or JSON surrounded by
    prose (the outermost ``[...]`` or ``{...}`` span is used).

    Raises:
        LLMResponseParseError: If no JSON value can be decoded
    """
    text = (content or "").strip()
    if not text:
        raise LLMResponseParseError("empty response", content)

    fenced = _FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for opener, closer in (("[", "]"), ("{", "}")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start != -1 and end > start:
            try:
                return json.loads(text[start : end + 1])
            except json.JSONDecodeError:
                continue

    raise LLMResponseParseError("no JSON found", content)


def expect_list(data: Any, key: str) -> list:
    """Return ``data`` if it is a list, or ``data[key]`` when wrapped in an object."""
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    if isinstance(data, list):
        return data
    raise LLMResponseParseError(f"expected a JSON array or an object with '{key}'")
