"""
Role-based text generation with provider fallback.

A role (main, research, fallback) maps to an ordered sequence of roles to try.
Each role resolves to the provider/model bound in ``.taskmasterconfig``.
Providers without an API key are skipped, retryable errors are retried with
exponential backoff, and any other failure moves on to the next role.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from task_master.config.models_catalog import find_model, load_model_catalog
from task_master.config.project_config import ProjectConfig, load_project_config
from task_master.config.settings import get_api_key, get_base_url, load_environment
from task_master.utils.logging import get_logger

from .claude_provider import ClaudeProvider
from .exceptions import AllProvidersFailedError
from .openai_provider import OpenAIProvider, PerplexityProvider
from .provider import LLMError, LLMProvider

logger = get_logger(__name__)

ROLE_SEQUENCES = {
    "main": ("main", "fallback", "research"),
    "research": ("research", "fallback", "main"),
    "fallback": ("fallback", "research"),
}

MAX_RETRIES = 2
INITIAL_RETRY_DELAY = 1.0
MAX_RETRY_DELAY = 30.0

PROVIDER_CLASSES: Dict[str, Callable[..., LLMProvider]] = {
    "anthropic": ClaudeProvider,
    "openai": OpenAIProvider,
    "perplexity": PerplexityProvider,
}


@dataclass
class TextResult:
    """Generated text plus usage telemetry for the call that produced it."""

    main_result: str
    telemetry: Dict[str, Any] = field(default_factory=dict)


def create_provider(provider_name: str, model_id: str) -> Optional[LLMProvider]:
    """
    Build a provider client for ``provider_name``.

    Returns:
        The provider, or None if the provider is unknown or has no API key
    """
    provider_cls = PROVIDER_CLASSES.get(provider_name.lower())
    if provider_cls is None:
        logger.warning(f"Unsupported AI provider: {provider_name}")
        return None
    api_key = get_api_key(provider_name)
    if not api_key:
        logger.info(f"Skipping {provider_name}: no API key configured")
        return None
    config = {"api_key": api_key, "model": model_id}
    base_url = get_base_url(provider_name)
    if base_url:
        config["base_url"] = base_url
    return provider_cls(config)


async def _generate_with_retries(
    provider: LLMProvider, prompt: str, parameters: Dict[str, Any]
):
    """Call the provider, retrying retryable errors with exponential backoff."""
    retries = 0
    delay = INITIAL_RETRY_DELAY

    while True:
        try:
            return await provider.generate_response(prompt, parameters)
        except LLMError as e:
            retries += 1
            if not e.is_retryable() or retries > MAX_RETRIES:
                raise

            wait = e.retry_after if e.retry_after else delay
            await asyncio.sleep(min(wait, MAX_RETRY_DELAY))
            delay *= 2

            logger.debug(f"Retrying {provider.name} (attempt {retries})")


async def generate_text_service(
    role: str,
    prompt: str,
    system_prompt: Optional[str] = None,
    config: Optional[ProjectConfig] = None,
    project_root: Union[str, Path, None] = None,
) -> TextResult:
    """
    Generate text for ``role``, falling back through the role sequence.

    Args:
        role: Starting role (main, research or fallback)
        prompt: User prompt
        system_prompt: Optional system prompt
        config: Project config; loaded from ``project_root`` when omitted
        project_root: Project directory (``.taskmasterconfig`` and ``.env``)

    Returns:
        TextResult with the generated text and telemetry

    Raises:
        AllProvidersFailedError: If no provider in the sequence succeeded
    """
    if role not in ROLE_SEQUENCES:
        raise ValueError(f"Unknown model role: {role}")

    root = Path(project_root or Path.cwd())
    load_environment(root)
    if config is None:
        config = load_project_config(root)
    catalog = load_model_catalog()

    attempts: List[str] = []
    last_error: Optional[Exception] = None

    for current_role in ROLE_SEQUENCES[role]:
        binding = config.models[current_role]
        provider = create_provider(binding.provider, binding.model_id)
        if provider is None:
            continue

        attempts.append(f"{current_role}:{binding.provider}/{binding.model_id}")
        parameters = {
            "system": system_prompt,
            "model": binding.model_id,
            "max_tokens": binding.max_tokens,
            "temperature": binding.temperature,
        }
        logger.info(
            f"Generating text with {current_role} role ({binding.provider}/{binding.model_id})"
        )

        try:
            response = await _generate_with_retries(provider, prompt, parameters)
        except LLMError as e:
            last_error = e
            logger.warning(f"Provider {binding.provider} failed for role {current_role}: {e}")
            continue
        finally:
            await provider.aclose()

        model = find_model(catalog, binding.model_id)
        total_cost = (
            model.cost_for(response.input_tokens, response.output_tokens) if model else 0.0
        )
        return TextResult(
            main_result=response.content,
            telemetry={
                "role": current_role,
                "provider": binding.provider,
                "modelId": binding.model_id,
                "inputTokens": response.input_tokens,
                "outputTokens": response.output_tokens,
                "totalCost": total_cost,
            },
        )

    raise AllProvidersFailedError(role, attempts, last_error)
