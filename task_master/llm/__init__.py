"""
LLM access for Task Master.

Commands call ``generate_text_service`` with a role; the service picks the
configured provider for that role and falls back to the others.
"""

from .exceptions import AllProvidersFailedError, LLMResponseParseError
from .parsing import extract_json
from .provider import LLMError, LLMErrorType, LLMProvider, LLMResponse
from .service import ROLE_SEQUENCES, TextResult, create_provider, generate_text_service

__all__ = [
    "AllProvidersFailedError",
    "LLMError",
    "LLMErrorType",
    "LLMProvider",
    "LLMResponse",
    "LLMResponseParseError",
    "ROLE_SEQUENCES",
    "TextResult",
    "create_provider",
    "extract_json",
    "generate_text_service",
]
