"""
Abstract base class for LLM providers.

This module defines the interface every provider implements so the text
service can swap between them when a role's model is unavailable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class LLMErrorType(Enum):
    """Types of errors that can occur with LLM providers."""

    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    AUTHENTICATION = "authentication"
    INVALID_REQUEST = "invalid_request"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    QUOTA_EXCEEDED = "quota_exceeded"
    MODEL_UNAVAILABLE = "model_unavailable"
    UNKNOWN = "unknown"


RETRYABLE_ERROR_TYPES = {
    LLMErrorType.RATE_LIMIT,
    LLMErrorType.TIMEOUT,
    LLMErrorType.SERVER_ERROR,
    LLMErrorType.NETWORK_ERROR,
}


@dataclass
class LLMResponse:
    """Standardized response from LLM providers."""

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency: float = 0.0
    metadata: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Validate response data."""
        if not isinstance(self.content, str):
            raise ValueError("Response content must be a string")
        if self.input_tokens < 0 or self.output_tokens < 0:
            raise ValueError("Token counts cannot be negative")

    @property
    def tokens_used(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class LLMError(Exception):
    """Standardized error from LLM providers."""

    error_type: Union[LLMErrorType, str]
    message: str
    provider: str
    retry_after: Optional[int] = None
    details: Optional[Dict[str, Any]] = None

    def __str__(self):
        error_type_str = (
            self.error_type.value
            if hasattr(self.error_type, "value")
            else str(self.error_type)
        )
        return f"{self.provider} {error_type_str}: {self.message}"

    def is_retryable(self) -> bool:
        """Check if this error type is retryable."""
        return self.error_type in RETRYABLE_ERROR_TYPES


def error_type_for_status(status_code: int, message: str = "") -> LLMErrorType:
    """Map an HTTP status from a provider API to an LLMErrorType."""
    lowered = message.lower()
    if status_code == 429:
        return LLMErrorType.RATE_LIMIT
    if status_code in (401, 403):
        return LLMErrorType.AUTHENTICATION
    if status_code == 402 or "quota" in lowered or "billing" in lowered:
        return LLMErrorType.QUOTA_EXCEEDED
    if status_code == 404:
        return LLMErrorType.MODEL_UNAVAILABLE
    if status_code == 408:
        return LLMErrorType.TIMEOUT
    if status_code in (400, 422):
        return LLMErrorType.INVALID_REQUEST
    # 529 is Anthropic's "overloaded"
    if status_code >= 500:
        return LLMErrorType.SERVER_ERROR
    return LLMErrorType.UNKNOWN


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    All providers implement this interface to be usable by the text service.
    """

    def __init__(self, name: str, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the LLM provider.

        Args:
            name: Provider name as used in ``.taskmasterconfig``
            config: Provider-specific configuration
        """
        self.name = name
        self.config = config or {}

    @abstractmethod
    async def generate_response(
        self, prompt: str, parameters: Optional[Dict[str, Any]] = None
    ) -> LLMResponse:
        """
        Generate a response from the LLM provider.

        Args:
            prompt: The user prompt
            parameters: Request parameters (system, temperature, max_tokens, model)

        Returns:
            LLMResponse object with the generated content and metadata

        Raises:
            LLMError: If the request fails
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the provider."""

    def _normalize_parameters(
        self, parameters: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Normalize parameters to provider-specific format.

        Providers override this to map common parameters to their API format.
        """
        if parameters is None:
            return {}
        return parameters.copy()

    def _handle_api_error(self, error: Exception) -> LLMError:
        """
        Convert provider-specific errors to standardized LLMError.

        Providers override this to map transport errors to LLMErrorType.
        """
        return LLMError(
            error_type=LLMErrorType.UNKNOWN,
            message=str(error),
            provider=self.name,
            details={"original_error": str(error)},
        )
