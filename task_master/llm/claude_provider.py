"""
Claude provider implementation for the LLM abstraction layer.

Talks to Anthropic's Messages API over httpx and maps its errors onto
LLMErrorType.
"""

import os
import time
from typing import Any, Dict, Optional

import httpx

from task_master.utils.logging import get_logger

from .provider import (
    LLMError,
    LLMErrorType,
    LLMProvider,
    LLMResponse,
    error_type_for_status,
)

logger = get_logger(__name__)

DEFAULT_MAX_TOKENS = 4096


class ClaudeProvider(LLMProvider):
    """
    Claude provider implementation using the Anthropic API.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize Claude provider.

        Args:
            config: Configuration dictionary with optional keys:
                - api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
                - model: Model to use
                - base_url: API base URL (defaults to Anthropic API)
                - timeout: Request timeout in seconds (defaults to 120)
        """
        super().__init__("anthropic", config)

        self.api_key = self.config.get("api_key") or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            logger.warning("No Anthropic API key found in config or environment")

        self.model = self.config.get("model", "claude-3-7-sonnet-20250219")
        self.base_url = (
            self.config.get("base_url") or "https://api.anthropic.com/v1"
        ).rstrip("/")
        self.timeout = self.config.get("timeout", 120)

        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={
                "x-api-key": self.api_key or "",
                "Content-Type": "application/json",
                "anthropic-version": "2023-06-01",
            },
        )

    async def generate_response(
        self, prompt: str, parameters: Optional[Dict[str, Any]] = None
    ) -> LLMResponse:
        """
        Generate a response using Claude.

        Args:
            prompt: The user prompt
            parameters: Optional parameters:
                - system: System prompt
                - temperature: Sampling temperature (0-1)
                - max_tokens: Maximum tokens to generate
                - model: Override default model

        Returns:
            LLMResponse with generated content and token usage

        Raises:
            LLMError: If the request fails
        """
        start_time = time.time()

        try:
            normalized_params = self._normalize_parameters(parameters)
            payload = {
                "model": normalized_params.pop("model", self.model),
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": normalized_params.pop("max_tokens", DEFAULT_MAX_TOKENS),
                **normalized_params,
            }

            logger.debug(f"Making Claude request with model: {payload['model']}")

            response = await self._client.post(f"{self.base_url}/messages", json=payload)

            if response.status_code != 200:
                error = self._handle_http_error(response)
                logger.error(f"Claude API error: {error}")
                raise error

            data = response.json()
            content = "".join(
                block.get("text", "")
                for block in data.get("content", [])
                if block.get("type", "text") == "text"
            )
            usage = data.get("usage", {})

            return LLMResponse(
                content=content,
                model=payload["model"],
                provider=self.name,
                input_tokens=usage.get("input_tokens", 0),
                output_tokens=usage.get("output_tokens", 0),
                latency=time.time() - start_time,
                metadata={
                    "stop_reason": data.get("stop_reason"),
                    "response_id": data.get("id"),
                },
            )

        except LLMError:
            raise
        except Exception as e:
            error = self._handle_api_error(e)
            logger.error(f"Unexpected error in Claude provider: {error}")
            raise error

    async def aclose(self) -> None:
        await self._client.aclose()

    def _normalize_parameters(
        self, parameters: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Normalize parameters to Anthropic API format.
        """
        if not parameters:
            return {}

        normalized = {}
        param_mapping = {
            "system": "system",
            "temperature": "temperature",
            "max_tokens": "max_tokens",
            "model": "model",
            "stop": "stop_sequences",
        }
        for common_name, anthropic_name in param_mapping.items():
            if parameters.get(common_name) is not None:
                normalized[anthropic_name] = parameters[common_name]

        # Claude accepts temperatures in 0-1 only
        if "temperature" in normalized:
            normalized["temperature"] = max(0, min(1, normalized["temperature"]))

        return normalized

    def _handle_http_error(self, response: httpx.Response) -> LLMError:
        """
        Handle HTTP errors from Anthropic API.
        """
        try:
            error_data = response.json()
            error_message = error_data.get("error", {}).get("message", "Unknown error")
            error_type_str = error_data.get("error", {}).get("type", "unknown")
        except ValueError:
            error_message = f"HTTP {response.status_code}: {response.text}"
            error_type_str = "unknown"

        retry_after = None
        if response.status_code == 429:
            header = response.headers.get("retry-after")
            retry_after = int(header) if header and header.isdigit() else None

        return LLMError(
            error_type=error_type_for_status(response.status_code, error_message),
            message=error_message,
            provider=self.name,
            retry_after=retry_after,
            details={
                "status_code": response.status_code,
                "error_type": error_type_str,
                "response_text": response.text[:500],
            },
        )

    def _handle_api_error(self, error: Exception) -> LLMError:
        """
        Convert transport exceptions to LLMError.
        """
        if isinstance(error, httpx.TimeoutException):
            return LLMError(
                error_type=LLMErrorType.TIMEOUT,
                message="Request timed out",
                provider=self.name,
                details={"timeout": self.timeout},
            )
        if isinstance(error, httpx.NetworkError):
            return LLMError(
                error_type=LLMErrorType.NETWORK_ERROR,
                message="Network error occurred",
                provider=self.name,
                details={"original_error": str(error)},
            )
        return super()._handle_api_error(error)
