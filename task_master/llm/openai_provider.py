"""
OpenAI-compatible provider implementation for the LLM abstraction layer.

Serves OpenAI itself and Perplexity, whose API speaks the same Chat
Completions protocol at a different base URL.
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


class OpenAIProvider(LLMProvider):
    """
    Chat Completions provider (OpenAI API).
    """

    provider_name = "openai"
    api_key_env = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com/v1"
    default_model = "gpt-4o"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the provider.

        Args:
            config: Configuration dictionary with optional keys:
                - api_key: API key (defaults to the provider's env var)
                - model: Model to use
                - base_url: API base URL
                - timeout: Request timeout in seconds (defaults to 120)
        """
        super().__init__(self.provider_name, config)

        self.api_key = self.config.get("api_key") or os.getenv(self.api_key_env)
        if not self.api_key:
            logger.warning(f"No {self.provider_name} API key found in config or environment")

        self.model = self.config.get("model", self.default_model)
        self.base_url = (self.config.get("base_url") or self.default_base_url).rstrip("/")
        self.timeout = self.config.get("timeout", 120)

        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={
                "Authorization": f"Bearer {self.api_key or ''}",
                "Content-Type": "application/json",
            },
        )

    async def generate_response(
        self, prompt: str, parameters: Optional[Dict[str, Any]] = None
    ) -> LLMResponse:
        """
        Generate a response through the Chat Completions endpoint.

        Args:
            prompt: The user prompt
            parameters: Optional parameters:
                - system: System prompt (sent as a system message)
                - temperature: Sampling temperature (0-2)
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
            system_prompt = normalized_params.pop("system", None)

            messages = []
            if system_prompt:
                messages.append({"role": "system", "content": system_prompt})
            messages.append({"role": "user", "content": prompt})

            payload = {
                "model": normalized_params.pop("model", self.model),
                "messages": messages,
                **normalized_params,
            }

            logger.debug(f"Making {self.provider_name} request with model: {payload['model']}")

            response = await self._client.post(
                f"{self.base_url}/chat/completions", json=payload
            )

            if response.status_code != 200:
                error = self._handle_http_error(response)
                logger.error(f"{self.provider_name} API error: {error}")
                raise error

            data = response.json()
            choice = data["choices"][0]
            usage = data.get("usage", {})

            return LLMResponse(
                content=choice["message"].get("content") or "",
                model=payload["model"],
                provider=self.name,
                input_tokens=usage.get("prompt_tokens", 0),
                output_tokens=usage.get("completion_tokens", 0),
                latency=time.time() - start_time,
                metadata={
                    "finish_reason": choice.get("finish_reason"),
                    "response_id": data.get("id"),
                },
            )

        except LLMError:
            raise
        except Exception as e:
            error = self._handle_api_error(e)
            logger.error(f"Unexpected error in {self.provider_name} provider: {error}")
            raise error

    async def aclose(self) -> None:
        await self._client.aclose()

    def _normalize_parameters(
        self, parameters: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        if not parameters:
            return {}
        allowed = ("system", "temperature", "max_tokens", "model", "stop")
        return {k: parameters[k] for k in allowed if parameters.get(k) is not None}

    def _handle_http_error(self, response: httpx.Response) -> LLMError:
        try:
            error_data = response.json()
            error_message = error_data.get("error", {}).get("message", "Unknown error")
        except ValueError:
            error_message = f"HTTP {response.status_code}: {response.text}"

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
                "response_text": response.text[:500],
            },
        )

    def _handle_api_error(self, error: Exception) -> LLMError:
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


class PerplexityProvider(OpenAIProvider):
    """Perplexity's OpenAI-compatible API; used mostly for the research role."""

    provider_name = "perplexity"
    api_key_env = "PERPLEXITY_API_KEY"
    default_base_url = "https://api.perplexity.ai"
    default_model = "sonar-pro"
