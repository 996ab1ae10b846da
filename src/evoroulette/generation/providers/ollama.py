"""Ollama local model client implementation.

This module provides the OllamaClient class for running the text and
viability requests against a local Ollama server. Ollama has no image
endpoint, so illustrations are unavailable with this provider.
"""

import logging
from typing import Any

import httpx

from evoroulette.generation.client import (
    GenerationRequest,
    GenerativeClient,
    GenerativeClientError,
    GenerativeClientSettings,
)
from evoroulette.generation.config import GenerationConfig, get_generation_config

logger = logging.getLogger(__name__)


class OllamaClientError(GenerativeClientError):
    """Exception raised when Ollama API calls fail."""

    pass


class OllamaClient(GenerativeClient):
    """Generative client for local Ollama models.

    Example:
        >>> client = OllamaClient()
        >>> text = await client.generate_text(GenerationRequest(prompt="..."))
    """

    name = "ollama"
    DEFAULT_MODEL = "llama3"

    def __init__(self, config: GenerationConfig | None = None) -> None:
        """Initialize the Ollama client.

        Args:
            config: Optional GenerationConfig. If not provided, loads from environment.
        """
        self._config = config or get_generation_config()
        self._settings: GenerativeClientSettings | None = None
        self._host = self._config.ollama_host.rstrip("/")
        self._model = self._config.text_model or self._config.ollama_model

    def configure(self, settings: GenerativeClientSettings) -> None:
        """Configure the client with new settings.

        Fields left unset keep their earlier value, or the configured default.

        Args:
            settings: New settings to apply.
        """
        if self._settings is not None:
            settings = self._settings.model_copy(update=settings.model_dump(exclude_unset=True))
        self._settings = settings
        if settings.text_model:
            self._model = settings.text_model

    async def generate_text(self, request: GenerationRequest) -> str:
        """Generate the species profile.

        Raises:
            OllamaClientError: If the query fails (connection, timeout, etc.).
        """
        return await self._generate(request)

    async def generate_structured(
        self, request: GenerationRequest, schema: dict[str, Any]
    ) -> str:
        """Generate JSON using Ollama's ``format`` schema constraint."""
        return await self._generate(request, output_format=schema)

    async def generate_image(self, request: GenerationRequest) -> str | None:
        raise OllamaClientError("Ollama does not support image generation")

    async def _generate(
        self, request: GenerationRequest, output_format: dict[str, Any] | None = None
    ) -> str:
        model = self._get_model()
        timeout = self._get_timeout()

        payload: dict[str, Any] = {
            "model": model,
            "prompt": request.prompt,
            "stream": False,
            "options": {
                "temperature": self._get_temperature(),
                "num_predict": self._get_max_tokens(),
            },
        }
        if request.system_message:
            payload["system"] = request.system_message
        if output_format is not None:
            payload["format"] = output_format

        try:
            logger.debug("Querying Ollama model %s at %s", model, self._host)

            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(f"{self._host}/api/generate", json=payload)
                response.raise_for_status()
            data = response.json()

        except httpx.ConnectError as e:
            logger.error("Failed to connect to Ollama at %s: %s", self._host, str(e))
            raise OllamaClientError(
                f"Cannot connect to Ollama at {self._host}. "
                "Ensure Ollama is running (ollama serve)."
            ) from e
        except httpx.TimeoutException as e:
            logger.error("Ollama request timed out after %s seconds", timeout)
            raise OllamaClientError(f"Request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error("Ollama HTTP error: %s", e.response.status_code)
            raise OllamaClientError(f"HTTP error: {e.response.status_code}") from e
        except Exception as e:
            logger.error("Unexpected error querying Ollama: %s", str(e))
            raise OllamaClientError(f"Unexpected error: {e}") from e

        text = data.get("response", "") if isinstance(data, dict) else ""
        if not text:
            raise OllamaClientError("Empty response from Ollama API")
        return text

    def _get_model(self) -> str:
        return self._model or self.DEFAULT_MODEL

    def _get_max_tokens(self) -> int:
        if self._settings and "max_tokens" in self._settings.model_fields_set:
            return self._settings.max_tokens
        return self._config.llm_max_tokens

    def _get_temperature(self) -> float:
        if self._settings and "temperature" in self._settings.model_fields_set:
            return self._settings.temperature
        return self._config.llm_temperature

    def _get_timeout(self) -> float:
        if self._settings and "timeout" in self._settings.model_fields_set:
            return self._settings.timeout
        return self._config.llm_timeout
