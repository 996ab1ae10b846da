"""OpenAI client implementation.

This module provides the OpenAIClient class, the only provider that covers
all three capabilities: chat completions for the species profile, JSON-schema
structured output for the viability report, and the images API for the
illustration.
"""

import logging
from typing import Any

import openai
from openai import (
    APIError,
    APITimeoutError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
)

from evoroulette.generation.client import (
    CredentialTierError,
    GenerationRequest,
    GenerativeClient,
    GenerativeClientError,
    GenerativeClientSettings,
)
from evoroulette.generation.config import GenerationConfig, get_generation_config

logger = logging.getLogger(__name__)


class OpenAIClientError(GenerativeClientError):
    """Exception raised when OpenAI API calls fail."""

    pass


class OpenAIClient(GenerativeClient):
    """Generative client for OpenAI's API.

    Example:
        >>> client = OpenAIClient()
        >>> text = await client.generate_text(GenerationRequest(prompt="..."))
    """

    name = "openai"
    DEFAULT_TEXT_MODEL = "gpt-4o-mini"
    DEFAULT_IMAGE_MODEL = "gpt-image-1"
    MAX_RETRIES = 2

    def __init__(self, config: GenerationConfig | None = None) -> None:
        """Initialize the OpenAI client.

        Args:
            config: Optional GenerationConfig. If not provided, loads from environment.
        """
        self._config = config or get_generation_config()
        self._settings: GenerativeClientSettings | None = None
        self._client: openai.AsyncOpenAI | None = None
        self._initialize_client()

    def _initialize_client(self) -> None:
        api_key = self._config.openai_api_key
        if not api_key:
            logger.warning("No OpenAI API key configured. Client will fail on query.")
            self._client = None
            return

        self._client = openai.AsyncOpenAI(
            api_key=api_key.get_secret_value(),
            timeout=self._config.llm_timeout,
            max_retries=self.MAX_RETRIES,
        )

    def configure(self, settings: GenerativeClientSettings) -> None:
        """Configure the client with new settings.

        Fields left unset keep their earlier value, or the configured default.

        Args:
            settings: New settings to apply.
        """
        if self._settings is not None:
            settings = self._settings.model_copy(update=settings.model_dump(exclude_unset=True))
        self._settings = settings

        if settings.api_key:
            self._client = openai.AsyncOpenAI(
                api_key=settings.api_key,
                timeout=self._get_timeout(),
                max_retries=self.MAX_RETRIES,
            )

    async def generate_text(self, request: GenerationRequest) -> str:
        """Generate the species profile with chat completions.

        Raises:
            OpenAIClientError: If the query fails.
        """
        client = self._require_client()
        model = self._get_text_model()
        logger.debug("Requesting species profile from OpenAI model %s", model)

        try:
            response = await client.chat.completions.create(
                model=model,
                max_tokens=self._get_max_tokens(),
                temperature=self._get_temperature(),
                messages=self._build_messages(request),
            )
        except Exception as e:
            raise self._wrap_error(e) from e

        return response.choices[0].message.content or ""

    async def generate_structured(
        self, request: GenerationRequest, schema: dict[str, Any]
    ) -> str:
        """Generate JSON constrained by ``schema`` via structured outputs."""
        client = self._require_client()
        model = self._get_text_model()
        logger.debug("Requesting structured output from OpenAI model %s", model)

        try:
            response = await client.chat.completions.create(
                model=model,
                max_tokens=self._get_max_tokens(),
                temperature=self._get_temperature(),
                messages=self._build_messages(request),
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": "viability_report", "schema": schema, "strict": True},
                },
            )
        except Exception as e:
            raise self._wrap_error(e) from e

        content = response.choices[0].message.content
        if not content:
            raise OpenAIClientError("Empty structured response from OpenAI API")
        return content

    async def generate_image(self, request: GenerationRequest) -> str | None:
        """Generate the illustration and return it as a data URI (or hosted URL).

        Raises:
            CredentialTierError: If the image model is not available for this key.
            OpenAIClientError: For any other failure.
        """
        client = self._require_client()
        model = self._get_image_model()
        logger.debug("Requesting illustration from OpenAI model %s", model)

        params: dict[str, Any] = {
            "model": model,
            "prompt": request.prompt,
            "size": self._config.image_size,
            "n": 1,
        }
        # gpt-image models always return base64 and reject response_format
        if model.startswith("dall-e"):
            params["response_format"] = "b64_json"

        try:
            response = await client.images.generate(**params)
        except Exception as e:
            raise self._wrap_error(e) from e

        if not response.data:
            return None
        image = response.data[0]
        if image.b64_json:
            return f"data:image/png;base64,{image.b64_json}"
        return image.url

    def _require_client(self) -> openai.AsyncOpenAI:
        if not self._client:
            raise OpenAIClientError(
                "OpenAI client not initialized. Check that OPENAI_API_KEY is set."
            )
        return self._client

    def _wrap_error(self, error: Exception) -> GenerativeClientError:
        """Translate SDK exceptions into client errors."""
        if isinstance(error, (PermissionDeniedError, NotFoundError)):
            logger.warning("OpenAI model unavailable for this key: %s", error.message)
            return CredentialTierError(f"Model unavailable for current key: {error.message}")
        if isinstance(error, APITimeoutError):
            logger.error("OpenAI API timeout after %s seconds", self._get_timeout())
            return OpenAIClientError(f"API request timed out: {error}")
        if isinstance(error, RateLimitError):
            logger.error("OpenAI API rate limit exceeded")
            return OpenAIClientError(f"Rate limit exceeded: {error}")
        if isinstance(error, APIError):
            logger.error("OpenAI API error: %s", error.message)
            return OpenAIClientError(f"API error: {error.message}")
        logger.error("Unexpected error querying OpenAI: %s", str(error))
        return OpenAIClientError(f"Unexpected error: {error}")

    def _get_text_model(self) -> str:
        if self._settings and self._settings.text_model:
            return self._settings.text_model
        return self._config.text_model or self.DEFAULT_TEXT_MODEL

    def _get_image_model(self) -> str:
        if self._settings and self._settings.image_model:
            return self._settings.image_model
        return self._config.image_model or self.DEFAULT_IMAGE_MODEL

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

    def _build_messages(self, request: GenerationRequest) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = []
        if request.system_message:
            messages.append({"role": "system", "content": request.system_message})
        messages.append({"role": "user", "content": request.prompt})
        return messages
