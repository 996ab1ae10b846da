"""Claude (Anthropic) client implementation.

This module provides the ClaudeClient class for the species profile and the
viability report. Claude does not produce images, so illustration requests
fail and the game shows the profile without a picture.
"""

import json
import logging
from typing import Any

import anthropic
from anthropic import (
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


class ClaudeClientError(GenerativeClientError):
    """Exception raised when Claude API calls fail."""

    pass


class ClaudeClient(GenerativeClient):
    """Generative client for Anthropic's Claude API.

    Structured output is requested by embedding the JSON schema in the system
    prompt; the caller extracts and validates the JSON.
    """

    name = "claude"
    DEFAULT_TEXT_MODEL = "claude-sonnet-4-20250514"
    MAX_RETRIES = 2

    def __init__(self, config: GenerationConfig | None = None) -> None:
        """Initialize the Claude client.

        Args:
            config: Optional GenerationConfig. If not provided, loads from environment.
        """
        self._config = config or get_generation_config()
        self._settings: GenerativeClientSettings | None = None
        self._client: anthropic.AsyncAnthropic | None = None
        self._initialize_client()

    def _initialize_client(self) -> None:
        api_key = self._config.anthropic_api_key
        if not api_key:
            logger.warning("No Anthropic API key configured. Client will fail on query.")
            self._client = None
            return

        self._client = anthropic.AsyncAnthropic(
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
            self._client = anthropic.AsyncAnthropic(
                api_key=settings.api_key,
                timeout=self._get_timeout(),
                max_retries=self.MAX_RETRIES,
            )

    async def generate_text(self, request: GenerationRequest) -> str:
        """Generate the species profile.

        Raises:
            ClaudeClientError: If the query fails.
        """
        return await self._complete(request.system_message, request.prompt)

    async def generate_structured(
        self, request: GenerationRequest, schema: dict[str, Any]
    ) -> str:
        """Generate JSON for ``schema``; the schema travels in the system prompt."""
        system_message = (
            f"{request.system_message or ''}\n\n"
            "You MUST respond with a single JSON object that validates against this "
            f"JSON schema:\n{json.dumps(schema, indent=2)}"
        ).strip()
        return await self._complete(system_message, request.prompt)

    async def generate_image(self, request: GenerationRequest) -> str | None:
        raise ClaudeClientError("Claude does not support image generation")

    async def _complete(self, system_message: str | None, prompt: str) -> str:
        if not self._client:
            raise ClaudeClientError(
                "Claude client not initialized. Check that ANTHROPIC_API_KEY is set."
            )

        model = self._get_model()
        params: dict[str, Any] = {
            "model": model,
            "max_tokens": self._get_max_tokens(),
            "temperature": self._get_temperature(),
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_message:
            params["system"] = system_message

        try:
            logger.debug("Querying Claude model %s", model)
            response = await self._client.messages.create(**params)
        except (PermissionDeniedError, NotFoundError) as e:
            logger.warning("Claude model unavailable for this key: %s", e.message)
            raise CredentialTierError(f"Model unavailable for current key: {e.message}") from e
        except APITimeoutError as e:
            logger.error("Claude API timeout after %s seconds", self._get_timeout())
            raise ClaudeClientError(f"API request timed out: {e}") from e
        except RateLimitError as e:
            logger.error("Claude API rate limit exceeded")
            raise ClaudeClientError(f"Rate limit exceeded: {e}") from e
        except APIError as e:
            logger.error("Claude API error: %s", e.message)
            raise ClaudeClientError(f"API error: {e.message}") from e
        except Exception as e:
            logger.error("Unexpected error querying Claude: %s", str(e))
            raise ClaudeClientError(f"Unexpected error: {e}") from e

        for block in response.content:
            if block.type == "text" and block.text:
                return block.text

        raise ClaudeClientError("Empty response from Claude API")

    def _get_model(self) -> str:
        if self._settings and self._settings.text_model:
            return self._settings.text_model
        return self._config.text_model or self.DEFAULT_TEXT_MODEL

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
