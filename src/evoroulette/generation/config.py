"""Configuration loading for the generative provider.

This module provides Pydantic-based configuration loading from environment
variables and .env files. API keys are secured by never being logged or
exposed in error messages.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from functools import lru_cache
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class LLMProvider(StrEnum):
    """Supported generative providers."""

    OPENAI = "openai"
    CLAUDE = "claude"
    OLLAMA = "ollama"


class GenerationConfig(BaseSettings):
    """Configuration for the provider behind species generation.

    Loads settings from environment variables and .env file.
    API keys are stored as SecretStr to prevent accidental logging.

    Environment Variables:
        LLM_PROVIDER: Which provider to use (openai, claude, ollama)
        OPENAI_API_KEY: OpenAI API key (required if provider is openai)
        ANTHROPIC_API_KEY: Claude API key (required if provider is claude)
        OLLAMA_HOST: Ollama server URL (default: http://localhost:11434)
        OLLAMA_MODEL: Ollama model to use (default: llama3)
        TEXT_MODEL: Override the provider's default text model
        IMAGE_MODEL: Image model for illustrations (default: gpt-image-1)
        IMAGE_SIZE: Illustration size (default: 1024x1024, square)
        LLM_MAX_TOKENS: Maximum tokens in a text response (default: 1500)
        LLM_TEMPERATURE: Response randomness 0.0-2.0 (default: 0.7)
        LLM_TIMEOUT: Request timeout in seconds (default: 60.0)

    Example:
        >>> config = GenerationConfig()  # Loads from environment
        >>> config = GenerationConfig(_env_file=".env")  # Explicit .env file
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    llm_provider: LLMProvider = Field(
        default=LLMProvider.OPENAI,
        description="Which provider to use",
    )

    openai_api_key: SecretStr | None = Field(default=None, description="OpenAI API key")
    anthropic_api_key: SecretStr | None = Field(default=None, description="Claude API key")

    ollama_host: str = Field(
        default="http://localhost:11434",
        description="Ollama server URL",
    )
    ollama_model: str = Field(default="llama3", description="Ollama model to use")

    text_model: str = Field(default="", description="Text model override")
    image_model: str = Field(default="gpt-image-1", description="Image model")
    image_size: str = Field(default="1024x1024", description="Illustration size")

    llm_max_tokens: int = Field(
        default=1500,
        ge=1,
        le=100000,
        description="Maximum tokens in response",
    )
    llm_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Response randomness (0.0 to 2.0)",
    )
    llm_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds",
    )

    @field_validator("llm_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: Any) -> LLMProvider:
        """Normalize provider string to enum."""
        if isinstance(v, str):
            return LLMProvider(v.lower())
        return v

    def get_api_key(self) -> str | None:
        """Get the API key for the current provider.

        Returns:
            The API key string, or None if not configured.
            Never logs the actual key value.
        """
        if self.llm_provider == LLMProvider.OPENAI:
            return self.openai_api_key.get_secret_value() if self.openai_api_key else None
        elif self.llm_provider == LLMProvider.CLAUDE:
            return self.anthropic_api_key.get_secret_value() if self.anthropic_api_key else None
        else:
            return None

    def validate_config(self) -> None:
        """Validate that required configuration is present.

        Raises:
            ValueError: If required API key is missing for the selected provider.
        """
        if self.llm_provider == LLMProvider.OPENAI and not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER is 'openai'")
        if self.llm_provider == LLMProvider.CLAUDE and not self.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required when LLM_PROVIDER is 'claude'")

    def __repr__(self) -> str:
        """Safe representation that never exposes API keys."""
        return (
            f"GenerationConfig("
            f"provider={self.llm_provider.value}, "
            f"text_model={self.text_model or 'default'}, "
            f"image_model={self.image_model}, "
            f"max_tokens={self.llm_max_tokens}, "
            f"temperature={self.llm_temperature}, "
            f"timeout={self.llm_timeout}s, "
            f"openai_key={'*****' if self.openai_api_key else 'not set'}, "
            f"anthropic_key={'*****' if self.anthropic_api_key else 'not set'}"
            f")"
        )


@lru_cache
def get_generation_config() -> GenerationConfig:
    """Get cached generation configuration singleton.

    To reload configuration, call get_generation_config.cache_clear() first.
    """
    config = GenerationConfig()
    logger.info("Loaded generation configuration: %s", config)
    return config
