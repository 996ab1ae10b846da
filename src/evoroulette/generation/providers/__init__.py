"""Generative provider implementations."""

from evoroulette.generation.client import GenerativeClient
from evoroulette.generation.config import GenerationConfig, LLMProvider, get_generation_config
from evoroulette.generation.providers.claude import ClaudeClient, ClaudeClientError
from evoroulette.generation.providers.ollama import OllamaClient, OllamaClientError
from evoroulette.generation.providers.openai import OpenAIClient, OpenAIClientError


def create_client(config: GenerationConfig | None = None) -> GenerativeClient:
    """Create a client for the configured provider.

    Raises:
        ValueError: If the provider is not recognised.
    """
    config = config or get_generation_config()
    provider = config.llm_provider

    if provider == LLMProvider.OPENAI:
        return OpenAIClient(config)
    elif provider == LLMProvider.CLAUDE:
        return ClaudeClient(config)
    elif provider == LLMProvider.OLLAMA:
        return OllamaClient(config)
    raise ValueError(f"Unknown provider: {provider}")


__all__ = [
    "ClaudeClient",
    "ClaudeClientError",
    "OllamaClient",
    "OllamaClientError",
    "OpenAIClient",
    "OpenAIClientError",
    "create_client",
]
