"""Generative provider layer: clients, prompts, parsing and key selection."""

from evoroulette.generation.client import (
    CredentialTierError,
    ErrorReason,
    GenerationRequest,
    GenerativeClient,
    GenerativeClientError,
    GenerativeClientSettings,
    classify_error,
)
from evoroulette.generation.config import (
    GenerationConfig,
    LLMProvider,
    get_generation_config,
)
from evoroulette.generation.credential_gate import CredentialGate, SessionKeySelector
from evoroulette.generation.prompt_builder import PromptBuilder, SpeciesContext
from evoroulette.generation.response_parser import ResponseParser, ResponseParserError

__all__ = [
    "CredentialGate",
    "CredentialTierError",
    "ErrorReason",
    "GenerationConfig",
    "GenerationRequest",
    "GenerativeClient",
    "GenerativeClientError",
    "GenerativeClientSettings",
    "LLMProvider",
    "PromptBuilder",
    "ResponseParser",
    "ResponseParserError",
    "SessionKeySelector",
    "SpeciesContext",
    "classify_error",
    "get_generation_config",
]
