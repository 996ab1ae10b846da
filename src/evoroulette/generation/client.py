"""Abstract generative client interface.

This module defines the asynchronous interface every provider implements,
the request/settings models passed through it, and the error types the game
layer distinguishes between.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class GenerativeClientError(Exception):
    """Raised when a provider call fails."""

    pass


class CredentialTierError(GenerativeClientError):
    """The requested model or resource is unavailable for the current credential.

    Providers raise this instead of a plain ``GenerativeClientError`` when the
    failure can be fixed by selecting a different (paid-tier) API key.
    """

    pass


class GenerativeClientSettings(BaseModel):
    """Per-client overrides applied with ``configure()``.

    Attributes:
        api_key: API key selected for this client (e.g. a paid-tier key).
        text_model: Model identifier for text and structured output.
        image_model: Model identifier for illustrations.
        max_tokens: Maximum tokens in a text response.
        temperature: Response randomness.
        timeout: Request timeout in seconds.
    """

    api_key: str | None = Field(default=None, description="API key for the provider")
    text_model: str = Field(default="", description="Text model identifier")
    image_model: str = Field(default="", description="Image model identifier")
    max_tokens: int = Field(default=1500, ge=1, le=100000, description="Max response tokens")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Response randomness")
    timeout: float = Field(default=60.0, gt=0, description="Request timeout in seconds")


class GenerationRequest(BaseModel):
    """A single prompt sent to a provider.

    Attributes:
        prompt: The formatted prompt string to send.
        system_message: Optional system message to set model behavior.
        context: Structured data the prompt was built from, kept for logging.
    """

    prompt: str = Field(description="The formatted prompt string")
    system_message: str | None = Field(default=None, description="System message")
    context: dict[str, Any] = Field(default_factory=dict, description="Source data")


class GenerativeClient(ABC):
    """Abstract base class for generative provider clients.

    The three capabilities are independent: a provider may implement text and
    structured output but not images, in which case ``generate_image`` raises
    ``GenerativeClientError`` and callers degrade to "no illustration".
    """

    name: str = "generic"

    @abstractmethod
    async def generate_text(self, request: GenerationRequest) -> str:
        """Return free-form prose for the request.

        Raises:
            GenerativeClientError: If the provider call fails.
        """
        raise NotImplementedError("Subclasses must implement generate_text()")

    @abstractmethod
    async def generate_image(self, request: GenerationRequest) -> str | None:
        """Return a renderable image reference (data URI or URL), or None.

        Raises:
            CredentialTierError: If the image model needs a different key.
            GenerativeClientError: If the provider call fails.
        """
        raise NotImplementedError("Subclasses must implement generate_image()")

    @abstractmethod
    async def generate_structured(
        self, request: GenerationRequest, schema: dict[str, Any]
    ) -> str:
        """Return raw JSON text constrained (as far as the provider allows) to ``schema``.

        Validation against the schema is the caller's job.

        Raises:
            GenerativeClientError: If the provider call fails.
        """
        raise NotImplementedError("Subclasses must implement generate_structured()")

    @abstractmethod
    def configure(self, settings: GenerativeClientSettings) -> None:
        """Apply new settings, rebuilding the SDK client if a key is supplied.

        Only fields set explicitly on ``settings`` override the client's values.
        """
        raise NotImplementedError("Subclasses must implement configure()")


class ErrorReason:
    """Constants for why a provider call failed."""

    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    NETWORK_ERROR = "network_error"
    NO_API_KEY = "no_api_key"
    CREDENTIAL_TIER = "credential_tier"
    API_ERROR = "api_error"
    UNKNOWN = "unknown"


def classify_error(error: BaseException) -> str:
    """Classify an exception into an ErrorReason constant.

    Args:
        error: The exception that occurred.

    Returns:
        An ErrorReason constant string.
    """
    if isinstance(error, CredentialTierError):
        return ErrorReason.CREDENTIAL_TIER

    error_type = type(error).__name__.lower()
    error_msg = str(error).lower()

    if "timeout" in error_type or "timeout" in error_msg or "timed out" in error_msg:
        return ErrorReason.TIMEOUT

    if "ratelimit" in error_type or "rate limit" in error_msg or "rate_limit" in error_msg:
        return ErrorReason.RATE_LIMIT

    if any(
        term in error_type or term in error_msg
        for term in ["connection", "network", "socket", "unreachable", "dns"]
    ):
        return ErrorReason.NETWORK_ERROR

    if any(
        term in error_msg
        for term in ["api key", "api_key", "apikey", "authentication", "unauthorized"]
    ):
        return ErrorReason.NO_API_KEY

    if "api" in error_type or "api" in error_msg:
        return ErrorReason.API_ERROR

    return ErrorReason.UNKNOWN
