"""Concurrent species generation: profile text and illustration.

The orchestrator is the one place the game runs remote calls in parallel.
Both branches are launched together, each captures its own outcome, and the
combined result is only returned once both have settled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from evoroulette.game.errors import KeyRequiredError
from evoroulette.generation.client import (
    CredentialTierError,
    GenerativeClient,
    classify_error,
)
from evoroulette.generation.credential_gate import CredentialGate
from evoroulette.generation.prompt_builder import PromptBuilder
from evoroulette.model.environment import Environment
from evoroulette.model.trait import Trait

logger = logging.getLogger(__name__)

T = TypeVar("T")

TEXT_BRANCH = "text"
IMAGE_BRANCH = "image"


class GenerationResult(BaseModel):
    """Outcome of one generation cycle.

    Attributes:
        description: Species profile; empty if the text branch failed.
        image_url: Data URI or URL of the illustration; None if unavailable.
        text_error: Failure reason for the text branch, if any.
        image_error: Failure reason for the image branch, if any.
    """

    description: str = Field(default="", description="Species profile text")
    image_url: str | None = Field(default=None, description="Illustration reference")
    text_error: str | None = Field(default=None, description="Text branch failure reason")
    image_error: str | None = Field(default=None, description="Image branch failure reason")

    @property
    def degraded(self) -> bool:
        return self.text_error is not None or self.image_error is not None


@dataclass
class BranchOutcome(Generic[T]):
    """Value or exception captured from one concurrent branch."""

    name: str
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _capture(name: str, call: Awaitable[T]) -> BranchOutcome[T]:
    try:
        return BranchOutcome(name=name, value=await call)
    except Exception as e:
        return BranchOutcome(name=name, error=e)


class GenerationOrchestrator:
    """Runs the profile and illustration requests for a habitat and trait set.

    Key gating has two triggers and both raise ``KeyRequiredError``:
    - up front, when a credential gate is present and reports no key;
    - after the join, when either branch failed with ``CredentialTierError``.

    Every other provider failure degrades to an empty profile or a missing
    image. Nothing is cached: each call performs the full round trip.

    Example:
        >>> orchestrator = GenerationOrchestrator(client)
        >>> result = await orchestrator.generate(environment, traits)
        >>> result.description
    """

    def __init__(
        self,
        client: GenerativeClient,
        prompt_builder: PromptBuilder | None = None,
        credential_gate: CredentialGate | None = None,
    ) -> None:
        self._client = client
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._gate = credential_gate

    async def generate(
        self, environment: Environment, traits: Sequence[Trait]
    ) -> GenerationResult:
        """Generate the species profile and illustration concurrently.

        Raises:
            KeyRequiredError: If a paid-tier key must be selected first.
        """
        if self._gate is not None and not await self._gate.has_selected_key():
            logger.info("Generation gated: no API key selected")
            raise KeyRequiredError("gate")

        text_request = self._prompt_builder.build_text_request(environment, traits)
        image_request = self._prompt_builder.build_image_request(environment, traits)

        logger.info(
            "Generating species for %s with %d traits",
            environment.name,
            len(traits),
        )
        async with asyncio.TaskGroup() as group:
            text_task = group.create_task(
                _capture(TEXT_BRANCH, self._client.generate_text(text_request))
            )
            image_task = group.create_task(
                _capture(IMAGE_BRANCH, self._client.generate_image(image_request))
            )
        text, image = text_task.result(), image_task.result()

        for outcome in (text, image):
            if isinstance(outcome.error, CredentialTierError):
                logger.info("Generation gated: %s branch needs a paid-tier key", outcome.name)
                raise KeyRequiredError(outcome.name, str(outcome.error))

        result = GenerationResult(
            description=text.value or "",
            image_url=image.value,
            text_error=self._describe_failure(text),
            image_error=self._describe_failure(image),
        )
        if result.degraded:
            logger.warning(
                "Generation degraded (text=%s, image=%s)",
                result.text_error or "ok",
                result.image_error or "ok",
            )
        return result

    def _describe_failure(self, outcome: BranchOutcome[object]) -> str | None:
        if outcome.error is None:
            return None
        reason = classify_error(outcome.error)
        logger.error("%s generation failed (%s): %s", outcome.name, reason, outcome.error)
        return reason
