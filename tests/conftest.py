"""Shared fixtures: a scripted generative client and instant wheel timing."""

from __future__ import annotations

import asyncio
import json
import logging
import random
from collections.abc import Iterator
from typing import Any

import pytest

from evoroulette.game.controller import MIN_TRAITS, GameController
from evoroulette.game.evaluator import ViabilityEvaluator
from evoroulette.game.orchestrator import GenerationOrchestrator
from evoroulette.game.selection import SelectionTracker
from evoroulette.game.wheel import WheelSelector
from evoroulette.generation.client import (
    GenerationRequest,
    GenerativeClient,
    GenerativeClientSettings,
)
from evoroulette.generation.credential_gate import CredentialGate
from evoroulette.model.catalog import ENVIRONMENTS, TRAITS

PROFILE_TEXT = "Aridocursor siccus is a burrowing insectivore of the dune fields."
IMAGE_URL = "data:image/png;base64,iVBORw0KGgo="
REPORT = {
    "generations": 1200,
    "classification": "Resilient Specialist",
    "strengths": ["Water retention", "Nocturnal foraging"],
    "limitations": ["Slow reproduction"],
    "evolutionaryOutlook": "Stable while the dune system persists.",
}


async def no_wait(_delay: float) -> None:
    """Sleep replacement that settles the wheel immediately."""
    return None


class FakeClient(GenerativeClient):
    """Scripted client: each capability returns its value or raises it.

    Set ``hold`` to an unset ``asyncio.Event`` to park every call until the
    test releases it. ``events`` records start/end of each call in order.
    """

    name = "fake"

    def __init__(
        self,
        text: str | Exception = PROFILE_TEXT,
        image: str | None | Exception = IMAGE_URL,
        structured: str | Exception | None = None,
    ) -> None:
        self.text = text
        self.image = image
        self.structured = json.dumps(REPORT) if structured is None else structured
        self.hold: asyncio.Event | None = None
        self.calls: list[tuple[str, GenerationRequest]] = []
        self.events: list[str] = []
        self.configured: list[GenerativeClientSettings] = []

    async def generate_text(self, request: GenerationRequest) -> str:
        return await self._respond("text", request, self.text)

    async def generate_image(self, request: GenerationRequest) -> str | None:
        return await self._respond("image", request, self.image)

    async def generate_structured(
        self, request: GenerationRequest, schema: dict[str, Any]
    ) -> str:
        return await self._respond("structured", request, self.structured)

    def configure(self, settings: GenerativeClientSettings) -> None:
        self.configured.append(settings)

    async def _respond(self, kind: str, request: GenerationRequest, outcome: Any) -> Any:
        self.calls.append((kind, request))
        self.events.append(f"start:{kind}")
        await asyncio.sleep(0)
        if self.hold is not None:
            await self.hold.wait()
        self.events.append(f"end:{kind}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.calls]


def build_controller(
    client: GenerativeClient,
    gate: CredentialGate | None = None,
    seed: int = 7,
    start_at_title: bool = False,
) -> GameController:
    """Controller with a seeded wheel that settles instantly."""
    wheel = WheelSelector(
        len(ENVIRONMENTS), rng=random.Random(seed), settle_delay=0, sleep=no_wait
    )
    ids = iter(range(10_000, 20_000))
    return GameController(
        orchestrator=GenerationOrchestrator(client, credential_gate=gate),
        evaluator=ViabilityEvaluator(client),
        wheel=wheel,
        tracker=SelectionTracker(id_source=lambda: next(ids)),
        credential_gate=gate,
        start_at_title=start_at_title,
        session_id="test-session",
    )


def advance_to_traits(controller: GameController, trait_count: int = MIN_TRAITS) -> None:
    """Spin, confirm the habitat and select the first ``trait_count`` traits."""
    asyncio.run(controller.spin())
    controller.confirm_environment()
    for trait in TRAITS[:trait_count]:
        controller.toggle_trait(trait)


@pytest.fixture
def client() -> FakeClient:
    """A client whose calls all succeed."""
    return FakeClient()


@pytest.fixture
def controller(client: FakeClient) -> GameController:
    """A controller on the environment step with no credential gate."""
    return build_controller(client)


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo configure_logging so later tests see default propagation."""
    yield
    for name in ("evoroulette", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
