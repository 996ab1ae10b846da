"""Game step controller: the per-session state machine.

Steps run in a fixed order::

    title -> environment -> traits -> generation -> result -> evaluation

with ``result``/``evaluation`` able to go back to ``traits`` and ``restart()``
returning to the entry step from anywhere.

All session state lives in one ``SessionState`` owned by the controller.
Transition methods return True when the transition happened and False when
its preconditions were not met; the interaction layer is expected to check
the ``can_*`` guards first, so a refusal is logged rather than raised.

Remote calls suspend the controller without blocking the event loop. Each
one records the session epoch it started in; ``restart()`` bumps the epoch so
a response that arrives afterwards is discarded instead of being applied to
the new session.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from evoroulette.game.errors import GameError, KeyRequiredError
from evoroulette.game.evaluator import ViabilityEvaluator, ViabilityReport
from evoroulette.game.orchestrator import GenerationOrchestrator, GenerationResult
from evoroulette.game.selection import SelectionState, SelectionTracker
from evoroulette.game.wheel import WheelSelector
from evoroulette.generation.credential_gate import CredentialGate
from evoroulette.model.catalog import ENVIRONMENTS
from evoroulette.model.environment import Environment
from evoroulette.model.trait import Trait, TraitCategory

logger = logging.getLogger(__name__)

MIN_TRAITS = 5


class GameStep(StrEnum):
    """Steps of a game session, in order."""

    TITLE = "title"
    ENVIRONMENT = "environment"
    TRAITS = "traits"
    GENERATION = "generation"
    RESULT = "result"
    EVALUATION = "evaluation"


@dataclass
class SessionState:
    """Everything one game session knows.

    Attributes:
        step: Current step.
        selection: Habitat, traits and category filter.
        generation: Result of the last generation cycle.
        report: Viability report, once evaluated.
        key_prompt: Whether the player must select a paid-tier key.
        evaluation_failed: Whether the last evaluation produced no report.
        pending: Name of the remote operation in flight, if any.
        epoch: Incremented on restart; stale responses carry an older value.
    """

    step: GameStep
    selection: SelectionState = field(default_factory=SelectionState)
    generation: GenerationResult | None = None
    report: ViabilityReport | None = None
    key_prompt: bool = False
    evaluation_failed: bool = False
    pending: str | None = None
    epoch: int = 0


class GameController:
    """Sequences wheel, selection, generation and evaluation for one session.

    Example:
        >>> controller = GameController(orchestrator, evaluator)
        >>> await controller.spin()
        >>> controller.confirm_environment()
        >>> for trait in TRAITS[:5]:
        ...     controller.toggle_trait(trait)
        >>> await controller.generate()
        >>> controller.step
        <GameStep.RESULT: 'result'>
    """

    def __init__(
        self,
        orchestrator: GenerationOrchestrator,
        evaluator: ViabilityEvaluator,
        wheel: WheelSelector | None = None,
        tracker: SelectionTracker | None = None,
        environments: tuple[Environment, ...] = ENVIRONMENTS,
        credential_gate: CredentialGate | None = None,
        start_at_title: bool = False,
        session_id: str | None = None,
    ) -> None:
        if not environments:
            raise ValueError("environment catalog cannot be empty")

        self.session_id = session_id or str(uuid.uuid4())
        self._orchestrator = orchestrator
        self._evaluator = evaluator
        self._environments = environments
        self._wheel = wheel or WheelSelector(len(environments))
        if self._wheel.sector_count != len(environments):
            self._wheel.resize(len(environments))
        self._tracker = tracker or SelectionTracker()
        self._gate = credential_gate
        self.entry_step = GameStep.TITLE if start_at_title else GameStep.ENVIRONMENT
        self.state = SessionState(step=self.entry_step, selection=self._tracker.state)
        self._log = logging.LoggerAdapter(logger, {"session_id": self.session_id})

    # -- read-only views ---------------------------------------------------

    @property
    def step(self) -> GameStep:
        return self.state.step

    @property
    def selection(self) -> SelectionState:
        return self.state.selection

    @property
    def wheel(self) -> WheelSelector:
        return self._wheel

    @property
    def spinning(self) -> bool:
        return self._wheel.spinning

    @property
    def can_confirm_environment(self) -> bool:
        return (
            self.state.step == GameStep.ENVIRONMENT
            and self.selection.environment is not None
            and not self.spinning
        )

    @property
    def can_generate(self) -> bool:
        return (
            self.state.step == GameStep.TRAITS
            and self.selection.environment is not None
            and len(self.selection.traits) >= MIN_TRAITS
            and self.state.pending is None
        )

    @property
    def can_evaluate(self) -> bool:
        if self.state.pending is not None or self.selection.environment is None:
            return False
        if not self.selection.traits:
            return False
        if self.state.step == GameStep.RESULT:
            return True
        return self.state.step == GameStep.EVALUATION and self.state.report is None

    # -- title / environment -----------------------------------------------

    def begin(self) -> bool:
        """Leave the title screen."""
        if self.state.step != GameStep.TITLE:
            return self._refuse("begin", "not on the title step")
        self.state.step = GameStep.ENVIRONMENT
        self._log.info("Session started")
        return True

    async def spin(self) -> Environment | None:
        """Spin the habitat wheel and record where it settles.

        Returns:
            The settled environment, or None if the spin was refused or its
            result arrived after a restart.
        """
        if self.state.step != GameStep.ENVIRONMENT:
            self._refuse("spin", f"step is {self.state.step}")
            return None
        if self.selection.environment is not None:
            self._refuse("spin", "habitat already chosen")
            return None

        epoch = self.state.epoch
        index = await self._wheel.spin()
        if index is None:
            self._refuse("spin", "wheel already spinning")
            return None
        if epoch != self.state.epoch:
            self._log.info("Discarding wheel result from before restart")
            return None

        environment = self._environments[index]
        self.selection.environment = environment
        self._log.info("Habitat selected: %s", environment.name)
        return environment

    def confirm_environment(self) -> bool:
        """Move from the wheel to trait selection."""
        if not self.can_confirm_environment:
            return self._refuse("confirm_environment", "no settled habitat")
        self.state.step = GameStep.TRAITS
        return True

    # -- traits ------------------------------------------------------------

    def toggle_trait(self, trait: Trait) -> bool:
        """Toggle a trait in the selection.

        Returns:
            True if the trait is selected afterwards.
        """
        if self.state.step != GameStep.TRAITS:
            self._refuse("toggle_trait", f"step is {self.state.step}")
            return self._tracker.is_selected(trait.id)
        return self._tracker.toggle_trait(trait)

    def toggle_trait_id(self, trait_id: int) -> bool:
        """Toggle a catalog trait or an already-selected custom trait by id.

        Raises:
            KeyError: If no such trait exists.
        """
        trait = next((t for t in self.selection.traits if t.id == trait_id), None)
        if trait is None:
            trait = next((t for t in self._tracker.catalog if t.id == trait_id), None)
        if trait is None:
            raise KeyError(trait_id)
        return self.toggle_trait(trait)

    def add_custom_trait(
        self,
        name: str,
        description: str | None = None,
        category: TraitCategory | str | None = None,
    ) -> Trait | None:
        if self.state.step != GameStep.TRAITS:
            self._refuse("add_custom_trait", f"step is {self.state.step}")
            return None
        return self._tracker.add_custom_trait(name, description, category)

    def set_category_filter(self, category: str) -> str:
        """Change the category filter.

        Returns:
            The active category afterwards; unchanged when refused.

        Raises:
            ValueError: If the category is unknown.
        """
        if self.state.step != GameStep.TRAITS:
            self._refuse("set_category_filter", f"step is {self.state.step}")
            return self.selection.category
        return self._tracker.set_category_filter(category)

    def filtered_traits(self) -> list[Trait]:
        if self.state.step != GameStep.TRAITS:
            self._refuse("filtered_traits", f"step is {self.state.step}")
            return []
        return self._tracker.filtered_traits()

    # -- generation --------------------------------------------------------

    async def generate(self) -> bool:
        """Run the generation cycle and move to the result step.

        On key gating the session returns to the traits step with
        ``key_prompt`` set and is otherwise unchanged.

        Returns:
            True if the result step was reached.
        """
        if not self.can_generate:
            return self._refuse(
                "generate",
                f"need {MIN_TRAITS} traits and a habitat, have "
                f"{len(self.selection.traits)} traits",
            )

        environment, traits = self._selection_snapshot()
        epoch = self.state.epoch

        self.state.step = GameStep.GENERATION
        self.state.pending = "generate"
        self._log.info("Generation started")

        try:
            result = await self._orchestrator.generate(environment, traits)
        except KeyRequiredError as e:
            if epoch != self.state.epoch:
                return False
            self.state.pending = None
            self.state.step = GameStep.TRAITS
            self.state.key_prompt = True
            self._log.info("Generation needs key selection (%s)", e.source)
            return False
        except BaseException:
            if epoch == self.state.epoch:
                self.state.pending = None
                self.state.step = GameStep.TRAITS
            raise

        if epoch != self.state.epoch:
            self._log.info("Discarding generation result from before restart")
            return False

        self.state.pending = None
        self.state.generation = result
        self.state.report = None
        self.state.evaluation_failed = False
        self.state.step = GameStep.RESULT
        self._log.info("Generation finished (degraded=%s)", result.degraded)
        return True

    async def select_key(self) -> bool:
        """Let the player pick a key, then retry generation.

        Returns:
            True if the retried generation reached the result step.
        """
        if self._gate is not None:
            await self._gate.open_key_selector()
        self.state.key_prompt = False
        return await self.generate()

    def dismiss_key_prompt(self) -> None:
        """Close the key prompt without selecting a key."""
        self.state.key_prompt = False

    # -- evaluation --------------------------------------------------------

    async def evaluate(self) -> bool:
        """Request the viability report.

        The step becomes ``evaluation`` immediately and stays there whatever
        the outcome; on failure ``report`` is None and ``evaluation_failed``
        is set, and calling again retries.

        Returns:
            True if a report was stored.
        """
        if not self.can_evaluate:
            return self._refuse("evaluate", f"step is {self.state.step}")

        environment, traits = self._selection_snapshot()
        epoch = self.state.epoch

        self.state.step = GameStep.EVALUATION
        self.state.pending = "evaluate"
        self.state.evaluation_failed = False

        try:
            report = await self._evaluator.evaluate(environment, traits)
        finally:
            if epoch == self.state.epoch:
                self.state.pending = None

        if epoch != self.state.epoch:
            self._log.info("Discarding viability report from before restart")
            return False

        self.state.report = report
        self.state.evaluation_failed = report is None
        return report is not None

    # -- navigation --------------------------------------------------------

    def modify_traits(self) -> bool:
        """Go back to trait selection, keeping habitat and traits."""
        if self.state.step not in (GameStep.RESULT, GameStep.EVALUATION):
            return self._refuse("modify_traits", f"step is {self.state.step}")
        if self.state.pending is not None:
            return self._refuse("modify_traits", f"{self.state.pending} in flight")
        self.state.generation = None
        self.state.report = None
        self.state.evaluation_failed = False
        self.state.step = GameStep.TRAITS
        return True

    def restart(self) -> None:
        """Reset the whole session to the entry step."""
        self.selection.clear()
        self.state.generation = None
        self.state.report = None
        self.state.key_prompt = False
        self.state.evaluation_failed = False
        self.state.pending = None
        self.state.epoch += 1
        self.state.step = self.entry_step
        self._log.info("Session restarted")

    # -- helpers -----------------------------------------------------------

    def _selection_snapshot(self) -> tuple[Environment, list[Trait]]:
        environment = self.selection.environment
        if environment is None:
            raise GameError("no habitat selected")
        return environment, list(self.selection.traits)

    def _refuse(self, action: str, reason: str) -> bool:
        self._log.warning("Refused %s: %s", action, reason)
        return False

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of the session for serialization."""
        selection = self.selection
        return {
            "session_id": self.session_id,
            "step": self.state.step.value,
            "spinning": self.spinning,
            "rotation": self._wheel.rotation,
            "environment": selection.environment,
            "traits": list(selection.traits),
            "category": selection.category,
            "generation": self.state.generation,
            "report": self.state.report,
            "key_prompt": self.state.key_prompt,
            "evaluation_failed": self.state.evaluation_failed,
            "pending": self.state.pending,
            "can_confirm_environment": self.can_confirm_environment,
            "can_generate": self.can_generate,
            "can_evaluate": self.can_evaluate,
        }
