"""In-memory registry of game sessions.

Each session owns its own provider client so that a key selected by one
player never leaks into another player's session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from evoroulette.game.config import GameConfig, get_game_config
from evoroulette.game.controller import GameController
from evoroulette.game.evaluator import ViabilityEvaluator
from evoroulette.game.orchestrator import GenerationOrchestrator
from evoroulette.game.wheel import SleepFn, WheelSelector
from evoroulette.generation.client import GenerativeClient
from evoroulette.generation.config import GenerationConfig, get_generation_config
from evoroulette.generation.credential_gate import SessionKeySelector
from evoroulette.generation.providers import create_client
from evoroulette.model.catalog import ENVIRONMENTS

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], GenerativeClient]


@dataclass
class StoredSession:
    """A controller plus the key selector that feeds its client.

    The selector always receives keys for the session. It also acts as the
    up-front credential gate only when key selection is required.
    """

    controller: GameController
    key_selector: SessionKeySelector


class SessionStore:
    """Creates, holds and discards game sessions.

    Nothing is persisted; sessions disappear when the process exits.

    Example:
        >>> store = SessionStore()
        >>> session = store.create()
        >>> store.get(session.controller.session_id) is session
        True
    """

    def __init__(
        self,
        generation_config: GenerationConfig | None = None,
        game_config: GameConfig | None = None,
        client_factory: ClientFactory | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        self._generation_config = generation_config
        self._game_config = game_config or get_game_config()
        self._client_factory = client_factory or self._default_client
        self._sleep = sleep
        self._sessions: dict[str, StoredSession] = {}

    def _default_client(self) -> GenerativeClient:
        return create_client(self._generation_config or get_generation_config())

    @property
    def game_config(self) -> GameConfig:
        return self._game_config

    def create(self) -> StoredSession:
        """Build a new session from configuration."""
        config = self._game_config
        client = self._client_factory()
        key_selector = SessionKeySelector(client)
        gate = key_selector if config.require_key_selection else None

        wheel = WheelSelector(
            len(ENVIRONMENTS),
            settle_delay=config.wheel_settle_seconds,
            sleep=self._sleep,
            min_revolutions=config.wheel_min_revolutions,
            max_revolutions=config.wheel_max_revolutions,
        )
        controller = GameController(
            orchestrator=GenerationOrchestrator(client, credential_gate=gate),
            evaluator=ViabilityEvaluator(client),
            wheel=wheel,
            credential_gate=gate,
            start_at_title=config.start_at_title,
        )
        session = StoredSession(controller=controller, key_selector=key_selector)
        self._sessions[controller.session_id] = session
        logger.info("Created session %s (%d active)", controller.session_id, len(self._sessions))
        return session

    def get(self, session_id: str) -> StoredSession | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        """Discard a session.

        Returns:
            True if the session existed.
        """
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Deleted session %s", session_id)
        return removed is not None

    def __len__(self) -> int:
        return len(self._sessions)


_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the global session store."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store


def set_session_store(store: SessionStore | None) -> None:
    """Replace the global session store (None resets it)."""
    global _store
    _store = store
