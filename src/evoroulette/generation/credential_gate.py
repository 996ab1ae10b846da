"""Paid-tier key selection collaborator.

Some generation models are only available once the player has chosen an API
key from a billing-enabled account. The game treats key selection as an
optional, injected collaborator: when no gate is supplied, gating never
triggers proactively.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

from pydantic import SecretStr

from evoroulette.generation.client import GenerativeClient, GenerativeClientSettings

logger = logging.getLogger(__name__)


@runtime_checkable
class CredentialGate(Protocol):
    """Host capability for explicit key selection."""

    async def has_selected_key(self) -> bool:
        """Return True once a key has been selected."""
        ...

    async def open_key_selector(self) -> None:
        """Suspend until the player completes or cancels key selection."""
        ...


class SessionKeySelector:
    """In-memory key selector for one game session.

    The HTTP layer calls ``submit_key()`` or ``cancel()`` in response to the
    player; ``open_key_selector()`` returns once either has happened. A
    submitted key is applied to the session's client straight away.

    Example:
        >>> gate = SessionKeySelector(client)
        >>> gate.submit_key("sk-...")
        >>> await gate.open_key_selector()  # returns immediately
        >>> await gate.has_selected_key()
        True
    """

    def __init__(self, client: GenerativeClient | None = None) -> None:
        self._client = client
        self._key: SecretStr | None = None
        self._decided = asyncio.Event()

    async def has_selected_key(self) -> bool:
        return self._key is not None

    async def open_key_selector(self) -> None:
        logger.info("Waiting for key selection")
        await self._decided.wait()
        self._decided.clear()

    def submit_key(self, api_key: str) -> None:
        """Store the key, apply it to the client and release any waiter.

        Raises:
            ValueError: If the key is empty or whitespace only.
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty or whitespace only")
        self._key = SecretStr(api_key.strip())
        if self._client is not None:
            self._client.configure(
                GenerativeClientSettings(api_key=self._key.get_secret_value())
            )
        logger.info("API key selected")
        self._decided.set()

    def cancel(self) -> None:
        """Release any waiter without selecting a key."""
        logger.info("Key selection cancelled")
        self._decided.set()

    @property
    def selected(self) -> bool:
        return self._key is not None
