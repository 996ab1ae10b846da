"""Exceptions raised by the game layer."""


class GameError(Exception):
    """Base exception for game session errors."""

    pass


class KeyRequiredError(GameError):
    """Generation needs an explicitly selected paid-tier key.

    Raised before any provider call when the credential gate reports no key,
    or after the join when a branch failed with a credential-tier error.
    The same ``generate`` call can be retried once a key is selected.

    Attributes:
        source: ``"gate"`` for the up-front check, otherwise the branch name.
    """

    def __init__(self, source: str, message: str | None = None) -> None:
        self.source = source
        super().__init__(message or f"A paid-tier API key is required ({source})")
