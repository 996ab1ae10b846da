"""Environment dataclass: a habitat archetype the wheel can land on."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Environment:
    """A habitat archetype with fixed selective pressures.

    ``accent`` and ``bg_gradient`` are presentation hints for the front end
    and play no part in game logic.
    """

    id: str
    name: str
    climate: str
    temperature: str
    resources: str
    challenges: str
    accent: str = "#ffffff"
    bg_gradient: str = "from-slate-900 to-black"

    def describe(self) -> str:
        """One-line summary used when building generation prompts."""
        return f"{self.name} ({self.climate}; {self.temperature})"
