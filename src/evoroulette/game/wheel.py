"""Habitat wheel: turns a random spin into a catalog index."""

from __future__ import annotations

import asyncio
import logging
import math
import random
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

FULL_CIRCLE = 360.0

SleepFn = Callable[[float], Awaitable[object]]


def resolve_index(rotation: float, sector_count: int) -> int:
    """Map a cumulative wheel rotation to the sector under the pointer.

    The wheel turns clockwise under a fixed pointer, so the resting angle is
    the inverse of the rotation wrapped into [0, 360).

    Args:
        rotation: Cumulative rotation in degrees.
        sector_count: Number of equal sectors on the wheel.

    Returns:
        Index in [0, sector_count - 1].

    Raises:
        ValueError: If sector_count is less than 1.
    """
    if sector_count < 1:
        raise ValueError(f"sector_count must be at least 1, got {sector_count}")

    resting = (FULL_CIRCLE - rotation % FULL_CIRCLE) % FULL_CIRCLE
    sector_width = FULL_CIRCLE / sector_count
    index = math.floor(resting / sector_width)
    # Float rounding can land exactly on the upper bound
    return min(max(index, 0), sector_count - 1)


class WheelSelector:
    """Spinning wheel with a settle delay and a single-spin guard.

    Randomness and the delay are injected so tests can pin the outcome and
    settle instantly.

    Example:
        >>> wheel = WheelSelector(len(ENVIRONMENTS), rng=random.Random(7), settle_delay=0)
        >>> index = await wheel.spin()
    """

    def __init__(
        self,
        sector_count: int,
        rng: random.Random | None = None,
        settle_delay: float = 4.0,
        sleep: SleepFn | None = None,
        min_revolutions: float = 5.0,
        max_revolutions: float = 10.0,
    ) -> None:
        if sector_count < 1:
            raise ValueError(f"sector_count must be at least 1, got {sector_count}")
        self._sector_count = sector_count
        self._rng = rng or random.Random()
        self._settle_delay = settle_delay
        self._sleep: SleepFn = sleep or asyncio.sleep
        self._min_revolutions = min_revolutions
        self._max_revolutions = max_revolutions

        self.rotation = 0.0
        self.spinning = False
        self.last_index: int | None = None

    @property
    def sector_count(self) -> int:
        return self._sector_count

    @property
    def sector_width(self) -> float:
        return FULL_CIRCLE / self._sector_count

    def resize(self, sector_count: int) -> None:
        """Change the number of sectors; any previously settled index is forgotten."""
        if sector_count < 1:
            raise ValueError(f"sector_count must be at least 1, got {sector_count}")
        self._sector_count = sector_count
        self.last_index = None

    def draw_rotation(self) -> float:
        """Draw whole turns plus an offset within one turn, in degrees."""
        turns = self._rng.uniform(self._min_revolutions, self._max_revolutions)
        offset = self._rng.random() * FULL_CIRCLE
        return turns * FULL_CIRCLE + offset

    async def spin(self) -> int | None:
        """Spin the wheel and wait for it to settle.

        Returns:
            The settled sector index, or None if a spin was already in progress.
        """
        if self.spinning:
            logger.debug("Spin ignored: wheel already spinning")
            return None

        self.spinning = True
        try:
            self.rotation += self.draw_rotation()
            logger.debug("Wheel spinning to %.1f degrees", self.rotation)
            await self._sleep(self._settle_delay)
            self.last_index = resolve_index(self.rotation, self._sector_count)
        finally:
            self.spinning = False

        logger.info("Wheel settled on sector %d of %d", self.last_index, self._sector_count)
        return self.last_index
