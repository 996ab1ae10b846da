"""Game settings loaded from the environment."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class GameConfig(BaseSettings):
    """Tunables for game sessions.

    Environment Variables:
        WHEEL_SETTLE_SECONDS: Delay between a spin and its result (default: 4.0)
        WHEEL_MIN_REVOLUTIONS: Fewest whole turns per spin (default: 5)
        WHEEL_MAX_REVOLUTIONS: Most whole turns per spin (default: 10)
        START_AT_TITLE: Open new sessions on the title step (default: false)
        REQUIRE_KEY_SELECTION: Gate generation behind a player-selected key (default: false)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    wheel_settle_seconds: float = Field(default=4.0, ge=0.0, le=60.0)
    wheel_min_revolutions: float = Field(default=5.0, ge=0.0)
    wheel_max_revolutions: float = Field(default=10.0, ge=0.0)
    start_at_title: bool = Field(default=False)
    require_key_selection: bool = Field(default=False)

    @model_validator(mode="after")
    def check_revolution_range(self) -> GameConfig:
        if self.wheel_max_revolutions < self.wheel_min_revolutions:
            raise ValueError("WHEEL_MAX_REVOLUTIONS must be >= WHEEL_MIN_REVOLUTIONS")
        return self


@lru_cache
def get_game_config() -> GameConfig:
    """Get cached game configuration singleton."""
    config = GameConfig()
    logger.info(
        "Loaded game configuration: settle=%.1fs, revolutions=%s-%s, title=%s, key_gate=%s",
        config.wheel_settle_seconds,
        config.wheel_min_revolutions,
        config.wheel_max_revolutions,
        config.start_at_title,
        config.require_key_selection,
    )
    return config
