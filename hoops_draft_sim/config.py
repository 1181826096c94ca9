"""Settings for the simulator's outer layers (logging, Elo, series, roster).

Nothing here feeds the numeric game model: a seed and two lineups always
produce the same recap regardless of configuration.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ROSTER_PATH = Path(__file__).parent / "data" / "demo_roster.json"


class SimSettings(BaseSettings):
    """Environment-driven settings. Variables use the ``HOOPS_`` prefix."""

    model_config = SettingsConfigDict(
        env_prefix="HOOPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -----------------------------
    # Logging
    # -----------------------------
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="console", description="Log format: json or console")

    # -----------------------------
    # Ratings
    # -----------------------------
    ELO_K: int = Field(default=24, ge=1, description="Elo K-factor")
    ELO_DEFAULT: int = Field(default=1200, description="Rating for a lineup with no history")

    # -----------------------------
    # Series
    # -----------------------------
    SERIES_DEFAULT_GAMES: int = Field(default=10, ge=1)
    SERIES_MAX_GAMES: int = Field(default=25, ge=1)
    SERIES_SEED_STRIDE: int = Field(default=9973, ge=1)

    # -----------------------------
    # Roster
    # -----------------------------
    ROSTER_PATH: Path = Field(default=DEFAULT_ROSTER_PATH, description="Player-season JSON file")
    MIN_GAMES: int = Field(default=10, ge=0, description="Games played to count as a real season")
    MIN_MINUTES: float = Field(default=10.0, ge=0, description="Minutes per game to count as a real season")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(valid_levels)}")
        return v_upper

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be json or console")
        return v_lower


@lru_cache()
def get_settings() -> SimSettings:
    """Cached settings: environment variables, then ``.env``, then defaults."""
    return SimSettings()
