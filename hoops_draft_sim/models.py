"""Input models: player-season snapshots, lineups and drafted teams.

These arrive as JSON from the roster scrape and the drafts store, so they are
validated pydantic models. Everything the simulator derives from them is a
plain dataclass living in the module that computes it.
"""
from __future__ import annotations

import math
from typing import Any, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SimulationInputError

DraftMode = Literal["top", "sicko"]
MODES: Tuple[str, ...] = ("top", "sicko")

SLOTS: Tuple[str, ...] = ("PG", "SG", "SF", "PF", "C")


def position_bucket(pos: Optional[str]) -> str:
    """Bucket a free-text position into G, F, C or U (guard checked first)."""
    p = (pos or "").upper()
    if "G" in p:
        return "G"
    if "F" in p:
        return "F"
    if "C" in p:
        return "C"
    return "U"


class PlayerSeasonSnapshot(BaseModel):
    """One player's season line. Per-game stats; ``minutes`` is minutes per game."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    player: str = Field(..., min_length=1)
    year: int
    pos: Optional[str] = None
    games: Optional[float] = Field(default=None, ge=0)
    minutes: Optional[float] = Field(default=None, ge=0)
    pts: Optional[float] = Field(default=None, ge=0)
    trb: Optional[float] = Field(default=None, ge=0)
    ast: Optional[float] = Field(default=None, ge=0)
    player_url: Optional[str] = None

    @field_validator("games", "minutes", "pts", "trb", "ast")
    @classmethod
    def finite_stat(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not math.isfinite(v):
            raise ValueError("stat must be finite")
        return v

    @property
    def bucket(self) -> str:
        return position_bucket(self.pos)

    @property
    def is_guard(self) -> bool:
        return "G" in (self.pos or "")

    @property
    def is_forward(self) -> bool:
        return "F" in (self.pos or "")

    @property
    def is_center(self) -> bool:
        return "C" in (self.pos or "")


class Lineup(BaseModel):
    """Five named slots, each optionally filled."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pg: Optional[PlayerSeasonSnapshot] = None
    sg: Optional[PlayerSeasonSnapshot] = None
    sf: Optional[PlayerSeasonSnapshot] = None
    pf: Optional[PlayerSeasonSnapshot] = None
    c: Optional[PlayerSeasonSnapshot] = None

    def slots(self) -> Iterator[Tuple[str, Optional[PlayerSeasonSnapshot]]]:
        for slot in SLOTS:
            yield slot, getattr(self, slot.lower())

    def filled(self) -> List[Tuple[str, PlayerSeasonSnapshot]]:
        return [(slot, p) for slot, p in self.slots() if p is not None]

    def players(self) -> List[PlayerSeasonSnapshot]:
        return [p for _, p in self.filled()]

    @property
    def has_big(self) -> bool:
        return self.c is not None or self.pf is not None

    @property
    def is_empty(self) -> bool:
        return not self.filled()


class TeamEntry(BaseModel):
    """A drafted team as stored: opaque id, display name and lineup."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    lineup: Lineup


def coerce_team(obj: Union[TeamEntry, dict, Any]) -> TeamEntry:
    """Accept a TeamEntry or a JSON-shaped mapping; reject anything else."""
    if isinstance(obj, TeamEntry):
        return obj
    try:
        return TeamEntry.model_validate(obj)
    except ValidationError as e:
        raise SimulationInputError(f"malformed team: {e}") from e


def coerce_lineup(obj: Union[Lineup, dict, Any]) -> Lineup:
    if isinstance(obj, Lineup):
        return obj
    try:
        return Lineup.model_validate(obj)
    except ValidationError as e:
        raise SimulationInputError(f"malformed lineup: {e}") from e


def check_mode(mode: Any) -> str:
    if mode not in MODES:
        raise SimulationInputError(f"mode must be one of {MODES}, got {mode!r}")
    return mode


def check_seed(seed: Any) -> int:
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise SimulationInputError(f"seed must be an integer, got {seed!r}")
    return seed
