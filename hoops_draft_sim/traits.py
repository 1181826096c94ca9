"""Lineup → aggregate team tendencies."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict

from .models import Lineup, PlayerSeasonSnapshot
from .util import clamp, nvl


@dataclass(frozen=True)
class TeamStyle:
    pace: float = 0.0      # -1..+1
    threes: float = 0.0    # -1..+1
    physical: float = 0.0  # 0..1


@dataclass(frozen=True)
class TeamTraits:
    scoring: float = 0.0     # sum PPG
    playmaking: float = 0.0  # sum APG
    rebounding: float = 0.0  # sum RPG
    consistency: float = 0.0
    size: float = 0.0
    style: TeamStyle = field(default_factory=TeamStyle)
    players: int = 0

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class TeamStrength:
    base: float
    cons: float


def consistency(p: PlayerSeasonSnapshot) -> float:
    """Reliability from games played and minutes per game, in [0, 1]."""
    g = clamp(nvl(p.games) / 30, 0, 1)
    m = clamp(nvl(p.minutes) / 35, 0, 1)
    return 0.55 * g + 0.45 * m


def base_impact(p: PlayerSeasonSnapshot) -> float:
    return nvl(p.pts) * 1.0 + nvl(p.trb) * 0.7 + nvl(p.ast) * 0.8


def team_strength(lineup: Lineup) -> TeamStrength:
    ps = lineup.players()
    if not ps:
        return TeamStrength(base=0.0, cons=0.0)
    base = sum(base_impact(p) for p in ps)
    cons = sum(consistency(p) for p in ps) / len(ps)
    return TeamStrength(base=base, cons=cons)


def team_traits(lineup: Lineup) -> TeamTraits:
    ps = lineup.players()
    if not ps:
        return TeamTraits()

    scoring = sum(nvl(p.pts) for p in ps)
    playmaking = sum(nvl(p.ast) for p in ps)
    rebounding = sum(nvl(p.trb) for p in ps)
    cons = sum(consistency(p) for p in ps) / len(ps)

    # size: the glass plus having a true big on the floor
    size = clamp((rebounding / 40) * 0.65 + (0.35 if lineup.has_big else 0), 0, 1)

    style = TeamStyle(
        pace=clamp((playmaking - 10) / 10 + (scoring - 65) / 30, -1, 1),
        threes=clamp((playmaking - rebounding) / 20, -1, 1),
        physical=clamp((rebounding - 18) / 20, 0, 1),
    )

    return TeamTraits(
        scoring=scoring,
        playmaking=playmaking,
        rebounding=rebounding,
        consistency=clamp(cons, 0, 1),
        size=size,
        style=style,
        players=len(ps),
    )
