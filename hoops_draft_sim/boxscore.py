"""Team totals → five player lines.

Points, rebounds and assists are split across the filled slots in proportion
to season per-game weights, with noise, then corrected one unit at a time so
each column sums exactly to its team total. Minutes, turnovers, steals,
blocks and fouls come from per-player heuristics and have no team total.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List

from .models import Lineup, PlayerSeasonSnapshot
from .rng import Mulberry32
from .traits import consistency
from .util import clamp, nvl, round_half_up

FULL_GAME_MINUTES = 40


@dataclass(frozen=True)
class BoxPlayerLine:
    slot: str
    player: str
    pts: int
    reb: int
    ast: int
    min: int
    tov: int
    stl: int
    blk: int
    pf: int

    def to_dict(self) -> Dict:
        return {
            "slot": self.slot,
            "player": self.player,
            "pts": self.pts,
            "reb": self.reb,
            "ast": self.ast,
            "min": self.min,
            "tov": self.tov,
            "stl": self.stl,
            "blk": self.blk,
            "pf": self.pf,
        }


@dataclass
class TeamBox:
    lines: List[BoxPlayerLine] = field(default_factory=list)
    pts: int = 0
    reb: int = 0
    ast: int = 0

    def merged(self, other: "TeamBox", minutes: int = 5) -> "TeamBox":
        return TeamBox(
            lines=add_box(self.lines, other.lines, minutes),
            pts=self.pts + other.pts,
            reb=self.reb + other.reb,
            ast=self.ast + other.ast,
        )


def allocate_stat_total(weights: List[float], total: int, rng: Mulberry32) -> List[int]:
    """Noisy proportional split whose integer parts sum exactly to ``total``."""
    if not weights:
        return []
    wsum = sum(weights) or 1
    out = [max(0, round_half_up((w / wsum) * total + rng.gaussianish() * 1.2)) for w in weights]

    diff = total - sum(out)
    while diff != 0:
        idx = rng.index(len(out))
        if diff > 0:
            out[idx] += 1
            diff -= 1
        elif out[idx] > 0:
            out[idx] -= 1
            diff += 1
    return out


def scoring_weight(p: PlayerSeasonSnapshot) -> float:
    return max(1.0, nvl(p.pts) * 1.2 + nvl(p.minutes) * 0.35)


def rebound_weight(p: PlayerSeasonSnapshot) -> float:
    return max(1.0, nvl(p.trb) * 1.1 + (2 if p.is_center else 0))


def assist_weight(p: PlayerSeasonSnapshot) -> float:
    return max(1.0, nvl(p.ast) * 1.4 + (1 if p.is_guard else 0))


def build_box(lineup: Lineup, team_pts: int, rng: Mulberry32, minutes: int = FULL_GAME_MINUTES) -> TeamBox:
    """Box score for one stretch of ``minutes`` in which the team scored ``team_pts``."""
    filled = lineup.filled()
    if not filled:
        return TeamBox()

    s = minutes / FULL_GAME_MINUTES
    team_reb = round_half_up(clamp(26 * s + team_pts * 0.18 + rng.gaussianish() * 3 * s, 18 * s, 48 * s))
    team_ast = round_half_up(clamp(10 * s + team_pts * 0.12 + rng.gaussianish() * 2 * s, 5 * s, 28 * s))

    players = [p for _, p in filled]
    pts = allocate_stat_total([scoring_weight(p) for p in players], team_pts, rng)
    reb = allocate_stat_total([rebound_weight(p) for p in players], team_reb, rng)
    ast = allocate_stat_total([assist_weight(p) for p in players], team_ast, rng)

    lines = []
    for i, (slot, p) in enumerate(filled):
        mins = round_half_up(clamp(nvl(p.minutes) + rng.gaussianish() * 4, 10, 40))
        cons = consistency(p)

        # ball handlers and heavy minutes carry more risk; consistency lowers it
        minute_factor = clamp((mins - 18) / 18, 0, 1)
        tov_base = (2.0 if p.is_guard else 1.2) + minute_factor * (1.6 if p.is_guard else 0.8)
        tov = clamp(tov_base - cons * 1.6 + rng.gaussianish() * 1.0, 0, 7)

        stl = clamp((1.4 if p.is_guard else 0.7) + rng.gaussianish() * 0.8, 0, 4)
        blk_base = 1.6 if p.is_center else 0.8 if p.is_forward else 0.3
        blk = clamp(blk_base + rng.gaussianish() * 0.7, 0, 4)
        fouls = clamp(2.2 + rng.gaussianish() * 1.1, 0, 5)

        lines.append(
            BoxPlayerLine(
                slot=slot,
                player=p.player,
                pts=pts[i],
                reb=reb[i],
                ast=ast[i],
                min=round_half_up(mins * s),
                tov=round_half_up(tov * s),
                stl=round_half_up(stl * s),
                blk=round_half_up(blk * s),
                pf=round_half_up(fouls * s),
            )
        )

    return TeamBox(lines=lines, pts=team_pts, reb=team_reb, ast=team_ast)


def add_box(base: List[BoxPlayerLine], extra: List[BoxPlayerLine], minutes: int = 5) -> List[BoxPlayerLine]:
    """Fold an extra stretch onto a box (same slot order). Minutes bump by the stretch length."""
    merged = []
    for i, x in enumerate(base):
        y = extra[i] if i < len(extra) else None
        if y is None:
            merged.append(x)
            continue
        merged.append(
            replace(
                x,
                pts=x.pts + y.pts,
                reb=x.reb + y.reb,
                ast=x.ast + y.ast,
                tov=x.tov + y.tov,
                stl=x.stl + y.stl,
                blk=x.blk + y.blk,
                pf=x.pf + y.pf,
                min=int(clamp(x.min + minutes, 10, 45)),
            )
        )
    return merged
