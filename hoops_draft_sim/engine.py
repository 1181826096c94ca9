"""Possession engine: alternating possessions with running score and clock.

Each possession is a small state machine:

    turnover
    | shot → three or two → made
                          | missed → offensive rebound → second chance made/missed
                                   | defensive rebound

A stretch of play (regulation, one overtime period, or a sudden-death pair)
gets fresh rates, runs ``possessions_per_team * 2`` possessions starting with
side A, and appends exactly one PossessionEvent per possession.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Tuple

from .rates import MatchRates, SideRates, sim_rates
from .rng import Mulberry32
from .traits import TeamTraits
from .util import clamp, round_half_up

REGULATION = "REG"
OVERTIME = "OT"
SUDDEN_DEATH = "SD"

REGULATION_MINUTES = 40
OVERTIME_MINUTES = 5
HALF_SECONDS = 20 * 60

SECOND_CHANCE_FACTOR = 0.92
CLOSE_GAME_MARGIN = 4
SICKO_FLOOR = 35


@dataclass(frozen=True)
class PossessionEvent:
    t: str
    side: str
    pts: int
    a: int
    b: int
    text: str
    period: str = REGULATION

    @property
    def ot(self) -> bool:
        return self.period != REGULATION

    def shifted(self, da: int, db: int) -> "PossessionEvent":
        return replace(self, a=self.a + da, b=self.b + db)

    def to_dict(self) -> Dict:
        return {"t": self.t, "text": self.text, "a": self.a, "b": self.b, "side": self.side, "pts": self.pts, "ot": self.ot}


@dataclass
class SideTally:
    pts: int = 0
    tos: int = 0
    oreb: int = 0
    made2: int = 0
    made3: int = 0


@dataclass
class StretchResult:
    rates: MatchRates
    possessions_per_team: int
    period: str
    a: SideTally = field(default_factory=SideTally)
    b: SideTally = field(default_factory=SideTally)
    log: List[PossessionEvent] = field(default_factory=list)

    @property
    def total_possessions(self) -> int:
        return self.possessions_per_team * 2


# -----------------------------
# Clock labels
# -----------------------------

def fmt_clock(sec: float) -> str:
    s = max(0, int(sec))
    return f"{s // 60}:{s % 60:02d}"


def fmt_regulation_clock(sec_left: float) -> str:
    """Two 20-minute halves."""
    reg = max(0, min(REGULATION_MINUTES * 60, int(sec_left)))
    if reg > HALF_SECONDS:
        return f"1H {fmt_clock(reg - HALF_SECONDS)}"
    return f"2H {fmt_clock(reg)}"


def clock_label(period: str, number: int, sec_left: float) -> str:
    if period == OVERTIME:
        return f"OT{number} {fmt_clock(sec_left)}"
    if period == SUDDEN_DEATH:
        return f"SD{number}"
    return fmt_regulation_clock(sec_left)


def period_minutes(period: str) -> int:
    if period == OVERTIME:
        return OVERTIME_MINUTES
    if period == SUDDEN_DEATH:
        return 0
    return REGULATION_MINUTES


# -----------------------------
# One possession
# -----------------------------

def run_possession(rng: Mulberry32, r: SideRates, tally: SideTally) -> Tuple[int, str]:
    if not r.active:
        tally.tos += 1
        return 0, "empty floor, turnover"

    if rng.random() < r.to_rate:
        tally.tos += 1
        return 0, "turnover"

    if rng.random() < r.three_rate:
        value, p, label = 3, r.p3, "3"
    else:
        value, p, label = 2, r.p2, "2"

    if rng.random() < p:
        _count_make(tally, value)
        return value, f"made {label}"

    if rng.random() < r.oreb_rate:
        tally.oreb += 1
        if rng.random() < p * SECOND_CHANCE_FACTOR:
            _count_make(tally, value)
            return value, f"OREB → made {label}"
        return 0, f"OREB → miss {label}"

    return 0, f"miss {label}"


def _count_make(tally: SideTally, value: int) -> None:
    if value == 3:
        tally.made3 += 1
    else:
        tally.made2 += 1


def _leader(a: int, b: int) -> str:
    if a == b:
        return "T"
    return "A" if a > b else "B"


# -----------------------------
# A stretch of possessions
# -----------------------------

def simulate_stretch(
    rng: Mulberry32,
    a: TeamTraits,
    b: TeamTraits,
    possessions_per_team: int,
    mode: str = "top",
    period: str = REGULATION,
    number: int = 1,
) -> StretchResult:
    """Simulate one stretch of play. Scores in the result start from 0-0."""
    rates = sim_rates(rng, a, b)
    out = StretchResult(rates=rates, possessions_per_team=possessions_per_team, period=period)

    total = out.total_possessions
    seconds = period_minutes(period) * 60

    for i in range(total):
        side = "A" if i % 2 == 0 else "B"
        tally = out.a if side == "A" else out.b
        pre_a, pre_b = out.a.pts, out.b.pts

        pts, what = run_possession(rng, rates.side(side), tally)
        tally.pts += pts

        sec_left = ((total - (i + 1)) / total) * seconds
        is_final = i == total - 1
        lead_before = _leader(pre_a, pre_b)
        lead_after = _leader(out.a.pts, out.b.pts)
        flipped = lead_before != lead_after and lead_after != "T"

        text = f"{side}: {what}"
        if is_final and pts > 0 and (flipped or lead_after == side):
            text = f"{side}: {what} (BUZZER)"
        elif flipped and pts > 0:
            text = f"{side}: {what} (lead change)"

        out.log.append(
            PossessionEvent(
                t=clock_label(period, number, sec_left),
                side=side,
                pts=pts,
                a=out.a.pts,
                b=out.b.pts,
                text=text,
                period=period,
            )
        )

    if period != SUDDEN_DEATH:
        _endgame_free_throws(rng, out)
    if period == REGULATION and mode == "sicko":
        _sicko_environment(rng, out)

    return out


def _rewrite_last(out: StretchResult, suffix: str) -> None:
    if not out.log:
        return
    last = out.log[-1]
    out.log[-1] = replace(last, a=out.a.pts, b=out.b.pts, text=f"{last.side}: {suffix}")


def _endgame_free_throws(rng: Mulberry32, out: StretchResult) -> None:
    """Close games get a one-time free-throw swing for each side."""
    if abs(out.a.pts - out.b.pts) > CLOSE_GAME_MARGIN:
        return
    swing_a = round_half_up(clamp(rng.gaussianish() * 2, -3, 3))
    swing_b = round_half_up(clamp(rng.gaussianish() * 2, -3, 3))
    if out.rates.a.active:
        out.a.pts = max(0, out.a.pts + swing_a)
    if out.rates.b.active:
        out.b.pts = max(0, out.b.pts + swing_b)
    _rewrite_last(out, "endgame FTs")


def _sicko_environment(rng: Mulberry32, out: StretchResult) -> None:
    """Uglier scoring: trim both scores 3-6%, never below the floor."""
    factor_a = 0.94 + rng.random() * 0.03
    factor_b = 0.94 + rng.random() * 0.03
    if out.rates.a.active:
        out.a.pts = max(SICKO_FLOOR, round_half_up(out.a.pts * factor_a))
    if out.rates.b.active:
        out.b.pts = max(SICKO_FLOOR, round_half_up(out.b.pts * factor_b))
    _rewrite_last(out, "sicko scoring environment")
