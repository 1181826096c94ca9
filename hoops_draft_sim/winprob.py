"""Live win probability for side A from a possession log.

Normal approximation: current margin plus the expected margin over the
remaining possessions, divided by a spread that grows with the square root of
possessions left.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .engine import PossessionEvent
from .rates import MatchRates, SideRates
from .util import clamp

SD_PER_POSSESSION = 1.85
WP_FLOOR = 0.01
WP_CEIL = 0.99


@dataclass(frozen=True)
class WinProbPoint:
    t: str
    a: int
    b: int
    wp_a: float

    def to_dict(self) -> Dict:
        return {"t": self.t, "a": self.a, "b": self.b, "wpA": self.wp_a}


def erf_approx(x: float) -> float:
    """Abramowitz & Stegun 7.1.26."""
    sign = -1.0 if x < 0 else 1.0
    a1 = 0.254829592
    a2 = -0.284496736
    a3 = 1.421413741
    a4 = -1.453152027
    a5 = 1.061405429
    p = 0.3275911

    ax = abs(x)
    t = 1 / (1 + p * ax)
    y = 1 - (((((a5 * t + a4) * t + a3) * t + a2) * t + a1) * t) * math.exp(-ax * ax)
    return sign * y


def phi(z: float) -> float:
    return 0.5 * (1 + erf_approx(z / math.sqrt(2)))


def expected_points_per_possession(r: SideRates) -> float:
    if not r.active:
        return 0.0
    shot_ev = (1 - r.three_rate) * (2 * r.p2) + r.three_rate * (3 * r.p3)
    second_chance = 1 + r.oreb_rate * 0.22
    return (1 - r.to_rate) * shot_ev * second_chance


def win_prob_timeline(log: Sequence[PossessionEvent], total_possessions: int, rates: MatchRates) -> List[WinProbPoint]:
    """One point per event. Possession i belongs to A when i is even."""
    epp_a = expected_points_per_possession(rates.a)
    epp_b = expected_points_per_possession(rates.b)

    out: List[WinProbPoint] = []
    for i, ev in enumerate(log):
        remaining = max(0, total_possessions - (i + 1))
        next_is_a = (i + 1) % 2 == 0
        rem_a = (remaining + (1 if next_is_a else 0)) // 2
        rem_b = remaining - rem_a

        diff_now = ev.a - ev.b
        exp_rem = epp_a * rem_a - epp_b * rem_b
        sd = SD_PER_POSSESSION * math.sqrt(max(1, rem_a + rem_b))
        wp = clamp(phi((diff_now + exp_rem) / sd), WP_FLOOR, WP_CEIL)
        out.append(WinProbPoint(t=ev.t, a=ev.a, b=ev.b, wp_a=wp))
    return out
