"""Per-possession rates from team traits.

The match engine and the read-only team profile both go through the proxy
functions below, so a profile preview always shows the numbers the engine
would use for that lineup.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .models import Lineup, check_mode
from .rng import Mulberry32
from .traits import TeamTraits, team_traits
from .util import clamp, round_half_up

BASE_P2 = 0.46
BASE_P3 = 0.33

PACE_MIN = 56
PACE_MAX = 90

# -----------------------------
# Proxies shared by the engine and the profile view
# -----------------------------

def offense_proxy(t: TeamTraits) -> float:
    return t.scoring * 0.55 + t.playmaking * 1.15 + t.rebounding * 0.10


def defense_proxy(t: TeamTraits) -> float:
    return t.rebounding * 0.70 + t.size * 10 + t.consistency * 6


def turnover_rate(t: TeamTraits) -> float:
    return clamp(0.22 - t.playmaking * 0.006 - (t.consistency - 0.6) * 0.10, 0.10, 0.30)


def oreb_rate(t: TeamTraits, opp_rebounding: float = 0.0) -> float:
    return clamp(0.24 + t.rebounding * 0.003 - opp_rebounding * 0.0015, 0.14, 0.42)


def three_rate(t: TeamTraits) -> float:
    return clamp(0.30 + t.style.threes * 0.10 + t.playmaking * 0.004, 0.18, 0.50)


def shooting_swing(off: float, opp_def: float) -> float:
    return clamp((off - opp_def) / 120, -0.08, 0.10)


def balance_bonus(t: TeamTraits) -> float:
    """Up to +10% for teams that score, pass and rebound all at once."""
    s = clamp((t.scoring - 55) / 25, 0, 1)
    p = clamp((t.playmaking - 8) / 10, 0, 1)
    r = clamp((t.rebounding - 18) / 18, 0, 1)
    return min(s, p, r) * 0.10


def baseline_weirdness(t: TeamTraits) -> float:
    return (1 - t.consistency) * 0.06


def make_probabilities(swing: float, bonus: float, weird: float) -> Tuple[float, float]:
    p2 = clamp(BASE_P2 + swing + bonus - weird, 0.32, 0.62)
    p3 = clamp(BASE_P3 + swing + bonus - weird, 0.22, 0.48)
    return p2, p3


def matchup_base_pace(a: TeamTraits, b: TeamTraits) -> float:
    return 66 + (a.style.pace + b.style.pace) * 4


def solo_pace(t: TeamTraits) -> int:
    return round_half_up(clamp(66 + t.style.pace * 6, PACE_MIN, PACE_MAX))


def draw_pace(rng: Mulberry32, a: TeamTraits, b: TeamTraits) -> int:
    """Possessions per team for regulation; an occasional track meet adds 10."""
    chaos = 10 if rng.random() < 0.12 else 0
    return round_half_up(clamp(matchup_base_pace(a, b) + rng.gaussianish() * 6 + chaos, PACE_MIN, PACE_MAX))


# -----------------------------
# Engine rates
# -----------------------------

@dataclass(frozen=True)
class SideRates:
    off: float
    defense: float
    to_rate: float
    oreb_rate: float
    three_rate: float
    p2: float
    p3: float
    active: bool = True  # False when the lineup has nobody in it

    def to_dict(self) -> Dict[str, float]:
        return {
            "off": self.off,
            "def": self.defense,
            "toRate": self.to_rate,
            "orebRate": self.oreb_rate,
            "threeRate": self.three_rate,
            "p2": self.p2,
            "p3": self.p3,
        }


@dataclass(frozen=True)
class MatchRates:
    a: SideRates
    b: SideRates

    def side(self, side: str) -> SideRates:
        return self.a if side == "A" else self.b


def sim_rates(rng: Mulberry32, a: TeamTraits, b: TeamTraits) -> MatchRates:
    """Rates for one stretch of play. Draws one "weird night" roll per side, A first."""
    off_a, off_b = offense_proxy(a), offense_proxy(b)
    def_a, def_b = defense_proxy(a), defense_proxy(b)

    weird_a = baseline_weirdness(a) + (0.06 if rng.random() < 0.10 else 0)
    weird_b = baseline_weirdness(b) + (0.06 if rng.random() < 0.10 else 0)

    p2a, p3a = make_probabilities(shooting_swing(off_a, def_b), balance_bonus(a), weird_a)
    p2b, p3b = make_probabilities(shooting_swing(off_b, def_a), balance_bonus(b), weird_b)

    return MatchRates(
        a=SideRates(
            off=off_a,
            defense=def_a,
            to_rate=turnover_rate(a),
            oreb_rate=oreb_rate(a, b.rebounding),
            three_rate=three_rate(a),
            p2=p2a,
            p3=p3a,
            active=a.players > 0,
        ),
        b=SideRates(
            off=off_b,
            defense=def_b,
            to_rate=turnover_rate(b),
            oreb_rate=oreb_rate(b, a.rebounding),
            three_rate=three_rate(b),
            p2=p2b,
            p3=p3b,
            active=b.players > 0,
        ),
    )


# -----------------------------
# Identity tags & profile view
# -----------------------------

def _tag_level(x: float, ranges: List[Tuple[float, str]]) -> str:
    for threshold, label in ranges:
        if x >= threshold:
            return label
    return ranges[-1][1]


def identity_tags(pace: float, to_rate: float, oreb: float, threes: float) -> List[str]:
    if pace >= 78:
        pace_tag = "Track meet"
    elif pace <= 62:
        pace_tag = "Rock fight"
    elif pace >= 72:
        pace_tag = "Fast"
    else:
        pace_tag = "Normal"

    three_tag = _tag_level(threes, [(0.44, "Bombs away"), (0.36, "3s heavy"), (0.28, "Balanced"), (0.0, "Paint first")])
    glass_tag = _tag_level(oreb, [(0.34, "Owns the glass"), (0.27, "Crashes"), (0.22, "Fine"), (0.0, "One and done")])
    security_tag = _tag_level(1 - to_rate, [(0.84, "Ball security"), (0.78, "Steady"), (0.72, "Loose"), (0.0, "Turnover vibes")])

    return [pace_tag, three_tag, glass_tag, security_tag]


@dataclass(frozen=True)
class TeamProfile:
    mode: str
    traits: TeamTraits
    pace: int
    off: float
    defense: float
    to_rate: float
    oreb_rate: float
    three_rate: float
    p2: float
    p3: float
    chips: List[str]

    def to_dict(self) -> Dict:
        return {
            "mode": self.mode,
            "traits": self.traits.to_dict(),
            "pace": self.pace,
            "off": self.off,
            "def": self.defense,
            "toRate": self.to_rate,
            "orebRate": self.oreb_rate,
            "threeRate": self.three_rate,
            "p2": self.p2,
            "p3": self.p3,
            "chips": list(self.chips),
        }


def quick_team_profile(lineup: Lineup, mode: str, opponent: Optional[TeamTraits] = None) -> TeamProfile:
    """Preview of a lineup's tendencies without simulating.

    With no opponent the lineup is measured against a mirror of itself, and
    shooting uses the expected weird-night penalty instead of a random roll.
    """
    check_mode(mode)
    t = team_traits(lineup)
    opp = opponent if opponent is not None else t

    off = offense_proxy(t)
    defense = defense_proxy(t)
    expected_weird = baseline_weirdness(t) + 0.10 * 0.06
    p2, p3 = make_probabilities(shooting_swing(off, defense_proxy(opp)), balance_bonus(t), expected_weird)

    pace = solo_pace(t)
    to = turnover_rate(t)
    oreb = oreb_rate(t, opp.rebounding if opponent is not None else 0.0)
    threes = three_rate(t)

    return TeamProfile(
        mode=mode,
        traits=t,
        pace=pace,
        off=off,
        defense=defense,
        to_rate=to,
        oreb_rate=oreb,
        three_rate=threes,
        p2=p2,
        p3=p3,
        chips=identity_tags(pace, to, oreb, threes),
    )
