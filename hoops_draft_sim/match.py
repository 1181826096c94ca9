"""simulate_match: two drafted teams and a seed in, an immutable recap out.

Draw order from the single generator (changing it changes every recap):

    pace → regulation rates → regulation possessions
    → each overtime period (rates, possessions) → sudden death → tiebreak
    → box scores (regulation A, B; each overtime period A, B; sudden death A, B)
    → player of the game → scripted storyline
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .boxscore import BoxPlayerLine, TeamBox, build_box
from .engine import (
    OVERTIME,
    OVERTIME_MINUTES,
    REGULATION,
    SUDDEN_DEATH,
    PossessionEvent,
    StretchResult,
    simulate_stretch,
)
from .models import TeamEntry, check_mode, check_seed, coerce_team
from .narrative import (
    NarrativeLine,
    PlayerOfGame,
    last_possessions,
    overtime_beats,
    overtime_headline,
    player_of_game,
    scripted_storyline,
)
from .rates import SideRates, draw_pace, identity_tags
from .rng import Mulberry32
from .sim_logging import get_logger
from .traits import TeamStrength, team_strength, team_traits
from .winprob import WinProbPoint, win_prob_timeline

logger = get_logger(__name__)

MAX_OT_PERIODS = 4
OT_POSSESSIONS = 8
SUDDEN_DEATH_CAP = 25


@dataclass(frozen=True)
class TeamResult:
    id: str
    name: str
    score: int
    half1: int
    half2: int
    box: List[BoxPlayerLine]
    team_reb: int
    team_ast: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "score": self.score,
            "half1": self.half1,
            "half2": self.half2,
            "box": [x.to_dict() for x in self.box],
            "teamReb": self.team_reb,
            "teamAst": self.team_ast,
        }


@dataclass(frozen=True)
class OvertimeSummary:
    periods: int
    a: List[int]
    b: List[int]
    headline: str
    sudden_death: int = 0
    tiebreak: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "periods": self.periods,
            "a": list(self.a),
            "b": list(self.b),
            "headline": self.headline,
            "suddenDeath": self.sudden_death,
            "tiebreak": self.tiebreak,
        }


@dataclass(frozen=True)
class SideDebug:
    strength: TeamStrength
    rates: SideRates
    regulation_score: int

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"base": self.strength.base, "cons": self.strength.cons}
        out.update(self.rates.to_dict())
        out["regulationScore"] = self.regulation_score
        return out


@dataclass(frozen=True)
class MatchDebug:
    pace: int
    a: SideDebug
    b: SideDebug
    notes: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"pace": self.pace, "a": self.a.to_dict(), "b": self.b.to_dict(), "notes": list(self.notes)}


@dataclass(frozen=True)
class MatchRecap:
    seed: int
    mode: str
    a: TeamResult
    b: TeamResult
    winner_id: str
    winner: str
    player_of_game: Optional[PlayerOfGame]
    last_possessions: List[NarrativeLine]
    storyline: List[NarrativeLine]
    play_by_play: List[PossessionEvent]
    win_prob_timeline: List[WinProbPoint]
    identity: Dict[str, List[str]]
    debug: MatchDebug
    overtime: Optional[OvertimeSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape used for stored recaps."""
        out: Dict[str, Any] = {
            "seed": self.seed,
            "mode": self.mode,
            "a": self.a.to_dict(),
            "b": self.b.to_dict(),
            "winnerId": self.winner_id,
            "winnerSide": self.winner,
            "playerOfGame": self.player_of_game.to_dict() if self.player_of_game else None,
            "lastPossessions": [x.to_dict() for x in self.last_possessions],
            "storyline": [x.to_dict() for x in self.storyline],
            "playByPlay": [
                {"t": ev.t, "text": ev.text, "a": ev.a, "b": ev.b} for ev in self.play_by_play
            ],
            "winProbTimeline": [x.to_dict() for x in self.win_prob_timeline],
            "identity": {k: list(v) for k, v in self.identity.items()},
            "debug": self.debug.to_dict(),
        }
        if self.overtime is not None:
            out["overtime"] = self.overtime.to_dict()
        return out


def _halves(log: List[PossessionEvent], a_reg: int, b_reg: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """(a_half1, a_half2), (b_half1, b_half2) read off the regulation log."""
    a1 = b1 = 0
    for ev in log:
        if ev.period == REGULATION and ev.t.startswith("1H"):
            a1, b1 = ev.a, ev.b
    a1, b1 = min(a1, a_reg), min(b1, b_reg)
    return (a1, a_reg - a1), (b1, b_reg - b1)


def _decide_winner(mode: str, a_score: int, b_score: int) -> str:
    if mode == "sicko":
        return "A" if a_score < b_score else "B"
    return "A" if a_score > b_score else "B"


def _notes(mode: str) -> List[str]:
    return [
        "Possession by possession, not a single formula score.",
        "Pace is possessions per team; an occasional track meet adds ten.",
        "Each possession: turnover check, then a two or a three, make or miss, and an offensive board for a second chance.",
        "Offense leans on scoring and passing with a balance bonus; defense is mostly rebounding, size and consistency.",
        "Sicko League: lowest final score wins, in an uglier scoring environment."
        if mode == "sicko"
        else "Top League: highest final score wins.",
    ]


def simulate_match(seed: int, mode: str, team_a: Any, team_b: Any) -> MatchRecap:
    """Simulate one game. Same seed, mode and teams give the same recap."""
    seed = check_seed(seed)
    mode = check_mode(mode)
    a: TeamEntry = coerce_team(team_a)
    b: TeamEntry = coerce_team(team_b)

    rng = Mulberry32(seed)

    ta, tb = team_traits(a.lineup), team_traits(b.lineup)

    pace = draw_pace(rng, ta, tb)
    reg = simulate_stretch(rng, ta, tb, pace, mode=mode, period=REGULATION)

    a_score, b_score = reg.a.pts, reg.b.pts
    play_by_play: List[PossessionEvent] = list(reg.log)
    wp = win_prob_timeline(reg.log, reg.total_possessions, reg.rates)

    # No ties. Overtime periods first, then sudden death.
    extra: List[Tuple[StretchResult, int]] = []
    ot_a: List[int] = []
    ot_b: List[int] = []
    periods = 0
    while a_score == b_score and periods < MAX_OT_PERIODS:
        periods += 1
        ot = simulate_stretch(rng, ta, tb, OT_POSSESSIONS, mode=mode, period=OVERTIME, number=periods)
        shifted = [ev.shifted(a_score, b_score) for ev in ot.log]
        play_by_play.extend(shifted)
        wp.extend(win_prob_timeline(shifted, ot.total_possessions, ot.rates))
        a_score += ot.a.pts
        b_score += ot.b.pts
        ot_a.append(ot.a.pts)
        ot_b.append(ot.b.pts)
        extra.append((ot, OVERTIME_MINUTES))

    sd_pairs = 0
    sd_a = sd_b = 0
    while a_score == b_score and sd_pairs < SUDDEN_DEATH_CAP:
        sd_pairs += 1
        sd = simulate_stretch(rng, ta, tb, 1, mode=mode, period=SUDDEN_DEATH, number=sd_pairs)
        shifted = [ev.shifted(a_score, b_score) for ev in sd.log]
        play_by_play.extend(shifted)
        wp.extend(win_prob_timeline(shifted, sd.total_possessions, sd.rates))
        a_score += sd.a.pts
        b_score += sd.b.pts
        sd_a += sd.a.pts
        sd_b += sd.b.pts

    tiebreak = False
    if a_score == b_score:
        tiebreak = True
        side = "A" if rng.random() < 0.5 else "B"
        if side == "A":
            a_score += 1
            sd_a += 1
        else:
            b_score += 1
            sd_b += 1
        ev = PossessionEvent(t="SD", side=side, pts=1, a=a_score, b=b_score, text=f"{side}: tiebreak free throw", period=SUDDEN_DEATH)
        play_by_play.append(ev)
        wp.append(WinProbPoint(t=ev.t, a=a_score, b=b_score, wp_a=0.99 if a_score > b_score else 0.01))

    # Box scores
    a_box = build_box(a.lineup, reg.a.pts, rng)
    b_box = build_box(b.lineup, reg.b.pts, rng)
    for stretch, minutes in extra:
        a_box = a_box.merged(build_box(a.lineup, stretch.a.pts, rng, minutes=minutes), minutes)
        b_box = b_box.merged(build_box(b.lineup, stretch.b.pts, rng, minutes=minutes), minutes)
    if sd_pairs or tiebreak:
        a_box = a_box.merged(build_box(a.lineup, sd_a, rng, minutes=0), 0)
        b_box = b_box.merged(build_box(b.lineup, sd_b, rng, minutes=0), 0)

    winner = _decide_winner(mode, a_score, b_score)
    winner_id = a.id if winner == "A" else b.id

    pog = player_of_game(winner, a_box.lines, b_box.lines, rng)

    storyline = scripted_storyline(a.name, b.name, a_score, b_score, a_box.lines, b_box.lines, rng)
    overtime: Optional[OvertimeSummary] = None
    notes = _notes(mode)
    if periods or sd_pairs or tiebreak:
        overtime = OvertimeSummary(
            periods=periods,
            a=ot_a,
            b=ot_b,
            headline=overtime_headline(periods),
            sudden_death=sd_pairs,
            tiebreak=tiebreak,
        )
        storyline = storyline + overtime_beats(overtime.headline)
        notes.append("Overtime is more possessions, not a coin flip, until somebody wins.")

    (a_h1, a_h2), (b_h1, b_h2) = _halves(reg.log, reg.a.pts, reg.b.pts)

    debug = MatchDebug(
        pace=pace,
        a=SideDebug(strength=team_strength(a.lineup), rates=reg.rates.a, regulation_score=reg.a.pts),
        b=SideDebug(strength=team_strength(b.lineup), rates=reg.rates.b, regulation_score=reg.b.pts),
        notes=notes,
    )

    identity = {
        "A": identity_tags(pace, reg.rates.a.to_rate, reg.rates.a.oreb_rate, reg.rates.a.three_rate),
        "B": identity_tags(pace, reg.rates.b.to_rate, reg.rates.b.oreb_rate, reg.rates.b.three_rate),
    }

    logger.debug(
        "match_simulated",
        seed=seed,
        mode=mode,
        pace=pace,
        score=f"{a_score}-{b_score}",
        ot_periods=periods,
        sudden_death=sd_pairs,
        draws=rng.draws,
    )

    return MatchRecap(
        seed=seed,
        mode=mode,
        a=TeamResult(
            id=a.id, name=a.name, score=a_score, half1=a_h1, half2=a_h2,
            box=a_box.lines, team_reb=a_box.reb, team_ast=a_box.ast,
        ),
        b=TeamResult(
            id=b.id, name=b.name, score=b_score, half1=b_h1, half2=b_h2,
            box=b_box.lines, team_reb=b_box.reb, team_ast=b_box.ast,
        ),
        winner_id=winner_id,
        winner=winner,
        player_of_game=pog,
        last_possessions=last_possessions(play_by_play),
        storyline=storyline,
        play_by_play=play_by_play,
        win_prob_timeline=wp,
        identity=identity,
        debug=debug,
        overtime=overtime,
    )
