"""Back-to-back simulations between the same two teams.

Seeds step by a fixed stride from a base seed, so a series is as reproducible
as a single game. Rating records, when supplied, advance game by game.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import get_settings
from .elo import Rating, apply_result
from .match import simulate_match
from .models import check_mode, check_seed, coerce_team
from .sim_logging import get_logger

logger = get_logger(__name__)

SEED_MODULUS = 2147483647
BLOWOUT_MARGIN = 15
NAILBITER_MARGIN = 3
SHOWN_GAMES = 12


@dataclass(frozen=True)
class SeriesGame:
    seed: int
    a: int
    b: int
    winner: str
    margin: int
    had_ot: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"seed": self.seed, "a": self.a, "b": self.b, "winner": self.winner, "margin": self.margin, "hadOT": self.had_ot}


@dataclass(frozen=True)
class SeriesSide:
    id: str
    name: str
    wins: int
    avg: float


@dataclass
class SeriesSummary:
    n: int
    base_seed: int
    a: SeriesSide
    b: SeriesSide
    avg_margin: float
    blowouts: int
    nailbiters: int
    ots: int
    games: List[SeriesGame] = field(default_factory=list)
    ratings: Optional[Tuple[Rating, Rating]] = None

    @property
    def shown(self) -> List[SeriesGame]:
        return self.games[:SHOWN_GAMES]

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "n": self.n,
            "baseSeed": self.base_seed,
            "a": {"id": self.a.id, "name": self.a.name, "wins": self.a.wins, "avg": self.a.avg},
            "b": {"id": self.b.id, "name": self.b.name, "wins": self.b.wins, "avg": self.b.avg},
            "meta": {
                "avgMargin": self.avg_margin,
                "blowouts": self.blowouts,
                "nailbiters": self.nailbiters,
                "ots": self.ots,
            },
            "sims": [g.to_dict() for g in self.shown],
        }
        if self.ratings is not None:
            ra, rb = self.ratings
            out["ratings"] = {
                "a": {"elo": ra.elo, "wins": ra.wins, "losses": ra.losses},
                "b": {"elo": rb.elo, "wins": rb.wins, "losses": rb.losses},
            }
        return out


def new_seed() -> int:
    """Fresh seed from the wall clock, for callers that do not pick one."""
    return int(time.time() * 1000) % SEED_MODULUS


def series_seed(base_seed: int, i: int, stride: int) -> int:
    return (base_seed + i * stride) % SEED_MODULUS


def clamp_games(n: Optional[int]) -> int:
    settings = get_settings()
    if n is None:
        n = settings.SERIES_DEFAULT_GAMES
    return max(1, min(settings.SERIES_MAX_GAMES, int(n)))


def run_series(
    team_a: Any,
    team_b: Any,
    mode: str,
    n: Optional[int] = None,
    base_seed: Optional[int] = None,
    ratings: Optional[Tuple[Rating, Rating]] = None,
    k: Optional[int] = None,
) -> SeriesSummary:
    settings = get_settings()
    mode = check_mode(mode)
    base_seed = new_seed() if base_seed is None else check_seed(base_seed)
    a = coerce_team(team_a)
    b = coerce_team(team_b)
    n = clamp_games(n)
    k = settings.ELO_K if k is None else k

    games: List[SeriesGame] = []
    for i in range(n):
        seed = series_seed(base_seed, i, settings.SERIES_SEED_STRIDE)
        recap = simulate_match(seed, mode, a, b)
        games.append(
            SeriesGame(
                seed=seed,
                a=recap.a.score,
                b=recap.b.score,
                winner=recap.winner,
                margin=abs(recap.a.score - recap.b.score),
                had_ot=recap.overtime is not None,
            )
        )
        if ratings is not None:
            ratings = apply_result(ratings[0], ratings[1], recap.winner, k)

    a_wins = sum(1 for g in games if g.winner == "A")
    summary = SeriesSummary(
        n=n,
        base_seed=base_seed,
        a=SeriesSide(id=a.id, name=a.name, wins=a_wins, avg=round(sum(g.a for g in games) / n, 1)),
        b=SeriesSide(id=b.id, name=b.name, wins=n - a_wins, avg=round(sum(g.b for g in games) / n, 1)),
        avg_margin=round(sum(g.margin for g in games) / n, 1),
        blowouts=sum(1 for g in games if g.margin >= BLOWOUT_MARGIN),
        nailbiters=sum(1 for g in games if g.margin <= NAILBITER_MARGIN),
        ots=sum(1 for g in games if g.had_ot),
        games=games,
        ratings=ratings,
    )
    logger.info("series_complete", mode=mode, n=n, a_wins=summary.a.wins, b_wins=summary.b.wins, ots=summary.ots)
    return summary
