"""Elo ratings for drafted lineups. Pure functions; storage belongs to the caller."""
from __future__ import annotations

from dataclasses import dataclass

from .errors import SimulationInputError

DEFAULT_K = 24
DEFAULT_RATING = 1200


@dataclass(frozen=True)
class EloResult:
    na: int
    nb: int


@dataclass(frozen=True)
class Rating:
    elo: int = DEFAULT_RATING
    wins: int = 0
    losses: int = 0


def expected_score(ra: float, rb: float) -> float:
    return 1 / (1 + 10 ** ((rb - ra) / 400))


def elo_update(ra: int, rb: int, winner: str, k: int = DEFAULT_K) -> EloResult:
    """Logistic expected score, K-factor update.

    The change is rounded half-to-even before it is added, so swapping the
    inputs and the winner mirrors the change exactly.
    """
    if winner not in ("A", "B"):
        raise SimulationInputError(f"winner must be 'A' or 'B', got {winner!r}")
    ea = expected_score(ra, rb)
    eb = 1 - ea
    sa = 1 if winner == "A" else 0
    sb = 1 - sa
    return EloResult(na=ra + round(k * (sa - ea)), nb=rb + round(k * (sb - eb)))


def apply_result(ra: Rating, rb: Rating, winner: str, k: int = DEFAULT_K) -> tuple:
    """Advance two rating records by one game. Returns ``(new_a, new_b)``."""
    res = elo_update(ra.elo, rb.elo, winner, k)
    a_won = winner == "A"
    return (
        Rating(elo=res.na, wins=ra.wins + (1 if a_won else 0), losses=ra.losses + (0 if a_won else 1)),
        Rating(elo=res.nb, wins=rb.wins + (0 if a_won else 1), losses=rb.losses + (1 if a_won else 0)),
    )
