"""Player-season pool: loading, filtering and the random starting five."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Collection, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from .config import get_settings
from .errors import RosterError
from .models import SLOTS, Lineup, PlayerSeasonSnapshot
from .rng import Mulberry32
from .sim_logging import get_logger

logger = get_logger(__name__)

# Which position bucket a slot draws from on the draft board
SLOT_BUCKET = {"PG": "G", "SG": "G", "SF": "F", "PF": "F", "C": "C"}


def load_roster(path: Optional[Union[str, Path]] = None) -> List[PlayerSeasonSnapshot]:
    """Read a JSON list of season rows. Defaults to the configured roster path."""
    path = Path(path) if path is not None else get_settings().ROSTER_PATH
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise RosterError(f"cannot read roster {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RosterError(f"roster {path} is not valid JSON: {e}") from e

    if not isinstance(raw, list):
        raise RosterError(f"roster {path} must be a JSON list of season rows")

    rows: List[PlayerSeasonSnapshot] = []
    for i, item in enumerate(raw):
        try:
            rows.append(PlayerSeasonSnapshot.model_validate(item))
        except ValidationError as e:
            raise RosterError(f"roster {path} row {i} is malformed: {e}") from e

    logger.debug("roster_loaded", path=str(path), rows=len(rows))
    return rows


def filter_actually_played(
    rows: Iterable[PlayerSeasonSnapshot],
    min_games: Optional[float] = None,
    min_minutes: Optional[float] = None,
) -> List[PlayerSeasonSnapshot]:
    """Drop cup-of-coffee seasons. Missing games or minutes count as 0."""
    settings = get_settings()
    min_games = settings.MIN_GAMES if min_games is None else min_games
    min_minutes = settings.MIN_MINUTES if min_minutes is None else min_minutes
    return [r for r in rows if (r.games or 0) >= min_games and (r.minutes or 0) >= min_minutes]


def unique_players(rows: Iterable[PlayerSeasonSnapshot]) -> List[str]:
    return sorted({r.player for r in rows})


def best_season_by_player(rows: Iterable[PlayerSeasonSnapshot]) -> Dict[str, PlayerSeasonSnapshot]:
    """Highest-scoring season per player; earlier year wins a tie."""
    best: Dict[str, PlayerSeasonSnapshot] = {}
    for r in rows:
        cur = best.get(r.player)
        if cur is None or (r.pts or 0) > (cur.pts or 0) or ((r.pts or 0) == (cur.pts or 0) and r.year < cur.year):
            best[r.player] = r
    return best


def players_for_slot(
    rows: Iterable[PlayerSeasonSnapshot],
    slot: str,
    taken: Collection[str] = (),
) -> List[PlayerSeasonSnapshot]:
    """Draft candidates for a slot: matching bucket (or unknown), not taken, best scorers first."""
    slot = slot.upper()
    if slot not in SLOT_BUCKET:
        raise RosterError(f"unknown slot {slot!r}, expected one of {SLOTS}")
    want = SLOT_BUCKET[slot]
    out = [r for r in rows if r.player not in taken and r.bucket in (want, "U")]
    return sorted(out, key=lambda r: (-(r.pts or 0), r.player, r.year))


def _pick_one_unique(pool: List[PlayerSeasonSnapshot], taken: set) -> Optional[PlayerSeasonSnapshot]:
    for r in pool:
        if r.player not in taken:
            taken.add(r.player)
            return r
    return None


def random_lineup(rows: Iterable[PlayerSeasonSnapshot], seed: int, taken: Collection[str] = ()) -> Lineup:
    """Seeded random starting five. Slots stay empty only when the pool runs dry.

    Players named in ``taken`` (say, the other bench) are never drawn.
    """
    played = [r for r in rows if r.player not in taken]
    rng = Mulberry32(seed or 1)

    guards = rng.shuffled([r for r in played if r.bucket == "G"])
    forwards = rng.shuffled([r for r in played if r.bucket == "F"])
    centers = rng.shuffled([r for r in played if r.bucket == "C"])
    anyone = rng.shuffled(played)

    plan = [
        ("PG", guards),
        ("SG", guards),
        ("SF", forwards),
        ("PF", forwards or anyone),
        ("C", centers or anyone),
    ]

    taken: set = set()
    picks: Dict[str, Optional[PlayerSeasonSnapshot]] = {}
    for slot, pool in plan:
        picks[slot.lower()] = _pick_one_unique(pool, taken) or _pick_one_unique(anyone, taken)
    return Lineup(**picks)
