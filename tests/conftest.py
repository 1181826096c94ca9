"""Pytest configuration and fixtures."""

import os

import pytest

# Quiet, predictable settings before anything reads them
os.environ["HOOPS_LOG_LEVEL"] = "WARNING"
os.environ["HOOPS_LOG_FORMAT"] = "console"

from hoops_draft_sim.config import get_settings
from hoops_draft_sim.models import Lineup, PlayerSeasonSnapshot, TeamEntry


def make_player(name, pos, pts=15.0, trb=5.0, ast=3.0, games=25, minutes=25.0, year=2015):
    return PlayerSeasonSnapshot(
        player=name, year=year, pos=pos, games=games, minutes=minutes, pts=pts, trb=trb, ast=ast
    )


def make_lineup(prefix, **stats):
    return Lineup(
        pg=make_player(f"{prefix} Point", "G", **stats),
        sg=make_player(f"{prefix} Shooter", "G", **stats),
        sf=make_player(f"{prefix} Wing", "F", **stats),
        pf=make_player(f"{prefix} Forward", "F", **stats),
        c=make_player(f"{prefix} Center", "C", **stats),
    )


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test reads settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def average_lineup():
    """Five interchangeable 15/5/3 players, 25 games at 25 minutes."""
    return make_lineup("Avg")


@pytest.fixture
def strong_lineup():
    return make_lineup("Star", pts=24.0, trb=8.0, ast=6.0, games=32, minutes=34.0)


@pytest.fixture
def empty_lineup():
    return Lineup()


@pytest.fixture
def team_a(average_lineup):
    return TeamEntry(id="draft-a", name="Average Joes", lineup=average_lineup)


@pytest.fixture
def team_b(strong_lineup):
    return TeamEntry(id="draft-b", name="Star Power", lineup=strong_lineup)


@pytest.fixture
def empty_team(empty_lineup):
    return TeamEntry(id="draft-empty", name="Nobody Home", lineup=empty_lineup)


@pytest.fixture
def lineup_factory():
    """Build a five-man lineup where every player has the same line."""
    return make_lineup
