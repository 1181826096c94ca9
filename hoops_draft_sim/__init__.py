"""Deterministic five-on-five draft game simulator."""

from .elo import Rating, apply_result, elo_update, expected_score
from .errors import RosterError, SimulationInputError
from .match import MatchRecap, simulate_match
from .models import MODES, SLOTS, Lineup, PlayerSeasonSnapshot, TeamEntry, position_bucket
from .rates import TeamProfile, identity_tags, quick_team_profile
from .rng import Mulberry32
from .roster import filter_actually_played, load_roster, players_for_slot, random_lineup, unique_players
from .series import SeriesSummary, new_seed, run_series
from .traits import TeamTraits, team_strength, team_traits

__version__ = "0.1.0"

__all__ = [
    "MODES",
    "SLOTS",
    "Lineup",
    "MatchRecap",
    "Mulberry32",
    "PlayerSeasonSnapshot",
    "Rating",
    "RosterError",
    "SeriesSummary",
    "SimulationInputError",
    "TeamEntry",
    "TeamProfile",
    "TeamTraits",
    "apply_result",
    "elo_update",
    "expected_score",
    "filter_actually_played",
    "identity_tags",
    "load_roster",
    "new_seed",
    "players_for_slot",
    "position_bucket",
    "quick_team_profile",
    "random_lineup",
    "run_series",
    "simulate_match",
    "team_strength",
    "team_traits",
    "unique_players",
]
