"""Tests for back-to-back series runs."""

import pytest

from hoops_draft_sim.config import get_settings
from hoops_draft_sim.elo import Rating
from hoops_draft_sim.errors import SimulationInputError
from hoops_draft_sim.match import simulate_match
from hoops_draft_sim.series import SEED_MODULUS, new_seed, run_series, series_seed


def test_seed_schedule():
    assert series_seed(100, 0, 9973) == 100
    assert series_seed(100, 3, 9973) == 100 + 3 * 9973
    assert series_seed(SEED_MODULUS - 1, 1, 9973) == 9972


def test_series_matches_single_games(team_a, team_b):
    summary = run_series(team_a, team_b, "top", n=5, base_seed=100)
    assert summary.n == 5
    assert len(summary.games) == 5
    for i, g in enumerate(summary.games):
        assert g.seed == 100 + i * 9973
        recap = simulate_match(g.seed, "top", team_a, team_b)
        assert (g.a, g.b, g.winner) == (recap.a.score, recap.b.score, recap.winner)
        assert g.had_ot == (recap.overtime is not None)


def test_series_aggregates(team_a, team_b):
    s = run_series(team_a, team_b, "sicko", n=15, base_seed=7)
    assert s.a.wins + s.b.wins == 15
    assert s.a.wins == sum(g.winner == "A" for g in s.games)
    assert s.a.avg == round(sum(g.a for g in s.games) / 15, 1)
    assert s.avg_margin == round(sum(g.margin for g in s.games) / 15, 1)
    assert s.blowouts == sum(g.margin >= 15 for g in s.games)
    assert s.nailbiters == sum(g.margin <= 3 for g in s.games)
    assert s.ots == sum(g.had_ot for g in s.games)

    d = s.to_dict()
    assert len(d["sims"]) == 12
    assert d["meta"]["avgMargin"] == s.avg_margin
    assert d["baseSeed"] == 7
    assert "ratings" not in d


@pytest.mark.parametrize("n,expected", [(0, 1), (-3, 1), (None, 10), (100, 25)])
def test_game_count_clamped(team_a, team_b, n, expected):
    assert run_series(team_a, team_b, "top", n=n, base_seed=1).n == expected


def test_cap_from_settings(monkeypatch, team_a, team_b):
    monkeypatch.setenv("HOOPS_SERIES_MAX_GAMES", "3")
    get_settings.cache_clear()
    assert run_series(team_a, team_b, "top", n=10, base_seed=1).n == 3


def test_ratings_advance(team_a, team_b):
    s = run_series(team_a, team_b, "top", n=6, base_seed=3, ratings=(Rating(), Rating()))
    ra, rb = s.ratings
    assert ra.wins == s.a.wins and ra.losses == s.b.wins
    assert rb.wins == s.b.wins and rb.losses == s.a.wins
    # zero-sum up to rounding
    assert abs(ra.elo + rb.elo - 2400) <= s.n
    assert s.to_dict()["ratings"]["a"]["elo"] == ra.elo


def test_default_seed_from_clock(team_a, team_b):
    s = run_series(team_a, team_b, "top", n=1)
    assert 0 <= s.base_seed < SEED_MODULUS
    assert 0 <= new_seed() < SEED_MODULUS


def test_bad_mode(team_a, team_b):
    with pytest.raises(SimulationInputError):
        run_series(team_a, team_b, "bad", n=2, base_seed=1)


def test_series_is_quiet_on_stdout(capsys, team_a, team_b):
    run_series(team_a, team_b, "top", n=3, base_seed=1)
    simulate_match(9, "sicko", team_a, team_b)
    assert capsys.readouterr().out == ""
