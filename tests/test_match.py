"""Tests for full-game simulation."""

import json

import pytest

from hoops_draft_sim.engine import OVERTIME, REGULATION, SUDDEN_DEATH
from hoops_draft_sim import match
from hoops_draft_sim.errors import SimulationInputError
from hoops_draft_sim.match import MAX_OT_PERIODS, OT_POSSESSIONS, SUDDEN_DEATH_CAP, simulate_match
from hoops_draft_sim.models import Lineup, TeamEntry
from hoops_draft_sim.rates import PACE_MAX, PACE_MIN

SEEDS = range(1, 41)


def test_same_inputs_same_recap(team_a, team_b):
    one = simulate_match(42, "top", team_a, team_b)
    two = simulate_match(42, "top", team_a, team_b)
    assert one.to_dict() == two.to_dict()


def test_mapping_inputs_match_models(team_a, team_b):
    from_models = simulate_match(7, "sicko", team_a, team_b)
    from_dicts = simulate_match(7, "sicko", team_a.model_dump(), team_b.model_dump())
    assert from_models.to_dict() == from_dicts.to_dict()


def test_seed_changes_the_game(team_a, team_b):
    scores = {(r.a.score, r.b.score) for r in (simulate_match(s, "top", team_a, team_b) for s in range(10))}
    assert len(scores) > 1


@pytest.mark.parametrize("mode", ["top", "sicko"])
def test_game_invariants(team_a, team_b, mode):
    for seed in SEEDS:
        r = simulate_match(seed, mode, team_a, team_b)

        # no ties, and the winner follows the league rule
        assert r.a.score != r.b.score
        a_wins = r.a.score > r.b.score if mode == "top" else r.a.score < r.b.score
        assert r.winner == ("A" if a_wins else "B")
        assert r.winner_id == (team_a.id if a_wins else team_b.id)

        # box scores add up to the team totals
        for side in (r.a, r.b):
            assert sum(x.pts for x in side.box) == side.score
            assert sum(x.reb for x in side.box) == side.team_reb
            assert sum(x.ast for x in side.box) == side.team_ast

        # halves come from regulation
        assert r.a.half1 + r.a.half2 == r.debug.a.regulation_score
        assert r.b.half1 + r.b.half2 == r.debug.b.regulation_score
        assert min(r.a.half1, r.a.half2, r.b.half1, r.b.half2) >= 0

        # pace and the regulation log agree
        assert PACE_MIN <= r.debug.pace <= PACE_MAX
        reg = [ev for ev in r.play_by_play if ev.period == REGULATION]
        assert len(reg) == 2 * r.debug.pace

        # one win-probability point per logged event, always in bounds
        assert len(r.win_prob_timeline) == len(r.play_by_play)
        assert all(0.01 <= p.wp_a <= 0.99 for p in r.win_prob_timeline)

        # final score is the last logged score
        assert (r.play_by_play[-1].a, r.play_by_play[-1].b) == (r.a.score, r.b.score)
        assert r.last_possessions[-1].t == r.play_by_play[-1].t
        assert len(r.last_possessions) == 10

        if r.overtime is None:
            assert all(ev.period == REGULATION for ev in r.play_by_play)
        else:
            ot = [ev for ev in r.play_by_play if ev.period == OVERTIME]
            assert 1 <= r.overtime.periods <= MAX_OT_PERIODS
            assert len(ot) == 2 * OT_POSSESSIONS * r.overtime.periods
            assert len(r.overtime.a) == r.overtime.periods


def test_sicko_trims_regulation(team_a, team_b):
    for seed in SEEDS:
        top = simulate_match(seed, "top", team_a, team_b)
        sicko = simulate_match(seed, "sicko", team_a, team_b)
        # identical draws through regulation, then the sicko environment trims
        assert top.debug.pace == sicko.debug.pace
        assert sicko.debug.a.regulation_score <= max(top.debug.a.regulation_score, 35)
        assert sicko.debug.b.regulation_score <= max(top.debug.b.regulation_score, 35)
        assert sicko.debug.a.regulation_score >= 35


def test_recap_json_shape(team_a, team_b):
    d = simulate_match(42, "top", team_a, team_b).to_dict()
    for key in ("seed", "mode", "a", "b", "winnerId", "winnerSide", "playerOfGame", "lastPossessions",
                "storyline", "playByPlay", "winProbTimeline", "identity", "debug"):
        assert key in d
    assert set(d["a"]) >= {"id", "name", "score", "half1", "half2", "box"}
    assert d["debug"]["a"]["base"] > 0
    assert len(d["identity"]["A"]) == 4
    json.dumps(d, allow_nan=False)


def test_player_of_game_comes_from_winner(team_a, team_b):
    for seed in range(1, 11):
        r = simulate_match(seed, "top", team_a, team_b)
        winners = r.a if r.winner == "A" else r.b
        assert r.player_of_game.team == r.winner
        assert r.player_of_game.player in {x.player for x in winners.box}


def test_one_empty_lineup(team_a, empty_team):
    for mode in ("top", "sicko"):
        r = simulate_match(3, mode, empty_team, team_a)
        assert r.a.score == 0
        assert r.a.box == []
        assert r.a.team_reb == 0 and r.a.team_ast == 0
        assert r.winner == ("B" if mode == "top" else "A")
        # the award goes to whoever actually played
        assert r.player_of_game.team == "B"
        json.dumps(r.to_dict(), allow_nan=False)


def test_two_empty_lineups_still_produce_a_winner(empty_team):
    other = TeamEntry(id="also-empty", name="Ghosts", lineup=Lineup())
    r = simulate_match(11, "top", empty_team, other)
    assert r.overtime.periods == MAX_OT_PERIODS
    assert r.overtime.sudden_death == SUDDEN_DEATH_CAP
    assert r.overtime.tiebreak
    assert abs(r.a.score - r.b.score) == 1
    assert r.player_of_game is None
    assert r.play_by_play[-1].period == SUDDEN_DEATH
    assert "tiebreak" in r.play_by_play[-1].text


def test_lopsided_game_is_lopsided(lineup_factory):
    stars = TeamEntry(id="s", name="Stars", lineup=lineup_factory("S", pts=30.0, trb=12.0, ast=9.0, games=35, minutes=36.0))
    scrubs = TeamEntry(id="x", name="Scrubs", lineup=lineup_factory("X", pts=2.0, trb=1.0, ast=0.5, games=12, minutes=11.0))
    wins = sum(simulate_match(seed, "top", stars, scrubs).winner == "A" for seed in range(20))
    assert wins >= 18


@pytest.mark.parametrize(
    "args",
    [
        (1, "pickup"),
        (True, "top"),
        ("1", "top"),
    ],
)
def test_bad_arguments(team_a, team_b, args):
    seed, mode = args
    with pytest.raises(SimulationInputError):
        simulate_match(seed, mode, team_a, team_b)


def test_malformed_team(team_a):
    with pytest.raises(SimulationInputError):
        simulate_match(1, "top", team_a, {"id": "x", "lineup": {}})


def test_negative_and_large_seeds(team_a, team_b):
    wrapped = simulate_match(-1, "top", team_a, team_b)
    unsigned = simulate_match(2 ** 32 - 1, "top", team_a, team_b)
    assert [ev.to_dict() for ev in wrapped.play_by_play] == [ev.to_dict() for ev in unsigned.play_by_play]
    r = simulate_match(2 ** 40 + 5, "top", team_a, team_b)
    assert r.seed == 2 ** 40 + 5


def test_seed_42_mirror_match(average_lineup):
    a = TeamEntry(id="left", name="Left", lineup=average_lineup)
    b = TeamEntry(id="right", name="Right", lineup=average_lineup)

    top = simulate_match(42, "top", a, b)
    again = simulate_match(42, "top", a, b)
    assert (top.a.score, top.b.score, top.winner_id) == (again.a.score, again.b.score, again.winner_id)
    assert top.a.score != top.b.score

    sicko = simulate_match(42, "sicko", a, b)
    top_reg = top.debug.a.regulation_score + top.debug.b.regulation_score
    sicko_reg = sicko.debug.a.regulation_score + sicko.debug.b.regulation_score
    assert sicko_reg < top_reg
    assert sicko.winner == ("A" if sicko.a.score < sicko.b.score else "B")


# Regulation ends level for the fixture teams on this seed
TIED_SEED = 23


def _assert_box_adds_up(r):
    for side in (r.a, r.b):
        assert sum(x.pts for x in side.box) == side.score
        assert sum(x.reb for x in side.box) == side.team_reb
        assert sum(x.ast for x in side.box) == side.team_ast


def test_tied_regulation_goes_to_overtime(team_a, team_b):
    r = simulate_match(TIED_SEED, "top", team_a, team_b)
    assert r.debug.a.regulation_score == r.debug.b.regulation_score
    assert r.overtime is not None and r.overtime.periods >= 1
    assert r.a.score != r.b.score
    assert r.a.score == r.debug.a.regulation_score + sum(r.overtime.a)
    assert r.b.score == r.debug.b.regulation_score + sum(r.overtime.b)
    _assert_box_adds_up(r)

    # overtime events and their win-probability points carry the running score
    ot = [ev for ev in r.play_by_play if ev.period == OVERTIME]
    assert ot[0].t.startswith("OT1")
    assert min(ev.a for ev in ot) >= r.debug.a.regulation_score
    assert min(ev.b for ev in ot) >= r.debug.b.regulation_score
    for ev, p in zip(r.play_by_play, r.win_prob_timeline):
        assert (p.t, p.a, p.b) == (ev.t, ev.a, ev.b)
    assert r.storyline[-3].t == "OT"


def test_sudden_death_with_real_lineups(monkeypatch, team_a, team_b):
    monkeypatch.setattr(match, "MAX_OT_PERIODS", 0)
    r = simulate_match(TIED_SEED, "top", team_a, team_b)

    assert r.overtime is not None
    assert r.overtime.periods == 0
    assert r.overtime.sudden_death >= 1
    assert r.a.score != r.b.score
    _assert_box_adds_up(r)

    sd = [ev for ev in r.play_by_play if ev.period == SUDDEN_DEATH]
    extra = 1 if r.overtime.tiebreak else 0
    assert len(sd) == 2 * r.overtime.sudden_death + extra
    assert sd[0].t == "SD1"
    assert (r.play_by_play[-1].a, r.play_by_play[-1].b) == (r.a.score, r.b.score)
    assert len(r.win_prob_timeline) == len(r.play_by_play)
    assert r.overtime.headline.startswith("Straight to sudden death")
