"""Tests for roster loading and the random starting five."""

import json

import pytest

from hoops_draft_sim.errors import RosterError
from hoops_draft_sim.models import PlayerSeasonSnapshot
from hoops_draft_sim.roster import (
    best_season_by_player,
    filter_actually_played,
    load_roster,
    players_for_slot,
    random_lineup,
    unique_players,
)


@pytest.fixture
def demo_rows():
    return load_roster()


@pytest.fixture
def played(demo_rows):
    return filter_actually_played(demo_rows)


def test_demo_roster_loads(demo_rows):
    assert len(demo_rows) == 26
    assert all(isinstance(r, PlayerSeasonSnapshot) for r in demo_rows)


def test_filter_actually_played(demo_rows, played):
    assert len(played) == 23
    assert all((r.games or 0) >= 10 and (r.minutes or 0) >= 10 for r in played)
    assert len(filter_actually_played(demo_rows, min_games=0, min_minutes=0)) == 26


def test_unique_players(demo_rows):
    names = unique_players(demo_rows)
    assert names == sorted(set(names))
    assert len(names) == 25


def test_best_season(demo_rows):
    best = best_season_by_player(demo_rows)
    assert best["Darnell Okafor"].year == 2012


def test_players_for_slot(played):
    guards = players_for_slot(played, "pg")
    assert guards
    assert all(r.bucket in ("G", "U") for r in guards)
    assert [r.pts for r in guards] == sorted((r.pts for r in guards), reverse=True)

    centers = players_for_slot(played, "C", taken={"Victor Halloran"})
    assert "Victor Halloran" not in {r.player for r in centers}
    assert all(r.bucket in ("C", "U") for r in centers)

    with pytest.raises(RosterError):
        players_for_slot(played, "6M")


def test_random_lineup(played):
    lu = random_lineup(played, 12345)
    assert lu == random_lineup(played, 12345)
    picks = lu.players()
    assert len(picks) == 5
    assert len({p.player for p in picks}) == 5
    assert lu.pg.bucket == "G" and lu.sg.bucket == "G"
    assert lu.sf.bucket == "F" and lu.pf.bucket == "F"
    assert lu.c.bucket == "C"


def test_random_lineup_seed_zero_is_seed_one(played):
    assert random_lineup(played, 0) == random_lineup(played, 1)


def test_random_lineup_skips_taken_players(played):
    first = random_lineup(played, 77)
    names = {p.player for p in first.players()}
    second = random_lineup(played, 78, taken=names)
    assert len(second.players()) == 5
    assert names.isdisjoint(p.player for p in second.players())


def test_random_lineup_falls_back_to_anyone():
    rows = [PlayerSeasonSnapshot(player=f"Guard {i}", year=2020, pos="G", games=20, minutes=20) for i in range(6)]
    lu = random_lineup(rows, 9)
    assert len(lu.players()) == 5
    assert len({p.player for p in lu.players()}) == 5


def test_random_lineup_runs_dry():
    rows = [PlayerSeasonSnapshot(player="Lonely", year=2020, pos="C", games=20, minutes=20)]
    lu = random_lineup(rows, 4)
    assert lu.pg is not None and lu.pg.player == "Lonely"
    assert lu.sg is None and lu.c is None
    assert random_lineup([], 4).is_empty


def test_load_errors(tmp_path):
    missing = tmp_path / "nope.json"
    with pytest.raises(RosterError):
        load_roster(missing)

    bad_json = tmp_path / "bad.json"
    bad_json.write_text("{not json")
    with pytest.raises(RosterError):
        load_roster(bad_json)

    not_list = tmp_path / "obj.json"
    not_list.write_text(json.dumps({"player": "x"}))
    with pytest.raises(RosterError):
        load_roster(not_list)

    bad_row = tmp_path / "row.json"
    bad_row.write_text(json.dumps([{"player": "x", "year": 2020, "pts": -4}]))
    with pytest.raises(RosterError):
        load_roster(bad_row)


def test_roster_path_from_settings(tmp_path, monkeypatch):
    from hoops_draft_sim.config import get_settings

    path = tmp_path / "mini.json"
    path.write_text(json.dumps([{"player": "Mini", "year": 2001, "pos": "G"}]))
    monkeypatch.setenv("HOOPS_ROSTER_PATH", str(path))
    get_settings.cache_clear()
    assert [r.player for r in load_roster()] == ["Mini"]
