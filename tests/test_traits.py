"""Tests for lineup → team traits."""

import pytest

from hoops_draft_sim.models import Lineup, PlayerSeasonSnapshot
from hoops_draft_sim.traits import TeamTraits, base_impact, consistency, team_strength, team_traits


def test_empty_lineup_is_all_zero(empty_lineup):
    t = team_traits(empty_lineup)
    assert t == TeamTraits()
    assert t.players == 0
    assert team_strength(empty_lineup).base == 0


def test_average_lineup_traits(average_lineup):
    t = team_traits(average_lineup)
    assert t.scoring == pytest.approx(75)
    assert t.playmaking == pytest.approx(15)
    assert t.rebounding == pytest.approx(25)
    assert t.consistency == pytest.approx(0.55 * 25 / 30 + 0.45 * 25 / 35)
    assert t.size == pytest.approx(25 / 40 * 0.65 + 0.35)
    assert t.style.pace == pytest.approx(0.5 + 10 / 30)
    assert t.style.threes == pytest.approx(-0.5)
    assert t.style.physical == pytest.approx(0.35)
    assert t.players == 5


def test_size_without_a_big():
    p = PlayerSeasonSnapshot(player="G", year=2010, pos="G", trb=4)
    t = team_traits(Lineup(pg=p))
    assert t.size == pytest.approx(4 / 40 * 0.65)


def test_style_clamped():
    p = PlayerSeasonSnapshot(player="Heliocentric", year=2010, pos="G", pts=200, ast=80, trb=0)
    t = team_traits(Lineup(pg=p))
    assert t.style.pace == 1
    assert t.style.threes == 1
    assert t.style.physical == 0


def test_consistency_caps_at_one():
    p = PlayerSeasonSnapshot(player="Iron", year=2010, games=40, minutes=40)
    assert consistency(p) == pytest.approx(1.0)
    assert consistency(PlayerSeasonSnapshot(player="Ghost", year=2010)) == 0


def test_missing_stats_count_as_zero():
    p = PlayerSeasonSnapshot(player="Blank", year=2001, pos="C")
    t = team_traits(Lineup(c=p))
    assert t.scoring == 0 and t.rebounding == 0
    assert base_impact(p) == 0


def test_team_strength(average_lineup):
    s = team_strength(average_lineup)
    assert s.base == pytest.approx(5 * (15 + 5 * 0.7 + 3 * 0.8))
    assert s.cons == pytest.approx(team_traits(average_lineup).consistency)
