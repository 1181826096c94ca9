"""Tests for player of the game, last possessions and the storyline."""

from hoops_draft_sim.boxscore import BoxPlayerLine, build_box
from hoops_draft_sim.engine import PossessionEvent
from hoops_draft_sim.narrative import (
    ACTIONS,
    last_possessions,
    overtime_beats,
    overtime_headline,
    player_of_game,
    scripted_storyline,
)
from hoops_draft_sim.rng import Mulberry32


def _line(slot, name, pts=10, reb=4, ast=3):
    return BoxPlayerLine(slot=slot, player=name, pts=pts, reb=reb, ast=ast, min=30, tov=2, stl=1, blk=0, pf=2)


A_BOX = [_line("PG", "A1", pts=30, ast=9), _line("SG", "A2", pts=20), _line("SF", "A3", pts=2), _line("PF", "A4", pts=4), _line("C", "A5", pts=6)]
B_BOX = [_line("PG", "B1"), _line("SG", "B2"), _line("SF", "B3"), _line("PF", "B4"), _line("C", "B5", reb=14)]


def test_player_of_game_from_winners_top_two():
    for seed in range(20):
        pog = player_of_game("A", A_BOX, B_BOX, Mulberry32(seed))
        assert pog.team == "A"
        assert pog.player in ("A1", "A2")
        assert pog.blurb
        assert pog.line.player == pog.player


def test_player_of_game_falls_back_to_other_side():
    pog = player_of_game("B", A_BOX, [], Mulberry32(1))
    assert pog.team == "A"


def test_player_of_game_with_nobody():
    rng = Mulberry32(1)
    assert player_of_game("A", [], [], rng) is None
    assert rng.draws == 0


def test_last_possessions_tail():
    log = [PossessionEvent(t=f"2H 0:{i:02d}", side="A" if i % 2 == 0 else "B", pts=0, a=i, b=0, text="x: miss 2") for i in range(15)]
    tail = last_possessions(log)
    assert len(tail) == 10
    assert tail[-1].text == "x: miss 2 (14-0)"
    assert tail[0].t == "2H 0:05"
    assert last_possessions(log[:3]) == last_possessions(log[:3], n=10)
    assert len(last_possessions(log[:3])) == 3
    assert last_possessions(log, n=0) == []


def test_storyline_shape(average_lineup, strong_lineup):
    a_box = build_box(average_lineup, 70, Mulberry32(1)).lines
    b_box = build_box(strong_lineup, 71, Mulberry32(2)).lines
    names = {x.player for x in a_box + b_box}

    close = scripted_storyline("Avg", "Stars", 70, 71, a_box, b_box, Mulberry32(3))
    assert [x.t for x in close] == ["0:48", "0:31", "0:18", "0:02"]

    blowout = scripted_storyline("Avg", "Stars", 50, 90, a_box, b_box, Mulberry32(3))
    assert blowout[-1].t == "0:00"
    assert any(n in " ".join(x.text for x in blowout) for n in names)


def test_storyline_with_empty_boxes():
    lines = scripted_storyline("Ghosts", "Shadows", 1, 0, [], [], Mulberry32(4))
    assert len(lines) == 4
    assert "walk-on" in " ".join(x.text for x in lines)


def test_actions_pools_non_empty():
    assert all(ACTIONS[k] for k in ("turnover", "bucket", "miss", "foul", "ft", "rebound", "heave"))


def test_overtime_text():
    assert overtime_headline(1).startswith("Overtime")
    assert overtime_headline(3).startswith("Multiple")
    assert overtime_headline(0).startswith("Straight to sudden death")
    beats = overtime_beats(overtime_headline(2))
    assert beats[0].t == "OT"
    assert len(beats) == 3
