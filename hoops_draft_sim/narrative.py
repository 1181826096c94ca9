"""Cosmetic text on top of a finished game: player of the game, the late-game
storyline, and the last-possessions feed.

Every function here that takes the generator draws from it in a fixed order;
calling them in a different order changes the text for a seed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .boxscore import BoxPlayerLine
from .engine import PossessionEvent
from .rng import Mulberry32

LAST_POSSESSIONS = 10


@dataclass(frozen=True)
class NarrativeLine:
    t: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"t": self.t, "text": self.text}


@dataclass(frozen=True)
class PlayerOfGame:
    team: str
    player: str
    line: BoxPlayerLine
    blurb: str

    def to_dict(self) -> Dict:
        return {"team": self.team, "player": self.player, "line": self.line.to_dict(), "blurb": self.blurb}


# -----------------------------
# Quote pools
# -----------------------------

BASE_QUOTES = [
    "Called it a normal Tuesday and asked who was buying wings.",
    "Said the team 'just played hoops' and walked straight to the bus.",
    "Thanked the student section, then the other student section.",
    "Claimed the box score undersold it.",
    "Shrugged. Said nothing. Shrugged again.",
    "Said the rim felt about four feet wide tonight.",
    "Promised the next one would be louder.",
    "Told the camera to check back in March.",
]

SCORER_QUOTES = [
    "Said the plan was 'get me the ball, then get out of the way'.",
    "Called the defense 'more of a rumor than a scheme'.",
    "Admitted losing count somewhere around the eighth bucket.",
    "Said it felt like a shootaround with fans.",
]

DIMES_QUOTES = [
    "Said the passing lanes were 'lit up like a runway'.",
    "Claimed to see every play two reads early.",
    "Said the assists were easy once everybody started cutting.",
    "Called the other defense 'ball-watchers with great intentions'.",
]

BOARD_QUOTES = [
    "Said every miss had a return address.",
    "Told the other bigs the paint was under new management.",
    "Said rebounding is just refusing to be boxed out.",
    "Called the glass 'a personal hobby'.",
]

STOCKS_QUOTES = [
    "Said the paint was closed for renovations.",
    "Told the other guards to check the passing lanes first next time.",
    "Called defense 'mostly anticipation and a little rudeness'.",
    "Said the blocks were 'just volleyball practice'.",
]

SICKO_QUOTES = [
    "Said the job was done and declined to look at the box score.",
    "Called it 'a cardio night' and jogged off.",
    "Said the shooting was 'a research project'.",
    "Told reporters that points are overrated anyway.",
]


def _pog_score(line: BoxPlayerLine) -> float:
    return line.pts + 1.2 * line.reb + 1.5 * line.ast + 0.8 * line.stl + 0.9 * line.blk - 1.2 * line.tov


def _star_score(line: BoxPlayerLine) -> float:
    return line.pts + 1.0 * line.reb + 1.3 * line.ast + 1.2 * line.stl + 1.2 * line.blk - 1.1 * line.tov


def player_of_game(
    winner: str,
    a_box: Sequence[BoxPlayerLine],
    b_box: Sequence[BoxPlayerLine],
    rng: Mulberry32,
) -> Optional[PlayerOfGame]:
    """Pick from the winner's top two by a weighted line score, then a quote.

    A winner with an empty lineup hands the award to the other side; two empty
    lineups produce no award and draw nothing.
    """
    team = winner
    box = a_box if team == "A" else b_box
    if not box:
        team = "B" if team == "A" else "A"
        box = a_box if team == "A" else b_box
    if not box:
        return None

    ranked = sorted(box, key=_pog_score, reverse=True)
    pick = ranked[rng.index(min(2, len(ranked)))]

    line_score = pick.pts + 1.2 * pick.reb + 1.5 * pick.ast
    pools = [BASE_QUOTES]
    if pick.pts >= 22:
        pools.append(SCORER_QUOTES)
    if pick.ast >= 7:
        pools.append(DIMES_QUOTES)
    if pick.reb >= 10:
        pools.append(BOARD_QUOTES)
    if pick.stl + pick.blk >= 4:
        pools.append(STOCKS_QUOTES)
    if pick.pts <= 9 and line_score < 18:
        pools.append(SICKO_QUOTES)

    pool = rng.pick(pools)
    return PlayerOfGame(team=team, player=pick.player, line=pick, blurb=rng.pick(pool))


# -----------------------------
# Last possessions (from the real log)
# -----------------------------

def last_possessions(play_by_play: Sequence[PossessionEvent], n: int = LAST_POSSESSIONS) -> List[NarrativeLine]:
    tail = play_by_play[-n:] if n > 0 else []
    return [NarrativeLine(t=ev.t, text=f"{ev.text} ({ev.a}-{ev.b})") for ev in tail]


# -----------------------------
# Scripted storyline
# -----------------------------

STORY_CLOCK = ["1:07", "0:48", "0:31", "0:18", "0:07", "0:02", "0:00"]

ACTIONS = {
    "turnover": [
        "throws it into the second row",
        "loses the handle on a crossover",
        "gets stripped at half court",
        "travels and argues about it",
        "steps out of bounds on the baseline",
    ],
    "bucket": [
        "hits a tough two",
        "buries a corner three",
        "finishes through contact",
        "banks in a floater",
        "knocks down a pull-up at the elbow",
        "scores on a backdoor cut",
    ],
    "miss": [
        "misses a wide-open look",
        "rims out a jumper",
        "airballs from the wing",
        "comes up short on a floater",
        "gets blocked at the rim",
    ],
    "foul": [
        "gets hacked on the drive",
        "draws contact in the post",
        "earns a whistle the other bench hates",
        "gets sent to the line",
    ],
    "ft": [
        "makes both",
        "splits the pair",
        "misses both and stares at the rim",
    ],
    "rebound": [
        "grabs the offensive board",
        "tips it out to a teammate",
        "outworks everyone for the rebound",
        "rips it away in traffic",
    ],
    "heave": [
        "launches from the logo",
        "gets a look at the horn",
        "pulls up from way too deep",
        "fades toward the corner for a prayer",
    ],
}


class _Roles:
    def __init__(self, box: Sequence[BoxPlayerLine]):
        ordered = sorted(box, key=lambda x: x.ast + x.reb, reverse=True)
        first = ordered[0] if ordered else None
        self.box = list(box)
        self.handler = next((x for x in ordered if x.slot in ("PG", "SG")), first)
        self.big = next((x for x in ordered if x.slot in ("C", "PF")), first)
        self.wing = next((x for x in ordered if x.slot == "SF"), first)


def _star(box: Sequence[BoxPlayerLine], rng: Mulberry32) -> Optional[BoxPlayerLine]:
    ranked = sorted(box, key=_star_score, reverse=True)
    if not ranked:
        return None
    return ranked[rng.index(min(2, len(ranked)))]


def scripted_storyline(
    a_name: str,
    b_name: str,
    a_score: int,
    b_score: int,
    a_box: Sequence[BoxPlayerLine],
    b_box: Sequence[BoxPlayerLine],
    rng: Mulberry32,
) -> List[NarrativeLine]:
    """Four late-game beats written from templates, keyed on the final margin."""
    close = abs(a_score - b_score) <= 3
    a_up = a_score >= b_score
    team_up, team_down = (a_name, b_name) if a_up else (b_name, a_name)
    side_up, side_down = ("A", "B") if a_up else ("B", "A")
    roles = {"A": _Roles(a_box), "B": _Roles(b_box)}

    def name(side: str, role: str) -> str:
        r = roles[side]
        if role == "star":
            line = _star(r.box, rng) or r.handler
        else:
            line = getattr(r, role) or r.handler
        return line.player if line is not None else f"{a_name if side == 'A' else b_name} walk-on"

    def act(kind: str) -> str:
        return rng.pick(ACTIONS[kind])

    lines: List[NarrativeLine] = []

    # trailing side pushes
    p = name(side_down, "handler")
    flavor = f"{p} {act('turnover')}. Ouch." if rng.random() < 0.18 else f"{p} {act('bucket')}."
    lines.append(NarrativeLine(STORY_CLOCK[1], f"{team_down} — {flavor}"))

    # leader answers
    p = name(side_up, "star" if rng.random() < 0.55 else "handler")
    roll = rng.random()
    if roll < 0.18:
        txt = f"{p} {act('turnover')}. {team_down} smells it."
    elif roll < 0.62:
        txt = f"{p} {act('bucket')}."
    else:
        txt = f"{p} {act('miss')}."
    lines.append(NarrativeLine(STORY_CLOCK[2], f"{team_up} — {txt}"))

    # scramble
    down_big = name(side_down, "big")
    up_big = name(side_up, "big")
    chaos = rng.random()
    if chaos < 0.34:
        txt = f"{down_big} {act('rebound')} and {act('bucket')}."
    elif chaos < 0.68:
        txt = f"{up_big} {act('foul')}. {name(side_down, 'star')} {act('ft')}."
    else:
        txt = f"{name(side_down, 'wing')} {act('miss')}. {up_big} {act('rebound')}."
    lines.append(NarrativeLine(STORY_CLOCK[3], txt))

    # last shot
    if close:
        shooter = name(side_down, "star")
        heave = act("heave")
        drops = rng.random() < 0.55
        make_txt = rng.pick([
            f"{shooter} {heave}. It drops. Chaos.",
            f"{shooter} {act('bucket')} at the horn. Nobody sits down.",
            f"{shooter} banks one in as time expires. {team_up} can't believe it.",
        ])
        miss_txt = rng.pick([
            f"{shooter} {heave}. Front rim. {team_up} hangs on.",
            f"{shooter} gets a clean look and {act('miss')}. Silence.",
            f"{shooter} goes up looking for contact. No whistle.",
        ])
        lines.append(NarrativeLine(STORY_CLOCK[5], make_txt if drops else miss_txt))
    else:
        closer = name(side_up, "handler")
        txt = rng.pick([
            f"{team_up} slows it down. {closer} {act('foul')} and {act('ft')}.",
            f"{team_up} dribbles out the clock.",
            f"Final. {team_up} closes it out. {team_down} wants a rematch.",
        ])
        lines.append(NarrativeLine(STORY_CLOCK[6], txt))

    return lines


def overtime_headline(periods: int) -> str:
    if periods == 0:
        return "Straight to sudden death. Next bucket wins."
    if periods > 1:
        return "Multiple overtimes. Legs are gone."
    return "Overtime. Somebody has to win this."


def overtime_beats(headline: str) -> List[NarrativeLine]:
    return [
        NarrativeLine("OT", headline),
        NarrativeLine("2:11", "A shot goes in that nobody in the building will forget."),
        NarrativeLine("0:00", "Overtime ends. Both benches ask for a rematch."),
    ]
