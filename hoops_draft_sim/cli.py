"""hoops-sim command line: simulate games, run series, preview lineups."""
import json
from pathlib import Path
from typing import Collection, List, Optional, Tuple

import typer
from typing_extensions import Annotated

from .config import get_settings
from .elo import Rating, elo_update
from .errors import SimulationInputError
from .match import MatchRecap, simulate_match
from .models import MODES, Lineup, TeamEntry, coerce_team
from .rates import quick_team_profile
from .roster import filter_actually_played, load_roster, random_lineup
from .series import new_seed, run_series
from .sim_logging import configure_logging

app = typer.Typer(help="Draft game simulator CLI", no_args_is_help=True)


@app.callback()
def main() -> None:
    configure_logging()


# -----------------------------
# Input helpers
# -----------------------------

def _fail(msg: str) -> None:
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def _check_mode(mode: str) -> str:
    if mode not in MODES:
        _fail(f"--mode must be one of {', '.join(MODES)}")
    return mode


def _load_teams_file(path: Path) -> Tuple[TeamEntry, TeamEntry]:
    """Two teams from JSON: ``{"a": {...}, "b": {...}}`` or a two-item list."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SimulationInputError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SimulationInputError(f"{path} is not valid JSON: {e}") from e

    if isinstance(raw, dict) and "a" in raw and "b" in raw:
        pair = [raw["a"], raw["b"]]
    elif isinstance(raw, list) and len(raw) == 2:
        pair = raw
    else:
        raise SimulationInputError(f"{path} must hold two teams as {{'a': ..., 'b': ...}} or a two-item list")
    return coerce_team(pair[0]), coerce_team(pair[1])


def _random_team(roster: Optional[Path], lineup_seed: int, label: str, taken: Collection[str] = ()) -> TeamEntry:
    rows = filter_actually_played(load_roster(roster))
    lineup = random_lineup(rows, lineup_seed, taken=taken)
    return TeamEntry(id=f"random-{label.lower()}-{lineup_seed}", name=f"Random 5 {label}", lineup=lineup)


def _resolve_teams(teams: Optional[Path], roster: Optional[Path], seed: int) -> Tuple[TeamEntry, TeamEntry]:
    if teams is not None:
        return _load_teams_file(teams)
    team_a = _random_team(roster, seed, "A")
    # no player suits up for both benches
    team_b = _random_team(roster, seed + 1, "B", taken={p.player for p in team_a.lineup.players()})
    return team_a, team_b


def _lineup_lines(lineup: Lineup) -> List[str]:
    out = []
    for slot, p in lineup.slots():
        if p is None:
            out.append(f"  {slot:<2}  —")
        else:
            out.append(f"  {slot:<2}  {p.player} ({p.year}) | {p.pts or 0:.1f} PPG, {p.trb or 0:.1f} RPG, {p.ast or 0:.1f} APG")
    return out


# -----------------------------
# Pretty printing
# -----------------------------

def _print_recap(recap: MatchRecap) -> None:
    a, b = recap.a, recap.b
    league = "Sicko League (low score wins)" if recap.mode == "sicko" else "Top League"
    typer.echo("\n================ FINAL ================")
    typer.echo(f"{a.name} {a.score}  -  {b.name} {b.score}   [{league}, seed {recap.seed}]")
    typer.echo(f"Halves: {a.half1}/{a.half2} vs {b.half1}/{b.half2}   Pace: {recap.debug.pace}")
    if recap.overtime is not None:
        ot = recap.overtime
        typer.echo(f"{ot.headline}: OT {ot.a} vs {ot.b}")
        if ot.sudden_death:
            typer.echo(f"Sudden death pairs: {ot.sudden_death}{' (tiebreak free throw)' if ot.tiebreak else ''}")
    typer.echo(f"Winner: {a.name if recap.winner == 'A' else b.name}")

    for team in (a, b):
        typer.echo(f"\n--- {team.name} Box ---")
        if not team.box:
            typer.echo("  (empty lineup)")
        for x in team.box:
            typer.echo(
                f"  {x.slot:<2} {x.player:22} MIN {x.min:2}  PTS {x.pts:2}  REB {x.reb:2}  AST {x.ast:2}"
                f"  STL {x.stl}  BLK {x.blk}  TO {x.tov}  PF {x.pf}"
            )

    if recap.player_of_game is not None:
        pog = recap.player_of_game
        typer.echo(f"\nPlayer of the game: {pog.player} ({pog.line.pts} pts, {pog.line.reb} reb, {pog.line.ast} ast)")
        typer.echo(f"  \"{pog.blurb}\"")

    typer.echo("\nIdentity:")
    typer.echo(f"  {a.name}: {', '.join(recap.identity['A'])}")
    typer.echo(f"  {b.name}: {', '.join(recap.identity['B'])}")

    typer.echo("\nLast possessions:")
    for line in recap.last_possessions:
        typer.echo(f"  {line.t:>9}  {line.text}")


# -----------------------------
# Commands
# -----------------------------

@app.command()
def simulate(
    teams: Annotated[Optional[Path], typer.Option("--teams", help="JSON file with two drafted teams")] = None,
    seed: Annotated[Optional[int], typer.Option(help="Game seed (default: from the clock)")] = None,
    mode: Annotated[str, typer.Option(help="top or sicko")] = "top",
    roster: Annotated[Optional[Path], typer.Option(help="Roster JSON for random fives")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full recap as JSON")] = False,
):
    """Simulate one game. Without --teams, both sides are random fives from the roster."""
    mode = _check_mode(mode)
    seed = new_seed() if seed is None else seed
    try:
        team_a, team_b = _resolve_teams(teams, roster, seed)
        recap = simulate_match(seed, mode, team_a, team_b)
    except SimulationInputError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps(recap.to_dict(), indent=2))
    else:
        _print_recap(recap)


@app.command()
def series(
    teams: Annotated[Optional[Path], typer.Option("--teams", help="JSON file with two drafted teams")] = None,
    games: Annotated[Optional[int], typer.Option("--games", "-n", help="Number of games (capped)")] = None,
    seed: Annotated[Optional[int], typer.Option(help="Base seed (default: from the clock)")] = None,
    mode: Annotated[str, typer.Option(help="top or sicko")] = "top",
    roster: Annotated[Optional[Path], typer.Option(help="Roster JSON for random fives")] = None,
    elo_a: Annotated[Optional[int], typer.Option("--elo-a", help="Starting rating for team A")] = None,
    elo_b: Annotated[Optional[int], typer.Option("--elo-b", help="Starting rating for team B")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the summary as JSON")] = False,
):
    """Run a best-of-n style series between the same two teams."""
    mode = _check_mode(mode)
    seed = new_seed() if seed is None else seed
    settings = get_settings()
    ratings = None
    if elo_a is not None or elo_b is not None:
        ratings = (
            Rating(elo=settings.ELO_DEFAULT if elo_a is None else elo_a),
            Rating(elo=settings.ELO_DEFAULT if elo_b is None else elo_b),
        )
    try:
        team_a, team_b = _resolve_teams(teams, roster, seed)
        summary = run_series(team_a, team_b, mode, n=games, base_seed=seed, ratings=ratings)
    except SimulationInputError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps(summary.to_dict(), indent=2))
        return

    typer.echo(f"\n{summary.a.name} vs {summary.b.name}: {summary.n} games, base seed {summary.base_seed}")
    typer.echo(f"  Wins:    {summary.a.wins} - {summary.b.wins}")
    typer.echo(f"  Avg pts: {summary.a.avg} - {summary.b.avg}   (margin {summary.avg_margin})")
    typer.echo(f"  Blowouts {summary.blowouts} | Nailbiters {summary.nailbiters} | OT games {summary.ots}")
    for g in summary.shown:
        ot = " OT" if g.had_ot else ""
        typer.echo(f"    seed {g.seed:>10}  {g.a:3} - {g.b:<3} {g.winner}{ot}")
    if summary.ratings is not None:
        ra, rb = summary.ratings
        typer.echo(f"  Elo: {ra.elo} ({ra.wins}-{ra.losses})  vs  {rb.elo} ({rb.wins}-{rb.losses})")


@app.command()
def profile(
    teams: Annotated[Optional[Path], typer.Option("--teams", help="JSON file with two drafted teams")] = None,
    side: Annotated[str, typer.Option(help="Which team in the file: a or b")] = "a",
    seed: Annotated[int, typer.Option(help="Random-five seed when no teams file is given")] = 1,
    mode: Annotated[str, typer.Option(help="top or sicko")] = "top",
    roster: Annotated[Optional[Path], typer.Option(help="Roster JSON for random fives")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the profile as JSON")] = False,
):
    """Preview a lineup's tendencies without simulating a game."""
    mode = _check_mode(mode)
    if side.lower() not in ("a", "b"):
        _fail("--side must be a or b")
    try:
        if teams is not None:
            team_a, team_b = _load_teams_file(teams)
            team = team_a if side.lower() == "a" else team_b
        else:
            team = _random_team(roster, seed, "A")
        prof = quick_team_profile(team.lineup, mode)
    except SimulationInputError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps(prof.to_dict(), indent=2))
        return

    typer.echo(f"\n{team.name}")
    for line in _lineup_lines(team.lineup):
        typer.echo(line)
    typer.echo(f"  Pace {prof.pace} | TO {prof.to_rate:.3f} | OREB {prof.oreb_rate:.3f} | 3PA {prof.three_rate:.3f}")
    typer.echo(f"  Make 2 {prof.p2:.3f} | Make 3 {prof.p3:.3f}")
    typer.echo(f"  {' · '.join(prof.chips)}")


@app.command("random-five")
def random_five(
    seed: Annotated[Optional[int], typer.Option(help="Lineup seed (default: from the clock)")] = None,
    roster: Annotated[Optional[Path], typer.Option(help="Roster JSON")] = None,
    min_games: Annotated[Optional[float], typer.Option("--min-games", help="Minimum games played")] = None,
    min_minutes: Annotated[Optional[float], typer.Option("--min-minutes", help="Minimum minutes per game")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the lineup as JSON")] = False,
):
    """Draw a random starting five from seasons that actually played."""
    seed = new_seed() if seed is None else seed
    try:
        rows = filter_actually_played(load_roster(roster), min_games, min_minutes)
    except SimulationInputError as e:
        _fail(str(e))
    lineup = random_lineup(rows, seed)

    if as_json:
        typer.echo(json.dumps(lineup.model_dump(), indent=2))
        return
    typer.echo(f"\nRandom starting five (seed {seed}, {len(rows)} eligible seasons)")
    for line in _lineup_lines(lineup):
        typer.echo(line)


@app.command()
def elo(
    rating_a: Annotated[int, typer.Argument(help="Team A rating")],
    rating_b: Annotated[int, typer.Argument(help="Team B rating")],
    winner: Annotated[str, typer.Argument(help="A or B")],
    k: Annotated[Optional[int], typer.Option(help="K-factor (default from settings)")] = None,
):
    """Apply one game result to two Elo ratings."""
    k = get_settings().ELO_K if k is None else k
    try:
        res = elo_update(rating_a, rating_b, winner.upper(), k)
    except SimulationInputError as e:
        _fail(str(e))
    typer.echo(f"A: {rating_a} -> {res.na} ({res.na - rating_a:+d})")
    typer.echo(f"B: {rating_b} -> {res.nb} ({res.nb - rating_b:+d})")


if __name__ == "__main__":
    app()
