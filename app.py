# app.py
import streamlit as st
from typing import Dict, List, Optional
import random

# ---- engine & roster live in the hoops_draft_sim package ----
from hoops_draft_sim import (
    SLOTS, Lineup, PlayerSeasonSnapshot, TeamEntry, SimulationInputError,
    filter_actually_played, load_roster, new_seed, players_for_slot,
    quick_team_profile, random_lineup, simulate_match,
)
from hoops_draft_sim.roster import best_season_by_player
from hoops_draft_sim.sim_logging import configure_logging

configure_logging()

st.set_page_config(page_title="Draft & Game Simulator", layout="wide")
st.title("🏀 Starting Five Draft & Game Simulator")

# ------------- compatibility for rerun across Streamlit versions -------------
def _rerun():
    if hasattr(st, "rerun"):
        st.rerun()
    else:  # older versions
        st.experimental_rerun()

# ----------------------------- Helpers -----------------------------
@st.cache_data
def draft_pool() -> List[PlayerSeasonSnapshot]:
    # one row per player: their best scoring season that actually counted
    played = filter_actually_played(load_roster())
    return list(best_season_by_player(played).values())

def player_label(p: PlayerSeasonSnapshot) -> str:
    return f"{p.player} • {p.pos or '?'} ({p.year})  |  {p.pts or 0:.1f} PPG, {p.trb or 0:.1f} RPG, {p.ast or 0:.1f} APG"

def render_chips(tags: List[str]):
    st.markdown("  ".join(f"`{t}`" for t in tags))

def render_bars(title: str, lineup: Lineup, mode: str):
    prof = quick_team_profile(lineup, mode)
    st.subheader(title)
    cols = st.columns(5)
    keys = [
        ("Pace", prof.pace, (56, 90)),
        ("Ball security", 1 - prof.to_rate, (0.6, 1.0)),
        ("Glass", prof.oreb_rate, (0.1, 0.4)),
        ("3PA rate", prof.three_rate, (0.2, 0.5)),
        ("Make 2", prof.p2, (0.3, 0.65)),
    ]
    for i, (label, val, (lo, hi)) in enumerate(keys):
        with cols[i]:
            pct = max(0, min(100, (val - lo) * (100 / (hi - lo))))
            st.markdown(f"**{label}**")
            st.progress(int(pct), text=f"{val:.0f}" if label == "Pace" else f"{val:.3f}")
    render_chips(prof.chips)

def team_box_rows(box) -> List[Dict]:
    return [
        {
            "Slot": x.slot,
            "Player": x.player,
            "MIN": x.min,
            "PTS": x.pts,
            "REB": x.reb,
            "AST": x.ast,
            "STL": x.stl,
            "BLK": x.blk,
            "TO": x.tov,
            "PF": x.pf,
        }
        for x in box
    ]

def build_team(name: str, picks: Dict[str, Optional[PlayerSeasonSnapshot]]) -> TeamEntry:
    lineup = Lineup(**{slot.lower(): p for slot, p in picks.items()})
    return TeamEntry(id=name.lower().replace(" ", "-"), name=name, lineup=lineup)

def taken_names() -> set:
    picks = list(st.session_state.team_a.values()) + list(st.session_state.team_b.values())
    return {p.player for p in picks if p is not None}

def _clear_pick_options_cache():
    for k in list(st.session_state.keys()):
        if isinstance(k, str) and k.startswith("opts_r"):
            del st.session_state[k]

# ----------------------------- State init -----------------------------
if "team_a" not in st.session_state:
    st.session_state.team_a = {slot: None for slot in SLOTS}
if "team_b" not in st.session_state:
    st.session_state.team_b = {slot: None for slot in SLOTS}

if "draft_round" not in st.session_state:
    st.session_state.draft_round = 1  # 1..5
if "draft_index" not in st.session_state:
    st.session_state.draft_index = 0  # 0 or 1 within a round
if "history" not in st.session_state:
    st.session_state.history = []  # stack of (team, slot, player)

def reset_all():
    st.session_state.team_a = {slot: None for slot in SLOTS}
    st.session_state.team_b = {slot: None for slot in SLOTS}
    st.session_state.draft_round = 1
    st.session_state.draft_index = 0
    st.session_state.history = []
    st.session_state.seed = ""
    _clear_pick_options_cache()

def random_fives():
    # both benches at once; the draft is over after this
    pool = filter_actually_played(load_roster())
    base = new_seed()
    taken = set()
    for key, lineup_seed in (("team_a", base), ("team_b", base + 1)):
        lineup = random_lineup(pool, lineup_seed, taken=taken)
        taken |= {p.player for p in lineup.players()}
        st.session_state[key] = {slot: p for slot, p in lineup.slots()}
    st.session_state.draft_round = 6
    st.session_state.draft_index = 0
    st.session_state.history = []
    _clear_pick_options_cache()

# ----------------------------- Sidebar controls -----------------------------
st.sidebar.header("Settings")
mode = st.sidebar.radio(
    "League",
    options=["top", "sicko"],
    format_func=lambda m: "Top League (high score wins)" if m == "top" else "Sicko League (low score wins)",
)
seed_in = st.sidebar.text_input("Random seed (optional)", value=st.session_state.get("seed", ""))
try:
    seed_val = int(seed_in) if seed_in.strip() else None
except ValueError:
    seed_val = None
    st.sidebar.warning("Seed must be an integer.")
st.session_state.seed = seed_in

if st.sidebar.button("🔄 Reset Draft"):
    reset_all()
    _rerun()

if st.sidebar.button("🎲 Random Fives"):
    random_fives()
    _rerun()

# ----------------------------- Snake Draft Logic -----------------------------
def current_team_name() -> str:
    # Snake: Round 1 A->B, Round 2 B->A, etc.
    r = st.session_state.draft_round
    idx = st.session_state.draft_index
    if r % 2 == 1:
        return "Team A" if idx == 0 else "Team B"
    return "Team B" if idx == 0 else "Team A"

def team_dict(name: str) -> Dict[str, Optional[PlayerSeasonSnapshot]]:
    return st.session_state.team_a if name == "Team A" else st.session_state.team_b

def unfilled_slots(name: str) -> List[str]:
    t = team_dict(name)
    return [slot for slot in SLOTS if t[slot] is None]

def make_pick(team_name: str, slot: str, player: PlayerSeasonSnapshot):
    team_dict(team_name)[slot] = player
    st.session_state.history.append((team_name, slot, player))

    if st.session_state.draft_index == 0:
        st.session_state.draft_index = 1
    else:
        st.session_state.draft_index = 0
        st.session_state.draft_round += 1

    _clear_pick_options_cache()

def undo_last():
    if not st.session_state.history:
        return
    team_name, slot, _ = st.session_state.history.pop()
    if st.session_state.draft_index == 1:
        st.session_state.draft_index = 0
    else:
        st.session_state.draft_index = 1
        st.session_state.draft_round = max(1, st.session_state.draft_round - 1)
    team_dict(team_name)[slot] = None
    _clear_pick_options_cache()

# ----------------------------- Draft UI -----------------------------
col_left, col_right = st.columns([1, 2], gap="large")

with col_left:
    st.subheader("🧢 Draft — On the Clock")
    if st.session_state.draft_round <= 5:
        team_name = current_team_name()
        st.markdown(f"**Round {st.session_state.draft_round}** · **{team_name}** is on the clock")

        slot_choice = st.selectbox("Choose slot", options=unfilled_slots(team_name), key="draft_slot")

        # best scorers first; guards for PG/SG, forwards for SF/PF, centers for C
        cands = players_for_slot(draft_pool(), slot_choice, taken=taken_names())

        # stable 5-option list for the current pick
        opt_key = f"opts_r{st.session_state.draft_round}_i{st.session_state.draft_index}_{team_name}_{slot_choice}"
        if opt_key not in st.session_state:
            k = min(5, len(cands))
            st.session_state[opt_key] = random.sample(cands, k) if k > 0 else []
        shown = st.session_state[opt_key]

        if st.button("🎲 Reshuffle options"):
            k = min(5, len(cands))
            st.session_state[opt_key] = random.sample(cands, k) if k > 0 else []
            _rerun()

        pick_choice = st.selectbox(
            "Pick player",
            options=shown if shown else cands,
            format_func=player_label,
            key="draft_player",
        )

        draft_cols = st.columns([1, 1, 1])
        with draft_cols[0]:
            if st.button("✅ Make Pick", disabled=pick_choice is None):
                make_pick(team_name, slot_choice, pick_choice)
                _rerun()
        with draft_cols[1]:
            if st.button("🤖 Auto-Pick (Best)"):
                if cands:
                    best = max(shown, key=lambda p: p.pts or 0) if shown else cands[0]
                    make_pick(team_name, slot_choice, best)
                    _rerun()
        with draft_cols[2]:
            if st.button("↩️ Undo Last Pick", disabled=len(st.session_state.history) == 0):
                undo_last()
                _rerun()
    else:
        st.success("Draft complete! You can simulate the game below.")

    st.divider()
    st.subheader("📋 Draft Board")
    b1, b2 = st.columns(2)
    for col, label, picks in ((b1, "Team A", st.session_state.team_a), (b2, "Team B", st.session_state.team_b)):
        with col:
            st.markdown(f"**{label}**")
            st.write("\n".join(f"{slot}: {picks[slot].player if picks[slot] else '—'}" for slot in SLOTS))

with col_right:
    l1, l2 = st.columns(2)
    with l1:
        render_bars("Team A — Profile", build_team("Team A", st.session_state.team_a).lineup, mode)
    with l2:
        render_bars("Team B — Profile", build_team("Team B", st.session_state.team_b).lineup, mode)


# ----------------------------- Simulate -----------------------------
ready = all(st.session_state.team_a.values()) and all(st.session_state.team_b.values())

st.divider()
simulate = st.button("🚀 Simulate Game", disabled=not ready)
if simulate and ready:
    team_a = build_team("Team A", st.session_state.team_a)
    team_b = build_team("Team B", st.session_state.team_b)
    seed = seed_val if seed_val is not None else new_seed()
    try:
        recap = simulate_match(seed, mode, team_a, team_b)
    except SimulationInputError as e:
        st.error(str(e))
        st.stop()

    a, b = recap.a, recap.b
    st.markdown("## Final")
    ot = f"  •  {recap.overtime.headline}" if recap.overtime else ""
    st.markdown(f"**Team A {a.score} — Team B {b.score}**  •  Pace: {recap.debug.pace}  •  Seed: {recap.seed}{ot}")
    st.caption(f"Halves: Team A {a.half1} / {a.half2}, Team B {b.half1} / {b.half2}")
    winner_name = a.name if recap.winner == "A" else b.name
    st.markdown(f"🏆 **{winner_name}** wins" + (" (fewest points, Sicko rules)" if mode == "sicko" else ""))

    if recap.player_of_game is not None:
        pog = recap.player_of_game
        st.info(f"**Player of the Game: {pog.player}** · {pog.line.pts} PTS, {pog.line.reb} REB, {pog.line.ast} AST  \n_{pog.blurb}_")

    ia, ib = st.columns(2)
    with ia:
        st.markdown("**Team A identity**")
        render_chips(recap.identity["A"])
    with ib:
        st.markdown("**Team B identity**")
        render_chips(recap.identity["B"])

    # Box scores
    box1, box2 = st.columns(2)
    with box1:
        st.markdown("### Team A Box")
        st.dataframe(team_box_rows(a.box), use_container_width=True)
    with box2:
        st.markdown("### Team B Box")
        st.dataframe(team_box_rows(b.box), use_container_width=True)

    st.markdown("### Win Probability (Team A)")
    st.line_chart({"Team A": [p.wp_a for p in recap.win_prob_timeline]})

    p1, p2 = st.columns(2)
    with p1:
        st.markdown("### Last Possessions")
        for line in recap.last_possessions:
            st.write(f"`{line.t}` {line.text}")
    with p2:
        st.markdown("### Late-Game Story")
        for line in recap.storyline:
            st.write(f"`{line.t}` {line.text}")

    st.success("Game complete. Draft new squads or change the seed and run again!")
elif not ready:
    st.info("Finish the 5-round draft (snake) to enable simulation.")
