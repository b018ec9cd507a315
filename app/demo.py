"""
Frontier Sweeper - Interactive Replay

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import math
import streamlit as st
from typing import Any, Dict, List, Optional, Set, Tuple

from sweeper import COMPLETE, FAILED, ActionKind, CellState, MineField, StepEngine


def danger_color(danger: float) -> str:
    """Blend from pale yellow (low) to red (high)."""
    g = int(230 - 200 * danger)
    b = int(160 - 160 * danger)
    return f"#ff{g:02x}{b:02x}"


def render_round_html(
    field: MineField,
    step: Dict[str, Any],
    show_mines: bool = False,
) -> str:
    """Render the player view and danger estimates recorded for one round."""
    region = field.region
    if region.cols >= 40:
        cell_size, font_size = 12, "9px"
    elif region.cols >= 25:
        cell_size, font_size = 16, "11px"
    else:
        cell_size, font_size = 24, "14px"

    view = step["view_snapshot"]
    dangers = step["danger_snapshot"]
    emitted: Set[Tuple[int, int]] = {a.pos for a in step["emitted"]}
    failed_at: Optional[Tuple[int, int]] = step["failed_at"]

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for r in range(region.row_start, region.row_stop):
        html += "<tr>"
        for c in range(region.col_start, region.col_stop):
            pos = (r, c)
            state = CellState(int(view[pos]))
            danger = float(dangers[pos])

            if pos == failed_at:
                cell, bg, text_color = "*", "#ff0000", "#ffffff"
            elif state == CellState.MARKED:
                cell, bg, text_color = "@", "#ffa500", "#ffffff"
            elif state == CellState.FREE:
                n = field.probe(pos)
                cell = str(n) if n > 0 else ""
                bg, text_color = "#f0f0f0", "#0000ff"
            elif show_mines and field.is_mine(pos):
                cell, bg, text_color = "*", "#ffcccc", "#ff0000"
            elif not math.isnan(danger):
                cell = f"{int(danger * 10)}" if danger < 1.0 else "!"
                bg, text_color = danger_color(danger), "#333333"
            else:
                cell, bg, text_color = "", "#c0c0c0", "#666666"

            border = "2px solid #008000" if pos in emitted else "1px solid #999"
            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{cell}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def play(rows: int, cols: int, density: float, seed: int) -> None:
    field = MineField.random(rows, cols, density, seed=seed)
    engine = StepEngine(field, record_steps=True)
    status, payload = engine.run()
    st.session_state.field = field
    st.session_state.status = status
    st.session_state.payload = payload
    st.session_state.current_step = len(payload["steps_history"]) - 1


def main():
    st.set_page_config(
        page_title="Frontier Sweeper",
        page_icon="💣",
        layout="wide",
    )

    st.title("Frontier Sweeper")
    st.markdown("""
    Replays a game played from local count estimates, one round at a time.
    Shaded cells carry an estimate (tenths of danger); green borders mark the
    actions chosen for the next round.
    """)

    st.sidebar.header("Field Configuration")
    rows = st.sidebar.slider("Rows", 2, 30, 15)
    cols = st.sidebar.slider("Columns", 2, 80, 30)
    density = st.sidebar.slider("Mine density", 0.0, 0.4, 0.12, step=0.01)
    seed = int(st.sidebar.number_input("Seed", min_value=0, value=0, step=1))

    if "field" not in st.session_state:
        st.session_state.field = None
        st.session_state.status = None
        st.session_state.payload = None
        st.session_state.current_step = 0
        st.session_state.prev_settings = None
        st.session_state.seed = None

    current_settings = (rows, cols, density, seed)
    if st.session_state.prev_settings != current_settings:
        st.session_state.seed = seed
        play(rows, cols, density, seed)
        st.session_state.prev_settings = current_settings

    if st.sidebar.button("Next seed", type="primary"):
        st.session_state.seed += 1
        play(rows, cols, density, st.session_state.seed)

    st.sidebar.caption(f"Playing seed {st.session_state.seed}")

    field: MineField = st.session_state.field
    payload: Dict[str, Any] = st.session_state.payload
    steps_history: List[Dict[str, Any]] = payload["steps_history"]
    total_steps = len(steps_history)

    board_col, stats_col = st.columns([3, 1])

    with board_col:
        nav_col1, nav_col2, nav_col3, nav_col4 = st.columns([1, 1, 1, 2])
        with nav_col1:
            if st.button("⏮ First"):
                st.session_state.current_step = 0
        with nav_col2:
            if st.button("◀ Prev") and st.session_state.current_step > 0:
                st.session_state.current_step -= 1
        with nav_col3:
            if st.button("Next ▶") and st.session_state.current_step < total_steps - 1:
                st.session_state.current_step += 1
        with nav_col4:
            if st.button("Last ⏭"):
                st.session_state.current_step = total_steps - 1

        if total_steps > 1:
            round_display = st.slider(
                "Round", 1, total_steps, st.session_state.current_step + 1
            )
            st.session_state.current_step = round_display - 1

        step = steps_history[st.session_state.current_step]
        n_marks = sum(1 for a in step["emitted"] if a.kind is ActionKind.MARK)
        n_probes = len(step["emitted"]) - n_marks
        label = f"**Round {step['round']}/{total_steps}**: resolved {len(step['resolved'])} actions"

        if step["status"] == COMPLETE:
            st.success(f"{label}: all safe cells revealed.")
        elif step["status"] == FAILED:
            st.error(f"{label}: hit a mine at {step['failed_at']}.")
        else:
            st.info(f"{label}; next: {n_probes} probes, {n_marks} marks.")

        is_final = st.session_state.current_step == total_steps - 1
        st.markdown(render_round_html(field, step, show_mines=is_final), unsafe_allow_html=True)

    with stats_col:
        st.subheader("Game Statistics")
        st.metric("Result", "Complete" if st.session_state.status == COMPLETE else "Failed")
        st.metric("Mines", field.mine_count)
        st.metric("Rounds", payload["rounds_count"])
        st.metric("Probes", payload["probes_count"])
        st.metric("Marks", payload["marks_count"])
        st.text(f"Certain probes: {payload['certain_probes_count']}")
        st.text(f"Risky guesses: {payload['risky_guesses_count']}")
        st.text(f"Blind guesses: {payload['blind_guesses_count']}")
        st.text(f"Largest frontier: {payload['max_frontier']}")


if __name__ == "__main__":
    main()
