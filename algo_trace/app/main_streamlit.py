"""Streamlit playback UI for the LRU cache trace."""

from __future__ import annotations

import json
import logging
import os
import sys
import time
import streamlit as st

# Ensure project root is on sys.path when run from arbitrary CWD
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from algo_trace.modules import config
from algo_trace.modules.describe import PHASE_HINTS, PHASE_LABELS, describe_step, node_status, operation_label
from algo_trace.modules.errors import InvalidOperationError
from algo_trace.modules.operations import DEFAULT_CAPACITY, DEFAULT_OPERATIONS, parse_operations, run_operations
from algo_trace.modules.playback import PlaybackController


logging.basicConfig(level=config.log_level())

NODE_COLORS = {
    "active": "#2563eb",
    "updated": "#d97706",
    "mru": "#0284c7",
    "lru": "#e11d48",
    "default": "#4b5563",
}


def _load(capacity: int, operations) -> None:
    st.session_state.player = PlaybackController(run_operations(capacity, operations))


st.set_page_config(page_title="LRU Cache Trace", layout="wide")
st.title("LRU Cache Step Trace")

if "player" not in st.session_state:
    _load(DEFAULT_CAPACITY, parse_operations(DEFAULT_OPERATIONS, limit=0))

with st.form("inputs"):
    capacity = st.number_input(
        "Capacity",
        min_value=config.min_capacity(),
        max_value=config.max_capacity(),
        value=DEFAULT_CAPACITY,
        step=1,
    )
    ops_text = st.text_area("Operations (JSON)", value=json.dumps(DEFAULT_OPERATIONS), height=100)
    if st.form_submit_button("Apply"):
        try:
            _load(int(capacity), parse_operations(ops_text))
        except InvalidOperationError as exc:
            st.error(str(exc))

player: PlaybackController = st.session_state.player

cols = st.columns(4)
if cols[0].button("Pause" if player.is_playing else "Play"):
    player.toggle()
if cols[1].button("Next"):
    player.next()
if cols[2].button("Previous"):
    player.previous()
if cols[3].button("Reset"):
    player.reset()

step = player.current_step
st.progress(player.progress)
st.markdown(f"**Step {step.seq + 1} / {player.trace.step_count()}** · {operation_label(step)} · {PHASE_LABELS[step.kind]}")
st.caption(PHASE_HINTS[step.kind])
st.write(describe_step(step))

left, right = st.columns(2)
with left:
    st.subheader("Recency (head → tail)")
    if not step.recency:
        st.info("Cache is empty.")
    for pos, entry in enumerate(step.recency):
        color = NODE_COLORS[node_status(step, pos)]
        st.markdown(
            f"<span style='color:{color};font-weight:700'>{entry.key} → {entry.value}</span>",
            unsafe_allow_html=True,
        )
    if step.evicted_key is not None:
        st.caption(f"Evicted key: {step.evicted_key}")
with right:
    st.subheader("Index")
    if step.index:
        st.table([{"key": e.key, "value": e.value} for e in step.index])

with st.expander("Step log"):
    for past in player.history():
        st.text(f"{past.seq + 1:>2}. {operation_label(past):<12} {describe_step(past)}")

if player.is_playing:
    time.sleep(config.step_interval_ms() / 1000)
    player.tick()
    st.rerun()
