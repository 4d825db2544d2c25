"""
Page Replacement Visualizer — Clock (Second Chance) & LRU

This application provides an interactive simulation and visualization of
page replacement in a fixed pool of physical memory frames:
    - Clock / Second Chance replacement with use bits and a sweeping pointer
    - Least Recently Used replacement with an explicit recency order
    - Step-by-step playback with a timeline, auto-play and speed control
    - Export of the full execution trace and of the current frame view

Built with Streamlit for the web interface and Plotly for visualizations.
The replacement decisions live in engine.py; this script only renders them.
"""

# =============================================================================
# IMPORTS
# =============================================================================

import logging
import time

import streamlit as st

from engine import ConfigurationError, ReplacementPolicy, simulate
from playback import MAX_SPEED, MIN_SPEED, PlaybackContext
from utils import (
    ValidationError,
    aux_state_text,
    build_frames_figure,
    figure_to_html,
    format_ratio,
    format_trace,
    frame_comparison_rows,
    parse_frame_count,
    parse_reference_string,
    policy_label,
    snapshot_filename,
    status_text,
    trace_filename,
)

logger = logging.getLogger(__name__)

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_REFERENCES = "7,0,1,2,0,3,0,4,2,3,0,3,2"
DEFAULT_FRAMES = 3
MIN_FRAMES = 1
MAX_FRAMES = 20
DEFAULT_SPEED = 1100  # slider value; delay = 2100 - speed ms


# Configure the Streamlit page
st.set_page_config(page_title="Page Replacement Visualizer", layout="wide")

# -----------------------------------------------------------------------------
# SIDEBAR NAVIGATION
# -----------------------------------------------------------------------------

page = st.sidebar.radio("Choose View", ["Simulator", "Concepts"])

st.title("Page Replacement Visualizer — Clock & LRU")

# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if page == "Concepts":
    st.header("Operating System Concepts Used in This Project")
    st.markdown(
        """
        ### **1. Frames and Pages**
        - Physical memory is a fixed number of *frames*; each holds one *page*.
        - A reference to a resident page is a **hit**; anything else is a **page fault**.

        ### **2. Page Replacement**
        When every frame is full, a fault must **evict** a resident page.

        #### **Clock (Second Chance)**
        - Every frame has a **use bit**, set whenever its page is loaded or hit.
        - On a fault the **clock pointer** sweeps the frames:
            - use bit 1 → clear it and move on (the page gets a second chance)
            - use bit 0 → replace this page, set its bit, move the pointer on
        - A hit never moves the pointer.

        #### **LRU (Least Recently Used)**
        - Keeps a **recency order** from least to most recently used.
        - A hit moves the page to the most-recent end.
        - A fault fills the first empty frame, or evicts the page at the least-recent end.

        ### **3. Hit and Miss Ratio**
        - Hit ratio = hits / references × 100, miss ratio = faults / references × 100.
        - Both are rounded to two decimals independently.
        """
    )
    st.stop()

# =============================================================================
# SIMULATOR PAGE - Main Interactive Interface
# =============================================================================

# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Simulation Settings")

policy = st.sidebar.selectbox(
    "Replacement Policy",
    options=list(ReplacementPolicy.ALL),
    format_func=policy_label,
)

frames_input = st.sidebar.number_input(
    "Number of frames",
    min_value=MIN_FRAMES,
    max_value=MAX_FRAMES,
    value=DEFAULT_FRAMES,
    step=1,
)

references_input = st.sidebar.text_area(
    "Reference string (comma separated page numbers)",
    value=DEFAULT_REFERENCES,
)

speed = st.sidebar.slider(
    "Playback speed",
    min_value=MIN_SPEED,
    max_value=MAX_SPEED,
    value=DEFAULT_SPEED,
    step=100,
)

if st.sidebar.button("Run Simulation"):
    try:
        references = parse_reference_string(references_input)
        frame_count = parse_frame_count(frames_input)
        result = simulate(policy, references, frame_count)
    except (ValidationError, ConfigurationError) as e:
        logger.info("Simulation not started: %s", e)
        st.sidebar.error(str(e))
    else:
        st.session_state.playback = PlaybackContext(result)
        st.sidebar.success(
            f"{policy_label(policy)}: {result.total_references} references, {frame_count} frames"
        )

# -----------------------------------------------------------------------------
# SESSION STATE - Playback Context
# -----------------------------------------------------------------------------

playback = st.session_state.get("playback")

if playback is None:
    st.info("Enter a reference string and click **Run Simulation** to start.")
    st.stop()

playback: PlaybackContext
playback.set_speed(speed)
result = playback.result

# =============================================================================
# MAIN CONTENT AREA - Two Column Layout
# =============================================================================

col1, col2 = st.columns([1, 2])

# -----------------------------------------------------------------------------
# LEFT COLUMN - Controls and Statistics
# -----------------------------------------------------------------------------

with col1:
    st.subheader("Controls")

    b1, b2, b3, b4 = st.columns(4)
    if b1.button("⏮ Back"):
        playback.step_backward()
    if b2.button("▶ Play"):
        playback.play()
    if b3.button("⏸ Pause"):
        playback.pause()
    if b4.button("Next ⏭"):
        playback.step_forward()

    # Timeline scrubbing (only meaningful with more than the initial step)
    if playback.last_index > 0:
        chosen = st.slider(
            "Timeline",
            min_value=0,
            max_value=playback.last_index,
            value=playback.current,
        )
        if chosen != playback.current:
            playback.jump_to(chosen)
    st.caption(f"Step: {playback.current} / {playback.last_index}")

    # ----- Statistics Display -----
    st.subheader("Statistics")
    step = playback.step
    st.metric("Page Faults", step.faults)
    st.metric("Page Hits", step.hits)

    ratios = playback.visible_ratios()
    if ratios is None:
        st.metric("Hit Ratio", "N/A")
        st.metric("Miss Ratio", "N/A")
    else:
        st.metric("Hit Ratio", format_ratio(ratios[0]))
        st.metric("Miss Ratio", format_ratio(ratios[1]))

# -----------------------------------------------------------------------------
# RIGHT COLUMN - Visualizations
# -----------------------------------------------------------------------------

with col2:
    st.subheader("Physical Frames")
    fig = build_frames_figure(step)
    st.plotly_chart(fig, use_container_width=True)
    st.write(aux_state_text(step))

    if step.index > 0:
        st.subheader("Previous → Current Frames")
        st.table(frame_comparison_rows(step))

    # ----- Export -----
    st.subheader("Export")
    e1, e2 = st.columns(2)
    e1.download_button(
        "Export Trace",
        data=format_trace(result),
        file_name=trace_filename(result.policy),
        mime="text/plain",
    )
    e2.download_button(
        "Export Snapshot",
        data=figure_to_html(fig),
        file_name=snapshot_filename(result.policy),
        mime="text/html",
    )

# =============================================================================
# FOOTER - Usage Tips
# =============================================================================

st.markdown("---")
st.markdown(
    "**Usage tips**:\n"
    "- Enter a comma separated reference string and click **Run Simulation**.\n"
    "- Use **Play** to animate, or **Back**/**Next** and the timeline to inspect any step.\n"
    "- Red marks the frame whose page was replaced, green marks a hit.\n"
    f"- Current step: {status_text(step)}"
)

# -----------------------------------------------------------------------------
# AUTO-PLAY - advance one step per rerun while playing
# -----------------------------------------------------------------------------

if playback.playing:
    time.sleep(playback.delay_ms / 1000.0)
    playback.tick()
    st.rerun()
