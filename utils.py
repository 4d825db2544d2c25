# utils.py
"""
Input parsing, frame styling and export helpers for the visualizer.

Nothing here makes replacement decisions; these functions turn user text into
engine input and turn ``Step``/``SimulationResult`` objects back into
figures, table rows and trace text.
"""

from typing import Dict, List, Union

import plotly.graph_objects as go

from engine import ReplacementPolicy, SimulationResult, Step

# Frame highlight colors
DEFAULT_COLOR = "#00ccff"   # blue
HIT_COLOR = "#7cf57c"       # green
REPLACED_COLOR = "#ff5f5f"  # red
INITIAL_COLOR = "#facc15"   # yellow
EMPTY_LABEL = "-"


class ValidationError(ValueError):
    """Raised when user input cannot be turned into a reference string or frame count."""


# -----------------------------
# Input parsing
# -----------------------------
def parse_reference_string(text: str) -> List[int]:
    """
    Parse a reference string such as ``"7, 0, 1, 2"`` into page numbers.

    Tokens are comma separated; when the text has no comma, whitespace is
    accepted as the separator instead.

    Raises:
        ValidationError: If the text is empty or any token is not an integer
    """
    if text is None or not text.strip():
        raise ValidationError("Please enter a reference string.")

    separator = "," if "," in text else None
    pages = []
    for token in text.split(separator):
        token = token.strip()
        try:
            pages.append(int(token))
        except ValueError:
            raise ValidationError(
                f"Reference string must be comma-separated numbers (bad token: {token!r})."
            ) from None
    return pages


def parse_frame_count(value: Union[str, int, None]) -> int:
    """
    Parse the number of frames.

    Only the syntax is checked here; the engine rejects counts below 1.

    Raises:
        ValidationError: If the value is missing or not an integer
    """
    if isinstance(value, bool):
        raise ValidationError("Number of frames must be a whole number.")
    if isinstance(value, int):
        return value
    if value is None or not str(value).strip():
        raise ValidationError("Please enter the number of frames.")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"Number of frames must be a whole number, got {value!r}.") from None


def format_ratio(value: float) -> str:
    return f"{value:.2f}%"


def format_page(page) -> str:
    return EMPTY_LABEL if page is None else str(page)


def format_frames(frames) -> str:
    return "[" + ", ".join(format_page(p) for p in frames) + "]"


# -----------------------------
# Frame styling
# -----------------------------
def frame_colors(step: Step) -> List[str]:
    """
    Return one color per frame for the given step.

    The frame that received a page by evicting another is red, the frame that
    was hit is green and everything else is blue.
    """
    colors = [DEFAULT_COLOR] * len(step.frames)
    if step.slot is None:
        return colors
    if step.is_hit:
        colors[step.slot] = HIT_COLOR
    elif step.evicted is not None:
        colors[step.slot] = REPLACED_COLOR
    return colors


def status_text(step: Step) -> str:
    if step.page is None:
        return "Initial State"
    if step.is_hit:
        return f"HIT on Page {step.page}"
    text = f"FAULT on Page {step.page}"
    if step.evicted is not None:
        text += f" (Evicted Page {step.evicted})"
    return text


def status_color(step: Step) -> str:
    if step.page is None:
        return INITIAL_COLOR
    return HIT_COLOR if step.is_hit else REPLACED_COLOR


def aux_state_text(step: Step) -> str:
    """One-line description of the policy bookkeeping at this step."""
    if step.recency is not None:
        return "Recency (LRU to MRU): [" + " -> ".join(str(p) for p in step.recency) + "]"
    bits = ", ".join(str(b) for b in step.use_bits)
    return f"Use Bits: [{bits}]  Pointer: F{step.pointer}"


def build_frames_figure(step: Step, height: int = 260) -> go.Figure:
    """
    Create a bar chart with one box per frame for the given step.

    Clock runs show each frame's use bit under its box and mark the frame the
    pointer is on; LRU runs show the recency order in the title.
    """
    x = [f"F{i}" for i in range(len(step.frames))]
    text = [format_page(p) for p in step.frames]
    colors = frame_colors(step)

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=x,
        y=[1] * len(x),
        text=text,
        textposition="inside",
        textfont=dict(size=22, color="#ffffff"),
        marker=dict(color="#1e293b", line=dict(color=colors, width=4)),
        hovertext=[f"{label}: {page}" for label, page in zip(x, text)],
        hoverinfo="text",
    ))

    if step.use_bits is not None:
        for label, bit in zip(x, step.use_bits):
            fig.add_annotation(x=label, y=-0.12, text=f"use={bit}", showarrow=False)
        fig.add_annotation(
            x=x[step.pointer], y=1.05, text="pointer",
            showarrow=True, arrowhead=2, ax=0, ay=-35, font=dict(color=INITIAL_COLOR),
        )

    fig.update_layout(
        title=dict(text=status_text(step), font=dict(color=status_color(step))),
        height=height,
        showlegend=False,
        yaxis=dict(showticklabels=False, showgrid=False, range=[-0.25, 1.4]),
        margin=dict(t=60, b=20),
    )
    if step.recency is not None:
        fig.add_annotation(
            xref="paper", yref="paper", x=0.5, y=-0.15,
            text=aux_state_text(step), showarrow=False,
        )
    return fig


def frame_comparison_rows(step: Step) -> List[Dict[str, str]]:
    """Rows of previous vs current frame contents, for ``st.table``."""
    rows = []
    for i, (before, after) in enumerate(zip(step.previous_frames, step.frames)):
        rows.append({
            "frame": f"F{i}",
            "previous": format_page(before),
            "current": format_page(after),
        })
    return rows


# -----------------------------
# Export
# -----------------------------
def format_trace(result: SimulationResult) -> str:
    """Render every step of a run as a plain-text execution trace."""
    title = f"{result.policy} Algorithm Execution Trace"
    lines = [title, "=" * len(title)]

    for step in result:
        if step.index == 0:
            lines.append("Step 0: Initial State")
            lines.append(f"  - Frames: {format_frames(step.frames)}")
            lines.append("")
            continue

        lines.append(f"Step {step.index}:")
        lines.append(f"  - Referencing Page: {step.page}")
        lines.append(f"  - Result: {'Page Hit' if step.is_hit else 'Page Fault'}")
        if step.is_fault and step.evicted is not None:
            lines.append(f"  - Evicted Page: {step.evicted}")
        lines.append(f"  - Previous Frames: {format_frames(step.previous_frames)}")
        lines.append(f"  - Current Frames: {format_frames(step.frames)}")
        if step.recency is not None:
            lines.append(f"  - {aux_state_text(step)}")
        else:
            lines.append(f"  - Use Bits: [{', '.join(str(b) for b in step.use_bits)}]")
            lines.append(f"  - Pointer: {step.pointer}")
        lines.append("")

    lines.append("Summary")
    lines.append(f"  - Page Hits: {result.hits}")
    lines.append(f"  - Page Faults: {result.faults}")
    lines.append(f"  - Hit Ratio: {format_ratio(result.hit_ratio)}")
    lines.append(f"  - Miss Ratio: {format_ratio(result.miss_ratio)}")
    return "\n".join(lines) + "\n"


def trace_filename(policy: str) -> str:
    return f"{policy.lower()}-algorithm-trace.txt"


def snapshot_filename(policy: str) -> str:
    return f"{policy.lower()}-algorithm-snapshot.html"


def figure_to_html(fig: go.Figure) -> str:
    """Standalone HTML document for a figure (plotly.js loaded from CDN)."""
    return fig.to_html(full_html=True, include_plotlyjs="cdn")


def policy_label(policy: str) -> str:
    labels = {
        ReplacementPolicy.CLOCK: "Clock (Second Chance)",
        ReplacementPolicy.LRU: "LRU (Least Recently Used)",
    }
    return labels.get(policy, policy)
