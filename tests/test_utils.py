"""Tests for input parsing, frame styling and trace export in utils.py."""

import plotly.graph_objects as go
import pytest

from engine import ReplacementPolicy, simulate
from utils import (
    DEFAULT_COLOR,
    HIT_COLOR,
    REPLACED_COLOR,
    ValidationError,
    aux_state_text,
    build_frames_figure,
    figure_to_html,
    format_ratio,
    format_trace,
    frame_colors,
    frame_comparison_rows,
    parse_frame_count,
    parse_reference_string,
    snapshot_filename,
    status_text,
    trace_filename,
)


class TestParseReferenceString:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1,2,3", [1, 2, 3]),
            (" 7, 0 ,1 ", [7, 0, 1]),
            ("4", [4]),
            ("1 2  3", [1, 2, 3]),
            ("-1,5", [-1, 5]),
        ],
    )
    def test_valid_input(self, text, expected) -> None:
        assert parse_reference_string(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_input(self, text) -> None:
        with pytest.raises(ValidationError, match="reference string"):
            parse_reference_string(text)

    @pytest.mark.parametrize("text", ["1,a,3", "1,,2", "1,2,", "1.5,2"])
    def test_bad_token(self, text) -> None:
        with pytest.raises(ValidationError, match="comma-separated numbers"):
            parse_reference_string(text)


class TestParseFrameCount:
    def test_parses_text(self) -> None:
        assert parse_frame_count(" 3 ") == 3

    def test_passes_integers_through(self) -> None:
        # Range checks belong to the engine
        assert parse_frame_count(0) == 0

    @pytest.mark.parametrize("value", ["", "  ", None])
    def test_missing(self, value) -> None:
        with pytest.raises(ValidationError, match="number of frames"):
            parse_frame_count(value)

    @pytest.mark.parametrize("value", ["x", "2.5", True])
    def test_not_a_whole_number(self, value) -> None:
        with pytest.raises(ValidationError, match="whole number"):
            parse_frame_count(value)


class TestFrameStyling:
    def test_initial_step_all_default(self) -> None:
        result = simulate(ReplacementPolicy.LRU, [1], 3)
        assert frame_colors(result[0]) == [DEFAULT_COLOR] * 3
        assert status_text(result[0]) == "Initial State"

    def test_fault_into_empty_frame_not_highlighted(self) -> None:
        result = simulate(ReplacementPolicy.LRU, [1], 2)
        assert frame_colors(result[1]) == [DEFAULT_COLOR, DEFAULT_COLOR]
        assert status_text(result[1]) == "FAULT on Page 1"

    def test_replacement_and_hit_colors(self) -> None:
        result = simulate(ReplacementPolicy.LRU, [1, 2, 3, 2], 2)
        assert frame_colors(result[3]) == [REPLACED_COLOR, DEFAULT_COLOR]
        assert status_text(result[3]) == "FAULT on Page 3 (Evicted Page 1)"
        assert frame_colors(result[4]) == [DEFAULT_COLOR, HIT_COLOR]
        assert status_text(result[4]) == "HIT on Page 2"

    def test_aux_state_text(self) -> None:
        lru = simulate(ReplacementPolicy.LRU, [1, 2, 1], 2)
        assert aux_state_text(lru.final_step) == "Recency (LRU to MRU): [2 -> 1]"
        clock = simulate(ReplacementPolicy.CLOCK, [1, 2, 3], 2)
        assert aux_state_text(clock.final_step) == "Use Bits: [1, 0]  Pointer: F1"

    def test_comparison_rows(self) -> None:
        result = simulate(ReplacementPolicy.CLOCK, [1, 2, 3], 2)
        assert frame_comparison_rows(result[3]) == [
            {"frame": "F0", "previous": "1", "current": "3"},
            {"frame": "F1", "previous": "2", "current": "2"},
        ]


class TestFramesFigure:
    def test_clock_figure(self) -> None:
        result = simulate(ReplacementPolicy.CLOCK, [1, 2], 3)
        fig = build_frames_figure(result.final_step)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 1
        assert list(fig.data[0].text) == ["1", "2", "-"]
        texts = [a.text for a in fig.layout.annotations]
        assert texts.count("pointer") == 1
        assert "use=1" in texts and "use=0" in texts
        assert fig.layout.title.text == "FAULT on Page 2"

    def test_lru_figure_shows_recency(self) -> None:
        result = simulate(ReplacementPolicy.LRU, [1, 2, 1], 2)
        fig = build_frames_figure(result.final_step)
        texts = [a.text for a in fig.layout.annotations]
        assert texts == ["Recency (LRU to MRU): [2 -> 1]"]

    def test_figure_to_html(self) -> None:
        result = simulate(ReplacementPolicy.LRU, [1], 1)
        html = figure_to_html(build_frames_figure(result[1]))
        assert "<html>" in html
        assert "plotly" in html


class TestTraceExport:
    def test_lru_trace(self) -> None:
        trace = format_trace(simulate(ReplacementPolicy.LRU, [1, 2, 3], 2))
        lines = trace.splitlines()
        assert lines[0] == "LRU Algorithm Execution Trace"
        assert lines[1] == "=" * len(lines[0])
        assert "Step 0: Initial State" in lines
        assert "  - Frames: [-, -]" in lines
        assert "  - Referencing Page: 3" in lines
        assert "  - Evicted Page: 1" in lines
        assert "  - Previous Frames: [1, 2]" in lines
        assert "  - Current Frames: [3, 2]" in lines
        assert "  - Recency (LRU to MRU): [2 -> 3]" in lines
        assert "  - Hit Ratio: 0.00%" in lines
        assert "  - Miss Ratio: 100.00%" in lines
        assert trace.count("Evicted Page") == 1

    def test_clock_trace(self) -> None:
        trace = format_trace(simulate(ReplacementPolicy.CLOCK, [1, 2, 1], 2))
        lines = trace.splitlines()
        assert lines[0] == "Clock Algorithm Execution Trace"
        assert "  - Result: Page Hit" in lines
        assert "  - Use Bits: [1, 1]" in lines
        assert "  - Pointer: 0" in lines
        assert "  - Page Hits: 1" in lines
        assert "Recency" not in trace

    def test_empty_run_trace(self) -> None:
        trace = format_trace(simulate(ReplacementPolicy.CLOCK, [], 1))
        assert "Step 1" not in trace
        assert "  - Hit Ratio: 0.00%" in trace

    def test_filenames(self) -> None:
        assert trace_filename(ReplacementPolicy.LRU) == "lru-algorithm-trace.txt"
        assert snapshot_filename(ReplacementPolicy.CLOCK) == "clock-algorithm-snapshot.html"


def test_format_ratio() -> None:
    assert format_ratio(25.0) == "25.00%"
    assert format_ratio(0) == "0.00%"
