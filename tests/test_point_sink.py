"""Tests for the buffered point writer.

Tests for svg2pts.output.point_sink:
    - Coordinate formatting (shortest round-trip text, no trailing .0)
    - Y flip against the page height
    - Capacity-driven flushing and exactly-once finalization
    - Error propagation from the stream
"""

from __future__ import annotations

import io
import math

import pytest

from svg2pts.geometry.types import Point
from svg2pts.output.point_sink import MAX_POINT_BYTES, PointSink, format_coord


class RecordingStream:
    """Byte stream that records every write and flush call."""

    def __init__(self, fail_on_write: bool = False) -> None:
        self.chunks: list[bytes] = []
        self.flushes = 0
        self.fail_on_write = fail_on_write

    def write(self, data) -> int:
        if self.fail_on_write:
            raise OSError("broken pipe")
        self.chunks.append(bytes(data))
        return len(data)

    def flush(self) -> None:
        self.flushes += 1

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class TestFormatCoord:
    @pytest.mark.parametrize(
        "value, text",
        [
            (3.0, "3"),
            (-4.0, "-4"),
            (0.0, "0"),
            (-0.0, "-0"),
            (0.1, "0.1"),
            (2.5, "2.5"),
            (1e16, "1e+16"),
            (1.5e-7, "1.5e-07"),
            (math.inf, "inf"),
        ],
    )
    def test_text(self, value: float, text: str) -> None:
        assert format_coord(value) == text

    @pytest.mark.parametrize(
        "value",
        [
            0.1 + 0.2,
            1.0 / 3.0,
            5e-324,
            1.7976931348623157e308,
            -2.2250738585072014e-308,
            123456789.123456789,
            -987.0000000000001,
        ],
    )
    def test_round_trip(self, value: float) -> None:
        stream = io.BytesIO()
        with PointSink(stream, page_height=0.0) as sink:
            sink.write(Point(value, -value))
        x, y = stream.getvalue().decode("ascii").split()
        assert float(x) == value
        assert float(y) == value


# ---------------------------------------------------------------------------
# Output format
# ---------------------------------------------------------------------------


class TestOutput:
    def test_y_flip(self) -> None:
        stream = io.BytesIO()
        with PointSink(stream, page_height=10.0) as sink:
            sink.write(Point(1.0, 2.0))
            sink.write(Point(0.5, 10.0))
        assert stream.getvalue() == b"1 8\n0.5 0\n"

    def test_line_scenario_without_flip_height(self) -> None:
        stream = io.BytesIO()
        with PointSink(stream) as sink:
            sink.write(Point(0.0, 0.0))
            sink.write(Point(3.0, 4.0))
        assert stream.getvalue() == b"0 0\n3 -4\n"

    def test_no_points_writes_nothing(self) -> None:
        stream = RecordingStream()
        PointSink(stream).finalize()
        assert stream.chunks == []
        assert stream.flushes == 1

    def test_count(self) -> None:
        sink = PointSink(io.BytesIO())
        for i in range(7):
            sink.write(Point(float(i), 0.0))
        assert sink.count == 7


# ---------------------------------------------------------------------------
# Buffering
# ---------------------------------------------------------------------------


class TestBuffering:
    def test_nothing_written_before_capacity(self) -> None:
        stream = RecordingStream()
        sink = PointSink(stream, page_height=1.0)
        for _ in range(100):
            sink.write(Point(1.0, 0.0))
        assert stream.chunks == []
        sink.finalize()
        assert stream.data == b"1 1\n" * 100
        assert len(stream.chunks) == 1

    def test_flush_when_worst_case_does_not_fit(self) -> None:
        stream = RecordingStream()
        sink = PointSink(stream, page_height=1.0, capacity=100)
        for _ in range(9):
            sink.write(Point(1.0, 0.0))
        assert stream.chunks == []  # 36 bytes used, 64 free
        sink.write(Point(1.0, 0.0))
        assert stream.chunks == [b"1 1\n" * 9]

    def test_small_capacity_preserves_order(self) -> None:
        stream = RecordingStream()
        points = [Point(i * 0.1, -i / 3.0) for i in range(500)]
        with PointSink(stream, page_height=0.0, capacity=MAX_POINT_BYTES) as sink:
            for p in points:
                sink.write(p)
        expected = "".join(
            f"{format_coord(p.x)} {format_coord(0.0 - p.y)}\n" for p in points
        ).encode("ascii")
        assert stream.data == expected
        assert len(stream.chunks) > 1

    @pytest.mark.parametrize("capacity", [0, 10, MAX_POINT_BYTES - 1])
    def test_capacity_too_small(self, capacity: int) -> None:
        with pytest.raises(ValueError, match="capacity"):
            PointSink(io.BytesIO(), capacity=capacity)


# ---------------------------------------------------------------------------
# Finalization
# ---------------------------------------------------------------------------


class TestFinalize:
    def test_idempotent(self) -> None:
        stream = RecordingStream()
        sink = PointSink(stream)
        sink.write(Point(1.0, 1.0))
        sink.finalize()
        sink.finalize()
        assert len(stream.chunks) == 1
        assert stream.flushes == 1
        assert sink.finalized

    def test_write_after_finalize(self) -> None:
        sink = PointSink(io.BytesIO())
        sink.finalize()
        with pytest.raises(ValueError, match="finalized"):
            sink.write(Point(0.0, 0.0))

    def test_context_manager_flushes_on_error(self) -> None:
        stream = RecordingStream()
        with pytest.raises(RuntimeError):
            with PointSink(stream, page_height=0.0) as sink:
                sink.write(Point(2.0, 0.0))
                raise RuntimeError("stop")
        assert stream.data == b"2 0\n"

    def test_flush_error_propagates(self) -> None:
        stream = RecordingStream(fail_on_write=True)
        sink = PointSink(stream)
        sink.write(Point(1.0, 1.0))
        with pytest.raises(OSError, match="broken pipe"):
            sink.finalize()
        sink.finalize()  # already finalized: not retried

    def test_flush_error_raised_from_context_manager(self) -> None:
        stream = RecordingStream(fail_on_write=True)
        with pytest.raises(OSError, match="broken pipe"):
            with PointSink(stream) as sink:
                sink.write(Point(1.0, 1.0))

    def test_original_error_wins_over_flush_error(self) -> None:
        stream = RecordingStream(fail_on_write=True)
        with pytest.raises(RuntimeError, match="stop"):
            with PointSink(stream) as sink:
                sink.write(Point(1.0, 1.0))
                raise RuntimeError("stop")

    def test_capacity_flush_error_propagates_from_write(self) -> None:
        stream = RecordingStream(fail_on_write=True)
        sink = PointSink(stream, capacity=MAX_POINT_BYTES)
        sink.write(Point(1.0, 1.0))
        with pytest.raises(OSError):
            sink.write(Point(2.0, 2.0))
