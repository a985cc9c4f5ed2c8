"""Distance resampler -- segment stream to evenly spaced output points.

State machine over absolute path segments.  Curves are flattened first and
their points fed through ``line_to`` like any other vertex.

State
-----
``subpath_start``
    Point of the most recent ``MoveTo``; target of ``ClosePath``.
``anchor``
    Last point actually emitted.  Spacing is measured from here.
``last_vertex``
    Last raw endpoint seen; start of the next segment.

``MoveTo`` is a hard anchor: it is emitted in every mode.  Everything else
is delegated to the active ``ResamplePolicy``.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from svg2pts.geometry.flatten import flatten_cubic
from svg2pts.geometry.types import (
    ORIGIN,
    ClosePath,
    CurveTo,
    LineTo,
    MoveTo,
    PathSegment,
    Point,
)
from svg2pts.resample.policies import PassthroughPolicy, ResamplePolicy

logger = logging.getLogger(__name__)

Emit = Callable[[Point], None]
"""Receiver for emitted points (usually ``PointSink.write``)."""


class DistanceResampler:
    """Resample path segments at a fixed spacing.

    Parameters
    ----------
    emit : Callable[[Point], None]
        Called once per emitted point, in order.  Exceptions raised by
        *emit* (I/O failures) propagate unchanged.
    policy : ResamplePolicy
        Spacing strategy; ``PassthroughPolicy`` disables resampling.
    """

    def __init__(self, emit: Emit, policy: ResamplePolicy | None = None) -> None:
        self._emit = emit
        self.policy: ResamplePolicy = policy or PassthroughPolicy()
        self.subpath_start: Point = ORIGIN
        self.anchor: Point = ORIGIN
        self.last_vertex: Point = ORIGIN
        self.emitted = 0

    # ------------------------------------------------------------------
    # Segment operations
    # ------------------------------------------------------------------

    def move_to(self, point: Point) -> None:
        """Start a new subpath; *point* is always emitted."""
        self.subpath_start = point
        self.anchor = point
        self.last_vertex = point
        self._write(point)

    def line_to(self, end: Point) -> None:
        """Resample the segment ``last_vertex -> end``."""
        for pt in self.policy.resample(self.anchor, self.last_vertex, end):
            self._write(pt)
            self.anchor = pt
        self.last_vertex = end

    def curve_to(self, ctrl1: Point, ctrl2: Point, end: Point, accuracy: float) -> None:
        """Flatten a cubic from ``last_vertex`` and resample its polyline."""
        for pt in flatten_cubic(self.last_vertex, ctrl1, ctrl2, end, accuracy):
            self.line_to(pt)

    def close_path(self) -> None:
        """Resample the closing segment back to ``subpath_start``."""
        self.line_to(self.subpath_start)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def feed(self, segment: PathSegment, accuracy: float) -> None:
        """Process one segment to completion."""
        if isinstance(segment, LineTo):
            self.line_to(segment.point)
        elif isinstance(segment, CurveTo):
            self.curve_to(segment.ctrl1, segment.ctrl2, segment.end, accuracy)
        elif isinstance(segment, MoveTo):
            self.move_to(segment.point)
        elif isinstance(segment, ClosePath):
            self.close_path()
        else:
            raise TypeError(f"Unknown path segment: {segment!r}")

    def feed_all(self, segments: Iterable[PathSegment], accuracy: float) -> None:
        for segment in segments:
            self.feed(segment, accuracy)

    def _write(self, point: Point) -> None:
        self._emit(point)
        self.emitted += 1


def resample_segments(
    segments: Iterable[PathSegment],
    policy: ResamplePolicy | None = None,
    accuracy: float = 0.05,
) -> list[Point]:
    """Resample *segments* into a list (convenience for callers and tests)."""
    out: list[Point] = []
    DistanceResampler(out.append, policy).feed_all(segments, accuracy)
    return out
