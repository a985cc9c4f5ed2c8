"""Resampling policies -- how one line segment becomes emitted points.

A policy is a stateless strategy selected once per run.  The resampler
owns all state and asks the policy, for each raw segment
``start -> end`` and the current anchor (last emitted point), which
points to emit.  The resampler then moves the anchor to the last
returned point.

Policies
--------
``PassthroughPolicy``
    Spacing disabled: every vertex is emitted verbatim.
``ExactPolicy``
    Keeps the straight-line distance between consecutive emitted points
    at exactly ``distance``, carrying any shortfall across vertices.
``EvenSplitPolicy``
    Splits each segment independently into ``round(len / distance)``
    equal pieces.  No carry-over between segments.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum

from svg2pts.geometry.types import Point

ROOT_EPSILON = 1e-6
"""Slack on ``t`` when accepting quadratic roots at segment boundaries."""

START_TOLERANCE = 1e-9
"""Relative slack on ``distance²`` for a segment start already on the circle."""


class ResampleMode(str, Enum):
    """Resampling policy selected at configuration time."""

    EXACT = "exact"
    EVEN_SPLIT = "even-split"


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


class ResamplePolicy(ABC):
    """Turn one segment into the points to emit."""

    @abstractmethod
    def resample(self, anchor: Point, start: Point, end: Point) -> list[Point]:
        """Return the points to emit for the segment ``start -> end``.

        Parameters
        ----------
        anchor : Point
            Last emitted point.
        start : Point
            Segment start (the resampler's last raw vertex).
        end : Point
            Segment end.

        Returns
        -------
        list[Point]
            Points in travel order; may be empty.
        """


class PassthroughPolicy(ResamplePolicy):
    """Emit every vertex unchanged."""

    def resample(self, anchor: Point, start: Point, end: Point) -> list[Point]:
        return [end]

    def __repr__(self) -> str:
        return "PassthroughPolicy()"


class _SpacedPolicy(ResamplePolicy):
    def __init__(self, distance: float) -> None:
        if not (distance > 0.0) or math.isinf(distance):
            raise ValueError(f"distance must be > 0, got {distance!r}")
        self.distance = distance
        self._distance_sq = distance * distance

    def __repr__(self) -> str:
        return f"{type(self).__name__}(distance={self.distance!r})"


# ---------------------------------------------------------------------------
# Exact
# ---------------------------------------------------------------------------


def solve_quadratic(c0: float, c1: float, c2: float) -> tuple[float, ...]:
    """Real roots of ``c2·t² + c1·t + c0 = 0``.

    Uses the numerically stable form (no cancellation between ``-b`` and
    the square root).  A vanishing leading coefficient falls back to the
    linear equation.
    """
    if c2 == 0.0:
        if c1 == 0.0:
            return ()
        return (-c0 / c1,)
    disc = c1 * c1 - 4.0 * c2 * c0
    if disc < 0.0:
        return ()
    sq = math.sqrt(disc)
    q = -0.5 * (c1 + math.copysign(sq, c1))
    if q == 0.0:
        # c1 == 0 and disc == 0, hence c0 == 0: double root at zero
        return (0.0,)
    return (q / c2, c0 / q)


def point_at_distance(
    distance_sq: float, anchor: Point, start: Point, end: Point
) -> Point | None:
    """Find the first point on ``start -> end`` at *distance* from *anchor*.

    Solves ``|anchor - lerp(start, end, t)|² = distance²`` and takes the
    smallest root in ``[-ROOT_EPSILON, 1 + ROOT_EPSILON]``, clamped into
    ``[0, 1]``.

    The resampler keeps every segment start within *distance* of the
    anchor, so a start measured at or beyond it (within
    ``START_TOLERANCE``, or further out through accumulated rounding) is
    the answer itself, at ``t = 0``.

    Returns
    -------
    Point | None
        The point, or ``None`` when the segment never reaches *distance*
        from *anchor* (or has zero length).
    """
    w = start - anchor
    v = end - start
    a = v.square_length()
    if a == 0.0:
        return None
    c0 = w.square_length() - distance_sq
    if c0 >= -START_TOLERANCE * distance_sq:
        return start
    roots = solve_quadratic(c0, 2.0 * v.dot(w), a)

    t_min = math.inf
    for t in roots:
        if -ROOT_EPSILON <= t <= 1.0 + ROOT_EPSILON and t < t_min:
            t_min = t
    if t_min == math.inf:
        return None
    return start.lerp(end, min(max(t_min, 0.0), 1.0))


class ExactPolicy(_SpacedPolicy):
    """Constant straight-line spacing measured from the last emitted point.

    A segment too short to reach ``distance`` from the anchor emits
    nothing; the shortfall carries into the next segment because the
    anchor stays put while the resampler advances its last vertex.
    """

    def resample(self, anchor: Point, start: Point, end: Point) -> list[Point]:
        first = point_at_distance(self._distance_sq, anchor, start, end)
        if first is None:
            return []

        out = [first]
        remaining = end - first
        remaining_len = remaining.length()
        if remaining_len < self.distance:
            return out

        step = self.distance / remaining_len
        i = 1
        t = step
        while t < 1.0:
            out.append(first.lerp(end, t))
            i += 1
            t = i * step
        return out


# ---------------------------------------------------------------------------
# EvenSplit
# ---------------------------------------------------------------------------


class EvenSplitPolicy(_SpacedPolicy):
    """Split each segment into equal pieces of roughly ``distance``."""

    def resample(self, anchor: Point, start: Point, end: Point) -> list[Point]:
        n = math.floor(start.distance_to(end) / self.distance + 0.5)
        out = [start.lerp(end, i / n) for i in range(1, n)] if n >= 2 else []
        out.append(end)
        return out


def make_policy(distance: float, mode: ResampleMode | str = ResampleMode.EXACT) -> ResamplePolicy:
    """Select the policy for a run.

    ``distance == 0`` always selects passthrough, whatever *mode* says.

    Raises
    ------
    ValueError
        If *distance* is negative or *mode* is unknown.
    """
    mode = ResampleMode(mode)
    if distance < 0.0 or math.isnan(distance):
        raise ValueError(f"distance must be >= 0, got {distance!r}")
    if distance == 0.0:
        return PassthroughPolicy()
    if mode is ResampleMode.EXACT:
        return ExactPolicy(distance)
    return EvenSplitPolicy(distance)
