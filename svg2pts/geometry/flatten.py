"""Adaptive cubic Bézier flattening.

Converts one cubic segment into the vertices of a polyline whose maximum
deviation from the true curve does not exceed ``accuracy`` (document units).

Flatness criterion: both control points lie within ``accuracy`` of the
chord.  A cubic lies inside the convex hull of its control points, so the
curve itself then lies within ``accuracy`` of the chord.  Pieces that fail
the test are split at ``t = 0.5`` by de Casteljau and tested again.

The curve start is **never** yielded (the caller already holds it as its
current vertex); the final yielded point is exactly the curve end.
"""

from __future__ import annotations

import math
from typing import Iterator

from svg2pts.geometry.types import Point

MAX_DEPTH = 24
"""Subdivision cap; 2**24 pieces is far beyond any useful tolerance."""


def _deviation(p: Point, a: Point, chord: Point, chord_sq: float) -> float:
    """Distance from *p* to the chord segment starting at *a*."""
    v = p - a
    if chord_sq == 0.0:
        return v.length()
    t = min(max(v.dot(chord) / chord_sq, 0.0), 1.0)
    return (v - chord * t).length()


def is_flat(p1: Point, p2: Point, p3: Point, p4: Point, accuracy: float) -> bool:
    """Check whether both control points lie within *accuracy* of the chord."""
    chord = p4 - p1
    chord_sq = chord.square_length()
    return (
        _deviation(p2, p1, chord, chord_sq) <= accuracy
        and _deviation(p3, p1, chord, chord_sq) <= accuracy
    )


def split_cubic(
    p1: Point, p2: Point, p3: Point, p4: Point
) -> tuple[tuple[Point, Point, Point, Point], tuple[Point, Point, Point, Point]]:
    """Split a cubic at ``t = 0.5`` (de Casteljau)."""
    p12 = p1.lerp(p2, 0.5)
    p23 = p2.lerp(p3, 0.5)
    p34 = p3.lerp(p4, 0.5)
    p123 = p12.lerp(p23, 0.5)
    p234 = p23.lerp(p34, 0.5)
    mid = p123.lerp(p234, 0.5)
    return (p1, p12, p123, mid), (mid, p234, p34, p4)


def flatten_cubic(
    start: Point,
    ctrl1: Point,
    ctrl2: Point,
    end: Point,
    accuracy: float,
) -> Iterator[Point]:
    """Flatten a cubic Bézier to polyline vertices.

    Parameters
    ----------
    start : Point
        Curve start (not yielded).
    ctrl1, ctrl2 : Point
        Control points.
    end : Point
        Curve end (always the last yielded point).
    accuracy : float
        Maximum allowed deviation, must be > 0.

    Yields
    ------
    Point
        End point of every flat piece, in curve order.

    Raises
    ------
    ValueError
        If *accuracy* is not a positive finite number.
    """
    if not (accuracy > 0.0) or math.isinf(accuracy):
        raise ValueError(f"accuracy must be > 0, got {accuracy!r}")
    return _subdivide(start, ctrl1, ctrl2, end, accuracy, 0)


def _subdivide(
    p1: Point, p2: Point, p3: Point, p4: Point, accuracy: float, depth: int
) -> Iterator[Point]:
    if depth >= MAX_DEPTH or is_flat(p1, p2, p3, p4, accuracy):
        yield p4
        return
    left, right = split_cubic(p1, p2, p3, p4)
    yield from _subdivide(*left, accuracy, depth + 1)
    yield from _subdivide(*right, accuracy, depth + 1)
