"""Approximate arc length of segment streams.

Used only when the caller asks for a target point count instead of a
target spacing: ``target_distance = total_length / points``.

The walk mirrors the resampler's bookkeeping (current vertex, subpath
start) but emits nothing.  Curves are flattened at a coarse tolerance
since only an estimate is needed.
"""

from __future__ import annotations

import logging
from itertools import chain
from typing import Iterable

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

logger = logging.getLogger(__name__)

ESTIMATE_ACCURACY = 0.25
"""Coarse flattening tolerance (document units) for length estimates."""


def segments_length(
    segments: Iterable[PathSegment],
    accuracy: float | None = None,
) -> float:
    """Sum the lengths of one segment stream.

    Parameters
    ----------
    segments : Iterable[PathSegment]
        Absolute segments of one path.
    accuracy : float | None
        Caller's flattening accuracy.  The estimate never flattens tighter
        than ``ESTIMATE_ACCURACY``.

    Returns
    -------
    float
        Approximate total length in document units.
    """
    tol = ESTIMATE_ACCURACY if accuracy is None else max(ESTIMATE_ACCURACY, accuracy)
    total = 0.0
    start = ORIGIN
    current = ORIGIN

    for seg in segments:
        if isinstance(seg, MoveTo):
            start = current = seg.point
        elif isinstance(seg, LineTo):
            total += current.distance_to(seg.point)
            current = seg.point
        elif isinstance(seg, CurveTo):
            flat = flatten_cubic(current, seg.ctrl1, seg.ctrl2, seg.end, tol)
            total += polyline_length(chain((current,), flat))
            current = seg.end
        elif isinstance(seg, ClosePath):
            total += current.distance_to(start)
            current = start
        else:
            raise TypeError(f"Unknown path segment: {seg!r}")

    return total


def estimate_length(
    paths: Iterable[Iterable[PathSegment]],
    accuracy: float | None = None,
) -> float:
    """Approximate total arc length of several paths."""
    return sum(segments_length(p, accuracy) for p in paths)


def derive_distance(
    paths: Iterable[Iterable[PathSegment]],
    points: int,
    accuracy: float | None = None,
) -> float:
    """Derive a target spacing from a desired point count.

    Returns ``0.0`` (passthrough) when the estimated length is zero.

    Raises
    ------
    ValueError
        If *points* is not positive.
    """
    if points <= 0:
        raise ValueError(f"points must be > 0, got {points}")
    total = estimate_length(paths, accuracy)
    distance = total / points
    logger.debug(
        "Estimated path length %.6g -> distance %.6g for %d points",
        total, distance, points,
    )
    return distance


def polyline_length(points: Iterable[Point]) -> float:
    """Sum of Euclidean distances between consecutive points."""
    total = 0.0
    prev: Point | None = None
    for pt in points:
        if prev is not None:
            total += prev.distance_to(pt)
        prev = pt
    return total
