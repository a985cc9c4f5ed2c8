"""Point and path-segment vocabulary -- the contract between documents and the core.

Every segment is an immutable, slotted dataclass carrying **absolute**
document-space coordinates (any element transform has already been
applied by the document adapter).  The core never sees relative
commands, arcs or quadratic curves.

Grouping
--------
A *Subpath* is the run of segments from one ``MoveTo`` up to the next
``MoveTo`` (or the end of the path).  A *Path* is the ordered list of
segments of one visible document element.
"""

from __future__ import annotations

import math
from abc import ABC
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Point
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """2D point in document units (double precision).

    Parameters
    ----------
    x, y : float
        Coordinates in document space (top-left origin, +Y down).
    """

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Point:
        return Point(self.x * k, self.y * k)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y

    def square_length(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to *other*."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: Point, t: float) -> Point:
        """Linear interpolation: ``self`` at ``t=0``, *other* at ``t=1``."""
        return Point(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
        )

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


ORIGIN = Point(0.0, 0.0)

# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PathSegment(ABC):
    """Base class for all path segments."""

    pass


@dataclass(frozen=True, slots=True)
class MoveTo(PathSegment):
    """Start a new subpath at *point* (always emitted)."""

    point: Point


@dataclass(frozen=True, slots=True)
class LineTo(PathSegment):
    """Straight segment from the current vertex to *point*."""

    point: Point


@dataclass(frozen=True, slots=True)
class CurveTo(PathSegment):
    """Cubic Bézier from the current vertex.

    Parameters
    ----------
    ctrl1, ctrl2 : Point
        Control points.
    end : Point
        End point.  The start point is implied by the previous segment.
    """

    ctrl1: Point
    ctrl2: Point
    end: Point


@dataclass(frozen=True, slots=True)
class ClosePath(PathSegment):
    """Straight segment back to the start of the current subpath."""

    pass


Path = list[PathSegment]
"""Ordered segments of one visible document element."""
