"""
Geometry primitives.

Point and path-segment vocabulary, cubic Bézier flattening, and arc
length estimation.  All coordinates are absolute document units.
"""

from svg2pts.geometry.flatten import flatten_cubic
from svg2pts.geometry.length import derive_distance, estimate_length
from svg2pts.geometry.types import (
    ClosePath,
    CurveTo,
    LineTo,
    MoveTo,
    Path,
    PathSegment,
    Point,
)

__all__ = [
    "Point",
    "PathSegment",
    "MoveTo",
    "LineTo",
    "CurveTo",
    "ClosePath",
    "Path",
    "flatten_cubic",
    "estimate_length",
    "derive_distance",
]
