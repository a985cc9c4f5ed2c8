"""SVG ``transform`` attribute parsing as 3x3 affine matrices.

Matrices use the SVG column convention::

    | a c e |
    | b d f |
    | 0 0 1 |

so a point maps as ``M @ [x, y, 1]``.  Nested transforms compose by
right-multiplication: ``parent @ local``.
"""

from __future__ import annotations

import math
import re

import numpy as np

from svg2pts.geometry.types import Point

_TRANSFORM_RE = re.compile(r"([a-zA-Z]+)\s*\(([^)]*)\)")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

IDENTITY = np.identity(3)


def parse_numbers(text: str) -> list[float]:
    """Extract all numbers from an SVG attribute value."""
    return [float(x) for x in _NUMBER_RE.findall(text)]


def _matrix(a: float, b: float, c: float, d: float, e: float, f: float) -> np.ndarray:
    return np.array([
        [a, c, e],
        [b, d, f],
        [0.0, 0.0, 1.0],
    ])


def _translate(tx: float, ty: float = 0.0) -> np.ndarray:
    return _matrix(1.0, 0.0, 0.0, 1.0, tx, ty)


def _rotate(angle: float, cx: float = 0.0, cy: float = 0.0) -> np.ndarray:
    r = math.radians(angle)
    cos, sin = math.cos(r), math.sin(r)
    rot = _matrix(cos, sin, -sin, cos, 0.0, 0.0)
    if cx == 0.0 and cy == 0.0:
        return rot
    return _translate(cx, cy) @ rot @ _translate(-cx, -cy)


def _one(name: str, nums: list[float]) -> np.ndarray:
    if name == "matrix":
        if len(nums) != 6:
            raise ValueError(f"matrix() takes 6 values, got {len(nums)}")
        return _matrix(*nums)
    if name == "translate" and len(nums) in (1, 2):
        return _translate(*nums)
    if name == "scale" and len(nums) in (1, 2):
        sx = nums[0]
        sy = nums[1] if len(nums) > 1 else sx
        return _matrix(sx, 0.0, 0.0, sy, 0.0, 0.0)
    if name == "rotate" and len(nums) in (1, 3):
        return _rotate(*nums)
    if name == "skewX" and len(nums) == 1:
        return _matrix(1.0, 0.0, math.tan(math.radians(nums[0])), 1.0, 0.0, 0.0)
    if name == "skewY" and len(nums) == 1:
        return _matrix(1.0, math.tan(math.radians(nums[0])), 0.0, 1.0, 0.0, 0.0)
    raise ValueError(f"Invalid transform: {name}({', '.join(map(str, nums))})")


def parse_transform(text: str | None) -> np.ndarray:
    """Parse an SVG transform list into one matrix.

    Parameters
    ----------
    text : str | None
        Attribute value, e.g. ``"translate(10) rotate(45 5 5)"``.
        ``None`` or empty returns the identity.

    Returns
    -------
    np.ndarray
        3x3 affine matrix (float64).

    Raises
    ------
    ValueError
        If a transform function is unknown or has the wrong arity.
    """
    mat = IDENTITY
    if not text:
        return mat
    for name, args in _TRANSFORM_RE.findall(text):
        mat = mat @ _one(name, parse_numbers(args))
    return mat


def apply(mat: np.ndarray, x: float, y: float) -> Point:
    """Map ``(x, y)`` through *mat*."""
    return Point(
        float(mat[0, 0] * x + mat[0, 1] * y + mat[0, 2]),
        float(mat[1, 0] * x + mat[1, 1] * y + mat[1, 2]),
    )
