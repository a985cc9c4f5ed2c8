"""svgpathtools segments to absolute core segments.

The core understands lines and cubics only, so:

- ``QuadraticBezier`` is degree-elevated to an exact cubic.
- ``Arc`` is split into pieces of at most 90 degrees, each approximated by
  one cubic (standard ``4/3·tan(θ/4)`` handle length).

Every control point is then mapped through the element's composed
transform.  Affine maps send cubics to cubics, so no accuracy is lost.
"""

from __future__ import annotations

import cmath
import math
from typing import Iterator

import numpy as np
from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier
from svgpathtools import Path as SvgPath

from svg2pts.document.transforms import apply
from svg2pts.geometry.types import ClosePath, CurveTo, LineTo, MoveTo, PathSegment, Point

_Cubic = tuple[complex, complex, complex, complex]


def quad_to_cubic(start: complex, control: complex, end: complex) -> _Cubic:
    """Exact cubic equivalent of a quadratic Bézier."""
    return (
        start,
        start + (control - start) * (2.0 / 3.0),
        end + (control - end) * (2.0 / 3.0),
        end,
    )


def arc_to_cubics(arc: Arc) -> list[_Cubic]:
    """Approximate an elliptical arc with cubics of at most 90 degrees each.

    Uses the arc's centre parametrisation (``center``, ``theta``,
    ``delta`` in degrees, ``radius`` as ``rx + 1j*ry``, ``rotation`` in
    degrees).  The first and last cubic start and end exactly on the
    arc's own endpoints.
    """
    rx, ry = arc.radius.real, arc.radius.imag
    rot = cmath.exp(1j * math.radians(arc.rotation))
    n = max(1, math.ceil(abs(arc.delta) / 90.0 - 1e-9))
    step = math.radians(arc.delta) / n
    k = 4.0 / 3.0 * math.tan(step / 4.0)

    def on_ellipse(x: float, y: float) -> complex:
        return arc.center + rot * complex(rx * x, ry * y)

    cubics: list[_Cubic] = []
    theta = math.radians(arc.theta)
    prev = arc.start
    for i in range(n):
        t1 = theta + i * step
        t2 = t1 + step
        cos1, sin1 = math.cos(t1), math.sin(t1)
        cos2, sin2 = math.cos(t2), math.sin(t2)
        end = arc.end if i == n - 1 else on_ellipse(cos2, sin2)
        cubics.append((
            prev,
            on_ellipse(cos1 - k * sin1, sin1 + k * cos1),
            on_ellipse(cos2 + k * sin2, sin2 - k * cos2),
            end,
        ))
        prev = end
    return cubics


def _pt(mat: np.ndarray, z: complex) -> Point:
    return apply(mat, z.real, z.imag)


def _curve(mat: np.ndarray, cubic: _Cubic) -> CurveTo:
    return CurveTo(_pt(mat, cubic[1]), _pt(mat, cubic[2]), _pt(mat, cubic[3]))


def _segment(seg: object, mat: np.ndarray) -> Iterator[PathSegment]:
    if isinstance(seg, Line):
        yield LineTo(_pt(mat, seg.end))
    elif isinstance(seg, CubicBezier):
        yield _curve(mat, (seg.start, seg.control1, seg.control2, seg.end))
    elif isinstance(seg, QuadraticBezier):
        yield _curve(mat, quad_to_cubic(seg.start, seg.control, seg.end))
    elif isinstance(seg, Arc):
        if seg.radius.real == 0.0 or seg.radius.imag == 0.0:
            yield LineTo(_pt(mat, seg.end))
        else:
            for cubic in arc_to_cubics(seg):
                yield _curve(mat, cubic)
    else:
        raise TypeError(f"Unsupported svgpathtools segment: {seg!r}")


def svgpath_to_segments(path: SvgPath, mat: np.ndarray) -> list[PathSegment]:
    """Convert a parsed path to absolute core segments.

    Each continuous subpath starts with ``MoveTo``.  A closed subpath whose
    last segment is a straight line back to its start ends in
    ``ClosePath`` instead of that line.

    Parameters
    ----------
    path : svgpathtools.Path
        Parsed path data in element user space.
    mat : np.ndarray
        Composed 3x3 transform from user space to document space.
    """
    out: list[PathSegment] = []
    if len(path) == 0:
        return out

    for sub in path.continuous_subpaths():
        out.append(MoveTo(_pt(mat, sub.start)))
        segs = list(sub)
        closes = sub.isclosed() and isinstance(segs[-1], Line)
        if closes:
            segs = segs[:-1]
        for seg in segs:
            out.extend(_segment(seg, mat))
        if closes:
            out.append(ClosePath())
    return out
