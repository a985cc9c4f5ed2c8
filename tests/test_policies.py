"""Tests for resampling policies and the boundary root finder."""

from __future__ import annotations

import math

import pytest

from svg2pts.geometry.types import Point
from svg2pts.resample.policies import (
    EvenSplitPolicy,
    ExactPolicy,
    PassthroughPolicy,
    ResampleMode,
    make_policy,
    point_at_distance,
    solve_quadratic,
)

O = Point(0.0, 0.0)


# ---------------------------------------------------------------------------
# Root finding
# ---------------------------------------------------------------------------


class TestSolveQuadratic:
    def test_two_roots(self) -> None:
        # t² - 3t + 2
        assert sorted(solve_quadratic(2.0, -3.0, 1.0)) == pytest.approx([1.0, 2.0])

    def test_no_real_roots(self) -> None:
        assert solve_quadratic(1.0, 0.0, 1.0) == ()

    def test_double_root_at_zero(self) -> None:
        assert solve_quadratic(0.0, 0.0, 4.0) == (0.0,)

    def test_linear_fallback(self) -> None:
        assert solve_quadratic(-6.0, 3.0, 0.0) == (2.0,)

    def test_degenerate(self) -> None:
        assert solve_quadratic(1.0, 0.0, 0.0) == ()

    def test_stable_for_small_root(self) -> None:
        # t² - 1e8·t + 1: small root ~1e-8 suffers cancellation in the naive form
        roots = sorted(solve_quadratic(1.0, -1e8, 1.0))
        assert roots[0] == pytest.approx(1e-8, rel=1e-9)


class TestPointAtDistance:
    def test_interior_root(self) -> None:
        pt = point_at_distance(25.0, O, O, Point(10.0, 0.0))
        assert pt == Point(5.0, 0.0)

    def test_root_at_segment_start(self) -> None:
        pt = point_at_distance(25.0, O, Point(5.0, 0.0), Point(5.0, 10.0))
        assert pt == Point(5.0, 0.0)

    def test_too_short(self) -> None:
        assert point_at_distance(25.0, O, O, Point(3.0, 0.0)) is None

    def test_zero_length_segment(self) -> None:
        p = Point(5.0, 0.0)
        assert point_at_distance(25.0, O, p, p) is None

    def test_root_behind_start_ignored(self) -> None:
        """Of the two chord roots only the one ahead of the start counts."""
        pt = point_at_distance(25.0, O, Point(0.0, 3.0), Point(10.0, 3.0))
        assert pt is not None
        assert pt.x == pytest.approx(4.0)
        assert pt.distance_to(O) == pytest.approx(5.0)

    def test_start_past_distance_by_rounding(self) -> None:
        """A corner a hair beyond the distance, then a perpendicular turn."""
        start = Point(1.0, 0.0)
        end = Point(1.0, 1.0)
        assert point_at_distance(1.0 - 1e-12, O, start, end) == start

    def test_start_just_inside_distance(self) -> None:
        start = Point(1.0, 0.0)
        assert point_at_distance(1.0 + 1e-12, O, start, Point(1.0, 1.0)) == start

    def test_root_slightly_past_end_is_clamped(self) -> None:
        end = Point(5.0 - 1e-7, 0.0)
        pt = point_at_distance(25.0, O, O, end)
        assert pt == end


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------


class TestPassthrough:
    def test_returns_end(self) -> None:
        end = Point(3.0, -4.0)
        assert PassthroughPolicy().resample(O, O, end) == [end]


class TestExact:
    def test_carry_and_remainder(self) -> None:
        pts = ExactPolicy(2.0).resample(O, O, Point(10.0, 0.0))
        assert pts == [Point(x, 0.0) for x in (2.0, 4.0, 6.0, 8.0)]

    def test_skip_when_unreachable(self) -> None:
        assert ExactPolicy(5.0).resample(O, Point(1.0, 0.0), Point(2.0, 0.0)) == []

    def test_anchor_behind_segment(self) -> None:
        """Anchor left at a previous vertex: first point is measured from it."""
        pts = ExactPolicy(5.0).resample(Point(0.0, -4.0), O, Point(10.0, 0.0))
        assert pts[0].as_tuple() == pytest.approx((3.0, 0.0))
        for a, b in zip(pts, pts[1:]):
            assert a.distance_to(b) == pytest.approx(5.0)

    @pytest.mark.parametrize("distance", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_distance(self, distance: float) -> None:
        with pytest.raises(ValueError, match="distance"):
            ExactPolicy(distance)


class TestEvenSplit:
    @pytest.mark.parametrize(
        "distance, expected",
        [
            (3.0, 3),   # 10/3 = 3.33 -> 3 pieces
            (4.0, 3),   # 2.5 rounds half up
            (20.0, 1),  # 0.5 rounds up to a single piece
            (100.0, 1), # rounds to 0: end only
        ],
    )
    def test_piece_count(self, distance: float, expected: int) -> None:
        pts = EvenSplitPolicy(distance).resample(O, O, Point(10.0, 0.0))
        assert len(pts) == expected
        assert pts[-1] == Point(10.0, 0.0)

    def test_equal_pieces(self) -> None:
        pts = EvenSplitPolicy(3.0).resample(O, O, Point(10.0, 0.0))
        xs = [0.0] + [p.x for p in pts]
        gaps = [b - a for a, b in zip(xs, xs[1:])]
        assert gaps == pytest.approx([10.0 / 3] * 3)

    def test_anchor_ignored(self) -> None:
        pol = EvenSplitPolicy(5.0)
        seg = (Point(0.0, 0.0), Point(10.0, 0.0))
        assert pol.resample(Point(99.0, 99.0), *seg) == pol.resample(O, *seg)


class TestMakePolicy:
    @pytest.mark.parametrize("mode", list(ResampleMode))
    def test_zero_distance_is_passthrough(self, mode: ResampleMode) -> None:
        assert isinstance(make_policy(0.0, mode), PassthroughPolicy)

    def test_exact(self) -> None:
        pol = make_policy(2.5)
        assert isinstance(pol, ExactPolicy)
        assert pol.distance == 2.5

    def test_even_split_by_name(self) -> None:
        assert isinstance(make_policy(1.0, "even-split"), EvenSplitPolicy)

    @pytest.mark.parametrize("distance", [-0.5, math.nan])
    def test_invalid_distance(self, distance: float) -> None:
        with pytest.raises(ValueError):
            make_policy(distance)

    def test_unknown_mode(self) -> None:
        with pytest.raises(ValueError):
            make_policy(1.0, "wobbly")
