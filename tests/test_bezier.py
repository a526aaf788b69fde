import math
import numpy as np
import pytest

from maths.curves.bezier import Bezier, CubicBezier, QuadBezier, LARGE
from maths.curves.curve import CubicSegment, Point, QuadSegment


class TestQuadBezier:
    """Evaluation, arc length and roots of quadratic Beziers."""

    def test_evaluation(self):
        quad = QuadBezier(0, 0, 1, 2, 2, 0)
        assert quad.get_x(0.5) == pytest.approx(1.0)
        assert quad.get_y(0.5) == pytest.approx(1.0)
        np.testing.assert_allclose(quad.point_at(0.3), [quad.get_x(0.3), quad.get_y(0.3)])

    def test_derivatives(self):
        quad = QuadBezier(0, 0, 1, 2, 2, 0)
        assert quad.get_x_prime(0.0) == pytest.approx(2.0)
        assert quad.get_y_prime(0.0) == pytest.approx(4.0)
        assert quad.get_y_prime(0.5) == pytest.approx(0.0)
        assert quad.dy_dx(0.0) == pytest.approx(2.0)

    def test_vertical_tangent_reports_large_slope(self):
        quad = QuadBezier(0, 0, 0, 1, 1, 1)
        assert quad.dy_dx(0.0) == LARGE

    def test_straight_line_length(self):
        assert QuadBezier(0, 0, 1, 0, 2, 0).length() == pytest.approx(2.0)

    def test_control_polygon_bounds_length(self):
        quad = QuadBezier(0, 0, 1, 2, 2, 0)
        assert quad.control_length == pytest.approx(2.0 * 5 ** 0.5)
        assert quad.length() < quad.control_length

    def test_closed_form_length_matches_quadrature(self):
        closed_form = QuadBezier(0, 0, 1, 2, 2, 0).length_at(1.0)
        quadrature = Bezier([[0, 0], [1, 2], [2, 0]]).length_at(1.0)
        assert closed_form == pytest.approx(quadrature, rel=1e-6)

    def test_partial_length(self):
        quad = QuadBezier(0, 0, 1, 2, 2, 0)
        # symmetric curve
        assert quad.length_at(0.5) == pytest.approx(0.5 * quad.length(), rel=1e-9)

    def test_collinear_control_points_folding_back(self):
        # runs from x=0 out to x=4/3 and back to x=1
        assert QuadBezier(0, 0, 2, 0, 1, 0).length() == pytest.approx(5.0 / 3.0)

    def test_degenerate_length(self):
        quad = QuadBezier(1, 1, 1, 1, 1, 1)
        assert quad.length() == 0.0
        assert quad.t_at_length(0.3) == pytest.approx(0.3)

    def test_t_at_length(self):
        quad = QuadBezier(0, 0, 1, 0, 2, 0)
        assert quad.t_at_length(0.5) == pytest.approx(0.5, abs=1e-6)
        assert quad.t_at_length(0.0) == 0.0
        assert quad.t_at_length(1.0) == 1.0

    def test_t_at_x(self):
        quad = QuadBezier(0, 0, 1, 2, 2, 0)
        assert quad.t_at_x(0.5) == [pytest.approx(0.25)]
        assert quad.y_at_x(1.0) == [pytest.approx(1.0)]

    def test_t_at_x_with_two_crossings(self):
        quad = QuadBezier(0, 0, 2, 1, 0, 2)
        roots = quad.t_at_x(0.5)
        assert len(roots) == 2
        for t in roots:
            assert quad.get_x(t) == pytest.approx(0.5)

    def test_control_point_assignment_invalidates_cache(self):
        quad = QuadBezier(0, 0, 1, 0, 2, 0)
        assert quad.length() == pytest.approx(2.0)
        quad.cx = 2
        quad.x1 = 4
        assert quad.length() == pytest.approx(4.0)
        assert quad.get_x(1.0) == pytest.approx(4.0)

    def test_control_points_are_read_only(self):
        quad = QuadBezier(0, 0, 1, 2, 2, 0)
        with pytest.raises(ValueError):
            quad.points[1][1] = 5
        quad.cy = 5
        assert quad.get_y(0.5) == pytest.approx(2.5)

    def test_interpolate_through_three_points(self):
        quad = QuadBezier()
        t = quad.interpolate(Point(0, 0), Point(1, 1), Point(2, 0))
        assert t == [pytest.approx(0.5)]
        assert quad.cx == pytest.approx(1.0)
        assert quad.cy == pytest.approx(2.0)
        assert quad.get_y(0.5) == pytest.approx(1.0)

    def test_segment_conversion(self):
        segment = QuadSegment(0, 0, 1, 0, 2, 0)
        converted = QuadBezier.from_segment(segment).to_segment()
        assert converted.end == Point(2.0, 0.0)
        assert converted.length == pytest.approx(2.0)


class TestCubicBezier:
    """Cubic Beziers and de Casteljau subdivision."""

    def test_straight_line_length(self):
        assert CubicBezier(0, 0, 1, 0, 2, 0, 3, 0).length() == pytest.approx(3.0)

    def test_t_at_x_linear_in_x(self):
        cubic = CubicBezier(0, 0, 1, 1, 2, 1, 3, 0)
        assert cubic.t_at_x(1.0) == [pytest.approx(1.0 / 3.0)]
        assert cubic.y_at_x(1.5) == [pytest.approx(0.75)]

    def test_subdivide(self):
        cubic = CubicBezier(0, 0, 0, 1, 1, 1, 1, 0)
        left, right = cubic.subdivide(0.5)
        assert isinstance(left, CubicBezier)
        assert left.x0 == 0.0 and left.y0 == 0.0
        assert right.x1 == 1.0 and right.y1 == 0.0
        np.testing.assert_allclose(left.point_at(1.0), cubic.point_at(0.5))
        np.testing.assert_allclose(right.point_at(0.0), cubic.point_at(0.5))
        np.testing.assert_allclose(left.point_at(0.5), cubic.point_at(0.25))
        assert left.length() + right.length() == pytest.approx(cubic.length(), rel=1e-6)

    def test_subdivide_outside_unit_interval(self):
        cubic = CubicBezier(0, 0, 0, 1, 1, 1, 1, 0)
        assert cubic.subdivide(0.0) == []
        assert cubic.subdivide(1.5) == []

    def test_segment_conversion(self):
        segment = CubicSegment(0, 0, 0, 1, 1, 1, 1, 0)
        assert CubicBezier.from_segment(segment).to_segment() == segment

    def test_speed(self):
        cubic = CubicBezier(0, 0, 1, 0, 2, 0, 3, 0)
        assert cubic.speed(0.4) == pytest.approx(3.0)
        assert math.isclose(cubic.dy_dx(0.4), 0.0, abs_tol=1e-12)
