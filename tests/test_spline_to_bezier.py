import pytest

from maths.config import ConverterConfig
from maths.curves.curve import Point
from maths.splines import CatmullRomSpline, CubicBezierSpline, NaturalCubicSpline, SplineToBezier
from maths.splines.spline_to_bezier import catmull_rom_to_cubic


class UnknownSpline:
    spline_type = None

    def point_count(self):
        return 3

    def get_points(self):
        return [Point(0, 0), Point(1, 1), Point(2, 0)]


def assert_well_formed(flattening, knots):
    quads, index = flattening.quads, flattening.index
    assert len(index) == len(knots)
    assert index[0] == 0
    assert index[-1] == len(quads)
    assert all(a <= b for a, b in zip(index, index[1:]))

    for i in range(len(knots) - 1):
        segment = flattening.segment_quads(i)
        assert segment
        assert segment[0].x0 == pytest.approx(knots[i].x)
        assert segment[0].y0 == pytest.approx(knots[i].y)
        assert segment[-1].x1 == pytest.approx(knots[i + 1].x)
        assert segment[-1].y1 == pytest.approx(knots[i + 1].y)

    for previous, current in zip(quads, quads[1:]):
        assert current.x0 == pytest.approx(previous.x1)
        assert current.y0 == pytest.approx(previous.y1)


class TestDegenerateInput:
    """Inputs with fewer than three knots."""

    def test_no_spline(self):
        flattening = SplineToBezier().convert(None)
        assert flattening.quads == []
        assert flattening.index == []

    def test_no_knots(self):
        flattening = SplineToBezier().convert(CubicBezierSpline())
        assert flattening.quads == []
        assert flattening.index == []

    def test_single_knot(self):
        flattening = SplineToBezier().convert(CatmullRomSpline([1], [2]))
        assert len(flattening.quads) == 1
        quad = flattening.quads[0]
        assert (quad.x0, quad.y0, quad.cx, quad.cy, quad.x1, quad.y1) == (1, 2, 1, 2, 1, 2)
        assert quad.length == 0.0
        assert flattening.index == [0, 1]

    def test_two_knots(self):
        flattening = SplineToBezier().convert(CubicBezierSpline([0, 4], [0, 2]))
        quad = flattening.quads[0]
        assert (quad.x0, quad.y0, quad.cx, quad.cy, quad.x1, quad.y1) == (0, 0, 2, 1, 4, 2)
        assert flattening.index == [0, 1]

    def test_unsupported_spline(self):
        flattening = SplineToBezier().convert(UnknownSpline())
        assert flattening.quads == []


class TestCatmullRom:
    """Catmull-Rom splines go through the cubic to quad converter."""

    def test_conversion_matrix(self):
        cubic = catmull_rom_to_cubic(Point(-1, 0), Point(0, 0), Point(1, 0), Point(2, 0))
        assert (cubic.x0, cubic.cx, cubic.cx1, cubic.x1) == (0, pytest.approx(1.0 / 3.0), pytest.approx(2.0 / 3.0), 1)

    def test_arch(self):
        spline = CatmullRomSpline([0, 1, 3, 4], [0, 2, 2, 0])
        flattening = SplineToBezier().convert(spline, 0.01)
        assert_well_formed(flattening, spline.get_points())
        for i in range(3):
            assert 1 <= len(flattening.segment_quads(i)) <= 3
        assert all(q.length > 0 for q in flattening.quads)

    def test_mirrored_segments_use_the_same_number_of_quads(self):
        spline = CatmullRomSpline([0, 1, 3, 4], [0, 2, 2, 0])
        flattening = SplineToBezier().convert(spline, 0.01)
        assert len(flattening.segment_quads(0)) == len(flattening.segment_quads(2))

    def test_closed(self):
        spline = CatmullRomSpline([0, 2, 4], [0, 2, 0], closed=True)
        flattening = SplineToBezier().convert(spline)
        assert_well_formed(flattening, spline.get_points())
        assert (flattening.quads[-1].x1, flattening.quads[-1].y1) == (0, 0)


class TestCubicBezier:
    """Cubic Bezier splines convert segment by segment."""

    def test_zigzag(self):
        spline = CubicBezierSpline([0, 2, 4, 6], [0, 3, 0, 3])
        flattening = SplineToBezier().convert(spline)
        assert_well_formed(flattening, spline.get_points())

    def test_closed(self):
        spline = CubicBezierSpline([0, 2, 4], [0, 2, 0], closed=True)
        flattening = SplineToBezier().convert(spline)
        assert len(flattening.index) == 4
        assert_well_formed(flattening, spline.get_points())

    def test_straight_knots(self):
        spline = CubicBezierSpline([0, 1, 2], [0, 0, 0])
        flattening = SplineToBezier().convert(spline)
        assert flattening.index == [0, 1, 2]

    def test_tighter_tolerance_never_uses_fewer_quads(self):
        spline = CubicBezierSpline([0, 2, 4, 6], [0, 3, 0, 3])
        converter = SplineToBezier()
        assert len(converter.convert(spline, 0.008).quads) >= len(converter.convert(spline, 0.1).quads)


class TestCartesian:
    """Natural cubic splines are approximated with at most a few quads per segment."""

    def test_linear_data_needs_one_quad_per_segment(self):
        spline = NaturalCubicSpline([0, 1, 2, 3], [1, 2, 3, 4])
        flattening = SplineToBezier().convert(spline)
        assert flattening.index == [0, 1, 2, 3]
        assert flattening.quads[0].length == pytest.approx(2 ** 0.5)
        assert_well_formed(flattening, spline.get_points())

    def test_quad_limit_per_segment(self):
        spline = NaturalCubicSpline([0, 1, 2, 3, 4], [0, 5, -5, 5, 0])
        flattening = SplineToBezier().convert(spline, 0.008)
        assert_well_formed(flattening, spline.get_points())
        for i in range(4):
            assert 1 <= len(flattening.segment_quads(i)) <= 3
        assert all(q.length > 0 for q in flattening.quads)

    def test_configured_quad_limit(self):
        spline = NaturalCubicSpline([0, 1, 2, 3, 4], [0, 5, -5, 5, 0])
        flattening = SplineToBezier(ConverterConfig(max_quads_per_segment=1)).convert(spline)
        assert flattening.index == [0, 1, 2, 3, 4]

    def test_tighter_tolerance_never_uses_fewer_quads(self):
        spline = NaturalCubicSpline([0, 2, 4, 6], [1, 4, 2, 5])
        converter = SplineToBezier()
        assert len(converter.convert(spline, 0.008).quads) >= len(converter.convert(spline, 0.2).quads)


class TestTolerance:
    def test_tolerance_below_minimum_is_clamped(self):
        spline = CatmullRomSpline([0, 1, 3, 4], [0, 2, 2, 0])
        converter = SplineToBezier()
        clamped = converter.convert(spline, 0.0001)
        minimum = converter.convert(spline, 0.008)
        assert [q.to_dict() for q in clamped.quads] == [q.to_dict() for q in minimum.quads]

    def test_missing_tolerance_uses_default(self):
        spline = CatmullRomSpline([0, 1, 3, 4], [0, 2, 2, 0])
        converter = SplineToBezier()
        assert converter.convert(spline).index == converter.convert(spline, 0.01).index
        assert converter.convert(spline, -3).index == converter.convert(spline, 0.01).index


class TestIntersect:
    """Control point placement for cartesian quads."""

    def test_crossing_tangents(self):
        assert SplineToBezier().intersect(0, 0, 1, 2, 0, -1) == (pytest.approx(1.0), pytest.approx(1.0))

    def test_parallel_tangents_use_midpoint(self):
        assert SplineToBezier().intersect(0, 0, 1, 2, 2, 1) == (1.0, 1.0)

    def test_intersection_outside_interval_uses_midpoint(self):
        assert SplineToBezier().intersect(0, 0, 1, 2, 0, 1.5) == (1.0, 0.0)

    def test_vertical_tangents(self):
        converter = SplineToBezier()
        assert converter.intersect(0, 0, 1e9, 2, 0, -1e9) == (1.0, 0.0)
        assert converter.intersect(0, 0, 1e9, 2, 0, 1) == (0, -2)
        assert converter.intersect(0, 0, 1, 2, 0, 1e9) == (2, 2)
