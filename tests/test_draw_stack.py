import numpy as np
import pytest
from PIL import Image

from maths.curves.curve import Point, QuadFlattening, QuadSegment
from maths.splines import CatmullRomSpline, SplineToBezier
from utils.draw_stack import render_flattening, sample_quads, to_draw_commands, to_svg_path
from utils.utils import compute_bounds, world_to_image_coords

CONTIGUOUS = QuadFlattening([QuadSegment(0, 0, 1, 2, 2, 0), QuadSegment(2, 0, 3, -2, 4, 0)], [0, 1, 2])


class TestDrawCommands:
    """Adapters for moveTo/quadTo style draw stacks."""

    def test_contiguous_quads_share_the_pen(self):
        assert to_draw_commands(CONTIGUOUS) == [
            ("M", (0, 0)),
            ("Q", (1, 2, 2, 0)),
            ("Q", (3, -2, 4, 0)),
        ]

    def test_gap_moves_the_pen(self):
        flattening = QuadFlattening([QuadSegment(0, 0, 1, 1, 2, 0), QuadSegment(5, 5, 6, 6, 7, 5)], [0, 2])
        commands = [c for c, _ in to_draw_commands(flattening)]
        assert commands == ["M", "Q", "M", "Q"]

    def test_svg_path(self):
        flattening = QuadFlattening([QuadSegment(0, 0, 1, 2, 2, 0.5)], [0, 1])
        assert to_svg_path(flattening) == "M 0 0 Q 1 2 2 0.5"

    def test_empty(self):
        assert to_draw_commands(QuadFlattening()) == []
        assert to_svg_path(QuadFlattening()) == ""


class TestSampleQuads:
    def test_shared_endpoints_kept_once(self):
        polyline = sample_quads(CONTIGUOUS.quads, steps=4)
        assert polyline.shape == (9, 2)
        np.testing.assert_allclose(polyline[0], [0, 0])
        np.testing.assert_allclose(polyline[4], [2, 0])
        np.testing.assert_allclose(polyline[-1], [4, 0])
        np.testing.assert_allclose(polyline[2], [1, 1])

    def test_no_quads(self):
        assert sample_quads([]).shape == (0, 2)


class TestImageCoords:
    def test_bounds(self):
        assert compute_bounds([(1, 5), (-2, 3), (4, 0)]) == (-2, 0, 4, 5)
        assert compute_bounds([]) == (0.0, 0.0, 1.0, 1.0)

    def test_world_to_image(self):
        bounds = (0, 0, 10, 10)
        assert world_to_image_coords(5, 5, bounds, 100, 100) == (pytest.approx(50), pytest.approx(50))
        # y axis points up in world space
        assert world_to_image_coords(0, 10, bounds, 100, 100) == (pytest.approx(10), pytest.approx(10))


class TestRenderFlattening:
    def test_frame(self):
        frame = render_flattening(CONTIGUOUS, width=120, height=80)
        assert frame.shape == (80, 120, 3)
        assert frame.dtype == np.uint8
        assert (frame != 255).any()

    def test_writes_png(self, tmp_path):
        spline = CatmullRomSpline([0, 1, 3, 4], [0, 2, 2, 0])
        flattening = SplineToBezier().convert(spline)
        path = tmp_path / "spline.png"
        render_flattening(flattening, width=200, height=100, output_path=str(path), knots=spline.get_points())
        assert path.exists()
        with Image.open(path) as img:
            assert img.size == (200, 100)

    def test_empty_flattening(self):
        frame = render_flattening(QuadFlattening(), width=10, height=10, knots=[Point(0, 0)])
        assert frame.shape == (10, 10, 3)
