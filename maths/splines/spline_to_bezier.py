import logging
import math
from typing import List, Optional, Tuple

from maths.config import ConverterConfig
from maths.curves.bezier import QuadBezier
from maths.curves.bezier_approximator import to_quad_bezier
from maths.curves.curve import CubicSegment, Point, QuadFlattening, QuadSegment
from maths.gauss import gauss_legendre
from .spline import Spline, SplineType

ONE_SIXTH = 1.0 / 6.0
ZERO_TOL = 0.00000001


def catmull_rom_to_cubic(p0: Point, p1: Point, p2: Point, p3: Point) -> CubicSegment:
    """
    Cubic Bezier equivalent of the Catmull-Rom segment between p1 and p2, from the conversion matrix

        0     1     0     0
      -1/6    1    1/6    0
        0    1/6    1   -1/6
        0     0     1     0
    """
    return CubicSegment(
        p1.x, p1.y,
        p1.x + ONE_SIXTH * (p2.x - p0.x), p1.y + ONE_SIXTH * (p2.y - p0.y),
        p2.x + ONE_SIXTH * (p1.x - p3.x), p2.y + ONE_SIXTH * (p1.y - p3.y),
        p2.x, p2.y
    )


class SplineToBezier:
    """
    Approximates a spline by a sequence of quadratic Beziers. Rather than minimizing the total
    number of quads, an integral number of quads is produced between each pair of knots, so the
    index of the first quad of every spline segment is reported alongside the quads.
    """
    def __init__(self, config: Optional[ConverterConfig] = None):
        self.config = config if config is not None else ConverterConfig()

    def convert(self, spline: Optional[Spline], tolerance: Optional[float] = None) -> QuadFlattening:
        tol = self.config.effective_tolerance(tolerance)

        if spline is None:
            logging.debug("No spline to convert")
            return QuadFlattening()

        knots = spline.get_points()
        if not knots:
            return QuadFlattening()

        if len(knots) == 1:
            p = knots[0]
            return QuadFlattening([QuadSegment(p.x, p.y, p.x, p.y, p.x, p.y, 0.0)], [0, 1])

        if len(knots) == 2:
            p, q = knots
            quad = QuadSegment(p.x, p.y, 0.5 * (p.x + q.x), 0.5 * (p.y + q.y), q.x, q.y,
                               math.hypot(q.x - p.x, q.y - p.y))
            return QuadFlattening([quad], [0, 1])

        spline_type = getattr(spline, "spline_type", None)
        if spline_type == SplineType.CARTESIAN:
            result = self._cartesian_to_quad(spline, knots, tol)
        elif spline_type == SplineType.CUBIC_BEZIER:
            result = self._cubic_bezier_to_quad(spline, len(knots), tol)
        elif spline_type == SplineType.CATMULL_ROM:
            result = self._catmull_rom_to_quad(spline, tol)
        else:
            logging.warning(f"Unsupported spline type: {spline_type}")
            return QuadFlattening()

        logging.debug(f"Converted {len(knots)} knots to {len(result.quads)} quads (tolerance {tol})")
        return result

    def intersect(self, p0x: float, p0y: float, m1: float, p2x: float, p2y: float, m2: float) -> Tuple[float, float]:
        """Intersection of the line with slope m1 through P0 and the line with slope m2 through P2"""
        large = self.config.vertical_slope
        mid = (0.5 * (p0x + p2x), 0.5 * (p0y + p2y))
        vertical1 = abs(m1) >= large
        vertical2 = abs(m2) >= large

        if vertical1 and vertical2:
            return mid
        if vertical1:
            return p0x, m2 * (p0x - p2x) + p2y
        if vertical2:
            return p2x, m1 * (p2x - p0x) + p0y

        # nearly parallel lines meet well outside where a control point should be
        if abs(m1 - m2) <= self.config.parallel_slope_tolerance:
            return mid

        b1 = p0y - m1 * p0x
        b2 = p2y - m2 * p2x
        px = (b2 - b1) / (m1 - m2)
        py = m1 * px + b1

        if px >= max(p0x, p2x) or px <= min(p0x, p2x):
            return mid

        return px, py

    def _cartesian_to_quad(self, spline: Spline, knots: List[Point], tol: float) -> QuadFlattening:
        quads: List[QuadSegment] = []
        index = [0]
        for i in range(len(knots) - 1):
            segment = self._subdivide_cartesian(spline, knots[i], knots[i + 1], tol)
            quads.extend(segment)
            index.append(index[-1] + len(segment))
        return QuadFlattening(quads, index)

    def _cartesian_quad(self, spline: Spline, x0: float, y0: float, x1: float, y1: float) -> QuadSegment:
        m1 = spline.get_y_prime(x0)
        m2 = spline.get_y_prime(x1)
        cx, cy = self.intersect(x0, y0, m1, x1, y1, m2)
        return QuadSegment(x0, y0, cx, cy, x1, y1)

    def _subdivide_cartesian(self, spline: Spline, start: Point, end: Point, tol: float) -> List[QuadSegment]:
        limit = self.config.max_quads_per_segment
        q = [self._cartesian_quad(spline, start.x, start.y, end.x, end.y)]
        complete = [False]

        while not all(complete):
            i = 0
            while i < len(q):
                if complete[i]:
                    i += 1
                    continue

                quad = q[i]
                if self._compare(quad, spline, tol):
                    complete[i] = True
                    i += 1
                    continue

                if len(q) >= limit:
                    logging.debug(f"Quad limit {limit} reached for segment starting at x={start.x}")
                    return self._with_lengths(q)

                new_x = 0.5 * (quad.x0 + quad.x1)
                new_y = spline.get_y(new_x)
                q[i] = self._cartesian_quad(spline, quad.x0, quad.y0, new_x, new_y)
                q.insert(i + 1, self._cartesian_quad(spline, new_x, new_y, quad.x1, quad.y1))
                complete.insert(i + 1, False)
                i += 2

        return self._with_lengths(q)

    def _compare(self, quad: QuadSegment, spline: Spline, tol: float) -> bool:
        """True if the quad Bezier matches the cartesian spline over its interval within tolerance"""
        bezier = QuadBezier.from_segment(quad)
        quad_length = bezier.length_at(1.0)
        quad.length = quad_length

        def integrand(x: float) -> float:
            d = spline.get_y_prime(x)
            return math.sqrt(1.0 + d * d)

        spline_length = gauss_legendre(integrand, quad.x0, quad.x1, self.config.quadrature_order)
        if abs(spline_length) <= ZERO_TOL:
            return True

        length_error = abs(spline_length - quad_length) / abs(spline_length)

        new_x = 0.5 * (quad.x0 + quad.x1)
        y_values = bezier.y_at_x(new_x)
        if not y_values:
            return False

        y1 = y_values[0]
        y2 = spline.get_y(new_x)
        scale = abs(y1) if abs(y1) > ZERO_TOL else 1.0
        midpoint_error = abs(y2 - y1) / scale

        return length_error <= tol and midpoint_error <= self.config.midpoint_tolerance

    def _cubic_bezier_to_quad(self, spline: Spline, count: int, tol: float) -> QuadFlattening:
        quads: List[QuadSegment] = []
        index = [0]
        for i in range(count - 1):
            segment = spline.get_segment(i)
            q = [] if segment is None else to_quad_bezier(segment, tol, self.config.max_subdivision_depth)
            quads.extend(q)
            index.append(index[-1] + len(q))
        return QuadFlattening(quads, index)

    def _catmull_rom_to_quad(self, spline: Spline, tol: float) -> QuadFlattening:
        points = spline.get_control_points()
        quads: List[QuadSegment] = []
        index = [0]
        for i in range(1, len(points) - 2):
            cubic = catmull_rom_to_cubic(points[i - 1], points[i], points[i + 1], points[i + 2])
            q = to_quad_bezier(cubic, tol, self.config.max_subdivision_depth)
            quads.extend(q)
            index.append(index[-1] + len(q))
        return QuadFlattening(quads, index)

    @staticmethod
    def _with_lengths(quads: List[QuadSegment]) -> List[QuadSegment]:
        for quad in quads:
            if quad.length == 0.0:
                quad.length = QuadBezier.from_segment(quad).length()
        return quads
