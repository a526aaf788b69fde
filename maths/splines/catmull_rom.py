import math
from typing import List, Sequence, Tuple

from maths.curves.curve import Point
from maths.gauss import gauss_legendre
from .spline import Spline, SplineType

ZERO_TOL = 1e-10


class CatmullRomSpline(Spline):
    """
    Uniform Catmull-Rom spline through a sequence of knots, traced by a global parameter in [0,1].
    Each segment between knots i and i+1 also depends on knots i-1 and i+2, so artificial points
    are added before the first and after the last knot.
    """
    def __init__(self, x: Sequence[float] = (), y: Sequence[float] = (), closed: bool = False):
        self._x: List[float] = [float(v) for v in x]
        self._y: List[float] = [float(v) for v in y][:len(self._x)]
        self._x = self._x[:len(self._y)]
        self.closed = closed

    @property
    def spline_type(self) -> SplineType:
        return SplineType.CATMULL_ROM

    def point_count(self) -> int:
        return len(self._knots())

    def get_points(self) -> List[Point]:
        return [Point(x, y) for x, y in self._knots()]

    def add_control_point(self, x: float, y: float):
        self._x.append(float(x))
        self._y.append(float(y))

    def set_data(self, x: Sequence[float], y: Sequence[float]):
        n = min(len(x), len(y))
        self._x = [float(v) for v in x[:n]]
        self._y = [float(v) for v in y[:n]]

    def clear(self):
        self._x = []
        self._y = []

    def get_control_points(self) -> List[Point]:
        """Knots preceded and followed by the artificial end points"""
        knots = self._knots()
        n = len(knots)
        if n < 2:
            return [Point(x, y) for x, y in knots]

        (x0, y0), (x1, y1) = knots[0], knots[1]
        if self.closed and n > 2:
            # artificial points chosen so tangents match across the seam knot
            dx1, dy1 = x1 - x0, y1 - y0
            xp, yp = knots[n - 2]
            dx2, dy2 = xp - x0, yp - y0
            d1 = math.hypot(dx1, dy1)
            d2 = math.hypot(dx2, dy2)
            u1 = (dx1 / d1, dy1 / d1) if d1 > ZERO_TOL else (0.0, 0.0)
            u2 = (dx2 / d2, dy2 / d2) if d2 > ZERO_TOL else (0.0, 0.0)
            first = (x0 + d1 * u2[0], y0 + d1 * u2[1])
            last = (x0 + d2 * u1[0], y0 + d2 * u1[1])
        else:
            xn, yn = knots[n - 1]
            xm, ym = knots[n - 2]
            first = (2.0 * x0 - x1, 2.0 * y0 - y1)
            last = (2.0 * xn - xm, 2.0 * yn - ym)

        return [Point(*first)] + [Point(x, y) for x, y in knots] + [Point(*last)]

    def get_x(self, t: float) -> float:
        return self._evaluate(t, 0, False)

    def get_y(self, t: float) -> float:
        return self._evaluate(t, 1, False)

    def get_x_prime(self, t: float) -> float:
        return self._evaluate(t, 0, True)

    def get_y_prime(self, t: float) -> float:
        return self._evaluate(t, 1, True)

    def length(self) -> float:
        coef = self._coefficients()
        total = 0.0
        for c in coef:
            def speed(u: float, c=c) -> float:
                dx = c[0][1] + u * (2.0 * c[0][2] + u * 3.0 * c[0][3])
                dy = c[1][1] + u * (2.0 * c[1][2] + u * 3.0 * c[1][3])
                return 0.5 * math.hypot(dx, dy)
            total += gauss_legendre(speed, 0.0, 1.0, 8)
        return total

    def _knots(self) -> List[Tuple[float, float]]:
        knots = list(zip(self._x, self._y))
        if self.closed and len(knots) > 1 and knots[0] != knots[-1]:
            knots.append(knots[0])
        return knots

    def _coefficients(self) -> List[Tuple[Tuple[float, ...], Tuple[float, ...]]]:
        """Per-segment cubic coefficients (scaled by 2) for x and y"""
        points = self.get_control_points()
        coef = []
        for i in range(1, len(points) - 2):
            p0, p1, p2, p3 = points[i - 1], points[i], points[i + 1], points[i + 2]
            cx = (2.0 * p1.x, p2.x - p0.x,
                  2.0 * p0.x - 5.0 * p1.x + 4.0 * p2.x - p3.x,
                  -p0.x + 3.0 * p1.x - 3.0 * p2.x + p3.x)
            cy = (2.0 * p1.y, p2.y - p0.y,
                  2.0 * p0.y - 5.0 * p1.y + 4.0 * p2.y - p3.y,
                  -p0.y + 3.0 * p1.y - 3.0 * p2.y + p3.y)
            coef.append((cx, cy))
        return coef

    def _segment(self, t: float, segments: int) -> Tuple[int, float]:
        t = max(0.0, min(1.0, t))
        if t >= 1.0:
            return segments - 1, 1.0
        scaled = segments * t
        index = min(int(math.floor(scaled)), segments - 1)
        return index, scaled - index

    def _evaluate(self, t: float, axis: int, derivative: bool) -> float:
        knots = self._knots()
        if len(knots) < 2:
            if derivative or not knots:
                return 0.0
            return knots[0][axis]

        coef = self._coefficients()
        index, u = self._segment(t, len(coef))
        c = coef[index][axis]
        if derivative:
            return 0.5 * (c[1] + u * (2.0 * c[2] + u * 3.0 * c[3]))
        return 0.5 * (c[0] + u * (c[1] + u * (c[2] + u * c[3])))
