import bisect
import logging
from typing import List, Sequence
import numpy as np

from maths.curves.curve import Point
from .spline import Spline, SplineType

ONE_SIXTH = 1.0 / 6.0


class NaturalCubicSpline(Spline):
    """
    Cartesian natural cubic spline y = f(x) through knots kept in increasing x order. The second
    derivative vanishes at both ends.
    """
    def __init__(self, x: Sequence[float] = (), y: Sequence[float] = ()):
        self._t: List[float] = []
        self._y: List[float] = []
        self._z = np.zeros(0)
        self._h = np.zeros(0)
        self._invalidated = True
        for xi, yi in zip(x, y):
            self.add_control_point(xi, yi)

    @property
    def spline_type(self) -> SplineType:
        return SplineType.CARTESIAN

    def point_count(self) -> int:
        return len(self._t)

    def get_points(self) -> List[Point]:
        return [Point(x, y) for x, y in zip(self._t, self._y)]

    def add_control_point(self, x: float, y: float) -> bool:
        """Insert a knot in x order, a knot whose x-coordinate is already present is rejected"""
        x = float(x)
        y = float(y)
        i = bisect.bisect_left(self._t, x)
        if i < len(self._t) and self._t[i] == x:
            logging.debug(f"Rejected knot ({x}, {y}), x-coordinate already present")
            return False

        self._t.insert(i, x)
        self._y.insert(i, y)
        self._invalidated = True
        return True

    def clear(self):
        self._t = []
        self._y = []
        self._z = np.zeros(0)
        self._h = np.zeros(0)
        self._invalidated = True

    def get_y(self, x: float) -> float:
        n = len(self._t)
        if n == 0:
            return 0.0
        if n == 1:
            return self._y[0]

        self._compute_z()
        i = self._interval(x)
        h = self._h[i]
        z0 = self._z[i]
        z1 = self._z[i + 1]
        delta = x - self._t[i]

        b = (self._y[i + 1] - self._y[i]) / h - h * (z1 + 2.0 * z0) * ONE_SIXTH
        q = 0.5 * z0 + delta * (z1 - z0) * ONE_SIXTH / h
        r = b + delta * q
        return float(self._y[i] + delta * r)

    def get_y_prime(self, x: float) -> float:
        n = len(self._t)
        if n < 2:
            return 0.0

        self._compute_z()
        i = self._interval(x)
        h = self._h[i]
        z0 = self._z[i]
        z1 = self._z[i + 1]
        delta = x - self._t[i]
        delta2 = self._t[i + 1] - x

        slope = z1 * delta * delta / (2.0 * h) - z0 * delta2 * delta2 / (2.0 * h)
        slope += (self._y[i + 1] - self._y[i]) / h
        slope -= (z1 - z0) * h * ONE_SIXTH
        return float(slope)

    def _interval(self, x: float) -> int:
        """Index of the knot interval containing x, end intervals extrapolate"""
        i = bisect.bisect_right(self._t, x) - 1
        return max(0, min(i, len(self._t) - 2))

    def _compute_z(self):
        """Second derivatives at the knots from the tri-diagonal system"""
        if not self._invalidated:
            return

        n = len(self._t)
        t = np.array(self._t)
        y = np.array(self._y)
        h = np.diff(t)
        b = np.diff(y) / h
        z = np.zeros(n)

        if n > 2:
            u = np.zeros(n)
            v = np.zeros(n)
            u[1] = 2.0 * (h[0] + h[1])
            v[1] = 6.0 * (b[1] - b[0])
            for i in range(2, n - 1):
                u[i] = 2.0 * (h[i] + h[i - 1]) - h[i - 1] * h[i - 1] / u[i - 1]
                v[i] = 6.0 * (b[i] - b[i - 1]) - h[i - 1] * v[i - 1] / u[i - 1]

            for i in range(n - 2, 0, -1):
                z[i] = (v[i] - h[i] * z[i + 1]) / u[i]

        self._h = h
        self._z = z
        self._invalidated = False
