import math
from typing import List, Optional, Sequence

from maths.curves.bezier import CubicBezier
from maths.curves.curve import CubicSegment, Point
from .bezier_spline_control import BezierSplineControl
from .spline import Spline, SplineType


class CubicBezierSpline(Spline):
    """
    Interpolating spline made of one cubic Bezier per pair of knots. Control points come from
    the tangent manager, a BezierSplineControl unless another one is supplied.
    """
    def __init__(self, x: Sequence[float] = (), y: Sequence[float] = (), closed: bool = False,
                 tension: float = 0.5, control: Optional[BezierSplineControl] = None):
        n = min(len(x), len(y))
        self._x: List[float] = [float(v) for v in x[:n]]
        self._y: List[float] = [float(v) for v in y[:n]]
        self._control = control if control is not None else BezierSplineControl(closed, tension)
        if control is not None:
            self._control.closed = closed
            self._control.tension = tension
        self._bezier: List[CubicBezier] = []
        self._invalidated = True

    @property
    def spline_type(self) -> SplineType:
        return SplineType.CUBIC_BEZIER

    @property
    def closed(self) -> bool:
        return self._control.closed

    @closed.setter
    def closed(self, value: bool):
        self._control.closed = value
        self._invalidated = True

    @property
    def tension(self) -> float:
        return self._control.tension

    @tension.setter
    def tension(self, t: float):
        self._control.tension = t
        self._invalidated = True

    @property
    def effective_tension(self) -> float:
        return self._control.effective_tension

    def point_count(self) -> int:
        n = len(self._x)
        if self.closed and n > 1 and (self._x[0] != self._x[-1] or self._y[0] != self._y[-1]):
            return n + 1
        return n

    def get_points(self) -> List[Point]:
        self._tangents()
        segments = self._segments()
        if not segments:
            return [Point(x, y) for x, y in zip(self._x, self._y)]
        return [s.start for s in segments] + [segments[-1].end]

    def add_control_point(self, x: float, y: float):
        self._x.append(float(x))
        self._y.append(float(y))
        self._invalidated = True

    def set_data(self, x: Sequence[float], y: Sequence[float]):
        n = min(len(x), len(y))
        self._x = [float(v) for v in x[:n]]
        self._y = [float(v) for v in y[:n]]
        self._invalidated = True

    def clear(self):
        self._x = []
        self._y = []
        self._bezier = []
        self._invalidated = True

    def get_segment(self, i: int) -> Optional[CubicSegment]:
        self._tangents()
        if 0 <= i < len(self._bezier):
            return self._bezier[i].to_segment()
        return None

    def get_x(self, t: float) -> float:
        bezier, u = self._interval(t)
        if bezier is None:
            return self._x[0] if self._x else 0.0
        return bezier.get_x(u)

    def get_y(self, t: float) -> float:
        bezier, u = self._interval(t)
        if bezier is None:
            return self._y[0] if self._y else 0.0
        return bezier.get_y(u)

    def length(self) -> float:
        self._tangents()
        return sum(bezier.length() for bezier in self._bezier)

    def _segments(self) -> List[CubicSegment]:
        return [bezier.to_segment() for bezier in self._bezier]

    def _tangents(self):
        """Rebuild the cubic segments from the current knots"""
        if not self._invalidated:
            return
        segments = self._control.construct(self._x, self._y)
        self._bezier = [CubicBezier.from_segment(s) for s in segments]
        self._invalidated = False

    def _interval(self, t: float):
        if math.isnan(t):
            t = 0.0
        self._tangents()
        if not self._bezier:
            return None, 0.0

        t = max(0.0, min(1.0, t))
        segments = len(self._bezier)
        if t >= 1.0:
            return self._bezier[-1], 1.0
        scaled = segments * t
        index = min(int(math.floor(scaled)), segments - 1)
        return self._bezier[index], scaled - index
