import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from maths.curves.curve import CubicSegment

ZERO_TOL = 0.000001
TENSION_LOOSE = 0.15
TENSION_TIGHT = 0.35

Control = Tuple[float, float]


def remap_tension(t: float) -> float:
    """Map a tension in [0,1] ('loose' to 'tight') onto the fraction of chord length used for control points"""
    t = max(0.0, min(1.0, t))
    return (1.0 - t) * TENSION_LOOSE + t * TENSION_TIGHT


@dataclass
class _Bisector:
    dx1: float   # unit vector from the knot toward the previous knot
    dy1: float
    d1: float    # distance to the previous knot
    dx2: float   # unit vector from the knot toward the next knot
    dy2: float
    d2: float
    ux: float    # unit bisector direction
    uy: float
    dist: float  # length of the unnormalized bisector

    @property
    def degenerate(self) -> bool:
        return self.dist <= ZERO_TOL or self.d1 <= ZERO_TOL or self.d2 <= ZERO_TOL


def _unit(dx: float, dy: float) -> Tuple[float, float, float]:
    d = math.hypot(dx, dy)
    if d <= ZERO_TOL:
        return 0.0, 0.0, d
    return dx / d, dy / d, d


def _bisector(x: Sequence[float], y: Sequence[float], prev: int, knot: int, nxt: int) -> _Bisector:
    dx1, dy1, d1 = _unit(x[prev] - x[knot], y[prev] - y[knot])
    dx2, dy2, d2 = _unit(x[nxt] - x[knot], y[nxt] - y[knot])

    ux = dx1 + dx2
    uy = dy1 + dy2
    dist = math.hypot(ux, uy)
    if dist > ZERO_TOL:
        ux /= dist
        uy /= dist

    return _Bisector(dx1, dy1, d1, dx2, dy2, d2, ux, uy, dist)


def _is_clockwise(x: Sequence[float], y: Sequence[float], i0: int, i1: int, i2: int) -> bool:
    return (y[i2] - y[i0]) * (x[i1] - x[i0]) > (y[i1] - y[i0]) * (x[i2] - x[i0])


def _knot_tangents(x: Sequence[float], y: Sequence[float], prev: int, knot: int, nxt: int,
                   tension: float) -> Tuple[Control, Control]:
    """Incoming and outgoing control points at a knot, normal to the angle bisector"""
    b = _bisector(x, y, prev, knot, nxt)
    kx = x[knot]
    ky = y[knot]

    if b.degenerate:
        logging.debug(f"Collinear or coincident knots around index {knot}, using chord directions")
        incoming = (kx + tension * b.d1 * b.dx1, ky + tension * b.d1 * b.dy1)
        outgoing = (kx + tension * b.d2 * b.dx2, ky + tension * b.d2 * b.dy2)
        return incoming, outgoing

    dt1 = tension * b.d1
    dt2 = tension * b.d2
    if _is_clockwise(x, y, prev, knot, nxt):
        incoming = (kx - dt1 * b.uy, ky + dt1 * b.ux)
        outgoing = (kx + dt2 * b.uy, ky - dt2 * b.ux)
    else:
        incoming = (kx + dt1 * b.uy, ky - dt1 * b.ux)
        outgoing = (kx - dt2 * b.uy, ky + dt2 * b.ux)

    return incoming, outgoing


def _reflect(p: Control, ax: float, ay: float, bx: float, by: float) -> Control:
    """Reflect p across the perpendicular bisector of the chord a-b"""
    mx = 0.5 * (ax + bx)
    my = 0.5 * (ay + by)
    d = math.hypot(bx - ax, by - ay)
    if d <= ZERO_TOL:
        return (ax, ay)

    # unit normal to the chord
    n = 2.0 / d
    nx = -n * (ay - my)
    ny = n * (ax - mx)

    # symmetric reflection matrix
    a11 = nx * nx - ny * ny
    a12 = 2.0 * nx * ny
    a22 = ny * ny - nx * nx

    dx = p[0] - mx
    dy = p[1] - my
    return (mx + a11 * dx + a12 * dy, my + a12 * dx + a22 * dy)


class BezierSplineControl:
    """
    Computes cubic Bezier control points for every segment of a spline through a set of knots.
    The tangent at each knot is normal to the bisector of the angle formed with its neighbours,
    control points are placed along it at a tension-controlled fraction of the adjacent chord.
    Open splines reflect the nearest interior control point at the free ends, closed splines
    wrap around the seam knot.
    """
    def __init__(self, closed: bool = False, tension: float = 0.5):
        self.closed = closed
        self.tension = tension
        self._segments: List[CubicSegment] = []

    @property
    def tension(self) -> float:
        """Tension in [0,1], from loose to tight"""
        return self._tension

    @tension.setter
    def tension(self, t: float):
        self._tension = max(0.0, min(1.0, float(t)))

    @property
    def effective_tension(self) -> float:
        """Fraction of chord length used for control points, in [0.15, 0.35]"""
        return remap_tension(self._tension)

    def get_segment(self, i: int) -> CubicSegment:
        if i < 0 or i >= len(self._segments):
            return CubicSegment()
        return self._segments[i]

    @property
    def segments(self) -> List[CubicSegment]:
        return list(self._segments)

    def construct(self, x: Sequence[float], y: Sequence[float]) -> List[CubicSegment]:
        """Rebuild the geometric constraints of all segments from the knot coordinates"""
        x = [float(v) for v in x]
        y = [float(v) for v in y]
        n = min(len(x), len(y))
        x = x[:n]
        y = y[:n]
        self._segments = []

        if n < 2:
            return []

        if self.closed and (x[0] != x[-1] or y[0] != y[-1]):
            x.append(x[0])
            y.append(y[0])
            n += 1

        if n == 2:
            mx = 0.5 * (x[0] + x[1])
            my = 0.5 * (y[0] + y[1])
            self._segments = [CubicSegment(x[0], y[0], mx, my, mx, my, x[1], y[1])]
            return list(self._segments)

        t = self.effective_tension
        incoming: List[Control] = [(x[k], y[k]) for k in range(n)]
        outgoing: List[Control] = [(x[k], y[k]) for k in range(n)]

        for k in range(1, n - 1):
            incoming[k], outgoing[k] = _knot_tangents(x, y, k - 1, k, k + 1, t)

        if self.closed:
            # knots 0 and n-1 coincide, so the seam neighbours are n-2 and 1
            _, outgoing[0] = _knot_tangents(x, y, n - 2, 0, 1, t)
            incoming[n - 1] = (2.0 * x[0] - outgoing[0][0], 2.0 * y[0] - outgoing[0][1])
        else:
            outgoing[0] = _reflect(incoming[1], x[0], y[0], x[1], y[1])
            incoming[n - 1] = _reflect(outgoing[n - 2], x[n - 2], y[n - 2], x[n - 1], y[n - 1])

        for i in range(n - 1):
            cx, cy = outgoing[i]
            cx1, cy1 = incoming[i + 1]
            self._segments.append(CubicSegment(x[i], y[i], cx, cy, cx1, cy1, x[i + 1], y[i + 1]))

        return list(self._segments)
