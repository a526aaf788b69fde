import math
from typing import List, Optional, Sequence
import numpy as np

from maths.gauss import gauss_legendre
from .curve import CubicSegment, Point, QuadSegment

ZERO_TOL = 1e-10
LARGE = 1e8
LENGTH_QUADRATURE_ORDER = 12
PARAM_TOL = 1e-9


def _control(index: int, axis: int, doc: str) -> property:
    def getter(self) -> float:
        return float(self.points[index][axis])

    def setter(self, value: float):
        points = self.points.copy()
        points[index][axis] = value
        points.setflags(write=False)
        self.points = points
        self._invalidated = True

    return property(getter, setter, doc=doc)


class Bezier:
    """
    Bezier curve of arbitrary order traced by a natural parameter in [0,1]. Coefficients of the
    power-basis form and the arc length are cached until a control point is reassigned.
    """
    def __init__(self, points: Sequence[Sequence[float]]):
        self.points = np.array(points, dtype=float)
        # control points change only through the invalidating properties
        self.points.setflags(write=False)
        self._invalidated = True
        self._coef: Optional[np.ndarray] = None
        self._length: Optional[float] = None

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]]) -> 'Bezier':
        curve = cls.__new__(cls)
        Bezier.__init__(curve, points)
        return curve

    @property
    def order(self) -> int:
        return len(self.points) - 1

    def point_at(self, t: float) -> np.ndarray:
        """Calculate point on Bezier curve at parameter t using Bernstein polynomials"""
        n = self.order
        point = np.zeros(2)

        for i in range(n + 1):
            b = self._bernstein(i, n, t)
            point += self.points[i] * b

        return point

    @property
    def control_length(self) -> float:
        """Length of the control polygon, an upper bound on the arc length"""
        diffs = np.diff(self.points, axis=0)
        return float(np.sum(np.sqrt(np.sum(diffs**2, axis=1))))

    def get_x(self, t: float) -> float:
        return self._horner(self._coefficients()[:, 0], t)

    def get_y(self, t: float) -> float:
        return self._horner(self._coefficients()[:, 1], t)

    def get_x_prime(self, t: float) -> float:
        return self._horner(self._derivative_coefficients()[:, 0], t)

    def get_y_prime(self, t: float) -> float:
        return self._horner(self._derivative_coefficients()[:, 1], t)

    def speed(self, t: float) -> float:
        return math.hypot(self.get_x_prime(t), self.get_y_prime(t))

    def dy_dx(self, t: float) -> float:
        """Slope of the curve viewed as a function y(x); vertical tangents report a signed large value"""
        x_prime = self.get_x_prime(t)
        y_prime = self.get_y_prime(t)
        if abs(x_prime) < ZERO_TOL:
            if abs(y_prime) < ZERO_TOL:
                return 0.0
            return math.copysign(LARGE, y_prime * (1.0 if x_prime >= 0 else -1.0))
        return y_prime / x_prime

    def is_degenerate(self) -> bool:
        return bool(np.all(np.abs(self.points - self.points[0]) < ZERO_TOL))

    def length_at(self, t: float) -> float:
        """Arc length over [0, t]; t is clamped to [0,1]"""
        if t <= 0 or self.is_degenerate():
            return 0.0
        return gauss_legendre(self.speed, 0.0, min(t, 1.0), LENGTH_QUADRATURE_ORDER)

    def length(self) -> float:
        if self._invalidated or self._length is None:
            self._update()
            self._length = self.length_at(1.0)
        return self._length

    def t_at_length(self, s: float) -> float:
        """Natural parameter at the normalized arc length s in [0,1]"""
        if s <= 0:
            return 0.0
        if s >= 1:
            return 1.0

        total = self.length()
        if total < ZERO_TOL:
            return s

        target = s * total
        left, right = 0.0, 1.0
        while right - left > PARAM_TOL:
            middle = 0.5 * (left + right)
            if self.length_at(middle) < target:
                left = middle
            else:
                right = middle

        return 0.5 * (left + right)

    def t_at_x(self, x: float) -> List[float]:
        """All real parameter values where the curve crosses the vertical line at x, sorted"""
        poly = self._coefficients()[:, 0].copy()
        poly[0] -= x
        return self._real_roots(poly)

    def y_at_x(self, x: float) -> List[float]:
        return [self.get_y(t) for t in self.t_at_x(x) if -PARAM_TOL <= t <= 1.0 + PARAM_TOL]

    def subdivide(self, t: float) -> List['Bezier']:
        """Split at t with de Casteljau's algorithm, returns [left, right] or [] for t outside (0,1)"""
        if t <= 0.0 or t >= 1.0:
            return []

        work = self.points.copy()
        left = [work[0]]
        right = [work[-1]]
        while len(work) > 1:
            work = (1.0 - t) * work[:-1] + t * work[1:]
            left.append(work[0])
            right.append(work[-1])

        return [type(self).from_points(left), type(self).from_points(right[::-1])]

    def _coefficients(self) -> np.ndarray:
        if self._invalidated or self._coef is None:
            self._update()
        return self._coef

    def _derivative_coefficients(self) -> np.ndarray:
        coef = self._coefficients()
        k = np.arange(1, len(coef), dtype=float).reshape(-1, 1)
        return coef[1:] * k

    def _update(self):
        """Power-basis coefficients c0 + c1*t + ... + cn*t^n of both coordinates"""
        n = self.order
        coef = np.zeros((n + 1, 2))
        for k in range(n + 1):
            acc = np.zeros(2)
            for i in range(k + 1):
                sign = -1.0 if (k - i) % 2 else 1.0
                acc += sign * self._binomial_coefficient(k, i) * self.points[i]
            coef[k] = self._binomial_coefficient(n, k) * acc
        self._coef = coef
        self._length = None
        self._invalidated = False

    @staticmethod
    def _horner(coef: np.ndarray, t: float) -> float:
        value = 0.0
        for c in coef[::-1]:
            value = value * t + c
        return float(value)

    @staticmethod
    def _real_roots(poly: np.ndarray) -> List[float]:
        """Real roots of poly[0] + poly[1]*t + ..., leading terms that are numerically zero are dropped"""
        scale = np.max(np.abs(poly))
        if scale < ZERO_TOL:
            return [0.0]

        trimmed = list(poly)
        while trimmed and abs(trimmed[-1]) <= ZERO_TOL * scale:
            trimmed.pop()
        if len(trimmed) < 2:
            return []

        roots = []
        for r in np.roots(trimmed[::-1]):
            if abs(r.imag) <= PARAM_TOL * (1.0 + abs(r.real)):
                value = float(r.real)
                if not any(abs(value - other) <= PARAM_TOL for other in roots):
                    roots.append(value)

        return sorted(roots)

    @staticmethod
    def _binomial_coefficient(n: int, k: int) -> int:
        """Calculate binomial coefficient C(n,k) using multiplicative formula"""
        if k < 0 or k > n:
            return 0

        if k == 0 or k == n:
            return 1

        k = min(k, n - k)
        c = 1

        for i in range(1, k + 1):
            c = c * (n + 1 - i) // i

        return c

    def _bernstein(self, i: int, n: int, t: float) -> float:
        """Calculate Bernstein polynomial B(i,n,t)"""
        return self._binomial_coefficient(n, i) * (t ** i) * ((1.0 - t) ** (n - i))


class QuadBezier(Bezier):
    """Quadratic Bezier through (x0,y0) and (x1,y1) with middle control point (cx,cy)"""
    x0 = _control(0, 0, "start x-coordinate")
    y0 = _control(0, 1, "start y-coordinate")
    cx = _control(1, 0, "control point x-coordinate")
    cy = _control(1, 1, "control point y-coordinate")
    x1 = _control(2, 0, "end x-coordinate")
    y1 = _control(2, 1, "end y-coordinate")

    def __init__(self, x0: float = 0.0, y0: float = 0.0, cx: float = 0.0, cy: float = 0.0,
                 x1: float = 0.0, y1: float = 0.0):
        super().__init__([[x0, y0], [cx, cy], [x1, y1]])

    @classmethod
    def from_segment(cls, segment: QuadSegment) -> 'QuadBezier':
        return cls(segment.x0, segment.y0, segment.cx, segment.cy, segment.x1, segment.y1)

    def to_segment(self) -> QuadSegment:
        return QuadSegment(self.x0, self.y0, self.cx, self.cy, self.x1, self.y1, self.length())

    def length_at(self, t: float) -> float:
        """Closed-form arc length of the quadratic over [0, t]"""
        if t <= 0:
            return 0.0
        t = min(t, 1.0)

        coef = self._coefficients()
        # B'(u) = A + B*u, speed = sqrt(a*u^2 + b*u + c)
        A = coef[1]
        B = 2.0 * coef[2]
        a = float(np.dot(B, B))
        b = 2.0 * float(np.dot(A, B))
        c = float(np.dot(A, A))

        if a + c < ZERO_TOL:
            return 0.0

        if a <= ZERO_TOL * c:
            return math.sqrt(c) * t

        disc = 4.0 * a * c - b * b
        if disc <= 1e-8 * 4.0 * a * max(c, ZERO_TOL):
            # collinear control points, speed is sqrt(a)*|u - u0|
            u0 = -b / (2.0 * a)

            def g(u: float) -> float:
                return 0.5 * (u - u0) * abs(u - u0)

            return math.sqrt(a) * (g(t) - g(0.0))

        sqrt_a = math.sqrt(a)

        def antiderivative(u: float) -> float:
            q = math.sqrt(max(a * u * u + b * u + c, 0.0))
            lin = 2.0 * a * u + b
            return lin * q / (4.0 * a) + disc / (8.0 * a * sqrt_a) * math.log(2.0 * sqrt_a * q + lin)

        return antiderivative(t) - antiderivative(0.0)

    def t_at_x(self, x: float) -> List[float]:
        coef = self._coefficients()
        c = coef[0][0] - x
        b = coef[1][0]
        a = coef[2][0]

        scale = max(abs(a), abs(b), abs(c))
        if scale < ZERO_TOL:
            return [0.0]

        if abs(a) <= ZERO_TOL * scale:
            if abs(b) <= ZERO_TOL * scale:
                return []
            return [-c / b]

        d = b * b - 4.0 * a * c
        if d < 0:
            return []

        d = math.sqrt(d)
        t0 = (-b - d) / (2.0 * a)
        t1 = (-b + d) / (2.0 * a)
        if abs(t1 - t0) <= PARAM_TOL:
            return [t0]
        return sorted([t0, t1])

    def interpolate(self, p0: Point, p1: Point, p2: Point) -> List[float]:
        """
        Reassign the control point so the curve passes through p0, p1 and p2 using chord-length
        parameterization. Returns [t] with t the natural parameter at p1.
        """
        d1 = math.hypot(p1.x - p0.x, p1.y - p0.y)
        d2 = math.hypot(p2.x - p1.x, p2.y - p1.y)
        d = d1 + d2

        self.x0, self.y0 = p0.x, p0.y
        self.x1, self.y1 = p2.x, p2.y

        if d < ZERO_TOL or d1 < ZERO_TOL or d2 < ZERO_TOL:
            self.cx = 0.5 * (p0.x + p2.x)
            self.cy = 0.5 * (p0.y + p2.y)
            return [0.0 if d < ZERO_TOL else d1 / d]

        t = d1 / d
        t1 = 1.0 - t
        denom = 2.0 * t * t1
        self.cx = (p1.x - t1 * t1 * p0.x - t * t * p2.x) / denom
        self.cy = (p1.y - t1 * t1 * p0.y - t * t * p2.y) / denom
        return [t]


class CubicBezier(Bezier):
    """Cubic Bezier through (x0,y0) and (x1,y1) with control points (cx,cy) and (cx1,cy1)"""
    x0 = _control(0, 0, "start x-coordinate")
    y0 = _control(0, 1, "start y-coordinate")
    cx = _control(1, 0, "first control point x-coordinate")
    cy = _control(1, 1, "first control point y-coordinate")
    cx1 = _control(2, 0, "second control point x-coordinate")
    cy1 = _control(2, 1, "second control point y-coordinate")
    x1 = _control(3, 0, "end x-coordinate")
    y1 = _control(3, 1, "end y-coordinate")

    def __init__(self, x0: float = 0.0, y0: float = 0.0, cx: float = 0.0, cy: float = 0.0,
                 cx1: float = 0.0, cy1: float = 0.0, x1: float = 0.0, y1: float = 0.0):
        super().__init__([[x0, y0], [cx, cy], [cx1, cy1], [x1, y1]])

    @classmethod
    def from_segment(cls, segment: CubicSegment) -> 'CubicBezier':
        return cls(segment.x0, segment.y0, segment.cx, segment.cy,
                   segment.cx1, segment.cy1, segment.x1, segment.y1)

    def to_segment(self) -> CubicSegment:
        return CubicSegment(self.x0, self.y0, self.cx, self.cy, self.cx1, self.cy1, self.x1, self.y1)
