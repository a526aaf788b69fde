import logging
from typing import List, Tuple
import numpy as np

from .bezier import CubicBezier, QuadBezier
from .curve import CubicSegment, QuadSegment

DEFAULT_FIT = 0.02
MAX_SUBDIVISION_DEPTH = 4
DELTA_TOL = 1e-7
PARALLEL_TOL = 1e-9
ENDPOINT_TOL = 1e-9
MIDPOINT_TOL = 0.15


class BezierApproximator:
    """
    Approximates a cubic Bezier by a contiguous sequence of quadratic Beziers. The cubic is split
    at t=0.5 until each piece is matched by a single quad within the closeness tolerance, or the
    depth limit is reached.
    """
    def __init__(self, cubic: CubicSegment, tolerance: float = DEFAULT_FIT,
                 max_depth: int = MAX_SUBDIVISION_DEPTH):
        self.cubic = CubicBezier.from_segment(cubic)
        self.tolerance = tolerance
        self.max_depth = max(0, max_depth)

    def control_point(self, cubic: CubicBezier) -> Tuple[float, float]:
        """Interior quad. control point for a cubic, the intersection of the two end tangents"""
        p0, c1, c2, p3 = cubic.points
        d1 = c1 - p0
        d2 = c2 - p3

        if np.dot(d1, d1) <= DELTA_TOL ** 2 or np.dot(d2, d2) <= DELTA_TOL ** 2:
            mid = 0.5 * (p0 + p3)
            return float(mid[0]), float(mid[1])

        cross = d1[0] * d2[1] - d1[1] * d2[0]
        scale = np.linalg.norm(d1) * np.linalg.norm(d2)
        if abs(cross) > PARALLEL_TOL * scale:
            # solve p0 + s*d1 = p3 + u*d2
            w = p3 - p0
            s = (w[0] * d2[1] - w[1] * d2[0]) / cross
            u = (w[0] * d1[1] - w[1] * d1[0]) / cross
            # the quad needs a control point distinct from both endpoints
            chord = np.linalg.norm(w)
            if s * np.linalg.norm(d1) > ENDPOINT_TOL * chord and u * np.linalg.norm(d2) > ENDPOINT_TOL * chord:
                p = p0 + s * d1
                return float(p[0]), float(p[1])

        # parallel tangents or lines meeting at or behind an endpoint
        p = 0.25 * (3.0 * (c1 + c2) - (p0 + p3))
        return float(p[0]), float(p[1])

    def approximate(self, cubic: CubicBezier) -> QuadBezier:
        cx, cy = self.control_point(cubic)
        return QuadBezier(cubic.x0, cubic.y0, cx, cy, cubic.x1, cubic.y1)

    def is_flat_enough(self, cubic: CubicBezier, quad: QuadBezier) -> bool:
        cubic_length = cubic.length()
        if cubic_length <= DELTA_TOL:
            return True

        length_error = abs(cubic_length - quad.length()) / cubic_length
        if length_error > self.tolerance:
            return False

        deviation = np.linalg.norm(cubic.point_at(0.5) - quad.point_at(0.5))
        return deviation <= MIDPOINT_TOL * cubic_length

    def create_quads(self) -> List[QuadSegment]:
        output: List[QuadSegment] = []
        if self.cubic.is_degenerate():
            return [self.approximate(self.cubic).to_segment()]

        to_flatten = [(self.cubic, 0)]
        while to_flatten:
            parent, depth = to_flatten.pop()
            quad = self.approximate(parent)
            if depth >= self.max_depth or self.is_flat_enough(parent, quad):
                if depth >= self.max_depth:
                    logging.debug(f"Cubic subdivision depth limit {self.max_depth} reached")
                output.append(quad.to_segment())
                continue

            left, right = parent.subdivide(0.5)
            to_flatten.append((right, depth + 1))
            to_flatten.append((left, depth + 1))

        return output


def to_quad_bezier(cubic: CubicSegment, tolerance: float = DEFAULT_FIT,
                   max_depth: int = MAX_SUBDIVISION_DEPTH) -> List[QuadSegment]:
    """Approximate a cubic Bezier with a sequence of quadratic Beziers"""
    return BezierApproximator(cubic, tolerance, max_depth).create_quads()
