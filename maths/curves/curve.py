from dataclasses import dataclass, field, asdict
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class QuadSegment:
    """Quadratic Bezier geometric constraints, start, middle control point and end"""
    x0: float
    y0: float
    cx: float
    cy: float
    x1: float
    y1: float
    length: float = 0.0

    @property
    def start(self) -> Point:
        return Point(self.x0, self.y0)

    @property
    def end(self) -> Point:
        return Point(self.x1, self.y1)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class CubicSegment:
    """Cubic Bezier geometric constraints, start, two control points and end"""
    x0: float = 0.0
    y0: float = 0.0
    cx: float = 0.0
    cy: float = 0.0
    cx1: float = 0.0
    cy1: float = 0.0
    x1: float = 0.0
    y1: float = 0.0

    @property
    def start(self) -> Point:
        return Point(self.x0, self.y0)

    @property
    def end(self) -> Point:
        return Point(self.x1, self.y1)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class QuadFlattening:
    """
    Quad. Bezier sequence approximating a spline. index[i] is the position in quads where the
    i-th spline segment begins, the last entry equals len(quads).
    """
    quads: List[QuadSegment] = field(default_factory=list)
    index: List[int] = field(default_factory=list)

    def segment_quads(self, i: int) -> List[QuadSegment]:
        if i < 0 or i >= len(self.index) - 1:
            return []
        return self.quads[self.index[i]:self.index[i + 1]]

    def __len__(self) -> int:
        return len(self.quads)
