from abc import ABC, abstractmethod
from enum import IntEnum
from typing import List

from maths.curves.curve import Point


class SplineType(IntEnum):
    CARTESIAN = 0
    CATMULL_ROM = 1
    CUBIC_BEZIER = 2

    @classmethod
    def from_name(cls, name: str) -> 'SplineType':
        key = name.strip().lower().replace("-", "").replace("_", "")
        for member in cls:
            if member.name.lower().replace("_", "") == key:
                return member
        raise ValueError(f"Unknown spline type: {name}")


class Spline(ABC):
    """Interpolating spline through an ordered set of knots"""

    @property
    @abstractmethod
    def spline_type(self) -> SplineType:
        """Variant tag used to select the conversion strategy"""

    @abstractmethod
    def point_count(self) -> int:
        """Number of knots"""

    @abstractmethod
    def get_points(self) -> List[Point]:
        """Knots in spline order"""
