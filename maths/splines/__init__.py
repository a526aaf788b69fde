from .spline import Spline, SplineType
from .bezier_spline_control import BezierSplineControl
from .natural_cubic import NaturalCubicSpline
from .catmull_rom import CatmullRomSpline
from .cubic_bezier_spline import CubicBezierSpline
from .spline_to_bezier import SplineToBezier

__all__ = [
    'Spline',
    'SplineType',
    'BezierSplineControl',
    'NaturalCubicSpline',
    'CatmullRomSpline',
    'CubicBezierSpline',
    'SplineToBezier'
]
