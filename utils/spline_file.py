import json
import logging
import os
from typing import Any, Dict, List, Sequence, Tuple

from maths.curves.curve import QuadFlattening
from maths.splines import CatmullRomSpline, CubicBezierSpline, NaturalCubicSpline, Spline, SplineType

DEFAULT_TYPE = "cubicbezier"
DEFAULT_TENSION = 0.5


def parse_points(text: str) -> List[Tuple[float, float]]:
    """Parse knots written as 'x,y x,y ...'"""
    points = []
    for token in text.replace(";", " ").split():
        values = token.split(",")
        if len(values) != 2:
            raise ValueError(f"Invalid point: {token}, expected x,y")
        try:
            points.append((float(values[0]), float(values[1])))
        except ValueError:
            raise ValueError(f"Invalid point coordinates: {token}")
    return points


def create_spline(spline_type: SplineType, points: Sequence[Tuple[float, float]],
                  closed: bool = False, tension: float = DEFAULT_TENSION) -> Spline:
    x = [p[0] for p in points]
    y = [p[1] for p in points]

    if spline_type == SplineType.CARTESIAN:
        if closed:
            logging.warning("Cartesian splines cannot be closed, ignoring closed flag")
        return NaturalCubicSpline(x, y)
    if spline_type == SplineType.CATMULL_ROM:
        return CatmullRomSpline(x, y, closed)
    return CubicBezierSpline(x, y, closed, tension)


def spline_from_dict(data: Dict[str, Any]) -> Spline:
    """Create a spline from {"type": ..., "points": [[x, y], ...], "closed": bool, "tension": float}"""
    if not isinstance(data, dict):
        raise ValueError(f"Spline description must be an object, got {type(data).__name__}")

    spline_type = SplineType.from_name(str(data.get("type", DEFAULT_TYPE)))

    raw_points = data.get("points")
    if not isinstance(raw_points, list):
        raise ValueError("Spline description must have a list of points")

    points = []
    for point in raw_points:
        if not isinstance(point, (list, tuple)) or len(point) != 2:
            raise ValueError(f"Invalid point: {point}, expected [x, y]")
        try:
            points.append((float(point[0]), float(point[1])))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid point coordinates: {point}")

    closed = data.get("closed", False)
    if not isinstance(closed, bool):
        raise ValueError(f"closed must be a boolean, got {closed}")

    try:
        tension = float(data.get("tension", DEFAULT_TENSION))
    except (TypeError, ValueError):
        raise ValueError(f"tension must be a number, got {data.get('tension')}")

    return create_spline(spline_type, points, closed, tension)


def load_spline(path: str) -> Spline:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Spline file not found. Path {path}.")

    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid spline file {path}: {str(e)}")

    spline = spline_from_dict(data)
    logging.info(f"Loaded {spline.spline_type.name.lower()} spline with {spline.point_count()} knots from {path}")
    return spline


def flattening_to_dict(flattening: QuadFlattening) -> Dict[str, Any]:
    return {
        "quads": [quad.to_dict() for quad in flattening.quads],
        "index": list(flattening.index)
    }
