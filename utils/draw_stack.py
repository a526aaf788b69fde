import logging
from typing import List, Optional, Sequence, Tuple
import cv2
import numpy as np
from PIL import Image

from maths.curves.curve import Point, QuadFlattening, QuadSegment
from utils.utils import compute_bounds, world_to_image_coords

BACKGROUND = (255, 255, 255)
SEGMENT_COLORS = [(30, 90, 200), (220, 80, 40)]
KNOT_COLOR = (40, 40, 40)

DrawCommand = Tuple[str, Tuple[float, ...]]


def to_draw_commands(flattening: QuadFlattening) -> List[DrawCommand]:
    """moveTo/quadTo commands for a 2D draw stack, a moveTo is only issued where the pen is elsewhere"""
    commands: List[DrawCommand] = []
    pen = None
    for quad in flattening.quads:
        start = (quad.x0, quad.y0)
        if pen != start:
            commands.append(("M", start))
        commands.append(("Q", (quad.cx, quad.cy, quad.x1, quad.y1)))
        pen = (quad.x1, quad.y1)
    return commands


def to_svg_path(flattening: QuadFlattening) -> str:
    parts = []
    for command, values in to_draw_commands(flattening):
        parts.append(command + " " + " ".join(f"{v:g}" for v in values))
    return " ".join(parts)


def sample_quads(quads: Sequence[QuadSegment], steps: int = 16) -> np.ndarray:
    """Polyline through the quads, steps samples per quad, shared endpoints kept once"""
    if not quads:
        return np.zeros((0, 2))

    steps = max(1, steps)
    t = np.linspace(0.0, 1.0, steps + 1).reshape(-1, 1)
    s = 1.0 - t
    polyline = []
    for i, quad in enumerate(quads):
        p0 = np.array([quad.x0, quad.y0])
        c = np.array([quad.cx, quad.cy])
        p1 = np.array([quad.x1, quad.y1])
        samples = s * s * p0 + 2.0 * s * t * c + t * t * p1
        polyline.append(samples if i == 0 else samples[1:])

    return np.vstack(polyline)


def render_flattening(flattening: QuadFlattening, width: int = 800, height: int = 600,
                      output_path: Optional[str] = None, knots: Optional[Sequence[Point]] = None,
                      steps: int = 16) -> np.ndarray:
    """Draw the quad sequence on an RGB frame, alternating colors per spline segment"""
    frame = np.full((height, width, 3), BACKGROUND, dtype=np.uint8)

    world = [(q.x0, q.y0) for q in flattening.quads] + [(q.x1, q.y1) for q in flattening.quads]
    world += [(q.cx, q.cy) for q in flattening.quads]
    if knots:
        world += [k.as_tuple() for k in knots]
    bounds = compute_bounds(world)

    def to_pixels(points: np.ndarray) -> np.ndarray:
        pixels = [world_to_image_coords(x, y, bounds, width, height) for x, y in points]
        return np.round(np.array(pixels)).astype(np.int32).reshape(-1, 1, 2)

    for i in range(len(flattening.index) - 1):
        quads = flattening.segment_quads(i)
        if not quads:
            continue
        color = SEGMENT_COLORS[i % len(SEGMENT_COLORS)]
        cv2.polylines(frame, [to_pixels(sample_quads(quads, steps))], False, color, 2, cv2.LINE_AA)

    for knot in knots or []:
        x, y = world_to_image_coords(knot.x, knot.y, bounds, width, height)
        cv2.circle(frame, (int(round(x)), int(round(y))), 4, KNOT_COLOR, -1)

    if output_path:
        img = Image.fromarray(frame)
        img.save(output_path)
        logging.info(f"Rendered {len(flattening.quads)} quads to {output_path}")

    return frame
