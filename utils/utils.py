from typing import Iterable, Tuple

MIN_EXTENT = 0.000001


def compute_bounds(points: Iterable[Tuple[float, float]]) -> Tuple[float, float, float, float]:
    """Bounding box (min_x, min_y, max_x, max_y) of a set of points, the unit box when empty"""
    points = list(points)
    if not points:
        return 0.0, 0.0, 1.0, 1.0

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return min(xs), min(ys), max(xs), max(ys)


def world_to_image_coords(x, y, bounds, resolution_width, resolution_height):
    min_x, min_y, max_x, max_y = bounds
    world_width = max(max_x - min_x, MIN_EXTENT)
    world_height = max(max_y - min_y, MIN_EXTENT)
    playfield_width = 0.8 * resolution_width
    playfield_height = 0.8 * resolution_height
    scale = min(playfield_width / world_width, playfield_height / world_height)
    playfield_left = (resolution_width - (max_x - min_x) * scale) / 2
    playfield_top = (resolution_height - (max_y - min_y) * scale) / 2
    # image rows grow downward
    screen_x = playfield_left + (x - min_x) * scale
    screen_y = playfield_top + (max_y - y) * scale
    return screen_x, screen_y
