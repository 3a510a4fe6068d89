"""Pure geometry queries over token bounding polygons."""

import math

from receiptgrid.domain.document import BoundingPolygon

DEFAULT_SAME_LINE_TOLERANCE = 10.0


def leftmost_x(box: BoundingPolygon) -> int:
    return min(v.x for v in box.vertices)


def rightmost_x(box: BoundingPolygon) -> int:
    return max(v.x for v in box.vertices)


def top_y(box: BoundingPolygon) -> int:
    return min(v.y for v in box.vertices)


def bottom_y(box: BoundingPolygon) -> int:
    return max(v.y for v in box.vertices)


def vertical_center(box: BoundingPolygon) -> float:
    """Midpoint between the lowest and highest vertex."""
    return (top_y(box) + bottom_y(box)) / 2


def centroid(box: BoundingPolygon) -> tuple[float, float]:
    """Vertex-averaged center of the polygon."""
    count = len(box.vertices)
    return (
        sum(v.x for v in box.vertices) / count,
        sum(v.y for v in box.vertices) / count,
    )


def is_same_line(
    box1: BoundingPolygon,
    box2: BoundingPolygon,
    tolerance: float = DEFAULT_SAME_LINE_TOLERANCE,
) -> bool:
    """Return True if the vertical centers of two boxes are within tolerance."""
    return abs(vertical_center(box1) - vertical_center(box2)) <= tolerance


def centroid_distance(box1: BoundingPolygon, box2: BoundingPolygon) -> float:
    (x1, y1), (x2, y2) = centroid(box1), centroid(box2)
    return math.hypot(x2 - x1, y2 - y1)


def font_size(box: BoundingPolygon) -> int:
    """
    Approximate font size as bounding-box height.

    This is a coarse proxy: a tall multi-line block scores higher than a
    single line of larger glyphs.
    """
    return bottom_y(box) - top_y(box)
