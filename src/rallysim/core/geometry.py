import math
from typing import Protocol


class HasCenter(Protocol):
    x: float
    y: float


def distance(a: HasCenter, b: HasCenter) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def distance_xy(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x1 - x2, y1 - y2)


def circles_overlap(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    radius: float,
) -> bool:
    """Two equal circles overlap when their centers are closer than twice the radius."""
    return distance_xy(x1, y1, x2, y2) < 2 * radius


def gap_to_nearest(
    x: float,
    y: float,
    centers: list[tuple[float, float]],
) -> float:
    """Distance from (x, y) to the closest of `centers`, inf when there are none."""
    return min((distance_xy(x, y, cx, cy) for cx, cy in centers), default=math.inf)
