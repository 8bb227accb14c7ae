# helpers.py
"""Small utility functions that don’t fit elsewhere."""
from typing import Tuple

from usv_tracking.common import Point, Rect


def clip_rect(rect: Rect, width: int, height: int) -> Rect:
    """Intersection of ``rect`` with the frame; empty rects come back 0×0."""
    x, y, w, h = rect
    x0 = max(x, 0)
    y0 = max(y, 0)
    x1 = min(x + w, width)
    y1 = min(y + h, height)
    if x1 <= x0 or y1 <= y0:
        return (x0, y0, 0, 0)
    return (x0, y0, x1 - x0, y1 - y0)


def rect_between(a: Point, b: Point) -> Rect:
    """Axis-aligned box spanned by two corner points."""
    x = int(min(a[0], b[0]))
    y = int(min(a[1], b[1]))
    return (x, y, int(abs(b[0] - a[0])), int(abs(b[1] - a[1])))


def processing_size(width: int, height: int, height_limit: int) -> Tuple[int, int]:
    """
    Frame size the pipeline works at. Frames taller than ``height_limit`` are
    scaled down keeping the aspect ratio; smaller frames are never enlarged.
    """
    if height_limit > 0 and height > height_limit:
        ratio = height_limit / height
        return int(width * ratio), height_limit
    return width, height
