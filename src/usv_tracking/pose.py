# pose.py
"""Vehicle size and heading from a rotated bounding shape."""
from typing import Optional, Tuple

import cv2
import numpy as np

from usv_tracking.common import PrincipalAxis, RotatedBox

FITS = ("ellipse", "min_area_rect")

# fitEllipse needs at least five points
MIN_POINTS = 5


class PoseEstimator:
    """
    Fits a rotated box to a boundary and takes the line between the midpoints
    of its two short sides as the principal axis.

    The default ``"ellipse"`` fit uses the bounding rectangle of the
    least-squares ellipse, which is steadier on ragged blob outlines than
    ``minAreaRect``. On hulls only a pixel or two thick the ellipse can come
    out rotated a quarter turn; use ``"min_area_rect"`` for such targets.
    """

    def __init__(self, fit: str = "ellipse"):
        if fit not in FITS:
            raise ValueError(f"Unknown pose fit {fit!r}, expected one of {FITS}")
        self.fit = fit

    def fit_box(self, points: np.ndarray) -> Optional[RotatedBox]:
        pts = np.asarray(points, dtype=np.float32).reshape(-1, 1, 2)
        if len(pts) < MIN_POINTS:
            return None
        if self.fit == "ellipse":
            return RotatedBox.from_cv(cv2.fitEllipse(pts))
        return RotatedBox.from_cv(cv2.minAreaRect(pts))

    def estimate(
        self, points: np.ndarray
    ) -> Tuple[Optional[RotatedBox], Optional[PrincipalAxis]]:
        box = self.fit_box(points)
        if box is None:
            return None, None
        return box, principal_axis(box)


def principal_axis(box: RotatedBox) -> PrincipalAxis:
    corners = box.corners()
    shortest = 0
    shortest_len = float("inf")
    for j in range(4):
        length = float(np.linalg.norm(corners[j] - corners[(j + 1) % 4]))
        if length < shortest_len:
            shortest_len = length
            shortest = j

    mid_1 = (corners[shortest] + corners[(shortest + 1) % 4]) * 0.5
    mid_2 = (corners[(shortest + 2) % 4] + corners[(shortest + 3) % 4]) * 0.5
    return PrincipalAxis(
        (float(mid_1[0]), float(mid_1[1])), (float(mid_2[0]), float(mid_2[1]))
    )
