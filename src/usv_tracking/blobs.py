# blobs.py
"""Connected-region extraction and largest-blob selection."""
from dataclasses import dataclass
from typing import List, Optional

import cv2
import numpy as np

from usv_tracking.common import Point


@dataclass(frozen=True)
class AreaBounds:
    min_area: float
    max_area: float

    def __post_init__(self):
        if self.min_area < 1:
            raise ValueError("min_area must be at least 1")

    @classmethod
    def for_frame(cls, width: int, height: int, min_area: float = 1) -> "AreaBounds":
        return cls(min_area=min_area, max_area=width * height)

    def admits(self, area: float) -> bool:
        # Both ends are exclusive.
        return self.min_area < area < self.max_area


@dataclass(frozen=True, eq=False)
class Region:
    contour: np.ndarray
    area: float
    centroid: Point
    index: int


class BlobSelector:
    def __init__(self, bounds: AreaBounds):
        self.bounds = bounds

    @staticmethod
    def extract(mask: np.ndarray) -> List[Region]:
        """Top-level regions in hierarchy order, with moment area/centroid."""
        # findContours returns 3 values on OpenCV 3 and 2 on OpenCV 4
        contours, hierarchy = cv2.findContours(
            mask.copy(), cv2.RETR_CCOMP, cv2.CHAIN_APPROX_SIMPLE
        )[-2:]
        if hierarchy is None or len(hierarchy) == 0:
            return []

        regions: List[Region] = []
        i = 0
        while i >= 0:
            contour = contours[i]
            m = cv2.moments(contour)
            area = m["m00"]
            if area > 0:
                centroid = (m["m10"] / area, m["m01"] / area)
            else:
                centroid = tuple(map(float, contour[0, 0]))
            regions.append(Region(contour, float(area), centroid, i))
            i = int(hierarchy[0][i][0])
        return regions

    def select(self, regions: List[Region]) -> Optional[Region]:
        """Largest admissible region; the earlier one wins a tie."""
        best: Optional[Region] = None
        for region in regions:
            if not self.bounds.admits(region.area):
                continue
            if best is None or region.area > best.area:
                best = region
        return best

    def find(self, mask: np.ndarray) -> Optional[Region]:
        return self.select(self.extract(mask))
