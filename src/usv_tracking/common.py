# common.py
"""Objects that are shared across multiple modules."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

Point = Tuple[float, float]
Rect = Tuple[int, int, int, int]  # x, y, w, h


class TrackingError(RuntimeError):
    """Raised when no mask can ever be computed for the incoming frames."""


@dataclass(frozen=True)
class RotatedBox:
    """An OpenCV ``RotatedRect``: center, (width, height), angle in degrees."""
    center: Point
    size: Tuple[float, float]
    angle: float

    @classmethod
    def from_cv(cls, rect) -> "RotatedBox":
        (cx, cy), (w, h), angle = rect
        return cls((float(cx), float(cy)), (float(w), float(h)), float(angle))

    def to_cv(self):
        return self.center, self.size, self.angle

    def corners(self) -> np.ndarray:
        """4×2 float array in ``cv2.boxPoints`` order."""
        return cv2.boxPoints(self.to_cv())

    @property
    def area(self) -> float:
        return self.size[0] * self.size[1]


@dataclass(frozen=True)
class PrincipalAxis:
    start: Point
    end: Point

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    @property
    def size(self) -> float:
        return self.length / 2.0

    @property
    def orientation(self) -> float:
        """Axis angle in radians, image coordinates, folded into [0, π)."""
        angle = math.atan2(self.end[1] - self.start[1], self.end[0] - self.start[0])
        return angle % math.pi


@dataclass(frozen=True)
class TrackResult:
    """
    A single-frame snapshot of where the vehicle is.
    Positions are in processing-resolution *pixel* space.
    """
    found: bool
    position: Optional[Point] = None
    orientation: Optional[float] = None
    size: Optional[float] = None
    box: Optional[RotatedBox] = None
    axis: Optional[PrincipalAxis] = None
    search_window: Optional[Rect] = None

    @classmethod
    def not_found(cls) -> "TrackResult":
        return cls(found=False)
