# segmenter.py
"""HSV colour segmentation."""
from typing import Tuple

import cv2
import numpy as np

from usv_tracking.config import ColorThresholds, FilterConfig, odd_kernel


class ColorSegmenter:
    def __init__(self, thresholds: ColorThresholds, filters: FilterConfig):
        self.thresholds = thresholds
        self.filters = filters

    def to_hsv(self, frame_bgr: np.ndarray) -> np.ndarray:
        """Blur, convert to HSV and equalize the value channel."""
        k = odd_kernel(self.filters.blur_kernel_size)
        blurred = cv2.GaussianBlur(frame_bgr, (k, k), 0)
        hsv = cv2.cvtColor(blurred, cv2.COLOR_BGR2HSV)
        h, s, v = cv2.split(hsv)
        v = cv2.equalizeHist(v)
        return cv2.merge((h, s, v))

    def threshold(self, hsv: np.ndarray) -> np.ndarray:
        t = self.thresholds
        (h1_lo, h1_hi), (h2_lo, h2_hi) = t.hue_ranges()
        lower = cv2.inRange(hsv, t.sv_lower(h1_lo), t.sv_upper(h1_hi))
        upper = cv2.inRange(hsv, t.sv_lower(h2_lo), t.sv_upper(h2_hi))
        return cv2.bitwise_or(lower, upper)

    def mask(self, frame_bgr: np.ndarray) -> np.ndarray:
        """255 where the pixel falls in either hue range and both S/V ranges."""
        return self.threshold(self.to_hsv(frame_bgr))

    def hue_and_sv_mask(self, frame_bgr: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Hue channel plus a mask on saturation and value only (adaptive mode)."""
        hsv = self.to_hsv(frame_bgr)
        t = self.thresholds
        sv_mask = cv2.inRange(hsv, t.sv_lower(0), t.sv_upper(180))
        hue = np.ascontiguousarray(hsv[:, :, 0])
        return hue, sv_mask
