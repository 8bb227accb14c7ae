# morphology.py
"""Erode/dilate clean-up of the threshold mask."""
import cv2
import numpy as np

from usv_tracking.config import FilterConfig, nonzero_kernel


class MorphologyFilter:
    """
    Two erosions knock out isolated noise pixels, then two dilations grow
    what survived back into solid blobs.
    """

    passes = 2

    def __init__(self, filters: FilterConfig):
        self.filters = filters

    def apply(self, mask: np.ndarray) -> np.ndarray:
        e = nonzero_kernel(self.filters.erode_size)
        d = nonzero_kernel(self.filters.dilate_size)
        erode_element = cv2.getStructuringElement(cv2.MORPH_RECT, (e, e))
        dilate_element = cv2.getStructuringElement(cv2.MORPH_RECT, (d, d))

        cleaned = cv2.erode(mask, erode_element, iterations=self.passes)
        return cv2.dilate(cleaned, dilate_element, iterations=self.passes)
