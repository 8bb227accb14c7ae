# overlay.py
"""Annotation geometry for a TrackResult, and the code that draws it."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from usv_tracking.common import Rect, RotatedBox, TrackResult

IntPoint = Tuple[int, int]
Segment = Tuple[IntPoint, IntPoint]

LOCATION_COLOR = (0, 255, 0)
LOCATION_THICKNESS = 1
POSE_LINE_COLOR = (0, 255, 255)
POSE_LINE_THICKNESS = 2
NOT_FOUND_COLOR = (0, 0, 255)
NOT_FOUND_TEXT = "EMILY not found!"
LABEL_OFFSET_PX = 20

HISTOGRAM_PANEL_SIZE = (320, 200)  # width, height


@dataclass(frozen=True)
class Overlay:
    found: bool
    crosshair: Tuple[Segment, ...] = ()
    label: str = ""
    label_anchor: Optional[IntPoint] = None
    axis: Optional[Segment] = None
    corners: Optional[Tuple[IntPoint, ...]] = None
    ellipse: Optional[RotatedBox] = None
    selection: Optional[Rect] = None


def _ipt(p) -> IntPoint:
    return int(p[0]), int(p[1])


def crosshair_segments(
    x: int, y: int, radius: float, width: int, height: int
) -> Tuple[Segment, ...]:
    """Four arms out of (x, y), each stopped at the frame edge."""
    r = int(radius)
    centre = (x, y)
    up = (x, y - r) if y - r > 0 else (x, 0)
    down = (x, y + r) if y + r < height else (x, height)
    left = (x - r, y) if x - r > 0 else (0, y)
    right = (x + r, y) if x + r < width else (width, y)
    return (centre, up), (centre, down), (centre, left), (centre, right)


def build_overlay(
    result: TrackResult,
    frame_size: Tuple[int, int],
    selection: Optional[Rect] = None,
) -> Overlay:
    if not result.found or result.position is None:
        return Overlay(found=False, selection=selection)

    width, height = frame_size
    x, y = _ipt(result.position)

    # The CamShift box is drawn as an ellipse with a crosshair sized to its
    # minor radius; blob detections size the crosshair by the axis.
    adaptive = result.search_window is not None and result.box is not None
    if adaptive:
        radius: Optional[float] = min(result.box.size) / 2.0
    else:
        radius = result.size

    crosshair: Tuple[Segment, ...] = ()
    anchor = (x, y + LABEL_OFFSET_PX)
    if radius is not None:
        crosshair = crosshair_segments(x, y, radius, width, height)
        anchor = (x, y + int(radius) + LABEL_OFFSET_PX)

    axis = None
    if result.axis is not None:
        axis = (_ipt(result.axis.start), _ipt(result.axis.end))

    corners = None
    if result.box is not None:
        corners = tuple(_ipt(p) for p in result.box.corners())

    return Overlay(
        found=True,
        crosshair=crosshair,
        label=f"[{x},{y}]",
        label_anchor=anchor,
        axis=axis,
        corners=corners,
        ellipse=result.box if adaptive else None,
        selection=selection,
    )


# ---------------------------------------------------------------------
#                              Drawing
# ---------------------------------------------------------------------
def draw_overlay(img: np.ndarray, overlay: Overlay) -> None:
    if not overlay.found:
        cv2.putText(img, NOT_FOUND_TEXT, (50, 50), cv2.FONT_HERSHEY_SIMPLEX, 1, NOT_FOUND_COLOR, 2)

    if overlay.ellipse is not None:
        cv2.ellipse(img, overlay.ellipse.to_cv(), LOCATION_COLOR, LOCATION_THICKNESS, cv2.LINE_AA)

    for start, end in overlay.crosshair:
        cv2.line(img, start, end, LOCATION_COLOR, LOCATION_THICKNESS)

    if overlay.label_anchor is not None:
        cv2.putText(img, overlay.label, overlay.label_anchor, cv2.FONT_HERSHEY_PLAIN, 1, LOCATION_COLOR, 1, cv2.LINE_8)

    if overlay.axis is not None:
        cv2.line(img, overlay.axis[0], overlay.axis[1], POSE_LINE_COLOR, POSE_LINE_THICKNESS, cv2.LINE_8)

    # Selection being dragged is shown inverted
    if overlay.selection is not None:
        x, y, w, h = overlay.selection
        if w > 0 and h > 0:
            roi = img[y:y + h, x:x + w]
            cv2.bitwise_not(roi, roi)


def render_histogram(hist: Optional[np.ndarray]) -> np.ndarray:
    """Bar chart of a 0‒255 normalised hue histogram, bars in their own hue."""
    width, height = HISTOGRAM_PANEL_SIZE
    panel = np.zeros((height, width, 3), dtype=np.uint8)
    values = np.asarray(hist, dtype=float).ravel() if hist is not None else ()
    if len(values) == 0:
        return panel

    bins = len(values)
    bin_width = width // bins
    hues = np.array(
        [[(int(i * 180.0 / bins), 255, 255) for i in range(bins)]], dtype=np.uint8
    )
    colours = cv2.cvtColor(hues, cv2.COLOR_HSV2BGR)[0]
    for i in range(bins):
        val = int(np.clip(values[i] * height / 255.0, 0, height))
        cv2.rectangle(
            panel,
            (i * bin_width, height),
            ((i + 1) * bin_width, height - val),
            tuple(int(c) for c in colours[i]),
            -1,
        )
    return panel
