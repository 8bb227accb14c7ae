# adaptive.py
"""Hue-histogram CamShift tracker with interactive (re)initialisation."""
from __future__ import annotations

from enum import Enum, auto
from typing import Optional, Tuple

import cv2
import numpy as np

from usv_tracking.common import Point, Rect, RotatedBox, TrackResult
from usv_tracking.config import AdaptiveConfig
from usv_tracking.helpers import clip_rect, rect_between
from usv_tracking.pose import principal_axis


class TrackState(Enum):
    IDLE = auto()
    SELECTING = auto()
    INITIALIZING = auto()
    TRACKING = auto()
    PAUSED = auto()


def reinflate_window(window: Rect, rows: int, cols: int) -> Rect:
    """Blow a collapsed search window back up around its last location."""
    half = (min(rows, cols) + 5) // 6
    x, y, w, h = window
    cx = x + w // 2
    cy = y + h // 2
    return clip_rect((cx - half, cy - half, 2 * half, 2 * half), cols, rows)


class AdaptiveTracker:
    """
    Learns the hue histogram of a user-drawn selection and follows it with
    CamShift on the saturation/value-gated back-projection.

    Selection events may arrive at any time between frames; the histogram is
    learnt on the first frame processed after the selection completes.
    """

    def __init__(self, cfg: AdaptiveConfig, frame_size: Tuple[int, int] = (0, 0)):
        self.cfg = cfg
        self.frame_size = frame_size          # (width, height)
        self.state = TrackState.IDLE

        # Selection in progress
        self.selection: Optional[Rect] = None
        self._origin: Optional[Point] = None

        # Tracking session
        self.histogram: Optional[np.ndarray] = None
        self.window: Optional[Rect] = None
        self.back_projection: Optional[np.ndarray] = None
        self.last_result = TrackResult.not_found()

        # Pause bookkeeping
        self._resume_state = TrackState.IDLE
        self._frozen_selection = False

    # ------------------ Interaction events --------------------
    def begin_selection(self, point: Point) -> None:
        self._frozen_selection = self.frozen
        self._origin = point
        self.selection = (int(point[0]), int(point[1]), 0, 0)
        self._reset_session()
        self.state = TrackState.SELECTING

    def update_selection(self, point: Point) -> None:
        if self.state is not TrackState.SELECTING or self._origin is None:
            return
        width, height = self.frame_size
        self.selection = clip_rect(rect_between(self._origin, point), width, height)

    def end_selection(self) -> None:
        if self.state is not TrackState.SELECTING:
            return
        if self.selection is not None and self.selection[2] > 0 and self.selection[3] > 0:
            self.state = TrackState.INITIALIZING
        else:
            self.selection = None
            self._frozen_selection = False
            self.state = TrackState.IDLE

    def toggle_pause(self) -> None:
        if self.state is TrackState.PAUSED:
            self.state = self._resume_state
        elif self.state in (TrackState.IDLE, TrackState.TRACKING):
            self._resume_state = self.state
            self.state = TrackState.PAUSED

    def stop(self) -> None:
        self._reset_session()
        self.selection = None
        self._origin = None
        self._frozen_selection = False
        self.state = TrackState.IDLE

    @property
    def frozen(self) -> bool:
        """True while the frame source should hold the current frame."""
        if self.state is TrackState.PAUSED:
            return True
        return self._frozen_selection and self.state in (
            TrackState.SELECTING,
            TrackState.INITIALIZING,
        )

    # ------------------ Per-frame processing --------------------
    def process(self, hue: np.ndarray, sv_mask: np.ndarray) -> TrackResult:
        rows, cols = hue.shape[:2]
        self.frame_size = (cols, rows)

        if self.state is TrackState.PAUSED:
            return self.last_result

        if self.state is TrackState.INITIALIZING:
            self._learn(hue, sv_mask)

        if self.state is TrackState.TRACKING:
            self.last_result = self._track(hue, sv_mask)
        else:
            self.back_projection = None
            self.last_result = TrackResult.not_found()
        return self.last_result

    # ------------------ Internal helpers --------------------
    def _reset_session(self) -> None:
        self.histogram = None
        self.window = None
        self.back_projection = None
        self.last_result = TrackResult.not_found()

    def _learn(self, hue: np.ndarray, sv_mask: np.ndarray) -> None:
        rows, cols = hue.shape[:2]
        x, y, w, h = clip_rect(self.selection, cols, rows)
        if w == 0 or h == 0:
            self.stop()
            return

        roi = hue[y:y + h, x:x + w]
        roi_mask = sv_mask[y:y + h, x:x + w]
        hist = cv2.calcHist(
            [roi], [0], roi_mask, [self.cfg.histogram_bins], list(self.cfg.hue_range)
        )
        cv2.normalize(hist, hist, 0, 255, cv2.NORM_MINMAX)

        self.histogram = hist
        self.window = (x, y, w, h)
        self._frozen_selection = False
        self.state = TrackState.TRACKING

    def _track(self, hue: np.ndarray, sv_mask: np.ndarray) -> TrackResult:
        rows, cols = hue.shape[:2]
        bp = cv2.calcBackProject([hue], [0], self.histogram, list(self.cfg.hue_range), 1)
        bp = cv2.bitwise_and(bp, sv_mask)
        self.back_projection = bp

        criteria = (
            cv2.TERM_CRITERIA_EPS | cv2.TERM_CRITERIA_COUNT,
            self.cfg.max_iterations,
            self.cfg.epsilon,
        )
        rect, window = cv2.CamShift(bp, self.window, criteria)
        window = tuple(int(v) for v in window)

        # Target lost or shrunk to nothing: reacquire next frame
        if window[2] * window[3] <= 1:
            window = reinflate_window(window, rows, cols)
        self.window = window

        box = RotatedBox.from_cv(rect)
        if box.size[0] <= 0 or box.size[1] <= 0:
            return TrackResult(found=False, search_window=window)

        axis = principal_axis(box)
        return TrackResult(
            found=True,
            position=box.center,
            orientation=axis.orientation,
            size=axis.size,
            box=box,
            axis=axis,
            search_window=window,
        )
