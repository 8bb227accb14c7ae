# orchestrator.py
"""Per-frame entry point of the perception core and its interaction context."""
from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from usv_tracking.adaptive import AdaptiveTracker, TrackState
from usv_tracking.common import Point, Rect, TrackingError, TrackResult
from usv_tracking.config import PipelineMode, TrackingConfig
from usv_tracking.helpers import processing_size
from usv_tracking.pipeline import AdaptivePipeline, Pipeline, build_pipeline


class TrackingOrchestrator:
    """
    Owns the selected pipeline plus everything the UI can change between
    frames: selection, pause and the back-projection view.

    Events are plain method calls and take effect on the next
    ``process_frame``.
    """

    def __init__(
        self,
        cfg: TrackingConfig,
        input_size: Tuple[int, int],
        height_limit: int = 1080,
    ):
        self.cfg = cfg
        self.input_size = input_size
        self.height_limit = height_limit
        self.size = self._checked_size(input_size)
        self.pipeline: Pipeline = build_pipeline(cfg)

        self.show_back_projection = False
        self.last_result = TrackResult.not_found()
        self.frame: Optional[np.ndarray] = None
        self._paused = False

        if self.tracker is not None:
            self.tracker.frame_size = self.size

    # ------------------ Frame geometry --------------------
    def _checked_size(self, input_size: Tuple[int, int]) -> Tuple[int, int]:
        width, height = input_size
        if width <= 0 or height <= 0:
            raise TrackingError(f"Degenerate frame size {width}x{height}")
        size = processing_size(width, height, self.height_limit)
        if size[0] <= 0 or size[1] <= 0:
            raise TrackingError(
                f"Frame {width}x{height} scales to {size[0]}x{size[1]} "
                f"under height limit {self.height_limit}"
            )
        return size

    def prepare(self, frame: np.ndarray) -> np.ndarray:
        """Resized copy at processing resolution (or the frame itself)."""
        if frame is None or frame.size == 0:
            raise TrackingError("Empty frame")
        height, width = frame.shape[:2]
        if (width, height) != self.input_size:
            self.input_size = (width, height)
            self.size = self._checked_size(self.input_size)
        if self.size != (width, height):
            return cv2.resize(frame, self.size, interpolation=cv2.INTER_LANCZOS4)
        return frame

    # ------------------ Per-frame --------------------
    def process_frame(self, frame: np.ndarray) -> TrackResult:
        self.frame = self.prepare(frame)
        if self._paused and self.mode is PipelineMode.STATIC:
            return self.last_result
        self.last_result = self.pipeline.process(self.frame)
        return self.last_result

    # ------------------ Interaction events --------------------
    def begin_selection(self, point: Point) -> None:
        if self.tracker is not None:
            self.tracker.begin_selection(point)

    def update_selection(self, point: Point) -> None:
        if self.tracker is not None:
            self.tracker.update_selection(point)

    def end_selection(self) -> None:
        if self.tracker is not None:
            self.tracker.end_selection()

    def toggle_pause(self) -> None:
        if self.tracker is not None:
            self.tracker.toggle_pause()
        else:
            self._paused = not self._paused

    def stop_tracking(self) -> None:
        if self.tracker is not None:
            self.tracker.stop()
            self.last_result = TrackResult.not_found()

    def toggle_back_projection_view(self) -> None:
        self.show_back_projection = not self.show_back_projection

    # ------------------ Queries --------------------
    @property
    def mode(self) -> PipelineMode:
        return self.pipeline.mode

    @property
    def tracker(self) -> Optional[AdaptiveTracker]:
        if isinstance(self.pipeline, AdaptivePipeline):
            return self.pipeline.tracker
        return None

    @property
    def paused(self) -> bool:
        """The frame source should hold the current frame."""
        if self.tracker is not None:
            return self.tracker.frozen
        return self._paused

    @property
    def state(self) -> Optional[TrackState]:
        return self.tracker.state if self.tracker is not None else None

    @property
    def selection(self) -> Optional[Rect]:
        if self.tracker is not None and self.tracker.state is TrackState.SELECTING:
            return self.tracker.selection
        return None

    @property
    def histogram(self) -> Optional[np.ndarray]:
        return self.tracker.histogram if self.tracker is not None else None

    def debug_image(self) -> Optional[np.ndarray]:
        return self.pipeline.debug_image()
