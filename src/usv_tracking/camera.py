# camera.py
"""A thin wrapper around cv2.VideoCapture for video files and streams."""
import time
from typing import Optional, Tuple

import cv2
import numpy as np

from usv_tracking.config import SourceConfig


class FrameSource:
    def __init__(self, config: SourceConfig):
        self.config = config
        self.cap: Optional[cv2.VideoCapture] = None

        # Exposed runtime values
        self.actual_width = 0
        self.actual_height = 0
        self.actual_fps = 0.0
        self.frames_read = 0

    # --------------- Internal helpers ---------------
    def _estimate_stream_fps(self) -> float:
        """Streams rarely report FPS, so time a burst of reads instead."""
        n = self.config.fps_sample_frames
        if n <= 0:
            return 0.0
        start = time.time()
        for _ in range(n):
            ok, _frame = self.cap.read()
            if not ok:
                break
        elapsed = time.time() - start
        return n / elapsed if elapsed > 0 else 0.0

    # --------------- Public API ---------------------
    def open(self) -> bool:
        self.cap = cv2.VideoCapture(self.config.path)
        if not self.cap or not self.cap.isOpened():
            print(f"[Source] Could not open {self.config.path}")
            self.cap = None
            return False

        self.actual_width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.actual_height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.actual_fps = self.cap.get(cv2.CAP_PROP_FPS)
        if self.config.is_stream:
            self.actual_fps = self._estimate_stream_fps()

        print(
            f"[Source] {self.config.path}: "
            f"{self.actual_width}x{self.actual_height}@{self.actual_fps:.1f} FPS"
        )
        if self.actual_width == 0 or self.actual_height == 0:
            print("[Source] Error: source returned zero resolution")
            self.release()
            return False
        return True

    def read(self) -> Optional[np.ndarray]:
        """Next frame, or None at end of stream."""
        if not self.is_opened():
            return None
        ret, frame = self.cap.read()
        if not ret or frame is None:
            return None
        self.frames_read += 1
        return frame

    def is_opened(self) -> bool:
        return bool(self.cap and self.cap.isOpened())

    def release(self) -> None:
        if self.cap:
            print("[Source] Releasing capture")
            self.cap.release()
            self.cap = None

    # Convenience for other modules
    def get_properties(self) -> Tuple[int, int, float]:
        return self.actual_width, self.actual_height, self.actual_fps
