# recorder.py
"""Writes annotated frames to a time-stamped video file."""
from __future__ import annotations

import time
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

from usv_tracking.config import OutputConfig

# Used when the source cannot tell us its rate
FALLBACK_FPS = 30.0


class VideoRecorder:
    def __init__(self, config: OutputConfig):
        self.config = config
        self.writer: Optional[cv2.VideoWriter] = None
        self.path: Optional[Path] = None
        self.frames_written = 0

    def output_path(self, now: Optional[float] = None) -> Path:
        stamp = time.strftime(self.config.filename_pattern, time.localtime(now))
        return Path(self.config.directory) / stamp

    def open(self, size: Tuple[int, int], fps: float) -> bool:
        self.path = self.output_path()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fourcc = cv2.VideoWriter_fourcc(*self.config.fourcc_str)
        rate = fps if fps > 0 else FALLBACK_FPS
        self.writer = cv2.VideoWriter(str(self.path), fourcc, rate, size, True)
        if not self.writer.isOpened():
            print(f"[Recorder] Cannot open the output video file {self.path} for write.")
            self.writer = None
            return False
        print(f"[Recorder] Writing {size[0]}x{size[1]}@{rate:.1f} FPS to {self.path}")
        return True

    def write(self, frame: np.ndarray) -> None:
        if self.writer is not None:
            self.writer.write(frame)
            self.frames_written += 1

    def is_open(self) -> bool:
        return self.writer is not None

    def release(self) -> None:
        if self.writer is not None:
            print(f"[Recorder] Closing {self.path} ({self.frames_written} frames)")
            self.writer.release()
            self.writer = None
