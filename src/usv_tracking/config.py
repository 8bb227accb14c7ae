# config.py
"""Typed configuration blobs for the whole system."""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Tuple


class PipelineMode(str, Enum):
    STATIC = "static"
    ADAPTIVE = "adaptive"


def odd_kernel(size: int) -> int:
    """Gaussian kernels must be odd; even sizes grow to the next odd one."""
    return size + 1 if size % 2 == 0 else size


def nonzero_kernel(size: int) -> int:
    return 1 if size == 0 else size


# ---------------------- Source ----------------------
@dataclass
class SourceConfig:
    path: str = "input/lake_bryan.mov"   # File path or rtsp/rtmp URL
    is_stream: bool = False
    height_limit: int = 1080             # Taller frames are downscaled
    fps_sample_frames: int = 120         # Streams only, when FPS is unknown


# -------------------- Thresholds --------------------
@dataclass
class ColorThresholds:
    # OpenCV 8-bit HSV: hue 0‒180, saturation/value 0‒255.
    # Two hue ranges so red can wrap around 0.
    hue_1_min: int = 0
    hue_1_max: int = 10
    hue_2_min: int = 160
    hue_2_max: int = 180
    saturation_min: int = 120
    saturation_max: int = 255
    value_min: int = 100
    value_max: int = 255

    def validate(self) -> None:
        for name in ("hue_1", "hue_2", "saturation", "value"):
            lo = getattr(self, f"{name}_min")
            hi = getattr(self, f"{name}_max")
            if lo > hi:
                raise ValueError(f"{name}: min {lo} > max {hi}")

    def hue_ranges(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        return (self.hue_1_min, self.hue_1_max), (self.hue_2_min, self.hue_2_max)

    def sv_lower(self, hue: int = 0) -> Tuple[int, int, int]:
        return hue, self.saturation_min, self.value_min

    def sv_upper(self, hue: int = 180) -> Tuple[int, int, int]:
        return hue, self.saturation_max, self.value_max


# ---------------------- Filter ----------------------
@dataclass
class FilterConfig:
    blur_kernel_size: int = 21
    erode_size: int = 2
    dilate_size: int = 16

    def normalize(self) -> None:
        """Fix up values the way the tuning sliders always have."""
        if min(self.blur_kernel_size, self.erode_size, self.dilate_size) < 0:
            raise ValueError(f"Kernel sizes must be non-negative: {self}")
        self.blur_kernel_size = odd_kernel(self.blur_kernel_size)
        self.erode_size = nonzero_kernel(self.erode_size)
        self.dilate_size = nonzero_kernel(self.dilate_size)


# ----------------------- Blobs ----------------------
@dataclass
class BlobConfig:
    min_area: int = 1 * 1
    pose_fit: str = "ellipse"            # "ellipse" or "min_area_rect"


# --------------------- Adaptive ---------------------
@dataclass
class AdaptiveConfig:
    histogram_bins: int = 16
    hue_range: Tuple[float, float] = (0.0, 180.0)
    max_iterations: int = 10
    epsilon: float = 1.0


# ---------------------- Output ----------------------
@dataclass
class OutputConfig:
    record: bool = True
    directory: str = "output"
    filename_pattern: str = "%Y_%m_%d_%H_%M_%S.avi"
    fourcc_str: str = "DIVX"
    window_name: str = "EMILY Tracker"
    show_histogram: bool = True
    fullscreen: bool = False


@dataclass
class TrackingConfig:
    """Everything the orchestrator needs, bundled."""
    mode: PipelineMode = PipelineMode.STATIC
    thresholds: Optional[ColorThresholds] = None
    filters: Optional[FilterConfig] = None
    blobs: Optional[BlobConfig] = None
    adaptive: Optional[AdaptiveConfig] = None

    def __post_init__(self) -> None:
        self.mode = PipelineMode(self.mode)
        if self.thresholds is None:
            self.thresholds = ColorThresholds()
        if self.filters is None:
            self.filters = FilterConfig()
        if self.blobs is None:
            self.blobs = BlobConfig()
        if self.adaptive is None:
            self.adaptive = AdaptiveConfig()
        if self.blobs.min_area < 1:
            raise ValueError("min_area must be at least 1")
        self.thresholds.validate()
        self.filters.normalize()


def field_names(cls) -> Tuple[str, ...]:
    return tuple(f.name for f in fields(cls))
