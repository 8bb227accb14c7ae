# pipeline.py
"""The two interchangeable per-frame pipelines."""
from __future__ import annotations

from typing import Optional, Protocol

import numpy as np

from usv_tracking.adaptive import AdaptiveTracker
from usv_tracking.blobs import AreaBounds, BlobSelector
from usv_tracking.common import TrackResult
from usv_tracking.config import PipelineMode, TrackingConfig
from usv_tracking.morphology import MorphologyFilter
from usv_tracking.pose import PoseEstimator
from usv_tracking.segmenter import ColorSegmenter


class Pipeline(Protocol):
    mode: PipelineMode

    def process(self, frame_bgr: np.ndarray) -> TrackResult:
        ...

    def debug_image(self) -> Optional[np.ndarray]:
        """Single-channel intermediate worth showing instead of the frame."""
        ...


class StaticThresholdPipeline:
    """Threshold → erode/dilate → largest blob → principal axis."""

    mode = PipelineMode.STATIC

    def __init__(self, cfg: TrackingConfig):
        self.cfg = cfg
        self.segmenter = ColorSegmenter(cfg.thresholds, cfg.filters)
        self.morphology = MorphologyFilter(cfg.filters)
        self.pose = PoseEstimator(cfg.blobs.pose_fit)
        self.selector: Optional[BlobSelector] = None
        self.threshold: Optional[np.ndarray] = None
        self.cleaned: Optional[np.ndarray] = None

    def _selector_for(self, width: int, height: int) -> BlobSelector:
        bounds = AreaBounds.for_frame(width, height, self.cfg.blobs.min_area)
        if self.selector is None or self.selector.bounds != bounds:
            self.selector = BlobSelector(bounds)
        return self.selector

    def process(self, frame_bgr: np.ndarray) -> TrackResult:
        height, width = frame_bgr.shape[:2]
        selector = self._selector_for(width, height)

        self.threshold = self.segmenter.mask(frame_bgr)
        self.cleaned = self.morphology.apply(self.threshold)

        region = selector.find(self.cleaned)
        if region is None:
            return TrackResult.not_found()

        # Pose is a refinement; a detection stands without it
        box, axis = self.pose.estimate(region.contour)
        if axis is None:
            return TrackResult(found=True, position=region.centroid)
        return TrackResult(
            found=True,
            position=region.centroid,
            orientation=axis.orientation,
            size=axis.size,
            box=box,
            axis=axis,
        )

    def debug_image(self) -> Optional[np.ndarray]:
        return self.cleaned


class AdaptivePipeline:
    """Hue/SV split feeding the CamShift tracker."""

    mode = PipelineMode.ADAPTIVE

    def __init__(self, cfg: TrackingConfig):
        self.cfg = cfg
        self.segmenter = ColorSegmenter(cfg.thresholds, cfg.filters)
        self.tracker = AdaptiveTracker(cfg.adaptive)

    def process(self, frame_bgr: np.ndarray) -> TrackResult:
        hue, sv_mask = self.segmenter.hue_and_sv_mask(frame_bgr)
        return self.tracker.process(hue, sv_mask)

    def debug_image(self) -> Optional[np.ndarray]:
        return self.tracker.back_projection


def build_pipeline(cfg: TrackingConfig) -> Pipeline:
    if cfg.mode is PipelineMode.ADAPTIVE:
        return AdaptivePipeline(cfg)
    return StaticThresholdPipeline(cfg)
