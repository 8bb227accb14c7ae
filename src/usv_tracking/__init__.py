"""USV-tracking package – re-export high-level API."""
from .orchestrator import TrackingOrchestrator   # noqa: F401
from .common import TrackResult, TrackingError   # noqa: F401
from .adaptive import AdaptiveTracker, TrackState  # noqa: F401
from .config import (                            # noqa: F401
    SourceConfig, ColorThresholds, FilterConfig, BlobConfig,
    AdaptiveConfig, OutputConfig, PipelineMode, TrackingConfig,
)
