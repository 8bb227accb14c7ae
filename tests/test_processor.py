import cv2

from usv_tracking.adaptive import TrackState
from usv_tracking.config import OutputConfig, PipelineMode, SourceConfig, TrackingConfig
from usv_tracking.orchestrator import TrackingOrchestrator
from usv_tracking.processor import TrackingProcessor


def _processor(mode=PipelineMode.ADAPTIVE):
    cfg = TrackingConfig(mode=mode)
    processor = TrackingProcessor(SourceConfig(), cfg, OutputConfig(record=False))
    processor.orchestrator = TrackingOrchestrator(cfg, (320, 240))
    return processor


def test_mouse_drag_selects_and_release_starts_learning():
    processor = _processor()
    orch = processor.orchestrator

    processor._on_mouse(cv2.EVENT_LBUTTONDOWN, 50, 40, 0, None)
    assert orch.state is TrackState.SELECTING
    assert orch.selection == (50, 40, 0, 0)

    processor._on_mouse(cv2.EVENT_MOUSEMOVE, 110, 90, 0, None)
    assert orch.selection == (50, 40, 60, 50)

    # The release position also moves the free corner
    processor._on_mouse(cv2.EVENT_LBUTTONUP, 120, 100, 0, None)
    assert orch.state is TrackState.INITIALIZING
    assert orch.tracker.selection == (50, 40, 70, 60)


def test_click_without_drag_returns_to_idle():
    processor = _processor()

    processor._on_mouse(cv2.EVENT_LBUTTONDOWN, 50, 40, 0, None)
    processor._on_mouse(cv2.EVENT_LBUTTONUP, 50, 40, 0, None)

    assert processor.orchestrator.state is TrackState.IDLE


def test_mouse_move_without_press_is_ignored():
    processor = _processor()

    processor._on_mouse(cv2.EVENT_MOUSEMOVE, 100, 100, 0, None)

    assert processor.orchestrator.state is TrackState.IDLE
    assert processor.orchestrator.selection is None


def test_mouse_before_setup_is_ignored():
    processor = TrackingProcessor(SourceConfig(), TrackingConfig(), OutputConfig(record=False))
    processor._on_mouse(cv2.EVENT_LBUTTONDOWN, 10, 10, 0, None)

    assert processor.orchestrator is None


def test_keys_drive_pause_stop_and_quit():
    processor = _processor()
    orch = processor.orchestrator

    assert processor._handle_key(ord("p"))
    assert orch.state is TrackState.PAUSED
    assert processor._handle_key(ord("p"))
    assert orch.state is TrackState.IDLE

    assert processor._handle_key(ord("b"))
    assert orch.show_back_projection

    processor._on_mouse(cv2.EVENT_LBUTTONDOWN, 50, 40, 0, None)
    assert processor._handle_key(ord("c"))
    assert orch.state is TrackState.IDLE

    assert not processor._handle_key(ord("q"))
    assert not processor._handle_key(27)


def test_static_mode_pause_key_toggles_orchestrator_flag():
    processor = _processor(PipelineMode.STATIC)

    processor._handle_key(ord("p"))

    assert processor.orchestrator.paused
    assert processor.orchestrator.state is None
