import numpy as np
import pytest

from usv_tracking.adaptive import AdaptiveTracker, TrackState, reinflate_window
from usv_tracking.config import AdaptiveConfig

ROWS, COLS = 480, 640
BACKGROUND_HUE = 90
TARGET_HUE = 0


def _planes(x, y, w=60, h=40):
    """Hue plane with a target block at (x, y); SV gate open everywhere."""
    hue = np.full((ROWS, COLS), BACKGROUND_HUE, dtype=np.uint8)
    hue[y:y + h, x:x + w] = TARGET_HUE
    sv_mask = np.full((ROWS, COLS), 255, dtype=np.uint8)
    return hue, sv_mask


def _tracker():
    return AdaptiveTracker(AdaptiveConfig(), frame_size=(COLS, ROWS))


def _select(tracker, start, end):
    tracker.begin_selection(start)
    tracker.update_selection(end)
    tracker.end_selection()


def _tracking_tracker():
    tracker = _tracker()
    _select(tracker, (100, 100), (160, 140))
    tracker.process(*_planes(100, 100))
    return tracker


def test_reinflated_window_uses_smaller_dimension():
    # (480 + 5) // 6 == 80
    assert reinflate_window((320, 240, 1, 1), ROWS, COLS) == (240, 160, 160, 160)


def test_reinflated_window_is_clipped_to_frame():
    assert reinflate_window((0, 0, 0, 0), ROWS, COLS) == (0, 0, 80, 80)
    assert reinflate_window((COLS - 1, ROWS - 1, 1, 1), ROWS, COLS) == (559, 399, 81, 81)


def test_selection_reaches_tracking_on_next_frame():
    tracker = _tracker()
    tracker.begin_selection((100, 100))
    assert tracker.state is TrackState.SELECTING
    assert tracker.selection == (100, 100, 0, 0)

    tracker.update_selection((160, 140))
    assert tracker.selection == (100, 100, 60, 40)

    tracker.end_selection()
    assert tracker.state is TrackState.INITIALIZING

    result = tracker.process(*_planes(100, 100))

    assert tracker.state is TrackState.TRACKING
    assert tracker.histogram is not None
    assert tracker.histogram.size == 16
    assert tracker.histogram.max() == pytest.approx(255.0)
    assert result.found
    assert result.position == pytest.approx((129.5, 119.5), abs=1.5)


def test_tracker_follows_moving_target():
    tracker = _tracking_tracker()
    result = tracker.process(*_planes(110, 104))

    assert result.found
    assert result.position == pytest.approx((139.5, 123.5), abs=1.5)
    assert result.search_window is not None


def test_zero_area_selection_returns_to_idle():
    tracker = _tracker()
    tracker.begin_selection((50, 50))
    tracker.end_selection()
    assert tracker.state is TrackState.IDLE

    _select(tracker, (50, 50), (50, 90))
    assert tracker.state is TrackState.IDLE
    assert tracker.histogram is None


def test_selection_is_clipped_to_frame():
    tracker = _tracker()
    tracker.begin_selection((600, 450))
    tracker.update_selection((700, 500))

    assert tracker.selection == (600, 450, 40, 30)


def test_lost_target_degrades_without_leaving_tracking():
    tracker = _tracking_tracker()
    hue = np.full((ROWS, COLS), BACKGROUND_HUE, dtype=np.uint8)
    sv_mask = np.full((ROWS, COLS), 255, dtype=np.uint8)

    result = tracker.process(hue, sv_mask)

    assert not result.found
    assert tracker.state is TrackState.TRACKING
    x, y, w, h = tracker.window
    assert w * h > 1


def test_stop_clears_session():
    tracker = _tracking_tracker()
    tracker.stop()

    assert tracker.state is TrackState.IDLE
    assert tracker.histogram is None
    assert tracker.window is None
    assert not tracker.process(*_planes(100, 100)).found


def test_pause_holds_last_result():
    tracker = _tracking_tracker()
    last = tracker.last_result

    tracker.toggle_pause()
    assert tracker.state is TrackState.PAUSED
    assert tracker.frozen
    assert tracker.process(*_planes(300, 300)) is last

    tracker.toggle_pause()
    assert tracker.state is TrackState.TRACKING
    assert not tracker.frozen


def test_selection_while_paused_unpauses_once_tracking():
    tracker = _tracking_tracker()
    tracker.toggle_pause()

    tracker.begin_selection((300, 300))
    assert tracker.frozen
    tracker.update_selection((360, 340))
    tracker.end_selection()
    assert tracker.state is TrackState.INITIALIZING
    assert tracker.frozen

    result = tracker.process(*_planes(300, 300))

    assert tracker.state is TrackState.TRACKING
    assert not tracker.frozen
    assert result.position == pytest.approx((329.5, 319.5), abs=1.5)


def test_idle_tracker_reports_nothing():
    tracker = _tracker()
    assert not tracker.process(*_planes(100, 100)).found
    assert tracker.state is TrackState.IDLE
