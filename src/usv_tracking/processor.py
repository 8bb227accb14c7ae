# processor.py
"""Glue logic that wires frame source → orchestrator → window / recorder."""
import time
from typing import Optional

import cv2
import numpy as np

from usv_tracking.camera import FrameSource
from usv_tracking.common import TrackingError, TrackResult
from usv_tracking.config import OutputConfig, PipelineMode, SourceConfig, TrackingConfig
from usv_tracking.live_tuning import RuntimeParamWatcher, apply_runtime_params
from usv_tracking.orchestrator import TrackingOrchestrator
from usv_tracking.overlay import build_overlay, draw_overlay, render_histogram
from usv_tracking.recorder import VideoRecorder

HISTOGRAM_WINDOW = "Histogram"
ESC = 27


class TrackingProcessor:
    """The main high-level orchestrator."""

    def __init__(
        self,
        source_cfg: SourceConfig,
        tracking_cfg: TrackingConfig,
        output_cfg: OutputConfig,
        watcher: Optional[RuntimeParamWatcher] = None,
    ):
        # Save configs
        self.source_cfg = source_cfg
        self.tracking_cfg = tracking_cfg
        self.output_cfg = output_cfg
        self.watcher = watcher

        # Build sub-systems
        self.source = FrameSource(source_cfg)
        self.recorder = VideoRecorder(output_cfg)
        self.orchestrator: Optional[TrackingOrchestrator] = None

        # Runtime metrics
        self.frame_count = 0
        self.proc_time_sum = 0.0
        self.total_frames = 0
        self.found_frames = 0

        self.last_frame: Optional[np.ndarray] = None

    # ---------------------------------------------------------------------
    #                         Setup / teardown
    # ---------------------------------------------------------------------
    def setup(self) -> bool:
        """Open source and output file, create windows."""
        if not self.source.open():
            return False

        w, h, fps = self.source.get_properties()
        try:
            self.orchestrator = TrackingOrchestrator(
                self.tracking_cfg, (w, h), self.source_cfg.height_limit
            )
        except TrackingError as exc:
            print(f"[Processor] {exc}")
            return False

        if self.output_cfg.record and not self.recorder.open(self.orchestrator.size, fps):
            return False

        # ---------- UI ----------
        cv2.namedWindow(self.output_cfg.window_name, cv2.WINDOW_NORMAL)
        if self.output_cfg.fullscreen:
            cv2.setWindowProperty(
                self.output_cfg.window_name, cv2.WND_PROP_FULLSCREEN, cv2.WINDOW_FULLSCREEN
            )
        if self.orchestrator.mode is PipelineMode.ADAPTIVE:
            if self.output_cfg.show_histogram:
                cv2.namedWindow(HISTOGRAM_WINDOW, cv2.WINDOW_NORMAL)
            cv2.setMouseCallback(self.output_cfg.window_name, self._on_mouse)
            print("[Processor] Drag a box around the vehicle to start tracking.")
            print("[Processor] Keys: b = back-projection, c = stop, p = pause, q/ESC = quit")
        else:
            print("[Processor] Keys: p = pause, q/ESC = quit")
        return True

    def cleanup(self) -> None:
        print("[Processor] Cleaning up...")
        self.source.release()
        self.recorder.release()
        cv2.destroyAllWindows()
        avg_ms = self.proc_time_sum / self.frame_count if self.frame_count else 0.0
        print(
            f"[Processor] Processing finished! Frames: {self.total_frames}, "
            f"found in {self.found_frames}, avg {avg_ms:.1f} ms/frame"
        )

    # ---------------------------------------------------------------------
    #                            UI events
    # ---------------------------------------------------------------------
    def _on_mouse(self, event: int, x: int, y: int, flags: int, param) -> None:
        orch = self.orchestrator
        if orch is None:
            return
        # Every event while dragging moves the free corner, the release included
        orch.update_selection((x, y))
        if event == cv2.EVENT_LBUTTONDOWN:
            orch.begin_selection((x, y))
        elif event == cv2.EVENT_LBUTTONUP:
            orch.end_selection()

    def _handle_key(self, key: int) -> bool:
        """Returns False if the caller should exit the main loop."""
        if key in (ESC, ord("q")):
            return False
        if key == ord("b"):
            self.orchestrator.toggle_back_projection_view()
        elif key == ord("c"):
            self.orchestrator.stop_tracking()
        elif key == ord("p"):
            self.orchestrator.toggle_pause()
        return True

    def _apply_live_params(self) -> None:
        if self.watcher and self.watcher.maybe_reload():
            if apply_runtime_params(
                self.watcher.params,
                self.tracking_cfg.thresholds,
                self.tracking_cfg.filters,
            ):
                print(
                    f"[Runtime] thresholds={self.tracking_cfg.thresholds} "
                    f"filters={self.tracking_cfg.filters}"
                )

    # ---------------------------------------------------------------------
    #                          Main per-frame loop
    # ---------------------------------------------------------------------
    def _render(self, result: TrackResult) -> np.ndarray:
        orch = self.orchestrator
        debug = orch.debug_image()
        if orch.show_back_projection and debug is not None:
            out = cv2.cvtColor(debug, cv2.COLOR_GRAY2BGR)
        else:
            out = orch.frame.copy()
        overlay = build_overlay(result, orch.size, orch.selection)
        draw_overlay(out, overlay)
        return out

    def _process_frame(self) -> bool:
        """Returns False if the caller should exit the main loop."""
        self._apply_live_params()

        # -------- Capture frame (held while paused) --------
        if self.orchestrator.paused and self.last_frame is not None:
            frame = self.last_frame
        else:
            frame = self.source.read()
            if frame is None:
                print("[Processor] End of stream.")
                return False
            self.last_frame = frame
            self.total_frames += 1

        # -------- Perception --------
        tic = time.time()
        result = self.orchestrator.process_frame(frame)
        self.proc_time_sum += (time.time() - tic) * 1000.0
        self.frame_count += 1
        if result.found:
            self.found_frames += 1

        # -------- Display / record --------
        out = self._render(result)
        cv2.imshow(self.output_cfg.window_name, out)
        if self.orchestrator.mode is PipelineMode.ADAPTIVE and self.output_cfg.show_histogram:
            cv2.imshow(HISTOGRAM_WINDOW, render_histogram(self.orchestrator.histogram))
        if not self.orchestrator.paused:
            self.recorder.write(out)
        return True

    # ---------------------------------------------------------------------
    #                             Public run()
    # ---------------------------------------------------------------------
    def run(self) -> None:
        if not self.setup():
            self.cleanup()
            return

        try:
            while True:
                if not self._process_frame():
                    break
                if not self._handle_key(cv2.waitKey(10) & 0xFF):
                    break
        except KeyboardInterrupt:
            print("\n[Processor] Stopped by user.")
        except TrackingError as exc:
            print(f"[Processor] Tracking error: {exc}")
        except Exception as exc:
            print(f"[Processor] Main loop error: {exc}")
            raise
        finally:
            self.cleanup()
