import json
import os

from click.testing import CliRunner

from usv_tracking.cli import main
from usv_tracking.config import ColorThresholds, FilterConfig, OutputConfig
from usv_tracking.live_tuning import RuntimeParamWatcher, apply_runtime_params
from usv_tracking.recorder import VideoRecorder


def test_runtime_params_update_thresholds_and_kernels():
    thresholds, filters = ColorThresholds(), FilterConfig()

    ok = apply_runtime_params(
        {"hue_1_max": 15, "blur_kernel_size": 10, "dilate_size": 0, "unknown": 3},
        thresholds,
        filters,
    )

    assert ok
    assert thresholds.hue_1_max == 15
    assert filters.blur_kernel_size == 11
    assert filters.dilate_size == 1


def test_invalid_runtime_params_leave_config_alone():
    thresholds, filters = ColorThresholds(), FilterConfig()

    assert not apply_runtime_params(
        {"saturation_min": 250, "saturation_max": 100, "erode_size": 5},
        thresholds,
        filters,
    )
    assert thresholds == ColorThresholds()
    assert filters == FilterConfig()
    assert not apply_runtime_params({"value_min": "bright"}, thresholds, filters)


def test_watcher_reloads_changed_file(tmp_path):
    path = tmp_path / "runtime_params.json"
    path.write_text(json.dumps({"value_min": 90}))

    watcher = RuntimeParamWatcher(path)
    assert watcher.params == {"value_min": 90}
    assert not watcher.maybe_reload()

    path.write_text(json.dumps({"value_min": 80, "value_max": 250}))
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 5))

    assert watcher.maybe_reload()
    assert watcher.params["value_max"] == 250


def test_non_object_json_keeps_previous_params(tmp_path):
    path = tmp_path / "runtime_params.json"
    path.write_text(json.dumps({"hue_1_max": 12}))
    watcher = RuntimeParamWatcher(path)

    path.write_text(json.dumps([1, 2, 3]))
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 5))

    assert not watcher.maybe_reload()
    assert watcher.params == {"hue_1_max": 12}


def test_missing_file_disables_live_tuning(tmp_path):
    watcher = RuntimeParamWatcher(tmp_path / "absent.json")

    assert watcher.params == {}
    assert not watcher.maybe_reload()


def test_recorder_names_files_by_timestamp(tmp_path):
    recorder = VideoRecorder(OutputConfig(directory=str(tmp_path)))
    path = recorder.output_path(0)

    assert path.parent == tmp_path
    assert path.suffix == ".avi"
    assert not recorder.is_open()


def test_cli_help_lists_options():
    result = CliRunner().invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "--mode" in result.output
    assert "--height-limit" in result.output
