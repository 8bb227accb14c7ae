"""
Command line entry-point for the USV tracker.

Live-tuning
-----------
While the program is running you can edit the JSON file given with
``--params`` (``runtime_params.json`` by default); colour thresholds and
kernel sizes take effect on the very next frame.  Keys are the field names
of ``ColorThresholds`` and ``FilterConfig``, e.g.::

    {"hue_1_max": 12, "saturation_min": 100, "blur_kernel_size": 15}
"""
from __future__ import annotations

import click

from usv_tracking.config import (
    AdaptiveConfig,
    BlobConfig,
    ColorThresholds,
    FilterConfig,
    OutputConfig,
    PipelineMode,
    SourceConfig,
    TrackingConfig,
)
from usv_tracking.live_tuning import RuntimeParamWatcher, apply_runtime_params
from usv_tracking.processor import TrackingProcessor


@click.command()
@click.argument("source")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in PipelineMode]),
    default=PipelineMode.ADAPTIVE.value,
    show_default=True,
    help="static = colour threshold + blob; adaptive = histogram CamShift.",
)
@click.option("--stream", is_flag=True, help="SOURCE is a network stream (rtsp/rtmp).")
@click.option("--height-limit", type=int, default=1080, show_default=True,
              help="Frames taller than this are downscaled before processing.")
@click.option("--pose-fit", type=click.Choice(["ellipse", "min_area_rect"]),
              default="ellipse", show_default=True)
@click.option("--record/--no-record", default=True, show_default=True)
@click.option("--output-dir", default="output", show_default=True)
@click.option("--params", "params_path", default="runtime_params.json", show_default=True,
              help="JSON file with live-tunable thresholds.")
@click.option("--fullscreen", is_flag=True)
def main(
    source: str,
    mode: str,
    stream: bool,
    height_limit: int,
    pose_fit: str,
    record: bool,
    output_dir: str,
    params_path: str,
    fullscreen: bool,
) -> None:
    """Track the vehicle in SOURCE (video file or stream URL)."""
    click.echo("Initializing USV tracker…")

    # -------------------- Config blobs --------------------
    src_cfg = SourceConfig(path=source, is_stream=stream, height_limit=height_limit)
    thresholds = ColorThresholds()
    filters = FilterConfig()
    watcher = RuntimeParamWatcher(params_path)
    if watcher.params and not apply_runtime_params(watcher.params, thresholds, filters):
        raise click.BadParameter(f"invalid values in {params_path}", param_hint="--params")

    trk_cfg = TrackingConfig(
        mode=PipelineMode(mode),
        thresholds=thresholds,
        filters=filters,
        blobs=BlobConfig(pose_fit=pose_fit),
        adaptive=AdaptiveConfig(),
    )
    out_cfg = OutputConfig(record=record, directory=output_dir, fullscreen=fullscreen)

    # ------------------------ Banner ----------------------
    click.echo(f"Source: {src_cfg.path} (stream={src_cfg.is_stream}, height limit={height_limit})")
    click.echo(f"Mode: {trk_cfg.mode.value}, pose fit: {pose_fit}")
    click.echo(
        f"Hue: [{thresholds.hue_1_min},{thresholds.hue_1_max}] "
        f"[{thresholds.hue_2_min},{thresholds.hue_2_max}], "
        f"S: [{thresholds.saturation_min},{thresholds.saturation_max}], "
        f"V: [{thresholds.value_min},{thresholds.value_max}]"
    )
    click.echo(
        f"Kernels: blur={filters.blur_kernel_size}, erode={filters.erode_size}, "
        f"dilate={filters.dilate_size}"
    )
    click.echo(f"Recording: {'ON → ' + output_dir if record else 'OFF'}")

    # ------------------------ Run -------------------------
    TrackingProcessor(src_cfg, trk_cfg, out_cfg, watcher).run()
    click.echo("Main program finished.")


if __name__ == "__main__":
    main()
