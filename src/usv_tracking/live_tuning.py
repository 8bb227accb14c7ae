# live_tuning.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from usv_tracking.config import ColorThresholds, FilterConfig, field_names


class RuntimeParamWatcher:
    """Holds the latest threshold/kernel overrides from a JSON file."""

    def __init__(self, path: str | Path = "runtime_params.json") -> None:
        self.path = Path(path).expanduser().resolve()
        self.params: Dict[str, Any] = {}
        self._stamp: Optional[Tuple[float, int]] = None

        print(f"[Runtime] Tuning file: {self.path}")
        if not self.path.exists():
            print("[Runtime] File not found, live tuning is off until it is created.")
        self.maybe_reload()

    def _current_stamp(self) -> Optional[Tuple[float, int]]:
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return None
        return stat.st_mtime, stat.st_size

    def maybe_reload(self) -> bool:
        """True when the file changed and a new JSON object was read."""
        stamp = self._current_stamp()
        if stamp is None or stamp == self._stamp:
            return False
        self._stamp = stamp

        try:
            params = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            print(f"[Runtime] Cannot read {self.path.name}: {exc}")
            return False
        if not isinstance(params, dict):
            print(f"[Runtime] {self.path.name} must hold a JSON object, ignored.")
            return False

        self.params = params
        print(f"[Runtime] Loaded {len(params)} parameter(s) from {self.path.name}")
        return True


def apply_runtime_params(
    params: Dict[str, Any],
    thresholds: ColorThresholds,
    filters: FilterConfig,
) -> bool:
    """
    Copy recognised keys onto the live config objects in place.

    Returns False and leaves both objects untouched if the new values are
    invalid (non-integer, min > max, negative kernel).
    """
    threshold_keys = field_names(ColorThresholds)
    filter_keys = field_names(FilterConfig)

    new_thresholds = ColorThresholds(**{k: getattr(thresholds, k) for k in threshold_keys})
    new_filters = FilterConfig(**{k: getattr(filters, k) for k in filter_keys})
    try:
        for key, value in params.items():
            if key in threshold_keys:
                setattr(new_thresholds, key, int(value))
            elif key in filter_keys:
                setattr(new_filters, key, int(value))
        new_thresholds.validate()
        new_filters.normalize()
    except (TypeError, ValueError) as exc:
        print(f"[Runtime] Rejected parameters: {exc}")
        return False

    for key in threshold_keys:
        setattr(thresholds, key, getattr(new_thresholds, key))
    for key in filter_keys:
        setattr(filters, key, getattr(new_filters, key))
    return True
