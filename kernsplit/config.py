from __future__ import annotations

import os
import pathlib
from functools import reduce
from importlib import import_module
from typing import Any, Dict, Iterable, List, Optional, cast

from pydantic import BaseModel, Field

from kernsplit.errors import warn_config

yaml = cast(Any, import_module("yaml"))

_ENV_PREFIX = "kernsplit__"


class SplitSettings(BaseModel):
    """Tunable policy for measurement, compensation and re-splitting.

    The thresholds are empirical: ``kerning_threshold`` separates real
    shaping drift from characters that moved to another line, and the line
    tolerance is ``max(line_tolerance_min, font_size * line_tolerance_ratio)``.
    """

    kerning_threshold: float = 20.0
    kerning_precision: int = 2
    line_tolerance_min: float = 5.0
    line_tolerance_ratio: float = 0.3
    resize_debounce: float = 0.2
    frame_interval: float = 1 / 60
    break_chars: List[str] = Field(default_factory=lambda: ["—", "–"])
    grapheme_clustering: bool = True
    default_font_size: float = 16.0
    line_height: float = 1.2
    font: Optional[str] = None
    kerning: Dict[str, float] = Field(default_factory=dict)

    def line_tolerance(self, font_size: float) -> float:
        return max(self.line_tolerance_min, font_size * self.line_tolerance_ratio)


def _read_yaml(path: str | os.PathLike | None) -> Dict[str, Any]:
    """Return a dict from YAML or {} if path is None/missing/empty."""
    if not path:
        return {}
    p = pathlib.Path(path)
    if not p.exists():
        return {}
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TypeError("kernsplit.yaml must contain a top-level mapping")
    return data


def _env_overrides() -> Dict[str, Any]:
    """
    Map KERNSPLIT__KEY=value -> settings[key]=value (key lower-cased).
    Values are YAML-coerced (so 'true', '42' etc. become bool/int).
    """
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.lower().startswith(_ENV_PREFIX):
            continue
        key = k.lower()[len(_ENV_PREFIX) :]
        try:
            val = yaml.safe_load(v)
        except yaml.YAMLError:
            val = v
        out[key] = val
    return out


def _warn_unknown_settings(data: Iterable[str]) -> None:
    unknown = [key for key in data if key not in SplitSettings.model_fields]
    if unknown:
        warn_config(f"Unknown kernsplit settings: {', '.join(sorted(unknown))}", stacklevel=4)


def load_settings(
    path: str | os.PathLike | None = "kernsplit.yaml",
    overrides: Dict[str, Any] | None = None,
) -> SplitSettings:
    """Load YAML + env/CLI overrides into validated SplitSettings."""
    sources = (d for d in (_read_yaml(path), _env_overrides(), overrides) if d)
    merged: Dict[str, Any] = reduce(lambda acc, d: {**acc, **d}, sources, {})
    _warn_unknown_settings(merged)
    known = {k: v for k, v in merged.items() if k in SplitSettings.model_fields}
    return SplitSettings.model_validate(known)


__all__ = ["SplitSettings", "load_settings"]
