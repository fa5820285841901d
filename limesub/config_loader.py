from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .ass_writer import DEFAULT_FONT
from .effects import DEFAULT_EFFECT

DEFAULT_CONFIG_NAME = "config.default.yaml"
LOCAL_CONFIG_NAME = "config.yaml"
# Shipped as package data next to this module.
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / DEFAULT_CONFIG_NAME


@dataclass(frozen=True)
class ConversionConfig:
    """
    Immutable settings for one conversion run.

    Passed explicitly into every pipeline call so runs with different
    settings never share state.
    """

    # Max gap (seconds) between two identical cues that still counts as continuous
    tolerance_s: float = 0.1

    # Duration used when a source cue has no usable end/duration
    default_duration_ms: int = 2000

    # Raise TimeParseError instead of reading bad timestamps as 0
    strict_timestamps: bool = False

    # Prefix applied to every non-signage line
    default_effect: str = DEFAULT_EFFECT

    # Output script font and PlayRes (also the resampler target)
    font_name: str = DEFAULT_FONT
    play_res_x: int = 1920
    play_res_y: int = 1080

    # Output file name: <stem><suffix>.ass
    output_suffix: str = "_Limenime"

    def with_overrides(self, **overrides: Any) -> "ConversionConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def read_yaml_dict(path: Path) -> Dict[str, Any]:
    """Load one YAML config file; an empty file is an empty mapping."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping of sections: {path}")
    return data


def deep_merge(base: Any, override: Any) -> Any:
    """Overlay override on base: mappings merge per key, anything else (lists too) replaces."""
    if not (isinstance(base, dict) and isinstance(override, dict)):
        return override
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        merged[key] = deep_merge(base[key], value) if key in base else value
    return merged


def load_effective_config(
    base_dir: Path,
    default_name: str = DEFAULT_CONFIG_NAME,
    local_name: str = LOCAL_CONFIG_NAME,
    extra_path: Optional[Path] = None,
    local_dir: Optional[Path] = None,
) -> Tuple[Dict[str, Any], bool]:
    """Return (merged config dict, whether a local override was found).

    Merge order: defaults from base_dir, then config.yaml from local_dir
    (base_dir when not given), then extra_path (--config).
    """
    default_path = base_dir / default_name
    if not default_path.exists():
        raise FileNotFoundError(f"Missing required config: {default_path}")
    merged = read_yaml_dict(default_path)

    has_local = False
    local_path = (local_dir or base_dir) / local_name
    if local_path.exists():
        merged = deep_merge(merged, read_yaml_dict(local_path))
        has_local = True
    if extra_path is not None:
        merged = deep_merge(merged, read_yaml_dict(extra_path))
        has_local = True
    return merged, has_local


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name)
    return value if isinstance(value, dict) else {}


def config_from_dict(cfg: Dict[str, Any]) -> ConversionConfig:
    """Build a ConversionConfig from the YAML layout; missing keys keep defaults.

    Layout:
      conversion: { tolerance_seconds, default_duration_ms, strict_timestamps, default_effect }
      output:     { font_name, play_res_x, play_res_y, suffix }
    """
    conversion = _section(cfg, "conversion")
    output = _section(cfg, "output")
    values: Dict[str, Any] = {}
    if conversion.get("tolerance_seconds") is not None:
        values["tolerance_s"] = float(conversion["tolerance_seconds"])
    if conversion.get("default_duration_ms") is not None:
        values["default_duration_ms"] = int(conversion["default_duration_ms"])
    if conversion.get("strict_timestamps") is not None:
        values["strict_timestamps"] = bool(conversion["strict_timestamps"])
    if conversion.get("default_effect") is not None:
        values["default_effect"] = str(conversion["default_effect"])
    if output.get("font_name"):
        values["font_name"] = str(output["font_name"])
    if output.get("play_res_x"):
        values["play_res_x"] = int(output["play_res_x"])
    if output.get("play_res_y"):
        values["play_res_y"] = int(output["play_res_y"])
    if output.get("suffix") is not None:
        values["output_suffix"] = str(output["suffix"])
    return ConversionConfig(**values)


def log_level_from_dict(cfg: Dict[str, Any], default: str = "info") -> str:
    level = _section(cfg, "logging").get("level")
    return str(level).strip().lower() if level else default
