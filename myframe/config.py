from __future__ import annotations

import copy
import dataclasses
import os
import platform
from pathlib import Path
from typing import Any

import yaml
from PIL import ImageColor

from myframe.constants import (
    ALIGNMENTS,
    DATE_FORMATS,
    DEFAULT_DATE_FORMAT,
    DEFAULT_NAME_TEMPLATE,
    THICKNESS_MAX,
    THICKNESS_MIN,
)
from myframe.models import DisplayConfig


def default_jobs() -> int:
    cpu_count = os.cpu_count() or 2
    return max(1, cpu_count - 1)


DEFAULT_CONFIG: dict[str, Any] = {
    "display": DisplayConfig().to_dict(),
    "name_template": DEFAULT_NAME_TEMPLATE,
    "skip_existing": True,
    "jobs": default_jobs(),
    "font_path": None,
    "bold_font_path": None,
}


def get_user_data_dir() -> Path:
    """Return the per-user writable directory that holds ``Config/``."""
    system_name = platform.system().lower()
    if system_name == "windows":
        base = (
            os.environ.get("APPDATA")
            or os.environ.get("LOCALAPPDATA")
            or str(Path.home() / "AppData" / "Roaming")
        )
        return Path(base) / "MyFrame"
    if system_name == "darwin":
        return Path.home() / "Library" / "Application Support" / "MyFrame"

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / "MyFrame"
    return Path.home() / ".config" / "MyFrame"


def get_config_path() -> Path:
    return get_user_data_dir() / "Config" / "config.yaml"


def _deep_merge(base: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in incoming.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return default


def _color(value: Any, default: str, name: str) -> str:
    text = str(value or default).strip()
    try:
        ImageColor.getrgb(text)
    except ValueError as exc:
        raise ValueError(f"invalid {name}: {text!r}") from exc
    return text


def display_config_from_dict(data: dict[str, Any] | None) -> DisplayConfig:
    """Build a validated DisplayConfig, filling gaps from the defaults.

    Thickness is clamped into 10..100; unknown alignments and date formats
    fall back to ``center`` and ``YYYY.MM.DD``; bad colors raise ValueError.
    """
    defaults = DisplayConfig()
    data = data or {}
    flags = {
        item.name: _to_bool(data.get(item.name), getattr(defaults, item.name))
        for item in dataclasses.fields(DisplayConfig)
        if isinstance(item.default, bool)
    }

    try:
        thickness = int(float(data.get("thickness", defaults.thickness)))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid thickness: {data.get('thickness')!r}") from exc
    thickness = min(THICKNESS_MAX, max(THICKNESS_MIN, thickness))

    alignment = str(data.get("alignment") or defaults.alignment).strip().lower()
    if alignment not in ALIGNMENTS:
        alignment = defaults.alignment
    date_format = str(data.get("date_format") or DEFAULT_DATE_FORMAT).strip().upper()
    if date_format not in DATE_FORMATS:
        date_format = DEFAULT_DATE_FORMAT

    return DisplayConfig(
        **flags,
        date_format=date_format,
        thickness=thickness,
        color=_color(data.get("color"), defaults.color, "color"),
        text_color=_color(data.get("text_color"), defaults.text_color, "text_color"),
        alignment=alignment,
    )


def load_config(path: Path | None = None) -> dict[str, Any]:
    cfg_path = path or get_config_path()
    if not cfg_path.exists():
        cfg = copy.deepcopy(DEFAULT_CONFIG)
        cfg["jobs"] = default_jobs()
        return cfg

    text = cfg_path.read_text(encoding="utf-8")
    loaded = yaml.safe_load(text) or {}
    if not isinstance(loaded, dict):
        loaded = {}
    cfg = _deep_merge(DEFAULT_CONFIG, loaded)
    if not cfg.get("jobs"):
        cfg["jobs"] = default_jobs()
    return cfg


def write_default_config(path: Path | None = None, force: bool = False) -> Path:
    cfg_path = path or get_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    if cfg_path.exists() and not force:
        return cfg_path
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    cfg["jobs"] = default_jobs()
    cfg_path.write_text(yaml.safe_dump(cfg, sort_keys=False, allow_unicode=True), encoding="utf-8")
    return cfg_path
