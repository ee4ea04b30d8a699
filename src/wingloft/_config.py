from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .triangulate import CAP_METHODS

CONFIG_ENV = "WINGLOFT_HOME"
CONFIG_NAME = "wingloft.cfg"
DEFAULT_CONFIG = {
    "_comment": (
        "Valid units: millimeters (default), meters, inches. "
        "stl_format: binary or ascii. cap_method: earcut, earclip or fan."
    ),
    "units": "millimeters",
    "stl_format": "binary",
    "cap_method": "earcut",
}
_UNIT_INFO: Dict[str, Dict[str, Any]] = {
    "millimeters": {"label": "mm", "scale_to_mm": 1.0},
    "meters": {"label": "m", "scale_to_mm": 1000.0},
    "inches": {"label": "in", "scale_to_mm": 25.4},
}
_UNIT_ALIASES = {
    "millimeter": "millimeters",
    "millimeters": "millimeters",
    "mm": "millimeters",
    "meter": "meters",
    "meters": "meters",
    "m": "meters",
    "inch": "inches",
    "inches": "inches",
    "in": "inches",
}
_STL_FORMATS = ("binary", "ascii")


@dataclass(frozen=True)
class UnitSettings:
    """Resolved units from wingloft.cfg."""

    name: str
    label: str
    scale_to_mm: float


@dataclass(frozen=True)
class UserSettings:
    units: UnitSettings
    stl_format: str
    cap_method: str

    @property
    def ascii(self) -> bool:
        return self.stl_format == "ascii"


def config_dir() -> Path:
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".wingloft"


def config_file() -> Path:
    return config_dir() / CONFIG_NAME


def ensure_user_config() -> None:
    """Ensure wingloft.cfg exists with sane defaults."""

    directory = config_dir()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    path = directory / CONFIG_NAME
    if path.exists():
        return

    try:
        path.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n")
    except OSError:
        return


def _load_user_config() -> Dict[str, Any]:
    ensure_user_config()
    try:
        loaded = json.loads(config_file().read_text())
    except (OSError, json.JSONDecodeError):
        return DEFAULT_CONFIG.copy()
    if not isinstance(loaded, dict):
        return DEFAULT_CONFIG.copy()
    return loaded


def _normalize_units(value: str) -> str | None:
    key = value.strip().lower()
    if key in _UNIT_INFO:
        return key
    return _UNIT_ALIASES.get(key)


def _choice(raw_config: Dict[str, Any], key: str, allowed: tuple[str, ...]) -> str:
    value = str(raw_config.get(key, DEFAULT_CONFIG[key])).strip().lower()
    if value not in allowed:
        return str(DEFAULT_CONFIG[key])
    return value


def get_unit_settings(raw_config: Dict[str, Any] | None = None) -> UnitSettings:
    """Return the configured units and the conversion to millimeters."""

    if raw_config is None:
        raw_config = _load_user_config()
    raw_units = str(raw_config.get("units", DEFAULT_CONFIG["units"]))
    normalized = _normalize_units(raw_units)
    if normalized is None:
        normalized = DEFAULT_CONFIG["units"]

    info = _UNIT_INFO[normalized]
    return UnitSettings(name=normalized, label=info["label"], scale_to_mm=info["scale_to_mm"])


def get_user_settings() -> UserSettings:
    raw_config = _load_user_config()
    return UserSettings(
        units=get_unit_settings(raw_config),
        stl_format=_choice(raw_config, "stl_format", _STL_FORMATS),
        cap_method=_choice(raw_config, "cap_method", CAP_METHODS),
    )
