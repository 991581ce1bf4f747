"""Persistent application settings helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional


SETTINGS_DIR = Path.home() / ".config" / "pywaveform"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"


def load_settings(path: Optional[Path] = None) -> dict:
    """Load settings from ``path`` (default: the user settings file).

    Returns an empty dict if the file does not exist or is not a JSON object.
    """
    path = path or SETTINGS_PATH
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def get_setting(key: str, default: Any = None, path: Optional[Path] = None) -> Any:
    """Read a setting value with a fallback default."""
    return load_settings(path).get(key, default)


@dataclass(frozen=True)
class WaveformConfig:
    """Tunable constants of the layout planner and cursor lookup."""

    padding_fraction: float = 0.2          # Value-axis padding added on reset
    discrete_all_padding: float = 0.95     # Share of the value span used by discrete tracks
    discrete_box_padding: float = 0.8      # Share of a track slot filled by its box
    discrete_stroke_fraction: float = 0.1  # Box outline width relative to box height
    discrete_stroke_min: float = 1.0       # Minimum outline width
    cursor_tolerance: int = 1              # Exact-hit window for cursor lookup, >= 1
    side_panel_fraction: float = 0.3       # Width share of the readout panel

    @classmethod
    def from_dict(cls, data: dict) -> "WaveformConfig":
        """Build from a dict, ignoring unknown keys and bad values."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in known:
                continue
            caster = int if key == "cursor_tolerance" else float
            try:
                kwargs[key] = caster(value)
            except (TypeError, ValueError):
                continue
        if kwargs.get("cursor_tolerance", 1) < 1:
            del kwargs["cursor_tolerance"]
        return cls(**kwargs)

    @classmethod
    def from_settings(cls, path: Optional[Path] = None) -> "WaveformConfig":
        """Load the ``"waveform"`` section of the settings file."""
        section = get_setting("waveform", {}, path)
        return cls.from_dict(section if isinstance(section, dict) else {})

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
