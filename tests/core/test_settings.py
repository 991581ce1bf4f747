import json

import pytest

from pywaveform.core import settings
from pywaveform.core.settings import WaveformConfig


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings, "SETTINGS_PATH", path)
    return path


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


def test_missing_or_invalid_file_gives_empty(settings_file):
    assert settings.load_settings() == {}
    settings_file.write_text("{not json", encoding="utf-8")
    assert settings.load_settings() == {}
    settings_file.write_text("[1, 2]", encoding="utf-8")
    assert settings.load_settings() == {}


def test_get_setting_reads_default_and_explicit_path(settings_file, tmp_path):
    _write(settings_file, {"answer": 42})
    assert settings.get_setting("answer") == 42
    assert settings.get_setting("missing", "dflt") == "dflt"

    other = tmp_path / "other.json"
    _write(other, {"answer": 7})
    assert settings.get_setting("answer", path=other) == 7


def test_default_config_values():
    config = WaveformConfig()
    assert config.padding_fraction == 0.2
    assert config.discrete_all_padding == 0.95
    assert config.discrete_box_padding == 0.8
    assert config.discrete_stroke_fraction == 0.1
    assert config.discrete_stroke_min == 1.0
    assert config.cursor_tolerance == 1
    assert config.side_panel_fraction == 0.3


def test_config_from_dict_ignores_unknown_and_bad_values():
    config = WaveformConfig.from_dict({
        "padding_fraction": "0.5",
        "cursor_tolerance": 3,
        "discrete_box_padding": "wide",
        "colour": "red",
    })
    assert config.padding_fraction == 0.5
    assert config.cursor_tolerance == 3
    assert config.discrete_box_padding == 0.8


@pytest.mark.parametrize("tolerance", [0, -2, "0"])
def test_config_rejects_cursor_tolerance_below_one(tolerance):
    assert WaveformConfig.from_dict({"cursor_tolerance": tolerance}).cursor_tolerance == 1


def test_config_from_settings_section(settings_file):
    _write(settings_file, {"waveform": {"side_panel_fraction": 0.25}})
    assert WaveformConfig.from_settings().side_panel_fraction == 0.25

    _write(settings_file, {"waveform": "oops"})
    assert WaveformConfig.from_settings() == WaveformConfig()
    assert WaveformConfig.from_dict(WaveformConfig().to_dict()) == WaveformConfig()
