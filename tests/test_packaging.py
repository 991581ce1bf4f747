"""Smoke tests that verify the installed package exposes every module."""

import importlib

import pytest


@pytest.mark.parametrize("module", [
    "pywaveform.logging",
    "pywaveform.__main__",
    "pywaveform.core.frame",
    "pywaveform.core.series_builder",
    "pywaveform.core.demo_data",
    "pywaveform.plots.layout_planner",
    "pywaveform.plots.waveform_renderer",
    "pywaveform.gui.app",
    "pywaveform.gui.readout_panel",
])
def test_module_importable(module):
    importlib.import_module(module)


def test_console_entry_point_callable():
    from pywaveform.__main__ import main
    assert callable(main)
