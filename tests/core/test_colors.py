from PyQt6.QtGui import QColor

from pywaveform.core.colors import (
    auto_color,
    auto_color_for_entity_path,
    highlight_color,
    lerp_color,
)
from pywaveform.core.entity_path import EntityPath


def test_auto_color_is_deterministic():
    assert auto_color(5) == auto_color(5)
    assert auto_color(1) != auto_color(2)


def test_entity_colors_stable_per_path():
    a = auto_color_for_entity_path(EntityPath.parse("A/y1"))
    assert a == auto_color_for_entity_path(EntityPath.parse("/A/y1"))
    assert a.alpha() == 255


def test_lerp_endpoints():
    black, white = QColor(0, 0, 0), QColor(255, 255, 255)
    assert lerp_color(black, white, 0.0) == black
    assert lerp_color(black, white, 1.0) == white
    assert lerp_color(black, white, 2.0) == white


def test_highlight_blends_towards_white():
    base = QColor(100, 0, 200)
    assert highlight_color(base, False) == base
    bright = highlight_color(base, True)
    assert (bright.red(), bright.green(), bright.blue()) == (131, 51, 211)
