"""Deterministic color assignment for classes and entities."""
import math
import zlib

from PyQt6.QtGui import QColor

from .entity_path import EntityPath

# Golden ratio conjugate spreads consecutive ids across the hue wheel
_GOLDEN_RATIO = (math.sqrt(5.0) - 1.0) / 2.0
_SATURATION = 0.85
_VALUE = 0.5

HIGHLIGHT_AMOUNT = 0.2

TRANSPARENT = QColor(0, 0, 0, 0)


def auto_color(val: int) -> QColor:
    """Color for an integer id (class id, hashed path, ...)."""
    hue = (int(val) * _GOLDEN_RATIO) % 1.0
    return QColor.fromHsvF(hue, _SATURATION, _VALUE, 1.0)


def auto_color_for_entity_path(path: EntityPath) -> QColor:
    """Stable color for an entity path.

    Uses crc32 rather than hash() so colors survive interpreter restarts.
    """
    digest = zlib.crc32(str(path).encode('utf-8'))
    return auto_color(digest & 0xFFFF)


def lerp_color(a: QColor, b: QColor, t: float) -> QColor:
    """Linear blend of two colors, alpha included."""
    t = min(max(t, 0.0), 1.0)
    return QColor(
        round(a.red() + (b.red() - a.red()) * t),
        round(a.green() + (b.green() - a.green()) * t),
        round(a.blue() + (b.blue() - a.blue()) * t),
        round(a.alpha() + (b.alpha() - a.alpha()) * t),
    )


def highlight_color(color: QColor, highlight: bool) -> QColor:
    """Brighten a color towards white while its entity is hovered."""
    if not highlight:
        return QColor(color)
    return lerp_color(color, QColor(255, 255, 255, color.alpha()), HIGHLIGHT_AMOUNT)
