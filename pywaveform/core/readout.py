"""Cursor readout rows (series name, value and state under the cursor)."""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from PyQt6.QtGui import QColor

from .lookup import CURSOR_TIME_TOLERANCE, lookup
from .series import WaveformSeries

INTERPOLATED_SUFFIX = " (I)"


@dataclass(frozen=True)
class ReadoutRow:
    entity_label: str
    color: QColor
    analog_text: Optional[str] = None
    discrete_label: Optional[str] = None
    discrete_color: Optional[QColor] = None
    discrete_time_text: Optional[str] = None

    @property
    def value_text(self) -> str:
        """Single-line value column: analog and discrete joined by ' | '."""
        parts = []
        if self.analog_text is not None:
            parts.append(self.analog_text)
        if self.discrete_label is not None:
            parts.append(f"{self.discrete_label} ({self.discrete_time_text})")
        return " | ".join(parts)


def format_analog(value: float, is_interpolated: bool) -> str:
    """Three decimals, flagged when not directly observed."""
    return f"{value:.3f}{INTERPOLATED_SUFFIX if is_interpolated else ''}"


def seek_time(lookup_time: Optional[int], cursor_time: Optional[int]) -> Optional[int]:
    """Hovered lookup time wins over the timeline cursor."""
    return lookup_time if lookup_time is not None else cursor_time


def readout_rows(
    series: Sequence[WaveformSeries],
    time: Optional[int],
    time_formatter: Callable[[int], str] = str,
    tolerance: int = CURSOR_TIME_TOLERANCE,
) -> List[ReadoutRow]:
    """One row per series, or none when there is no time to look up."""
    if time is None:
        return []

    rows = []
    for s in series:
        result = lookup(s, time, tolerance)
        analog_text = None
        if result.analog is not None:
            analog_text = format_analog(result.analog.value, result.analog.is_interpolated)

        discrete_label = discrete_color = discrete_time_text = None
        # Unlabeled states are not shown in the readout
        if result.discrete is not None and result.discrete[1].label is not None:
            t, transition = result.discrete
            discrete_label = transition.label
            discrete_color = transition.color
            discrete_time_text = time_formatter(t)

        rows.append(ReadoutRow(
            entity_label=str(s.entity_path),
            color=s.color,
            analog_text=analog_text,
            discrete_label=discrete_label,
            discrete_color=discrete_color,
            discrete_time_text=discrete_time_text,
        ))
    return rows
