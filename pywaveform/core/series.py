"""Per-entity waveform series built once per aggregation pass.

Sorted mappings are kept as parallel time/value lists searched with
``bisect``; times are exact integers so lookups never suffer from float
rounding.
"""

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
from PyQt6.QtGui import QColor

from .entity_path import EntityPath


@dataclass(frozen=True)
class AnalogPoint:
    value: float


class AnalogPoints:
    """Ascending time -> AnalogPoint mapping with an incremental value range."""

    def __init__(self) -> None:
        self._times: List[int] = []
        self._points: List[AnalogPoint] = []
        # (min, max) of all values, None iff empty
        self.y_range: Optional[Tuple[float, float]] = None

    def push(self, time: int, value: float) -> None:
        """Insert a point; an existing time has its value replaced."""
        value = float(value)
        index = bisect_left(self._times, time)
        if index < len(self._times) and self._times[index] == time:
            self._points[index] = AnalogPoint(value)
            self._recompute_range()
            return

        self._times.insert(index, time)
        self._points.insert(index, AnalogPoint(value))
        if self.y_range is None:
            self.y_range = (value, value)
        else:
            y_min, y_max = self.y_range
            self.y_range = (min(y_min, value), max(y_max, value))

    def _recompute_range(self) -> None:
        values = [p.value for p in self._points]
        self.y_range = (min(values), max(values)) if values else None

    def get(self, time: int) -> Optional[AnalogPoint]:
        index = bisect_left(self._times, time)
        if index < len(self._times) and self._times[index] == time:
            return self._points[index]
        return None

    def range(self, start: int, end: int) -> Iterator[Tuple[int, AnalogPoint]]:
        """Points with start <= time <= end, ascending."""
        lo = bisect_left(self._times, start)
        hi = bisect_right(self._times, end)
        return zip(self._times[lo:hi], self._points[lo:hi])

    def before(self, time: int) -> Optional[Tuple[int, AnalogPoint]]:
        """Nearest point strictly before ``time``."""
        index = bisect_left(self._times, time)
        if index == 0:
            return None
        return self._times[index - 1], self._points[index - 1]

    def after(self, time: int) -> Optional[Tuple[int, AnalogPoint]]:
        """Nearest point strictly after ``time``."""
        index = bisect_right(self._times, time)
        if index >= len(self._times):
            return None
        return self._times[index], self._points[index]

    def iter(self) -> Iterator[Tuple[int, AnalogPoint]]:
        return zip(self._times, self._points)

    @property
    def times(self) -> List[int]:
        return list(self._times)

    def as_arrays(self, time_offset: int = 0) -> Tuple[np.ndarray, np.ndarray]:
        """Times (relative to ``time_offset``) and values as float arrays."""
        t = np.asarray(self._times, dtype=np.int64) - np.int64(time_offset)
        v = np.fromiter((p.value for p in self._points), dtype=np.float64, count=len(self._points))
        return t.astype(np.float64), v

    def __len__(self) -> int:
        return len(self._points)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AnalogPoints):
            return NotImplemented
        return (self._times == other._times and self._points == other._points
                and self.y_range == other.y_range)


class DiscreteTransitionKind(Enum):
    LINE = auto()  # Normal/steady state, drawn as a flat trace
    BOX = auto()   # Any other state, drawn as a labeled span


@dataclass(frozen=True)
class DiscreteTransition:
    """State that starts at the transition's timestamp."""
    label: Optional[str]
    color: QColor
    kind: DiscreteTransitionKind


class DiscretePoints:
    """Ascending time -> DiscreteTransition mapping plus the initial state."""

    def __init__(self) -> None:
        self._times: List[int] = []
        self._transitions: List[DiscreteTransition] = []
        self.init: Optional[DiscreteTransition] = None

    def push(self, time: int, transition: DiscreteTransition) -> None:
        """Insert a transition; at most one is kept per timestamp (last wins)."""
        index = bisect_left(self._times, time)
        if index < len(self._times) and self._times[index] == time:
            self._transitions[index] = transition
            return
        self._times.insert(index, time)
        self._transitions.insert(index, transition)

    def push_box(
        self,
        time: int,
        label: Optional[str],
        color: QColor,
        kind: DiscreteTransitionKind,
    ) -> None:
        self.push(time, DiscreteTransition(label=label, color=color, kind=kind))

    def get(self, time: int) -> Optional[DiscreteTransition]:
        index = bisect_left(self._times, time)
        if index < len(self._times) and self._times[index] == time:
            return self._transitions[index]
        return None

    def transition_at_or_before(self, time: int) -> Optional[Tuple[int, DiscreteTransition]]:
        """Transition with the greatest key <= time; ``init`` is not consulted."""
        index = bisect_right(self._times, time)
        if index == 0:
            return None
        return self._times[index - 1], self._transitions[index - 1]

    def state_at(self, time: int) -> Optional[DiscreteTransition]:
        """Effective state at ``time``: nearest prior transition, else ``init``."""
        found = self.transition_at_or_before(time)
        if found is not None:
            return found[1]
        return self.init

    def iter(self) -> Iterator[Tuple[int, DiscreteTransition]]:
        return zip(self._times, self._transitions)

    @property
    def times(self) -> List[int]:
        return list(self._times)

    def is_empty(self) -> bool:
        return not self._transitions

    def __len__(self) -> int:
        return len(self._transitions)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DiscretePoints):
            return NotImplemented
        return (self._times == other._times and self._transitions == other._transitions
                and self.init == other.init)


@dataclass(frozen=True)
class EventMarker:
    """Punctual annotation fired by an entity."""
    entity_path: EntityPath
    label: Optional[str]
    color: QColor


@dataclass
class WaveformEvents:
    """Events of every entity, grouped by timestamp."""

    event_markers: Dict[int, List[EventMarker]] = field(default_factory=dict)

    def push(self, time: int, marker: EventMarker) -> None:
        self.event_markers.setdefault(time, []).append(marker)

    def get(self, time: int) -> Optional[List[EventMarker]]:
        return self.event_markers.get(time)

    def iter(self) -> Iterator[Tuple[int, List[EventMarker]]]:
        """Timestamps ascending; markers in insertion order."""
        for time in sorted(self.event_markers):
            yield time, self.event_markers[time]

    def __len__(self) -> int:
        return len(self.event_markers)


@dataclass
class WaveformSeries:
    """One entity's aggregated timeline."""

    entity_path: EntityPath
    min_time: int
    max_time: int
    analog_points: AnalogPoints = field(default_factory=AnalogPoints)
    discrete_points: DiscretePoints = field(default_factory=DiscretePoints)
    color: QColor = field(default_factory=QColor)

    def len_series(self) -> int:
        """Number of analog plus discrete samples."""
        return len(self.analog_points) + len(self.discrete_points)

    def is_empty(self) -> bool:
        return self.len_series() == 0

    @property
    def domain(self) -> Optional[str]:
        return self.entity_path.domain
