"""Point lookup under a moving cursor.

Pure functions: safe to call once per visible series per frame.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .series import DiscreteTransition, WaveformSeries

# Symmetric window (in time units) for an exact hit
CURSOR_TIME_TOLERANCE = 1


@dataclass(frozen=True)
class AnalogLookup:
    value: float
    is_interpolated: bool


@dataclass(frozen=True)
class LookupResult:
    """Best-known values of one series at a query time."""
    analog: Optional[AnalogLookup]
    discrete: Optional[Tuple[int, DiscreteTransition]]

    @property
    def discrete_transition(self) -> Optional[DiscreteTransition]:
        return self.discrete[1] if self.discrete is not None else None


def lookup_analog(
    series: WaveformSeries,
    query_time: int,
    tolerance: int = CURSOR_TIME_TOLERANCE,
) -> Optional[AnalogLookup]:
    """Exact value within ``tolerance``, else linear interpolation, else None.

    The window is open: a point counts as exact when
    ``|t - query_time| < tolerance``, so a query one unit outside the
    data never snaps onto the edge sample. A sample at ``query_time``
    itself is always exact, whatever the tolerance.
    """
    points = series.analog_points
    half_width = max(tolerance - 1, 0)
    exact = next(iter(points.range(query_time - half_width, query_time + half_width)), None)
    if exact is not None:
        return AnalogLookup(exact[1].value, is_interpolated=False)

    before = points.before(query_time)
    after = points.after(query_time)
    if before is None or after is None:
        return None

    t1, p1 = before
    t2, p2 = after
    slope = (p2.value - p1.value) / float(t2 - t1)
    value = p1.value + slope * float(query_time - t1)
    return AnalogLookup(value, is_interpolated=True)


def lookup_discrete(series: WaveformSeries, query_time: int) -> Optional[Tuple[int, DiscreteTransition]]:
    """Nearest-prior transition (greatest key <= query_time).

    ``discrete_points.init`` is not consulted; use
    ``DiscretePoints.state_at`` for the effective state.
    """
    return series.discrete_points.transition_at_or_before(query_time)


def lookup(
    series: WaveformSeries,
    query_time: int,
    tolerance: int = CURSOR_TIME_TOLERANCE,
) -> LookupResult:
    return LookupResult(
        analog=lookup_analog(series, query_time, tolerance),
        discrete=lookup_discrete(series, query_time),
    )


def lookup_all(
    series_list: Iterable[WaveformSeries],
    query_time: int,
    tolerance: int = CURSOR_TIME_TOLERANCE,
) -> List[Tuple[WaveformSeries, LookupResult]]:
    return [(s, lookup(s, query_time, tolerance)) for s in series_list]
