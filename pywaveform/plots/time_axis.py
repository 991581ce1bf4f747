"""
Time axis helpers: plot offset, label formatting and grid spacing.

Plots are drawn relative to an offset so that large nanosecond timestamps
(which do not fit a float64 exactly) keep full precision on screen.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import List, Tuple

NS_PER_SECOND = 1_000_000_000
NS_PER_MINUTE = 60 * NS_PER_SECOND
NS_PER_HOUR = 60 * NS_PER_MINUTE
NS_PER_DAY = 24 * NS_PER_HOUR

# Approximate width of one medium tick label in pixels
MIN_MEDIUM_LINE_SPACING_PX = 150.0


class TimeType(Enum):
    SEQUENCE = auto()  # Frame / sequence numbers
    TIME = auto()      # Nanoseconds since the Unix epoch


@dataclass(frozen=True)
class GridMark:
    value: float
    step_size: float


def round_ns_to_start_of_day(ns: int) -> int:
    return (ns + NS_PER_DAY // 2) // NS_PER_DAY * NS_PER_DAY


def time_offset(min_time: int, time_type: TimeType) -> int:
    """Offset subtracted from timestamps before plotting.

    Wall-clock timelines are rounded to a whole day so ticks fall on
    whole days, hours, minutes...
    """
    if time_type == TimeType.TIME:
        return round_ns_to_start_of_day(min_time)
    return min_time


def format_time(time_type: TimeType, time: int) -> str:
    """Label for an absolute time on the given timeline."""
    if time_type == TimeType.SEQUENCE:
        return f"#{time}"

    seconds, ns = divmod(int(time), NS_PER_SECOND)
    stamp = datetime.fromtimestamp(seconds, tz=timezone.utc).strftime('%H:%M:%S')
    if ns == 0:
        return f"{stamp}Z"
    if ns % 1_000_000 == 0:
        return f"{stamp}.{ns // 1_000_000:03d}Z"
    if ns % 1_000 == 0:
        return f"{stamp}.{ns // 1_000:06d}Z"
    return f"{stamp}.{ns:09d}Z"


def format_delta(time_type: TimeType, delta: int) -> str:
    """Label for a time difference (sign kept)."""
    if time_type == TimeType.SEQUENCE:
        return f"{delta}"

    sign = '-' if delta < 0 else ''
    delta = abs(int(delta))
    if delta >= NS_PER_SECOND:
        return f"{sign}{delta / NS_PER_SECOND:g}s"
    if delta >= 1_000_000:
        return f"{sign}{delta / 1_000_000:g}ms"
    if delta >= 1_000:
        return f"{sign}{delta / 1_000:g}us"
    return f"{sign}{delta}ns"


def next_grid_tick_magnitude_ns(spacing_ns: int) -> int:
    """Next coarser tick spacing: powers of ten below a second, then clock units."""
    if spacing_ns <= NS_PER_SECOND:
        return spacing_ns * 10
    if spacing_ns == 10 * NS_PER_SECOND:
        return spacing_ns * 6            # whole minute
    if spacing_ns == NS_PER_MINUTE:
        return spacing_ns * 10           # ten minutes
    if spacing_ns == 10 * NS_PER_MINUTE:
        return spacing_ns * 6            # hour
    if spacing_ns == NS_PER_HOUR:
        return spacing_ns * 12           # half day
    if spacing_ns == 12 * NS_PER_HOUR:
        return spacing_ns * 2            # day
    return spacing_ns * 10


def ns_grid_marks(canvas_width: float, bounds: Tuple[float, float]) -> List[GridMark]:
    """Grid marks for a nanosecond axis spanning ``bounds`` on a canvas this wide."""
    max_medium_lines = canvas_width / MIN_MEDIUM_LINE_SPACING_PX
    min_ns, max_ns = bounds
    width_ns = max_ns - min_ns

    small_spacing_ns = 1
    while max_medium_lines > 0 and width_ns / next_grid_tick_magnitude_ns(small_spacing_ns) > max_medium_lines:
        next_ns = next_grid_tick_magnitude_ns(small_spacing_ns)
        if small_spacing_ns >= next_ns:
            break
        small_spacing_ns = next_ns

    medium_spacing_ns = next_grid_tick_magnitude_ns(small_spacing_ns)
    big_spacing_ns = next_grid_tick_magnitude_ns(medium_spacing_ns)

    marks: List[GridMark] = []
    current_ns = int(min_ns // small_spacing_ns) * small_spacing_ns
    end_ns = int(-(-max_ns // 1))
    while current_ns <= end_ns:
        if current_ns % big_spacing_ns == 0:
            step = big_spacing_ns
        elif current_ns % medium_spacing_ns == 0:
            step = medium_spacing_ns
        else:
            step = small_spacing_ns
        marks.append(GridMark(value=float(current_ns), step_size=float(step)))
        current_ns += small_spacing_ns
    return marks
