"""
Layout and bounds planning for one frame.

Per domain this computes the plotted value-axis range (padded on reset or
when new samples arrive, sticky otherwise) and the vertical placement of
discrete tracks overlaid on the analog axis.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from PyQt6.QtGui import QColor

from pywaveform.core.colors import TRANSPARENT
from pywaveform.core.entity_path import EntityPath
from pywaveform.core.errors import InvalidBoundsError
from pywaveform.core.series import DiscreteTransition, DiscreteTransitionKind, WaveformSeries
from pywaveform.core.settings import WaveformConfig
from pywaveform.logging import get_logger

logger = get_logger(__name__)

# Value band used when a domain has no analog content
DEFAULT_VALUE_RANGE = (-1.0, 1.0)
# Half-height added around a single-valued range
SINGLE_VALUE_EXPANSION = 0.5


@dataclass(frozen=True)
class PlotBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def with_y(self, min_y: float, max_y: float) -> 'PlotBounds':
        return PlotBounds(self.min_x, self.max_x, min_y, max_y)


@dataclass(frozen=True)
class ValueRange:
    min_y: float
    max_y: float
    has_analog: bool


@dataclass
class LayoutState:
    """Layout data carried from one frame to the next.

    Owned by the caller; read and overwritten once per frame.
    """
    last_frame_sample_count: int = 0
    bounds: Dict[str, PlotBounds] = field(default_factory=dict)

    def update_view_bounds(self, domain: str, bounds: PlotBounds) -> None:
        """Record the bounds a user panned/zoomed to, so they stay sticky."""
        self.bounds[domain] = bounds


@dataclass(frozen=True)
class BoxSpan:
    """One transition drawn as a horizontal box from start to end."""
    start: float
    end: float
    y: float
    height: float
    label: str
    fill: QColor
    stroke: QColor
    stroke_width: float


@dataclass(frozen=True)
class LineTrack:
    """Steady-state trace spanning the whole visible time range."""
    y: float
    min_x: float
    max_x: float
    color: QColor
    stroke_width: float


@dataclass
class DiscreteTrack:
    entity_path: EntityPath
    y: float
    box_height: float
    stroke_width: float
    boxes: List[BoxSpan] = field(default_factory=list)
    line: Optional[LineTrack] = None


@dataclass
class DomainLayout:
    """Everything the renderer needs to draw one domain for one frame."""
    domain: str
    series: List[WaveformSeries]
    has_analog: bool = False
    # Bounds to force onto the plot this frame; None keeps the current view
    new_bounds: Optional[PlotBounds] = None
    bounds: Optional[PlotBounds] = None
    tracks: List[DiscreteTrack] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def can_render(self) -> bool:
        return self.error is None


def compute_value_range(domain: str, series: Sequence[WaveformSeries]) -> ValueRange:
    """Fold every series' analog range into one plotted value range.

    Raises:
        InvalidBoundsError: if the folded min exceeds the max (NaN data).
    """
    ranges = [s.analog_points.y_range for s in series if s.analog_points.y_range is not None]
    if not ranges:
        return ValueRange(DEFAULT_VALUE_RANGE[0], DEFAULT_VALUE_RANGE[1], has_analog=False)

    min_y = ranges[0][0]
    max_y = ranges[0][1]
    for lo, hi in ranges[1:]:
        min_y = min(min_y, lo)
        max_y = max(max_y, hi)

    if min_y < max_y:
        return ValueRange(min_y, max_y, has_analog=True)
    if min_y == max_y:
        return ValueRange(min_y - SINGLE_VALUE_EXPANSION, max_y + SINGLE_VALUE_EXPANSION, has_analog=True)
    raise InvalidBoundsError(domain, min_y, max_y)


def padded_bounds(value_range: ValueRange, min_x: float, max_x: float, padding_fraction: float) -> PlotBounds:
    delta = (value_range.max_y - value_range.min_y) * padding_fraction
    return PlotBounds(min_x, max_x, value_range.min_y - delta, value_range.max_y + delta)


class LayoutPlanner:
    """Plan bounds and discrete tracks for each visible domain."""

    def __init__(self, config: Optional[WaveformConfig] = None):
        self._config = config or WaveformConfig()

    @property
    def config(self) -> WaveformConfig:
        return self._config

    def plan(
        self,
        domains: Sequence[Tuple[str, List[WaveformSeries]]],
        state: LayoutState,
        *,
        sample_count: int,
        min_time: int,
        max_time: int,
        time_offset: int = 0,
        reset: bool = False,
    ) -> List[DomainLayout]:
        """Plan every domain and update ``state`` for the next frame.

        A domain whose bounds cannot be computed is returned with ``error``
        set instead of aborting the frame.
        """
        recompute = reset or sample_count != state.last_frame_sample_count
        layouts = []
        for domain, series in domains:
            try:
                layout = self.plan_domain(
                    domain, series, state,
                    min_time=min_time, max_time=max_time,
                    time_offset=time_offset, recompute=recompute,
                )
            except InvalidBoundsError as e:
                logger.warning(f"Cannot render domain {domain!r}: {e}")
                layout = DomainLayout(domain=domain, series=list(series), error=str(e))
            layouts.append(layout)

        state.last_frame_sample_count = sample_count
        return layouts

    def plan_domain(
        self,
        domain: str,
        series: Sequence[WaveformSeries],
        state: LayoutState,
        *,
        min_time: int,
        max_time: int,
        time_offset: int = 0,
        recompute: bool = False,
    ) -> DomainLayout:
        value_range = compute_value_range(domain, series)
        min_x = float(min_time - time_offset)
        max_x = float(max_time - time_offset)

        previous = state.bounds.get(domain)
        new_bounds = None
        if recompute or previous is None:
            new_bounds = padded_bounds(value_range, min_x, max_x, self._config.padding_fraction)
            state.bounds[domain] = new_bounds
        current = new_bounds or previous

        if value_range.has_analog:
            discrete_bounds = current
        else:
            discrete_bounds = current.with_y(*DEFAULT_VALUE_RANGE)

        tracks = self.place_discrete_tracks(
            series, discrete_bounds,
            min_time=min_time, max_time=max_time, time_offset=time_offset,
        )
        return DomainLayout(
            domain=domain,
            series=list(series),
            has_analog=value_range.has_analog,
            new_bounds=new_bounds,
            bounds=current,
            tracks=tracks,
        )

    def place_discrete_tracks(
        self,
        series: Sequence[WaveformSeries],
        bounds: PlotBounds,
        *,
        min_time: int,
        max_time: int,
        time_offset: int = 0,
    ) -> List[DiscreteTrack]:
        """Stack discrete tracks top-down inside the value span."""
        discrete_series = [s for s in series if not s.discrete_points.is_empty()]
        if not discrete_series:
            return []

        cfg = self._config
        total_height = abs(bounds.height) * cfg.discrete_all_padding
        step = total_height / len(discrete_series)
        box_height = step * cfg.discrete_box_padding
        stroke_width = max(box_height * cfg.discrete_stroke_fraction, cfg.discrete_stroke_min)
        top = bounds.max_y - step / 2.0

        tracks = []
        for index, s in enumerate(discrete_series):
            y = top - index * step
            track = DiscreteTrack(entity_path=s.entity_path, y=y, box_height=box_height, stroke_width=stroke_width)
            for (t, transition), (t_end, _) in _windows(s, min_time, max_time):
                if transition.kind == DiscreteTransitionKind.BOX:
                    track.boxes.append(BoxSpan(
                        start=float(t - time_offset),
                        end=float(t_end - time_offset),
                        y=y,
                        height=box_height,
                        label=_box_label(s.entity_path, transition.label),
                        fill=transition.color,
                        stroke=s.color,
                        stroke_width=stroke_width,
                    ))
                else:
                    track.line = LineTrack(
                        y=y,
                        min_x=float(min_time - time_offset),
                        max_x=float(max_time - time_offset),
                        color=transition.color,
                        stroke_width=stroke_width,
                    )
            tracks.append(track)
        return tracks


_SENTINEL = DiscreteTransition(label=None, color=TRANSPARENT, kind=DiscreteTransitionKind.LINE)


def _windows(series: WaveformSeries, min_time: int, max_time: int):
    """Consecutive (start, end) transition pairs.

    ``init`` starts at ``min_time``; a transparent sentinel at ``max_time``
    closes the final state.
    """
    sequence = []
    if series.discrete_points.init is not None:
        sequence.append((min_time, series.discrete_points.init))
    sequence.extend(series.discrete_points.iter())
    sequence.append((max_time, _SENTINEL))
    return zip(sequence, sequence[1:])


def _box_label(path: EntityPath, label: Optional[str]) -> str:
    if label:
        return f"{path}:{label}"
    return str(path)
