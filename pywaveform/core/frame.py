"""
Per-frame pipeline: aggregate -> filter -> order -> plan.

One pass runs synchronously per host refresh. The only state that
survives between passes is the caller-owned WaveformViewState.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .annotations import AnnotationResolver
from .entity_path import EntityPath
from .errors import ResolutionError
from .lookup import CURSOR_TIME_TOLERANCE, LookupResult, lookup
from .readout import ReadoutRow, readout_rows
from .sample_store import SampleStore
from .selection import SelectedMode
from .series import WaveformEvents, WaveformSeries
from .series_builder import SeriesBuilder, WaveformAggregation
from .settings import WaveformConfig
from pywaveform.logging import get_logger
from pywaveform.plots.layout_planner import DomainLayout, LayoutPlanner, LayoutState
from pywaveform.plots.time_axis import TimeType, format_time, time_offset

logger = get_logger(__name__)


@dataclass
class WaveformViewState:
    """State carried across frames by the owner of a view."""
    layout: LayoutState = field(default_factory=LayoutState)
    # First-seen order of domains; never shrinks
    domain_index: Dict[str, int] = field(default_factory=dict)

    def index_domains(self, domains: Iterable[str]) -> None:
        for domain in domains:
            if domain not in self.domain_index:
                self.domain_index[domain] = len(self.domain_index)


@dataclass
class FrameSnapshot:
    """Read-only result of one frame, handed to the renderer."""
    domains: List[DomainLayout] = field(default_factory=list)
    events: WaveformEvents = field(default_factory=WaveformEvents)
    min_time: int = 0
    max_time: int = 0
    time_offset: int = 0
    sample_count: int = 0
    time_type: TimeType = TimeType.SEQUENCE
    cursor_tolerance: int = CURSOR_TIME_TOLERANCE

    @property
    def is_empty(self) -> bool:
        return not self.domains

    def domain(self, name: str) -> Optional[DomainLayout]:
        for layout in self.domains:
            if layout.domain == name:
                return layout
        return None

    def series_for(self, path: EntityPath) -> Optional[WaveformSeries]:
        for layout in self.domains:
            for s in layout.series:
                if s.entity_path == path:
                    return s
        return None

    def lookup(self, path: EntityPath, time: int) -> Optional[LookupResult]:
        series = self.series_for(path)
        if series is None:
            return None
        return lookup(series, time, self.cursor_tolerance)

    def readout(self, time: Optional[int]) -> Dict[str, List[ReadoutRow]]:
        """Readout rows per domain at ``time``."""
        return {
            layout.domain: readout_rows(
                layout.series, time, lambda t: format_time(self.time_type, t),
                self.cursor_tolerance,
            )
            for layout in self.domains
        }


def run_frame(
    store: SampleStore,
    resolver: AnnotationResolver,
    state: WaveformViewState,
    *,
    entities: Optional[Iterable[EntityPath]] = None,
    selected_mode: Optional[SelectedMode] = None,
    reset: bool = False,
    time_type: TimeType = TimeType.SEQUENCE,
    planner: Optional[LayoutPlanner] = None,
) -> FrameSnapshot:
    """Run one aggregation + layout pass and update ``state``.

    Raises:
        ResolutionError: annotation resolution failed; ``state`` is untouched.
    """
    aggregation = SeriesBuilder(store, resolver).build(entities)
    return compose_frame(
        aggregation, state,
        selected_mode=selected_mode, reset=reset,
        time_type=time_type, planner=planner,
    )


def compose_frame(
    aggregation: WaveformAggregation,
    state: WaveformViewState,
    *,
    selected_mode: Optional[SelectedMode] = None,
    reset: bool = False,
    time_type: TimeType = TimeType.SEQUENCE,
    planner: Optional[LayoutPlanner] = None,
) -> FrameSnapshot:
    """Filter, order and lay out an already built aggregation."""
    selected_mode = selected_mode or SelectedMode.unselected()
    planner = planner or LayoutPlanner()

    min_time = aggregation.min_time()
    if min_time is None:
        min_time = 0
    max_time = aggregation.max_time()
    if max_time is None:
        max_time = min_time
    sample_count = aggregation.sample_count()
    offset = time_offset(min_time, time_type)

    state.index_domains(aggregation.all_series)

    visible = []
    for domain, domain_series in aggregation.all_series.items():
        shown = [s for s in domain_series if selected_mode.filter_path(s.entity_path)]
        if any(s.len_series() > 0 for s in shown):
            visible.append((domain, shown))
    visible.sort(key=lambda item: state.domain_index[item[0]])

    layouts = planner.plan(
        visible, state.layout,
        sample_count=sample_count,
        min_time=min_time, max_time=max_time,
        time_offset=offset, reset=reset,
    )
    return FrameSnapshot(
        domains=layouts,
        events=aggregation.all_events,
        min_time=min_time,
        max_time=max_time,
        time_offset=offset,
        sample_count=sample_count,
        time_type=time_type,
        cursor_tolerance=planner.config.cursor_tolerance,
    )


class WaveformFrameRunner:
    """Drive run_frame() once per refresh, keeping the last good snapshot.

    A failed pass (ResolutionError) leaves the previous snapshot in place.
    """

    def __init__(
        self,
        store: SampleStore,
        resolver: AnnotationResolver,
        config: Optional[WaveformConfig] = None,
        time_type: TimeType = TimeType.SEQUENCE,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._planner = LayoutPlanner(config)
        self._time_type = time_type
        self.state = WaveformViewState()
        self._snapshot = FrameSnapshot(time_type=time_type)
        self._last_error: Optional[ResolutionError] = None

    @property
    def snapshot(self) -> FrameSnapshot:
        return self._snapshot

    @property
    def last_error(self) -> Optional[ResolutionError]:
        return self._last_error

    def run(self, selected_mode: Optional[SelectedMode] = None, reset: bool = False) -> FrameSnapshot:
        try:
            aggregation = SeriesBuilder(self._store, self._resolver).build()
        except ResolutionError as e:
            logger.error(f"Frame aborted, keeping previous frame: {e}")
            self._last_error = e
            return self._snapshot

        self._last_error = None
        self._snapshot = compose_frame(
            aggregation, self.state,
            selected_mode=selected_mode, reset=reset,
            time_type=self._time_type, planner=self._planner,
        )
        return self._snapshot
