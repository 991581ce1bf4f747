"""
Series builder and domain aggregator.

Turns raw component streams from a SampleStore into per-entity
WaveformSeries grouped by domain (first path segment), plus a shared
WaveformEvents collection. Everything is rebuilt from scratch on each call.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .annotations import AnnotationResolver
from .colors import auto_color_for_entity_path
from .components import ComponentKind, Sample
from .entity_path import EntityPath
from .errors import NoPrimaryDataError
from .sample_store import SampleStore, TimeRange
from .series import (
    DiscreteTransition,
    DiscreteTransitionKind,
    EventMarker,
    WaveformEvents,
    WaveformSeries,
)
from pywaveform.logging import get_logger

logger = get_logger(__name__)


@dataclass
class WaveformAggregation:
    """Output of one aggregation pass."""

    all_series: Dict[str, List[WaveformSeries]] = field(default_factory=dict)
    all_events: WaveformEvents = field(default_factory=WaveformEvents)

    def add_series(self, domain: str, series: WaveformSeries) -> None:
        self.all_series.setdefault(domain, []).append(series)

    def iter_series(self) -> Iterable[WaveformSeries]:
        for domain_series in self.all_series.values():
            yield from domain_series

    def min_time(self) -> Optional[int]:
        """Earliest time of any series or event, None when nothing was built."""
        times = [s.min_time for s in self.iter_series()]
        times.extend(self.all_events.event_markers.keys())
        return min(times) if times else None

    def max_time(self) -> Optional[int]:
        times = [s.max_time for s in self.iter_series()]
        times.extend(self.all_events.event_markers.keys())
        return max(times) if times else None

    def sample_count(self) -> int:
        """Analog + discrete samples of every series plus event timestamps."""
        return sum(s.len_series() for s in self.iter_series()) + len(self.all_events)


class _TimeBounds:
    """Running min/max over every contributing timestamp of one entity.

    ``widen`` always sets both ends, so either both are None or neither is.
    """

    def __init__(self) -> None:
        self.min_time: Optional[int] = None
        self.max_time: Optional[int] = None

    def widen(self, time: int) -> None:
        self.min_time = time if self.min_time is None else min(self.min_time, time)
        self.max_time = time if self.max_time is None else max(self.max_time, time)

    @property
    def empty(self) -> bool:
        return self.min_time is None


class SeriesBuilder:
    """Build WaveformSeries for every visible entity of a sample store.

    The requested ``time_range`` is accepted but the store is always
    queried over TimeRange.EVERYTHING unless ``honor_time_range`` is set.
    """

    def __init__(
        self,
        store: SampleStore,
        resolver: AnnotationResolver,
        honor_time_range: bool = False,
    ):
        self._store = store
        self._resolver = resolver
        self._honor_time_range = honor_time_range

    def build(
        self,
        entities: Optional[Iterable[EntityPath]] = None,
        time_range: TimeRange = TimeRange.EVERYTHING,
    ) -> WaveformAggregation:
        """Run one aggregation pass.

        Raises:
            ResolutionError: if the annotation resolver fails; the pass is aborted.
        """
        if entities is None:
            entities = self._store.entities()
        if not self._honor_time_range:
            time_range = TimeRange.EVERYTHING

        aggregation = WaveformAggregation()
        for entity in entities:
            series = self._build_entity(entity, time_range, aggregation.all_events)
            if series is None:
                continue
            aggregation.add_series(entity.domain, series)

        logger.debug(
            f"Aggregated {sum(len(s) for s in aggregation.all_series.values())} series "
            f"in {len(aggregation.all_series)} domains, {len(aggregation.all_events)} event times"
        )
        return aggregation

    def _query(self, entity: EntityPath, kind: ComponentKind, time_range: TimeRange) -> Optional[List[Sample]]:
        try:
            return self._store.range_query(entity, kind, time_range)
        except NoPrimaryDataError:
            return None

    def _build_entity(
        self,
        entity: EntityPath,
        time_range: TimeRange,
        events: WaveformEvents,
    ) -> Optional[WaveformSeries]:
        domain = entity.domain
        if domain is None:
            return None

        bounds = _TimeBounds()
        series = WaveformSeries(
            entity_path=entity,
            min_time=0,
            max_time=0,
            color=auto_color_for_entity_path(entity),
        )

        self._ingest_analog(entity, time_range, series, bounds)
        self._ingest_discrete(entity, time_range, series, bounds)
        self._ingest_events(entity, time_range, events, bounds)

        if bounds.empty:
            return None
        series.min_time = bounds.min_time
        series.max_time = bounds.max_time

        if series.is_empty():
            logger.debug(f"Dropping {entity}: no analog or discrete points")
            return None
        return series

    def _ingest_analog(self, entity, time_range, series, bounds) -> None:
        samples = self._query(entity, ComponentKind.SCALAR, time_range)
        if samples is None:
            return
        dropped = 0
        for sample in samples:
            if len(sample.values) != 1:
                dropped += 1
                continue
            bounds.widen(sample.time)
            series.analog_points.push(sample.time, float(sample.values[0]))
        if dropped:
            logger.debug(f"{entity}: skipped {dropped} malformed scalar samples")

    def _ingest_discrete(self, entity, time_range, series, bounds) -> None:
        states = self._query(entity, ComponentKind.DISCRETE_STATE, time_range) or []
        inits = self._query(entity, ComponentKind.DISCRETE_STATE_INIT, time_range) or []
        normals = self._query(entity, ComponentKind.DISCRETE_STATE_NORMAL, time_range) or []

        normal = next((s.single() for s in normals if s.single() is not None), None)

        for sample in states:
            class_id = sample.single()
            if class_id is None:
                continue
            bounds.widen(sample.time)
            transition = self._resolve_transition(entity, class_id, normal)
            if transition is None:
                logger.debug(f"{entity}: unresolved discrete class {class_id} at {sample.time}")
                continue
            series.discrete_points.push(sample.time, transition)

        init_class = next((s.single() for s in inits if s.single() is not None), None)
        if init_class is not None:
            series.discrete_points.init = self._resolve_transition(entity, init_class, normal)

    def _resolve_transition(
        self,
        entity: EntityPath,
        class_id: int,
        normal: Optional[int],
    ) -> Optional[DiscreteTransition]:
        resolved = self._resolver.resolve(entity, class_id)
        if resolved is None:
            return None
        kind = DiscreteTransitionKind.LINE if class_id == normal else DiscreteTransitionKind.BOX
        return DiscreteTransition(label=resolved.label, color=resolved.color, kind=kind)

    def _ingest_events(self, entity, time_range, events, bounds) -> None:
        samples = self._query(entity, ComponentKind.EVENT, time_range)
        if samples is None:
            return
        for sample in samples:
            if not sample.values:
                continue
            bounds.widen(sample.time)
            for class_id in sample.values:
                resolved = self._resolver.resolve(entity, class_id)
                if resolved is None:
                    continue
                events.push(
                    sample.time,
                    EventMarker(entity_path=entity, label=resolved.label, color=resolved.color),
                )


def build_series(
    store: SampleStore,
    resolver: AnnotationResolver,
    entities: Optional[Iterable[EntityPath]] = None,
) -> WaveformAggregation:
    """Convenience wrapper for a single full-range pass."""
    return SeriesBuilder(store, resolver).build(entities)
