"""Sample store adapter interface and an in-memory implementation."""

from abc import ABC, abstractmethod
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterable, List, Tuple, Union

from .components import STATIC_TIME, ComponentKind, Sample, WaveformPoint
from .entity_path import EntityPath
from .errors import NoPrimaryDataError
from pywaveform.logging import get_logger

logger = get_logger(__name__)

_MAX_TIME = 2 ** 63 - 1


@dataclass(frozen=True)
class TimeRange:
    """Inclusive [start, end] range on the shared timeline."""

    start: int
    end: int

    EVERYTHING: ClassVar['TimeRange']

    def contains(self, time: int) -> bool:
        return self.start <= time <= self.end


TimeRange.EVERYTHING = TimeRange(STATIC_TIME, _MAX_TIME)


class SampleStore(ABC):
    """Source of per-entity, per-component time-ordered samples."""

    @abstractmethod
    def entities(self) -> List[EntityPath]:
        """All entities that logged anything, in first-logged order."""
        pass

    @abstractmethod
    def range_query(
        self,
        entity: EntityPath,
        kind: ComponentKind,
        time_range: TimeRange,
    ) -> List[Sample]:
        """Return samples of ``kind`` inside ``time_range``, ascending by time.

        Raises:
            NoPrimaryDataError: if the entity never logged ``kind``.
        """
        pass


class _Stream:
    """Time-sorted samples of one component; equal times keep log order."""

    def __init__(self) -> None:
        self._times: List[int] = []
        self._samples: List[Sample] = []

    def insert(self, sample: Sample) -> None:
        index = bisect_right(self._times, sample.time)
        self._times.insert(index, sample.time)
        self._samples.insert(index, sample)

    def query(self, time_range: TimeRange) -> List[Sample]:
        lo = bisect_left(self._times, time_range.start)
        hi = bisect_right(self._times, time_range.end)
        return self._samples[lo:hi]

    def __len__(self) -> int:
        return len(self._samples)


class InMemorySampleStore(SampleStore):
    """Simple store used by the demo app and the test-suite."""

    def __init__(self) -> None:
        self._streams: Dict[Tuple[EntityPath, ComponentKind], _Stream] = {}
        self._entities: Dict[EntityPath, None] = {}

    def log(
        self,
        entity: Union[str, EntityPath],
        time: int,
        kind: ComponentKind,
        *values,
    ) -> None:
        """Log a value-bag (possibly empty or multi-valued) at ``time``."""
        path = EntityPath.parse(entity)
        self._entities.setdefault(path, None)
        stream = self._streams.get((path, kind))
        if stream is None:
            stream = _Stream()
            self._streams[(path, kind)] = stream
        stream.insert(Sample(time=int(time), values=tuple(values)))

    def log_static(self, entity: Union[str, EntityPath], kind: ComponentKind, *values) -> None:
        """Log a timeless value-bag."""
        self.log(entity, STATIC_TIME, kind, *values)

    def log_point(self, entity: Union[str, EntityPath], time: int, point: WaveformPoint) -> None:
        self.log(entity, time, point.kind, point.value)

    def log_static_point(self, entity: Union[str, EntityPath], point: WaveformPoint) -> None:
        self.log_static(entity, point.kind, point.value)

    def log_points(self, entity: Union[str, EntityPath], time: int, points: Iterable[WaveformPoint]) -> None:
        for point in points:
            self.log_point(entity, time, point)

    def entities(self) -> List[EntityPath]:
        return list(self._entities)

    def range_query(
        self,
        entity: EntityPath,
        kind: ComponentKind,
        time_range: TimeRange,
    ) -> List[Sample]:
        stream = self._streams.get((entity, kind))
        if stream is None:
            raise NoPrimaryDataError(entity, kind)
        return stream.query(time_range)

    def sample_count(self, entity: Union[str, EntityPath, None] = None) -> int:
        """Total samples stored, optionally for a single entity."""
        if entity is None:
            return sum(len(s) for s in self._streams.values())
        path = EntityPath.parse(entity)
        return sum(len(s) for (p, _), s in self._streams.items() if p == path)

    def clear(self) -> None:
        self._streams.clear()
        self._entities.clear()
        logger.debug("Sample store cleared")
