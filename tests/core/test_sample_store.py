import pytest

from pywaveform.core.components import STATIC_TIME, ComponentKind, WaveformPoint
from pywaveform.core.entity_path import EntityPath
from pywaveform.core.errors import NoPrimaryDataError
from pywaveform.core.sample_store import InMemorySampleStore, TimeRange


def test_range_query_sorted_by_time():
    store = InMemorySampleStore()
    for t in (30, 10, 20):
        store.log("A/y1", t, ComponentKind.SCALAR, float(t))

    samples = store.range_query(EntityPath.parse("A/y1"), ComponentKind.SCALAR, TimeRange(10, 20))
    assert [s.time for s in samples] == [10, 20]
    assert samples[0].values == (10.0,)


def test_everything_includes_static_samples():
    store = InMemorySampleStore()
    store.log_static_point("D/d1", WaveformPoint.discrete_state_init(1))

    samples = store.range_query(
        EntityPath.parse("D/d1"), ComponentKind.DISCRETE_STATE_INIT, TimeRange.EVERYTHING,
    )
    assert len(samples) == 1
    assert samples[0].time == STATIC_TIME
    assert samples[0].is_static


def test_missing_stream_raises_no_primary_data():
    store = InMemorySampleStore()
    store.log("A/y1", 0, ComponentKind.SCALAR, 1.0)

    with pytest.raises(NoPrimaryDataError) as exc_info:
        store.range_query(EntityPath.parse("A/y1"), ComponentKind.EVENT, TimeRange.EVERYTHING)
    assert exc_info.value.kind == ComponentKind.EVENT


def test_entities_in_first_logged_order():
    store = InMemorySampleStore()
    store.log("C/y4", 0, ComponentKind.SCALAR, 1.0)
    store.log("A/y1", 0, ComponentKind.SCALAR, 1.0)
    store.log("C/y4", 1, ComponentKind.SCALAR, 2.0)

    assert store.entities() == [EntityPath.parse("C/y4"), EntityPath.parse("A/y1")]


def test_value_bags_keep_their_shape():
    store = InMemorySampleStore()
    store.log("A/y1", 0, ComponentKind.SCALAR)
    store.log("A/y1", 1, ComponentKind.SCALAR, 1.0, 2.0)

    samples = store.range_query(EntityPath.parse("A/y1"), ComponentKind.SCALAR, TimeRange.EVERYTHING)
    assert [s.values for s in samples] == [(), (1.0, 2.0)]
    assert all(s.single() is None for s in samples)


def test_sample_count_and_clear():
    store = InMemorySampleStore()
    store.log_points("A/y1", 5, [WaveformPoint.scalar(1.0), WaveformPoint.event(2)])
    store.log("B/y3", 5, ComponentKind.SCALAR, 1.0)

    assert store.sample_count() == 3
    assert store.sample_count("A/y1") == 2

    store.clear()
    assert store.sample_count() == 0
    assert store.entities() == []
