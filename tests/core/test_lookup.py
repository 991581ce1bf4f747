import pytest

from PyQt6.QtGui import QColor

from pywaveform.core.entity_path import EntityPath
from pywaveform.core.lookup import lookup, lookup_all, lookup_analog
from pywaveform.core.series import DiscreteTransitionKind, WaveformSeries


def _series(points=(), transitions=(), path="A/y1"):
    series = WaveformSeries(entity_path=EntityPath.parse(path), min_time=0, max_time=0)
    for t, v in points:
        series.analog_points.push(t, v)
    for t, label in transitions:
        series.discrete_points.push_box(t, label, QColor(0, 0, 0), DiscreteTransitionKind.BOX)
    return series


def test_interpolates_between_neighbours():
    result = lookup_analog(_series([(0, 0.0), (10, 10.0)]), 5)
    assert result.value == 5.0
    assert result.is_interpolated


def test_exact_hit_is_not_interpolated():
    result = lookup_analog(_series([(0, 0.0), (10, 10.0)]), 0)
    assert result.value == 0.0
    assert not result.is_interpolated


@pytest.mark.parametrize("tolerance", [0, -3])
def test_sample_at_query_time_is_exact_for_any_tolerance(tolerance):
    series = _series([(0, 0.0), (10, 100.0), (20, 0.0)])

    mid = lookup_analog(series, 10, tolerance=tolerance)
    assert mid.value == 100.0
    assert not mid.is_interpolated

    edge = lookup_analog(series, 20, tolerance=tolerance)
    assert edge.value == 0.0
    assert not edge.is_interpolated


def test_outside_data_is_none():
    series = _series([(0, 0.0), (10, 10.0)])
    assert lookup_analog(series, -1) is None
    assert lookup_analog(series, 11) is None
    assert lookup_analog(_series(), 0) is None


def test_wider_tolerance_snaps_to_first_key_in_window():
    series = _series([(0, 0.0), (2, 2.0), (10, 10.0)])
    result = lookup_analog(series, 1, tolerance=3)
    assert result.value == 0.0
    assert not result.is_interpolated


def test_discrete_ignores_init():
    series = _series(transitions=[(10, "ON")])
    series.discrete_points.push_box(20, "OFF", QColor(0, 0, 0), DiscreteTransitionKind.BOX)

    assert lookup(series, 5).discrete is None
    assert lookup(series, 15).discrete_transition.label == "ON"
    assert lookup(series, 20).discrete[0] == 20


def test_lookup_all_keeps_order():
    a = _series([(0, 1.0)], path="A/y1")
    b = _series([(0, 2.0)], path="A/y2")

    results = lookup_all([a, b], 0)
    assert [s.entity_path.name for s, _ in results] == ["y1", "y2"]
    assert [r.analog.value for _, r in results] == [1.0, 2.0]
