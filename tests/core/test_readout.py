from PyQt6.QtGui import QColor

from pywaveform.core.entity_path import EntityPath
from pywaveform.core.readout import format_analog, readout_rows, seek_time
from pywaveform.core.series import DiscreteTransitionKind, WaveformSeries

BLUE = QColor(10, 10, 255)


def _series():
    series = WaveformSeries(
        entity_path=EntityPath.parse("A/y1"), min_time=0, max_time=10, color=QColor(1, 2, 3),
    )
    series.analog_points.push(0, 0.0)
    series.analog_points.push(10, 1.0)
    series.discrete_points.push_box(0, "ON", BLUE, DiscreteTransitionKind.BOX)
    series.discrete_points.push_box(8, None, BLUE, DiscreteTransitionKind.LINE)
    return series


def test_format_analog():
    assert format_analog(1.23456, False) == "1.235"
    assert format_analog(0.5, True) == "0.500 (I)"


def test_seek_time_prefers_hover():
    assert seek_time(5, 9) == 5
    assert seek_time(None, 9) == 9
    assert seek_time(None, None) is None


def test_no_rows_without_time():
    assert readout_rows([_series()], None) == []


def test_row_contents():
    [row] = readout_rows([_series()], 5, time_formatter=lambda t: f"#{t}")
    assert row.entity_label == "/A/y1"
    assert row.color == QColor(1, 2, 3)
    assert row.analog_text == "0.500 (I)"
    assert row.discrete_label == "ON"
    assert row.discrete_color == BLUE
    assert row.value_text == "0.500 (I) | ON (#0)"


def test_unlabeled_state_hidden():
    [row] = readout_rows([_series()], 10)
    assert row.analog_text == "1.000"
    assert row.discrete_label is None
    assert row.value_text == "1.000"
