import pytest
from PyQt6.QtGui import QColor

from pywaveform.core.readout import ReadoutRow
from pywaveform.gui.readout_panel import ReadoutPanel
from pywaveform.plots.time_axis import TimeType


@pytest.fixture
def panel(qtbot, qapp):
    w = ReadoutPanel()
    qtbot.addWidget(w)
    yield w
    w.close()
    w.deleteLater()
    qapp.processEvents()


def test_rows_grouped_by_domain(panel):
    panel.set_rows({
        "A": [ReadoutRow("/A/y1", QColor(255, 0, 0), analog_text="1.000")],
        "B": [],
        "D": [ReadoutRow("/D/d1", QColor(0, 0, 255), discrete_label="ON",
                         discrete_color=QColor(10, 10, 255), discrete_time_text="#0")],
    })
    assert panel.row_texts() == [
        ("A", ""),
        ("/A/y1", "1.000"),
        ("D", ""),
        ("/D/d1", "ON (#0)"),
    ]


def test_row_without_values_shows_placeholder(panel):
    panel.set_rows({"A": [ReadoutRow("/A/y1", QColor(255, 0, 0))]})
    assert panel.row_texts()[1] == ("/A/y1", "--")


def test_rows_replaced_on_update(panel):
    panel.set_rows({"A": [ReadoutRow("/A/y1", QColor(255, 0, 0), analog_text="1.000")]})
    panel.set_rows({})
    assert panel.row_texts() == []


def test_time_and_marker_labels(panel):
    panel.set_time(TimeType.SEQUENCE, 12)
    assert panel._time_label.text() == "Time: #12"
    panel.set_time(TimeType.SEQUENCE, None)
    assert panel._time_label.text() == "Time: --"

    panel.set_marker(TimeType.SEQUENCE, 10, 2)
    assert panel._marker_label.text() == "Marker: #10  Δ 2"
    panel.set_marker(TimeType.SEQUENCE, None, None)
    assert panel._marker_label.text() == ""
