"""Shared test fixtures for the pywaveform test suite.

Provides a centralized QApplication plus small factories for sample
stores and annotation maps.
"""

import sys

import pytest
from PyQt6.QtWidgets import QApplication
from PyQt6.QtGui import QColor

from pywaveform.core.annotations import AnnotationInfo, AnnotationMap
from pywaveform.core.components import WaveformPoint
from pywaveform.core.entity_path import EntityPath
from pywaveform.core.sample_store import InMemorySampleStore

OFF, ON = 0, 1
OFF_COLOR = QColor(100, 100, 255)
ON_COLOR = QColor(10, 10, 255)


@pytest.fixture(scope="session")
def qapp():
    """Session-scoped QApplication, shared by all tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app


@pytest.fixture
def store():
    return InMemorySampleStore()


@pytest.fixture
def on_off_annotations():
    """Annotations with OFF(0)/ON(1) registered on the root path."""
    annotations = AnnotationMap()
    annotations.set_context("/", [
        AnnotationInfo(OFF, "OFF", OFF_COLOR),
        AnnotationInfo(ON, "ON", ON_COLOR),
    ])
    return annotations


@pytest.fixture
def analog_factory(store):
    """Factory fixture: log (time, value) pairs as scalars on a path."""
    def _make(path, points):
        for time, value in points:
            store.log_point(path, time, WaveformPoint.scalar(value))
        return EntityPath.parse(path)
    return _make


@pytest.fixture
def discrete_factory(store):
    """Factory fixture: log state transitions, optionally with init/normal."""
    def _make(path, transitions, init=None, normal=None):
        if init is not None:
            store.log_static_point(path, WaveformPoint.discrete_state_init(init))
        if normal is not None:
            store.log_static_point(path, WaveformPoint.discrete_state_normal(normal))
        for time, class_id in transitions:
            store.log_point(path, time, WaveformPoint.discrete_state(class_id))
        return EntityPath.parse(path)
    return _make
