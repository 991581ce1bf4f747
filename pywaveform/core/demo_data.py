"""Synthetic demo recording: noisy sines, toggling states and sparse events."""

from typing import Optional, Tuple

import numpy as np
from PyQt6.QtGui import QColor

from .annotations import AnnotationInfo, AnnotationMap
from .components import WaveformPoint
from .sample_store import InMemorySampleStore

SAMPLE_RATE_HZ = 1_000
DEFAULT_SAMPLES = 10_000

ANALOG_PATHS = ("A/y1", "A/y2", "B/y3", "C/y4", "C/y5")
DISCRETE_PATHS = ("D/d1", "D/d2")
EVENT_PATHS = ("E/e1", "E/e2")

OFF, ON = 0, 1
T1, T2 = 2, 3


def _analog(index: int, t: np.ndarray, noise: np.ndarray) -> np.ndarray:
    if index == 0:
        return np.sin(2.0 * np.pi * 0.5 * t) + 0.1 * noise
    if index == 1:
        return np.cos(3.0 * np.pi * 0.5 * t) + 0.3 * noise
    if index == 2:
        return np.sin(4.0 * np.pi * 0.5 * t + np.pi / 3.0)
    if index == 3:
        return np.sin(5.0 * np.pi * 0.5 * t + 2.0 * np.pi / 3.0) + 0.1 * noise
    return np.cos(6.0 * np.pi * 0.5 * t) + 0.6 * noise


def build_demo_store(
    samples: int = DEFAULT_SAMPLES,
    seed: Optional[int] = None,
) -> Tuple[InMemorySampleStore, AnnotationMap]:
    """Build a store and matching annotations; times are sample indices."""
    rng = np.random.default_rng(seed)
    store = InMemorySampleStore()
    annotations = AnnotationMap()

    for path in DISCRETE_PATHS:
        annotations.set_context(path, [
            AnnotationInfo(OFF, "OFF", QColor(100, 100, 255)),
            AnnotationInfo(ON, "ON", QColor(10, 10, 255)),
        ])
    for path in EVENT_PATHS:
        annotations.set_context(path, [
            AnnotationInfo(T1, "T1", QColor(255, 0, 0)),
            AnnotationInfo(T2, "T2", QColor(140, 240, 0)),
        ])

    d_state = [bool(rng.integers(0, 2))] * len(DISCRETE_PATHS)
    for path, init in zip(DISCRETE_PATHS, d_state):
        store.log_static_point(path, WaveformPoint.discrete_state_init(ON if init else OFF))
        store.log_static_point(path, WaveformPoint.discrete_state_normal(OFF))

    t = np.arange(samples) / SAMPLE_RATE_HZ
    for index, path in enumerate(ANALOG_PATHS):
        values = _analog(index, t, rng.random(samples))
        for i, value in enumerate(values):
            store.log_point(path, i, WaveformPoint.scalar(value))

    for i in range(0, samples, SAMPLE_RATE_HZ):
        d_state = [not s for s in d_state]
        for path, state in zip(DISCRETE_PATHS, d_state):
            store.log_point(path, i, WaveformPoint.discrete_state(ON if state else OFF))

    for i in range(0, samples, 3 * SAMPLE_RATE_HZ):
        if rng.random() < 0.5:
            store.log_point("E/e1", i, WaveformPoint.event(T1))
        else:
            store.log_point("E/e2", i, WaveformPoint.event(T2))

    return store, annotations
