from pywaveform.core.demo_data import ANALOG_PATHS, build_demo_store
from pywaveform.core.entity_path import EntityPath
from pywaveform.core.frame import WaveformViewState, run_frame
from pywaveform.core.series import DiscreteTransitionKind


def test_demo_store_layout():
    store, annotations = build_demo_store(samples=4_000, seed=1)
    snapshot = run_frame(store, annotations, WaveformViewState())

    assert [d.domain for d in snapshot.domains] == ["D", "A", "B", "C"]
    assert len(snapshot.domain("A").series) == 2
    assert (snapshot.min_time, snapshot.max_time) == (0, 3_999)
    assert len(snapshot.events) == 2


def test_demo_discrete_states_toggle():
    store, annotations = build_demo_store(samples=3_000, seed=1)
    snapshot = run_frame(store, annotations, WaveformViewState())

    series = snapshot.series_for(EntityPath.parse("D/d1"))
    labels = [t.label for _, t in series.discrete_points.iter()]
    assert series.discrete_points.times == [0, 1_000, 2_000]
    assert labels[0] != labels[1] and labels[1] != labels[2]
    kinds = {t.label: t.kind for _, t in series.discrete_points.iter()}
    assert kinds["OFF"] == DiscreteTransitionKind.LINE
    assert kinds["ON"] == DiscreteTransitionKind.BOX


def test_demo_is_reproducible_with_seed():
    first, _ = build_demo_store(samples=500, seed=3)
    second, _ = build_demo_store(samples=500, seed=3)
    path = EntityPath.parse(ANALOG_PATHS[0])
    assert first.sample_count(path) == second.sample_count(path) == 500
