import numpy as np
import pytest

from census_scatter.transitions import Transition, ease_cubic_in_out, retarget


def test_easing_is_pinned_at_the_ends_and_symmetric():
    assert ease_cubic_in_out(0.0) == 0.0
    assert ease_cubic_in_out(1.0) == 1.0
    assert ease_cubic_in_out(0.5) == pytest.approx(0.5)
    assert ease_cubic_in_out(0.25) == pytest.approx(1 - ease_cubic_in_out(0.75))


def test_progress_is_bounded_by_duration():
    tr = Transition(start=[0.0], end=[100.0], duration_ms=1000, started_at=10.0)
    assert tr.progress(9.0) == 0.0
    assert tr.progress(10.5) == pytest.approx(0.5)
    assert tr.progress(12.0) == 1.0
    assert tr.done(11.0)
    assert not tr.done(10.999)


def test_value_interpolates_between_endpoints():
    tr = Transition(start=[0.0, 10.0], end=[100.0, 10.0], duration_ms=1000, started_at=0.0)
    np.testing.assert_array_equal(tr.value(0.0), [0.0, 10.0])
    np.testing.assert_allclose(tr.value(0.5), [50.0, 10.0])
    np.testing.assert_array_equal(tr.value(1.0), [100.0, 10.0])


def test_zero_duration_finishes_immediately():
    tr = Transition(start=[1.0], end=[2.0], duration_ms=0, started_at=0.0)
    assert tr.done(0.0)
    np.testing.assert_array_equal(tr.value(0.0), [2.0])


def test_mismatched_shapes_are_rejected():
    with pytest.raises(ValueError):
        Transition(start=[0.0, 1.0], end=[0.0])


def test_retarget_starts_from_in_flight_position():
    running = Transition(start=[0.0], end=[100.0], duration_ms=1000, started_at=0.0)
    replacement = retarget(running, fallback_start=[100.0], end=[-50.0], now=0.5)
    np.testing.assert_allclose(replacement.start, [50.0])
    np.testing.assert_array_equal(replacement.end, [-50.0])
    assert replacement.started_at == 0.5


def test_retarget_after_completion_uses_fallback():
    finished = Transition(start=[0.0], end=[100.0], duration_ms=1000, started_at=0.0)
    replacement = retarget(finished, fallback_start=[100.0], end=[0.0], now=5.0)
    np.testing.assert_array_equal(replacement.start, [100.0])
