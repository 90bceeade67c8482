import pytest

from descent_race.engine import Phase, SimulationClock, SimulationState


def _running_clock(speed: float = 1.0) -> SimulationClock:
    clock = SimulationClock(speed_multiplier=speed)
    clock.start()
    return clock


def test_first_frame_after_start_is_a_baseline():
    clock = _running_clock()
    assert clock.advance(5000.0) == 0.0
    assert clock.advance(6000.0) == pytest.approx(1.0)


def test_speed_multiplier_scales_frame_deltas():
    clock = _running_clock(speed=0.5)
    clock.advance(0.0)
    assert clock.advance(1000.0) == pytest.approx(0.5)


def test_pause_resume_has_no_time_jump():
    clock = _running_clock()
    clock.advance(0.0)
    clock.advance(1000.0)
    assert clock.pause() is True
    assert clock.advance(30000.0) == 1.0

    assert clock.resume() is True
    assert clock.advance(90000.0) == 1.0
    assert clock.advance(90500.0) == 1.5


def test_resume_at_pause_timestamp_keeps_elapsed():
    clock = _running_clock()
    clock.advance(0.0)
    clock.advance(750.0)
    frozen = clock.elapsed
    clock.pause()
    clock.resume()
    assert clock.advance(750.0) == frozen


def test_backwards_timestamp_contributes_nothing():
    clock = _running_clock()
    clock.advance(0.0)
    clock.advance(1000.0)
    assert clock.advance(400.0) == pytest.approx(1.0)
    assert clock.advance(600.0) == pytest.approx(1.2)


def test_advance_outside_running_is_ignored():
    clock = SimulationClock()
    assert clock.advance(1000.0) == 0.0
    assert clock.phase is Phase.IDLE


def test_invalid_transitions_are_rejected():
    clock = SimulationClock()
    assert clock.pause() is False
    assert clock.resume() is False
    clock.start()
    assert clock.resume() is False
    assert clock.phase is Phase.RUNNING


def test_start_restarts_from_zero():
    clock = _running_clock()
    clock.advance(0.0)
    clock.advance(2000.0)
    clock.finish()
    assert clock.is_complete is True

    clock.start()
    assert clock.phase is Phase.RUNNING
    assert clock.elapsed == 0.0
    assert clock.is_complete is False
    assert clock.state.last_frame_timestamp is None


def test_finish_keeps_elapsed_and_flags_completion():
    clock = _running_clock()
    clock.advance(0.0)
    clock.advance(2500.0)
    clock.finish()
    assert clock.phase is Phase.IDLE
    assert clock.is_complete is True
    assert clock.elapsed == pytest.approx(2.5)
    assert clock.advance(9000.0) == pytest.approx(2.5)


def test_reset_is_idempotent():
    clock = _running_clock()
    clock.advance(0.0)
    clock.advance(1200.0)
    clock.pause()

    clock.reset()
    once = SimulationState(**vars(clock.state))
    clock.reset()
    assert clock.state == once
    assert clock.state == SimulationState(speed_multiplier=1.0)


def test_speed_setter_rejects_invalid_values():
    clock = SimulationClock(speed_multiplier=0.5)
    for value in (0.0, -1.0, float("nan"), float("inf"), "fast", None):
        assert clock.set_speed_multiplier(value) is False
    assert clock.speed_multiplier == 0.5
    assert clock.set_speed_multiplier(2.0) is True
    assert clock.speed_multiplier == 2.0


def test_constructor_rejects_non_positive_speed():
    with pytest.raises(ValueError):
        SimulationClock(speed_multiplier=0.0)
