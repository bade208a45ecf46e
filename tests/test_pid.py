import pytest

from robotctl.pid import LIMIT, PIDController


def test_deadzone_returns_zero_and_keeps_state():
    pid = PIDController()
    assert pid.run(0.001) == 0.0
    assert pid.integral == 0.0
    assert pid.prev_error == 0.0


def test_large_forward_pitch_saturates_positive():
    assert PIDController().run(1.0) == LIMIT


def test_large_backward_pitch_saturates_negative():
    assert PIDController().run(-1.0) == -LIMIT


def test_output_always_within_limit():
    pid = PIDController()
    for pitch in (-3.0, -0.2, -0.05, 0.0, 0.05, 0.2, 3.0):
        assert -LIMIT <= pid.run(pitch) <= LIMIT


def test_proportional_only_returns_error():
    pid = PIDController(kp=1.0, ki=0.0, kd=0.0)
    assert pid.compute_control(3.5, 5) == pytest.approx(3.5)


def test_compute_control_updates_prev_error_and_integral():
    pid = PIDController(kp=0.0, ki=1.0, kd=0.0)
    first = pid.compute_control(2.0, 5)
    second = pid.compute_control(2.0, 5)
    assert pid.prev_error == 2.0
    assert second == pytest.approx(2 * first)


def test_derivative_vanishes_for_constant_error():
    pid = PIDController(kp=0.0, ki=0.0, kd=1.0)
    pid.compute_control(4.0, 5)
    assert pid.compute_control(4.0, 5) == pytest.approx(0.0)


def test_sign_follows_pitch():
    pid = PIDController(kp=1.0, ki=0.0, kd=0.0)
    assert pid.run(0.1) > 0
    pid2 = PIDController(kp=1.0, ki=0.0, kd=0.0)
    assert pid2.run(-0.1) < 0