"""PID balance controller working on the pitch angle."""

from __future__ import annotations

import math

PERIOD_MS = 5
LIMIT = 100.0
DEADZONE = 1.0
_PI_APPROX = 3.14159


class PIDController:
    """PID controller that turns a pitch in radians into a motor command."""

    def __init__(self, kp: float = 24.0, ki: float = 0.0, kd: float = 1.2) -> None:
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.prev_error = 0.0
        self.integral = 0.0
        self.target_angle = 0.0
        self.error = 0.0
        self.rpm = 0.0

    def run(self, pitch: float) -> float:
        """Return the clamped motor command for a pitch given in radians."""
        degrees = 180.0 * pitch / _PI_APPROX
        self.error = self.target_angle - degrees
        if math.fabs(self.error) < DEADZONE:
            self.rpm = 0.0
        else:
            rpm = -self.compute_control(self.error, PERIOD_MS)
            self.rpm = min(max(rpm, -LIMIT), LIMIT)
        return self.rpm

    def compute_control(self, error: float, dt: float) -> float:
        self.integral += error * dt
        derivative = (error - self.prev_error) / dt
        output = self.kp * error + self.ki * self.integral + self.kd * derivative
        self.prev_error = error
        return output