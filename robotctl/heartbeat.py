"""Heartbeat LED task: a breathing PWM pattern on a periodic timer."""

from __future__ import annotations

from typing import Iterator, Tuple

HEARTBEAT_PERIOD = 10000
COUNTER_PERIOD = 9999
COMPARE_STEP = 50
PAUSE_MS = 256
THREAD_NAME = "heartbeat"


class Heartbeat:
    """State of the heartbeat task and its timer."""

    def __init__(self) -> None:
        self.name = THREAD_NAME
        self.prescaler = 0
        self.counter_period = COUNTER_PERIOD
        self.periodic = True
        self.timer_period: int | None = None
        self.timer_active = False
        self.initialised = False
        self._running = False

    def init(self) -> None:
        """Configure the timer and start the heartbeat, once."""
        if not self.initialised:
            self.start()
            self.initialised = True

    def deinit(self) -> None:
        self.initialised = False
        self._running = False

    def start(self) -> None:
        if not self._running:
            self.timer_period = HEARTBEAT_PERIOD
            self.timer_active = True
            self._running = True

    def stop(self) -> None:
        if self._running:
            self.timer_active = False
            self._running = False

    def is_running(self) -> bool:
        return self._running

    def compare_profile(self) -> Iterator[Tuple[int, int]]:
        """Yield (compare value, delay in ms) for one heartbeat cycle."""
        ramps = (
            range(0, 201, 1),
            range(200, -1, -2),
            range(0, 201, 1),
            range(200, -1, -1),
        )
        for ramp in ramps:
            for i in ramp:
                yield i * COMPARE_STEP, 1
        yield 0, PAUSE_MS