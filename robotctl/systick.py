"""System tick timer: periodic scheduler ticks and tickless idle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

CLK_BIT = 1 << 2
INT_BIT = 1 << 1
ENABLE_BIT = 1 << 0
COUNT_FLAG_BIT = 1 << 16

MAX_24_BIT_NUMBER = 0xFFFFFF
MISSED_COUNTS_FACTOR = 45

_WORD_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class WakeUp:
    """How a low-power sleep ended.

    ``tick_elapsed`` is the counter's count flag: True when the counter
    reached zero during the sleep.  ``current_value`` is what the counter
    reads when the processor wakes.
    """

    tick_elapsed: bool
    current_value: int


class SysTick:
    """The 24-bit down-counter that generates the scheduler tick.

    The control, reload and current-value registers are kept as attributes
    so the effect of each operation can be inspected.
    """

    def __init__(
        self,
        cpu_clock_hz: int,
        tick_rate_hz: int = 1000,
        systick_clock_hz: Optional[int] = None,
    ) -> None:
        if cpu_clock_hz <= 0 or tick_rate_hz <= 0:
            raise ValueError("clock and tick rate must be positive")
        if systick_clock_hz is not None and systick_clock_hz <= 0:
            raise ValueError("tick timer clock must be positive")
        self.cpu_clock_hz = cpu_clock_hz
        self.tick_rate_hz = tick_rate_hz
        # A tick timer clocked from the core sets the clock source bit.
        if systick_clock_hz is None:
            self.systick_clock_hz = cpu_clock_hz
            self.clk_bit = CLK_BIT
        else:
            self.systick_clock_hz = systick_clock_hz
            self.clk_bit = 0

        self.ctrl = 0
        self.load = 0
        self.current_value = 0

        self.timer_counts_for_one_tick = 0
        self.max_suppressed_ticks = 0
        self.stopped_timer_compensation = 0

        self.hal_tick = 0
        self.pendsv_pending = False
        self.interrupts_enabled = True
        self.stepped_ticks = 0

    def setup(self) -> None:
        """Configure the counter to interrupt at the tick rate and start it."""
        counts = self.systick_clock_hz // self.tick_rate_hz
        if counts == 0:
            raise ValueError("tick rate is faster than the tick timer clock")
        self.timer_counts_for_one_tick = counts
        self.max_suppressed_ticks = MAX_24_BIT_NUMBER // counts
        divider = self.cpu_clock_hz // self.systick_clock_hz
        self.stopped_timer_compensation = (
            MISSED_COUNTS_FACTOR // divider if divider else MISSED_COUNTS_FACTOR
        )

        self.ctrl = 0
        self.current_value = 0
        self.load = counts - 1
        self.ctrl = self.clk_bit | INT_BIT | ENABLE_BIT

    def tick_handler(self, increment_tick: Callable[[], bool]) -> bool:
        """Handle one tick interrupt.

        ``increment_tick`` advances the scheduler's tick and returns whether a
        context switch is needed; if so a context switch is pended.
        """
        self.interrupts_enabled = False
        try:
            self.hal_tick += 1
            switch = bool(increment_tick())
            if switch:
                self.pendsv_pending = True
        finally:
            self.interrupts_enabled = True
        return switch

    def _require_setup(self) -> None:
        if self.timer_counts_for_one_tick == 0:
            raise RuntimeError("tick timer has not been set up")

    def suppress_ticks_and_sleep(
        self,
        expected_idle_time: int,
        sleep: Callable[[int], Optional[WakeUp]],
    ) -> int:
        """Stop the periodic tick and sleep for up to ``expected_idle_time`` ticks.

        ``sleep`` receives the reload value the counter was armed with and
        returns how the sleep ended, or None when the scheduler abandons the
        sleep before it starts.  Returns the number of whole tick periods
        the scheduler's tick count was stepped forward by.
        """
        self._require_setup()
        if expected_idle_time < 1:
            raise ValueError("expected idle time must be at least one tick")
        counts = self.timer_counts_for_one_tick
        expected = min(expected_idle_time, self.max_suppressed_ticks)

        self.ctrl &= ~ENABLE_BIT

        reload = (self.current_value + counts * (expected - 1)) & _WORD_MASK
        if reload > self.stopped_timer_compensation:
            reload -= self.stopped_timer_compensation

        self.interrupts_enabled = False
        wake = sleep(reload)

        if wake is None:
            # Sleep abandoned: finish the current tick period and carry on.
            self.load = self.current_value
            self.ctrl |= ENABLE_BIT
            self.load = counts - 1
            self.interrupts_enabled = True
            return 0

        self.load = reload
        self.current_value = wake.current_value
        self.ctrl = self.clk_bit | INT_BIT

        if wake.tick_elapsed:
            calculated = ((counts - 1) - (reload - wake.current_value)) & _WORD_MASK
            if calculated < self.stopped_timer_compensation or calculated > counts:
                calculated = counts - 1
            self.load = calculated
            complete = expected - 1
        else:
            decrements = (expected * counts - wake.current_value) & _WORD_MASK
            complete = decrements // counts
            self.load = ((complete + 1) * counts - decrements) & _WORD_MASK

        self.current_value = 0
        self.ctrl |= ENABLE_BIT
        self.stepped_ticks += complete
        self.load = counts - 1
        self.interrupts_enabled = True
        return complete