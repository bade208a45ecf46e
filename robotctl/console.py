"""Interactive command console reading commands from a text stream."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, List, Optional, TextIO, Union

from robotctl.heartbeat import Heartbeat
from robotctl.line_buffer import LineBuffer
from robotctl.parser import CommandParser, ControlMethod, LogMode

CONSOLE_BUFFER_SIZE = 80


class CommandConsole:
    """Feeds characters into a line buffer and parses completed commands."""

    def __init__(self, parser: CommandParser, size: int = CONSOLE_BUFFER_SIZE) -> None:
        self.parser = parser
        self.buffer = LineBuffer(size)
        self.buffer.clear()

    def feed(self, stream: Union[TextIO, Iterable[str]]) -> None:
        """Consume characters from ``stream`` until it ends."""
        self.buffer.process(stream, self.parser.parse, self.parser.out)


class _BenchRobot:
    """Stand-in robot that remembers what it was commanded."""

    def __init__(self) -> None:
        self._reset_state()

    def _reset_state(self) -> None:
        self.control_method: Optional[ControlMethod] = None
        self.log_modes: List[LogMode] = []
        self.count_a = 0
        self.count_b = 0
        self.voltage_left = 0.0
        self.voltage_right = 0.0
        self.pwm = (0.0, 0.0)

    def system_reset(self) -> None:
        self._reset_state()

    def manager_start(self, method: ControlMethod) -> None:
        self.control_method = method

    def manager_stop(self) -> None:
        self.control_method = None

    def log_start(self, mode: LogMode) -> None:
        self.log_modes.append(mode)

    def enc_reset_count_a(self) -> None:
        self.count_a = 0

    def enc_reset_count_b(self) -> None:
        self.count_b = 0

    def enc_count_a(self) -> int:
        return self.count_a

    def enc_count_b(self) -> int:
        return self.count_b

    def adc_voltage_a(self) -> float:
        return self.voltage_right

    def adc_voltage_b(self) -> float:
        return self.voltage_left

    def dcm_set_pwm(self, left: float, right: float) -> None:
        self.pwm = (left, right)

    def dcm_set_voltage(self, left: float, right: float) -> None:
        self.voltage_left = left
        self.voltage_right = right

    def dcm_set_voltage_left(self, voltage: float) -> None:
        self.voltage_left = voltage

    def dcm_set_voltage_right(self, voltage: float) -> None:
        self.voltage_right = voltage


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command console on standard input."""
    arg_parser = argparse.ArgumentParser(
        prog="robotctl", description="Robot command console reading from standard input."
    )
    arg_parser.add_argument(
        "--buffer-size",
        type=int,
        default=CONSOLE_BUFFER_SIZE,
        help="maximum command length in characters",
    )
    args = arg_parser.parse_args(argv)
    if args.buffer_size <= 0:
        arg_parser.error("--buffer-size must be positive")

    heartbeat = Heartbeat()
    heartbeat.init()
    parser = CommandParser(_BenchRobot(), heartbeat)
    console = CommandConsole(parser, args.buffer_size)
    console.feed(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())