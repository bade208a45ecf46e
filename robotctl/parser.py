"""Command table and parser for the robot's text console."""

from __future__ import annotations

import enum
import re
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence, TextIO, Tuple

from robotctl.heartbeat import Heartbeat

CMD_MAX_TOKENS = 5

NULL_COMMAND_MESSAGE = "ERROR: Tried to parse NULL command pointer\n"

_C_WHITESPACE = " \t\n\v\f\r"
_WORD_PATTERN = re.compile(f"[^{re.escape(_C_WHITESPACE)}]+")
_LEADING_INT = re.compile(f"[{re.escape(_C_WHITESPACE)}]*([+-]?\\d+)")
_LEADING_FLOAT = re.compile(
    f"[{re.escape(_C_WHITESPACE)}]*([+-]?(?:\\d+\\.?\\d*|\\.\\d+)(?:[eE][+-]?\\d+)?)"
)

PWM_LIMIT = 100
VOLTAGE_LIMIT = 12.0

PINOUT = (
    "Pin configuration:                                     \n"
    "                                                       \n"
    "       .---------------------------------------.       \n"
    " PC10--|  1  2 --PC11              PC9--  1  2 |--PC8  \n"
    " PC12--|  3  4 --PD2               PB8--  3  4 |--PC6  \n"
    "  VDD--|  5  6 --E5V               PB9--  5  6 |--PC5  \n"
    "BOOT0--|  7  8 --GND              AVDD--  7  8 |--U5V  \n"
    "   NC--|  9 10 --NC                GND--  9 10 |--NC   \n"
    "   NC--| 11 12 --IOREF             PA5-- 11 12 |--PA12 \n"
    " PA13--| 13 14 --RESET             PA6-- 13 14 |--PA11 \n"
    " PA14--| 15 16 --+3v3              PA7-- 15 16 |--PB12 \n"
    " PA15--| 17 18 --+5v               PB6-- 17 18 |--NC   \n"
    "  GND--| 19 20 --GND               PC7-- 19 20 |--GND  \n"
    "  PB7--| 21 22 --GND               PA9-- 21 22 |--PB2  \n"
    " PC13--| 23 24 --VIN               PA8-- 23 24 |--PB1  \n"
    " PC14--| 25 26 --NC               PB10-- 25 26 |--PB15 \n"
    " PC15--| 27 28 --PA0               PB4-- 27 28 |--PB14 \n"
    "  PH0--| 29 30 --PA1               PB5-- 29 30 |--PB13 \n"
    "  PH1--| 31 32 --PA4               PB3-- 31 32 |--AGND \n"
    " VBAT--| 33 34 --PB0              PA10-- 33 34 |--PC4  \n"
    "  PC2--| 35 36 --PC1               PA2-- 35 36 |--NC   \n"
    "  PC3--| 37 38 --PC0               PA3-- 37 38 |--NC   \n"
    "       |________                   ____________|       \n"
    "                \\_________________/                   \n"
)

_HELP_HEADER = (
    "Command Arguments                         Description             \n"
    "------------------------------------------------------------------\n"
)


class ControlMethod(enum.Enum):
    PID = "pid"
    LQR = "lqr"
    MPC = "mpc"


class LogMode(enum.Enum):
    MOTOR = "motor"
    FREEWHEEL = "freewheel"
    INERTIA = "inertia"


class Robot(Protocol):
    """Hardware operations the console commands act on."""

    def system_reset(self) -> None: ...
    def manager_start(self, method: ControlMethod) -> None: ...
    def manager_stop(self) -> None: ...
    def log_start(self, mode: LogMode) -> None: ...
    def enc_reset_count_a(self) -> None: ...
    def enc_reset_count_b(self) -> None: ...
    def enc_count_a(self) -> int: ...
    def enc_count_b(self) -> int: ...
    def adc_voltage_a(self) -> float: ...
    def adc_voltage_b(self) -> float: ...
    def dcm_set_pwm(self, left: float, right: float) -> None: ...
    def dcm_set_voltage(self, left: float, right: float) -> None: ...
    def dcm_set_voltage_left(self, voltage: float) -> None: ...
    def dcm_set_voltage_right(self, voltage: float) -> None: ...


@dataclass(frozen=True)
class Command:
    """One entry of the command table."""

    name: str
    args: str
    help: str
    func: Callable[[List[str]], None]


def tokenize(s: str, max_tokens: int = CMD_MAX_TOKENS) -> List[str]:
    """Split on whitespace into at most ``max_tokens`` words.

    The last permitted word keeps the remainder of the line unsplit.
    """
    if max_tokens < 1:
        raise ValueError("max_tokens must be at least 1")
    words: List[str] = []
    for match in _WORD_PATTERN.finditer(s):
        if len(words) == max_tokens - 1:
            words.append(s[match.start():])
            break
        words.append(match.group())
    return words


def _atoi(s: str) -> int:
    match = _LEADING_INT.match(s)
    return int(match.group(1)) if match else 0


def _atof(s: str) -> float:
    match = _LEADING_FLOAT.match(s)
    return float(match.group(1)) if match else 0.0


def _voltage_out_of_range(*voltages: float) -> bool:
    return any(v < -VOLTAGE_LIMIT or v > VOLTAGE_LIMIT for v in voltages)


class CommandParser:
    """Looks up a command line in the command table and runs it."""

    def __init__(
        self,
        robot: Robot,
        heartbeat: Heartbeat,
        out: Optional[TextIO] = None,
    ) -> None:
        self.robot = robot
        self.heartbeat = heartbeat
        self._out = out
        self._table: Tuple[Command, ...] = (
            Command("help", "", "Displays this help message", self._help),
            Command("heartbeat", "[start|stop]", "Start/Stop heartbeat task", self._heartbeat),
            Command("reset", "", "Restarts the system.\n", self._reset),
            Command(
                "manager_start",
                "[pid|lqr|mpc]",
                "Starts the module manager with the specified control method",
                self._manager_start,
            ),
            Command("manager_stop", "", "Stops the module manager\n", self._manager_stop),
            Command("log_motor_data", "", "Logs motor data", self._log(LogMode.MOTOR)),
            Command(
                "log_freewheel_data", "", "Logs freewheel motor data", self._log(LogMode.FREEWHEEL)
            ),
            Command("log_inertia_data", "", "Logs inertia data\n", self._log(LogMode.INERTIA)),
            Command(
                "dcm_set_pwm",
                "<left_pwm> <right_pwm>",
                "Sets the PWM duty cycle for the left and right DC motors (-100 to 100)",
                self._dcm_set_pwm,
            ),
            Command(
                "dcm_set_voltage",
                "<left_voltage> <right_voltage>",
                "Sets the voltage for the left and right DC motors (-12.0 to 12.0)\n",
                self._dcm_set_voltage,
            ),
            Command(
                "dcm_left_voltage",
                "<left_voltage>",
                "Sets the voltage for the left DC motor (-12.0 to 12.0)",
                self._dcm_left_voltage,
            ),
            Command(
                "dcm_right_voltage",
                "<right_voltage>",
                "Sets the voltage for the right DC motor (-12.0 to 12.0)\n",
                self._dcm_right_voltage,
            ),
        )

    @property
    def out(self) -> TextIO:
        return sys.stdout if self._out is None else self._out

    def _write(self, text: str) -> None:
        self.out.write(text)

    def commands(self) -> Tuple[Command, ...]:
        return self._table

    def help_text(self) -> str:
        """Return the full help message with pinout and command table."""
        return self._help_output(1)

    def parse(self, cmd: Optional[str]) -> None:
        """Split ``cmd`` into words and run the matching command."""
        if cmd is None:
            self._write(NULL_COMMAND_MESSAGE)
            return
        if not cmd:
            return
        argv = tokenize(cmd)
        if not argv:
            return
        for command in self._table:
            if command.name == argv[0]:
                command.func(argv)
                return
        self._write(f'Unknown command: "{argv[0]}"\n')

    def _help_output(self, argc: int) -> str:
        parts = ["\n\n", PINOUT, "\n"]
        if argc == 1:
            parts.append(_HELP_HEADER)
            parts.extend(f"{c.name:<25} {c.args:<15} {c.help}\n" for c in self._table)
        return "".join(parts)

    def _help(self, argv: List[str]) -> None:
        self._write(self._help_output(len(argv)))

    def _reset(self, argv: List[str]) -> None:
        self.robot.system_reset()

    def _heartbeat(self, argv: List[str]) -> None:
        if len(argv) <= 1:
            if self.heartbeat.is_running():
                self._write("Heartbeat is currently running\n")
            else:
                self._write("Heartbeat is not currently running\n")
        elif argv[1] == "start":
            self.heartbeat.start()
            self._write("Heartbeat has started\n")
        elif argv[1] == "stop":
            self.heartbeat.stop()
            self._write("Heartbeat has stopped\n")
        else:
            self._write(
                f'{argv[0]}: invalid argument "{argv[1]}", syntax is: {argv[0]} [start|stop]\n'
            )

    def _manager_start(self, argv: List[str]) -> None:
        if len(argv) <= 1:
            self._write("Please specify a control method: pid, lqr, or mpc\n")
            return
        try:
            method = ControlMethod(argv[1])
        except ValueError:
            self._write(
                f'{argv[0]}: invalid argument "{argv[1]}", syntax is: {argv[0]} [pid|lqr|mpc]\n'
            )
            return
        self.robot.manager_start(method)
        self._write(f"Module manager started with {method.name} control\n")

    def _manager_stop(self, argv: List[str]) -> None:
        self.robot.manager_stop()
        self._write("Module manager stopped\n")

    def _log(self, mode: LogMode) -> Callable[[List[str]], None]:
        def start(argv: List[str]) -> None:
            self.robot.enc_reset_count_a()
            self.robot.enc_reset_count_b()
            self.robot.log_start(mode)

        return start

    def _dcm_set_pwm(self, argv: Sequence[str]) -> None:
        if len(argv) < 3:
            self._write(f"Usage: {argv[0]} <left_pwm> <right_pwm>\n")
            self._write("  left_pwm and right_pwm should be in the range -100 to 100\n")
            return
        left, right = _atoi(argv[1]), _atoi(argv[2])
        if any(v < -PWM_LIMIT or v > PWM_LIMIT for v in (left, right)):
            self._write("Error: PWM values must be between -100 and 100\n")
            return
        self.robot.dcm_set_pwm(float(left), float(right))
        self._write(f"Set left PWM to {left}% and right PWM to {right}%\n")

    def _dcm_set_voltage(self, argv: Sequence[str]) -> None:
        if len(argv) < 3:
            self._write(f"Usage: {argv[0]} <left_voltage> <right_voltage>\n")
            self._write("  left_voltage and right_voltage should be in the range -12.0 to 12.0\n")
            return
        left, right = _atof(argv[1]), _atof(argv[2])
        if _voltage_out_of_range(left, right):
            self._write("Error: Voltage values must be between -12.0 and 12.0\n")
            return
        self.robot.dcm_set_voltage(left, right)
        self._write(f"Set left voltage to {left:.2f}V and right voltage to {right:.2f}V\n")

    def _dcm_left_voltage(self, argv: Sequence[str]) -> None:
        if len(argv) < 2:
            self._write(f"Usage: {argv[0]} <left_voltage>\n")
            self._write("  left_voltage should be in the range -12.0 to 12.0\n")
            return
        voltage = _atof(argv[1])
        if _voltage_out_of_range(voltage):
            self._write("Error: Voltage value must be between -12.0 and 12.0\n")
            return
        self.robot.dcm_set_voltage_left(voltage)
        count = self.robot.enc_count_b()
        adc = self.robot.adc_voltage_b()
        self._write(
            f"Set left voltage to {voltage:.2f}V | Left Encoder Count: {count} "
            f"| Left ADC Voltage: {adc:.2f}V\n"
        )

    def _dcm_right_voltage(self, argv: Sequence[str]) -> None:
        if len(argv) < 2:
            self._write(f"Usage: {argv[0]} <right_voltage>\n")
            self._write("  right_voltage should be in the range -12.0 to 12.0\n")
            return
        voltage = _atof(argv[1])
        if _voltage_out_of_range(voltage):
            self._write("Error: Voltage value must be between -12.0 and 12.0\n")
            return
        self.robot.dcm_set_voltage_right(voltage)
        count = self.robot.enc_count_a()
        adc = self.robot.adc_voltage_a()
        self._write(
            f"Set right voltage to {voltage:.2f}V | Right Encoder Count: {count} "
            f"| Right ADC Voltage: {adc:.2f}V\n"
        )