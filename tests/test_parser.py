import io

import pytest

from robotctl.heartbeat import Heartbeat
from robotctl.parser import (
    NULL_COMMAND_MESSAGE,
    PINOUT,
    CommandParser,
    ControlMethod,
    LogMode,
    tokenize,
)


class FakeRobot:
    def __init__(self):
        self.calls = []
        self.count_a = 7
        self.count_b = -3
        self.adc_a = 1.25
        self.adc_b = 2.5

    def system_reset(self):
        self.calls.append(("reset",))

    def manager_start(self, method):
        self.calls.append(("manager_start", method))

    def manager_stop(self):
        self.calls.append(("manager_stop",))

    def log_start(self, mode):
        self.calls.append(("log_start", mode))

    def enc_reset_count_a(self):
        self.calls.append(("reset_a",))

    def enc_reset_count_b(self):
        self.calls.append(("reset_b",))

    def enc_count_a(self):
        return self.count_a

    def enc_count_b(self):
        return self.count_b

    def adc_voltage_a(self):
        return self.adc_a

    def adc_voltage_b(self):
        return self.adc_b

    def dcm_set_pwm(self, left, right):
        self.calls.append(("pwm", left, right))

    def dcm_set_voltage(self, left, right):
        self.calls.append(("voltage", left, right))

    def dcm_set_voltage_left(self, voltage):
        self.calls.append(("left", voltage))

    def dcm_set_voltage_right(self, voltage):
        self.calls.append(("right", voltage))


@pytest.fixture
def setup():
    robot = FakeRobot()
    heartbeat = Heartbeat()
    heartbeat.init()
    out = io.StringIO()
    return CommandParser(robot, heartbeat, out), robot, heartbeat, out


def run(parser, out, line):
    out.seek(0)
    out.truncate()
    parser.parse(line)
    return out.getvalue()


def test_parse_null(setup):
    parser, _, _, out = setup
    assert run(parser, out, None) == "ERROR: Tried to parse NULL command pointer\n"
    assert NULL_COMMAND_MESSAGE == out.getvalue()


def test_parse_empty(setup):
    parser, _, _, out = setup
    assert run(parser, out, "") == ""


def test_parse_unknown(setup):
    parser, _, _, out = setup
    cmd = "not_a_known_command_string"
    assert run(parser, out, cmd) == f'Unknown command: "{cmd}"\n'


def test_parse_unknown_twice(setup):
    parser, _, _, out = setup
    cmd = "not_a_known_command_string"
    expected = f'Unknown command: "{cmd}"\n'
    assert run(parser, out, cmd) == expected
    assert run(parser, out, cmd) == expected


def test_heartbeat_start(setup):
    parser, _, heartbeat, out = setup
    heartbeat.stop()
    assert run(parser, out, "heartbeat start") == "Heartbeat has started\n"
    assert heartbeat.is_running()


def test_heartbeat_stop(setup):
    parser, _, heartbeat, out = setup
    assert run(parser, out, "heartbeat stop") == "Heartbeat has stopped\n"
    assert not heartbeat.is_running()


def test_heartbeat_invalid_argument(setup):
    parser, _, _, out = setup
    assert run(parser, out, "heartbeat intensifies") == (
        'heartbeat: invalid argument "intensifies", syntax is: heartbeat [start|stop]\n'
    )


def test_heartbeat_no_argument_running(setup):
    parser, _, heartbeat, out = setup
    heartbeat.start()
    assert run(parser, out, "heartbeat") == "Heartbeat is currently running\n"


def test_heartbeat_no_argument_stopped(setup):
    parser, _, heartbeat, out = setup
    heartbeat.stop()
    assert run(parser, out, "heartbeat") == "Heartbeat is not currently running\n"


def test_heartbeat_trailing_whitespace(setup):
    parser, _, heartbeat, out = setup
    heartbeat.start()
    assert run(parser, out, "heartbeat ") == "Heartbeat is currently running\n"


def test_tokenize_splits_on_whitespace():
    assert tokenize("  a\tb  c ") == ["a", "b", "c"]


def test_tokenize_last_token_keeps_remainder():
    assert tokenize("a b c d e f g", 5) == ["a", "b", "c", "d", "e f g"]


def test_tokenize_blank_line():
    assert tokenize("   ") == []


def test_tokenize_rejects_zero_tokens():
    with pytest.raises(ValueError):
        tokenize("a", 0)


def test_whitespace_only_line_is_silent(setup):
    parser, _, _, out = setup
    assert run(parser, out, "   ") == ""


@pytest.mark.parametrize(
    "arg,method", [("pid", ControlMethod.PID), ("lqr", ControlMethod.LQR), ("mpc", ControlMethod.MPC)]
)
def test_manager_start(setup, arg, method):
    parser, robot, _, out = setup
    text = run(parser, out, f"manager_start {arg}")
    assert text == f"Module manager started with {method.name} control\n"
    assert robot.calls == [("manager_start", method)]


def test_manager_start_without_argument(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "manager_start") == "Please specify a control method: pid, lqr, or mpc\n"
    assert robot.calls == []


def test_manager_start_invalid(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "manager_start xyz") == (
        'manager_start: invalid argument "xyz", syntax is: manager_start [pid|lqr|mpc]\n'
    )
    assert robot.calls == []


def test_manager_stop(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "manager_stop") == "Module manager stopped\n"
    assert robot.calls == [("manager_stop",)]


@pytest.mark.parametrize(
    "cmd,mode",
    [
        ("log_motor_data", LogMode.MOTOR),
        ("log_freewheel_data", LogMode.FREEWHEEL),
        ("log_inertia_data", LogMode.INERTIA),
    ],
)
def test_log_commands_reset_encoders(setup, cmd, mode):
    parser, robot, _, out = setup
    assert run(parser, out, cmd) == ""
    assert robot.calls == [("reset_a",), ("reset_b",), ("log_start", mode)]


def test_reset(setup):
    parser, robot, _, out = setup
    run(parser, out, "reset")
    assert robot.calls == [("reset",)]


def test_dcm_set_pwm(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "dcm_set_pwm 50 -20") == "Set left PWM to 50% and right PWM to -20%\n"
    assert robot.calls == [("pwm", 50.0, -20.0)]


def test_dcm_set_pwm_out_of_range(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "dcm_set_pwm 101 0") == "Error: PWM values must be between -100 and 100\n"
    assert robot.calls == []


def test_dcm_set_pwm_usage(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "dcm_set_pwm 10") == (
        "Usage: dcm_set_pwm <left_pwm> <right_pwm>\n"
        "  left_pwm and right_pwm should be in the range -100 to 100\n"
    )
    assert robot.calls == []


def test_dcm_set_pwm_non_numeric_is_zero(setup):
    parser, robot, _, out = setup
    run(parser, out, "dcm_set_pwm abc 5")
    assert robot.calls == [("pwm", 0.0, 5.0)]


def test_dcm_set_voltage(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "dcm_set_voltage 1.5 -2") == (
        "Set left voltage to 1.50V and right voltage to -2.00V\n"
    )
    assert robot.calls == [("voltage", 1.5, -2.0)]


def test_dcm_set_voltage_out_of_range(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "dcm_set_voltage 0 12.5") == (
        "Error: Voltage values must be between -12.0 and 12.0\n"
    )
    assert robot.calls == []


def test_dcm_left_voltage(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "dcm_left_voltage 3") == (
        "Set left voltage to 3.00V | Left Encoder Count: -3 | Left ADC Voltage: 2.50V\n"
    )
    assert robot.calls == [("left", 3.0)]


def test_dcm_right_voltage(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "dcm_right_voltage -4") == (
        "Set right voltage to -4.00V | Right Encoder Count: 7 | Right ADC Voltage: 1.25V\n"
    )
    assert robot.calls == [("right", -4.0)]


def test_dcm_right_voltage_out_of_range(setup):
    parser, robot, _, out = setup
    assert run(parser, out, "dcm_right_voltage -13") == (
        "Error: Voltage value must be between -12.0 and 12.0\n"
    )
    assert robot.calls == []


def test_commands_table_order(setup):
    parser, _, _, _ = setup
    assert [c.name for c in parser.commands()] == [
        "help",
        "heartbeat",
        "reset",
        "manager_start",
        "manager_stop",
        "log_motor_data",
        "log_freewheel_data",
        "log_inertia_data",
        "dcm_set_pwm",
        "dcm_set_voltage",
        "dcm_left_voltage",
        "dcm_right_voltage",
    ]


def test_help_lists_every_command(setup):
    parser, _, _, out = setup
    text = run(parser, out, "help")
    assert text == parser.help_text()
    assert text.startswith("\n\n" + PINOUT)
    for command in parser.commands():
        assert f"{command.name:<25} {command.args:<15} {command.help}\n" in text


def test_help_with_argument_omits_table(setup):
    parser, _, _, out = setup
    assert run(parser, out, "help heartbeat") == "\n\n" + PINOUT + "\n"