# robotctl

`robotctl` holds the logic of a two-wheeled balancing-robot controller in
plain Python, with no dependencies beyond the standard library:

- a line-oriented **command console** (`robotctl.line_buffer`,
  `robotctl.parser`, `robotctl.console`);
- the **PID** and **LQR** balance controllers (`robotctl.pid`,
  `robotctl.lqr`);
- models of the board's **clock tree**, the **heartbeat** LED task, the
  **RTOS configuration**, the **program-break heap**, the processor **port
  layer** and the **SysTick** timer (`robotctl.clock`, `robotctl.heartbeat`,
  `robotctl.rtos_config`, `robotctl.heap`, `robotctl.port`,
  `robotctl.systick`).

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## The console

```
robotctl
robotctl --buffer-size 40
```

This reads characters from standard input until it ends and writes each
command's response to standard output. Backspace deletes the previous
character, carriage returns are ignored and a line feed ends a command; empty
lines are skipped. A line longer than the buffer (80 characters unless
`--buffer-size` says otherwise) is thrown away and reported as
`*** Max command length exceeded ***`.

The commands are `help`, `heartbeat [start|stop]`, `reset`,
`manager_start [pid|lqr|mpc]`, `manager_stop`, `log_motor_data`,
`log_freewheel_data`, `log_inertia_data`, `dcm_set_pwm <left> <right>`
(-100 to 100), `dcm_set_voltage <left> <right>`, `dcm_left_voltage <v>` and
`dcm_right_voltage <v>` (-12.0 to 12.0). `help` prints the board pinout and
the command table.

```
heartbeat
Heartbeat is currently running
heartbeat stop
Heartbeat has stopped
dcm_set_voltage 3 -4.5
Set left voltage to 3.00V and right voltage to -4.50V
frobnicate
Unknown command: "frobnicate"
```

### What the console does not do

The console drives no hardware. The `robotctl` command runs the parser
against an in-memory stand-in robot that only remembers what it was told:
motor, encoder and ADC commands change stored numbers, `reset` clears them,
and `manager_start` / `log_*` record the chosen `ControlMethod` or `LogMode`
without running a control loop or logging anything. There is no MPC
controller; `manager_start mpc` is accepted but only recorded. The heartbeat
keeps its running state but does not blink anything or keep time.

## Using the pieces from Python

### Line buffer

```python
from robotctl.line_buffer import LineBuffer, LineBufferFull

buf = LineBuffer(40)
buf.consume_str("Sx\btring\r\n")
assert buf.is_cmd_ready()
assert buf.gets() == "String"
```

`consume_char` returns `True` once a command is ready and raises
`LineBufferFull` when a character does not fit. `process(stream, handler, out)`
reads a text stream (or any iterable of characters), calls `handler` with each
finished command and writes the overflow message to `out`.

### Command parser

`robotctl.parser.CommandParser(robot, heartbeat, out)` dispatches one command
line at a time through `parse()`. `robot` is any object that provides the
operations listed in the `Robot` protocol (`manager_start`, `dcm_set_voltage`,
`enc_count_a`, `adc_voltage_b` and so on); `heartbeat` is a
`robotctl.heartbeat.Heartbeat`. `parse(None)` reports
`ERROR: Tried to parse NULL command pointer`.

`tokenize(s, max_tokens=5)` splits a line on whitespace into at most
`max_tokens` words; the last permitted word keeps the rest of the line
unsplit. `commands()` returns the command table as `Command` entries and
`help_text()` the text that `help` prints.

`robotctl.console.CommandConsole(parser, size)` joins a `LineBuffer` to a
parser; `feed(stream)` consumes the stream and runs each finished command.

### Controllers

```python
from robotctl.pid import PIDController

pid = PIDController(kp=24.0, ki=0.0, kd=1.2)
rpm = pid.run(0.1)   # pitch in radians; output is clamped to ±100
```

`run` converts the pitch to degrees, returns 0 inside a one-degree dead zone
and otherwise the negated, clamped PID output over a 5 ms step.

`robotctl.lqr.LQRController` keeps a five-element state vector: four measured
states, set with `set_states` or `set_state(index, value)`, and an integrator.
Each `update()` computes `u = K·x` and then advances the integrator with the
integrator row; `control()` returns the latest `u`.

### Scheduler and platform models

- `Heartbeat` tracks the heartbeat task: `init`, `start`, `stop`, `deinit`,
  `is_running`. `compare_profile()` yields `(compare value, delay ms)` pairs
  of one LED fade cycle.
- `robotctl.rtos_config.RTOSConfig` is a frozen dataclass of kernel settings
  with range checks, `ms_to_ticks` and `with_overrides`. `RTEComponents`
  answers `enabled(name)`, with or without an `RTE_` prefix.
- `robotctl.clock`: `default_clock_config()` gives a PLL fed by the 16 MHz
  internal oscillator for a 100 MHz system clock; `ClockConfig` has `hclk`,
  `pclk1` and `pclk2`, `PLLConfig` has `vco_frequency`, `sysclk` and
  `usb_clock`. Invalid settings raise `ClockConfigError`. `SystemCore` holds
  the core clock derived from an oscillator frequency and the FPU access bits
  set by `init()`.
- `robotctl.heap.NewlibHeap(base, limit)` moves a program break with `sbrk`,
  returning the previous break and raising `OutOfMemory` past the limit.
  `free_heap_size(pool_free)` adds the bytes never handed out; `suspended()`
  is a context manager that nests.
- `robotctl.port` has `initialise_stack`, `check_cpuid`,
  `priority_grouping`, `validate_interrupt_priority` and `CriticalSection`
  (also usable in a `with` block). Violations raise `PortError`.
- `robotctl.systick.SysTick` models the 24-bit tick timer: `setup`,
  `tick_handler` and `suppress_ticks_and_sleep`, whose `sleep` callback
  returns a `WakeUp` or `None` to abandon the sleep.