"""Command console, balance controllers and scheduler models for a balancing robot."""

__version__ = "0.1.0"

__all__ = [
    "clock",
    "console",
    "heap",
    "heartbeat",
    "line_buffer",
    "lqr",
    "parser",
    "pid",
    "port",
    "rtos_config",
    "systick",
]