"""System clock tree configuration and core clock bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field

HSI_HZ = 16_000_000
DEFAULT_XTAL_HZ = 50_000_000

_VALID_PLLP = (2, 4, 6, 8)

CPACR_FPU_FULL_ACCESS = (3 << 10 * 2) | (3 << 11 * 2)


class ClockConfigError(ValueError):
    """Raised for a clock configuration the hardware cannot run."""


@dataclass(frozen=True)
class PLLConfig:
    """Main PLL dividers and multiplier."""

    m: int = 16
    n: int = 400
    p: int = 4
    q: int = 7

    def __post_init__(self) -> None:
        for name in ("m", "n", "q"):
            if getattr(self, name) <= 0:
                raise ClockConfigError(f"PLL{name.upper()} must be positive")
        if self.p not in _VALID_PLLP:
            raise ClockConfigError(f"PLLP must be one of {_VALID_PLLP}, got {self.p}")

    def vco_frequency(self, source_hz: int) -> int:
        return source_hz // self.m * self.n

    def sysclk(self, source_hz: int) -> int:
        return self.vco_frequency(source_hz) // self.p

    def usb_clock(self, source_hz: int) -> int:
        return self.vco_frequency(source_hz) // self.q


@dataclass(frozen=True)
class ClockConfig:
    """System clock source, bus dividers and flash wait states."""

    source_hz: int = HSI_HZ
    pll: PLLConfig = field(default_factory=PLLConfig)
    ahb_divider: int = 1
    apb1_divider: int = 2
    apb2_divider: int = 1
    flash_latency: int = 3
    voltage_scale: int = 2

    def __post_init__(self) -> None:
        if self.source_hz <= 0:
            raise ClockConfigError("clock source frequency must be positive")
        for name in ("ahb_divider", "apb1_divider", "apb2_divider"):
            if getattr(self, name) <= 0:
                raise ClockConfigError(f"{name} must be positive")
        if self.flash_latency < 0:
            raise ClockConfigError("flash latency must not be negative")

    @property
    def sysclk(self) -> int:
        return self.pll.sysclk(self.source_hz)

    def hclk(self) -> int:
        return self.sysclk // self.ahb_divider

    def pclk1(self) -> int:
        return self.hclk() // self.apb1_divider

    def pclk2(self) -> int:
        return self.hclk() // self.apb2_divider


def default_clock_config() -> ClockConfig:
    """PLL fed by the internal oscillator, 100 MHz system clock."""
    return ClockConfig()


class SystemCore:
    """Core clock variable and start-up settings of the processor."""

    def __init__(self, xtal_hz: int = DEFAULT_XTAL_HZ) -> None:
        if xtal_hz <= 0:
            raise ClockConfigError("oscillator frequency must be positive")
        self.xtal_hz = xtal_hz
        self.system_clock = xtal_hz // 2
        self.core_clock = self.system_clock
        self.cpacr = 0

    def init(self) -> None:
        """Enable full access to the floating-point unit and set the core clock."""
        self.cpacr |= CPACR_FPU_FULL_ACCESS
        self.core_clock = self.system_clock

    def update_core_clock(self) -> None:
        self.core_clock = self.system_clock