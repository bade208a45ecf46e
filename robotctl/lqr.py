"""LQR state-feedback controller with an integrator state."""

from __future__ import annotations

from typing import Sequence, Tuple

N_STATE = 5
N_MEASURED = 4

DEFAULT_GAIN: Tuple[float, ...] = (57.4827, 162.0246, 49.4904, 26.5967, 29.8511)
DEFAULT_INTEGRATOR_ROW: Tuple[float, ...] = (0.0050, 0.0, 0.0, 0.0, 1.0)


def _dot(row: Sequence[float], vector: Sequence[float]) -> float:
    return sum(a * b for a, b in zip(row, vector))


class LQRController:
    """Computes u = K x and advances the integrator z = Az x."""

    def __init__(
        self,
        gain: Sequence[float] = DEFAULT_GAIN,
        integrator_row: Sequence[float] = DEFAULT_INTEGRATOR_ROW,
    ) -> None:
        if len(gain) != N_STATE or len(integrator_row) != N_STATE:
            raise ValueError(f"gain and integrator row need {N_STATE} entries")
        self.gain = tuple(float(g) for g in gain)
        self.integrator_row = tuple(float(a) for a in integrator_row)
        self._x = [0.0] * N_STATE
        self._u = 0.0

    @property
    def states(self) -> Tuple[float, ...]:
        return tuple(self._x)

    def set_states(self, states: Sequence[float]) -> None:
        """Set the four measured states at once."""
        if len(states) != N_MEASURED:
            raise ValueError(f"expected {N_MEASURED} states")
        self._x[:N_MEASURED] = [float(s) for s in states]

    def set_state(self, index: int, value: float) -> None:
        """Set one measured state, index 0 to 3."""
        if not 0 <= index < N_MEASURED:
            raise IndexError(f"state index must be in 0..{N_MEASURED - 1}")
        self._x[index] = float(value)

    def update(self) -> None:
        self._u = _dot(self.gain, self._x)
        self._x[N_STATE - 1] = _dot(self.integrator_row, self._x)

    def control(self) -> float:
        return self._u