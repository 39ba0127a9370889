"""Zone heat difficulty meter."""
from __future__ import annotations

from dataclasses import dataclass

HEAT_MIN = 0
HEAT_MAX = 100


@dataclass(slots=True)
class ZoneHeat:
    """Risk/reward scalar kept in [0, 100]."""

    value: int = 0

    def __post_init__(self) -> None:
        self.value = self._clamp(self.value)

    def increase(self, amount: int) -> int:
        self.value = self._clamp(self.value + max(0, amount))
        return self.value

    def decay(self, amount: int = 1) -> int:
        self.value = self._clamp(self.value - max(0, amount))
        return self.value

    def reset(self) -> None:
        self.value = HEAT_MIN

    @property
    def fraction(self) -> float:
        return self.value / HEAT_MAX

    @staticmethod
    def _clamp(value: int) -> int:
        return max(HEAT_MIN, min(HEAT_MAX, int(value)))
