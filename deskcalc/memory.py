"""Memory register for deskcalc."""

from dataclasses import dataclass


@dataclass
class MemoryRegister:
    """Single numeric accumulator (MC / MR / M+ / M-)."""

    value: float = 0.0

    def clear(self) -> None:
        self.value = 0.0

    def recall(self) -> float:
        return self.value

    def add(self, amount: float) -> None:
        self.value += amount

    def subtract(self, amount: float) -> None:
        self.value -= amount

    @property
    def indicator(self) -> str:
        """"M" while the register holds a non-zero value."""
        return "M" if self.value != 0 else ""
