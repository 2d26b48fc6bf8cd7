"""Pin dataclasses — physical pin identity on the target microcontroller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pinguard.errors import PinOutOfRange


class Port(str, Enum):
    A = "A"
    B = "B"

    @property
    def number(self) -> int:
        """Numeric port id used by the firmware (A = 1, B = 2)."""
        return 1 if self is Port.A else 2


# Number of physical pins per port (RA0-RA4, RB0-RB15)
PORT_SIZES: dict[Port, int] = {Port.A: 5, Port.B: 16}

# Flattened 0-20 numbering: 0-4 -> Port A, 5-20 -> Port B (pin = n - 5)
FLAT_PORT_B_OFFSET = PORT_SIZES[Port.A]
FLAT_PIN_COUNT = PORT_SIZES[Port.A] + PORT_SIZES[Port.B]


def port_range_text(port: Port) -> str:
    return f"{port.value}(0-{PORT_SIZES[port] - 1})"


@dataclass(frozen=True, order=True)
class Pin:
    """A physical I/O pin: port letter + bit number."""

    port: Port
    number: int

    def __post_init__(self) -> None:
        if not 0 <= self.number < PORT_SIZES[self.port]:
            raise PinOutOfRange(
                (self.port.value, self.number),
                f"Invalid pin {self.port.value}{self.number}: Port {self.port.value} "
                f"only has pins 0-{PORT_SIZES[self.port] - 1}",
            )

    def __str__(self) -> str:
        return f"{self.port.value}{self.number}"

    @property
    def flat_index(self) -> int:
        """Position in the flattened 0-20 numbering scheme."""
        if self.port is Port.A:
            return self.number
        return self.number + FLAT_PORT_B_OFFSET
