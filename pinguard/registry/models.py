"""Registry dataclasses — accepted pin claims and the per-file result."""

from __future__ import annotations

from dataclasses import dataclass, field

from pinguard.errors import Issue
from pinguard.peripherals.models import PeripheralKind
from pinguard.pins import Pin


@dataclass(frozen=True)
class AllocationRecord:
    """One pin successfully claimed by a peripheral."""

    pin: Pin
    kind: PeripheralKind
    source_id: str
    line: int
    function: str | None = None     # role as requested, "SDA" / "TXD" / "MOSI"
    variable: str | None = None
    info: str = ""                  # validator description, " (ADC Channel 0, AN0)"
    unit: int | None = None
    hardware_function: str | None = None    # role in the pin table, "TX" / "SDO"


@dataclass
class AllocationResult:
    """Everything one registry accepted and rejected."""

    accepted: list[AllocationRecord] = field(default_factory=list)
    errors: list[Issue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    pin_map: dict[Pin, AllocationRecord] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0
