"""Peripheral dataclasses — kinds, capability entries, validation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pinguard.errors import UnknownPeripheralKind


class PeripheralKind(str, Enum):
    ADC = "ADC"
    PWM = "PWM"
    GPIO = "GPIO"
    I2C = "I2C"
    SPI = "SPI"
    UART = "UART"

    @classmethod
    def parse(cls, name: "str | PeripheralKind") -> "PeripheralKind":
        """Case-insensitive lookup. Raises UnknownPeripheralKind."""
        if isinstance(name, PeripheralKind):
            return name
        try:
            return cls(str(name).strip().upper())
        except ValueError:
            raise UnknownPeripheralKind(name, [k.value for k in cls]) from None


@dataclass(frozen=True)
class CapabilityEntry:
    """What one pin can do for one peripheral (a row of a capability table)."""

    register: str                       # "RB2", "RPB3"
    function: str | None = None         # SDA | SCL | SDI | SDO | SCK | TX | RX
    channel: int | None = None          # ADC channel number
    name: str | None = None             # "AN4"
    group: str | None = None            # PWM output-compare group, "OC1"
    units: tuple[int, ...] = ()         # hardware units this entry belongs to
    module: str | None = None           # "I2C2"
    remappable: bool = False            # UART TX defaults can be remapped

    @property
    def unit_label(self) -> str:
        return "/".join(str(u) for u in self.units)


@dataclass
class PinValidation:
    """Outcome of ``PeripheralValidator.validate``."""

    ok: bool
    entry: CapabilityEntry | None = None
    info: str = ""
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
