"""Peripheral validators — one per kind, each wrapping a fixed capability table.

All validators share one contract:

  supports(pin)                -> bool
  validate(pin, line, role)    -> PinValidation (ok + info + warnings | error)

GPIO's table spans every physical pin, so it only rejects pins outside
the physical range.  Every other table is sparse: absence from the table
is the rejection reason and the error lists the valid pins.

Role names used by source code (MOSI, TXD, ...) are mapped to the
hardware role names in the tables (SDO, TX, ...) before matching.
"""

from __future__ import annotations

from collections.abc import Iterable

from pinguard.pins import Pin, to_display_string
from pinguard.pins.models import Port, port_range_text

from .models import CapabilityEntry, PeripheralKind, PinValidation
from .tables import (
    CapabilityTable,
    ADC_TABLE, PWM_TABLE, GPIO_TABLE, I2C_TABLE, SPI_TABLE, UART_TABLE,
    SPI_DEFAULT_PINS, UART_DEFAULT_PINS, UART_BAUD_RATES,
)


class PeripheralValidator:
    """Base validator: table lookup, role matching, advisory warnings."""

    kind: PeripheralKind
    # source-level role name -> table function name
    role_aliases: dict[str, str] = {}

    def __init__(self, table: CapabilityTable):
        self._table = table

    # ── Queries ────────────────────────────────────────────────────

    def supports(self, pin: Pin) -> bool:
        return pin in self._table

    def entries(self, pin: Pin) -> tuple[CapabilityEntry, ...]:
        return self._table.get(pin, ())

    def valid_pins(self) -> list[Pin]:
        return sorted(self._table)

    def valid_pins_text(self) -> str:
        return ", ".join(to_display_string(p) for p in self.valid_pins())

    def describe(self, pin: Pin) -> str:
        """Hardware info suffix for reports, e.g. " (ADC Channel 4, AN4)"."""
        entries = self.entries(pin)
        if not entries:
            return ""
        if len(entries) > 1:
            roles = "/".join(e.function or "?" for e in entries)
            return f" ({self.kind.value} Multi-function: {roles})"
        return self._describe_entry(entries[0])

    def _describe_entry(self, entry: CapabilityEntry) -> str:
        return ""

    # ── Validation ─────────────────────────────────────────────────

    def canonical_role(self, role: str | None) -> str | None:
        if role is None:
            return None
        role = role.upper()
        return self.role_aliases.get(role, role)

    def validate(self, pin: Pin, line: int, role: str | None = None) -> PinValidation:
        entries = self.entries(pin)
        if not entries:
            return PinValidation(
                ok=False,
                error=(
                    f"Line {line}: Pin {to_display_string(pin)} cannot be used for "
                    f"{self.kind.value}. Valid pins: {self.valid_pins_text()}"
                ),
            )

        wanted = self.canonical_role(role)
        if wanted is not None:
            matching = [e for e in entries if e.function is None or e.function == wanted]
            if not matching:
                provided = "/".join(sorted({e.function for e in entries if e.function}))
                return PinValidation(
                    ok=False,
                    error=(
                        f"Line {line}: Pin {to_display_string(pin)} cannot be used as "
                        f"{self.kind.value} {role.upper()} (provides {provided})"
                    ),
                )
        else:
            matching = list(entries)

        entry = matching[0]
        warnings: list[str] = []
        if len(matching) > 1:
            roles = "/".join(e.function or "?" for e in matching)
            warnings.append(
                f"Line {line}: Multi-function pin {to_display_string(pin)} - "
                f"specify intended use ({roles})"
            )
        warnings.extend(self._advisories(pin, entry, line))

        info = self._describe_entry(entry) if len(matching) == 1 else self.describe(pin)
        return PinValidation(ok=True, entry=entry, info=info, warnings=warnings)

    def _advisories(self, pin: Pin, entry: CapabilityEntry, line: int) -> list[str]:
        return []


class ADCValidator(PeripheralValidator):
    kind = PeripheralKind.ADC

    def __init__(self, table: CapabilityTable = ADC_TABLE):
        super().__init__(table)

    def _describe_entry(self, entry: CapabilityEntry) -> str:
        return f" (ADC Channel {entry.channel}, {entry.name})"

    def channels(self) -> list[int]:
        return sorted(e.channel for es in self._table.values() for e in es)

    def pin_for_channel(self, channel: int) -> Pin | None:
        for pin, entries in self._table.items():
            if any(e.channel == channel for e in entries):
                return pin
        return None


class PWMValidator(PeripheralValidator):
    kind = PeripheralKind.PWM

    def __init__(self, table: CapabilityTable = PWM_TABLE):
        super().__init__(table)

    def _describe_entry(self, entry: CapabilityEntry) -> str:
        return f" ({entry.group} Unit {entry.unit_label})"

    def units(self) -> list[int]:
        return sorted({u for es in self._table.values() for e in es for u in e.units})

    def pins_for_unit(self, unit: int) -> list[Pin]:
        return sorted(
            pin for pin, es in self._table.items()
            if any(unit in e.units for e in es)
        )


class GPIOValidator(PeripheralValidator):
    kind = PeripheralKind.GPIO

    def __init__(self, table: CapabilityTable = GPIO_TABLE):
        super().__init__(table)

    def validate(self, pin: Pin, line: int, role: str | None = None) -> PinValidation:
        if not self.supports(pin):
            return PinValidation(
                ok=False,
                error=(
                    f"Line {line}: Invalid pin {to_display_string(pin)}. Valid ports: "
                    f"{port_range_text(Port.A)}, {port_range_text(Port.B)}"
                ),
            )
        return PinValidation(ok=True, entry=self.entries(pin)[0])

    def pins_for_port(self, port: Port) -> list[Pin]:
        return [p for p in self.valid_pins() if p.port is port]


class I2CValidator(PeripheralValidator):
    kind = PeripheralKind.I2C

    def __init__(self, table: CapabilityTable = I2C_TABLE):
        super().__init__(table)

    def _describe_entry(self, entry: CapabilityEntry) -> str:
        return f" ({entry.module} {entry.function}, {entry.register})"

    def pin_for_function(self, function: str) -> Pin | None:
        function = function.upper()
        for pin, entries in self._table.items():
            if any(e.function == function for e in entries):
                return pin
        return None

    def _advisories(self, pin: Pin, entry: CapabilityEntry, line: int) -> list[str]:
        scl = self.pin_for_function("SCL")
        sda = self.pin_for_function("SDA")
        return [
            f"Line {line}: I2C requires both SCL ({scl}) and SDA ({sda}) pins "
            f"for proper operation",
            f"Line {line}: {entry.module} module operates at 100kHz only",
        ]


class SPIValidator(PeripheralValidator):
    kind = PeripheralKind.SPI
    role_aliases = {"MOSI": "SDO", "MISO": "SDI"}

    def __init__(self, table: CapabilityTable = SPI_TABLE):
        super().__init__(table)

    def _describe_entry(self, entry: CapabilityEntry) -> str:
        return f" (SPI{entry.unit_label} {entry.function}, {entry.register})"

    def units(self) -> list[int]:
        return sorted(SPI_DEFAULT_PINS)

    def default_pins(self, unit: int) -> dict[str, Pin] | None:
        """SCK/MOSI/MISO pins for a unit: role name -> pin."""
        pins = SPI_DEFAULT_PINS.get(unit)
        if pins is None:
            return None
        return {"SCK": pins["SCK"], "MOSI": pins["SDO"], "MISO": pins["SDI"]}

    def _advisories(self, pin: Pin, entry: CapabilityEntry, line: int) -> list[str]:
        warnings = []
        if entry.function in ("SDI", "SDO"):
            warnings.append(
                f"Line {line}: SPI{entry.unit_label} requires SDI, SDO, and SCK pins "
                f"for complete setup"
            )
        elif entry.function == "SCK":
            warnings.append(
                f"Line {line}: SCK pin is fixed for SPI{entry.unit_label} "
                f"(cannot be changed)"
            )
        warnings.append(f"Line {line}: SPI frequency range: 9.77kHz - 5MHz only")
        return warnings


class UARTValidator(PeripheralValidator):
    kind = PeripheralKind.UART
    role_aliases = {"TXD": "TX", "RXD": "RX"}

    def __init__(self, table: CapabilityTable = UART_TABLE,
                 default_pins: dict[int, tuple[Pin, Pin]] = UART_DEFAULT_PINS):
        super().__init__(table)
        self._default_pins = default_pins

    def _describe_entry(self, entry: CapabilityEntry) -> str:
        return f" (UART{entry.unit_label} {entry.function}, {entry.register})"

    def units(self) -> list[int]:
        return sorted(self._default_pins)

    def default_pins(self, unit: int) -> tuple[Pin, Pin] | None:
        """(TX, RX) pins for a unit, or None for an unknown unit."""
        return self._default_pins.get(unit)

    def validate_for_unit(self, pin: Pin, line: int, role: str | None, unit: int | None) -> PinValidation:
        """validate() plus a warning when the pin belongs to another unit."""
        result = self.validate(pin, line, role)
        if result.ok and unit is not None and result.entry and unit not in result.entry.units:
            result.warnings.append(
                f"Line {line}: Pin {to_display_string(pin)} is a UART"
                f"{result.entry.unit_label} {result.entry.function} pin, "
                f"but UART{unit} was requested"
            )
        return result

    def _advisories(self, pin: Pin, entry: CapabilityEntry, line: int) -> list[str]:
        unit = entry.unit_label
        warnings = []
        if entry.function == "RX":
            warnings.append(
                f"Line {line}: UART{unit} requires both TX and RX pins for full "
                f"duplex communication"
            )
            warnings.append(f"Line {line}: UART{unit} RX pin - multiple options available")
        elif entry.function == "TX" and entry.remappable:
            warnings.append(
                f"Line {line}: UART{unit} TX pin - default assignment (remappable on PIC32)"
            )
        rates = ", ".join(str(r) for r in UART_BAUD_RATES)
        warnings.append(f"Line {line}: UART supports standard baud rates ({rates})")
        for u in entry.units:
            defaults = self.default_pins(u)
            if defaults:
                tx, rx = defaults
                warnings.append(f"Line {line}: UART{u} defaults: TX={tx}, RX={rx}")
        return warnings

    def check_complete_setup(self, records: Iterable) -> list[str]:
        """Warn for a unit that has a TX pin but no RX pin, or the reverse.

        ``records`` are allocation records (anything with ``pin`` and ``kind``).
        """
        records = list(records)
        warnings = []
        for unit in self.units():
            roles: set[str] = set()
            for rec in records:
                if rec.kind is not PeripheralKind.UART:
                    continue
                for entry in self.entries(rec.pin):
                    if unit in entry.units and entry.function:
                        roles.add(entry.function)
            if "TX" in roles and "RX" not in roles:
                warnings.append(
                    f"UART{unit} has TX pin but no RX pin - receive capability disabled"
                )
            elif "RX" in roles and "TX" not in roles:
                warnings.append(
                    f"UART{unit} has RX pin but no TX pin - transmit capability disabled"
                )
        return warnings


def build_validators() -> dict[PeripheralKind, PeripheralValidator]:
    """One validator per peripheral kind (closed set)."""
    return {
        PeripheralKind.ADC: ADCValidator(),
        PeripheralKind.PWM: PWMValidator(),
        PeripheralKind.GPIO: GPIOValidator(),
        PeripheralKind.I2C: I2CValidator(),
        PeripheralKind.SPI: SPIValidator(),
        PeripheralKind.UART: UARTValidator(),
    }


# Shared, read-only after construction
VALIDATORS: dict[PeripheralKind, PeripheralValidator] = build_validators()


def get_validator(kind: PeripheralKind | str) -> PeripheralValidator:
    return VALIDATORS[PeripheralKind.parse(kind)]
