"""Allocation registry — turn usage events into an exclusive pin map.

Per requested pin, in order:
  0. skip a pin that is not a literal  (warning only)
  1. normalize the literal            (INVALID_PIN_FORMAT / PIN_OUT_OF_RANGE)
  2. reject a pin already claimed     (DUPLICATE_PIN_CLAIM)
  3. ask the kind's validator         (UNSUPPORTED_PERIPHERAL_FOR_PIN)
  4. record the claim and keep the validator's advisory warnings

Every failure is recorded as an Issue and processing continues.  A
peripheral that needs several pins commits each one on its own, so an
I2C bus whose SDA pin is taken still records its SCL pin.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pinguard.errors import Issue, IssueKind, InvalidPin, UnknownPeripheralKind
from pinguard.extract.models import Unresolved, UsageEvent
from pinguard.peripherals import (
    PeripheralKind, PeripheralValidator, UARTValidator, VALIDATORS,
)
from pinguard.pins import Pin, normalize, to_display_string

from .models import AllocationRecord, AllocationResult


log = logging.getLogger(__name__)


# kind -> ((role, keyword argument, positional index), ...)
PIN_ROLES: dict[PeripheralKind, tuple[tuple[str | None, str, int | None], ...]] = {
    PeripheralKind.ADC: ((None, "pin", 0),),
    PeripheralKind.PWM: ((None, "pin", 0),),
    PeripheralKind.GPIO: ((None, "pin", 0),),
    PeripheralKind.I2C: (("SDA", "sda_pin", 0), ("SCL", "scl_pin", 1)),
    PeripheralKind.SPI: (
        ("SCK", "sck_pin", 0), ("MOSI", "mosi_pin", 1), ("MISO", "miso_pin", 2),
    ),
    PeripheralKind.UART: (("TXD", "txd_pin", None), ("RXD", "rxd_pin", None)),
}

DEFAULT_UART_UNIT = 1


class AllocationRegistry:
    """Pin map for one analysis unit (normally one source file)."""

    def __init__(self, validators: Mapping[PeripheralKind, PeripheralValidator] | None = None):
        self.validators = validators if validators is not None else VALIDATORS
        self.reset()

    def reset(self) -> None:
        self.pin_map: dict[Pin, AllocationRecord] = {}
        self.accepted: list[AllocationRecord] = []
        self.errors: list[Issue] = []
        self.warnings: list[str] = []

    # ── Events ─────────────────────────────────────────────────────

    def process(self, events: Iterable[UsageEvent]) -> AllocationResult:
        for event in events:
            self.process_event(event)
        return self.result()

    def process_event(self, event: UsageEvent) -> None:
        if event.kind is PeripheralKind.UART:
            self._process_uart(event)
            return
        if event.kind is PeripheralKind.SPI and not event.positional and not any(
            key in event.named for _, key, _ in PIN_ROLES[PeripheralKind.SPI]
        ):
            self._process_spi_defaults(event)
            return

        for role, key, index in PIN_ROLES[event.kind]:
            value = event.arg(index, key)
            if value is None:
                self._missing_pin(event, role)
                continue
            self.claim(
                value, event.kind, event.source_id, event.line,
                function=role, variable=event.variable, unit=event.unit,
            )

    def _process_spi_defaults(self, event: UsageEvent) -> None:
        """``SPI.new`` / ``SPI.new(unit: 2)`` uses the unit's fixed pins."""
        unit = self._event_unit(event, default=1)
        if unit is None:
            return
        defaults = self.validators[PeripheralKind.SPI].default_pins(unit)
        if defaults is None:
            self._error(
                IssueKind.UNKNOWN_PERIPHERAL_KIND,
                f"Invalid SPI unit: {unit}", event.source_id, event.line,
            )
            return
        for role in ("SCK", "MOSI", "MISO"):
            self.claim(
                defaults[role], PeripheralKind.SPI, event.source_id, event.line,
                function=role, variable=event.variable, unit=unit,
            )

    def _process_uart(self, event: UsageEvent) -> None:
        txd = event.named.get("txd_pin")
        rxd = event.named.get("rxd_pin")

        # UART.new("B4") names a single pin rather than a unit
        if txd is None and rxd is None and event.positional and event.unit_argument is None:
            self.claim(
                event.positional[0], PeripheralKind.UART, event.source_id, event.line,
                variable=event.variable,
            )
            return

        unit = self._event_unit(event, default=DEFAULT_UART_UNIT)
        if txd is None and rxd is None:
            if unit is None:
                return
            defaults = self.validators[PeripheralKind.UART].default_pins(unit)
            if defaults is None:
                self._error(
                    IssueKind.UNKNOWN_PERIPHERAL_KIND,
                    f"Invalid UART unit: {unit}", event.source_id, event.line,
                )
                return
            txd, rxd = defaults
            log.debug("%s:%d: UART%d default pins TX=%s RX=%s",
                      event.source_id, event.line, unit, txd, rxd)

        for role, value in (("TXD", txd), ("RXD", rxd)):
            if value is None:
                self._missing_pin(event, role)
                continue
            self.claim(
                value, PeripheralKind.UART, event.source_id, event.line,
                function=role, variable=event.variable, unit=unit,
            )

    def _event_unit(self, event: UsageEvent, default: int) -> int | None:
        """Unit number for ``event``; ``default`` when no unit is given.

        None (with the reason recorded) when a unit is given but is not a
        number.
        """
        raw = event.unit_argument
        if raw is None:
            return default
        if event.unit is not None:
            return event.unit
        if isinstance(raw, Unresolved):
            self.warnings.append(
                f"{event.source_id}:{event.line}: {event.kind.value}.new unit {raw} "
                f"is not a literal - unit not checked"
            )
        else:
            self._error(
                IssueKind.UNKNOWN_PERIPHERAL_KIND,
                f"Invalid {event.kind.value} unit: {raw!r}", event.source_id, event.line,
            )
        return None

    def _missing_pin(self, event: UsageEvent, role: str | None) -> None:
        label = f"{role} pin" if role else "pin"
        self.warnings.append(
            f"{event.source_id}:{event.line}: {event.kind.value}.new has no "
            f"{label} argument - pin usage not checked"
        )

    # ── Claims ─────────────────────────────────────────────────────

    def claim(
        self,
        value: Any,
        kind: PeripheralKind | str,
        source_id: str,
        line: int,
        function: str | None = None,
        variable: str | None = None,
        unit: int | None = None,
    ) -> bool:
        """Claim one pin for ``kind``. Returns True when the claim was recorded."""
        try:
            kind = PeripheralKind.parse(kind)
        except UnknownPeripheralKind as exc:
            self._error(exc.issue_kind, str(exc), source_id, line)
            return False
        validator = self.validators.get(kind)
        if validator is None:
            self._error(
                IssueKind.UNKNOWN_PERIPHERAL_KIND,
                f"Unsupported peripheral: {kind.value}", source_id, line,
            )
            return False

        if _unresolved(value):
            self.warnings.append(
                f"{source_id}:{line}: {kind.value} pin {_display(value)} is not a "
                f"literal - pin usage not checked"
            )
            return False

        try:
            pin = normalize(value)
        except InvalidPin as exc:
            self._error(exc.issue_kind, str(exc), source_id, line)
            return False

        existing = self.pin_map.get(pin)
        if existing is not None:
            self._error(
                IssueKind.DUPLICATE_PIN_CLAIM,
                f"Pin {to_display_string(pin)} already used by {existing.kind.value} "
                f"({existing.source_id}:{existing.line})",
                source_id, line,
            )
            return False

        if isinstance(validator, UARTValidator):
            validation = validator.validate_for_unit(pin, line, function, unit)
        else:
            validation = validator.validate(pin, line, function)
        if not validation.ok:
            self.errors.append(Issue(
                kind=IssueKind.UNSUPPORTED_PERIPHERAL_FOR_PIN,
                message=f"{source_id}: {validation.error}",
                source_id=source_id,
                line=line,
            ))
            return False

        entry_function = validation.entry.function if validation.entry else None
        record = AllocationRecord(
            pin=pin,
            kind=kind,
            source_id=source_id,
            line=line,
            function=function or entry_function,
            hardware_function=entry_function or validator.canonical_role(function),
            variable=variable,
            info=validation.info,
            unit=unit,
        )
        self.pin_map[pin] = record
        self.accepted.append(record)
        self.warnings.extend(f"{source_id}: {w}" for w in validation.warnings)
        log.debug("%s:%d: %s -> %s%s", source_id, line, pin, kind.value, validation.info)
        return True

    def _error(self, kind: IssueKind, message: str, source_id: str, line: int) -> None:
        self.errors.append(Issue(
            kind=kind,
            message=f"{source_id}:{line}: {message}",
            source_id=source_id,
            line=line,
        ))

    # ── Result ─────────────────────────────────────────────────────

    def result(self) -> AllocationResult:
        """Snapshot of the registry, with the UART complete-setup warnings added."""
        warnings = list(self.warnings)
        uart = self.validators.get(PeripheralKind.UART)
        if isinstance(uart, UARTValidator):
            warnings.extend(uart.check_complete_setup(self.accepted))
        return AllocationResult(
            accepted=list(self.accepted),
            errors=list(self.errors),
            warnings=warnings,
            pin_map=dict(self.pin_map),
        )


def _unresolved(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return any(isinstance(v, Unresolved) for v in value)
    return isinstance(value, Unresolved)


def _display(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(str(v) for v in value) + "]"
    return str(value)
