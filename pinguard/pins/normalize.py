"""Pin normalization — convert source-level pin values to ``Pin``.

Accepted shapes:
  - strings "A0", "b3", "RA1", "RB15" (leading R is the register alias)
  - integers 0-20 in the flattened scheme (0-4 -> A0-A4, 5-20 -> B0-B15)
  - (port, number) pairs with port 1 = A, 2 = B
  - an existing Pin
"""

from __future__ import annotations

import re
from typing import Any

from pinguard.errors import InvalidPinFormat, PinOutOfRange

from .models import (
    Pin, Port, PORT_SIZES, FLAT_PIN_COUNT, FLAT_PORT_B_OFFSET, port_range_text,
)


PIN_STRING_RE = re.compile(r"^R?([AB])(\d+)$", re.IGNORECASE)

_PORT_BY_NUMBER = {1: Port.A, 2: Port.B}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def normalize(value: Any) -> Pin:
    """Convert a pin value to a Pin. Raises InvalidPinFormat / PinOutOfRange."""
    if isinstance(value, Pin):
        return value
    if isinstance(value, str):
        return _normalize_string(value)
    if _is_int(value):
        return _normalize_number(value)
    if isinstance(value, (list, tuple)):
        return _normalize_pair(value)
    raise InvalidPinFormat(
        value,
        f"Invalid pin value: {value!r}. Use 'A0'-'A4', 'B0'-'B15', "
        f"a number 0-{FLAT_PIN_COUNT - 1} or a [port, pin] pair",
    )


def _normalize_string(value: str) -> Pin:
    m = PIN_STRING_RE.match(value.strip())
    if not m:
        raise InvalidPinFormat(
            value,
            f"Invalid pin string format: {value}. "
            f"Use format like 'A0', 'B3', 'RA1', 'RB15'",
        )
    port = Port(m.group(1).upper())
    number = int(m.group(2))
    if number >= PORT_SIZES[port]:
        raise PinOutOfRange(
            value,
            f"Invalid pin {value}: Port {port.value} only has pins "
            f"0-{PORT_SIZES[port] - 1}",
        )
    return Pin(port, number)


def _normalize_number(value: int) -> Pin:
    if 0 <= value < FLAT_PORT_B_OFFSET:
        return Pin(Port.A, value)
    if FLAT_PORT_B_OFFSET <= value < FLAT_PIN_COUNT:
        return Pin(Port.B, value - FLAT_PORT_B_OFFSET)
    raise PinOutOfRange(
        value, f"Invalid pin number: {value}. Valid range: 0-{FLAT_PIN_COUNT - 1}",
    )


def _normalize_pair(value: list | tuple) -> Pin:
    if len(value) != 2 or not all(_is_int(v) and v >= 0 for v in value):
        raise InvalidPinFormat(
            value,
            f"Invalid pin pair: {list(value)}. Expected [port, pin] with "
            f"non-negative integers",
        )
    port_num, number = value
    port = _PORT_BY_NUMBER.get(port_num)
    if port is None:
        raise PinOutOfRange(
            value,
            f"Invalid pin pair: {list(value)}. Port must be 1 (A) or 2 (B)",
        )
    if number >= PORT_SIZES[port]:
        raise PinOutOfRange(
            value,
            f"Invalid pin pair: {list(value)}. Valid ports: "
            f"{port_range_text(Port.A)}, {port_range_text(Port.B)}",
        )
    return Pin(port, number)


def to_display_string(pin: Pin) -> str:
    return f"{pin.port.value}{pin.number}"


def to_register_name(pin: Pin) -> str:
    return f"R{pin.port.value}{pin.number}"


def all_pins() -> list[Pin]:
    """Every physical pin, port A first."""
    return [Pin(port, n) for port in Port for n in range(PORT_SIZES[port])]
