"""Extraction dataclasses — usage events produced by scanning source text."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from pinguard.peripherals.models import PeripheralKind


@dataclass(frozen=True)
class Unresolved:
    """A bare identifier with no literal binding in the file.

    Method parameters and values computed at run time end up here, so
    ``def make_led(p); GPIO.new(p); end`` yields ``Unresolved("p")``
    instead of the text ``"p"``.
    """

    name: str

    def __str__(self) -> str:
        return self.name


def _as_int(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


@dataclass(frozen=True)
class UsageEvent:
    """One peripheral construction found in source (``ADC.new("A0")``)."""

    kind: PeripheralKind
    source_id: str
    line: int
    variable: str | None = None         # name the instance is bound to
    positional: tuple = ()
    named: dict[str, Any] = field(default_factory=dict)
    raw: str = ""                       # statement text as written

    def arg(self, index: int | None, name: str | None) -> Any:
        """Positional argument ``index`` if present, else named argument ``name``."""
        if index is not None and index < len(self.positional):
            return self.positional[index]
        if name is not None:
            return self.named.get(name)
        return None

    @property
    def unit_argument(self) -> Any:
        """The unit as written: ``unit:`` or a UART's leading integer. None when absent."""
        if self.named.get("unit") is not None:
            return self.named["unit"]
        if self.kind is PeripheralKind.UART and self.positional:
            if _as_int(self.positional[0]) is not None:
                return self.positional[0]
        return None

    @property
    def unit(self) -> int | None:
        """Unit number; numeric strings count, anything else is None."""
        return _as_int(self.unit_argument)

    @property
    def interrupt_priority(self) -> int | None:
        for key in ("interrupt_priority", "priority"):
            value = _as_int(self.named.get(key))
            if value is not None:
                return value
        return None


@dataclass(frozen=True)
class MethodCall:
    """A method call on a variable known to hold a peripheral (``adc.read``)."""

    kind: PeripheralKind
    variable: str
    method: str
    source_id: str
    line: int


@dataclass
class Extraction:
    """Everything the extractor found in one source."""

    source_id: str
    events: list[UsageEvent] = field(default_factory=list)
    method_calls: list[MethodCall] = field(default_factory=list)
    bindings: dict[str, str] = field(default_factory=dict)   # variable -> raw value
    peripheral_variables: dict[str, PeripheralKind] = field(default_factory=dict)

    def instance_counts(self) -> Counter:
        """Constructions per kind."""
        return Counter(e.kind for e in self.events)

    def usage_counts(self) -> Counter:
        """Constructions plus attributed method calls per kind."""
        counts = self.instance_counts()
        counts.update(c.kind for c in self.method_calls)
        return counts
