"""Usage extractor — scan source text for peripheral constructions.

Recognised shapes (any of the six kinds):

  ADC.new("A0")
  led = GPIO.new(pin: "B7", mode: "output")
  @bus = I2C.new(sda_pin: sda, scl_pin: "B3")   # sda bound earlier
  uart = UART.new(unit: 2)

Simple bindings ``name = <value>`` are remembered so a later constructor
argument naming that variable gets the bound value.  Variables bound to
a peripheral instance are tracked so later ``var.method`` calls can be
attributed to the peripheral kind.

``extract`` never raises on malformed text — anything it cannot make
sense of is skipped.
"""

from __future__ import annotations

import logging
import re

from pinguard.peripherals.models import PeripheralKind

from .models import Extraction, MethodCall, UsageEvent
from .parsing import (
    find_closing, iter_statements, mask_strings, parse_arguments,
)


log = logging.getLogger(__name__)


KIND_NAMES = "|".join(k.value for k in PeripheralKind)

CONSTRUCTOR_RE = re.compile(
    r"(?:(@{0,2}[A-Za-z_]\w*)\s*=\s*)?\b(" + KIND_NAMES + r")\.new\b"
)
ASSIGNMENT_RE = re.compile(r"^(@{0,2}[A-Za-z_]\w*)\s*=(?![=~>])\s*(.+)$")
METHOD_CALL_RE = re.compile(r"(@{0,2}[A-Za-z_]\w*)\.([A-Za-z_]\w*[?!]?)")


class UsageExtractor:
    """Stateful scanner for one source; use ``extract()`` for the one-shot form."""

    def __init__(self, source_id: str = "<string>"):
        self.result = Extraction(source_id=source_id)

    @property
    def source_id(self) -> str:
        return self.result.source_id

    def feed(self, text: str) -> Extraction:
        for line_no, stmt in iter_statements(text):
            self._scan_statement(line_no, stmt)
        return self.result

    # ── Per statement ──────────────────────────────────────────────

    def _scan_statement(self, line_no: int, stmt: str) -> None:
        masked = mask_strings(stmt)
        bound = self._scan_constructors(line_no, stmt, masked)
        self._scan_method_calls(line_no, masked)
        self._record_assignment(stmt, bound)

    def _scan_constructors(self, line_no: int, stmt: str, masked: str) -> set[str]:
        """Emit a UsageEvent per constructor; return the variables bound here."""
        bound: set[str] = set()
        for m in CONSTRUCTOR_RE.finditer(masked):
            variable, kind_name = m.group(1), m.group(2)
            kind = PeripheralKind(kind_name)
            args_text = self._argument_text(stmt, masked, m.end())
            if args_text is None:
                continue
            positional, named = parse_arguments(args_text, self.result.bindings)
            event = UsageEvent(
                kind=kind,
                source_id=self.source_id,
                line=line_no,
                variable=variable,
                positional=positional,
                named=named,
                raw=stmt,
            )
            self.result.events.append(event)
            log.debug("%s:%d: %s.new %r %r", self.source_id, line_no, kind.value, positional, named)
            if variable:
                self.result.peripheral_variables[variable] = kind
                bound.add(variable)
        return bound

    @staticmethod
    def _argument_text(stmt: str, masked: str, pos: int) -> str | None:
        """Text between the constructor's parentheses (or the rest of the line).

        Returns None when the parentheses never close.
        """
        rest = masked[pos:]
        stripped = rest.lstrip()
        if stripped.startswith("("):
            open_index = pos + (len(rest) - len(stripped))
            close_index = find_closing(stmt, open_index)
            if close_index is None:
                return None
            return stmt[open_index + 1:close_index]
        # Paren-less call: ``GPIO.new "B7", mode: :output``
        if stripped and not stripped.startswith((".", ")", "]", "}", "do", "{")):
            return stmt[pos:].strip()
        return ""

    def _scan_method_calls(self, line_no: int, masked: str) -> None:
        for m in METHOD_CALL_RE.finditer(masked):
            variable, method = m.group(1), m.group(2)
            kind = self.result.peripheral_variables.get(variable)
            if kind is None or method == "new":
                continue
            self.result.method_calls.append(MethodCall(
                kind=kind,
                variable=variable,
                method=method,
                source_id=self.source_id,
                line=line_no,
            ))

    def _record_assignment(self, stmt: str, bound: set[str]) -> None:
        m = ASSIGNMENT_RE.match(stmt)
        if not m:
            return
        name, value = m.group(1), m.group(2).strip()
        self.result.bindings[name] = value
        if name not in bound:
            # re-bound to something that isn't a peripheral
            self.result.peripheral_variables.pop(name, None)


def extract(source_text: str, source_id: str = "<string>") -> Extraction:
    """Scan ``source_text`` and return its usage events and method calls."""
    extraction = UsageExtractor(source_id).feed(source_text)
    log.debug(
        "%s: %d peripheral constructions, %d method calls",
        source_id, len(extraction.events), len(extraction.method_calls),
    )
    return extraction
