"""Error taxonomy — exceptions raised at the seams and issues recorded by the analysis.

Exceptions are only raised where a single value is being converted
(pin normalization, peripheral-kind lookup, bytecode header).  Everything
above that level records an ``Issue`` and keeps going, so one bad line
never hides the findings of the rest of the file or project.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class IssueKind(str, Enum):
    INVALID_PIN_FORMAT = "invalid_pin_format"
    PIN_OUT_OF_RANGE = "pin_out_of_range"
    UNSUPPORTED_PERIPHERAL_FOR_PIN = "unsupported_peripheral_for_pin"
    UNKNOWN_PERIPHERAL_KIND = "unknown_peripheral_kind"
    DUPLICATE_PIN_CLAIM = "duplicate_pin_claim"
    CROSS_FILE_CONFLICT = "cross_file_conflict"
    FILE_NOT_FOUND = "file_not_found"
    MALFORMED_BYTECODE_HEADER = "malformed_bytecode_header"


@dataclass
class Issue:
    """One recorded error, tied to the source line that caused it."""
    kind: IssueKind
    message: str
    source_id: str = ""
    line: int | None = None

    def __str__(self) -> str:
        return self.message


# ── Exceptions ─────────────────────────────────────────────────────


class PinguardError(Exception):
    """Base class for all pinguard exceptions."""

    issue_kind: IssueKind | None = None


class InvalidPin(PinguardError, ValueError):
    """A pin value could not be turned into a physical pin."""

    def __init__(self, value: Any, message: str):
        super().__init__(message)
        self.value = value


class InvalidPinFormat(InvalidPin):
    issue_kind = IssueKind.INVALID_PIN_FORMAT


class PinOutOfRange(InvalidPin):
    issue_kind = IssueKind.PIN_OUT_OF_RANGE


class UnknownPeripheralKind(PinguardError, ValueError):
    issue_kind = IssueKind.UNKNOWN_PERIPHERAL_KIND

    def __init__(self, name: Any, supported: list[str]):
        super().__init__(
            f"Unknown peripheral: {name}. Supported: {', '.join(supported)}"
        )
        self.name = name


class MalformedBytecodeHeader(PinguardError):
    issue_kind = IssueKind.MALFORMED_BYTECODE_HEADER


class SourceNotFound(PinguardError, FileNotFoundError):
    issue_kind = IssueKind.FILE_NOT_FOUND
