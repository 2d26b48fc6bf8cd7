"""Lexical helpers for the usage extractor.

Not a parser: these helpers only track bracket depth and quoting, which
is enough to find argument lists, split them on top-level commas and
turn literal argument text into Python values.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from .models import Unresolved

_OPEN = "([{"
_CLOSE = ")]}"
_QUOTES = "\"'"

# A statement is continued on the next line while brackets are open,
# but never for more than this many physical lines.
MAX_CONTINUATION_LINES = 20

INT_RE = re.compile(r"^[+-]?\d+$")
HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
FLOAT_RE = re.compile(r"^[+-]?\d+\.\d+$")
IDENT_RE = re.compile(r"^@{0,2}[A-Za-z_]\w*$")
SYMBOL_RE = re.compile(r"^:([A-Za-z_]\w*)$")
NAMED_ARG_RE = re.compile(r"^([A-Za-z_]\w*):\s+(.*)$|^([A-Za-z_]\w*):(?!:)(.*)$", re.S)
ROCKET_ARG_RE = re.compile(r"^:?([A-Za-z_]\w*)\s*=>\s*(.*)$", re.S)

_LITERALS = {"true": True, "false": False, "nil": None}


def _scan(text: str) -> Iterator[tuple[int, str, int, bool]]:
    """Yield (index, char, depth, in_quotes) for every character."""
    depth = 0
    quote: str | None = None
    escaped = False
    for i, ch in enumerate(text):
        if quote:
            yield i, ch, depth, True
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in _QUOTES:
            quote = ch
            yield i, ch, depth, True
            continue
        if ch in _OPEN:
            depth += 1
        elif ch in _CLOSE:
            depth -= 1
        yield i, ch, depth, False


def bracket_depth(text: str) -> int:
    """Net open-bracket count at the end of ``text`` (quotes respected)."""
    depth = 0
    for _, _, depth, _ in _scan(text):
        pass
    return depth


def strip_comment(line: str) -> str:
    """Remove a trailing ``# comment`` that is outside quotes."""
    for i, ch, _, in_quotes in _scan(line):
        if ch == "#" and not in_quotes:
            return line[:i].rstrip()
    return line


def mask_strings(line: str) -> str:
    """Blank out quoted text (same length) so regexes don't match inside it."""
    out = []
    for _, ch, _, in_quotes in _scan(line):
        out.append(" " if in_quotes and ch not in _QUOTES else ch)
    return "".join(out)


def find_closing(text: str, open_index: int) -> int | None:
    """Index of the bracket closing the one at ``open_index``, or None."""
    target = 0
    for i, ch, depth, in_quotes in _scan(text):
        if i == open_index:
            target = depth - 1
        elif i > open_index and not in_quotes and ch in _CLOSE and depth == target:
            return i
    return None


def split_arguments(text: str) -> list[str]:
    """Split on commas that are at bracket depth 0 and outside quotes."""
    if text is None or not text.strip():
        return []
    parts: list[str] = []
    start = 0
    for i, ch, depth, in_quotes in _scan(text):
        if ch == "," and depth == 0 and not in_quotes:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return [p.strip() for p in parts if p.strip()]


def parse_value(text: str, bindings: Mapping[str, str] | None = None) -> Any:
    """Convert literal argument text to a Python value.

    Identifiers bound in ``bindings`` are replaced by their parsed value
    (one level only); other bare identifiers become ``Unresolved`` and
    anything else unrecognised is returned as its raw text.
    """
    text = text.strip()
    if INT_RE.match(text):
        return int(text)
    if HEX_RE.match(text):
        return int(text, 16)
    if FLOAT_RE.match(text):
        return float(text)
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
        return text[1:-1]
    if text.startswith("[") and text.endswith("]"):
        return [parse_value(e, bindings) for e in split_arguments(text[1:-1])]
    m = SYMBOL_RE.match(text)
    if m:
        return m.group(1)
    if text in _LITERALS:
        return _LITERALS[text]
    if IDENT_RE.match(text):
        if bindings and text in bindings:
            return parse_value(bindings[text])
        return Unresolved(text)
    return text


def parse_arguments(
    text: str, bindings: Mapping[str, str] | None = None,
) -> tuple[tuple, dict[str, Any]]:
    """Split an argument list into (positional, named)."""
    positional: list[Any] = []
    named: dict[str, Any] = {}
    for part in split_arguments(text):
        m = ROCKET_ARG_RE.match(part) or NAMED_ARG_RE.match(part)
        if m:
            groups = [g for g in m.groups() if g is not None]
            key, value = groups[0], groups[1]
            named[key] = parse_value(value, bindings)
        else:
            positional.append(parse_value(part, bindings))
    return tuple(positional), named


def iter_statements(text: str) -> Iterator[tuple[int, str]]:
    """Yield (first_line_number, statement) pairs.

    Blank lines and comment lines are skipped, trailing comments removed,
    and a line whose brackets are still open is joined with the following
    lines until they close.
    """
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        line_no = i + 1
        stmt = strip_comment(lines[i].strip())
        i += 1
        if not stmt:
            continue
        joined = 0
        while bracket_depth(stmt) > 0 and i < len(lines) and joined < MAX_CONTINUATION_LINES:
            stmt = stmt + " " + strip_comment(lines[i].strip())
            i += 1
            joined += 1
        yield line_no, stmt
