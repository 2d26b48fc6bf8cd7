"""Compiled bytecode (.mrb) size check.

Header layout: bytes 0-3 magic ("RITE"), bytes 8-11 total size as a
little-endian u32.  Nothing else in the file is read.
"""

from __future__ import annotations

import struct

from pinguard.config import AnalyzerConfig, DEFAULT_CONFIG
from pinguard.errors import MalformedBytecodeHeader

from .models import BytecodeCheck, Finding, Severity


SIZE_OFFSET = 8
HEADER_SIZE = SIZE_OFFSET + 4


def read_bytecode_size(data: bytes, magic: bytes = b"RITE") -> int:
    """Size field of a bytecode header. Raises MalformedBytecodeHeader."""
    if len(data) < HEADER_SIZE:
        raise MalformedBytecodeHeader(
            f"Invalid mruby bytecode file: header truncated ({len(data)} bytes, "
            f"need {HEADER_SIZE})"
        )
    if data[:len(magic)] != magic:
        raise MalformedBytecodeHeader(
            f"Invalid mruby bytecode file: missing {magic.decode('ascii', 'replace')} header"
        )
    (size,) = struct.unpack_from("<I", data, SIZE_OFFSET)
    return size


def check_bytecode(
    data: bytes, source_id: str = "<bytecode>", config: AnalyzerConfig | None = None,
) -> BytecodeCheck:
    config = config or DEFAULT_CONFIG
    check = BytecodeCheck(source_id=source_id)
    try:
        size = read_bytecode_size(data, config.bytecode_magic)
    except MalformedBytecodeHeader as exc:
        check.findings.append(Finding(Severity.ERROR, str(exc), source_id, category="bytecode"))
        return check

    check.size_bytes = size
    check.flash_pct = round(100.0 * size / config.hardware.flash_size, 2)
    if size > config.flash_error_bytes:
        check.findings.append(Finding(
            Severity.ERROR,
            f"Bytecode too large: {size} bytes (max ~{int(config.flash_error_bytes)} bytes)",
            source_id, category="bytecode",
        ))
    elif size > config.flash_warning_bytes:
        check.findings.append(Finding(
            Severity.WARNING,
            f"Large bytecode: {size} bytes. Consider optimization.",
            source_id, category="bytecode",
        ))
    return check
