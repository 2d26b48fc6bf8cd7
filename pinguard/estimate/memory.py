"""RAM estimate — fixed byte costs per source shape, summed line by line.

Per line:
  - an assignment costs by the shape of its right-hand side
    (integer, float, string, array, hash, object construction, other)
    and counts as one VM register
  - every string literal costs its length plus the object overhead
  - a line with an array literal / Array.new adds the array overhead
  - a line with a hash literal / Hash.new adds the hash overhead
  - every ``X.new`` adds the object overhead

All costs are non-negative, so adding code never lowers the estimate.
"""

from __future__ import annotations

import re

from pinguard.config import AnalyzerConfig, DEFAULT_CONFIG, MemoryCosts
from pinguard.extract.parsing import mask_strings, strip_comment

from .models import Finding, MemoryAnalysis, Severity, StringLiteral


ASSIGNMENT_RE = re.compile(r"^(@{0,2}[A-Za-z_]\w*)\s*=(?![=~>])\s*(.+)$")
STRING_LITERAL_RE = re.compile(r'"((?:[^"\\]|\\.)*)"|\'((?:[^\'\\]|\\.)*)\'')
ARRAY_RE = re.compile(r"\bArray\.new\b|\[.*\]")
HASH_RE = re.compile(r"\bHash\.new\b|\{.*\}")
NEW_RE = re.compile(r"\b(\w+)\.new\b")

INT_RE = re.compile(r"^-?\d+$")
FLOAT_RE = re.compile(r"^-?\d+\.\d+$")
STRING_RE = re.compile(r"^([\"']).*\1$")


def value_cost(value: str, costs: MemoryCosts = DEFAULT_CONFIG.memory) -> int:
    """Byte cost of an assignment's right-hand side, classified by shape."""
    value = value.strip()
    if INT_RE.match(value):
        return costs.integer
    if FLOAT_RE.match(value):
        return costs.floating
    if STRING_RE.match(value):
        return len(value) + costs.string_overhead
    if value.startswith("[") and value.endswith("]"):
        return costs.array_base + value.count(",") * costs.array_per_element
    if value.startswith("{") and value.endswith("}"):
        return costs.hash_base + value.count(",") * costs.hash_per_entry
    if ".new" in value:
        return costs.object
    return costs.default


def estimate_memory(
    text: str, source_id: str = "<string>", config: AnalyzerConfig | None = None,
) -> MemoryAnalysis:
    config = config or DEFAULT_CONFIG
    costs = config.memory
    analysis = MemoryAnalysis(source_id=source_id)

    for index, raw in enumerate(text.splitlines()):
        line_no = index + 1
        line = strip_comment(raw.strip())
        if not line:
            continue
        masked = mask_strings(line)

        m = ASSIGNMENT_RE.match(line)
        if m:
            analysis.variable_count += 1
            analysis.estimated_ram_bytes += value_cost(m.group(2), costs)

        for sm in STRING_LITERAL_RE.finditer(line):
            content = sm.group(1) if sm.group(1) is not None else sm.group(2)
            literal = StringLiteral(line=line_no, content=content)
            analysis.string_literals.append(literal)
            analysis.string_bytes += literal.size_bytes + costs.string_overhead
            analysis.estimated_ram_bytes += literal.size_bytes + costs.string_overhead

        if ARRAY_RE.search(masked):
            analysis.array_lines.append(line_no)
            analysis.estimated_ram_bytes += costs.array_line

        if HASH_RE.search(masked):
            analysis.hash_lines.append(line_no)
            analysis.estimated_ram_bytes += costs.hash_line

        for nm in NEW_RE.finditer(masked):
            analysis.object_instantiations.append((line_no, nm.group(1)))
            analysis.estimated_ram_bytes += costs.object

    analysis.findings = _check_memory(analysis, config)
    return analysis


def _check_memory(analysis: MemoryAnalysis, config: AnalyzerConfig) -> list[Finding]:
    findings: list[Finding] = []
    ram = analysis.estimated_ram_bytes
    sid = analysis.source_id

    if ram > config.ram_error_bytes:
        findings.append(Finding(
            Severity.ERROR,
            f"Estimated RAM usage ({ram} bytes) exceeds safe limit "
            f"({int(config.ram_error_bytes)} bytes)",
            sid, category="memory",
        ))
    elif ram > config.ram_warning_bytes:
        findings.append(Finding(
            Severity.WARNING, f"High estimated RAM usage: {ram} bytes",
            sid, category="memory",
        ))

    max_regs = config.hardware.max_regs
    if analysis.variable_count > max_regs:
        findings.append(Finding(
            Severity.ERROR,
            f"Too many variables ({analysis.variable_count}) - VM register limit is {max_regs}",
            sid, category="memory",
        ))

    if analysis.string_bytes > config.memory.string_limit_bytes:
        findings.append(Finding(
            Severity.WARNING, f"High string memory usage: {analysis.string_bytes} bytes",
            sid, category="memory",
        ))
    return findings
