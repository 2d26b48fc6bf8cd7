"""Execution-time estimate — delays, timers, blocking I/O and loop overhead.

``sleep`` takes seconds; ``sleep_ms``, ``delay`` and ``wait`` take
milliseconds.  Blocking I/O is taken from method calls the extractor
attributed to peripheral variables; lines without such a call fall back
to a textual match (``uart...read``, ``spi...transfer``).
"""

from __future__ import annotations

import re

from pinguard.config import AnalyzerConfig, DEFAULT_CONFIG
from pinguard.extract import Extraction
from pinguard.extract.parsing import mask_strings, strip_comment

from .models import (
    BlockingOperation, DelayCall, Finding, Severity, TimerUse, TimingAnalysis,
)


DELAY_RE = re.compile(r"\b(sleep_ms|sleep|delay|wait)(?:\s*\(\s*|\s+)(\d+(?:\.\d+)?)")
TIMER_RE = re.compile(r"\bTimer(\d+)\b")
BLOCKING_TEXT_RE = re.compile(r"(uart.*read|adc.*read|i2c.*read|spi.*transfer)", re.IGNORECASE)
LOOP_RE = re.compile(r"\b(while|until|for|loop)\b")

# call -> milliseconds per unit argument
DELAY_UNITS_MS = {"sleep": 1000.0, "sleep_ms": 1.0, "delay": 1.0, "wait": 1.0}


def _ms(value: float) -> str:
    return f"{value:g}"


def estimate_timing(
    text: str,
    source_id: str = "<string>",
    config: AnalyzerConfig | None = None,
    extraction: Extraction | None = None,
    max_response_ms: float | None = None,
) -> TimingAnalysis:
    config = config or DEFAULT_CONFIG
    costs = config.timing
    analysis = TimingAnalysis(source_id=source_id)

    # line -> attributed blocking calls
    blocking_calls: dict[int, list[str]] = {}
    if extraction is not None:
        for call in extraction.method_calls:
            if call.method.rstrip("?!") in costs.blocking_methods:
                blocking_calls.setdefault(call.line, []).append(f"{call.variable}.{call.method}")

    for index, raw in enumerate(text.splitlines()):
        line_no = index + 1
        line = strip_comment(raw.strip())
        if not line:
            continue
        masked = mask_strings(line)

        for m in DELAY_RE.finditer(masked):
            call, amount = m.group(1), float(m.group(2))
            duration = amount * DELAY_UNITS_MS[call]
            analysis.delay_calls.append(DelayCall(line=line_no, call=call, duration_ms=duration))
            analysis.estimated_execution_ms += duration

        for m in TIMER_RE.finditer(masked):
            timer = int(m.group(1))
            analysis.timer_usage.append(TimerUse(
                line=line_no, timer=timer, reserved=timer == config.hardware.reserved_timer,
            ))

        operations = blocking_calls.get(line_no)
        if operations is None:
            m = BLOCKING_TEXT_RE.search(masked)
            operations = [m.group(1)] if m else []
        for op in operations:
            analysis.blocking_operations.append(BlockingOperation(line=line_no, operation=op))
            analysis.estimated_execution_ms += costs.blocking_io_ms

        if LOOP_RE.search(masked):
            analysis.loop_lines.append(line_no)
            analysis.estimated_execution_ms += costs.loop_overhead_ms

    analysis.findings = _check_timing(analysis, config, max_response_ms)
    return analysis


def _check_timing(
    analysis: TimingAnalysis, config: AnalyzerConfig, max_response_ms: float | None,
) -> list[Finding]:
    findings: list[Finding] = []
    sid = analysis.source_id

    for use in analysis.timer_usage:
        if use.reserved:
            findings.append(Finding(
                Severity.ERROR,
                f"Line {use.line}: Timer{use.timer} is reserved for mruby/c system tick",
                sid, use.line, category="timing",
            ))

    for delay in analysis.delay_calls:
        if max_response_ms is not None:
            if delay.duration_ms > max_response_ms:
                findings.append(Finding(
                    Severity.WARNING,
                    f"Line {delay.line}: Delay {_ms(delay.duration_ms)}ms exceeds "
                    f"real-time constraint ({_ms(max_response_ms)}ms)",
                    sid, delay.line, category="timing",
                ))
        elif delay.duration_ms > config.timing.long_delay_ms:
            findings.append(Finding(
                Severity.WARNING,
                f"Line {delay.line}: Long delay ({_ms(delay.duration_ms)}ms) may "
                f"affect system responsiveness",
                sid, delay.line, category="timing",
            ))

    if analysis.estimated_execution_ms > config.timing.max_execution_ms:
        findings.append(Finding(
            Severity.WARNING,
            f"High estimated execution time: {_ms(analysis.estimated_execution_ms)}ms",
            sid, category="timing",
        ))

    if analysis.blocking_operations and analysis.loop_lines:
        first = analysis.blocking_operations[0].line
        findings.append(Finding(
            Severity.WARNING,
            "Blocking I/O operations detected in main execution path - "
            "consider asynchronous patterns",
            sid, first, category="timing",
        ))
    return findings
