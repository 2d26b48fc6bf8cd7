"""Estimate assembly — run every sub-estimator over one source.

The sub-estimators are independent and additive: memory and timing walk
the raw lines, performance and firmware compatibility work from the
extracted usage events and the registry's pin map, and the bytecode
check reads a companion .mrb header when one is supplied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from pinguard.config import AnalyzerConfig, DEFAULT_CONFIG
from pinguard.extract import Extraction, extract
from pinguard.pins import Pin

from .bytecode import check_bytecode
from .firmware import check_firmware_compatibility, peripheral_configs
from .memory import estimate_memory
from .models import Finding, ResourceEstimate, Severity
from .performance import predict_performance
from .timing import estimate_timing


log = logging.getLogger(__name__)


def estimate_resources(
    text: str,
    source_id: str = "<string>",
    config: AnalyzerConfig | None = None,
    extraction: Extraction | None = None,
    pin_map: Mapping[Pin, object] | None = None,
    max_response_ms: float | None = None,
    bytecode: bytes | None = None,
) -> ResourceEstimate:
    """Estimate RAM, execution time, CPU load and power for one source."""
    config = config or DEFAULT_CONFIG
    if extraction is None:
        extraction = extract(text, source_id)

    memory = estimate_memory(text, source_id, config)
    timing = estimate_timing(text, source_id, config, extraction, max_response_ms)
    performance = predict_performance(extraction, config)
    compatibility = check_firmware_compatibility(
        pin_map or {}, peripheral_configs(extraction), config, source_id,
    )
    bytecode_check = (
        check_bytecode(bytecode, source_id, config) if bytecode is not None else None
    )

    findings: list[Finding] = []
    findings.extend(memory.findings)
    findings.extend(timing.findings)
    findings.extend(compatibility)
    findings.extend(performance.findings)
    if bytecode_check is not None:
        findings.extend(bytecode_check.findings)

    estimate = ResourceEstimate(
        source_id=source_id,
        estimated_ram_bytes=memory.estimated_ram_bytes,
        estimated_execution_ms=timing.estimated_execution_ms,
        estimated_cpu_pct=performance.cpu_pct,
        estimated_power_ma=performance.power_ma,
        estimated_response_ms=performance.response_ms,
        findings=findings,
        memory=memory,
        timing=timing,
        performance=performance,
        compatibility=compatibility,
        bytecode=bytecode_check,
    )
    log.debug(
        "%s: ram=%dB time=%.1fms cpu=%.1f%% power=%.1fmA (%d findings)",
        source_id, estimate.estimated_ram_bytes, estimate.estimated_execution_ms,
        estimate.estimated_cpu_pct, estimate.estimated_power_ma, len(findings),
    )
    return estimate


def combine_estimates(
    estimates: Iterable[ResourceEstimate],
    source_id: str = "<project>",
    config: AnalyzerConfig | None = None,
) -> ResourceEstimate:
    """Project-wide totals, re-checked against the RAM and execution ceilings.

    Only the totals are checked here; per-file findings stay with their files.
    Every project finding is a warning: each file fits on its own, and the
    totals assume all files are loaded at once.
    """
    config = config or DEFAULT_CONFIG
    total = ResourceEstimate(source_id=source_id)
    for est in estimates:
        total.estimated_ram_bytes += est.estimated_ram_bytes
        total.estimated_execution_ms += est.estimated_execution_ms
        total.estimated_cpu_pct += est.estimated_cpu_pct
        total.estimated_power_ma += est.estimated_power_ma
        total.estimated_response_ms += est.estimated_response_ms

    total.estimated_cpu_pct = round(total.estimated_cpu_pct, 2)
    total.estimated_power_ma = round(total.estimated_power_ma, 2)
    total.estimated_response_ms = round(total.estimated_response_ms, 2)

    ram = total.estimated_ram_bytes
    if ram > config.ram_error_bytes:
        total.findings.append(Finding(
            Severity.WARNING,
            f"Project RAM usage ({ram} bytes) exceeds safe limit "
            f"({int(config.ram_error_bytes)} bytes)",
            source_id, category="memory",
        ))
    elif ram > config.ram_warning_bytes:
        total.findings.append(Finding(
            Severity.WARNING, f"High project RAM usage: {ram} bytes",
            source_id, category="memory",
        ))

    if total.estimated_execution_ms > config.timing.max_execution_ms:
        total.findings.append(Finding(
            Severity.WARNING,
            f"High project execution time: {total.estimated_execution_ms:g}ms",
            source_id, category="timing",
        ))
    return total
