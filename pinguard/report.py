"""Plain-text reports for the CLI (no colour, one list of lines per report)."""

from __future__ import annotations

from collections.abc import Mapping

from pinguard.analyzer import FileAnalysis
from pinguard.estimate import ResourceEstimate
from pinguard.peripherals import (
    ADCValidator, PeripheralKind, PeripheralValidator, VALIDATORS,
)
from pinguard.pins import to_register_name
from pinguard.project import ProjectAnalysis


RULE = "=" * 60


def _estimate_lines(est: ResourceEstimate) -> list[str]:
    lines = [
        f"  RAM:        {est.estimated_ram_bytes} bytes",
        f"  Execution:  {est.estimated_execution_ms:g} ms",
        f"  CPU:        {est.estimated_cpu_pct:g} %",
        f"  Power:      {est.estimated_power_ma:g} mA",
        f"  Response:   {est.estimated_response_ms:g} ms",
    ]
    if est.performance is not None:
        p = est.performance
        lines.append(f"  Rating:     {p.rating.value}")
        lines.extend(f"  Bottleneck: {b}" for b in p.bottlenecks)
        lines.extend(f"  Suggestion: {o}" for o in p.optimizations)
    if est.bytecode is not None and est.bytecode.size_bytes is not None:
        lines.append(
            f"  Bytecode:   {est.bytecode.size_bytes} bytes ({est.bytecode.flash_pct:g}% of flash)"
        )
    return lines


def file_report(analysis: FileAnalysis) -> list[str]:
    lines = [RULE, f"File: {analysis.source_id}", RULE]

    if analysis.pin_map:
        lines.append("Pin usage:")
        for pin, rec in sorted(analysis.pin_map.items()):
            role = f" {rec.function}" if rec.function else ""
            lines.append(
                f"  {pin} ({to_register_name(pin)}): {rec.kind.value}{role}{rec.info} "
                f"(line {rec.line})"
            )
    elif analysis.load_error is None:
        lines.append("No pins used")

    if analysis.estimate is not None:
        lines.append("Resources:")
        lines.extend(_estimate_lines(analysis.estimate))

    if analysis.warnings:
        lines.append("Warnings:")
        lines.extend(f"  [WARNING] {w}" for w in analysis.warnings)
    if analysis.errors:
        lines.append("Errors:")
        lines.extend(f"  [ERROR] {e}" for e in analysis.errors)

    lines.append("Result: VALID" if analysis.valid else "Result: INVALID")
    return lines


def project_report(project: ProjectAnalysis) -> list[str]:
    lines: list[str] = []
    for f in project.files:
        lines.extend(file_report(f))
        lines.append("")

    lines.extend([RULE, "Project summary", RULE])
    total = len(project.files)
    failed = len(project.failed_files)
    lines.append(f"Files analyzed: {total}")
    lines.append(f"Successful: {total - failed}")
    lines.append(f"Failed: {failed}")

    if project.conflicts:
        lines.append("Cross-file conflicts:")
        lines.extend(f"  [CONFLICT] {c}" for c in project.conflicts)
    else:
        lines.append("No cross-file conflicts")

    if project.estimate is not None:
        lines.append("Project resources:")
        lines.extend(_estimate_lines(project.estimate))
        lines.extend(f"  [{f.severity.value.upper()}] {f}" for f in project.estimate.findings)

    lines.append("Result: VALID" if project.valid else "Result: INVALID")
    return lines


def capabilities_report(
    validators: Mapping[PeripheralKind, PeripheralValidator] = VALIDATORS,
) -> list[str]:
    """Valid pins per peripheral, plus channels / units where the kind has them."""
    lines = ["RBoard hardware capabilities (PIC32MX170F256B)"]
    for kind, validator in validators.items():
        lines.append(f"{kind.value}:")
        if isinstance(validator, ADCValidator):
            lines.append(f"  Available channels: {', '.join(map(str, validator.channels()))}")
        elif hasattr(validator, "units"):
            lines.append(f"  Available units: {', '.join(map(str, validator.units()))}")
        lines.append(f"  Valid pins: {validator.valid_pins_text()}")
    return lines
