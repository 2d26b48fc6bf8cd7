"""Result serialization — JSON-safe dicts for the CLI and the web API."""

from __future__ import annotations

from dataclasses import asdict

from pinguard.analyzer import FileAnalysis
from pinguard.errors import Issue
from pinguard.estimate import Finding, ResourceEstimate
from pinguard.pins import to_register_name
from pinguard.project import CrossFileConflict, ProjectAnalysis
from pinguard.registry import AllocationRecord, AllocationResult


def issue_to_dict(issue: Issue) -> dict:
    return {
        "kind": issue.kind.value,
        "message": issue.message,
        "source_id": issue.source_id,
        "line": issue.line,
    }


def finding_to_dict(finding: Finding) -> dict:
    return {
        "severity": finding.severity.value,
        "category": finding.category,
        "message": finding.message,
        "source_id": finding.source_id,
        "line": finding.line,
    }


def record_to_dict(record: AllocationRecord) -> dict:
    return {
        "pin": str(record.pin),
        "register": to_register_name(record.pin),
        "peripheral": record.kind.value,
        "function": record.function,
        "hardware_function": record.hardware_function,
        "unit": record.unit,
        "variable": record.variable,
        "source_id": record.source_id,
        "line": record.line,
        "info": record.info.strip(" ()"),
    }


def allocation_to_dict(result: AllocationResult) -> dict:
    """Serialize an AllocationResult (pin map keyed by display name)."""
    return {
        "ok": result.ok,
        "accepted": [record_to_dict(r) for r in result.accepted],
        "errors": [issue_to_dict(e) for e in result.errors],
        "warnings": list(result.warnings),
        "pin_map": {str(pin): record_to_dict(r) for pin, r in sorted(result.pin_map.items())},
    }


def estimate_to_dict(estimate: ResourceEstimate) -> dict:
    data = {
        "source_id": estimate.source_id,
        "estimated_ram_bytes": estimate.estimated_ram_bytes,
        "estimated_execution_ms": estimate.estimated_execution_ms,
        "estimated_cpu_pct": estimate.estimated_cpu_pct,
        "estimated_power_ma": estimate.estimated_power_ma,
        "estimated_response_ms": estimate.estimated_response_ms,
        "findings": [finding_to_dict(f) for f in estimate.findings],
    }

    if estimate.memory is not None:
        m = estimate.memory
        data["memory"] = {
            "variable_count": m.variable_count,
            "string_literals": len(m.string_literals),
            "string_bytes": m.string_bytes,
            "array_lines": list(m.array_lines),
            "hash_lines": list(m.hash_lines),
            "object_instantiations": [
                {"line": line, "class": cls} for line, cls in m.object_instantiations
            ],
        }
    if estimate.timing is not None:
        t = estimate.timing
        data["timing"] = {
            "delay_calls": [asdict(d) for d in t.delay_calls],
            "timer_usage": [asdict(u) for u in t.timer_usage],
            "blocking_operations": [asdict(b) for b in t.blocking_operations],
            "loop_lines": list(t.loop_lines),
            "max_delay_ms": t.max_delay_ms,
        }
    if estimate.performance is not None:
        p = estimate.performance
        data["performance"] = {
            "rating": p.rating.value,
            "instance_counts": dict(p.instance_counts),
            "usage_counts": dict(p.usage_counts),
            "bottlenecks": list(p.bottlenecks),
            "optimizations": list(p.optimizations),
        }
    if estimate.bytecode is not None:
        b = estimate.bytecode
        data["bytecode"] = {"size_bytes": b.size_bytes, "flash_pct": b.flash_pct}
    return data


def analysis_to_dict(analysis: FileAnalysis) -> dict:
    return {
        "source_id": analysis.source_id,
        "valid": analysis.valid,
        "errors": analysis.errors,
        "warnings": analysis.warnings,
        "load_error": issue_to_dict(analysis.load_error) if analysis.load_error else None,
        "allocation": allocation_to_dict(analysis.allocation),
        "estimate": estimate_to_dict(analysis.estimate) if analysis.estimate else None,
    }


def conflict_to_dict(conflict: CrossFileConflict) -> dict:
    return {
        "pin": str(conflict.pin),
        "source_ids": list(conflict.source_ids),
        "kinds": [k.value for k in conflict.kinds],
        "lines": list(conflict.lines),
        "message": conflict.message,
    }


def project_to_dict(project: ProjectAnalysis) -> dict:
    return {
        "valid": project.valid,
        "files": [analysis_to_dict(f) for f in project.files],
        "conflicts": [conflict_to_dict(c) for c in project.conflicts],
        "failed_files": project.failed_files,
        "estimate": estimate_to_dict(project.estimate) if project.estimate else None,
    }
