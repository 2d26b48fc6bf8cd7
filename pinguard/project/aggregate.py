"""Cross-file aggregation — merge per-file pin maps into one project view.

Each file is analyzed with its own registry (so same-file duplicates are
reported by that file).  The merge then walks the files in input order:
the first file to claim a pin owns it, and every later file claiming the
same pin produces one CrossFileConflict against that first owner.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pinguard.analyzer import FileAnalysis, analyze_file
from pinguard.config import AnalyzerConfig, DEFAULT_CONFIG
from pinguard.estimate import combine_estimates
from pinguard.pins import Pin
from pinguard.registry import AllocationRecord, AllocationResult

from .models import CrossFileConflict, ProjectAnalysis


log = logging.getLogger(__name__)


def aggregate(
    allocations: Sequence[tuple[str, AllocationResult]],
) -> list[CrossFileConflict]:
    """Conflicts between sources; pins shared within one source are ignored."""
    owners: dict[Pin, AllocationRecord] = {}
    conflicts: list[CrossFileConflict] = []

    for source_id, allocation in allocations:
        for pin, record in allocation.pin_map.items():
            first = owners.get(pin)
            if first is None:
                owners[pin] = record
                continue
            if first.source_id == record.source_id:
                continue
            conflicts.append(CrossFileConflict(
                pin=pin,
                source_ids=(first.source_id, record.source_id),
                kinds=(first.kind, record.kind),
                lines=(first.line, record.line),
            ))
            log.debug("Cross-file conflict on %s: %s vs %s", pin, first.source_id, source_id)
    return conflicts


def analyze_project(
    sources: Sequence[str | Path],
    config: AnalyzerConfig | None = None,
    max_workers: int | None = None,
    estimate: bool = True,
    max_response_ms: float | None = None,
) -> ProjectAnalysis:
    """Analyze every source, then merge.

    With ``max_workers`` > 1 the files are analyzed on a thread pool;
    results are still merged in input order once all have finished.
    """
    config = config or DEFAULT_CONFIG

    def run(path: str | Path) -> FileAnalysis:
        return analyze_file(path, config, estimate=estimate, max_response_ms=max_response_ms)

    if max_workers and max_workers > 1 and len(sources) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            files = list(pool.map(run, sources))
    else:
        files = [run(path) for path in sources]

    return merge_analyses(files, config)


def merge_analyses(
    files: Sequence[FileAnalysis], config: AnalyzerConfig | None = None,
) -> ProjectAnalysis:
    """Build the project result from already-analyzed files (input order kept)."""
    config = config or DEFAULT_CONFIG
    conflicts = aggregate([(f.source_id, f.allocation) for f in files])
    estimates = [f.estimate for f in files if f.estimate is not None]
    project = ProjectAnalysis(
        files=list(files),
        conflicts=conflicts,
        estimate=combine_estimates(estimates, config=config) if estimates else None,
    )
    log.info(
        "Project: %d files (%d failed), %d cross-file conflicts",
        len(files), len(project.failed_files), len(conflicts),
    )
    return project
