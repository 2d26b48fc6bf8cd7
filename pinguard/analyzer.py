"""Per-file analysis — extract, allocate pins, estimate resources.

    result = analyze_file("examples/sensor.rb")
    if not result.valid:
        for error in result.errors:
            print(error)

A file that cannot be read yields a failed FileAnalysis carrying a
FILE_NOT_FOUND issue instead of raising, so project runs keep going.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pinguard.config import AnalyzerConfig, DEFAULT_CONFIG
from pinguard.errors import Issue, SourceNotFound
from pinguard.estimate import ResourceEstimate, estimate_resources
from pinguard.extract import Extraction, extract
from pinguard.pins import Pin
from pinguard.registry import AllocationRecord, AllocationRegistry, AllocationResult


log = logging.getLogger(__name__)


BYTECODE_SUFFIX = ".mrb"


@dataclass
class FileAnalysis:
    """Structured result for one source."""

    source_id: str
    extraction: Extraction | None = None
    allocation: AllocationResult = field(default_factory=AllocationResult)
    estimate: ResourceEstimate | None = None
    load_error: Issue | None = None

    @property
    def errors(self) -> list[str]:
        """Load error, then allocation errors, then estimate errors."""
        errors: list[str] = []
        if self.load_error is not None:
            errors.append(str(self.load_error))
        errors.extend(str(e) for e in self.allocation.errors)
        if self.estimate is not None:
            errors.extend(str(f) for f in self.estimate.errors)
        return errors

    @property
    def warnings(self) -> list[str]:
        warnings = list(self.allocation.warnings)
        if self.estimate is not None:
            warnings.extend(str(f) for f in self.estimate.warnings)
        return warnings

    @property
    def valid(self) -> bool:
        return (
            self.load_error is None
            and self.allocation.ok
            and (self.estimate is None or self.estimate.ok)
        )

    @property
    def pin_map(self) -> dict[Pin, AllocationRecord]:
        return self.allocation.pin_map


def analyze_source(
    text: str,
    source_id: str = "<string>",
    config: AnalyzerConfig | None = None,
    estimate: bool = True,
    max_response_ms: float | None = None,
    bytecode: bytes | None = None,
    registry: AllocationRegistry | None = None,
) -> FileAnalysis:
    """Analyze in-memory source text.

    ``registry`` defaults to a fresh AllocationRegistry; passing one in
    lets several sources share a pin map.
    """
    config = config or DEFAULT_CONFIG
    extraction = extract(text, source_id)
    registry = registry if registry is not None else AllocationRegistry()
    allocation = registry.process(extraction.events)

    resources = None
    if estimate:
        resources = estimate_resources(
            text, source_id, config,
            extraction=extraction,
            pin_map=allocation.pin_map,
            max_response_ms=max_response_ms,
            bytecode=bytecode,
        )

    result = FileAnalysis(
        source_id=source_id,
        extraction=extraction,
        allocation=allocation,
        estimate=resources,
    )
    log.info(
        "%s: %d events, %d pins, %d errors, %d warnings",
        source_id, len(extraction.events), len(allocation.pin_map),
        len(result.errors), len(result.warnings),
    )
    return result


def read_source(path: Path) -> str:
    """UTF-8 text of ``path``. Raises SourceNotFound for missing or unreadable files."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SourceNotFound(f"File not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceNotFound(f"Cannot read file: {path}") from exc


def analyze_file(
    path: str | Path,
    config: AnalyzerConfig | None = None,
    estimate: bool = True,
    max_response_ms: float | None = None,
    source_id: str | None = None,
) -> FileAnalysis:
    """Read ``path`` as UTF-8 and analyze it.

    A sibling ``<name>.mrb`` is checked as compiled bytecode when present.
    """
    path = Path(path)
    source_id = source_id or str(path)
    try:
        text = read_source(path)
    except SourceNotFound as exc:
        log.warning("%s: %s (%s)", source_id, exc, exc.__cause__)
        return FileAnalysis(
            source_id=source_id,
            load_error=Issue(kind=exc.issue_kind, message=str(exc), source_id=source_id),
        )

    bytecode = None
    mrb = path.with_suffix(BYTECODE_SUFFIX)
    if estimate and mrb.is_file():
        bytecode = mrb.read_bytes()
        log.debug("%s: checking bytecode %s (%d bytes)", source_id, mrb, len(bytecode))

    return analyze_source(
        text, source_id, config,
        estimate=estimate,
        max_response_ms=max_response_ms,
        bytecode=bytecode,
    )
