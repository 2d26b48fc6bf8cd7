"""Project dataclasses — cross-file conflicts and the project result."""

from __future__ import annotations

from dataclasses import dataclass, field

from pinguard.errors import Issue, IssueKind
from pinguard.estimate import ResourceEstimate
from pinguard.peripherals import PeripheralKind
from pinguard.pins import Pin


@dataclass(frozen=True)
class CrossFileConflict:
    """A pin accepted by two different sources."""

    pin: Pin
    source_ids: tuple[str, str]                     # (first claimant, later claimant)
    kinds: tuple[PeripheralKind, PeripheralKind]
    lines: tuple[int, int] = (0, 0)

    @property
    def message(self) -> str:
        (first, other), (k1, k2), (l1, l2) = self.source_ids, self.kinds, self.lines
        return (
            f"Pin {self.pin} used by {k1.value} in {first}:{l1} "
            f"and by {k2.value} in {other}:{l2}"
        )

    def to_issue(self) -> Issue:
        return Issue(
            kind=IssueKind.CROSS_FILE_CONFLICT,
            message=self.message,
            source_id=self.source_ids[1],
            line=self.lines[1],
        )

    def __str__(self) -> str:
        return self.message


@dataclass
class ProjectAnalysis:
    """Per-file analyses plus everything that only exists across files."""

    files: list = field(default_factory=list)       # list[FileAnalysis], input order
    conflicts: list[CrossFileConflict] = field(default_factory=list)
    estimate: ResourceEstimate | None = None

    @property
    def valid(self) -> bool:
        """Every file is valid and no pin is claimed by two files.

        The project estimate only adds warnings.
        """
        return all(f.valid for f in self.files) and not self.conflicts

    @property
    def errors(self) -> list[str]:
        errors = [e for f in self.files for e in f.errors]
        errors.extend(str(c) for c in self.conflicts)
        return errors

    @property
    def warnings(self) -> list[str]:
        warnings = [w for f in self.files for w in f.warnings]
        if self.estimate is not None:
            warnings.extend(str(f) for f in self.estimate.warnings)
        return warnings

    @property
    def failed_files(self) -> list[str]:
        return [f.source_id for f in self.files if not f.valid]
