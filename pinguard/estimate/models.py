"""Estimator dataclasses — findings and the per-analysis estimate breakdown."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Finding:
    """One estimator observation that crossed a threshold."""

    severity: Severity
    message: str
    source_id: str = ""
    line: int | None = None
    category: str = ""      # memory | timing | compatibility | performance | bytecode

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        return self.message


# ── Memory ─────────────────────────────────────────────────────────


@dataclass
class StringLiteral:
    line: int
    content: str

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass
class MemoryAnalysis:
    source_id: str
    estimated_ram_bytes: int = 0
    variable_count: int = 0
    string_literals: list[StringLiteral] = field(default_factory=list)
    array_lines: list[int] = field(default_factory=list)
    hash_lines: list[int] = field(default_factory=list)
    object_instantiations: list[tuple[int, str]] = field(default_factory=list)   # (line, class)
    string_bytes: int = 0
    findings: list[Finding] = field(default_factory=list)


# ── Timing ─────────────────────────────────────────────────────────


@dataclass
class DelayCall:
    line: int
    call: str               # sleep | sleep_ms | delay | wait
    duration_ms: float


@dataclass
class TimerUse:
    line: int
    timer: int
    reserved: bool = False


@dataclass
class BlockingOperation:
    line: int
    operation: str          # "uart.read", "adc.read", ...


@dataclass
class TimingAnalysis:
    source_id: str
    estimated_execution_ms: float = 0.0
    delay_calls: list[DelayCall] = field(default_factory=list)
    timer_usage: list[TimerUse] = field(default_factory=list)
    blocking_operations: list[BlockingOperation] = field(default_factory=list)
    loop_lines: list[int] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)

    @property
    def max_delay_ms(self) -> float:
        return max((d.duration_ms for d in self.delay_calls), default=0.0)


# ── Firmware compatibility ─────────────────────────────────────────


@dataclass(frozen=True)
class PeripheralConfig:
    """One configured peripheral as the firmware sees it."""

    type: str                           # "ADC", ..., "TIMER"
    unit: int | None = None
    interrupt_priority: int | None = None
    source_id: str = ""
    line: int | None = None


# ── Performance ────────────────────────────────────────────────────


class Rating(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    POOR = "POOR"


@dataclass
class PerformancePrediction:
    source_id: str
    cpu_pct: float = 0.0
    power_ma: float = 0.0
    response_ms: float = 0.0
    instance_counts: dict[str, int] = field(default_factory=dict)
    usage_counts: dict[str, int] = field(default_factory=dict)
    bottlenecks: list[str] = field(default_factory=list)
    optimizations: list[str] = field(default_factory=list)
    rating: Rating = Rating.EXCELLENT
    findings: list[Finding] = field(default_factory=list)


# ── Bytecode ───────────────────────────────────────────────────────


@dataclass
class BytecodeCheck:
    source_id: str
    size_bytes: int | None = None       # None when the header is malformed
    flash_pct: float | None = None
    findings: list[Finding] = field(default_factory=list)


# ── Combined ───────────────────────────────────────────────────────


@dataclass
class ResourceEstimate:
    """Everything the estimators produced for one file or one project."""

    source_id: str
    estimated_ram_bytes: int = 0
    estimated_execution_ms: float = 0.0
    estimated_cpu_pct: float = 0.0
    estimated_power_ma: float = 0.0
    estimated_response_ms: float = 0.0
    findings: list[Finding] = field(default_factory=list)

    memory: MemoryAnalysis | None = None
    timing: TimingAnalysis | None = None
    performance: PerformancePrediction | None = None
    compatibility: list[Finding] = field(default_factory=list)
    bytecode: BytecodeCheck | None = None

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.is_error]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if not f.is_error]

    @property
    def ok(self) -> bool:
        return not self.errors
