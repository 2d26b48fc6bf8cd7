"""Analyzer configuration — hardware limits and heuristic cost constants.

Every number the estimators compare against lives here, so a different
board revision or a tuned cost model is a config change rather than a
code change.  ``DEFAULT_CONFIG`` describes the PIC32MX170F256B running
mruby/c on the RBoard; ``load_config`` layers a JSON file of overrides
on top of it:

    {
      "hardware":    {"ram_size": 32768},
      "memory":      {"string_limit_bytes": 2048},
      "timing":      {"long_delay_ms": 500},
      "peripherals": {"I2C": {"cpu_pct": 12.0}},
      "flash_error_ratio": 0.75
    }
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from pinguard.peripherals.models import PeripheralKind


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HardwareProfile:
    """Fixed limits of the target chip and the mruby/c VM build."""

    name: str = "PIC32MX170F256B"
    flash_size: int = 256 * 1024
    ram_size: int = 64 * 1024
    cpu_frequency_hz: int = 48_000_000
    peripheral_bus_hz: int = 48_000_000

    # vm_config.h
    max_vm_count: int = 5
    max_regs: int = 110
    max_symbols: int = 255

    reserved_timer: int = 1
    """Timer driving the mruby/c scheduler tick; user code must not touch it."""

    timer_count: int = 5
    interrupt_levels: int = 7
    critical_interrupt_levels: tuple[int, ...] = (1, 2)
    """Priorities used by the firmware itself."""

    console_pins: tuple[str, ...] = ("B4", "A4")
    """Default console UART pins (TX, RX)."""


@dataclass(frozen=True)
class MemoryCosts:
    """Byte costs per source shape.  Documented guesses, not a memory model."""

    integer: int = 16
    floating: int = 24
    string_overhead: int = 24           # added to the literal's length
    array_base: int = 64
    array_per_element: int = 16         # per comma
    hash_base: int = 128
    hash_per_entry: int = 32            # per comma
    object: int = 48                    # any X.new
    default: int = 16                   # any other right-hand side

    array_line: int = 64                # line containing an array literal or Array.new
    hash_line: int = 128                # line containing a hash literal or Hash.new

    string_limit_bytes: int = 4096
    ram_warning_ratio: float = 0.6
    ram_error_ratio: float = 0.8


@dataclass(frozen=True)
class TimingCosts:
    """Millisecond costs and ceilings for the timing estimate."""

    long_delay_ms: float = 1000.0
    max_execution_ms: float = 10_000.0
    blocking_io_ms: float = 10.0
    loop_overhead_ms: float = 5.0
    blocking_methods: tuple[str, ...] = ("read", "transfer", "gets", "puts", "write")


@dataclass(frozen=True)
class PeripheralCost:
    """Per-instance cost of one peripheral kind and its usage thresholds."""

    cpu_pct: float
    power_ma: float
    response_ms: float = 0.0
    bottleneck_above: int | None = None
    bottleneck_message: str = ""
    optimization_above: int | None = None
    optimization_message: str = ""


def _default_peripheral_costs() -> dict[PeripheralKind, PeripheralCost]:
    return {
        PeripheralKind.ADC: PeripheralCost(
            cpu_pct=5.0, power_ma=2.5, response_ms=0.1,
            bottleneck_above=5,
            bottleneck_message="High ADC usage ({count} calls) may impact performance",
            optimization_above=5,
            optimization_message="Consider using ADC interrupt mode for better performance",
        ),
        PeripheralKind.PWM: PeripheralCost(
            cpu_pct=2.0, power_ma=1.0,
            bottleneck_above=4,
            bottleneck_message="All PWM units in use - no expansion possible",
        ),
        PeripheralKind.GPIO: PeripheralCost(
            cpu_pct=0.5, power_ma=0.1,
            optimization_above=15,
            optimization_message="Consider port-based GPIO operations for better performance",
        ),
        PeripheralKind.I2C: PeripheralCost(
            cpu_pct=15.0, power_ma=5.0, response_ms=10.0,
            bottleneck_above=2,
            bottleneck_message="Multiple I2C operations ({count} calls) may cause bus contention",
            optimization_above=2,
            optimization_message="Consider I2C transaction batching",
        ),
        PeripheralKind.SPI: PeripheralCost(cpu_pct=8.0, power_ma=3.0, response_ms=1.0),
        PeripheralKind.UART: PeripheralCost(cpu_pct=10.0, power_ma=4.0, response_ms=5.0),
    }


@dataclass(frozen=True)
class AnalyzerConfig:
    """All tuneable analyzer parameters in one place."""

    hardware: HardwareProfile = field(default_factory=HardwareProfile)
    memory: MemoryCosts = field(default_factory=MemoryCosts)
    timing: TimingCosts = field(default_factory=TimingCosts)
    peripherals: dict[PeripheralKind, PeripheralCost] = field(
        default_factory=_default_peripheral_costs,
    )

    # ── Bytecode (.mrb) ────────────────────────────────────────
    bytecode_magic: bytes = b"RITE"
    flash_warning_ratio: float = 0.6
    flash_error_ratio: float = 0.8      # leave 20% of flash for the firmware

    # ── Performance rating (estimated CPU %) ───────────────────
    rating_excellent_below: float = 50.0
    rating_good_below: float = 75.0

    @property
    def ram_warning_bytes(self) -> float:
        return self.hardware.ram_size * self.memory.ram_warning_ratio

    @property
    def ram_error_bytes(self) -> float:
        return self.hardware.ram_size * self.memory.ram_error_ratio

    @property
    def flash_warning_bytes(self) -> float:
        return self.hardware.flash_size * self.flash_warning_ratio

    @property
    def flash_error_bytes(self) -> float:
        return self.hardware.flash_size * self.flash_error_ratio

    def cost_for(self, kind: PeripheralKind) -> PeripheralCost:
        return self.peripherals[kind]


# Used when no AnalyzerConfig is passed.
DEFAULT_CONFIG = AnalyzerConfig()


# ── Overrides ──────────────────────────────────────────────────────


_SECTIONS = ("hardware", "memory", "timing")
_TUPLE_FIELDS = {"critical_interrupt_levels", "console_pins", "blocking_methods"}


def _replace(obj: Any, overrides: dict, section: str) -> Any:
    known = {f.name for f in dataclasses.fields(obj)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown {section} config key(s): {', '.join(unknown)}")
    values = {
        k: tuple(v) if k in _TUPLE_FIELDS else v
        for k, v in overrides.items()
    }
    return dataclasses.replace(obj, **values)


def config_from_dict(data: dict, base: AnalyzerConfig = DEFAULT_CONFIG) -> AnalyzerConfig:
    """Apply a dict of overrides to ``base`` and return a new config.

    Raises ValueError for unknown sections, keys or peripheral kinds.
    """
    data = dict(data or {})
    changes: dict[str, Any] = {}

    for section in _SECTIONS:
        if section in data:
            changes[section] = _replace(getattr(base, section), data.pop(section), section)

    if "peripherals" in data:
        peripherals = dict(base.peripherals)
        for name, overrides in data.pop("peripherals").items():
            kind = PeripheralKind.parse(name)
            peripherals[kind] = _replace(peripherals[kind], overrides, f"peripherals.{kind.value}")
        changes["peripherals"] = peripherals

    if "bytecode_magic" in data:
        magic = data.pop("bytecode_magic")
        changes["bytecode_magic"] = magic.encode("ascii") if isinstance(magic, str) else bytes(magic)

    scalars = {f.name for f in dataclasses.fields(base)} - set(_SECTIONS) - {"peripherals"}
    unknown = sorted(set(data) - scalars)
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")
    changes.update(data)

    return dataclasses.replace(base, **changes)


@lru_cache(maxsize=8)
def load_config(path: str | Path | None = None) -> AnalyzerConfig:
    """Load a JSON override file (cached per path). ``None`` gives the defaults."""
    if path is None:
        return DEFAULT_CONFIG
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: config must be a JSON object")
    log.info("Loaded analyzer config overrides from %s", path)
    return config_from_dict(data)


def config_to_dict(config: AnalyzerConfig) -> dict:
    """JSON-safe view of a config (inverse of ``config_from_dict``)."""
    return {
        "hardware": dataclasses.asdict(config.hardware),
        "memory": dataclasses.asdict(config.memory),
        "timing": dataclasses.asdict(config.timing),
        "peripherals": {
            kind.value: dataclasses.asdict(cost)
            for kind, cost in config.peripherals.items()
        },
        "bytecode_magic": config.bytecode_magic.decode("ascii", errors="replace"),
        "flash_warning_ratio": config.flash_warning_ratio,
        "flash_error_ratio": config.flash_error_ratio,
        "rating_excellent_below": config.rating_excellent_below,
        "rating_good_below": config.rating_good_below,
    }
