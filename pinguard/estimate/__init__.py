"""Estimate — heuristic RAM, timing, CPU and power estimates.

Submodules:
  models       Finding, per-estimator analyses, ResourceEstimate.
  memory       Byte costs per source shape (estimate_memory).
  timing       Delays, timers, blocking I/O (estimate_timing).
  firmware     Reserved-resource rule table (check_firmware_compatibility).
  performance  Per-instance CPU/power/response costs (predict_performance).
  bytecode     .mrb header read and flash-size check (check_bytecode).
  engine       estimate_resources, combine_estimates.
"""

from .models import (
    Severity, Finding, Rating,
    StringLiteral, MemoryAnalysis,
    DelayCall, TimerUse, BlockingOperation, TimingAnalysis,
    PeripheralConfig, PerformancePrediction, BytecodeCheck,
    ResourceEstimate,
)
from .memory import estimate_memory, value_cost
from .timing import estimate_timing
from .firmware import check_firmware_compatibility, peripheral_configs
from .performance import predict_performance, rate
from .bytecode import read_bytecode_size, check_bytecode
from .engine import estimate_resources, combine_estimates

__all__ = [
    # Models
    "Severity", "Finding", "Rating",
    "StringLiteral", "MemoryAnalysis",
    "DelayCall", "TimerUse", "BlockingOperation", "TimingAnalysis",
    "PeripheralConfig", "PerformancePrediction", "BytecodeCheck",
    "ResourceEstimate",
    # Estimators
    "estimate_memory", "value_cost",
    "estimate_timing",
    "check_firmware_compatibility", "peripheral_configs",
    "predict_performance", "rate",
    "read_bytecode_size", "check_bytecode",
    # Engine
    "estimate_resources", "combine_estimates",
]
