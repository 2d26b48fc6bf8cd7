"""Firmware compatibility — rule-table checks against resources the runtime owns.

Rules:
  - a TIMER configured on the scheduler's timer      -> error
  - an interrupt priority the firmware itself uses   -> warning
  - an interrupt priority outside 1..levels          -> error
  - a claimed console UART pin                       -> warning
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pinguard.config import AnalyzerConfig, DEFAULT_CONFIG
from pinguard.extract import Extraction
from pinguard.pins import Pin, normalize

from .models import Finding, PeripheralConfig, Severity


def peripheral_configs(extraction: Extraction) -> list[PeripheralConfig]:
    """One PeripheralConfig per construction, in source order."""
    return [
        PeripheralConfig(
            type=event.kind.value,
            unit=event.unit,
            interrupt_priority=event.interrupt_priority,
            source_id=event.source_id,
            line=event.line,
        )
        for event in extraction.events
    ]


def check_firmware_compatibility(
    pin_map: Mapping[Pin, object],
    configs: Iterable[PeripheralConfig],
    config: AnalyzerConfig | None = None,
    source_id: str = "",
) -> list[Finding]:
    """Check claimed pins and peripheral configs against reserved resources.

    ``pin_map`` values only need ``source_id`` and ``line`` attributes
    (normally AllocationRecords).
    """
    config = config or DEFAULT_CONFIG
    hw = config.hardware
    findings: list[Finding] = []

    others = ", ".join(
        f"Timer{n}" for n in range(1, hw.timer_count + 1) if n != hw.reserved_timer
    )
    first_app_level = max(hw.critical_interrupt_levels, default=0) + 1

    for cfg in configs:
        sid = cfg.source_id or source_id
        if cfg.type.upper() == "TIMER" and cfg.unit == hw.reserved_timer:
            findings.append(Finding(
                Severity.ERROR,
                f"Timer{hw.reserved_timer} is reserved for mruby/c system tick and "
                f"cannot be used - Use {others} instead",
                sid, cfg.line, category="compatibility",
            ))

        priority = cfg.interrupt_priority
        if priority is None:
            continue
        if not 1 <= priority <= hw.interrupt_levels:
            findings.append(Finding(
                Severity.ERROR,
                f"Interrupt priority {priority} is out of range - "
                f"PIC32 supports priorities 1-{hw.interrupt_levels}",
                sid, cfg.line, category="compatibility",
            ))
        elif priority in hw.critical_interrupt_levels:
            findings.append(Finding(
                Severity.WARNING,
                f"Interrupt priority {priority} may conflict with system interrupts - "
                f"Use interrupt priorities {first_app_level}-{hw.interrupt_levels} "
                f"for application code",
                sid, cfg.line, category="compatibility",
            ))

    console = [normalize(p) for p in hw.console_pins]
    for pin in console:
        record = pin_map.get(pin)
        if record is None:
            continue
        findings.append(Finding(
            Severity.WARNING,
            f"Pin {pin} may conflict with console UART - Avoid using console UART "
            f"pins for other peripherals unless specifically needed",
            getattr(record, "source_id", source_id),
            getattr(record, "line", None),
            category="compatibility",
        ))
    return findings
