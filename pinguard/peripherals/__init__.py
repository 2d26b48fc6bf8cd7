"""Peripherals — capability tables and per-kind pin validators.

Submodules:
  models      PeripheralKind, CapabilityEntry, PinValidation.
  tables      Hard-coded capability tables for the target chip.
  validators  One validator per kind plus the shared VALIDATORS map.
"""

from .models import PeripheralKind, CapabilityEntry, PinValidation
from .validators import (
    PeripheralValidator,
    ADCValidator, PWMValidator, GPIOValidator,
    I2CValidator, SPIValidator, UARTValidator,
    VALIDATORS, build_validators, get_validator,
)

__all__ = [
    # Models
    "PeripheralKind", "CapabilityEntry", "PinValidation",
    # Validators
    "PeripheralValidator",
    "ADCValidator", "PWMValidator", "GPIOValidator",
    "I2CValidator", "SPIValidator", "UARTValidator",
    "VALIDATORS", "build_validators", "get_validator",
]
