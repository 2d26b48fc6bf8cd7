"""Capability tables for the PIC32MX170F256B as wired on the RBoard.

Data only.  Each table maps a Pin to the tuple of capability entries the
pin offers for one peripheral; a pin absent from a table cannot be used
by that peripheral.  Values come from the chip reference manual and the
board firmware (adc.c, pwm.c, i2c.c, spi.c, uart.c, model_dependent.h).
"""

from __future__ import annotations

from pinguard.pins import Pin, Port, all_pins, to_register_name

from .models import CapabilityEntry


CapabilityTable = dict[Pin, tuple[CapabilityEntry, ...]]


def _a(n: int) -> Pin:
    return Pin(Port.A, n)


def _b(n: int) -> Pin:
    return Pin(Port.B, n)


# ── ADC ────────────────────────────────────────────────────────────
# pin -> analog channel (ANx)

_ADC_CHANNELS: dict[Pin, int] = {
    _a(0): 0, _a(1): 1,
    _b(0): 2, _b(1): 3, _b(2): 4, _b(3): 5,
    _b(15): 9, _b(14): 10, _b(13): 11, _b(12): 12,
}

ADC_TABLE: CapabilityTable = {
    pin: (CapabilityEntry(register=to_register_name(pin), channel=ch, name=f"AN{ch}"),)
    for pin, ch in _ADC_CHANNELS.items()
}


# ── PWM ────────────────────────────────────────────────────────────
# Four output-compare units; each can be routed to one pin of its group.

_PWM_GROUPS: dict[int, list[Pin]] = {
    1: [_a(0), _b(3), _b(4), _b(15), _b(7)],
    2: [_a(1), _b(5), _b(1), _b(11), _b(8)],
    3: [_a(3), _b(14), _b(0), _b(10), _b(9)],
    4: [_a(2), _b(6), _a(4), _b(13), _b(2)],
}

PWM_TABLE: CapabilityTable = {
    pin: (CapabilityEntry(
        register=f"RP{pin.port.value}{pin.number}",
        group=f"OC{unit}",
        units=(unit,),
    ),)
    for unit, pins in _PWM_GROUPS.items()
    for pin in pins
}


# ── GPIO ───────────────────────────────────────────────────────────
# Every physical pin is a digital I/O.

GPIO_TABLE: CapabilityTable = {
    pin: (CapabilityEntry(register=to_register_name(pin)),)
    for pin in all_pins()
}


# ── I2C ────────────────────────────────────────────────────────────
# Only the I2C2 module is available, on fixed pins, at 100 kHz.

I2C_TABLE: CapabilityTable = {
    _b(2): (CapabilityEntry(register="RB2", function="SDA", module="I2C2", units=(2,)),),
    _b(3): (CapabilityEntry(register="RB3", function="SCL", module="I2C2", units=(2,)),),
}


# ── SPI ────────────────────────────────────────────────────────────
# SCK is fixed per unit; SDI1 has its own pin set; SDI2 shares pins with
# SDO (which either unit can drive).

def _spi(pin: Pin, function: str, *units: int) -> CapabilityEntry:
    return CapabilityEntry(register=to_register_name(pin), function=function, units=units)


SPI_TABLE: CapabilityTable = {
    **{pin: (_spi(pin, "SDI", 1),) for pin in (_a(1), _b(1), _b(5), _b(8), _b(11))},
    _b(14): (_spi(_b(14), "SCK", 1),),
    _b(15): (_spi(_b(15), "SCK", 2),),
    **{pin: (_spi(pin, "SDI", 2), _spi(pin, "SDO", 1, 2))
       for pin in (_a(2), _b(2), _b(6), _b(13))},
    _a(4): (_spi(_a(4), "SDO", 1, 2),),
}

# Pin sets firmware uses when SPI.new is given only a unit
SPI_DEFAULT_PINS: dict[int, dict[str, Pin]] = {
    1: {"SDI": _b(5), "SDO": _b(6), "SCK": _b(14)},
    2: {"SDI": _a(2), "SDO": _b(13), "SCK": _b(15)},
}


# ── UART ───────────────────────────────────────────────────────────
# RX pins come from the firmware's UART_RXD_PINS table; TX pins are the
# model_dependent.h defaults (remappable on PIC32).

def _uart(pin: Pin, function: str, unit: int, remappable: bool = False) -> CapabilityEntry:
    return CapabilityEntry(
        register=to_register_name(pin), function=function,
        units=(unit,), remappable=remappable,
    )


UART_TABLE: CapabilityTable = {
    **{pin: (_uart(pin, "RX", 1),) for pin in (_a(2), _b(6), _a(4), _b(13), _b(2))},
    **{pin: (_uart(pin, "RX", 2),) for pin in (_a(1), _b(5), _b(1), _b(11), _b(8))},
    _b(4): (_uart(_b(4), "TX", 1, remappable=True),),
    _b(9): (_uart(_b(9), "TX", 2, remappable=True),),
}

# unit -> (TX, RX)
UART_DEFAULT_PINS: dict[int, tuple[Pin, Pin]] = {
    1: (_b(4), _a(4)),
    2: (_b(9), _b(8)),
}

UART_BAUD_RATES = (9600, 19200, 38400, 57600, 115200)
