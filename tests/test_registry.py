"""Tests for the allocation registry.

Validates:
  - One pin, one owner: a repeated pin is a DUPLICATE_PIN_CLAIM whatever the kinds
  - Duplicate check runs before the capability check
  - Per-role pin arguments for I2C / SPI / UART, and their defaults
  - Each pin of a multi-pin peripheral is committed on its own
  - Every failure is recorded and processing continues
  - Pins and units that are not literals are skipped with a warning
  - Records keep the role that was asked for next to the pin table role
"""

from __future__ import annotations

import unittest

from pinguard.errors import IssueKind
from pinguard.extract import extract
from pinguard.peripherals import PeripheralKind
from pinguard.pins import Pin, Port
from pinguard.registry import AllocationRegistry
from tests.sample_sources import I2C_BUS, I2C_SWAPPED, PIN_REUSE, SPI_EXPLICIT, UART_DEFAULTS


def A(n: int) -> Pin:
    return Pin(Port.A, n)


def B(n: int) -> Pin:
    return Pin(Port.B, n)


def allocate(text: str, source_id: str = "test.rb"):
    return AllocationRegistry().process(extract(text, source_id).events)


class TestDuplicates(unittest.TestCase):

    def test_adc_then_pwm_on_same_pin(self):
        result = allocate(PIN_REUSE)
        self.assertEqual(len(result.accepted), 1)
        self.assertEqual(len(result.errors), 1)
        error = result.errors[0]
        self.assertIs(error.kind, IssueKind.DUPLICATE_PIN_CLAIM)
        self.assertEqual(error.line, 2)
        self.assertEqual(str(error), "test.rb:2: Pin A0 already used by ADC (test.rb:1)")
        self.assertIs(result.pin_map[A(0)].kind, PeripheralKind.ADC)
        self.assertFalse(result.ok)

    def test_same_kind_twice(self):
        result = allocate('GPIO.new("B0")\nGPIO.new(5)\n')    # 5 is B0 in flat numbering
        self.assertEqual(len(result.accepted), 1)
        self.assertEqual([e.kind for e in result.errors], [IssueKind.DUPLICATE_PIN_CLAIM])

    def test_duplicate_reported_before_capability(self):
        # B4 is not an ADC pin, but it is already taken
        result = allocate('GPIO.new("B4")\nADC.new("B4")\n')
        self.assertEqual([e.kind for e in result.errors], [IssueKind.DUPLICATE_PIN_CLAIM])


class TestPinErrors(unittest.TestCase):

    def test_invalid_format(self):
        result = allocate('ADC.new("C9")\n')
        self.assertEqual(result.errors[0].kind, IssueKind.INVALID_PIN_FORMAT)
        self.assertIn("C9", result.errors[0].message)
        self.assertTrue(result.errors[0].message.startswith("test.rb:1:"))

    def test_out_of_range(self):
        result = allocate('\nADC.new("A7")\n')
        self.assertEqual(result.errors[0].kind, IssueKind.PIN_OUT_OF_RANGE)
        self.assertEqual(result.errors[0].line, 2)

    def test_unsupported_for_pin(self):
        result = allocate('ADC.new("B4")\n')
        self.assertEqual(result.errors[0].kind, IssueKind.UNSUPPORTED_PERIPHERAL_FOR_PIN)
        self.assertIn("Valid pins:", result.errors[0].message)
        self.assertEqual(result.accepted, [])

    def test_boolean_is_not_a_pin(self):
        result = allocate("GPIO.new(true)\n")
        self.assertEqual(result.errors[0].kind, IssueKind.INVALID_PIN_FORMAT)

    def test_errors_do_not_stop_processing(self):
        result = allocate('ADC.new("C9")\nADC.new("B4")\nADC.new("A1")\n')
        self.assertEqual(len(result.errors), 2)
        self.assertEqual([r.pin for r in result.accepted], [A(1)])

    def test_missing_pin_is_a_warning(self):
        result = allocate("sensor = ADC.new\n")
        self.assertEqual(result.errors, [])
        self.assertIn("test.rb:1: ADC.new has no pin argument - pin usage not checked", result.warnings)

    def test_parameter_pin_is_not_checked(self):
        result = allocate("def make_led(p)\n  GPIO.new(p)\nend\n", "f.rb")
        self.assertTrue(result.ok)
        self.assertEqual(result.accepted, [])
        self.assertEqual(
            result.warnings, ["f.rb:2: GPIO pin p is not a literal - pin usage not checked"],
        )

    def test_unresolved_pair_is_not_checked(self):
        result = allocate("ADC.new([port, 3])\n")
        self.assertTrue(result.ok)
        self.assertIn("test.rb:1: ADC pin [port, 3] is not a literal - pin usage not checked",
                      result.warnings)

    def test_bound_variable_is_still_checked(self):
        result = allocate('pin = "B4"\nADC.new(pin)\n')
        self.assertEqual(result.errors[0].kind, IssueKind.UNSUPPORTED_PERIPHERAL_FOR_PIN)


class TestI2C(unittest.TestCase):

    def test_bus_registers_both_pins(self):
        result = allocate(I2C_BUS)
        self.assertTrue(result.ok)
        self.assertEqual(
            [(r.pin, r.function) for r in result.accepted],
            [(B(2), "SDA"), (B(3), "SCL")],
        )
        self.assertGreaterEqual(len(result.warnings), 1)
        self.assertTrue(all(w.startswith("test.rb: ") for w in result.warnings))

    def test_swapped_roles_rejected(self):
        result = allocate(I2C_SWAPPED)
        self.assertEqual(result.accepted, [])
        self.assertEqual(
            [e.kind for e in result.errors],
            [IssueKind.UNSUPPORTED_PERIPHERAL_FOR_PIN] * 2,
        )

    def test_partial_commit(self):
        result = allocate('GPIO.new("B2")\n' + I2C_BUS)
        self.assertEqual(sorted(result.pin_map), [B(2), B(3)])
        self.assertIs(result.pin_map[B(2)].kind, PeripheralKind.GPIO)
        self.assertIs(result.pin_map[B(3)].kind, PeripheralKind.I2C)
        self.assertEqual([e.kind for e in result.errors], [IssueKind.DUPLICATE_PIN_CLAIM])


class TestSPI(unittest.TestCase):

    def test_explicit_pins(self):
        result = allocate(SPI_EXPLICIT)
        self.assertTrue(result.ok)
        self.assertEqual(
            {str(p): r.function for p, r in result.pin_map.items()},
            {"B14": "SCK", "B6": "MOSI", "B5": "MISO"},
        )
        self.assertEqual(
            {str(p): r.hardware_function for p, r in result.pin_map.items()},
            {"B14": "SCK", "B6": "SDO", "B5": "SDI"},
        )

    def test_unit_defaults(self):
        result = allocate("spi = SPI.new(unit: 2)\n")
        self.assertEqual(sorted(result.pin_map), [A(2), B(13), B(15)])

    def test_missing_role_warns(self):
        result = allocate('SPI.new(sck_pin: "B14", mosi_pin: "B6")\n')
        self.assertTrue(result.ok)
        self.assertEqual(len(result.accepted), 2)
        self.assertTrue(any("no MISO pin argument" in w for w in result.warnings))

    def test_numeric_string_unit(self):
        result = allocate('spi = SPI.new(unit: "2")\n')
        self.assertTrue(result.ok)
        self.assertEqual(sorted(result.pin_map), [A(2), B(13), B(15)])
        self.assertTrue(all(r.unit == 2 for r in result.accepted))

    def test_non_numeric_unit(self):
        result = allocate('spi = SPI.new(unit: "fast")\n')
        self.assertEqual(result.accepted, [])
        self.assertEqual(result.errors[0].kind, IssueKind.UNKNOWN_PERIPHERAL_KIND)
        self.assertIn("Invalid SPI unit: 'fast'", result.errors[0].message)

    def test_variable_unit_is_not_checked(self):
        result = allocate("spi = SPI.new(unit: speed)\n")
        self.assertTrue(result.ok)
        self.assertEqual(result.accepted, [])
        self.assertEqual(
            result.warnings, ["test.rb:1: SPI.new unit speed is not a literal - unit not checked"],
        )


class TestUART(unittest.TestCase):

    def test_unit_defaults(self):
        result = allocate(UART_DEFAULTS)
        self.assertTrue(result.ok)
        self.assertEqual(
            [(r.pin, r.function, r.hardware_function, r.unit) for r in result.accepted],
            [(B(4), "TXD", "TX", 1), (A(4), "RXD", "RX", 1)],
        )
        self.assertFalse(any("but no" in w for w in result.warnings))

    def test_positional_unit_with_pins(self):
        result = allocate('UART.new(2, txd_pin: "B9", rxd_pin: "B8")\n')
        self.assertTrue(result.ok)
        self.assertEqual(sorted(result.pin_map), [B(8), B(9)])

    def test_unknown_unit(self):
        result = allocate("UART.new(unit: 3)\n")
        self.assertEqual(result.accepted, [])
        self.assertEqual(result.errors[0].kind, IssueKind.UNKNOWN_PERIPHERAL_KIND)
        self.assertIn("Invalid UART unit: 3", result.errors[0].message)

    def test_single_pin_warns_incomplete(self):
        result = allocate('UART.new(txd_pin: "B4")\n')
        self.assertEqual([r.pin for r in result.accepted], [B(4)])
        self.assertIn(
            "UART1 has TX pin but no RX pin - receive capability disabled", result.warnings,
        )

    def test_positional_pin(self):
        result = allocate('tx = UART.new("B4")\n')
        self.assertEqual([r.pin for r in result.accepted], [B(4)])

    def test_numeric_string_unit(self):
        result = allocate('UART.new(unit: "2")\n')
        self.assertTrue(result.ok)
        self.assertEqual(
            [(r.pin, r.unit) for r in result.accepted], [(B(9), 2), (B(8), 2)],
        )

    def test_non_numeric_unit(self):
        result = allocate("UART.new(unit: 1.5)\n")
        self.assertEqual(result.accepted, [])
        self.assertEqual(result.errors[0].kind, IssueKind.UNKNOWN_PERIPHERAL_KIND)
        self.assertIn("Invalid UART unit: 1.5", result.errors[0].message)

    def test_variable_unit_does_not_default(self):
        result = allocate("UART.new(unit: n)\n")
        self.assertTrue(result.ok)
        self.assertEqual(result.accepted, [])
        self.assertIn("test.rb:1: UART.new unit n is not a literal - unit not checked",
                      result.warnings)

    def test_variable_unit_with_explicit_pins(self):
        result = allocate('UART.new(unit: n, txd_pin: "B4", rxd_pin: "A4")\n')
        self.assertTrue(result.ok)
        self.assertEqual(sorted(result.pin_map), [A(4), B(4)])
        self.assertTrue(all(r.unit is None for r in result.accepted))


class TestClaimAPI(unittest.TestCase):

    def test_claim_normalizes_and_records(self):
        reg = AllocationRegistry()
        self.assertTrue(reg.claim([1, 0], "adc", "x.rb", 4, variable="light"))
        record = reg.pin_map[A(0)]
        self.assertEqual((record.kind, record.line, record.variable), (PeripheralKind.ADC, 4, "light"))
        self.assertEqual(record.info, " (ADC Channel 0, AN0)")

    def test_unknown_kind(self):
        reg = AllocationRegistry()
        self.assertFalse(reg.claim("B1", "CAN", "x.rb", 1))
        self.assertEqual(reg.result().errors[0].kind, IssueKind.UNKNOWN_PERIPHERAL_KIND)

    def test_reset(self):
        reg = AllocationRegistry()
        reg.process(extract(PIN_REUSE, "a.rb").events)
        reg.reset()
        result = reg.result()
        self.assertEqual((result.accepted, result.errors, result.warnings, result.pin_map), ([], [], [], {}))

    def test_result_is_a_snapshot(self):
        reg = AllocationRegistry()
        first = reg.process(extract('ADC.new("A0")', "a.rb").events)
        reg.claim("A1", "ADC", "a.rb", 2)
        self.assertEqual(len(first.accepted), 1)
        self.assertEqual(len(reg.result().accepted), 2)


if __name__ == "__main__":
    unittest.main()
