"""Tests for pin identity and normalization.

Validates:
  - Every accepted input shape (string, register alias, flat number, pair)
  - Malformed values vs. out-of-range values raise different errors
  - Display strings and flat numbers round-trip for every physical pin
"""

from __future__ import annotations

import unittest

from pinguard.errors import InvalidPin, InvalidPinFormat, PinOutOfRange
from pinguard.pins import (
    Pin, Port, PORT_SIZES,
    all_pins, normalize, to_display_string, to_register_name,
)


class TestPinModel(unittest.TestCase):

    def test_equality_is_port_and_number(self):
        self.assertEqual(Pin(Port.B, 3), Pin(Port.B, 3))
        self.assertNotEqual(Pin(Port.A, 3), Pin(Port.B, 3))
        self.assertEqual(len({Pin(Port.A, 1), Pin(Port.A, 1)}), 1)

    def test_out_of_range_construction(self):
        with self.assertRaises(PinOutOfRange):
            Pin(Port.A, 5)
        with self.assertRaises(PinOutOfRange):
            Pin(Port.B, 16)

    def test_ordering_port_a_first(self):
        self.assertLess(Pin(Port.A, 4), Pin(Port.B, 0))
        self.assertLess(Pin(Port.B, 2), Pin(Port.B, 10))

    def test_port_sizes(self):
        self.assertEqual(PORT_SIZES[Port.A], 5)
        self.assertEqual(PORT_SIZES[Port.B], 16)

    def test_all_pins(self):
        pins = all_pins()
        self.assertEqual(len(pins), 21)
        self.assertEqual(pins[0], Pin(Port.A, 0))
        self.assertEqual(pins[-1], Pin(Port.B, 15))
        self.assertEqual(pins, sorted(pins))


class TestNormalize(unittest.TestCase):

    def test_strings(self):
        self.assertEqual(normalize("A0"), Pin(Port.A, 0))
        self.assertEqual(normalize("b3"), Pin(Port.B, 3))
        self.assertEqual(normalize(" B15 "), Pin(Port.B, 15))

    def test_register_alias(self):
        self.assertEqual(normalize("RA1"), Pin(Port.A, 1))
        self.assertEqual(normalize("rb15"), Pin(Port.B, 15))

    def test_flat_numbers(self):
        self.assertEqual(normalize(0), Pin(Port.A, 0))
        self.assertEqual(normalize(4), Pin(Port.A, 4))
        self.assertEqual(normalize(5), Pin(Port.B, 0))
        self.assertEqual(normalize(20), Pin(Port.B, 15))

    def test_pairs(self):
        self.assertEqual(normalize([2, 3]), Pin(Port.B, 3))
        self.assertEqual(normalize((1, 4)), Pin(Port.A, 4))

    def test_pin_passthrough(self):
        pin = Pin(Port.B, 7)
        self.assertIs(normalize(pin), pin)

    def test_malformed_values(self):
        for value in ("C1", "A", "AB3", "", "A-1", None, 3.5, True, [1], [1, 2, 3], [-1, 2], ["1", 2]):
            with self.subTest(value=value):
                with self.assertRaises(InvalidPinFormat):
                    normalize(value)

    def test_out_of_range_values(self):
        for value in ("A5", "B16", "RB99", 21, -1, [3, 0], [1, 5], [2, 16]):
            with self.subTest(value=value):
                with self.assertRaises(PinOutOfRange):
                    normalize(value)

    def test_errors_carry_input_and_range(self):
        with self.assertRaises(PinOutOfRange) as ctx:
            normalize("A7")
        self.assertEqual(ctx.exception.value, "A7")
        self.assertIn("0-4", str(ctx.exception))
        self.assertIsInstance(ctx.exception, InvalidPin)
        self.assertIsInstance(ctx.exception, ValueError)

    def test_display_round_trip(self):
        """to_display_string(normalize(s)) == s for every valid pin string."""
        for port, size in PORT_SIZES.items():
            for n in range(size):
                s = f"{port.value}{n}"
                self.assertEqual(to_display_string(normalize(s)), s)

    def test_flat_index_round_trip(self):
        for pin in all_pins():
            self.assertEqual(normalize(pin.flat_index), pin)

    def test_register_names(self):
        self.assertEqual(to_register_name(Pin(Port.A, 0)), "RA0")
        self.assertEqual(to_register_name(Pin(Port.B, 15)), "RB15")
        self.assertEqual(normalize(to_register_name(Pin(Port.B, 9))), Pin(Port.B, 9))


if __name__ == "__main__":
    unittest.main()
