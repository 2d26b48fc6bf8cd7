"""Tests for single-file analysis.

Validates:
  - A clean program is valid and carries its estimate
  - Errors are ordered: load error, allocation errors, estimate errors
  - Unreadable files produce a FILE_NOT_FOUND result instead of raising
  - A sibling .mrb file is checked as bytecode
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from pinguard.analyzer import analyze_file, analyze_source, read_source
from pinguard.errors import IssueKind, SourceNotFound
from pinguard.pins import Pin, Port
from pinguard.registry import AllocationRegistry
from tests.sample_sources import (
    PIN_REUSE, RESERVED_TIMER, SENSOR_NODE, UART_DEFAULTS, make_bytecode, write_sources,
)


class TestAnalyzeSource(unittest.TestCase):

    def test_sensor_node_is_valid(self):
        result = analyze_source(SENSOR_NODE, "node.rb")
        self.assertTrue(result.valid)
        self.assertEqual(result.errors, [])
        self.assertEqual(
            sorted(str(p) for p in result.pin_map),
            ["A0", "B7", "B8"],
        )
        self.assertEqual(result.estimate.estimated_ram_bytes, 410)
        self.assertTrue(any(w.startswith("Blocking I/O") for w in result.warnings))

    def test_error_order(self):
        result = analyze_source(PIN_REUSE + RESERVED_TIMER, "test.rb")
        self.assertFalse(result.valid)
        self.assertEqual(
            result.errors,
            [
                "test.rb:2: Pin A0 already used by ADC (test.rb:1)",
                "Line 3: Timer1 is reserved for mruby/c system tick",
            ],
        )

    def test_estimate_off(self):
        result = analyze_source(RESERVED_TIMER, "t.rb", estimate=False)
        self.assertIsNone(result.estimate)
        self.assertTrue(result.valid)

    def test_uart_defaults_touch_console_pins(self):
        result = analyze_source(UART_DEFAULTS, "console.rb")
        self.assertTrue(result.valid)
        self.assertEqual(set(result.pin_map), {Pin(Port.B, 4), Pin(Port.A, 4)})
        console = [w for w in result.warnings if "may conflict with console UART" in w]
        self.assertEqual(len(console), 2)

    def test_shared_registry(self):
        registry = AllocationRegistry()
        analyze_source('GPIO.new("B2")\n', "a.rb", registry=registry)
        second = analyze_source('GPIO.new("B2")\n', "b.rb", registry=registry)
        self.assertEqual(
            [e.kind for e in second.allocation.errors], [IssueKind.DUPLICATE_PIN_CLAIM],
        )

    def test_real_time_limit_passed_through(self):
        result = analyze_source("sleep_ms(300)\n", max_response_ms=100)
        self.assertEqual(
            result.warnings, ["Line 1: Delay 300ms exceeds real-time constraint (100ms)"],
        )
        self.assertTrue(result.valid)


class TestAnalyzeFile(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_reads_file(self):
        (path,) = write_sources(self.dir, {"node.rb": SENSOR_NODE})
        result = analyze_file(path)
        self.assertEqual(result.source_id, str(path))
        self.assertTrue(result.valid)

    def test_missing_file(self):
        path = self.dir / "nope.rb"
        result = analyze_file(path)
        self.assertFalse(result.valid)
        self.assertIsNone(result.extraction)
        self.assertIs(result.load_error.kind, IssueKind.FILE_NOT_FOUND)
        self.assertEqual(result.errors, [f"File not found: {path}"])

    def test_read_source_raises(self):
        with self.assertRaises(SourceNotFound) as ctx:
            read_source(self.dir / "nope.rb")
        self.assertIsInstance(ctx.exception, FileNotFoundError)
        self.assertIs(ctx.exception.issue_kind, IssueKind.FILE_NOT_FOUND)

    def test_undecodable_file(self):
        path = self.dir / "binary.rb"
        path.write_bytes(b"\xff\xfe\x00GPIO")
        result = analyze_file(path)
        self.assertIs(result.load_error.kind, IssueKind.FILE_NOT_FOUND)
        self.assertTrue(result.errors[0].startswith("Cannot read file"))

    def test_sibling_bytecode(self):
        (path,) = write_sources(self.dir, {"app.rb": 'led = GPIO.new("B2")\n'})
        (self.dir / "app.mrb").write_bytes(make_bytecode(220000))
        result = analyze_file(path)
        self.assertFalse(result.valid)
        self.assertEqual(result.estimate.bytecode.size_bytes, 220000)
        self.assertTrue(any(e.startswith("Bytecode too large") for e in result.errors))

        self.assertTrue(analyze_file(path, estimate=False).valid)

    def test_explicit_source_id(self):
        (path,) = write_sources(self.dir, {"node.rb": SENSOR_NODE})
        self.assertEqual(analyze_file(path, source_id="node").source_id, "node")


if __name__ == "__main__":
    unittest.main()
