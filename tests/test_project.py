"""Tests for cross-file aggregation.

Validates:
  - A pin claimed by two files is one conflict, though each file is valid alone
  - The first file to claim a pin owns it; later claimants conflict with it
  - Unreadable files fail alone, the rest are still analyzed
  - Threaded analysis keeps input order
  - The project estimate sums the per-file totals
  - Project-wide resource totals warn but never make a project invalid
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from pinguard.analyzer import analyze_source
from pinguard.config import config_from_dict
from pinguard.errors import IssueKind
from pinguard.peripherals import PeripheralKind
from pinguard.pins import Pin, Port
from pinguard.project import aggregate, analyze_project, merge_analyses
from tests.sample_sources import PROJECT_BUTTONS, PROJECT_MAIN, SENSOR_NODE, write_sources


class TestAggregate(unittest.TestCase):

    def test_shared_pin_is_one_conflict(self):
        main = analyze_source(PROJECT_MAIN, "main.rb")
        buttons = analyze_source(PROJECT_BUTTONS, "buttons.rb")
        self.assertTrue(main.valid)
        self.assertTrue(buttons.valid)

        project = merge_analyses([main, buttons])
        self.assertEqual(len(project.conflicts), 1)
        conflict = project.conflicts[0]
        self.assertEqual(conflict.pin, Pin(Port.B, 2))
        self.assertEqual(conflict.kinds, (PeripheralKind.GPIO, PeripheralKind.GPIO))
        self.assertEqual(str(conflict), "Pin B2 used by GPIO in main.rb:1 and by GPIO in buttons.rb:1")
        self.assertFalse(project.valid)
        self.assertEqual(project.failed_files, [])
        self.assertIn(str(conflict), project.errors)

    def test_first_claimant_owns_the_pin(self):
        files = [
            analyze_source(PROJECT_MAIN, "a.rb"),
            analyze_source(PROJECT_BUTTONS, "b.rb"),
            analyze_source('ADC.new("B2")\n', "c.rb"),
        ]
        conflicts = aggregate([(f.source_id, f.allocation) for f in files])
        self.assertEqual([c.source_ids for c in conflicts], [("a.rb", "b.rb"), ("a.rb", "c.rb")])
        self.assertEqual(conflicts[1].kinds, (PeripheralKind.GPIO, PeripheralKind.ADC))

    def test_same_source_is_not_a_conflict(self):
        result = analyze_source(PROJECT_MAIN, "a.rb").allocation
        self.assertEqual(aggregate([("a.rb", result), ("a.rb", result)]), [])

    def test_conflict_issue(self):
        project = merge_analyses([
            analyze_source(PROJECT_MAIN, "main.rb"),
            analyze_source(PROJECT_BUTTONS, "buttons.rb"),
        ])
        issue = project.conflicts[0].to_issue()
        self.assertIs(issue.kind, IssueKind.CROSS_FILE_CONFLICT)
        self.assertEqual((issue.source_id, issue.line), ("buttons.rb", 1))

    def test_disjoint_files_are_valid(self):
        project = merge_analyses([
            analyze_source(SENSOR_NODE, "node.rb"),
            analyze_source('led = GPIO.new("B2")\n', "led.rb"),
        ])
        self.assertEqual(project.conflicts, [])
        self.assertTrue(project.valid)

    def test_project_ram_total_is_advisory(self):
        files = [
            analyze_source(SENSOR_NODE, "node.rb"),
            analyze_source('led = GPIO.new("B2")\n', "led.rb"),
        ]
        self.assertTrue(all(f.valid for f in files))
        # totals re-checked against a board with 512 bytes of RAM
        project = merge_analyses(files, config_from_dict({"hardware": {"ram_size": 512}}))
        self.assertEqual(project.conflicts, [])
        self.assertTrue(project.valid)
        self.assertEqual(project.errors, [])
        self.assertTrue(project.estimate.ok)
        self.assertTrue(
            any(w.startswith("Project RAM usage (") for w in project.warnings),
        )


class TestAnalyzeProject(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_files_on_disk(self):
        paths = write_sources(self.dir, {"main.rb": PROJECT_MAIN, "buttons.rb": PROJECT_BUTTONS})
        project = analyze_project(paths)
        self.assertEqual([f.source_id for f in project.files], [str(p) for p in paths])
        self.assertEqual(len(project.conflicts), 1)
        self.assertEqual(project.conflicts[0].source_ids, (str(paths[0]), str(paths[1])))

    def test_missing_file_fails_alone(self):
        (main,) = write_sources(self.dir, {"main.rb": PROJECT_MAIN})
        missing = self.dir / "missing.rb"
        project = analyze_project([main, missing])
        self.assertTrue(project.files[0].valid)
        self.assertIs(project.files[1].load_error.kind, IssueKind.FILE_NOT_FOUND)
        self.assertEqual(project.failed_files, [str(missing)])
        self.assertFalse(project.valid)

    def test_threaded_keeps_order(self):
        sources = {f"f{i}.rb": f'p{i} = GPIO.new("B{i}")\n' for i in range(6)}
        paths = write_sources(self.dir, sources)
        project = analyze_project(paths, max_workers=3)
        self.assertEqual([f.source_id for f in project.files], [str(p) for p in paths])
        self.assertTrue(project.valid)

    def test_project_estimate_sums_files(self):
        paths = write_sources(self.dir, {"main.rb": PROJECT_MAIN, "node.rb": SENSOR_NODE})
        project = analyze_project(paths)
        self.assertEqual(
            project.estimate.estimated_ram_bytes,
            sum(f.estimate.estimated_ram_bytes for f in project.files),
        )
        self.assertEqual(project.estimate.estimated_cpu_pct, 8.0)
        self.assertEqual(project.estimate.source_id, "<project>")

    def test_no_estimate(self):
        paths = write_sources(self.dir, {"main.rb": PROJECT_MAIN})
        project = analyze_project(paths, estimate=False)
        self.assertIsNone(project.estimate)
        self.assertIsNone(project.files[0].estimate)


if __name__ == "__main__":
    unittest.main()
