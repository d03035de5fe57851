from __future__ import annotations

import json
import logging
import sys
import tempfile
import unittest
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from project_sync.common import ProjectSyncError
from project_sync.model import CompilationUnit
from project_sync.snapshot import filter_units, load_units, parse_units


class ParseUnitsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.logger = logging.getLogger("project_sync.tests.snapshot")

    def test_parses_units_with_optional_fields(self) -> None:
        payload = {
            "units": [
                {
                    "name": "App",
                    "source_files": ["Assets/a.cs"],
                    "defines": ["DEBUG", "DEBUG", "TRACE"],
                    "references": ["/libs/A.dll"],
                    "project_references": ["Lib"],
                },
                {"name": "Lib"},
            ]
        }
        snapshot = parse_units(payload, logger=self.logger)

        self.assertEqual(len(snapshot.units), 2)
        self.assertEqual(snapshot.skipped, ())
        app = snapshot.units[0]
        self.assertEqual(app.defines, ("DEBUG", "TRACE"))
        self.assertEqual(app.source_files, ("Assets/a.cs",))
        self.assertEqual(snapshot.units[1], CompilationUnit(name="Lib"))

    def test_malformed_units_are_skipped_with_warning(self) -> None:
        payload = {
            "units": [
                {"name": None, "source_files": []},
                {"source_files": ["x.cs"]},
                {"name": "Ok"},
                {"name": "BadSources", "source_files": "x.cs"},
                {"name": "../Escape"},
            ]
        }
        with self.assertLogs(self.logger, level="WARNING") as captured:
            snapshot = parse_units(payload, logger=self.logger)

        self.assertEqual([unit.name for unit in snapshot.units], ["Ok"])
        self.assertEqual([item.index for item in snapshot.skipped], [0, 1, 3, 4])
        self.assertEqual(len(captured.records), 4)

    def test_missing_units_array_is_an_error(self) -> None:
        with self.assertRaises(ProjectSyncError):
            parse_units({"assemblies": []}, logger=self.logger)

    def test_load_units_reads_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "units.json"
            path.write_text(json.dumps({"units": [{"name": "App"}]}), encoding="utf-8")
            snapshot = load_units(path, logger=self.logger)
        self.assertEqual([unit.name for unit in snapshot.units], ["App"])

    def test_load_units_rejects_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "units.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(ProjectSyncError):
                load_units(path, logger=self.logger)


class FilterUnitsTests(unittest.TestCase):
    def test_drops_missing_and_blank_names(self) -> None:
        logger = logging.getLogger("project_sync.tests.snapshot")
        units = [CompilationUnit(name="App"), None, CompilationUnit(name="  "), CompilationUnit(name="Lib")]
        with self.assertLogs(logger, level="WARNING"):
            snapshot = filter_units(units, logger=logger)
        self.assertEqual([unit.name for unit in snapshot.units], ["App", "Lib"])
        self.assertEqual([item.index for item in snapshot.skipped], [1, 2])


if __name__ == "__main__":
    unittest.main()
