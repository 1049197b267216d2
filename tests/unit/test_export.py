"""
Unit tests for history and stopwatch export.
"""

import csv
import io
from datetime import datetime, timezone

from measurekit.core.catalog import DEFAULT_CATALOG
from measurekit.core.models import ConversionHistoryEntry, StopwatchLog
from measurekit.core.types import (
    CustomUnit,
    MeasurementCategory,
    PredefinedIdentity,
)
from measurekit.utils.export import (
    HISTORY_COLUMNS,
    export_history_csv,
    export_stopwatch_summary,
    history_to_csv,
    stopwatch_summary,
)


STAMP = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def resolver(identity):
    return DEFAULT_CATALOG.resolve(identity)


def mile_entry(precision=2) -> ConversionHistoryEntry:
    return ConversionHistoryEntry(
        category=MeasurementCategory.LENGTH,
        from_unit=PredefinedIdentity("length.mile"),
        to_unit=PredefinedIdentity("length.meter"),
        input_value=1.0,
        output_value=1609.344,
        precision=precision,
        timestamp=STAMP,
    )


class TestHistoryCsv:
    """CSV rendering."""

    def test_header_and_row(self):
        rows = list(csv.reader(io.StringIO(history_to_csv([mile_entry()], resolver))))
        assert rows[0] == HISTORY_COLUMNS
        assert rows[1] == ["2024-01-02T03:04:05Z", "Length", "1", "mi", "1609.34", "m"]

    def test_uses_entry_precision(self):
        rows = list(csv.reader(io.StringIO(history_to_csv([mile_entry(precision=0)], resolver))))
        assert rows[1][4] == "1609"

    def test_unresolved_unit(self):
        ghost = CustomUnit(MeasurementCategory.LENGTH, "Ghost", "gh", 2.0)
        entry = ConversionHistoryEntry(
            category=MeasurementCategory.LENGTH,
            from_unit=ghost.identity,
            to_unit=PredefinedIdentity("length.meter"),
            input_value=1.0,
            output_value=2.0,
            precision=2,
            timestamp=STAMP,
        )
        rows = list(csv.reader(io.StringIO(history_to_csv([entry], resolver))))
        assert rows[1][3] == "?"

    def test_empty_history(self):
        assert history_to_csv([], resolver) == ",".join(HISTORY_COLUMNS) + "\n"


class TestExportFiles:
    """Writing exports to disk."""

    def test_export_history(self, tmp_path):
        path = tmp_path / "exports" / "history.csv"
        assert export_history_csv([mile_entry()], resolver, str(path))
        assert path.read_text(encoding="utf-8").startswith("Timestamp,")

    def test_export_history_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        assert not export_history_csv([mile_entry()], resolver, str(blocker / "history.csv"))

    def test_export_stopwatch(self, tmp_path):
        path = tmp_path / "laps.txt"
        assert export_stopwatch_summary([StopwatchLog(65.0, recorded_at=STAMP)], str(path))
        assert "01:05" in path.read_text(encoding="utf-8")


class TestStopwatchSummary:
    """Plain-text report."""

    def test_one_line_per_log(self):
        logs = [StopwatchLog(65.0, recorded_at=STAMP), StopwatchLog(3725.0, recorded_at=STAMP)]
        report = stopwatch_summary(logs)
        assert "  1. 01:05" in report
        assert "  2. 01:02:05" in report
        assert "over 2 laps" in report

    def test_empty(self):
        report = stopwatch_summary([])
        assert "No recorded laps" in report
        assert "Total: 00:00" in report
