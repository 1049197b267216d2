"""
Data Export Utilities.

Export conversion history and stopwatch logs for external use.
"""

import csv
import io
import logging
import os
from collections.abc import Callable, Iterable
from datetime import datetime

from measurekit.core.codec import encode_datetime
from measurekit.core.models import ConversionHistoryEntry, StopwatchLog
from measurekit.core.types import UnitDefinition, UnitIdentity
from measurekit.utils.formatting import format_duration, format_value


logger = logging.getLogger(__name__)

UnitResolver = Callable[[UnitIdentity], UnitDefinition | None]

HISTORY_COLUMNS = ['Timestamp', 'Category', 'Input', 'From', 'Output', 'To']


def _ensure_parent(filepath: str) -> None:
    os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else '.', exist_ok=True)


def _symbol(resolver: UnitResolver, identity: UnitIdentity) -> str:
    unit = resolver(identity)
    return unit.symbol if unit is not None else "?"


def history_to_csv(entries: Iterable[ConversionHistoryEntry], resolver: UnitResolver) -> str:
    """
    Render conversion history as CSV text.

    Columns:
    - Timestamp (ISO-8601, UTC)
    - Category
    - Input
    - From (unit symbol)
    - Output
    - To (unit symbol)

    Values use each entry's own precision without grouping. Units that no
    longer resolve are written as "?".

    Args:
        entries: History entries, written in the given order
        resolver: Maps an identity to its definition (None when unavailable)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(HISTORY_COLUMNS)
    for entry in entries:
        writer.writerow([
            encode_datetime(entry.timestamp),
            entry.category.value,
            format_value(entry.input_value, entry.precision, grouping=False),
            _symbol(resolver, entry.from_unit),
            format_value(entry.output_value, entry.precision, grouping=False),
            _symbol(resolver, entry.to_unit),
        ])
    return buffer.getvalue()


def export_history_csv(entries: Iterable[ConversionHistoryEntry], resolver: UnitResolver,
                       filepath: str) -> bool:
    """
    Export conversion history to a CSV file.

    Args:
        entries: History entries
        resolver: Maps an identity to its definition
        filepath: Output file path

    Returns:
        True if export successful
    """
    try:
        _ensure_parent(filepath)
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            f.write(history_to_csv(entries, resolver))
        return True

    except OSError as e:
        logger.error("History export to %s failed: %s", filepath, e)
        return False


def stopwatch_summary(logs: Iterable[StopwatchLog]) -> str:
    """Plain-text stopwatch report: one line per log plus the total."""
    logs = list(logs)
    lines = []
    lines.append("=" * 40)
    lines.append("Stopwatch Log")
    lines.append("=" * 40)
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")

    if not logs:
        lines.append("No recorded laps")
    for index, log in enumerate(logs, start=1):
        recorded = log.recorded_at.astimezone().strftime('%Y-%m-%d %H:%M:%S')
        lines.append(f"{index:3d}. {format_duration(log.duration)}  ({log.duration:.2f} s)  {recorded}")

    lines.append("")
    lines.append("-" * 40)
    total = sum(log.duration for log in logs)
    lines.append(f"Total: {format_duration(total)} ({total:.2f} s) over {len(logs)} laps")
    return "\n".join(lines) + "\n"


def export_stopwatch_summary(logs: Iterable[StopwatchLog], filepath: str) -> bool:
    """
    Export the stopwatch report as a text file.

    Returns:
        True if export successful
    """
    try:
        _ensure_parent(filepath)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(stopwatch_summary(logs))
        return True

    except OSError as e:
        logger.error("Stopwatch export to %s failed: %s", filepath, e)
        return False
