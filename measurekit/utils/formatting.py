"""
Display formatting for conversion values and stopwatch durations.

Numbers are rendered fixed-point with at most `precision` fraction digits,
trailing zeros trimmed, and an optional "," thousands separator.
"""

import math

from measurekit.core.types import UnitDefinition


# Placeholder shown for a conversion without a result
NO_RESULT = "—"


def format_value(value: float, precision: int = 2, grouping: bool = True) -> str:
    """
    Format a conversion value for display.

    Args:
        value: Value to format
        precision: Maximum number of fraction digits
        grouping: Insert "," between thousands

    Returns:
        Formatted text, NO_RESULT for NaN or infinite values

    Example:
        >>> format_value(1609.344, 2)
        '1,609.34'
        >>> format_value(2.5, 4, grouping=False)
        '2.5'
    """
    if not math.isfinite(value):
        return NO_RESULT
    precision = max(0, int(precision))
    text = format(value, f"{',' if grouping else ''}.{precision}f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def format_duration(seconds: float) -> str:
    """Stopwatch style duration: MM:SS, or HH:MM:SS from one hour up."""
    total = int(max(0.0, seconds)) if math.isfinite(seconds) else 0
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def suggested_title(from_unit: UnitDefinition, to_unit: UnitDefinition) -> str:
    """Default favourite title, e.g. "km → mi"."""
    return f"{from_unit.symbol} → {to_unit.symbol}"


def describe_conversion(input_value: float, from_unit: UnitDefinition | None,
                        output_value: float, to_unit: UnitDefinition | None,
                        precision: int = 2, grouping: bool = True) -> str:
    """One-line rendering such as "1 mi = 1,609.34 m". Missing units show "?"."""
    from_symbol = from_unit.symbol if from_unit is not None else "?"
    to_symbol = to_unit.symbol if to_unit is not None else "?"
    return (f"{format_value(input_value, precision, grouping)} {from_symbol} = "
            f"{format_value(output_value, precision, grouping)} {to_symbol}")
