"""Display formatting for float plans.

Provides consistent formatting for distances, float times, gauge
readings and reading ages. Uses em-dash ('—') as the standard
sentinel for missing or invalid values (None, NaN, inf).

Usage::

    from float_planner.formatting import fmt, fmt_miles, fmt_duration, fmt_reading

    fmt(1.23456)              # '1.235'
    fmt_miles(12.0)           # '12.0 mi'
    fmt_duration(288)         # '4h 48m'
    fmt_duration(45)          # '45m'
    fmt_reading(3.25, "ft")   # '3.25 ft'
    fmt_reading(1250, "cfs")  # '1,250 cfs'
"""

import math
from typing import Optional, Union

# Sentinel for missing/invalid values
_DASH = "—"

Numeric = Optional[Union[int, float]]


def _is_missing(x: Numeric) -> bool:
    """Check if a value is None, NaN, or infinite."""
    if x is None:
        return True
    if isinstance(x, float) and (math.isnan(x) or math.isinf(x)):
        return True
    return False


def fmt(x: Numeric, decimals: int = 3, comma: bool = False) -> str:
    """Format a number with fixed decimal places.

    Args:
        x: The number to format. Returns em-dash for None/NaN/inf.
        decimals: Number of decimal places (default 3).
        comma: If True, add thousands separators (default False).

    Returns:
        Formatted string, or '—' if the value is missing.

    Examples:
        >>> fmt(1.23456)
        '1.235'
        >>> fmt(None)
        '—'
        >>> fmt(12345.6, 1, comma=True)
        '12,345.6'
    """
    if _is_missing(x):
        return _DASH
    sep = "," if comma else ""
    return f"{x:{sep}.{decimals}f}"


def fmt_miles(x: Numeric, decimals: int = 1) -> str:
    """Format a distance in miles.

    Examples:
        >>> fmt_miles(12.0)
        '12.0 mi'
        >>> fmt_miles(0.04)
        '0.0 mi'
    """
    if _is_missing(x):
        return _DASH
    return f"{x:.{decimals}f} mi"


def fmt_duration(minutes: Optional[int]) -> str:
    """Format a whole number of minutes as hours and minutes.

    The hour component is omitted when it is zero.

    Examples:
        >>> fmt_duration(288)
        '4h 48m'
        >>> fmt_duration(45)
        '45m'
        >>> fmt_duration(0)
        '0m'
        >>> fmt_duration(120)
        '2h 0m'
    """
    if minutes is None:
        return _DASH
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    return f"{hours}h {mins}m"


def fmt_reading(x: Numeric, unit: str) -> str:
    """Format a gauge value with its unit.

    Gauge heights keep two decimals; discharge is shown as a whole
    number with thousands separators.

    Examples:
        >>> fmt_reading(3.25, "ft")
        '3.25 ft'
        >>> fmt_reading(1250.0, "cfs")
        '1,250 cfs'
    """
    if _is_missing(x):
        return _DASH
    if unit == "cfs":
        return f"{x:,.0f} cfs"
    return f"{x:.2f} {unit}"


def fmt_age(hours: Numeric) -> str:
    """Format a reading age.

    Examples:
        >>> fmt_age(0.5)
        '30 min ago'
        >>> fmt_age(5.25)
        '5.2 h ago'
    """
    if _is_missing(hours):
        return _DASH
    if hours < 1:
        return f"{round(hours * 60)} min ago"
    return f"{hours:.1f} h ago"
