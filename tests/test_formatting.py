"""Tests for float_planner.formatting — display helpers.

The module must handle:
- Fixed-decimal formatting (fmt)
- Distances (fmt_miles)
- Float times (fmt_duration)
- Gauge readings with units (fmt_reading)
- Reading ages (fmt_age)
"""

import pytest

from float_planner.formatting import fmt, fmt_age, fmt_duration, fmt_miles, fmt_reading


# ── fmt() tests ──────────────────────────────────────────────────────────

class TestFmt:
    """Format a number with fixed decimal places."""

    def test_basic_positive(self):
        assert fmt(1.23456, 3) == "1.235"

    def test_default_decimals(self):
        assert fmt(1.23456) == "1.235"

    def test_integer_input(self):
        assert fmt(42, 1) == "42.0"

    def test_none_returns_dash(self):
        """None should return an em-dash '—'."""
        assert fmt(None) == "—"

    def test_nan_returns_dash(self):
        assert fmt(float("nan")) == "—"

    def test_inf_returns_dash(self):
        assert fmt(float("inf")) == "—"

    def test_comma(self):
        assert fmt(12345.6, 1, comma=True) == "12,345.6"


# ── fmt_miles() tests ────────────────────────────────────────────────────

class TestFmtMiles:

    def test_one_decimal(self):
        assert fmt_miles(12.0) == "12.0 mi"

    def test_rounds(self):
        assert fmt_miles(12.04) == "12.0 mi"
        assert fmt_miles(3.96) == "4.0 mi"

    def test_custom_decimals(self):
        assert fmt_miles(1.234, 2) == "1.23 mi"

    def test_missing(self):
        assert fmt_miles(None) == "—"


# ── fmt_duration() tests ─────────────────────────────────────────────────

class TestFmtDuration:

    @pytest.mark.parametrize("minutes, expected", [
        (288, "4h 48m"),
        (45, "45m"),
        (0, "0m"),
        (60, "1h 0m"),
        (120, "2h 0m"),
        (61, "1h 1m"),
        (600, "10h 0m"),
    ])
    def test_formats(self, minutes, expected):
        assert fmt_duration(minutes) == expected

    def test_none(self):
        assert fmt_duration(None) == "—"


# ── fmt_reading() tests ──────────────────────────────────────────────────

class TestFmtReading:

    def test_feet_two_decimals(self):
        assert fmt_reading(3.25, "ft") == "3.25 ft"
        assert fmt_reading(1.2, "ft") == "1.20 ft"

    def test_cfs_comma_whole_number(self):
        assert fmt_reading(1250.0, "cfs") == "1,250 cfs"
        assert fmt_reading(95, "cfs") == "95 cfs"

    def test_missing(self):
        assert fmt_reading(None, "ft") == "—"
        assert fmt_reading(float("nan"), "cfs") == "—"


# ── fmt_age() tests ──────────────────────────────────────────────────────

class TestFmtAge:

    def test_minutes(self):
        assert fmt_age(0.5) == "30 min ago"

    def test_hours(self):
        assert fmt_age(5.0) == "5.0 h ago"
        assert fmt_age(72.0) == "72.0 h ago"

    def test_missing(self):
        assert fmt_age(None) == "—"
