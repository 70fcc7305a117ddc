"""Flow condition classification against six-tier gauge thresholds.

A river/gauge association stores its thresholds twice: once in its
primary unit and once in the alternate unit (feet of gauge height vs.
cubic feet per second of discharge). ``UnitThresholds`` keeps both tier
sets in one tagged structure so a unit toggle always swaps all six
tiers together.

Classification walks an ordered rule list, most severe first:

    dangerous > high > optimal > low > very_low > too_low > unknown

Usage::

    from float_planner.thresholds import TierSet, classify

    tiers = TierSet(too_low=1.5, low=2, optimal_min=3, optimal_max=5,
                    high=7, dangerous=9)
    classify(4.0, tiers)     # 'optimal'
    classify(None, tiers)    # 'unknown'
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Mapping, TypeVar

UNIT_FT = "ft"
UNIT_CFS = "cfs"
UNITS = (UNIT_FT, UNIT_CFS)

DANGEROUS = "dangerous"
HIGH = "high"
OPTIMAL = "optimal"
LOW = "low"
VERY_LOW = "very_low"
TOO_LOW = "too_low"
UNKNOWN = "unknown"

# Evaluation priority, most severe first
CONDITION_CODES = (DANGEROUS, HIGH, OPTIMAL, LOW, VERY_LOW, TOO_LOW, UNKNOWN)

CONDITION_LABELS = {
    DANGEROUS: "Dangerous - Do Not Float",
    HIGH: "High Water - Experienced Only",
    OPTIMAL: "Optimal Conditions",
    LOW: "Okay - Floatable",
    VERY_LOW: "Low - Scraping Likely",
    TOO_LOW: "Too Low - Not Recommended",
    UNKNOWN: "Unknown",
}

SHORT_LABELS = {
    DANGEROUS: "Flood",
    HIGH: "High",
    OPTIMAL: "Optimal",
    LOW: "Okay",
    VERY_LOW: "Low",
    TOO_LOW: "Too Low",
    UNKNOWN: "Unknown",
}

# Ordering for gauge lists, not for classification
DISPLAY_RANK = {
    OPTIMAL: 0,
    LOW: 1,
    VERY_LOW: 2,
    HIGH: 3,
    TOO_LOW: 4,
    DANGEROUS: 5,
    UNKNOWN: 6,
}

FLOATABLE = frozenset({OPTIMAL, HIGH, LOW, VERY_LOW})

TIER_NAMES = ("too_low", "low", "optimal_min", "optimal_max", "high", "dangerous")

T = TypeVar("T")


def _is_missing(x) -> bool:
    return x is None or (isinstance(x, float) and math.isnan(x))


@dataclass(frozen=True)
class TierSet:
    """Six optional threshold boundaries in one unit.

    Any tier may be None, meaning that boundary does not apply. Defined
    tiers must be non-decreasing in the order too_low, low, optimal_min,
    optimal_max, high, dangerous.

    Raises:
        ValueError: If the defined tiers are out of order.
    """

    too_low: float | None = None
    low: float | None = None
    optimal_min: float | None = None
    optimal_max: float | None = None
    high: float | None = None
    dangerous: float | None = None

    def __post_init__(self):
        previous_name, previous = None, None
        for name in TIER_NAMES:
            value = getattr(self, name)
            if _is_missing(value):
                object.__setattr__(self, name, None)
                continue
            value = float(value)
            object.__setattr__(self, name, value)
            if previous is not None and value < previous:
                raise ValueError(
                    f"Threshold {name}={value} is below {previous_name}={previous}"
                )
            previous_name, previous = name, value

    @property
    def is_empty(self) -> bool:
        """True when no tier is defined."""
        return all(getattr(self, name) is None for name in TIER_NAMES)

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in TIER_NAMES}

    @classmethod
    def from_dict(cls, data: Mapping | None) -> "TierSet":
        """Build from a mapping using snake_case or camelCase tier keys."""
        if not data:
            return cls()
        aliases = {
            "tooLow": "too_low",
            "optimalMin": "optimal_min",
            "optimalMax": "optimal_max",
        }
        kwargs = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name in TIER_NAMES:
                kwargs[name] = value
        return cls(**kwargs)


# (code, predicate) pairs evaluated in order; the first match wins
_RULES: tuple[tuple[str, Callable[[float, TierSet], bool]], ...] = (
    (DANGEROUS, lambda r, t: t.dangerous is not None and r >= t.dangerous),
    (HIGH, lambda r, t: t.high is not None and r >= t.high),
    (
        OPTIMAL,
        lambda r, t: (
            t.optimal_min is not None
            and t.optimal_max is not None
            and t.optimal_min <= r <= t.optimal_max
        ),
    ),
    (LOW, lambda r, t: t.low is not None and r >= t.low),
    (VERY_LOW, lambda r, t: t.too_low is not None and r >= t.too_low),
    (TOO_LOW, lambda r, t: t.too_low is not None and r < t.too_low),
)


def classify(reading: float | None, tiers: TierSet | None) -> str:
    """Map one reading to a condition code.

    Args:
        reading: Gauge value in the same unit as ``tiers``. None or NaN
            means no reading.
        tiers: Threshold set to compare against.

    Returns:
        One of ``CONDITION_CODES``. ``'unknown'`` when the reading is
        missing, no tier is defined, or no rule applies.

    Examples:
        >>> classify(1.0, TierSet(too_low=1.5))
        'too_low'
        >>> classify(2.5, TierSet(too_low=1.5, low=2, optimal_min=3))
        'low'
    """
    if _is_missing(reading) or tiers is None or tiers.is_empty:
        return UNKNOWN
    for code, applies in _RULES:
        if applies(reading, tiers):
            return code
    return UNKNOWN


@dataclass(frozen=True)
class UnitThresholds:
    """Tiers in the primary unit plus the mirrored alternate-unit tiers.

    Args:
        unit: Primary unit, ``'ft'`` or ``'cfs'``.
        tiers: Thresholds expressed in ``unit``.
        alt_tiers: The same boundaries expressed in the other unit.
    """

    unit: str = UNIT_FT
    tiers: TierSet = field(default_factory=TierSet)
    alt_tiers: TierSet = field(default_factory=TierSet)

    def __post_init__(self):
        if self.unit not in UNITS:
            raise ValueError(f"Unknown threshold unit {self.unit!r}; expected one of {UNITS}")

    @property
    def alt_unit(self) -> str:
        return UNIT_CFS if self.unit == UNIT_FT else UNIT_FT

    def tiers_for(self, unit: str) -> TierSet:
        """Return the tier set expressed in ``unit``."""
        if unit == self.unit:
            return self.tiers
        if unit == self.alt_unit:
            return self.alt_tiers
        raise ValueError(f"Unknown threshold unit {unit!r}; expected one of {UNITS}")


def swap(thresholds: UnitThresholds, new_unit: str) -> UnitThresholds:
    """Make ``new_unit`` the primary unit.

    Exchanges the primary and alternate tier sets as a whole and flips
    the unit tag. Returns ``thresholds`` unchanged when ``new_unit`` is
    already primary. Swapping back restores the original value.

    Raises:
        ValueError: If ``new_unit`` is not a known unit.
    """
    if new_unit not in UNITS:
        raise ValueError(f"Unknown threshold unit {new_unit!r}; expected one of {UNITS}")
    if new_unit == thresholds.unit:
        return thresholds
    return replace(
        thresholds,
        unit=new_unit,
        tiers=thresholds.alt_tiers,
        alt_tiers=thresholds.tiers,
    )


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a gauge reading snapshot."""

    code: str
    value: float | None = None
    unit: str | None = None

    @property
    def label(self) -> str:
        return CONDITION_LABELS[self.code]


def _reading_value(reading, unit: str) -> float | None:
    if reading is None:
        return None
    value = reading.gauge_height_ft if unit == UNIT_FT else reading.discharge_cfs
    return None if _is_missing(value) else value


def classify_reading(reading, thresholds: UnitThresholds | None) -> Classification:
    """Classify a reading snapshot against an association's thresholds.

    The value in the primary unit is used when present; otherwise the
    alternate-unit value is classified against the alternate tiers.

    Args:
        reading: Object with ``gauge_height_ft`` and ``discharge_cfs``
            attributes (``models.GaugeReading``), or None.
        thresholds: The association's thresholds, or None.
    """
    if thresholds is None:
        return Classification(UNKNOWN)
    for unit in (thresholds.unit, thresholds.alt_unit):
        value = _reading_value(reading, unit)
        if value is None:
            continue
        tiers = thresholds.tiers_for(unit)
        if tiers.is_empty:
            continue
        return Classification(classify(value, tiers), value, unit)
    return Classification(UNKNOWN)


def condition_label(code: str) -> str:
    return CONDITION_LABELS.get(code, CONDITION_LABELS[UNKNOWN])


def short_label(code: str) -> str:
    return SHORT_LABELS.get(code, SHORT_LABELS[UNKNOWN])


def is_floatable(code: str) -> bool:
    """Whether a condition code still allows floating."""
    return code in FLOATABLE


def rank_by_severity(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Sort items by the display rank of their condition code.

    Unrecognized codes sort with ``'unknown'``. The sort is stable, so
    items with the same code keep their incoming order.
    """
    unknown_rank = DISPLAY_RANK[UNKNOWN]
    return sorted(items, key=lambda item: DISPLAY_RANK.get(key(item), unknown_rank))

