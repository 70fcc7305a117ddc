"""Float time estimation from distance and vessel type."""

import math

from float_planner.errors import InvalidVesselSpeedError
from float_planner.formatting import fmt_duration
from float_planner.models import FloatTime, VesselType
from float_planner.thresholds import DANGEROUS, HIGH, LOW, TOO_LOW, VERY_LOW

# Fraction of the low-water speed kept when the river is scraping bottom
VERY_LOW_FACTOR = 0.75
TOO_LOW_FACTOR = 0.5


def vessel_speed(vessel: VesselType, condition_code: str | None = None) -> float:
    """Travel speed in mph for a vessel under a flow condition.

    Vessels without low/high water speeds use their baseline speed for
    every condition.
    """
    speed = vessel.base_speed_mph
    if condition_code in (HIGH, DANGEROUS) and vessel.speed_high_water_mph is not None:
        speed = vessel.speed_high_water_mph
    elif vessel.speed_low_water_mph is not None:
        if condition_code == LOW:
            speed = vessel.speed_low_water_mph
        elif condition_code == VERY_LOW:
            speed = vessel.speed_low_water_mph * VERY_LOW_FACTOR
        elif condition_code == TOO_LOW:
            speed = vessel.speed_low_water_mph * TOO_LOW_FACTOR
    return speed


def check_speeds(vessel: VesselType):
    """Reject a vessel whose baseline or water-level speed is not positive.

    Every defined speed is checked, so the outcome does not depend on the
    current flow condition.

    Raises:
        InvalidVesselSpeedError: On the first non-positive or NaN speed.
    """
    speeds = (
        ("base_speed_mph", vessel.base_speed_mph),
        ("speed_low_water_mph", vessel.speed_low_water_mph),
        ("speed_high_water_mph", vessel.speed_high_water_mph),
    )
    for name, speed in speeds:
        if name != "base_speed_mph" and speed is None:
            continue
        if speed is None or math.isnan(speed) or speed <= 0:
            raise InvalidVesselSpeedError(
                f"Vessel '{vessel.slug}' has non-positive {name} {speed}",
                context={"vessel_id": vessel.id, "field": name, "speed_mph": speed},
            )


def estimate(distance_miles: float, vessel: VesselType, condition_code: str | None = None) -> FloatTime:
    """Estimate float time for a distance.

    Args:
        distance_miles: Paddling distance, zero or more.
        vessel: Vessel type supplying the speed.
        condition_code: Current flow condition, used only by vessels
            that define low/high water speeds.

    Returns:
        ``FloatTime`` with whole minutes (halves round up), a
        ``"{h}h {m}m"`` string and the speed used.

    Raises:
        InvalidVesselSpeedError: If any of the vessel's speeds is not a
            positive number.
        ValueError: If ``distance_miles`` is negative.

    Examples:
        >>> estimate(12.0, VesselType("c", "canoe", 2.5)).formatted
        '4h 48m'
    """
    if distance_miles < 0:
        raise ValueError(f"Distance must be non-negative, got {distance_miles}")

    check_speeds(vessel)
    speed = vessel_speed(vessel, condition_code)
    minutes = math.floor(distance_miles / speed * 60 + 0.5)
    return FloatTime(minutes=minutes, formatted=fmt_duration(minutes), speed_mph=round(speed, 1))
