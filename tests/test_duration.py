"""Tests for float_planner.duration — float time estimates."""

import pytest

from float_planner.duration import estimate, vessel_speed
from float_planner.errors import InvalidVesselSpeedError
from float_planner.models import VesselType

CANOE = VesselType("canoe", "canoe", 2.5, name="Canoe")
KAYAK = VesselType(
    "kayak", "kayak", 3.0, name="Kayak", speed_low_water_mph=2.4, speed_high_water_mph=4.0
)


class TestEstimate:

    def test_twelve_miles_by_canoe(self):
        result = estimate(12.0, CANOE)
        assert result.minutes == 288
        assert result.formatted == "4h 48m"
        assert result.speed_mph == 2.5

    def test_zero_distance(self):
        result = estimate(0.0, CANOE)
        assert result.minutes == 0
        assert result.formatted == "0m"

    def test_under_an_hour(self):
        assert estimate(1.0, CANOE).formatted == "24m"

    def test_whole_hours(self):
        assert estimate(5.0, CANOE).formatted == "2h 0m"

    def test_rounds_to_nearest_minute(self):
        # 1 mile at 2.5 mph = 24 min; 1.01 miles = 24.24 min
        assert estimate(1.01, CANOE).minutes == 24

    def test_canoe_ignores_condition(self):
        assert estimate(12.0, CANOE, "too_low").formatted == "4h 48m"
        assert estimate(12.0, CANOE, "high").formatted == "4h 48m"

    def test_negative_distance_raises(self):
        with pytest.raises(ValueError):
            estimate(-1.0, CANOE)

    def test_half_minute_rounds_up(self):
        # 0.75 mi at 2 mph is exactly 22.5 minutes
        assert estimate(0.75, VesselType("v", "v", 2.0)).minutes == 23

    @pytest.mark.parametrize("speed", [0.0, -1.0, float("nan")])
    def test_invalid_speed_raises(self, speed):
        with pytest.raises(InvalidVesselSpeedError) as exc_info:
            estimate(5.0, VesselType("bad", "bad", speed))
        assert exc_info.value.code == "INVALID_VESSEL_SPEED"
        assert exc_info.value.context["vessel_id"] == "bad"


class TestVesselSpeed:

    def test_base_speed_without_condition(self):
        assert vessel_speed(KAYAK) == 3.0

    @pytest.mark.parametrize("code", ["optimal", "unknown"])
    def test_base_speed_for_normal_conditions(self, code):
        assert vessel_speed(KAYAK, code) == 3.0

    @pytest.mark.parametrize("code", ["high", "dangerous"])
    def test_high_water_speed(self, code):
        assert vessel_speed(KAYAK, code) == 4.0

    def test_low_water_speeds(self):
        assert vessel_speed(KAYAK, "low") == pytest.approx(2.4)
        assert vessel_speed(KAYAK, "very_low") == pytest.approx(1.8)
        assert vessel_speed(KAYAK, "too_low") == pytest.approx(1.2)

    def test_slower_in_low_water(self):
        assert estimate(12.0, KAYAK, "low").minutes > estimate(12.0, KAYAK, "optimal").minutes


class TestSpeedValidation:
    """Every defined speed is checked, whatever the condition."""

    BROKEN_BASE = VesselType(
        "kayak", "kayak", 0.0, speed_low_water_mph=2.5, speed_high_water_mph=4.0
    )

    @pytest.mark.parametrize("code", ["too_low", "very_low", "low", "high", "dangerous", "optimal", None])
    def test_non_positive_base_always_raises(self, code):
        with pytest.raises(InvalidVesselSpeedError) as exc_info:
            estimate(12.0, self.BROKEN_BASE, code)
        assert exc_info.value.context["field"] == "base_speed_mph"

    def test_non_positive_high_water_raises_in_low_water(self):
        vessel = VesselType("raft", "raft", 2.0, speed_high_water_mph=-1.0)
        with pytest.raises(InvalidVesselSpeedError) as exc_info:
            estimate(5.0, vessel, "too_low")
        assert exc_info.value.context["field"] == "speed_high_water_mph"

    def test_nan_low_water_raises(self):
        vessel = VesselType("raft", "raft", 2.0, speed_low_water_mph=float("nan"))
        with pytest.raises(InvalidVesselSpeedError):
            estimate(5.0, vessel, "optimal")

    def test_unset_optional_speeds_are_fine(self):
        assert estimate(5.0, CANOE, "high").minutes == 120
