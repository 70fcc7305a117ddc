"""Fatal errors raised while assembling a float plan.

Each error kind carries a stable ``code`` so request handlers can show a
distinct message per kind instead of a generic failure. Degraded gauge
data is never an error; see ``float_planner.gauges`` and
``float_planner.thresholds`` for how those cases are downgraded.
"""

from __future__ import annotations

from typing import Any, Mapping


class FloatPlanError(Exception):
    """Base class for errors that abort a plan request.

    Args:
        message: Human-readable description. Defaults to the class
            ``default_message``.
        context: Identifiers that help locate the offending record
            (river id, access point id, ...).
    """

    code = "FLOAT_PLAN_ERROR"
    default_message = "The float plan could not be computed"

    def __init__(self, message: str | None = None, *, context: Mapping[str, Any] | None = None):
        self.message = message or self.default_message
        self.context = dict(context or {})
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize for an API response body."""
        return {"error": self.code, "message": self.message, "context": dict(self.context)}


class RiverNotFoundError(FloatPlanError, LookupError):
    code = "RIVER_NOT_FOUND"
    default_message = "River not found"


class AccessPointNotFoundError(FloatPlanError, LookupError):
    code = "ACCESS_POINT_NOT_FOUND"
    default_message = "Access point not found on this river"


class VesselNotFoundError(FloatPlanError, LookupError):
    code = "VESSEL_NOT_FOUND"
    default_message = "Vessel type not found"


class GeometryMissingError(FloatPlanError, ValueError):
    code = "GEOMETRY_MISSING"
    default_message = "River geometry needs at least two distinct vertices"


class SamePointError(FloatPlanError, ValueError):
    code = "SAME_POINT"
    default_message = "Put-in and take-out are at the same river mile"


class InvalidVesselSpeedError(FloatPlanError, ValueError):
    code = "INVALID_VESSEL_SPEED"
    default_message = "Vessel speed must be positive"
