"""Data models for rivers, access points, gauges and float plans.

Records read from the data source (rivers, access points, gauges,
associations, vessel types, hazards) are frozen dataclasses: the
planner reads them and never mutates them. ``FloatPlan`` is computed per
request; ``FloatPlan.to_dict()`` produces the camelCase shape consumed
by API and presentation layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from float_planner.thresholds import UnitThresholds, swap

DOWNSTREAM = "downstream"
UPSTREAM = "upstream"


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class Coordinate:
    """A geographic position in decimal degrees (WGS84)."""

    lat: float
    lon: float

    def as_lonlat(self) -> list[float]:
        """GeoJSON ordering: ``[lon, lat]``."""
        return [self.lon, self.lat]

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lon}


@dataclass(frozen=True)
class River:
    """A river with its polyline ordered from headwater (mile 0) to mouth.

    Args:
        id: Stable identifier.
        name: Display name (e.g., "Current River").
        slug: URL-friendly name.
        geometry: Ordered vertices, headwater first.
        length_miles: Published river length. When set, the mile index
            is calibrated so the last vertex sits at this mile.
        active: Whether the river is shown to users.
    """

    id: str
    name: str
    slug: str = ""
    geometry: tuple[Coordinate, ...] = ()
    length_miles: float | None = None
    active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "lengthMiles": self.length_miles,
        }


@dataclass(frozen=True)
class AccessPoint:
    """A put-in / take-out location on a river.

    ``river_mile`` is derived from ``snapped`` (the nearest point on the
    river polyline); ``coordinate`` is the raw surveyed position.
    """

    id: str
    river_id: str
    name: str
    river_mile: float | None = None
    coordinate: Coordinate | None = None
    snapped: Coordinate | None = None
    types: frozenset[str] = frozenset()
    slug: str = ""
    is_public: bool = True
    fee_required: bool = False
    approved: bool = True

    @property
    def location(self) -> Coordinate | None:
        """Best available position: snapped, else raw."""
        return self.snapped or self.coordinate

    def to_dict(self) -> dict:
        location = self.location
        return {
            "id": self.id,
            "riverId": self.river_id,
            "name": self.name,
            "slug": self.slug,
            "riverMile": self.river_mile,
            "types": sorted(self.types),
            "isPublic": self.is_public,
            "feeRequired": self.fee_required,
            "coordinates": location.to_dict() if location else None,
        }


@dataclass(frozen=True)
class GaugeReading:
    """Latest snapshot from a gauge. Either value may be missing."""

    gauge_height_ft: float | None = None
    discharge_cfs: float | None = None
    timestamp: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return self.gauge_height_ft is None and self.discharge_cfs is None

    def age_hours(self, as_of: datetime) -> float | None:
        """Hours between the reading and ``as_of``, or None if undated."""
        if self.timestamp is None:
            return None
        return (as_utc(as_of) - as_utc(self.timestamp)).total_seconds() / 3600.0


@dataclass(frozen=True)
class GaugeStation:
    """A water-level sensor (e.g., a USGS monitoring location)."""

    id: str
    site_id: str
    name: str
    coordinate: Coordinate | None = None
    reading: GaugeReading | None = None
    active: bool = True


@dataclass(frozen=True)
class RiverGaugeAssociation:
    """Links a gauge station to a river, with thresholds for that river.

    Args:
        id: Association identifier.
        river_id: River the thresholds apply to.
        gauge_station_id: The linked station.
        is_primary: Whether this gauge governs the river's condition.
        thresholds: Primary and alternate unit tier sets.
        distance_from_section_miles: How far the gauge sits from the
            floated section, or None when unknown.
        accuracy_warning_threshold_miles: Distance beyond which readings
            are flagged as less reliable. None uses the configured default.
    """

    id: str
    river_id: str
    gauge_station_id: str
    is_primary: bool = False
    thresholds: UnitThresholds = field(default_factory=UnitThresholds)
    distance_from_section_miles: float | None = None
    accuracy_warning_threshold_miles: float | None = None

    @property
    def threshold_unit(self) -> str:
        return self.thresholds.unit

    def with_unit(self, unit: str) -> RiverGaugeAssociation:
        """Return a copy whose primary threshold unit is ``unit``."""
        swapped = swap(self.thresholds, unit)
        if swapped is self.thresholds:
            return self
        return replace(self, thresholds=swapped)


@dataclass(frozen=True)
class VesselType:
    """A paddling craft category with its travel speeds in mph.

    Vessels carrying only ``base_speed_mph`` float at that speed in all
    conditions. The optional low/high water speeds let the estimator
    adjust for flow.
    """

    id: str
    slug: str
    base_speed_mph: float
    name: str = ""
    speed_low_water_mph: float | None = None
    speed_high_water_mph: float | None = None
    sort_order: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "slug": self.slug,
            "name": self.name or self.slug,
            "baseSpeedMph": self.base_speed_mph,
        }


@dataclass(frozen=True)
class Hazard:
    """A point-like obstacle on a river (low-water bridge, strainer, ...)."""

    id: str
    river_id: str
    name: str
    river_mile: float
    type: str = ""
    severity: str = ""
    active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "riverMile": self.river_mile,
            "type": self.type,
            "severity": self.severity,
        }


# ── Plan result ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Distance:
    miles: float
    formatted: str

    def to_dict(self) -> dict:
        return {"miles": self.miles, "formatted": self.formatted}


@dataclass(frozen=True)
class FloatTime:
    minutes: int
    formatted: str
    speed_mph: float

    def to_dict(self) -> dict:
        return {"minutes": self.minutes, "formatted": self.formatted, "speedMph": self.speed_mph}


@dataclass(frozen=True)
class Condition:
    """Flow condition reported with a plan."""

    code: str
    label: str
    gauge_height_ft: float | None = None
    discharge_cfs: float | None = None
    gauge_name: str | None = None
    source_url: str | None = None
    accuracy_warning: bool = False
    accuracy_warning_reason: str | None = None
    reading_timestamp: datetime | None = None
    reading_age_hours: float | None = None
    advisory: bool = False

    def to_dict(self) -> dict:
        data = {
            "code": self.code,
            "label": self.label,
            "gaugeHeightFt": self.gauge_height_ft,
            "dischargeCfs": self.discharge_cfs,
            "gaugeName": self.gauge_name,
            "sourceUrl": self.source_url,
            "readingTimestamp": (
                self.reading_timestamp.isoformat() if self.reading_timestamp else None
            ),
            "readingAgeHours": self.reading_age_hours,
        }
        if self.accuracy_warning:
            data["accuracyWarning"] = True
            data["accuracyWarningReason"] = self.accuracy_warning_reason
        return data


@dataclass(frozen=True)
class FloatPlan:
    """A computed float trip. Immutable and never persisted."""

    river: River
    put_in: AccessPoint
    take_out: AccessPoint
    distance: Distance
    direction: str
    float_time: FloatTime
    vessel: VesselType
    condition: Condition
    hazards: tuple[Hazard, ...] = ()
    warnings: tuple[str, ...] = ()
    route: tuple[Coordinate, ...] = ()

    def to_dict(self) -> dict:
        return {
            "river": self.river.to_dict(),
            "putIn": self.put_in.to_dict(),
            "takeOut": self.take_out.to_dict(),
            "distance": self.distance.to_dict(),
            "direction": self.direction,
            "floatTime": self.float_time.to_dict(),
            "vessel": self.vessel.to_dict(),
            "condition": self.condition.to_dict(),
            "hazards": [h.to_dict() for h in self.hazards],
            "warnings": list(self.warnings),
            "route": {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [c.as_lonlat() for c in self.route],
                },
                "properties": {},
            },
        }
