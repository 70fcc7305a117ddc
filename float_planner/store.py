"""Read-only data access for the planner.

``PlanDataSource`` describes what the planner needs from persistence;
any object with these methods can back a plan (a database adapter, an
API client, ...). ``SnapshotStore`` is the in-memory implementation,
loaded from a dict or a JSON snapshot file.

Snapshot layout (coordinates are GeoJSON ``[lon, lat]`` pairs)::

    {
        "rivers": [{"id": "current", "name": "Current River",
                    "length_miles": 184, "geometry": [[-91.6, 37.5], ...]}],
        "access_points": [{"id": "akers", "river_id": "current",
                           "name": "Akers Ferry", "river_mile": 55.2}],
        "gauge_stations": [{"id": "g1", "site_id": "07064533", "name": "...",
                            "coordinate": [-91.4, 37.3],
                            "reading": {"gauge_height_ft": 2.9,
                                        "discharge_cfs": 410,
                                        "timestamp": "2026-06-01T12:00:00Z"}}],
        "associations": [{"id": "a1", "river_id": "current",
                          "gauge_station_id": "g1", "is_primary": true,
                          "threshold_unit": "ft",
                          "tiers": {"too_low": 1.5, "low": 2.0, ...},
                          "alt_tiers": {"too_low": 150, ...}}],
        "vessel_types": [{"id": "canoe", "slug": "canoe", "base_speed_mph": 2.5}],
        "hazards": [{"id": "h1", "river_id": "current",
                     "name": "Low-water bridge", "river_mile": 60.1}]
    }
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Protocol

from float_planner.errors import AccessPointNotFoundError, RiverNotFoundError, VesselNotFoundError
from float_planner.models import (
    AccessPoint,
    Coordinate,
    GaugeReading,
    GaugeStation,
    Hazard,
    River,
    RiverGaugeAssociation,
    VesselType,
)
from float_planner.thresholds import TierSet, UnitThresholds

logger = logging.getLogger(__name__)


class PlanDataSource(Protocol):
    """Read-only records consumed by the planner."""

    def get_river(self, river_id: str) -> River: ...

    def list_rivers(self) -> list[River]: ...

    def get_access_point(self, access_point_id: str) -> AccessPoint: ...

    def get_gauge_associations_for_river(self, river_id: str) -> list[RiverGaugeAssociation]: ...

    def get_gauge_station(self, gauge_station_id: str) -> GaugeStation | None: ...

    def list_gauge_stations(self) -> list[GaugeStation]: ...

    def get_latest_reading(self, gauge_station_id: str) -> GaugeReading | None: ...

    def get_hazards_for_river(self, river_id: str) -> list[Hazard]: ...

    def get_vessel_type(self, vessel_id: str | None = None) -> VesselType: ...


# ── Record parsing ───────────────────────────────────────────────────────


def _coord(value) -> Coordinate | None:
    """Parse ``[lon, lat]`` or ``{"lat": .., "lon"/"lng": ..}``."""
    if value is None:
        return None
    if isinstance(value, dict):
        lon = value.get("lon", value.get("lng"))
        return Coordinate(float(value["lat"]), float(lon))
    lon, lat = value[0], value[1]
    return Coordinate(float(lat), float(lon))


def _float(value) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_reading(data: dict | None) -> GaugeReading | None:
    if not data:
        return None
    return GaugeReading(
        gauge_height_ft=_float(data.get("gauge_height_ft")),
        discharge_cfs=_float(data.get("discharge_cfs")),
        timestamp=parse_timestamp(data.get("timestamp")),
    )


def parse_river(data: dict) -> River:
    return River(
        id=str(data["id"]),
        name=data["name"],
        slug=data.get("slug", ""),
        geometry=tuple(_coord(v) for v in data.get("geometry", [])),
        length_miles=_float(data.get("length_miles")),
        active=data.get("active", True),
    )


def parse_access_point(data: dict) -> AccessPoint:
    return AccessPoint(
        id=str(data["id"]),
        river_id=str(data["river_id"]),
        name=data["name"],
        river_mile=_float(data.get("river_mile")),
        coordinate=_coord(data.get("coordinate")),
        snapped=_coord(data.get("snapped")),
        types=frozenset(data.get("types", [])),
        slug=data.get("slug", ""),
        is_public=data.get("is_public", True),
        fee_required=data.get("fee_required", False),
        approved=data.get("approved", True),
    )


def parse_gauge_station(data: dict) -> GaugeStation:
    return GaugeStation(
        id=str(data["id"]),
        site_id=str(data.get("site_id", "")),
        name=data["name"],
        coordinate=_coord(data.get("coordinate")),
        reading=parse_reading(data.get("reading")),
        active=data.get("active", True),
    )


def parse_association(data: dict) -> RiverGaugeAssociation:
    thresholds = UnitThresholds(
        unit=data.get("threshold_unit", "ft"),
        tiers=TierSet.from_dict(data.get("tiers")),
        alt_tiers=TierSet.from_dict(data.get("alt_tiers")),
    )
    return RiverGaugeAssociation(
        id=str(data["id"]),
        river_id=str(data["river_id"]),
        gauge_station_id=str(data["gauge_station_id"]),
        is_primary=data.get("is_primary", False),
        thresholds=thresholds,
        distance_from_section_miles=_float(data.get("distance_from_section_miles")),
        accuracy_warning_threshold_miles=_float(data.get("accuracy_warning_threshold_miles")),
    )


def parse_vessel_type(data: dict) -> VesselType:
    return VesselType(
        id=str(data["id"]),
        slug=data.get("slug", str(data["id"])),
        name=data.get("name", ""),
        base_speed_mph=float(data["base_speed_mph"]),
        speed_low_water_mph=_float(data.get("speed_low_water_mph")),
        speed_high_water_mph=_float(data.get("speed_high_water_mph")),
        sort_order=int(data.get("sort_order", 0)),
    )


def parse_hazard(data: dict) -> Hazard:
    return Hazard(
        id=str(data["id"]),
        river_id=str(data["river_id"]),
        name=data["name"],
        river_mile=float(data["river_mile"]),
        type=data.get("type", ""),
        severity=data.get("severity", ""),
        active=data.get("active", True),
    )


# ── In-memory store ──────────────────────────────────────────────────────


class SnapshotStore:
    """In-memory ``PlanDataSource`` over a fixed set of records.

    Records are never modified after construction, so a store can serve
    any number of concurrent plan requests.
    """

    def __init__(
        self,
        *,
        rivers: Iterable[River] = (),
        access_points: Iterable[AccessPoint] = (),
        gauge_stations: Iterable[GaugeStation] = (),
        associations: Iterable[RiverGaugeAssociation] = (),
        vessel_types: Iterable[VesselType] = (),
        hazards: Iterable[Hazard] = (),
    ):
        self._rivers = {r.id: r for r in rivers}
        self._slugs = {r.slug: r.id for r in self._rivers.values() if r.slug}
        self._access_points = {ap.id: ap for ap in access_points}
        self._stations = {g.id: g for g in gauge_stations}
        self._associations = list(associations)
        self._vessels = {v.id: v for v in vessel_types}
        self._hazards = list(hazards)

    @classmethod
    def from_dict(cls, data: dict) -> SnapshotStore:
        """Build a store from a snapshot mapping (see module docstring)."""
        store = cls(
            rivers=[parse_river(d) for d in data.get("rivers", [])],
            access_points=[parse_access_point(d) for d in data.get("access_points", [])],
            gauge_stations=[parse_gauge_station(d) for d in data.get("gauge_stations", [])],
            associations=[parse_association(d) for d in data.get("associations", [])],
            vessel_types=[parse_vessel_type(d) for d in data.get("vessel_types", [])],
            hazards=[parse_hazard(d) for d in data.get("hazards", [])],
        )
        logger.debug(
            "Loaded snapshot: %d rivers, %d access points, %d gauges",
            len(store._rivers), len(store._access_points), len(store._stations),
        )
        return store

    @classmethod
    def from_json(cls, path: str | Path) -> SnapshotStore:
        """Load a store from a JSON snapshot file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    # ── PlanDataSource ────────────────────────────────────────────────────

    def get_river(self, river_id: str) -> River:
        """Look up a river by id, falling back to slug.

        Raises:
            RiverNotFoundError: If no river matches.
        """
        river = self._rivers.get(river_id)
        if river is None and river_id in self._slugs:
            river = self._rivers[self._slugs[river_id]]
        if river is None:
            raise RiverNotFoundError(context={"river_id": river_id})
        return river

    def get_access_point(self, access_point_id: str) -> AccessPoint:
        """Look up an approved access point.

        Raises:
            AccessPointNotFoundError: If the id is unknown or the point
                has not been approved.
        """
        ap = self._access_points.get(access_point_id)
        if ap is None or not ap.approved:
            raise AccessPointNotFoundError(context={"access_point_id": access_point_id})
        return ap

    def get_gauge_associations_for_river(self, river_id: str) -> list[RiverGaugeAssociation]:
        return [a for a in self._associations if a.river_id == river_id]

    def get_gauge_station(self, gauge_station_id: str) -> GaugeStation | None:
        return self._stations.get(gauge_station_id)

    def list_gauge_stations(self) -> list[GaugeStation]:
        return [g for g in self._stations.values() if g.active]

    def get_latest_reading(self, gauge_station_id: str) -> GaugeReading | None:
        station = self._stations.get(gauge_station_id)
        return station.reading if station else None

    def get_hazards_for_river(self, river_id: str) -> list[Hazard]:
        return [h for h in self._hazards if h.river_id == river_id and h.active]

    def get_vessel_type(self, vessel_id: str | None = None) -> VesselType:
        """Look up a vessel by id or slug; None selects the default vessel.

        The default is the vessel with the lowest ``sort_order``.

        Raises:
            VesselNotFoundError: If nothing matches.
        """
        if vessel_id is None:
            if not self._vessels:
                raise VesselNotFoundError("No vessel types are configured")
            return min(self._vessels.values(), key=lambda v: (v.sort_order, v.id))
        vessel = self._vessels.get(vessel_id)
        if vessel is None:
            vessel = next((v for v in self._vessels.values() if v.slug == vessel_id), None)
        if vessel is None:
            raise VesselNotFoundError(context={"vessel_id": vessel_id})
        return vessel

    def list_rivers(self) -> list[River]:
        return [r for r in self._rivers.values() if r.active]
