"""Assemble float plans from river, access point and gauge records.

``PlanAssembler.plan()`` is the single entry point for a trip: it
resolves both access points to river miles, extracts the route,
estimates float time, classifies the governing gauge's latest reading,
collects hazards along the way and gathers user-facing warnings.

Fatal problems (unknown river or access point, missing geometry, same
put-in and take-out, invalid vessel speed) raise a ``FloatPlanError``.
Missing, stale or distant gauge data never raises: the plan is returned
with an ``unknown`` condition or an accuracy warning instead.

Usage::

    from float_planner.planner import PlanAssembler
    from float_planner.store import SnapshotStore

    assembler = PlanAssembler(SnapshotStore.from_json("snapshot.json"))
    plan = assembler.plan("current", "akers", "pulltite", vessel_id="canoe")
    plan.distance.formatted    # '12.0 mi'
    plan.float_time.formatted  # '4h 48m'
    plan.condition.code        # 'optimal'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from float_planner import duration, route
from float_planner.config import PlannerConfig
from float_planner.errors import AccessPointNotFoundError, SamePointError
from float_planner.formatting import fmt_miles
from float_planner.gauges import GaugeResolver, GaugeSelection
from float_planner.mile_index import MileIndex, MileIndexCache
from float_planner.models import (
    UPSTREAM,
    AccessPoint,
    Condition,
    Distance,
    FloatPlan,
    GaugeReading,
    Hazard,
)
from float_planner.store import PlanDataSource
from float_planner.thresholds import (
    DANGEROUS,
    HIGH,
    TOO_LOW,
    UNKNOWN,
    VERY_LOW,
    classify_reading,
    condition_label,
    rank_by_severity,
)

logger = logging.getLogger(__name__)

UPSTREAM_WARNING = "Take-out is upstream of the put-in; you will be paddling against the current"
DANGEROUS_WARNING = "Water conditions are dangerous - do not float"
HIGH_WARNING = "High water conditions - experienced paddlers only"
LOW_WARNING = "Water levels are very low - scraping and portaging likely"


@dataclass(frozen=True)
class GaugeCondition:
    """One row of a river-wide gauge condition listing."""

    river_id: str
    river_name: str
    gauge_name: str
    site_id: str
    is_primary: bool
    code: str
    label: str
    value: float | None = None
    unit: str | None = None
    gauge_height_ft: float | None = None
    discharge_cfs: float | None = None
    reading_age_hours: float | None = None

    def to_dict(self) -> dict:
        return {
            "riverId": self.river_id,
            "riverName": self.river_name,
            "gaugeName": self.gauge_name,
            "siteId": self.site_id,
            "isPrimary": self.is_primary,
            "code": self.code,
            "label": self.label,
            "value": self.value,
            "unit": self.unit,
            "gaugeHeightFt": self.gauge_height_ft,
            "dischargeCfs": self.discharge_cfs,
            "readingAgeHours": self.reading_age_hours,
        }


def _fresh_reading(
    reading: GaugeReading | None,
    as_of: datetime | None,
    config: PlannerConfig,
) -> tuple[GaugeReading | None, float | None, str | None]:
    """Return the usable reading, its age, and why it is unusable (if so).

    Without ``as_of`` no age check is made. With it, an undated reading
    cannot be shown to be fresh and is rejected as ``"undated"``.
    """
    if reading is None or reading.is_empty:
        return None, None, "missing"
    if as_of is None:
        return reading, None, None
    if reading.timestamp is None:
        return None, None, "undated"
    age = reading.age_hours(as_of)
    if age > config.stale_reading_hours:
        return None, age, "stale"
    return reading, age, None


def build_condition(
    selection: GaugeSelection,
    reading: GaugeReading | None,
    config: PlannerConfig,
    as_of: datetime | None = None,
) -> tuple[Condition, str | None]:
    """Classify a gauge selection's reading into a plan condition.

    Returns:
        The condition and, when the code is ``unknown``, a sentence
        explaining why.
    """
    if not selection.available:
        condition = Condition(code=UNKNOWN, label=condition_label(UNKNOWN))
        return condition, "No gauge is available for this river; current conditions are unknown"

    station = selection.station
    usable, age, problem = _fresh_reading(reading, as_of, config)
    thresholds = selection.association.thresholds if selection.association else None
    classification = classify_reading(usable, thresholds)

    condition = Condition(
        code=classification.code,
        label=classification.label,
        gauge_height_ft=reading.gauge_height_ft if reading else None,
        discharge_cfs=reading.discharge_cfs if reading else None,
        gauge_name=station.name,
        source_url=config.gauge_url(station.site_id),
        accuracy_warning=selection.accuracy_warning,
        accuracy_warning_reason=selection.accuracy_warning_reason,
        reading_timestamp=reading.timestamp if reading else None,
        reading_age_hours=round(age, 1) if age is not None else None,
        advisory=selection.advisory,
    )

    note = None
    if classification.code == UNKNOWN:
        if problem == "missing":
            note = f"No current reading from {station.name}; current conditions are unknown"
        elif problem == "stale":
            note = (
                f"Latest reading from {station.name} is {age:.0f} hours old; "
                "current conditions are unknown"
            )
        elif problem == "undated":
            note = f"Latest reading from {station.name} has no timestamp; current conditions are unknown"
        elif selection.advisory:
            note = f"{station.name} has no thresholds for this river; current conditions are unknown"
        else:
            note = f"No flow thresholds are set for {station.name}; current conditions are unknown"
        logger.warning("Condition unknown for gauge %s: %s", station.id, problem or "no thresholds")
    return condition, note


class PlanAssembler:
    """Compute float plans against a read-only data source.

    Args:
        source: Records for rivers, access points, gauges and vessels.
        config: Planner settings; defaults when omitted.

    Mile indexes are cached per river and reused across plans until the
    river's geometry changes.
    """

    def __init__(self, source: PlanDataSource, config: PlannerConfig | None = None):
        self.source = source
        self.config = config or PlannerConfig()
        self.indexes = MileIndexCache()
        self.resolver = GaugeResolver(source, self.config)

    def plan(
        self,
        river_id: str,
        put_in_id: str,
        take_out_id: str,
        vessel_id: str | None = None,
        as_of: datetime | None = None,
    ) -> FloatPlan:
        """Build the float plan for one trip.

        Args:
            river_id: River id (or slug).
            put_in_id: Starting access point.
            take_out_id: Ending access point.
            vessel_id: Vessel type id or slug; None selects the default.
            as_of: Request time. When given, readings older than
                ``config.stale_reading_hours`` are treated as missing.

        Raises:
            RiverNotFoundError, AccessPointNotFoundError,
            VesselNotFoundError, GeometryMissingError, SamePointError,
            InvalidVesselSpeedError.
        """
        river = self.source.get_river(river_id)
        index = self.indexes.get(river)

        put_in = self._access_point(put_in_id, river.id)
        take_out = self._access_point(take_out_id, river.id)
        start_mile = self._mile_of(put_in, index)
        end_mile = self._mile_of(take_out, index)
        put_in = replace(put_in, river_mile=start_mile)
        take_out = replace(take_out, river_mile=end_mile)
        if start_mile == end_mile:
            raise SamePointError(
                context={"put_in_id": put_in.id, "take_out_id": take_out.id, "mile": start_mile}
            )

        trip = route.extract_route(index, start_mile, end_mile)

        selection = self.resolver.resolve(
            river.id,
            start_mile,
            index=index,
            fallback=put_in.location or index.mile_to_point(start_mile),
        )
        reading = (
            self.source.get_latest_reading(selection.station.id) if selection.available else None
        )
        condition, unknown_note = build_condition(selection, reading, self.config, as_of)

        vessel = self.source.get_vessel_type(vessel_id)
        float_time = duration.estimate(trip.distance_miles, vessel, condition.code)

        hazards = self._hazards_along(river.id, trip)

        warnings = []
        if trip.direction == UPSTREAM:
            warnings.append(UPSTREAM_WARNING)
        if condition.code == UNKNOWN and unknown_note:
            warnings.append(unknown_note)
        if condition.accuracy_warning and condition.accuracy_warning_reason:
            warnings.append(condition.accuracy_warning_reason)
        if condition.code == DANGEROUS:
            warnings.append(DANGEROUS_WARNING)
        elif condition.code == HIGH:
            warnings.append(HIGH_WARNING)
        elif condition.code in (VERY_LOW, TOO_LOW):
            warnings.append(LOW_WARNING)

        plan = FloatPlan(
            river=river,
            put_in=put_in,
            take_out=take_out,
            distance=Distance(
                miles=round(trip.distance_miles, 2),
                formatted=fmt_miles(trip.distance_miles),
            ),
            direction=trip.direction,
            float_time=float_time,
            vessel=vessel,
            condition=condition,
            hazards=tuple(hazards),
            warnings=tuple(warnings),
            route=trip.path,
        )
        logger.info(
            "Planned %s: %s -> %s, %s %s, %s, condition %s",
            river.id, put_in.name, take_out.name, plan.distance.formatted,
            plan.direction, float_time.formatted, condition.code,
        )
        return plan

    # ── Internal helpers ──────────────────────────────────────────────────

    def _access_point(self, access_point_id: str, river_id: str) -> AccessPoint:
        ap = self.source.get_access_point(access_point_id)
        if ap.river_id != river_id:
            raise AccessPointNotFoundError(
                f"Access point {access_point_id} is not on river {river_id}",
                context={"access_point_id": access_point_id, "river_id": river_id},
            )
        return ap

    @staticmethod
    def _mile_of(ap: AccessPoint, index: MileIndex) -> float:
        """River mile of an access point, snapping its location if unset."""
        if ap.river_mile is not None:
            return ap.river_mile
        if ap.location is None:
            raise AccessPointNotFoundError(
                f"Access point {ap.id} has no position on the river",
                context={"access_point_id": ap.id},
            )
        return round(index.point_to_mile(ap.location).mile, 2)

    def _hazards_along(self, river_id: str, trip: route.Route) -> list[Hazard]:
        """Hazards inside the traveled mile range, in travel order."""
        hazards = [
            h for h in self.source.get_hazards_for_river(river_id)
            if trip.min_mile <= h.river_mile <= trip.max_mile
        ]
        hazards.sort(key=lambda h: (h.river_mile, h.id), reverse=trip.direction == UPSTREAM)
        return hazards


def list_conditions(
    source: PlanDataSource,
    river_ids: list[str] | None = None,
    as_of: datetime | None = None,
    config: PlannerConfig | None = None,
) -> list[GaugeCondition]:
    """Classify every linked gauge on the given rivers.

    Args:
        source: Data source.
        river_ids: Rivers to include; None means every active river.
        as_of: Request time for the staleness check.
        config: Planner settings.

    Returns:
        Rows ordered by display rank, then river and gauge name.
    """
    config = config or PlannerConfig()
    rivers = (
        [source.get_river(r) for r in river_ids] if river_ids is not None
        else source.list_rivers()
    )

    rows = []
    for river in rivers:
        for assoc in source.get_gauge_associations_for_river(river.id):
            station = source.get_gauge_station(assoc.gauge_station_id)
            if station is None:
                continue
            reading = source.get_latest_reading(station.id)
            usable, age, _ = _fresh_reading(reading, as_of, config)
            classification = classify_reading(usable, assoc.thresholds)
            rows.append(GaugeCondition(
                river_id=river.id,
                river_name=river.name,
                gauge_name=station.name,
                site_id=station.site_id,
                is_primary=assoc.is_primary,
                code=classification.code,
                label=classification.label,
                value=classification.value,
                unit=classification.unit,
                gauge_height_ft=reading.gauge_height_ft if reading else None,
                discharge_cfs=reading.discharge_cfs if reading else None,
                reading_age_hours=round(age, 1) if age is not None else None,
            ))

    rows.sort(key=lambda r: (r.river_name, r.gauge_name))
    return rank_by_severity(rows, key=lambda r: r.code)
