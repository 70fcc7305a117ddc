"""Selection of the gauge that governs a river section.

Rivers link to gauges through associations. The primary association
wins; otherwise (or among several primaries) the gauge closest to the
section does. A gauge farther away than its association's tolerance is
still used, with an accuracy warning. Rivers without any association
fall back to the geographically nearest gauge, reported as advisory.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree

from float_planner.config import PlannerConfig
from float_planner.geo import haversine_miles, unit_vectors
from float_planner.mile_index import MileIndex
from float_planner.models import Coordinate, GaugeStation, RiverGaugeAssociation
from float_planner.store import PlanDataSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GaugeSelection:
    """The gauge chosen for a section, or an empty selection.

    Args:
        station: Chosen gauge, or None when no gauge is available.
        association: The river association supplying thresholds; None
            for advisory (nearest-gauge) selections.
        distance_miles: Distance between the gauge and the section.
        accuracy_warning: True when the gauge is beyond the tolerance.
        accuracy_warning_reason: Human-readable explanation.
        advisory: True when the gauge is merely nearby, not linked to
            the river.
    """

    station: GaugeStation | None = None
    association: RiverGaugeAssociation | None = None
    distance_miles: float | None = None
    accuracy_warning: bool = False
    accuracy_warning_reason: str | None = None
    advisory: bool = False

    @property
    def available(self) -> bool:
        return self.station is not None


NO_GAUGE = GaugeSelection()


class GaugeResolver:
    """Resolve the authoritative gauge for river sections.

    Args:
        source: Data source supplying associations and stations.
        config: Planner configuration (default accuracy tolerance).
    """

    def __init__(self, source: PlanDataSource, config: PlannerConfig | None = None):
        self.source = source
        self.config = config or PlannerConfig()
        self._tree_entry: tuple[tuple, cKDTree, list[GaugeStation]] | None = None

    # ── Public API ────────────────────────────────────────────────────────

    def resolve(
        self,
        river_id: str,
        mile: float | None = None,
        *,
        index: MileIndex | None = None,
        fallback: Coordinate | None = None,
    ) -> GaugeSelection:
        """Pick the gauge governing ``river_id`` near ``mile``.

        Args:
            river_id: River whose associations are considered.
            mile: Section position, used with ``index`` to measure the
                along-river distance of gauges whose association does
                not record one.
            index: Mile index of the river.
            fallback: Coordinate for the nearest-gauge search when the
                river has no usable association.

        Returns:
            A ``GaugeSelection``; ``NO_GAUGE`` when nothing is available.
        """
        candidates = []
        for assoc in self.source.get_gauge_associations_for_river(river_id):
            station = self.source.get_gauge_station(assoc.gauge_station_id)
            if station is None:
                logger.warning(
                    "Association %s references unknown gauge %s",
                    assoc.id, assoc.gauge_station_id,
                )
                continue
            distance = self._section_distance(assoc, station, mile, index)
            candidates.append((assoc, station, distance))

        if not candidates:
            if fallback is not None:
                logger.warning("River %s has no linked gauges; using nearest gauge", river_id)
                return self.nearest_by_distance(fallback)
            logger.warning("River %s has no linked gauges", river_id)
            return NO_GAUGE

        candidates.sort(
            key=lambda c: (
                not c[0].is_primary,
                c[2] is None,
                c[2] if c[2] is not None else 0.0,
                c[0].id,
            )
        )
        assoc, station, distance = candidates[0]

        tolerance = assoc.accuracy_warning_threshold_miles
        if tolerance is None:
            tolerance = self.config.default_accuracy_warning_miles

        if distance is not None and distance > tolerance:
            reason = f"Gauge is {distance:.1f} miles from this section"
            logger.warning("%s: %s (%s)", river_id, reason, station.name)
            return GaugeSelection(
                station=station,
                association=assoc,
                distance_miles=distance,
                accuracy_warning=True,
                accuracy_warning_reason=reason,
            )
        return GaugeSelection(station=station, association=assoc, distance_miles=distance)

    def nearest_by_distance(self, coordinate: Coordinate) -> GaugeSelection:
        """Find the gauge closest to ``coordinate`` by great-circle distance.

        The result is advisory: the gauge is not linked to the river and
        carries no thresholds for it.
        """
        tree, stations = self._station_tree()
        if tree is None:
            return NO_GAUGE

        query = unit_vectors([coordinate.lat], [coordinate.lon])[0]
        _, i = tree.query(query, k=1)
        station = stations[int(i)]
        distance = haversine_miles(
            coordinate.lat, coordinate.lon, station.coordinate.lat, station.coordinate.lon
        )
        return GaugeSelection(
            station=station,
            distance_miles=distance,
            accuracy_warning=True,
            accuracy_warning_reason=f"Nearby gauge, {distance:.1f} miles away; not linked to this river",
            advisory=True,
        )

    # ── Internal helpers ──────────────────────────────────────────────────

    def _section_distance(
        self,
        assoc: RiverGaugeAssociation,
        station: GaugeStation,
        mile: float | None,
        index: MileIndex | None,
    ) -> float | None:
        if assoc.distance_from_section_miles is not None:
            return assoc.distance_from_section_miles
        if mile is None or index is None or station.coordinate is None:
            return None
        gauge_mile = index.point_to_mile(station.coordinate).mile
        return abs(gauge_mile - mile)

    def _station_tree(self) -> tuple[cKDTree | None, list[GaugeStation]]:
        """KD-tree over unit vectors of gauge coordinates, with its stations.

        The tree is rebuilt whenever the located station set changes.
        """
        stations = [
            s for s in self.source.list_gauge_stations()
            if s.coordinate is not None
            and not (math.isnan(s.coordinate.lat) or math.isnan(s.coordinate.lon))
        ]
        if not stations:
            return None, []
        key = tuple((s.id, s.coordinate) for s in stations)
        entry = self._tree_entry
        if entry is not None and entry[0] == key:
            return entry[1], entry[2]
        points = unit_vectors(
            np.array([s.coordinate.lat for s in stations]),
            np.array([s.coordinate.lon for s in stations]),
        )
        tree = cKDTree(points)
        self._tree_entry = (key, tree, stations)
        logger.debug("Built gauge KD-tree over %d stations", len(stations))
        return tree, stations
