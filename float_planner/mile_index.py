"""Arc-length mile index over a river polyline.

Translates between river miles (distance downstream from the headwater)
and geographic coordinates. The index is built once per river fetch from
the ordered vertex list: great-circle segment lengths are summed into a
cumulative-mile array, and every query afterwards is an index lookup
into that array.

Usage::

    from float_planner.mile_index import MileIndex

    index = MileIndex.from_river(river)
    index.mile_to_point(55.2)              # Coordinate(lat=..., lon=...)
    index.point_to_mile(coordinate).mile   # 55.2
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from float_planner.errors import GeometryMissingError
from float_planner.geo import EARTH_RADIUS_MILES, haversine_miles, haversine_miles_array
from float_planner.models import Coordinate, River

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Projection:
    """Closest point on the polyline to a query coordinate.

    Args:
        mile: River mile of the closest point.
        point: The closest point itself (the "snapped" coordinate).
        offset_miles: Great-circle distance from the query coordinate
            to ``point``.
        segment: Index of the polyline segment containing ``point``.
    """

    mile: float
    point: Coordinate
    offset_miles: float
    segment: int


@dataclass(frozen=True)
class SnapResult:
    """Outcome of snapping a raw coordinate onto a river."""

    mile: float
    snapped: Coordinate
    offset_miles: float
    needs_review: bool


def _frozen(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.setflags(write=False)
    return arr


class MileIndex:
    """Immutable cumulative-distance lookup for one river polyline.

    Args:
        vertices: Ordered polyline vertices, headwater first.
        length_miles: Published river length. When given, cumulative
            miles are scaled so the final vertex lands exactly on it.

    Raises:
        GeometryMissingError: If the polyline has fewer than two
            vertices or zero total length.
    """

    def __init__(self, vertices: Sequence[Coordinate], length_miles: float | None = None):
        if len(vertices) < 2:
            raise GeometryMissingError(context={"vertices": len(vertices)})

        self._lats = _frozen([v.lat for v in vertices])
        self._lons = _frozen([v.lon for v in vertices])

        segments = haversine_miles_array(
            self._lats[:-1], self._lons[:-1], self._lats[1:], self._lons[1:]
        )
        raw_total = float(segments.sum())
        if raw_total <= 0:
            raise GeometryMissingError(context={"vertices": len(vertices)})

        scale = 1.0
        if length_miles is not None and length_miles > 0:
            scale = length_miles / raw_total
            logger.debug(
                "Calibrating polyline of %.2f mi to published length %.2f mi",
                raw_total, length_miles,
            )

        self._segments = _frozen(segments * scale)
        self._miles = _frozen(np.concatenate(([0.0], np.cumsum(self._segments))))

    @classmethod
    def from_river(cls, river: River) -> MileIndex:
        """Build the index for a river record.

        Raises:
            GeometryMissingError: If the river has no usable polyline.
        """
        try:
            return cls(river.geometry, river.length_miles)
        except GeometryMissingError as exc:
            exc.context["river_id"] = river.id
            raise

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def length_miles(self) -> float:
        """Mile position of the last vertex."""
        return float(self._miles[-1])

    @property
    def vertex_miles(self) -> np.ndarray:
        """Read-only array of the mile position of every vertex."""
        return self._miles

    def __len__(self) -> int:
        return len(self._miles)

    def vertex(self, i: int) -> Coordinate:
        return Coordinate(float(self._lats[i]), float(self._lons[i]))

    # ── Queries ───────────────────────────────────────────────────────────

    def clamp(self, mile: float) -> float:
        return min(max(float(mile), 0.0), self.length_miles)

    def mile_to_point(self, mile: float) -> Coordinate:
        """Interpolate the coordinate at a river mile.

        Miles outside ``[0, length_miles]`` clamp to the nearest end.
        """
        mile = self.clamp(mile)
        i = int(np.searchsorted(self._miles, mile, side="right")) - 1
        i = min(max(i, 0), len(self._miles) - 2)

        seg_len = self._miles[i + 1] - self._miles[i]
        frac = (mile - self._miles[i]) / seg_len if seg_len > 0 else 0.0
        lat = self._lats[i] + frac * (self._lats[i + 1] - self._lats[i])
        lon = self._lons[i] + frac * (self._lons[i + 1] - self._lons[i])
        return Coordinate(float(lat), float(lon))

    def point_to_mile(self, coordinate: Coordinate) -> Projection:
        """Project a coordinate onto the polyline.

        Every segment is evaluated in one vectorized pass on a local
        equirectangular plane centred on the query point; the closest
        projection wins and its offset is reported as a great-circle
        distance.
        """
        cos_lat = np.cos(np.radians(coordinate.lat))
        k = np.radians(1.0) * EARTH_RADIUS_MILES
        xs = (self._lons - coordinate.lon) * cos_lat * k
        ys = (self._lats - coordinate.lat) * k

        ax, ay = xs[:-1], ys[:-1]
        dx, dy = xs[1:] - ax, ys[1:] - ay
        denom = dx * dx + dy * dy
        with np.errstate(divide="ignore", invalid="ignore"):
            t = np.where(denom > 0, -(ax * dx + ay * dy) / denom, 0.0)
        t = np.clip(t, 0.0, 1.0)

        px, py = ax + t * dx, ay + t * dy
        dist_sq = px * px + py * py
        i = int(np.argmin(dist_sq))
        frac = float(t[i])

        lat = self._lats[i] + frac * (self._lats[i + 1] - self._lats[i])
        lon = self._lons[i] + frac * (self._lons[i + 1] - self._lons[i])
        point = Coordinate(float(lat), float(lon))
        mile = float(self._miles[i] + frac * self._segments[i])
        offset = haversine_miles(coordinate.lat, coordinate.lon, point.lat, point.lon)
        return Projection(mile=mile, point=point, offset_miles=offset, segment=i)

    def vertices_between(self, lo: float, hi: float) -> list[Coordinate]:
        """Vertices whose mile lies strictly between ``lo`` and ``hi``."""
        start = int(np.searchsorted(self._miles, lo, side="right"))
        stop = int(np.searchsorted(self._miles, hi, side="left"))
        return [self.vertex(i) for i in range(start, stop)]


def snap_coordinate(
    index: MileIndex,
    coordinate: Coordinate,
    tolerance_miles: float = 0.5,
) -> SnapResult:
    """Snap a raw coordinate to the river and flag large offsets.

    Args:
        index: Mile index of the river the point belongs to.
        coordinate: Raw surveyed position.
        tolerance_miles: Offsets beyond this need manual review.
    """
    projection = index.point_to_mile(coordinate)
    return SnapResult(
        mile=round(projection.mile, 2),
        snapped=projection.point,
        offset_miles=projection.offset_miles,
        needs_review=projection.offset_miles > tolerance_miles,
    )


class MileIndexCache:
    """Keeps one ``MileIndex`` per river, rebuilt when geometry changes.

    Indexes are immutable, so a cached index may be shared by any number
    of concurrent plan computations.
    """

    def __init__(self):
        self._entries: dict[str, tuple[tuple, MileIndex]] = {}

    def get(self, river: River) -> MileIndex:
        key = (river.geometry, river.length_miles)
        entry = self._entries.get(river.id)
        if entry is not None and entry[0] == key:
            return entry[1]
        index = MileIndex.from_river(river)
        self._entries[river.id] = (key, index)
        logger.debug("Built mile index for %s (%d vertices)", river.id, len(index))
        return index

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self):
        self._entries.clear()
