"""Route extraction between two river miles.

Once both ends of a trip are expressed as river miles, distance is a
subtraction: the mile index is already arc-length correct. The clipped
path is the interior polyline vertices plus the exact interpolated end
points, returned in travel order.
"""

from __future__ import annotations

from dataclasses import dataclass

from float_planner.errors import SamePointError
from float_planner.mile_index import MileIndex
from float_planner.models import DOWNSTREAM, UPSTREAM, Coordinate


@dataclass(frozen=True)
class Route:
    """Distance, direction and path between a put-in and a take-out."""

    start_mile: float
    end_mile: float
    distance_miles: float
    direction: str
    path: tuple[Coordinate, ...]

    @property
    def min_mile(self) -> float:
        return min(self.start_mile, self.end_mile)

    @property
    def max_mile(self) -> float:
        return max(self.start_mile, self.end_mile)


def distance(mile_a: float, mile_b: float) -> float:
    """Paddling distance in miles between two river miles."""
    return abs(mile_b - mile_a)


def direction(mile_a: float, mile_b: float) -> str:
    """Direction of travel from ``mile_a`` to ``mile_b``.

    Raises:
        SamePointError: If both miles are equal.
    """
    if mile_b > mile_a:
        return DOWNSTREAM
    if mile_b < mile_a:
        return UPSTREAM
    raise SamePointError(context={"mile": mile_a})


def extract_path(index: MileIndex, mile_a: float, mile_b: float) -> list[Coordinate]:
    """Clip the river polyline to the stretch between two miles.

    The path starts at ``mile_a`` and ends at ``mile_b``; an upstream
    trip therefore runs against the vertex order.
    """
    lo, hi = sorted((mile_a, mile_b))
    path = [index.mile_to_point(lo)]
    path.extend(index.vertices_between(lo, hi))
    path.append(index.mile_to_point(hi))
    if mile_b < mile_a:
        path.reverse()
    return path


def extract_route(index: MileIndex, mile_a: float, mile_b: float) -> Route:
    """Compute the full route between two river miles.

    Raises:
        SamePointError: If both miles are equal.
    """
    heading = direction(mile_a, mile_b)
    return Route(
        start_mile=mile_a,
        end_mile=mile_b,
        distance_miles=distance(mile_a, mile_b),
        direction=heading,
        path=tuple(extract_path(index, mile_a, mile_b)),
    )
