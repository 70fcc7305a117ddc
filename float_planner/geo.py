"""Great-circle helpers in statute miles.

Scalar and numpy-vectorized haversine distances, plus conversion of
latitude/longitude pairs to unit vectors on the sphere for nearest
neighbour searches (chord length grows monotonically with great-circle
distance, so a Euclidean KD-tree over unit vectors ranks correctly).
"""

import math

import numpy as np

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in miles.

    Examples:
        >>> round(haversine_miles(0.0, 0.0, 1.0, 0.0), 2)
        69.09
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = phi2 - phi1
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(min(1.0, math.sqrt(a)))


def haversine_miles_array(lat1, lon1, lat2, lon2) -> np.ndarray:
    """Element-wise haversine distance in miles for array inputs.

    Arguments broadcast like any numpy ufunc, so a scalar point can be
    compared against arrays of points.
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dphi = phi2 - phi1
    dlmb = np.radians(np.asarray(lon2, dtype=float) - np.asarray(lon1, dtype=float))
    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * np.arcsin(np.minimum(1.0, np.sqrt(a)))


def unit_vectors(lats, lons) -> np.ndarray:
    """Convert latitude/longitude arrays (degrees) to an (n, 3) array of unit vectors."""
    phi = np.radians(np.asarray(lats, dtype=float))
    lmb = np.radians(np.asarray(lons, dtype=float))
    cos_phi = np.cos(phi)
    return np.column_stack((cos_phi * np.cos(lmb), cos_phi * np.sin(lmb), np.sin(phi)))
