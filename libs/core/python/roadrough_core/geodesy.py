from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    *,
    radius_m: float = EARTH_RADIUS_M,
) -> float:
    """Great-circle distance in metres between two WGS84 points given in degrees."""
    phi1 = radians(lat1)
    phi2 = radians(lat2)
    d_phi = radians(lat2 - lat1)
    d_lambda = radians(lon2 - lon1)
    a = sin(d_phi / 2.0) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2.0) ** 2
    # Rounding can push a fraction of an ulp past 1.0 for antipodal points.
    a = min(1.0, max(0.0, a))
    return radius_m * 2.0 * atan2(sqrt(a), sqrt(1.0 - a))
