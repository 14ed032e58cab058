"""
Great-circle distance helpers.

`haversine_distance` is registered on every SQLite connection as the SQL
function `geo_distance`, so distance computation, filtering and ordering all
happen inside one query.
"""
import math
from typing import Optional

EARTH_RADIUS_METERS = 6371008.8


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> Optional[float]:
    """Distance in metres between two (latitude, longitude) points given in degrees."""
    if None in (lat1, lon1, lat2, lon2):
        return None
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # clamp rounding error so asin stays in domain
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))
