"""Geography helpers: distances and human-readable formatting."""

import math

from travelme.engine.models.common import Geo

EARTH_RADIUS_KM = 6371.0

# Average walking speed, km per minute (~5 km/h)
WALKING_KM_PER_MIN = 0.08


def haversine_km(a: Geo, b: Geo) -> float:
    """Great-circle distance between two points in kilometers."""
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lon - a.lon)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat))
        * math.cos(math.radians(b.lat))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def format_distance(km: float) -> str:
    """Format a straight-line distance, e.g. '350 м' or '2.4 км'."""
    if km < 1:
        return f"{round(km * 1000)} м"
    return f"{km:.1f} км"


def estimate_walking_time(km: float) -> str:
    """Rough walking time at ~5 km/h, e.g. '12 мин' or '1 ч 5 мин'."""
    minutes = round(km / WALKING_KM_PER_MIN)
    if minutes < 1:
        return "1 мин"
    if minutes < 60:
        return f"{minutes} мин"
    hours, rest = divmod(minutes, 60)
    return f"{hours} ч {rest} мин" if rest else f"{hours} ч"
