"""Coordinate coercion and the rectangular radius pre-filter used by place search."""

import math
from typing import Any, NamedTuple, Optional, Tuple

KM_PER_DEGREE = 111.0


class BoundingBox(NamedTuple):
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """
    Rectangle around (lat, lng) that covers a circle of radius_km.

    Uses 1 degree of latitude ~ 111 km and 1 degree of longitude ~
    111 * cos(lat) km. This over-approximates the circle; callers that need an
    exact radius must post-filter with a great-circle distance.

    The box does not wrap across the antimeridian: bounds may fall outside
    [-180, 180], so a search centred at lng 179.95 misses a place at -179.95.
    """
    lat_delta = radius_km / KM_PER_DEGREE
    cos_lat = math.cos(math.radians(lat))
    if cos_lat <= 1e-9:
        lng_delta = 180.0
    else:
        lng_delta = min(radius_km / (KM_PER_DEGREE * cos_lat), 180.0)
    return BoundingBox(lat - lat_delta, lat + lat_delta, lng - lng_delta, lng + lng_delta)


def coerce_coordinate(value: Any) -> Optional[float]:
    """Float value of a stored coordinate, or None if it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def coerce_coordinates(lat: Any, lng: Any) -> Optional[Tuple[float, float]]:
    """(lat, lng) as floats if both are numeric and in range, else None."""
    lat_f = coerce_coordinate(lat)
    lng_f = coerce_coordinate(lng)
    if lat_f is None or lng_f is None:
        return None
    if not (-90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0):
        return None
    return lat_f, lng_f
