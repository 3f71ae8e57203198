"""
Barangay Resolver - assigns a (lng, lat) point to a Baguio City barangay

Two passes:
1. Ray-casting point-in-polygon, boundaries checked in dataset order.
   The first containing polygon wins, so when boundary data overlaps the
   earlier entry in the dataset takes precedence.
2. Otherwise the barangay with the nearest declared center, but only if
   that center is strictly closer than 2 km. Beyond that the point is
   outside every known barangay and the result is None.

Points exactly on a polygon edge may land on either side; boundary data is
approximate anyway.
"""
import math
from typing import Optional, Sequence

import structlog

from packages.domain.geofence.schemas import (
    BarangayBoundary,
    BarangayResolution,
    GeofenceMethod,
    LngLat,
)

logger = structlog.get_logger()

EARTH_RADIUS_KM = 6371.0
MAX_CENTER_DISTANCE_KM = 2.0

# Approximate city bounds
BAGUIO_LAT_RANGE = (16.35, 16.45)
BAGUIO_LNG_RANGE = (120.55, 120.65)


def is_point_in_polygon(point: LngLat, polygon: Sequence[LngLat]) -> bool:
    """Ray casting (even-odd rule) over a ring of (lng, lat) vertices"""
    x, y = point
    inside = False

    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i]
        xj, yj = polygon[j]

        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i

    return inside


def haversine_distance(point1: LngLat, point2: LngLat) -> float:
    """Great-circle distance in kilometres between two (lng, lat) points"""
    lon1, lat1 = point1
    lon2, lat2 = point2

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_within_baguio_city(longitude: float, latitude: float) -> bool:
    """Rough bounding-box check for Baguio City"""
    return (
        BAGUIO_LAT_RANGE[0] <= latitude <= BAGUIO_LAT_RANGE[1]
        and BAGUIO_LNG_RANGE[0] <= longitude <= BAGUIO_LNG_RANGE[1]
    )


def assigned_lgu(barangay: Optional[str]) -> Optional[str]:
    """LGU a report is routed to for a detected barangay"""
    if not barangay or barangay == "Unknown":
        return None
    return f"{barangay} Barangay LGU"


def locate(
    longitude: float,
    latitude: float,
    boundaries: Sequence[BarangayBoundary],
    max_distance_km: float = MAX_CENTER_DISTANCE_KM,
) -> BarangayResolution:
    """
    Resolve a point and report how it was resolved.

    Returns:
        BarangayResolution; barangay is None when nothing is close enough
    """
    point = (longitude, latitude)
    within_city = is_within_baguio_city(longitude, latitude)

    for boundary in boundaries:
        if is_point_in_polygon(point, boundary.polygon):
            logger.debug("barangay_polygon_match", barangay=boundary.name)
            return BarangayResolution(
                barangay=boundary.name,
                method=GeofenceMethod.POLYGON,
                assigned_to=assigned_lgu(boundary.name),
                within_city=within_city,
            )

    nearest: Optional[BarangayBoundary] = None
    min_distance = math.inf

    for boundary in boundaries:
        distance = haversine_distance(point, boundary.center)
        if distance < min_distance:
            min_distance = distance
            nearest = boundary

    if nearest is not None and min_distance < max_distance_km:
        logger.debug("barangay_nearest_center_match",
                     barangay=nearest.name,
                     distance_km=round(min_distance, 3))
        return BarangayResolution(
            barangay=nearest.name,
            method=GeofenceMethod.NEAREST_CENTER,
            distance_km=min_distance,
            assigned_to=assigned_lgu(nearest.name),
            within_city=within_city,
        )

    logger.info("barangay_not_found",
                longitude=longitude,
                latitude=latitude,
                nearest_km=round(min_distance, 3) if nearest is not None else None)
    return BarangayResolution(
        distance_km=min_distance if nearest is not None else None,
        within_city=within_city,
    )


def resolve(
    longitude: float,
    latitude: float,
    boundaries: Sequence[BarangayBoundary],
) -> Optional[str]:
    """
    Find the barangay containing (or nearest to) a point.

    Args:
        longitude: Point longitude
        latitude: Point latitude
        boundaries: Boundary dataset, in priority order

    Returns:
        Barangay name, or None if the point is outside all known barangays
    """
    return locate(longitude, latitude, boundaries).barangay
