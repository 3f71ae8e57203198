"""
Geofence Module - barangay assignment for report locations

Example:
    from packages.domain.geofence import BoundaryRepository, resolve

    boundaries = BoundaryRepository("data/baguio_barangay_boundaries.json").all()
    resolve(120.5977, 16.4116, boundaries)   # "Session Road Area"
"""

from packages.domain.geofence.barangay_resolver import (
    MAX_CENTER_DISTANCE_KM,
    assigned_lgu,
    haversine_distance,
    is_point_in_polygon,
    is_within_baguio_city,
    locate,
    resolve,
)
from packages.domain.geofence.boundary_repository import BoundaryDataError, BoundaryRepository
from packages.domain.geofence.schemas import BarangayBoundary, BarangayResolution, GeofenceMethod

__all__ = [
    'MAX_CENTER_DISTANCE_KM',
    'BarangayBoundary',
    'BarangayResolution',
    'BoundaryDataError',
    'BoundaryRepository',
    'GeofenceMethod',
    'assigned_lgu',
    'haversine_distance',
    'is_point_in_polygon',
    'is_within_baguio_city',
    'locate',
    'resolve',
]
