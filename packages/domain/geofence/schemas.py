"""
Data schemas for barangay geofencing

Coordinates are always (longitude, latitude), GeoJSON order.
"""
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

LngLat = Tuple[float, float]


class BarangayBoundary(BaseModel):
    """One barangay: a closed polygon ring plus its declared center point"""
    model_config = ConfigDict(frozen=True)

    name: str
    longname: str = ""
    polygon: List[LngLat] = Field(..., description="Ring of (lng, lat) vertices")
    center: LngLat = Field(..., description="Declared center (lng, lat)")

    @field_validator("polygon")
    @classmethod
    def validate_ring(cls, v):
        """A ring needs at least three vertices"""
        if len(v) < 3:
            raise ValueError(f"Polygon ring needs at least 3 vertices, got {len(v)}")
        return v

    @classmethod
    def from_geojson_like(cls, raw: dict) -> "BarangayBoundary":
        """
        Parse the dataset shape:
            {"name", "longname",
             "boundingBox": {"type": "Polygon", "coordinates": [[lng, lat], ...]},
             "coords": {"type": "Point", "coordinates": [lng, lat]}}
        """
        return cls(
            name=raw["name"],
            longname=raw.get("longname", ""),
            polygon=[tuple(p) for p in raw["boundingBox"]["coordinates"]],
            center=tuple(raw["coords"]["coordinates"]),
        )


class GeofenceMethod(str, Enum):
    POLYGON = "polygon"
    NEAREST_CENTER = "nearest_center"


class BarangayResolution(BaseModel):
    """Which barangay a point was assigned to, and how"""
    barangay: Optional[str] = None
    method: Optional[GeofenceMethod] = None
    distance_km: Optional[float] = Field(None, description="Distance to the nearest center (fallback only)")
    assigned_to: Optional[str] = Field(None, description="LGU the report is routed to")
    within_city: bool = True
