"""
Geofence API - barangay lookup for a pinned report location
"""
import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from apps.api.dependencies import get_boundary_repository
from packages.domain.geofence import BarangayResolution, BoundaryRepository, locate

logger = structlog.get_logger()
router = APIRouter()


class ResolveRequest(BaseModel):
    longitude: float = Field(..., ge=-180, le=180)
    latitude: float = Field(..., ge=-90, le=90)


@router.post("/resolve", response_model=BarangayResolution)
async def resolve_barangay(
    request: ResolveRequest,
    repository: BoundaryRepository = Depends(get_boundary_repository),
) -> BarangayResolution:
    """Find the barangay for a point; barangay is null when none is within range"""
    resolution = locate(request.longitude, request.latitude, repository.all())

    logger.info("barangay_resolved",
                longitude=request.longitude,
                latitude=request.latitude,
                barangay=resolution.barangay,
                method=resolution.method.value if resolution.method else None)

    return resolution
