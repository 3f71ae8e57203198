"""
Boundary Repository - loads the barangay boundary dataset once
"""
import json
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from packages.domain.geofence.schemas import BarangayBoundary

logger = structlog.get_logger()


class BoundaryDataError(RuntimeError):
    """Boundary dataset is missing or malformed"""


class BoundaryRepository:
    """Read-only, lazily loaded barangay boundaries in dataset order"""

    def __init__(self, path: Optional[str | Path] = None, boundaries: Optional[List[BarangayBoundary]] = None):
        self.path = Path(path) if path else None
        self._boundaries = boundaries

    def all(self) -> List[BarangayBoundary]:
        if self._boundaries is None:
            self._boundaries = self._load()
        return self._boundaries

    def _load(self) -> List[BarangayBoundary]:
        if self.path is None:
            raise BoundaryDataError("Barangay boundary path is not configured")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError as e:
            raise BoundaryDataError(f"Barangay boundaries not found at {self.path}") from e
        except json.JSONDecodeError as e:
            raise BoundaryDataError(f"Barangay boundaries at {self.path} are not valid JSON: {e}") from e

        try:
            boundaries = [BarangayBoundary.from_geojson_like(item) for item in raw]
        except (KeyError, TypeError, ValidationError) as e:
            raise BoundaryDataError(f"Invalid barangay boundary entry in {self.path}: {e}") from e

        logger.info("barangay_boundaries_loaded", path=str(self.path), count=len(boundaries))
        return boundaries
