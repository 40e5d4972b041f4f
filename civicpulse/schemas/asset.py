from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import Field

from civicpulse.models.asset import FacilityType
from civicpulse.schemas.civic_report import CamelModel


class Position(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class PublicFacilityCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: FacilityType
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class PublicFacility(PublicFacilityCreate):
    id: int


class WorkerLocationUpdate(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class WorkerLocation(WorkerLocationUpdate):
    id: int
    worker_id: int
    updated_at: datetime


class MapCenter(CamelModel):
    lat: float
    lng: float
    zoom: int


# GeoJSON FeatureCollection plus where the map should open
class MapLayer(CamelModel):
    type: str = "FeatureCollection"
    center: MapCenter
    features: List[Dict[str, Any]] = []
    user_position: Optional[Position] = None
