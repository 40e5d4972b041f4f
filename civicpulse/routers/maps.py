from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.api.deps import get_current_admin, get_current_citizen, get_current_user, get_current_worker
from civicpulse.core.errors import ValidationError
from civicpulse.core.logger import get_logger
from civicpulse.crud import asset as crud
from civicpulse.db.session import get_db
from civicpulse.models import User
from civicpulse.schemas import (
    MapLayer,
    Position,
    PublicFacility,
    PublicFacilityCreate,
    WorkerLocation,
    WorkerLocationUpdate,
)
from civicpulse.services import civic_report as report_service
from civicpulse.services.map_layers import build_map_layer

logger = get_logger("maps")

router = APIRouter()

REPORT_SCOPES = {
    "other": report_service.get_other_reports,
    "mine": report_service.get_my_reports,
    "all": report_service.get_all_reports,
}


@router.get("/maps/facilities", response_model=List[PublicFacility])
async def read_facilities(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await crud.get_facilities(db)


@router.post("/maps/facilities", response_model=PublicFacility, status_code=status.HTTP_201_CREATED)
async def create_facility(
    facility_in: PublicFacilityCreate,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    facility = await crud.create_facility(db, obj_in=facility_in)
    logger.info(f"Facility created: id={facility.id}, type={facility.type.value}")
    return facility


@router.get("/maps/worker-locations", response_model=List[WorkerLocation])
async def read_worker_locations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await crud.get_worker_locations(db)


@router.put("/maps/worker-locations/me", response_model=WorkerLocation)
async def update_my_location(
    location_in: WorkerLocationUpdate,
    current_user: User = Depends(get_current_worker),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Record the calling worker's current position.
    """
    return await crud.upsert_worker_location(db, worker_id=current_user.id, obj_in=location_in)


@router.get("/maps/civic-layer", response_model=MapLayer)
async def read_civic_layer(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    scope: str = Query("other"),
    include_assets: bool = Query(False, alias="includeAssets"),
    current_user: User = Depends(get_current_citizen),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Reports (and optionally facilities and workers) as one GeoJSON layer.
    """
    if scope not in REPORT_SCOPES:
        raise ValidationError(f"Unknown scope: {scope}")
    if (lat is None) != (lng is None):
        raise ValidationError("lat and lng must be given together")

    reports = await REPORT_SCOPES[scope](db, user_id=current_user.id)
    facilities, workers = [], []
    if include_assets:
        facilities = [PublicFacility.model_validate(f) for f in await crud.get_facilities(db)]
        workers = [WorkerLocation.model_validate(w) for w in await crud.get_worker_locations(db)]

    user_position = Position(lat=lat, lng=lng) if lat is not None else None
    return build_map_layer(reports, facilities, workers, user_position)
