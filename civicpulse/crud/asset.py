from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.models import PublicFacility, WorkerLocation
from civicpulse.schemas import PublicFacilityCreate, WorkerLocationUpdate


async def get_facilities(db: AsyncSession, skip: int = 0, limit: int = 500) -> List[PublicFacility]:
    result = await db.execute(
        select(PublicFacility).order_by(PublicFacility.id).offset(skip).limit(limit)
    )
    return result.scalars().all()


async def create_facility(db: AsyncSession, obj_in: PublicFacilityCreate) -> PublicFacility:
    db_obj = PublicFacility(**obj_in.model_dump())
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj


async def get_worker_locations(db: AsyncSession) -> List[WorkerLocation]:
    result = await db.execute(select(WorkerLocation).order_by(WorkerLocation.id))
    return result.scalars().unique().all()


async def get_worker_location(db: AsyncSession, worker_id: int) -> Optional[WorkerLocation]:
    result = await db.execute(
        select(WorkerLocation).filter(WorkerLocation.worker_id == worker_id)
    )
    return result.scalars().first()


async def upsert_worker_location(
    db: AsyncSession, worker_id: int, obj_in: WorkerLocationUpdate
) -> WorkerLocation:
    """
    Record the latest position of a worker, one row per worker.
    """
    db_obj = await get_worker_location(db, worker_id=worker_id)
    if db_obj is None:
        db_obj = WorkerLocation(worker_id=worker_id)
    db_obj.latitude = obj_in.latitude
    db_obj.longitude = obj_in.longitude
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj
