from typing import Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.models import CivicReport, ReportStatus, Vote, VoteDirection
from civicpulse.schemas import CivicReportCreate

COUNTER_COLUMNS = {
    VoteDirection.SUPPORT: CivicReport.support_count,
    VoteDirection.OPPOSE: CivicReport.opposition_count,
}


async def get_report(db: AsyncSession, id: int) -> Optional[CivicReport]:
    """
    Get a report by ID.
    """
    result = await db.execute(select(CivicReport).filter(CivicReport.id == id))
    return result.scalars().first()


async def get_reports(
    db: AsyncSession,
    created_by_id: Optional[int] = None,
    exclude_created_by_id: Optional[int] = None,
    status: Optional[ReportStatus] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[CivicReport]:
    """
    Get reports, newest first, optionally restricted to or excluding one author.
    """
    query = select(CivicReport)
    if created_by_id is not None:
        query = query.filter(CivicReport.created_by_id == created_by_id)
    if exclude_created_by_id is not None:
        query = query.filter(CivicReport.created_by_id != exclude_created_by_id)
    if status:
        query = query.filter(CivicReport.status == status)

    query = query.order_by(CivicReport.created_at.desc(), CivicReport.id.desc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return result.scalars().unique().all()


async def create_report(
    db: AsyncSession, obj_in: CivicReportCreate, created_by_id: int
) -> CivicReport:
    """
    Create a new report in pending status with no votes.
    """
    db_obj = CivicReport(
        title=obj_in.title,
        description=obj_in.description,
        type=obj_in.type,
        image_url=obj_in.image_url,
        latitude=obj_in.latitude,
        longitude=obj_in.longitude,
        support_count=0,
        opposition_count=0,
        status=ReportStatus.PENDING,
        created_by_id=created_by_id,
    )
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    await db.refresh(db_obj, ["created_by"])
    return db_obj


async def update_status(db: AsyncSession, db_obj: CivicReport, status: ReportStatus) -> CivicReport:
    db_obj.status = status
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj, ["status", "updated_at"])
    return db_obj


async def delete_report(db: AsyncSession, db_obj: CivicReport) -> CivicReport:
    """
    Delete a report together with its votes.
    """
    await db.delete(db_obj)
    await db.commit()
    return db_obj


async def get_user_vote(db: AsyncSession, report_id: int, user_id: int) -> Optional[Vote]:
    result = await db.execute(
        select(Vote).filter(Vote.report_id == report_id, Vote.user_id == user_id)
    )
    return result.scalars().first()


async def get_user_votes(
    db: AsyncSession, user_id: int, report_ids: Optional[List[int]] = None
) -> Dict[int, VoteDirection]:
    """
    Map report id -> direction for every vote the user has cast.
    """
    query = select(Vote.report_id, Vote.direction).filter(Vote.user_id == user_id)
    if report_ids is not None:
        query = query.filter(Vote.report_id.in_(report_ids))
    result = await db.execute(query)
    return {report_id: direction for report_id, direction in result.all()}


async def add_vote(
    db: AsyncSession, report_id: int, user_id: int, direction: VoteDirection
) -> Vote:
    """
    Insert a vote row and bump the matching counter inside the caller's transaction.
    The increment is computed by the database, never from a value read earlier.
    """
    vote = Vote(report_id=report_id, user_id=user_id, direction=direction)
    db.add(vote)
    await db.flush()

    column = COUNTER_COLUMNS[direction]
    await db.execute(
        update(CivicReport)
        .where(CivicReport.id == report_id)
        .values({column.key: column + 1})
        .execution_options(synchronize_session=False)
    )
    return vote


async def count_votes(db: AsyncSession, report_id: int) -> Dict[VoteDirection, int]:
    result = await db.execute(
        select(Vote.direction, func.count(Vote.id))
        .filter(Vote.report_id == report_id)
        .group_by(Vote.direction)
    )
    counts = {direction: 0 for direction in VoteDirection}
    counts.update({direction: total for direction, total in result.all()})
    return counts


async def count_by_status(db: AsyncSession) -> Dict[str, int]:
    result = await db.execute(
        select(CivicReport.status, func.count(CivicReport.id)).group_by(CivicReport.status)
    )
    return {status.value: total for status, total in result.all()}


async def count_by_type(db: AsyncSession) -> Dict[str, int]:
    result = await db.execute(
        select(CivicReport.type, func.count(CivicReport.id)).group_by(CivicReport.type)
    )
    return {report_type.value: total for report_type, total in result.all()}
