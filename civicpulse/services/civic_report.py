"""
Business rules for civic reports: creation, viewer-relative listing,
one-vote-per-user voting and owner-only withdrawal.
"""
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from civicpulse.core.logger import get_logger
from civicpulse.crud import civic_report as crud
from civicpulse.models import CivicReport, ReportStatus, VoteDirection
from civicpulse.schemas import CivicReport as CivicReportSchema
from civicpulse.schemas import CivicReportCreate, ReportAuthor, ReportStats, WithdrawResponse
from civicpulse.services.storage import delete_report_photo

logger = get_logger("civic_report")

REQUIRED_FIELDS = ("title", "type", "latitude", "longitude")
ALREADY_VOTED = "You have already voted on this report"


def annotate_report(
    report: Any, user_vote: Optional[VoteDirection], viewer_id: Optional[int]
) -> CivicReportSchema:
    """
    Describe a report relative to one viewer.

    ``report`` only needs the report attributes, so plain objects work as
    well as ORM rows. A viewer never votes on their own report and votes at
    most once on any other.
    """
    is_own_report = report.created_by_id == viewer_id
    has_voted = user_vote is not None

    author = getattr(report, "created_by", None)
    created_by = None
    if author is not None:
        created_by = ReportAuthor(
            id=author.id,
            name=author.full_name or author.email,
            role=author.role,
        )

    return CivicReportSchema(
        id=report.id,
        title=report.title,
        description=report.description or "",
        type=report.type,
        image_url=report.image_url,
        latitude=report.latitude,
        longitude=report.longitude,
        support_count=report.support_count,
        opposition_count=report.opposition_count,
        status=report.status,
        created_at=report.created_at,
        created_by_id=report.created_by_id,
        created_by=created_by,
        is_own_report=is_own_report,
        user_vote=user_vote,
        has_voted=has_voted,
        can_vote=not is_own_report and not has_voted,
    )


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _describe(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"])
    return f"Invalid {field}: {error['msg']}"


def parse_report_fields(fields: Mapping[str, Any]) -> CivicReportCreate:
    """
    Validate raw form fields. Title, type, latitude and longitude are required;
    description defaults to an empty string.
    """
    missing = [name for name in REQUIRED_FIELDS if _is_blank(fields.get(name))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    try:
        return CivicReportCreate(
            title=str(fields["title"]).strip(),
            description=fields.get("description") or "",
            type=fields["type"],
            latitude=fields["latitude"],
            longitude=fields["longitude"],
            image_url=fields.get("image_url"),
        )
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc))


async def create_report(
    db: AsyncSession, fields: Mapping[str, Any], creator_id: int
) -> CivicReportSchema:
    report_in = parse_report_fields(fields)
    report = await crud.create_report(db, obj_in=report_in, created_by_id=creator_id)
    logger.info(
        f"Report created: id={report.id}, type={report.type.value}, created_by_id={creator_id}"
    )
    return annotate_report(report, None, creator_id)


async def _annotate_many(
    db: AsyncSession, reports: List[CivicReport], user_id: int
) -> List[CivicReportSchema]:
    votes = await crud.get_user_votes(db, user_id=user_id, report_ids=[r.id for r in reports])
    return [annotate_report(report, votes.get(report.id), user_id) for report in reports]


async def get_all_reports(db: AsyncSession, user_id: int) -> List[CivicReportSchema]:
    reports = await crud.get_reports(db)
    return await _annotate_many(db, reports, user_id)


async def get_my_reports(db: AsyncSession, user_id: int) -> List[CivicReportSchema]:
    reports = await crud.get_reports(db, created_by_id=user_id)
    return await _annotate_many(db, reports, user_id)


async def get_other_reports(db: AsyncSession, user_id: int) -> List[CivicReportSchema]:
    reports = await crud.get_reports(db, exclude_created_by_id=user_id)
    return await _annotate_many(db, reports, user_id)


async def _get_or_404(db: AsyncSession, id: int) -> CivicReport:
    report = await crud.get_report(db, id=id)
    if not report:
        logger.warning(f"Report not found: id={id}")
        raise NotFoundError("Report not found")
    return report


async def get_report_by_id(db: AsyncSession, id: int, user_id: int) -> CivicReportSchema:
    report = await _get_or_404(db, id)
    vote = await crud.get_user_vote(db, report_id=id, user_id=user_id)
    return annotate_report(report, vote.direction if vote else None, user_id)


async def cast_vote(
    db: AsyncSession, id: int, user_id: int, direction: VoteDirection
) -> CivicReportSchema:
    """
    Record one vote and bump its counter in a single transaction.

    The unique (report, user) constraint rejects a duplicate that slipped past
    the existence check, and the whole transaction is rolled back so the
    counters always match the vote rows.
    """
    report = await _get_or_404(db, id)
    if report.created_by_id == user_id:
        logger.warning(f"Vote on own report rejected: id={id}, user_id={user_id}")
        raise ForbiddenError("You cannot vote on your own report")

    if await crud.get_user_vote(db, report_id=id, user_id=user_id):
        logger.warning(f"Duplicate vote rejected: id={id}, user_id={user_id}")
        raise ConflictError(ALREADY_VOTED)

    try:
        await crud.add_vote(db, report_id=id, user_id=user_id, direction=direction)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(f"Concurrent duplicate vote rejected: id={id}, user_id={user_id}")
        raise ConflictError(ALREADY_VOTED)

    await db.refresh(report, ["support_count", "opposition_count", "updated_at"])
    logger.info(f"Vote cast: id={id}, user_id={user_id}, direction={direction.value}")
    return annotate_report(report, direction, user_id)


async def support_report(db: AsyncSession, id: int, user_id: int) -> CivicReportSchema:
    return await cast_vote(db, id, user_id, VoteDirection.SUPPORT)


async def oppose_report(db: AsyncSession, id: int, user_id: int) -> CivicReportSchema:
    return await cast_vote(db, id, user_id, VoteDirection.OPPOSE)


async def withdraw_report(db: AsyncSession, id: int, user_id: int) -> WithdrawResponse:
    """
    Delete a report on behalf of its creator while it is still pending.
    Votes go with it.
    """
    report = await _get_or_404(db, id)
    if report.created_by_id != user_id:
        logger.warning(f"Withdraw by non-owner rejected: id={id}, user_id={user_id}")
        raise ForbiddenError("You can only withdraw your own reports")
    if report.status != ReportStatus.PENDING:
        logger.warning(f"Withdraw of {report.status.value} report rejected: id={id}, user_id={user_id}")
        raise ForbiddenError("Only pending reports can be withdrawn")

    image_url = report.image_url
    await crud.delete_report(db, db_obj=report)
    delete_report_photo(image_url)

    logger.info(f"Report withdrawn: id={id}, user_id={user_id}")
    return WithdrawResponse(message="Report withdrawn successfully", id=id)


async def update_report_status(
    db: AsyncSession, id: int, status: ReportStatus, user_id: int
) -> CivicReportSchema:
    report = await _get_or_404(db, id)
    previous = report.status
    report = await crud.update_status(db, db_obj=report, status=status)
    logger.info(
        f"Report status changed: id={id}, from={previous.value}, to={status.value}, by={user_id}"
    )
    vote = await crud.get_user_vote(db, report_id=id, user_id=user_id)
    return annotate_report(report, vote.direction if vote else None, user_id)


async def get_report_stats(db: AsyncSession) -> ReportStats:
    by_status: Dict[str, int] = {status.value: 0 for status in ReportStatus}
    by_status.update(await crud.count_by_status(db))
    by_type = await crud.count_by_type(db)
    return ReportStats(total=sum(by_status.values()), by_status=by_status, by_type=by_type)
