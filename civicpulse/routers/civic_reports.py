from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.api.deps import get_current_admin, get_current_citizen, get_current_user
from civicpulse.core.errors import ValidationError
from civicpulse.core.logger import get_logger
from civicpulse.db.session import get_db
from civicpulse.models import User
from civicpulse.schemas import CivicReport, ReportStats, ReportStatusUpdate, WithdrawResponse
from civicpulse.services import civic_report as service
from civicpulse.services.storage import delete_report_photo, save_report_photo

logger = get_logger("civic_reports")

router = APIRouter()


@router.post(
    "/civic-report",
    response_model=CivicReport,
    status_code=status.HTTP_201_CREATED,
)
async def create_report(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_citizen),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Submit a report as a multipart form with an optional photo.
    """
    if not title or not type or not latitude or not longitude:
        logger.warning(f"Report rejected - missing fields: user_id={current_user.id}")
        raise ValidationError("Missing required fields")

    fields = {
        "title": title,
        "description": description or "",
        "type": type,
        "latitude": latitude,
        "longitude": longitude,
    }
    # Parse first so a rejected form never leaves a stored photo behind
    service.parse_report_fields(fields)

    fields["image_url"] = await save_report_photo(photo)
    try:
        return await service.create_report(db, fields, creator_id=current_user.id)
    except Exception:
        delete_report_photo(fields["image_url"])
        raise


@router.get("/civic-report", response_model=List[CivicReport])
async def read_all_reports(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    All reports, annotated for the caller.
    """
    return await service.get_all_reports(db, user_id=current_user.id)


@router.get("/civic-report/my-reports", response_model=List[CivicReport])
async def read_my_reports(
    current_user: User = Depends(get_current_citizen),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await service.get_my_reports(db, user_id=current_user.id)


@router.get("/civic-report/other-reports", response_model=List[CivicReport])
async def read_other_reports(
    current_user: User = Depends(get_current_citizen),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await service.get_other_reports(db, user_id=current_user.id)


@router.get("/civic-report/stats", response_model=ReportStats)
async def read_report_stats(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Report counts per status and per type, for the admin dashboard.
    """
    return await service.get_report_stats(db)


@router.get("/civic-report/{report_id}", response_model=CivicReport)
async def read_report(
    report_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await service.get_report_by_id(db, id=report_id, user_id=current_user.id)


@router.post("/civic-report/{report_id}/support", response_model=CivicReport)
async def support_report(
    report_id: int,
    current_user: User = Depends(get_current_citizen),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await service.support_report(db, id=report_id, user_id=current_user.id)


@router.post("/civic-report/{report_id}/oppose", response_model=CivicReport)
async def oppose_report(
    report_id: int,
    current_user: User = Depends(get_current_citizen),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await service.oppose_report(db, id=report_id, user_id=current_user.id)


@router.patch("/civic-report/{report_id}/status", response_model=CivicReport)
async def update_report_status(
    report_id: int,
    status_in: ReportStatusUpdate,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Move a report between pending, escalated and resolved.
    """
    return await service.update_report_status(
        db, id=report_id, status=status_in.status, user_id=current_user.id
    )


@router.delete("/civic-report/{report_id}", response_model=WithdrawResponse)
async def withdraw_report(
    report_id: int,
    current_user: User = Depends(get_current_citizen),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Withdraw one of the caller's own reports.
    """
    return await service.withdraw_report(db, id=report_id, user_id=current_user.id)
