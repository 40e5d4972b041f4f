from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime

from civicpulse.models.civic_report import ReportStatus, ReportType
from civicpulse.models.user import UserRole
from civicpulse.models.vote import VoteDirection


class CamelModel(BaseModel):
    """Snake case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Validated fields of a new report, after the multipart form has been parsed
class CivicReportCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    type: ReportType
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    image_url: Optional[str] = None


class ReportAuthor(CamelModel):
    id: int
    name: str
    role: UserRole


# A report as seen by one viewer
class CivicReport(CamelModel):
    id: int
    title: str
    description: str
    type: ReportType
    image_url: Optional[str] = None
    latitude: float
    longitude: float
    support_count: int
    opposition_count: int
    status: ReportStatus
    created_at: datetime
    created_by_id: int
    created_by: Optional[ReportAuthor] = None

    is_own_report: bool
    user_vote: Optional[VoteDirection] = None
    has_voted: bool
    can_vote: bool


class ReportStatusUpdate(CamelModel):
    status: ReportStatus


class WithdrawResponse(CamelModel):
    message: str
    id: int


class ReportStats(CamelModel):
    total: int
    by_status: Dict[str, int]
    by_type: Dict[str, int]
