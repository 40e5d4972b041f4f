from civicpulse.schemas.user import User, UserCreate, Token, TokenPayload
from civicpulse.schemas.civic_report import (
    CivicReport,
    CivicReportCreate,
    ReportAuthor,
    ReportStats,
    ReportStatusUpdate,
    WithdrawResponse,
)
from civicpulse.schemas.asset import (
    MapCenter,
    MapLayer,
    Position,
    PublicFacility,
    PublicFacilityCreate,
    WorkerLocation,
    WorkerLocationUpdate,
)
