from civicpulse.models.user import User, UserRole
from civicpulse.models.civic_report import CivicReport, ReportStatus, ReportType
from civicpulse.models.vote import Vote, VoteDirection
from civicpulse.models.asset import PublicFacility, FacilityType, WorkerLocation
