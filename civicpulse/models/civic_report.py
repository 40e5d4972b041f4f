from sqlalchemy import CheckConstraint, Column, String, Integer, Enum, ForeignKey, Text, Float
import enum
from sqlalchemy.orm import relationship

from civicpulse.db.base_class import Base


class ReportStatus(str, enum.Enum):
    PENDING = "pending"
    ESCALATED = "escalated"
    RESOLVED = "resolved"


class ReportType(str, enum.Enum):
    ILLEGAL_DUMPING = "illegal_dumping"
    OPEN_TOILET = "open_toilet"
    DIRTY_TOILET = "dirty_toilet"
    OVERFLOW_DUSTBIN = "overflow_dustbin"
    DEAD_ANIMAL = "dead_animal"
    FOUL_SMELL = "fowl"
    PUBLIC_BIN_REQUEST = "public_bin_request"
    PUBLIC_TOILET_REQUEST = "public_toilet_request"


class CivicReport(Base):
    __table_args__ = (
        CheckConstraint("support_count >= 0", name="ck_civicreport_support_count"),
        CheckConstraint("opposition_count >= 0", name="ck_civicreport_opposition_count"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    type = Column(Enum(ReportType), nullable=False)
    image_url = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    support_count = Column(Integer, default=0, nullable=False)
    opposition_count = Column(Integer, default=0, nullable=False)
    status = Column(Enum(ReportStatus), default=ReportStatus.PENDING, nullable=False, index=True)

    # Relationships
    created_by_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = relationship("User", back_populates="reports", lazy="joined")

    votes = relationship("Vote", back_populates="report", cascade="all, delete-orphan")
