from sqlalchemy import Column, Integer, Enum, ForeignKey, UniqueConstraint
import enum
from sqlalchemy.orm import relationship

from civicpulse.db.base_class import Base


class VoteDirection(str, enum.Enum):
    SUPPORT = "support"
    OPPOSE = "oppose"


class Vote(Base):
    # One vote per user per report; the constraint also settles concurrent duplicates.
    __table_args__ = (
        UniqueConstraint("report_id", "user_id", name="uq_vote_report_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    direction = Column(Enum(VoteDirection), nullable=False)

    # Relationships
    report_id = Column(Integer, ForeignKey("civicreport.id", ondelete="CASCADE"), nullable=False, index=True)
    report = relationship("CivicReport", back_populates="votes")

    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
