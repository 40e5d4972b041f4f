from sqlalchemy import Boolean, Column, String, Integer, Enum
import enum
from sqlalchemy.orm import relationship

from civicpulse.db.base_class import Base


class UserRole(str, enum.Enum):
    CITIZEN = "CITIZEN"
    WORKER = "WORKER"
    ADMIN = "ADMIN"


class User(Base):
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(Enum(UserRole), default=UserRole.CITIZEN, nullable=False)
    is_active = Column(Boolean, default=True)

    # Relationships
    reports = relationship("CivicReport", back_populates="created_by")
