from sqlalchemy import Column, String, Integer, Enum, ForeignKey, Float
import enum

from civicpulse.db.base_class import Base


class FacilityType(str, enum.Enum):
    PUBLIC_TOILET = "public_toilet"
    PUBLIC_BIN = "public_bin"
    COLLECTION_POINT = "collection_point"
    RECYCLING_CENTER = "recycling_center"


class PublicFacility(Base):
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    type = Column(Enum(FacilityType), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)


class WorkerLocation(Base):
    # updated_at doubles as the time of the last position fix
    id = Column(Integer, primary_key=True, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    worker_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, unique=True)
