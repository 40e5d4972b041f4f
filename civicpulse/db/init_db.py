from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from civicpulse.core.config import settings
from civicpulse.core.logger import get_logger
from civicpulse.db.base_class import Base
from civicpulse.models import User, UserRole

# Imported so every table is registered on Base.metadata
from civicpulse.models import CivicReport, Vote, PublicFacility, WorkerLocation  # noqa: F401

logger = get_logger("db")


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables initialized")


async def create_initial_data(session: AsyncSession) -> None:
    """Create the first administrator if it does not exist yet."""
    from civicpulse.core.security import get_password_hash

    result = await session.execute(
        select(User).filter(User.email == settings.FIRST_ADMIN_EMAIL)
    )
    admin = result.scalars().first()

    if not admin:
        admin_user = User(
            email=settings.FIRST_ADMIN_EMAIL,
            hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
            full_name="CivicPulse Admin",
            role=UserRole.ADMIN,
            is_active=True,
        )
        session.add(admin_user)
        await session.commit()
        logger.info("Admin user created")

    logger.info("Initial data created")
