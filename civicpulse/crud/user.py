from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.security import get_password_hash, verify_password
from civicpulse.models import User, UserRole
from civicpulse.schemas import UserCreate


async def get_user(db: AsyncSession, id: int) -> Optional[User]:
    result = await db.execute(select(User).filter(User.id == id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """
    Look a user up by email, ignoring case.
    """
    result = await db.execute(select(User).filter(func.lower(User.email) == email.lower()))
    return result.scalars().first()


async def create_user(
    db: AsyncSession, obj_in: UserCreate, role: UserRole = UserRole.CITIZEN
) -> User:
    """
    Create an active account. Self-registration always yields a citizen;
    other roles are only assigned by seeding or by an administrator.
    """
    db_obj = User(
        email=obj_in.email.lower(),
        hashed_password=get_password_hash(obj_in.password),
        full_name=obj_in.full_name,
        role=role,
        is_active=True,
    )
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
    user = await get_user_by_email(db, email=email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user
