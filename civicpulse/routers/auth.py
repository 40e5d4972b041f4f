from datetime import timedelta
from typing import Any
import traceback

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.config import settings
from civicpulse.core.errors import AuthenticationError, CivicReportError, ConflictError
from civicpulse.core.logger import get_logger
from civicpulse.core.security import create_access_token
from civicpulse.crud import user as crud_user
from civicpulse.db.session import get_db
from civicpulse.models import User as UserModel
from civicpulse.schemas import Token, User, UserCreate

logger = get_logger("auth")

router = APIRouter()


def _issue_token(user: UserModel) -> Token:
    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return Token(
        access_token=create_access_token(subject=user.id, role=user.role.value, expires_delta=expires)
    )


@router.post("/auth/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Exchange email and password for a bearer token carrying the user's id and role.
    """
    email = form_data.username
    try:
        user = await crud_user.authenticate_user(db, email=email, password=form_data.password)
        if user is None:
            logger.warning(f"Login rejected: email={email}")
            raise AuthenticationError("Incorrect email or password")
        if not user.is_active:
            logger.warning(f"Login rejected for inactive account: user_id={user.id}")
            raise AuthenticationError("Account is not active")

        logger.info(f"Token issued: user_id={user.id}, role={user.role.value}")
        return _issue_token(user)
    except CivicReportError:
        raise
    except Exception as e:
        logger.error(f"Login error: email={email}, error={str(e)}\n{traceback.format_exc()}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during login",
        )


@router.post("/auth/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)) -> Any:
    try:
        if await crud_user.get_user_by_email(db, email=user_in.email):
            logger.warning(f"Registration rejected, email taken: email={user_in.email}")
            raise ConflictError("Email already registered")

        user = await crud_user.create_user(db, obj_in=user_in)
        logger.info(f"Citizen registered: user_id={user.id}")
        return user
    except CivicReportError:
        raise
    except Exception as e:
        logger.error(f"Registration error: email={user_in.email}, error={str(e)}\n{traceback.format_exc()}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during registration",
        )
