from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from civicpulse.core.errors import AuthenticationError, ForbiddenError
from civicpulse.core.security import decode_access_token
from civicpulse.crud.user import get_user
from civicpulse.db.session import get_db
from civicpulse.models import User, UserRole

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the caller from the bearer token.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Not authenticated")

    token_data = decode_access_token(credentials.credentials)
    if token_data.sub is None:
        raise AuthenticationError("Could not validate credentials")

    user = await get_user(db, id=token_data.sub)
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("Inactive user")
    return user


def require_roles(*roles: UserRole) -> Callable:
    """
    Dependency factory: the current user, provided their role is one of ``roles``.
    """
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenError("Insufficient role")
        return current_user

    return role_checker


get_current_citizen = require_roles(UserRole.CITIZEN)
get_current_admin = require_roles(UserRole.ADMIN)
get_current_worker = require_roles(UserRole.WORKER)
