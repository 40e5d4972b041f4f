from typing import Any

from fastapi import APIRouter, Depends

from civicpulse.api.deps import get_current_user
from civicpulse.models import User
from civicpulse.schemas import User as UserSchema

router = APIRouter()


@router.get("/users/me", response_model=UserSchema)
async def read_user_me(
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get current user.
    """
    return current_user
