from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
import re

from civicpulse.models.user import UserRole


def check_password_complexity(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not re.search(r'[A-Z]', v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r'[a-z]', v):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r'[0-9]', v):
        raise ValueError("Password must contain at least one digit")
    return v


# Shared properties
class UserBase(BaseModel):
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    is_active: Optional[bool] = True


# Properties to receive on registration; self-registered accounts are always citizens
class UserCreate(UserBase):
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v):
        return check_password_complexity(v)


# Properties to return to client
class User(UserBase):
    id: int
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


# Token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# Token payload
class TokenPayload(BaseModel):
    sub: Optional[int] = None
    role: Optional[str] = None
