"""Data Transfer Objects for User Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.user import User


class UserProfileDTO(BaseModel):
    """
    Public view of a user

    The single shape used by every profile response (register, login, me).
    """

    id: str
    username: str
    email: str
    phone: Optional[str] = None
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserProfileDTO":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            phone=user.phone,
            is_verified=user.is_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class RegisterUserCommandDTO(BaseModel):
    username: str = Field(..., description="Unique login name")
    email: str = Field(..., description="Unique email address")
    password: str = Field(..., description="Plain-text password")
    phone: Optional[str] = Field(default=None, description="Optional phone number")


class LoginUserCommandDTO(BaseModel):
    identifier: str = Field(..., description="Username or email")
    password: str


class ChangePasswordCommandDTO(BaseModel):
    user_id: str
    current_password: str
    new_password: str


class AuthResponseDTO(BaseModel):
    """Returned by register and login"""

    user: UserProfileDTO
    token: str
    verification_required: bool = False


class ListUsersResponseDTO(BaseModel):
    users: List[UserProfileDTO]
    total: int
