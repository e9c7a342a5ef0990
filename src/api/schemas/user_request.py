"""Request schemas for User API"""

from typing import Optional
from pydantic import BaseModel, Field


class RegisterRequestSchema(BaseModel):
    """
    Request schema for registration

    Used for POST /users/register endpoint.
    """

    username: str = Field(..., min_length=1, max_length=64, description="Unique login name")
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$", description="Email address")
    password: str = Field(..., min_length=1, description="Password (checked for strength)")
    phone: Optional[str] = Field(default=None, max_length=32, description="Optional phone number")

    class Config:
        json_schema_extra = {
            "example": {
                "username": "alice",
                "email": "alice@example.com",
                "password": "Str0ng!Pass",
            }
        }


class LoginRequestSchema(BaseModel):
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class ChangePasswordRequestSchema(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
