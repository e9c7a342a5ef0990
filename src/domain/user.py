"""User Domain Entity

A registered studio user. Owns exactly one UserAccount, created in the same
transaction as the user row.
"""

import re
from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String, Boolean
from src.domain.base import BaseModel, UTCDateTime, generate_uuid, utc_now

# At least 8 chars with a lowercase, an uppercase, a digit and one of @$!%*?&
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)

PASSWORD_RULES = (
    "Password must be at least 8 characters long and include uppercase, "
    "lowercase, number and special character (@$!%*?&)"
)


def is_strong_password(password: str) -> bool:
    return bool(PASSWORD_PATTERN.match(password))


class User(BaseModel, table=True):
    """
    User - Registered account holder

    Domain Rules:
    - username and email are unique, phone is unique when present
    - password_hash is a bcrypt hash (salt embedded)
    - verification_token is cleared once the email is verified
    """

    __tablename__ = "users"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="User identifier (uuid4)"
    )

    username: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True, index=True),
        description="Unique login name"
    )

    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
        description="Unique email address"
    )

    phone: Optional[str] = Field(
        default=None,
        sa_column=Column(String(32), nullable=True, unique=True),
        description="Optional phone number"
    )

    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="bcrypt password hash"
    )

    is_verified: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="Whether the email address has been verified"
    )

    verification_token: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True, index=True),
        description="Pending email verification token"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Registration timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Last profile update timestamp"
    )
