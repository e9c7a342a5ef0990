"""User Account Domain Entity

Holds the credit balance of a user. Each user has exactly one account.
The balance is only changed through the ledger, which appends a
CreditTransaction for every mutation.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, UTCDateTime, utc_now


class UserAccount(BaseModel, table=True):
    """
    User Account - Credit balance of a user

    Domain Rules:
    - One account per user (user_id is the primary key)
    - Deleted together with the owning user (ON DELETE CASCADE)
    - balance equals the sum of the user's CreditTransaction amounts
    - A withdrawal may never leave the balance negative
    """

    __tablename__ = "user_accounts"

    user_id: str = Field(
        sa_column=Column(
            String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
        ),
        description="Owning user ID"
    )

    balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
        description="Current credit balance (precision: 18,6)"
    )

    last_updated: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Timestamp of the last balance mutation"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "user_id": "5b1c0a55-2f0e-4d5c-9a43-8f8c2bd0f4a1",
                "balance": "15.000000",
                "last_updated": "2024-01-01T00:00:00Z"
            }
        }
