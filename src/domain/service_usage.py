"""Service Usage Domain Entity

One attempted paid action and its credit cost/outcome.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, UTCDateTime, generate_uuid, utc_now


class ServiceUsageStatus(str, Enum):
    """Service usage status types"""
    SUCCESS = "success"
    FAILED = "failed"
    REFUNDED = "refunded"


class ServiceUsage(BaseModel, table=True):
    """
    Service Usage - Record of one paid action attempt

    Domain Rules:
    - Created once per consumption attempt as success or failed
    - success -> refunded is the only transition, and only within the refund window
    - A failed usage never debited any credits
    """

    __tablename__ = "service_usages"
    __table_args__ = (
        Index('ix_service_usages_user_created', 'user_id', 'created_at'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Usage identifier (uuid4)"
    )

    user_id: str = Field(
        sa_column=Column(
            String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        ),
        description="User who invoked the service"
    )

    service_key: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Pricing key of the service (e.g. ai-image-edit)"
    )

    credits_used: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Credits charged for the attempt"
    )

    status: ServiceUsageStatus = Field(
        description="Outcome (success, failed, refunded)"
    )

    details: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-form details or failure reason"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Attempt timestamp"
    )

    def is_refundable(self, now: datetime, window: timedelta) -> bool:
        if ServiceUsageStatus(self.status) != ServiceUsageStatus.SUCCESS:
            return False
        return now - self.created_at <= window
