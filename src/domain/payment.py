"""Payment Domain Entity

A payment order that converts currency into credits once confirmed.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, UTCDateTime, generate_uuid, utc_now


class PaymentStatus(str, Enum):
    """Payment status types"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    """Supported payment methods"""
    WECHAT = "wechat"
    ALIPAY = "alipay"
    OTHER = "other"


PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.COMPLETED: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: set(),
    PaymentStatus.REFUNDED: set(),
}


class Payment(BaseModel, table=True):
    """
    Payment - Order converting currency units into credits

    Domain Rules:
    - Created pending; credits fixed at creation (amount * exchange rate)
    - Status transitions: pending -> completed | failed, completed -> refunded
    - failed and refunded are terminal
    - Only a completed payment has deposited credits into the ledger
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index('ix_payments_user_created', 'user_id', 'created_at'),
        Index('ix_payments_status', 'status'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Payment identifier (uuid4)"
    )

    user_id: str = Field(
        sa_column=Column(
            String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        ),
        description="Paying user"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Amount in currency units"
    )

    credits: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Credits granted when the payment completes"
    )

    status: PaymentStatus = Field(
        default=PaymentStatus.PENDING,
        description="Payment status (pending, completed, failed, refunded)"
    )

    method: PaymentMethod = Field(
        description="Payment method (wechat, alipay, other)"
    )

    transaction_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(128), nullable=True),
        description="Gateway transaction reference"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Payment creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Last status change timestamp"
    )

    def can_transition_to(self, status: PaymentStatus) -> bool:
        return status in PAYMENT_TRANSITIONS[PaymentStatus(self.status)]
