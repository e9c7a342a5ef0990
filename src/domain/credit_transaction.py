"""Credit Transaction Domain Entity

Immutable append-only audit trail of all credit mutations.
Each transaction records balance changes with complete context.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, UTCDateTime, generate_uuid, utc_now


class TransactionType(str, Enum):
    """Credit transaction types"""
    DEPOSIT = "deposit"          # Credits bought through a payment
    WITHDRAWAL = "withdrawal"    # Credits spent (service usage, payment refund)
    REWARD = "reward"            # Credits granted (signup bonus, usage refund)
    EXPIRY = "expiry"            # Credits removed on expiration


class CreditTransaction(BaseModel, table=True):
    """
    Credit Transaction - Immutable audit trail of credit mutations

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is signed: withdrawals and expiries are negative
    - previous_balance + amount == current_balance
    - related_order links to the payment or service usage that caused it
    """

    __tablename__ = "credit_transactions"
    __table_args__ = (
        Index('ix_credit_transactions_user_created', 'user_id', 'created_at'),
        Index('ix_credit_transactions_related_order', 'related_order'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Transaction identifier (uuid4)"
    )

    user_id: str = Field(
        sa_column=Column(
            String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        ),
        description="User whose balance changed"
    )

    transaction_type: TransactionType = Field(
        description="Type of transaction (deposit, withdrawal, reward, expiry)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Signed credit amount (precision: 18,6)"
    )

    previous_balance: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Balance before the transaction"
    )

    current_balance: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Balance after the transaction"
    )

    related_order: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="Payment or service usage ID"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Human readable description"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime, nullable=False),
        description="Transaction timestamp (immutable)"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "0c4b3f7e-5a8e-4f6b-9d6a-1c2d3e4f5a6b",
                "user_id": "5b1c0a55-2f0e-4d5c-9a43-8f8c2bd0f4a1",
                "transaction_type": "withdrawal",
                "amount": "-5.000000",
                "previous_balance": "15.000000",
                "current_balance": "10.000000",
                "related_order": "9f8e7d6c-5b4a-4392-8170-6f5e4d3c2b1a",
                "description": "Used ai-image-edit service",
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
