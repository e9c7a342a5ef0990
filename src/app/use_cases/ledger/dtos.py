"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.credit_transaction import TransactionType


class ApplyDeltaCommandDTO(BaseModel):
    """
    Command DTO for a signed balance mutation

    Used as input to ApplyCreditDelta.execute.
    """

    user_id: str = Field(
        ...,
        description="User identifier"
    )

    amount: Decimal = Field(
        ...,
        description="Signed credit delta (negative for withdrawals)"
    )

    transaction_type: TransactionType = Field(
        ...,
        description="deposit, withdrawal, reward or expiry"
    )

    description: Optional[str] = Field(
        default=None,
        description="Audit description"
    )

    related_order: Optional[str] = Field(
        default=None,
        description="Payment or service usage ID"
    )


class CreditTransactionResponseDTO(BaseModel):
    """
    Response DTO for a single ledger mutation

    Returned by ApplyCreditDelta and its deposit/withdraw/reward wrappers.
    """

    transaction_id: str = Field(..., description="Transaction ID")
    user_id: str = Field(..., description="User identifier")
    transaction_type: str = Field(..., description="deposit, withdrawal, reward or expiry")
    amount: Decimal = Field(..., description="Signed credit amount")
    previous_balance: Decimal = Field(..., description="Balance before transaction")
    current_balance: Decimal = Field(..., description="Balance after transaction")
    related_order: Optional[str] = Field(default=None, description="Related payment or usage")
    description: Optional[str] = Field(default=None, description="Audit description")
    created_at: datetime = Field(..., description="Transaction timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "transaction_id": "0c4b3f7e-5a8e-4f6b-9d6a-1c2d3e4f5a6b",
                "user_id": "5b1c0a55-2f0e-4d5c-9a43-8f8c2bd0f4a1",
                "transaction_type": "deposit",
                "amount": "100.000000",
                "previous_balance": "15.000000",
                "current_balance": "115.000000",
                "related_order": "2d1f0e9c-8b7a-4c6d-9e5f-4a3b2c1d0e9f",
                "description": "Top-up of 100 credits",
                "created_at": "2024-01-01T00:00:00Z"
            }
        }


class AccountResponseDTO(BaseModel):
    """Response DTO for GetAccount"""

    user_id: str = Field(..., description="User identifier")
    balance: Decimal = Field(..., description="Current credit balance")
    last_updated: datetime = Field(..., description="Timestamp of last balance update")


class CheckBalanceResponseDTO(BaseModel):
    has_enough_balance: bool
    current_balance: Decimal
    required_amount: Decimal


class TransactionDTO(BaseModel):
    """Single row of the transaction history"""

    id: str
    transaction_type: str
    amount: Decimal
    previous_balance: Decimal
    current_balance: Decimal
    related_order: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime


class ListTransactionsResponseDTO(BaseModel):
    transactions: List[TransactionDTO]
    total: int
    limit: int
    offset: int


class AccountDiscrepancyDTO(BaseModel):
    """An account whose balance differs from the sum of its transactions"""

    user_id: str
    account_balance: Decimal
    calculated_balance: Decimal
    discrepancy: Decimal


class ReconciliationResultDTO(BaseModel):
    total_accounts_checked: int
    discrepancies_found: int
    discrepancies: List[AccountDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
