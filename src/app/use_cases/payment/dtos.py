"""Data Transfer Objects for Payment Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.payment import Payment, PaymentMethod, PaymentStatus


class CreatePaymentCommandDTO(BaseModel):
    """
    Command DTO for creating a payment order

    Used as input to CreatePayment use case.
    """

    user_id: str = Field(..., description="Paying user")
    amount: Decimal = Field(..., description="Amount in currency units")
    method: PaymentMethod = Field(..., description="wechat, alipay or other")


class CompletePaymentCommandDTO(BaseModel):
    """Gateway confirmation of a pending payment"""

    payment_id: str = Field(..., description="Payment identifier")
    transaction_id: str = Field(..., description="Gateway transaction reference")
    success: bool = Field(..., description="Whether the gateway accepted the payment")


class PaymentResponseDTO(BaseModel):
    """Response DTO for a payment order"""

    payment_id: str = Field(..., description="Payment identifier")
    user_id: str = Field(..., description="Paying user")
    amount: Decimal = Field(..., description="Amount in currency units")
    credits: Decimal = Field(..., description="Credits granted on completion")
    status: str = Field(..., description="pending, completed, failed or refunded")
    method: str = Field(..., description="Payment method")
    transaction_id: Optional[str] = Field(default=None, description="Gateway transaction reference")
    created_at: datetime
    updated_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "payment_id": "2d1f0e9c-8b7a-4c6d-9e5f-4a3b2c1d0e9f",
                "user_id": "5b1c0a55-2f0e-4d5c-9a43-8f8c2bd0f4a1",
                "amount": "10.000000",
                "credits": "100.000000",
                "status": "pending",
                "method": "wechat",
                "transaction_id": None,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentResponseDTO":
        return cls(
            payment_id=payment.id,
            user_id=payment.user_id,
            amount=payment.amount,
            credits=payment.credits,
            status=PaymentStatus(payment.status).value,
            method=PaymentMethod(payment.method).value,
            transaction_id=payment.transaction_id,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )


class CreatePaymentResponseDTO(BaseModel):
    payment: PaymentResponseDTO
    payment_url: str = Field(..., description="Gateway URL the client is sent to")


class CompletePaymentResponseDTO(BaseModel):
    payment: PaymentResponseDTO
    credits_added: Decimal = Field(..., description="Credits deposited (0 when the payment failed)")
    current_balance: Optional[Decimal] = Field(default=None, description="Balance after the deposit")


class RefundPaymentResponseDTO(BaseModel):
    payment: PaymentResponseDTO
    credits_removed: Decimal
    current_balance: Decimal


class ListPaymentsResponseDTO(BaseModel):
    payments: List[PaymentResponseDTO]
    total: int
    limit: int
    offset: int
