"""Request schemas for Payment API"""

from decimal import Decimal
from pydantic import BaseModel, Field

from src.domain.payment import PaymentMethod


class CreatePaymentRequestSchema(BaseModel):
    """
    Request schema for opening a payment

    Used for POST /payments/create endpoint. Range limits are enforced by
    the use case so the client gets INVALID_AMOUNT.
    """

    amount: Decimal = Field(..., description="Amount in currency units")
    payment_method: PaymentMethod = Field(..., description="wechat, alipay or other")

    class Config:
        json_schema_extra = {
            "example": {"amount": "10.00", "payment_method": "wechat"}
        }


class PaymentCallbackRequestSchema(BaseModel):
    """Gateway confirmation body for POST /payments/callback"""

    payment_id: str = Field(..., min_length=1)
    transaction_id: str = Field(..., min_length=1)
    success: bool
