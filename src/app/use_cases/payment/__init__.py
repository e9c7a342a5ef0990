"""Payment workflow use cases"""
from .create_payment import CreatePayment
from .complete_payment import CompletePayment
from .refund_payment import RefundPayment
from .get_payment import GetPayment
from .list_payments import ListPayments
from .dtos import (
    CreatePaymentCommandDTO,
    CompletePaymentCommandDTO,
    PaymentResponseDTO,
    CreatePaymentResponseDTO,
    CompletePaymentResponseDTO,
    RefundPaymentResponseDTO,
    ListPaymentsResponseDTO,
)

__all__ = [
    "CreatePayment",
    "CompletePayment",
    "RefundPayment",
    "GetPayment",
    "ListPayments",
    "CreatePaymentCommandDTO",
    "CompletePaymentCommandDTO",
    "PaymentResponseDTO",
    "CreatePaymentResponseDTO",
    "CompletePaymentResponseDTO",
    "RefundPaymentResponseDTO",
    "ListPaymentsResponseDTO",
]
