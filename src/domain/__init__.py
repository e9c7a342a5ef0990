from .base import BaseModel, generate_uuid
from .user import User
from .user_account import UserAccount
from .credit_transaction import CreditTransaction, TransactionType
from .payment import Payment, PaymentStatus, PaymentMethod, PAYMENT_TRANSITIONS
from .service_usage import ServiceUsage, ServiceUsageStatus

__all__ = [
    "BaseModel",
    "generate_uuid",
    "User",
    "UserAccount",
    "CreditTransaction",
    "TransactionType",
    "Payment",
    "PaymentStatus",
    "PaymentMethod",
    "PAYMENT_TRANSITIONS",
    "ServiceUsage",
    "ServiceUsageStatus",
]
