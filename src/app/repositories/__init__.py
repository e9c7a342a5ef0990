from .user_repository import UserRepository
from .user_account_repository import UserAccountRepository
from .credit_transaction_repository import CreditTransactionRepository
from .payment_repository import PaymentRepository
from .service_usage_repository import ServiceUsageRepository

__all__ = [
    "UserRepository",
    "UserAccountRepository",
    "CreditTransactionRepository",
    "PaymentRepository",
    "ServiceUsageRepository",
]
