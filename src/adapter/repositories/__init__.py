from .user_repository import SqlAlchemyUserRepository
from .user_account_repository import SqlAlchemyUserAccountRepository
from .credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .service_usage_repository import SqlAlchemyServiceUsageRepository

__all__ = [
    "SqlAlchemyUserRepository",
    "SqlAlchemyUserAccountRepository",
    "SqlAlchemyCreditTransactionRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyServiceUsageRepository",
]
