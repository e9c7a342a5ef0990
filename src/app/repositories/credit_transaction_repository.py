"""Credit Transaction Repository Interface

Defines the contract for credit transaction persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.credit_transaction import CreditTransaction


class CreditTransactionRepository(ABC):
    """
    Repository interface for CreditTransaction persistence

    Transactions are immutable and append-only for audit trail.
    """

    @abstractmethod
    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: str) -> Optional[CreditTransaction]:
        pass

    @abstractmethod
    async def get_by_user_id(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> Tuple[List[CreditTransaction], int]:
        """
        Page through a user's transactions, newest first

        Returns:
            (transactions, total count)
        """
        pass

    @abstractmethod
    async def get_by_related_order(self, related_order: str) -> List[CreditTransaction]:
        pass

    @abstractmethod
    async def get_transaction_sum_by_user(self, user_id: str) -> Decimal:
        """Sum of all transaction amounts for a user (0 when none)"""
        pass
