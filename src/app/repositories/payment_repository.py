"""Payment Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from src.domain.payment import Payment, PaymentStatus


class PaymentRepository(ABC):
    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: str, for_update: bool = False) -> Optional[Payment]:
        """
        Retrieve a payment

        Args:
            payment_id: Payment ID
            for_update: If True, lock the row so concurrent callbacks serialize
        """
        pass

    @abstractmethod
    async def get_by_user_id(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        status: Optional[PaymentStatus] = None,
    ) -> Tuple[List[Payment], int]:
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        pass
