"""User Account Repository Interface

Defines the contract for account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from decimal import Decimal
from src.domain.user_account import UserAccount


class UserAccountRepository(ABC):
    """
    Repository interface for UserAccount persistence

    Methods use pessimistic locking (SELECT FOR UPDATE) to ensure
    consistency during concurrent credit operations.
    """

    @abstractmethod
    async def get_by_user_id(self, user_id: str, for_update: bool = False) -> Optional[UserAccount]:
        """
        Retrieve account by user ID

        Args:
            user_id: User identifier
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            UserAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: UserAccount) -> UserAccount:
        pass

    @abstractmethod
    async def update_balance(self, account: UserAccount, new_balance: Decimal) -> UserAccount:
        """
        Write a new balance and bump last_updated

        Args:
            account: Account previously loaded with for_update=True
            new_balance: New balance value
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[UserAccount]:
        pass
