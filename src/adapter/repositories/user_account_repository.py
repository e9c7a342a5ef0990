"""SQLAlchemy implementation of UserAccountRepository

Provides persistence for UserAccount entities with pessimistic locking support
to prevent race conditions during concurrent credit operations.
"""

from typing import List, Optional
from decimal import Decimal
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_account_repository import UserAccountRepository
from src.domain.user_account import UserAccount
from src.domain.base import utc_now


class SqlAlchemyUserAccountRepository(UserAccountRepository):
    """
    SQLAlchemy implementation of UserAccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Atomic balance updates
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: str, for_update: bool = False) -> Optional[UserAccount]:
        """
        Retrieve account by user ID with optional row-level locking

        Args:
            user_id: User identifier
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            UserAccount if found, None otherwise
        """
        stmt = select(UserAccount).where(UserAccount.user_id == user_id)

        if for_update:
            # Refresh identity-mapped rows so the locked read is never stale
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: UserAccount) -> UserAccount:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update_balance(self, account: UserAccount, new_balance: Decimal) -> UserAccount:
        """
        Update account balance and last_updated timestamp

        Note:
            Should be called within a transaction with the account already locked
        """
        account.balance = new_balance
        account.last_updated = utc_now()
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_all(self) -> List[UserAccount]:
        stmt = select(UserAccount)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
