"""SQLAlchemy implementation of CreditTransactionRepository

Provides append-only persistence for CreditTransaction entities.
"""

from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import CreditTransaction


class SqlAlchemyCreditTransactionRepository(CreditTransactionRepository):
    """
    SQLAlchemy implementation of CreditTransactionRepository

    Features:
    - Immutable append-only transactions
    - Paginated history per user
    - Balance reconstruction via SUM(amount)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: str) -> Optional[CreditTransaction]:
        stmt = select(CreditTransaction).where(CreditTransaction.id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user_id(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> Tuple[List[CreditTransaction], int]:
        """
        Page through a user's transactions ordered by created_at DESC

        Args:
            user_id: User identifier
            limit: Maximum number of rows
            offset: Rows to skip

        Returns:
            (transactions, total count for the user)
        """
        count_stmt = (
            select(func.count())
            .select_from(CreditTransaction)
            .where(CreditTransaction.user_id == user_id)
        )
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.user_id == user_id)
            .order_by(CreditTransaction.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_by_related_order(self, related_order: str) -> List[CreditTransaction]:
        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.related_order == related_order)
            .order_by(CreditTransaction.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_transaction_sum_by_user(self, user_id: str) -> Decimal:
        stmt = select(func.sum(CreditTransaction.amount)).where(
            CreditTransaction.user_id == user_id
        )
        total = (await self.session.execute(stmt)).scalar_one_or_none()
        if total is None:
            return Decimal("0")
        return Decimal(str(total))
