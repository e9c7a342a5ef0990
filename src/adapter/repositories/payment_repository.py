"""SQLAlchemy implementation of PaymentRepository"""

from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment, PaymentStatus
from src.domain.base import utc_now


class SqlAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_id(self, payment_id: str, for_update: bool = False) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.id == payment_id)

        if for_update:
            # Refresh identity-mapped rows so the locked read is never stale
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user_id(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        status: Optional[PaymentStatus] = None,
    ) -> Tuple[List[Payment], int]:
        conditions = [Payment.user_id == user_id]
        if status is not None:
            conditions.append(Payment.status == status)

        count_stmt = select(func.count()).select_from(Payment).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Payment)
            .where(*conditions)
            .order_by(Payment.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def update(self, payment: Payment) -> Payment:
        payment.updated_at = utc_now()
        self.session.add(payment)
        await self.session.flush()
        return payment
