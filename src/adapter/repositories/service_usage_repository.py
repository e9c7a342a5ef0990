"""SQLAlchemy implementation of ServiceUsageRepository"""

from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.service_usage_repository import ServiceUsageRepository
from src.domain.service_usage import ServiceUsage


class SqlAlchemyServiceUsageRepository(ServiceUsageRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, usage: ServiceUsage) -> ServiceUsage:
        self.session.add(usage)
        await self.session.flush()
        await self.session.refresh(usage)
        return usage

    async def get_by_id(self, usage_id: str, for_update: bool = False) -> Optional[ServiceUsage]:
        stmt = select(ServiceUsage).where(ServiceUsage.id == usage_id)

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
        service_key: Optional[str] = None,
    ) -> Tuple[List[ServiceUsage], int]:
        conditions = [ServiceUsage.user_id == user_id]
        if service_key:
            conditions.append(ServiceUsage.service_key == service_key)

        count_stmt = select(func.count()).select_from(ServiceUsage).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(ServiceUsage)
            .where(*conditions)
            .order_by(ServiceUsage.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def update(self, usage: ServiceUsage) -> ServiceUsage:
        self.session.add(usage)
        await self.session.flush()
        return usage
