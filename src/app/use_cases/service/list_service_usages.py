"""List Service Usages Use Case"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.service_usage_repository import ServiceUsageRepository
from .dtos import ListServiceUsagesResponseDTO, ServiceUsageResponseDTO


class ListServiceUsages:
    """Paginated usage history of a user, newest first, optionally filtered by service"""

    def __init__(self, usage_repo: ServiceUsageRepository):
        self.usage_repo = usage_repo

    async def execute(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        service_key: Optional[str] = None,
    ) -> Result[ListServiceUsagesResponseDTO]:
        usages, total = await self.usage_repo.get_by_user_id(
            user_id=user_id,
            limit=limit,
            offset=offset,
            service_key=service_key,
        )

        return Return.ok(
            ListServiceUsagesResponseDTO(
                usages=[ServiceUsageResponseDTO.from_entity(u) for u in usages],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
