"""Service Usage Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from src.domain.service_usage import ServiceUsage


class ServiceUsageRepository(ABC):
    @abstractmethod
    async def create(self, usage: ServiceUsage) -> ServiceUsage:
        pass

    @abstractmethod
    async def get_by_id(self, usage_id: str, for_update: bool = False) -> Optional[ServiceUsage]:
        pass

    @abstractmethod
    async def get_by_user_id(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        service_key: Optional[str] = None,
    ) -> Tuple[List[ServiceUsage], int]:
        pass

    @abstractmethod
    async def update(self, usage: ServiceUsage) -> ServiceUsage:
        pass
