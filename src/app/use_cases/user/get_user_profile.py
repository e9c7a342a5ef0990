"""GetUserProfile Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.user_repository import UserRepository
from .dtos import UserProfileDTO


class GetUserProfile:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def execute(self, user_id: str) -> Result[UserProfileDTO]:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            return Return.err(Error(code="USER_NOT_FOUND", message="User not found"))

        return Return.ok(UserProfileDTO.from_entity(user))
