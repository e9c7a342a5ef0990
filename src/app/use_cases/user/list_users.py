"""ListUsers Use Case"""

from libs.result import Result, Return
from src.app.repositories.user_repository import UserRepository
from .dtos import ListUsersResponseDTO, UserProfileDTO


class ListUsers:
    """All users, newest first (maintenance use)"""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def execute(self) -> Result[ListUsersResponseDTO]:
        users = await self.user_repo.get_all()
        return Return.ok(
            ListUsersResponseDTO(
                users=[UserProfileDTO.from_entity(u) for u in users],
                total=len(users),
            )
        )
