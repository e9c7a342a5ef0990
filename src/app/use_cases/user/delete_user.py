"""DeleteUser Use Case

Removes a user; account, transactions, payments and usages cascade.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_repository import UserRepository
from .dtos import UserProfileDTO

logger = logging.getLogger(__name__)


class DeleteUser:
    def __init__(self, uow: UnitOfWork, user_repo: UserRepository):
        self.uow = uow
        self.user_repo = user_repo

    async def execute(self, identifier: str) -> Result[UserProfileDTO]:
        """Delete by user id or username"""
        try:
            user = await self.user_repo.get_by_id(identifier)
            if not user:
                user = await self.user_repo.get_by_username(identifier)
            if not user:
                return Return.err(
                    Error(code="USER_NOT_FOUND", message=f"No user with id or username {identifier}")
                )

            profile = UserProfileDTO.from_entity(user)
            await self.user_repo.delete(user)
            await self.uow.commit()

            logger.info(f"Deleted user {profile.id} ({profile.username})")
            return Return.ok(profile)

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to delete user {identifier}")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to delete user",
                    reason=str(e),
                )
            )
