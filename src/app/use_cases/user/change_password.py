"""ChangePassword Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.password_hasher import PasswordHasher
from src.app.repositories.user_repository import UserRepository
from src.domain.user import PASSWORD_RULES, is_strong_password
from .dtos import ChangePasswordCommandDTO

logger = logging.getLogger(__name__)


class ChangePassword:
    """
    Replaces the password of an authenticated user.

    Errors:
        USER_NOT_FOUND, INVALID_CREDENTIALS (current password wrong), WEAK_PASSWORD
    """

    def __init__(self, uow: UnitOfWork, user_repo: UserRepository, password_hasher: PasswordHasher):
        self.uow = uow
        self.user_repo = user_repo
        self.password_hasher = password_hasher

    async def execute(self, command: ChangePasswordCommandDTO) -> Result[None]:
        if not is_strong_password(command.new_password):
            return Return.err(Error(code="WEAK_PASSWORD", message=PASSWORD_RULES))

        try:
            user = await self.user_repo.get_by_id(command.user_id)
            if not user:
                return Return.err(
                    Error(code="USER_NOT_FOUND", message=f"User {command.user_id} not found")
                )

            if not self.password_hasher.verify(command.current_password, user.password_hash):
                return Return.err(
                    Error(code="INVALID_CREDENTIALS", message="Current password is incorrect")
                )

            user.password_hash = self.password_hasher.hash(command.new_password)
            await self.user_repo.update(user)
            await self.uow.commit()

            logger.info(f"Password changed for user {user.id}")
            return Return.ok(None)

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to change password for user {command.user_id}")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to change password",
                    reason=str(e),
                )
            )
