"""VerifyEmail Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_repository import UserRepository
from .dtos import UserProfileDTO

logger = logging.getLogger(__name__)


class VerifyEmail:
    def __init__(self, uow: UnitOfWork, user_repo: UserRepository):
        self.uow = uow
        self.user_repo = user_repo

    async def execute(self, token: str) -> Result[UserProfileDTO]:
        """
        Mark the user owning the verification token as verified

        Errors:
            INVALID_TOKEN: no user holds this token
        """
        try:
            user = await self.user_repo.get_by_verification_token(token)
            if not user:
                return Return.err(
                    Error(
                        code="INVALID_TOKEN",
                        message="Invalid or expired verification token",
                    )
                )

            user.is_verified = True
            user.verification_token = None
            updated = await self.user_repo.update(user)
            await self.uow.commit()

            logger.info(f"Verified email for user {user.id}")
            return Return.ok(UserProfileDTO.from_entity(updated))

        except Exception as e:
            await self.uow.rollback()
            logger.exception("Failed to verify email")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to verify email",
                    reason=str(e),
                )
            )
