"""LoginUser Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_service import TokenService
from src.app.repositories.user_repository import UserRepository
from .dtos import AuthResponseDTO, LoginUserCommandDTO, UserProfileDTO

logger = logging.getLogger(__name__)


class LoginUser:
    """
    Authenticates by username or email and issues a bearer token.

    Errors:
        INVALID_CREDENTIALS: unknown identifier or wrong password
        EMAIL_NOT_VERIFIED: email verification is required and pending
    """

    def __init__(
        self,
        user_repo: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        require_email_verification: bool = False,
    ):
        self.user_repo = user_repo
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.require_email_verification = require_email_verification

    async def execute(self, command: LoginUserCommandDTO) -> Result[AuthResponseDTO]:
        user = await self.user_repo.get_by_username(command.identifier)
        if not user:
            user = await self.user_repo.get_by_email(command.identifier)

        if not user or not self.password_hasher.verify(command.password, user.password_hash):
            logger.info(f"Failed login for {command.identifier}")
            return Return.err(
                Error(code="INVALID_CREDENTIALS", message="Invalid username or password")
            )

        if self.require_email_verification and not user.is_verified:
            return Return.err(
                Error(
                    code="EMAIL_NOT_VERIFIED",
                    message="Please verify your email before logging in",
                )
            )

        return Return.ok(
            AuthResponseDTO(
                user=UserProfileDTO.from_entity(user),
                token=self.token_service.issue(user),
            )
        )
