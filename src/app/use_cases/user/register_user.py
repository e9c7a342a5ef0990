"""RegisterUser Use Case

Creates a user together with the credit account and the signup bonus.
"""

import logging
import secrets
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_service import TokenService
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.domain.credit_transaction import TransactionType
from src.domain.pricing import SIGNUP_BONUS_CREDITS
from src.domain.user import User, PASSWORD_RULES, is_strong_password
from src.domain.user_account import UserAccount
from .dtos import AuthResponseDTO, RegisterUserCommandDTO, UserProfileDTO

logger = logging.getLogger(__name__)


class RegisterUser:
    """
    Use Case: Register a new user

    Business Rules:
    1. username, email and password are required; password must be strong
    2. email and username are unique
    3. User, account and signup bonus are committed together
    4. The bonus is a reward transaction against an account opened at 0,
       so the balance always equals the sum of the user's transactions
    5. With email verification required the user starts unverified with a
       verification token
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        account_repo: UserAccountRepository,
        ledger: ApplyCreditDelta,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        require_email_verification: bool = False,
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.account_repo = account_repo
        self.ledger = ledger
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.require_email_verification = require_email_verification

    async def execute(self, command: RegisterUserCommandDTO) -> Result[AuthResponseDTO]:
        # Step 1: Validate input
        if not command.username or not command.email or not command.password:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message="Username, email, and password are required",
                )
            )

        if not is_strong_password(command.password):
            return Return.err(Error(code="WEAK_PASSWORD", message=PASSWORD_RULES))

        try:
            # Step 2: Uniqueness
            if await self.user_repo.get_by_email(command.email):
                return Return.err(Error(code="EMAIL_IN_USE", message="Email already in use"))

            if await self.user_repo.get_by_username(command.username):
                return Return.err(Error(code="USERNAME_IN_USE", message="Username already in use"))

            # Step 3: Create user
            user = User(
                username=command.username,
                email=command.email,
                phone=command.phone,
                password_hash=self.password_hasher.hash(command.password),
                is_verified=not self.require_email_verification,
                verification_token=secrets.token_hex(32) if self.require_email_verification else None,
            )
            created_user = await self.user_repo.create(user)

            # Step 4: Open account and grant signup bonus
            await self.account_repo.create(
                UserAccount(user_id=created_user.id, balance=Decimal("0"))
            )
            bonus = await self.ledger.apply(
                created_user.id,
                SIGNUP_BONUS_CREDITS,
                TransactionType.REWARD,
                description="Signup bonus",
            )
            if bonus.is_err():
                await self.uow.rollback()
                return bonus

            # Step 5: Commit
            await self.uow.commit()

            logger.info(f"Registered user {created_user.id} ({created_user.username})")

            return Return.ok(
                AuthResponseDTO(
                    user=UserProfileDTO.from_entity(created_user),
                    token=self.token_service.issue(created_user),
                    verification_required=self.require_email_verification,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to register user {command.username}")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to register user",
                    reason=str(e),
                )
            )
