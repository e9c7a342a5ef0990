"""Get Account Use Case

Retrieves a user's credit account.
"""

from libs.result import Result, Return, Error
from src.app.repositories.user_account_repository import UserAccountRepository
from .dtos import AccountResponseDTO


class GetAccount:
    """
    Get Account Use Case

    Read-only operation that returns the balance of a user's account.
    """

    def __init__(self, account_repo: UserAccountRepository):
        """
        Initialize GetAccount use case

        Args:
            account_repo: Repository for accessing user accounts
        """
        self.account_repo = account_repo

    async def execute(self, user_id: str) -> Result[AccountResponseDTO]:
        """
        Execute get account operation

        Args:
            user_id: The user identifier

        Returns:
            Result[AccountResponseDTO]: Success with balance data or error

        Errors:
            ACCOUNT_NOT_FOUND: User has no credit account
        """
        account = await self.account_repo.get_by_user_id(user_id)

        if not account:
            return Return.err(
                Error(
                    code="ACCOUNT_NOT_FOUND",
                    message=f"Credit account not found for user {user_id}",
                )
            )

        return Return.ok(
            AccountResponseDTO(
                user_id=account.user_id,
                balance=account.balance,
                last_updated=account.last_updated,
            )
        )
