"""Check Balance Use Case

Answers whether a user can currently afford a given number of credits.
"""

from decimal import Decimal
from libs.result import Result, Return
from src.app.repositories.user_account_repository import UserAccountRepository
from .dtos import CheckBalanceResponseDTO


class CheckBalance:
    """
    Non-mutating affordability check.

    The answer can be stale by the time the caller acts on it; the debit
    itself re-checks the balance under lock. A user without an account reads
    as balance 0.
    """

    def __init__(self, account_repo: UserAccountRepository):
        self.account_repo = account_repo

    async def execute(self, user_id: str, required_amount: Decimal) -> Result[CheckBalanceResponseDTO]:
        account = await self.account_repo.get_by_user_id(user_id)
        current_balance = account.balance if account else Decimal("0")

        return Return.ok(
            CheckBalanceResponseDTO(
                has_enough_balance=current_balance >= required_amount,
                current_balance=current_balance,
                required_amount=required_amount,
            )
        )
