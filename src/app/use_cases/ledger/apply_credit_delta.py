"""ApplyCreditDelta Use Case

Applies a signed credit delta to a user's account and appends the matching
audit row, with pessimistic locking to prevent lost updates.
"""

import logging
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import CreditTransaction, TransactionType
from .dtos import ApplyDeltaCommandDTO, CreditTransactionResponseDTO

logger = logging.getLogger(__name__)


def _plain(value: Decimal) -> str:
    """Render a Decimal without the column scale, e.g. 15.000000 -> 15"""
    return f"{value.normalize():f}"


class ApplyCreditDelta:
    """
    Use Case: Apply a signed delta to a user's credit balance

    Business Rules:
    1. Pessimistic locking: SELECT FOR UPDATE serializes concurrent mutations
    2. Withdrawals never drive the balance below zero
    3. Atomic updates: balance and audit row written in the same transaction
    4. previous_balance + amount == current_balance on every audit row

    Flow:
    1. Get account with lock (SELECT FOR UPDATE)
    2. Compute new balance, reject overdrawing withdrawals
    3. Append transaction record
    4. Update account balance
    5. Commit (execute only; apply leaves the commit to the caller)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def apply(
        self,
        user_id: str,
        amount: Decimal,
        transaction_type: TransactionType,
        description: Optional[str] = None,
        related_order: Optional[str] = None,
    ) -> Result[CreditTransaction]:
        """
        Mutate the balance inside the caller's open transaction

        Nothing is committed or rolled back here, so payment completion and
        service consumption can bundle the mutation with their own writes.
        On error no row has been written.

        Returns:
            Result[CreditTransaction]: the appended audit row, or
            ACCOUNT_NOT_FOUND / INSUFFICIENT_BALANCE
        """
        account = await self.account_repo.get_by_user_id(user_id, for_update=True)

        if not account:
            return Return.err(
                Error(
                    code="ACCOUNT_NOT_FOUND",
                    message=f"Credit account not found for user {user_id}",
                )
            )

        previous_balance = account.balance
        current_balance = previous_balance + amount

        if transaction_type == TransactionType.WITHDRAWAL and current_balance < 0:
            logger.warning(
                f"Rejected withdrawal of {-amount} for user {user_id}: balance {previous_balance}"
            )
            return Return.err(
                Error(
                    code="INSUFFICIENT_BALANCE",
                    message="Insufficient balance",
                    reason=f"balance={previous_balance}, required={-amount}",
                    details={
                        "required_credits": _plain(-amount),
                        "current_balance": _plain(previous_balance),
                    },
                )
            )

        transaction = CreditTransaction(
            user_id=user_id,
            transaction_type=transaction_type,
            amount=amount,
            previous_balance=previous_balance,
            current_balance=current_balance,
            related_order=related_order,
            description=description,
        )
        created_transaction = await self.transaction_repo.create(transaction)

        await self.account_repo.update_balance(account, current_balance)

        logger.info(
            f"Ledger {transaction_type.value} for user {user_id}: "
            f"{previous_balance} -> {current_balance}"
        )
        return Return.ok(created_transaction)

    async def execute(self, command: ApplyDeltaCommandDTO) -> Result[CreditTransactionResponseDTO]:
        """
        Apply a delta in its own transaction (all-or-nothing)

        Args:
            command: ApplyDeltaCommandDTO with user_id, signed amount and type

        Returns:
            Result[CreditTransactionResponseDTO]: Success with transaction details or error
        """
        try:
            result = await self.apply(
                command.user_id,
                command.amount,
                command.transaction_type,
                description=command.description,
                related_order=command.related_order,
            )

            if result.is_err():
                await self.uow.rollback()
                return result

            await self.uow.commit()

            return Return.ok(self._to_response_dto(result.value))

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to update balance for user {command.user_id}")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to update credit balance",
                    reason=str(e),
                )
            )

    async def deposit(
        self,
        user_id: str,
        amount: Decimal,
        related_order: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[CreditTransactionResponseDTO]:
        return await self._execute_positive(
            user_id, amount, TransactionType.DEPOSIT, description, related_order, sign=1
        )

    async def withdraw(
        self,
        user_id: str,
        amount: Decimal,
        related_order: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Result[CreditTransactionResponseDTO]:
        return await self._execute_positive(
            user_id, amount, TransactionType.WITHDRAWAL, description, related_order, sign=-1
        )

    async def reward(
        self,
        user_id: str,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> Result[CreditTransactionResponseDTO]:
        return await self._execute_positive(
            user_id, amount, TransactionType.REWARD, description, None, sign=1
        )

    async def _execute_positive(
        self,
        user_id: str,
        amount: Decimal,
        transaction_type: TransactionType,
        description: Optional[str],
        related_order: Optional[str],
        sign: int,
    ) -> Result[CreditTransactionResponseDTO]:
        if amount <= 0:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message="Amount must be greater than 0",
                    reason=f"amount={amount}",
                )
            )

        return await self.execute(
            ApplyDeltaCommandDTO(
                user_id=user_id,
                amount=amount * sign,
                transaction_type=transaction_type,
                description=description,
                related_order=related_order,
            )
        )

    def _to_response_dto(self, transaction: CreditTransaction) -> CreditTransactionResponseDTO:
        return CreditTransactionResponseDTO(
            transaction_id=transaction.id,
            user_id=transaction.user_id,
            transaction_type=TransactionType(transaction.transaction_type).value,
            amount=transaction.amount,
            previous_balance=transaction.previous_balance,
            current_balance=transaction.current_balance,
            related_order=transaction.related_order,
            description=transaction.description,
            created_at=transaction.created_at,
        )
