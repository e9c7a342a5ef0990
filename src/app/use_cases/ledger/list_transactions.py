"""
List Transactions Use Case

Retrieves the credit transaction history of a user with pagination.
"""
from libs.result import Result, Return
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from .dtos import ListTransactionsResponseDTO, TransactionDTO


class ListTransactions:
    """
    Use case: View credit transactions

    Transactions are ordered by created_at DESC (most recent first).
    """

    def __init__(self, transaction_repo: CreditTransactionRepository):
        """
        Initialize with transaction repository.

        Args:
            transaction_repo: CreditTransactionRepository instance
        """
        self.transaction_repo = transaction_repo

    async def execute(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> Result[ListTransactionsResponseDTO]:
        """
        List transactions for a user with pagination.

        Args:
            user_id: User identifier
            limit: Maximum number of transactions to return (default 50)
            offset: Number of transactions to skip (default 0)

        Returns:
            Result[ListTransactionsResponseDTO]: Paginated transaction list
        """
        transactions, total = await self.transaction_repo.get_by_user_id(
            user_id=user_id,
            limit=limit,
            offset=offset,
        )

        transaction_dtos = [
            TransactionDTO(
                id=txn.id,
                transaction_type=txn.transaction_type.value if hasattr(txn.transaction_type, "value") else txn.transaction_type,
                amount=txn.amount,
                previous_balance=txn.previous_balance,
                current_balance=txn.current_balance,
                related_order=txn.related_order,
                description=txn.description,
                created_at=txn.created_at,
            )
            for txn in transactions
        ]

        return Return.ok(
            ListTransactionsResponseDTO(
                transactions=transaction_dtos,
                total=total,
                limit=limit,
                offset=offset,
            )
        )
