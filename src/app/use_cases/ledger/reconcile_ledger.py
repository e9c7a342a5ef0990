"""ReconcileLedger Use Case

Compares account balances against their transaction history to detect
discrepancies.
"""

import logging
import time
from libs.result import Result, Return, Error
from src.app.repositories.user_account_repository import UserAccountRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.base import utc_now
from .dtos import AccountDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile account balances against transactions

    Business Rules:
    1. Every account balance must equal the sum of its transaction amounts
    2. Mismatches are reported and logged, never repaired
    3. Does NOT modify any data (read-only reconciliation)

    Flow:
    1. Get all accounts
    2. For each account, sum its transactions and compare
    3. Return reconciliation result with all discrepancies
    """

    def __init__(
        self,
        account_repo: UserAccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = utc_now()

        try:
            logger.info("Starting credit ledger reconciliation")

            # Step 1: Get all accounts
            accounts = await self.account_repo.get_all()
            total_accounts = len(accounts)

            logger.info(f"Found {total_accounts} accounts to reconcile")

            # Step 2: Check each account for discrepancies
            discrepancies: list[AccountDiscrepancyDTO] = []

            for account in accounts:
                transaction_sum = await self.transaction_repo.get_transaction_sum_by_user(
                    account.user_id
                )

                if account.balance != transaction_sum:
                    discrepancy_amount = account.balance - transaction_sum
                    discrepancies.append(
                        AccountDiscrepancyDTO(
                            user_id=account.user_id,
                            account_balance=account.balance,
                            calculated_balance=transaction_sum,
                            discrepancy=discrepancy_amount,
                        )
                    )

                    logger.warning(
                        f"Discrepancy found for user {account.user_id}: "
                        f"account_balance={account.balance}, "
                        f"transaction_sum={transaction_sum}, "
                        f"discrepancy={discrepancy_amount}"
                    )

            # Step 3: Build response
            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_accounts_checked=total_accounts,
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_accounts} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_accounts} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile credit ledger",
                    reason=str(e),
                )
            )
