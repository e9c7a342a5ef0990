"""Database maintenance commands

Usage:
    python -m src.worker.maintenance list-users
    python -m src.worker.maintenance list-accounts
    python -m src.worker.maintenance stats
    python -m src.worker.maintenance delete-user <id-or-username> [--yes]
    python -m src.worker.maintenance refund-usage <usage-id> [--reason TEXT]
    python -m src.worker.maintenance refund-payment <payment-id>
    python -m src.worker.maintenance reconcile [--watch] [--interval SECONDS]
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal
from typing import Optional

from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyServiceUsageRepository,
    SqlAlchemyUserAccountRepository,
    SqlAlchemyUserRepository,
)
from src.adapter.services.database import Database
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.ledger import ApplyCreditDelta, ReconcileLedger
from src.app.use_cases.payment import RefundPayment
from src.app.use_cases.service import RefundServiceUsage
from src.app.use_cases.user import DeleteUser, ListUsers

logger = logging.getLogger(__name__)


class MaintenanceRunner:
    """
    Operator commands against the service database

    Each command opens its own session and reuses the same use cases as the
    HTTP API, so ledger invariants hold for manual fixes too.
    """

    def __init__(self, db_uri: Optional[str] = None, out=None):
        self.database = Database(db_uri or ApplicationConfig.DB_URI)
        self.out = out or sys.stdout

    def _print(self, message: str = ""):
        print(message, file=self.out)

    def _ledger(self, session, uow) -> ApplyCreditDelta:
        return ApplyCreditDelta(
            uow,
            SqlAlchemyUserAccountRepository(session),
            SqlAlchemyCreditTransactionRepository(session),
        )

    async def list_users(self) -> int:
        async with self.database.session() as session:
            result = await ListUsers(SqlAlchemyUserRepository(session)).execute()
            account_repo = SqlAlchemyUserAccountRepository(session)

            self._print(f"Total users: {result.value.total}")
            for index, user in enumerate(result.value.users, start=1):
                account = await account_repo.get_by_user_id(user.id)
                self._print(f"\n{index}. {user.username} ({user.id})")
                self._print(f"   email: {user.email}")
                self._print(f"   phone: {user.phone or '-'}")
                self._print(f"   verified: {'yes' if user.is_verified else 'no'}")
                self._print(f"   balance: {account.balance if account else 0}")
                self._print(f"   created: {user.created_at}")
        return 0

    async def list_accounts(self) -> int:
        async with self.database.session() as session:
            accounts = await SqlAlchemyUserAccountRepository(session).get_all()
            for account in sorted(accounts, key=lambda a: a.balance, reverse=True):
                self._print(f"{account.user_id}  {account.balance}  (updated {account.last_updated})")
            if not accounts:
                self._print("No accounts")
        return 0

    async def stats(self) -> int:
        async with self.database.session() as session:
            users = await SqlAlchemyUserRepository(session).get_all()
            accounts = await SqlAlchemyUserAccountRepository(session).get_all()
            total_balance = sum((a.balance for a in accounts), Decimal("0"))

            self._print(f"Users: {len(users)}")
            self._print(f"Verified users: {sum(1 for u in users if u.is_verified)}")
            self._print(f"Accounts: {len(accounts)}")
            self._print(f"Total credits outstanding: {total_balance}")
        return 0

    async def delete_user(self, identifier: str) -> int:
        async with self.database.session() as session:
            use_case = DeleteUser(SqlAlchemyUnitOfWork(session), SqlAlchemyUserRepository(session))
            result = await use_case.execute(identifier)

        if result.is_err():
            self._print(f"Error: {result.error.message}")
            return 1

        self._print(f"Deleted user {result.value.username} ({result.value.email})")
        return 0

    async def refund_usage(self, usage_id: str, reason: Optional[str]) -> int:
        async with self.database.session() as session:
            uow = SqlAlchemyUnitOfWork(session)
            use_case = RefundServiceUsage(
                uow, SqlAlchemyServiceUsageRepository(session), self._ledger(session, uow)
            )
            result = await use_case.execute(usage_id, reason=reason)

        if result.is_err():
            self._print(f"Error: {result.error.code}: {result.error.message}")
            return 1

        self._print(
            f"Refunded {result.value.credits_refunded} credits, "
            f"balance now {result.value.current_balance}"
        )
        return 0

    async def refund_payment(self, payment_id: str) -> int:
        async with self.database.session() as session:
            uow = SqlAlchemyUnitOfWork(session)
            use_case = RefundPayment(
                uow, SqlAlchemyPaymentRepository(session), self._ledger(session, uow)
            )
            result = await use_case.execute(payment_id)

        if result.is_err():
            self._print(f"Error: {result.error.code}: {result.error.message}")
            return 1

        self._print(
            f"Refunded payment {payment_id}: removed {result.value.credits_removed} credits, "
            f"balance now {result.value.current_balance}"
        )
        return 0

    async def reconcile(self) -> int:
        """Compare every balance with the sum of its transactions; never repairs"""
        async with self.database.session() as session:
            result = await ReconcileLedger(
                SqlAlchemyUserAccountRepository(session),
                SqlAlchemyCreditTransactionRepository(session),
            ).execute()

        if result.is_err():
            self._print(f"Error: {result.error.code}: {result.error.message}")
            return 1

        report = result.value
        self._print(
            f"Checked {report.total_accounts_checked} accounts in {report.execution_time_ms}ms"
        )
        if not report.discrepancies:
            self._print("Ledger consistent")
            return 0

        logger.error(f"{report.discrepancies_found} ledger discrepancies found")
        for d in report.discrepancies:
            self._print(
                f"MISMATCH {d.user_id}: balance {d.account_balance}, "
                f"transactions {d.calculated_balance}, diff {d.discrepancy}"
            )
        return 1

    async def watch_reconciliation(self, interval_seconds: int, cycles: Optional[int] = None) -> int:
        """Reconcile every interval_seconds, forever unless cycles is given"""
        logger.info(f"Reconciling the ledger every {interval_seconds}s")
        completed = 0
        while cycles is None or completed < cycles:
            if completed:
                await asyncio.sleep(interval_seconds)
            await self.reconcile()
            completed += 1
        return 0

    async def shutdown(self):
        await self.database.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Studio database maintenance")
    parser.add_argument("--db-uri", default=None, help="Database URI (defaults to DB_URI)")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list-users", help="List users with their balances")
    commands.add_parser("list-accounts", help="List credit accounts by balance")
    commands.add_parser("stats", help="Show user and credit totals")

    delete = commands.add_parser("delete-user", help="Delete a user and all their data")
    delete.add_argument("identifier", help="User id or username")
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    refund_usage = commands.add_parser("refund-usage", help="Refund a service usage")
    refund_usage.add_argument("usage_id")
    refund_usage.add_argument("--reason", default=None)

    refund_payment = commands.add_parser("refund-payment", help="Refund a completed payment")
    refund_payment.add_argument("payment_id")

    reconcile = commands.add_parser("reconcile", help="Check balances against transaction history")
    reconcile.add_argument("--watch", action="store_true", help="Keep reconciling on an interval")
    reconcile.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Seconds between runs in watch mode",
    )

    return parser


async def run(args: argparse.Namespace) -> int:
    runner = MaintenanceRunner(db_uri=args.db_uri)
    try:
        if args.command == "list-users":
            return await runner.list_users()
        if args.command == "list-accounts":
            return await runner.list_accounts()
        if args.command == "stats":
            return await runner.stats()
        if args.command == "delete-user":
            if not args.yes:
                answer = input(
                    f"Delete user {args.identifier} with its account, transactions, "
                    "payments and usages? (y/n): "
                )
                if answer.strip().lower() != "y":
                    print("Cancelled")
                    return 1
            return await runner.delete_user(args.identifier)
        if args.command == "refund-usage":
            return await runner.refund_usage(args.usage_id, args.reason)
        if args.command == "refund-payment":
            return await runner.refund_payment(args.payment_id)
        if args.command == "reconcile":
            if not args.watch:
                return await runner.reconcile()
            if not ApplicationConfig.RECONCILIATION_ENABLED:
                print("Scheduled reconciliation is disabled (RECONCILIATION_ENABLED)")
                return 0
            return await runner.watch_reconciliation(args.interval)
        return 2
    finally:
        await runner.shutdown()


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
