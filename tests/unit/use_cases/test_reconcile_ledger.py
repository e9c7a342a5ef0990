"""Unit tests for ReconcileLedger use case

Tests cover:
- Account balance vs transaction sum comparison
- Discrepancy sign
- Error handling
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger.reconcile_ledger import ReconcileLedger
from src.domain.user_account import UserAccount


@pytest.fixture
def mock_account_repo():
    return MagicMock()


@pytest.fixture
def mock_transaction_repo():
    return MagicMock()


@pytest.fixture
def reconcile_use_case(mock_account_repo, mock_transaction_repo):
    return ReconcileLedger(
        account_repo=mock_account_repo,
        transaction_repo=mock_transaction_repo,
    )


@pytest.fixture
def sample_account():
    def _create_account(user_id: str, balance: Decimal):
        account = MagicMock(spec=UserAccount)
        account.user_id = user_id
        account.balance = balance
        return account
    return _create_account


@pytest.mark.asyncio
class TestReconcileLedger:

    async def test_no_discrepancy_when_balances_match(
        self, reconcile_use_case, mock_account_repo, mock_transaction_repo, sample_account
    ):
        # Arrange
        mock_account_repo.get_all = AsyncMock(return_value=[sample_account("user_1", Decimal("15"))])
        mock_transaction_repo.get_transaction_sum_by_user = AsyncMock(return_value=Decimal("15"))

        # Act
        result = await reconcile_use_case.execute()

        # Assert
        assert result.is_ok()
        assert result.value.total_accounts_checked == 1
        assert result.value.discrepancies_found == 0
        mock_transaction_repo.get_transaction_sum_by_user.assert_called_once_with("user_1")

    async def test_reports_only_mismatched_accounts(
        self, reconcile_use_case, mock_account_repo, mock_transaction_repo, sample_account
    ):
        """
        Given: Three accounts, one inflated and one deflated
        When: Reconciliation runs
        Then: Two discrepancies, signed as balance minus transaction sum
        """
        # Arrange
        mock_account_repo.get_all = AsyncMock(
            return_value=[
                sample_account("user_1", Decimal("15")),
                sample_account("user_2", Decimal("120")),
                sample_account("user_3", Decimal("5")),
            ]
        )
        sums = {"user_1": Decimal("15"), "user_2": Decimal("100"), "user_3": Decimal("10")}
        mock_transaction_repo.get_transaction_sum_by_user = AsyncMock(
            side_effect=lambda user_id: sums[user_id]
        )

        # Act
        result = await reconcile_use_case.execute()

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.total_accounts_checked == 3
        assert response.discrepancies_found == 2
        by_user = {d.user_id: d for d in response.discrepancies}
        assert by_user["user_2"].discrepancy == Decimal("20")
        assert by_user["user_2"].calculated_balance == Decimal("100")
        assert by_user["user_3"].discrepancy == Decimal("-5")

    async def test_empty_system(self, reconcile_use_case, mock_account_repo):
        # Arrange
        mock_account_repo.get_all = AsyncMock(return_value=[])

        # Act
        result = await reconcile_use_case.execute()

        # Assert
        assert result.is_ok()
        assert result.value.total_accounts_checked == 0
        assert result.value.discrepancies == []

    async def test_repository_error(self, reconcile_use_case, mock_account_repo):
        # Arrange
        mock_account_repo.get_all = AsyncMock(side_effect=Exception("connection lost"))

        # Act
        result = await reconcile_use_case.execute()

        # Assert
        assert result.is_err()
        assert result.error.code == "RECONCILIATION_FAILED"
        assert result.error.reason == "connection lost"
