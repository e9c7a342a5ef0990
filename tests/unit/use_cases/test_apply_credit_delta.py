"""Unit tests for ApplyCreditDelta use case

Tests cover:
- Deposits, rewards and withdrawals move the balance by the signed amount
- Withdrawals never drive the balance below zero
- Audit rows carry previous/current balance snapshots
- Unexpected errors roll back
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, timezone

from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.app.use_cases.ledger.dtos import ApplyDeltaCommandDTO
from src.domain.credit_transaction import TransactionType
from src.domain.user_account import UserAccount


@pytest.fixture
def mock_account_repo():
    """Mock user account repository"""
    repo = MagicMock()
    repo.update_balance = AsyncMock()
    return repo


@pytest.fixture
def mock_transaction_repo():
    """Mock credit transaction repository that echoes created rows"""
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda txn: txn)
    return repo


@pytest.fixture
def ledger(mock_uow, mock_account_repo, mock_transaction_repo):
    return ApplyCreditDelta(
        uow=mock_uow,
        account_repo=mock_account_repo,
        transaction_repo=mock_transaction_repo,
    )


@pytest.fixture
def sample_account():
    """Account holding the signup bonus"""
    return UserAccount(
        user_id="user_123",
        balance=Decimal("15.000000"),
        last_updated=datetime.now(timezone.utc),
    )


@pytest.mark.asyncio
class TestApplyCreditDeltaSuccess:

    async def test_withdrawal_decrements_balance(
        self, ledger, mock_account_repo, mock_transaction_repo, mock_uow, sample_account
    ):
        """
        Given: Account with 15 credits
        When: A withdrawal of 5 is executed
        Then: Balance becomes 10 and one audit row records 15 -> 10
        """
        # Arrange
        mock_account_repo.get_by_user_id = AsyncMock(return_value=sample_account)
        command = ApplyDeltaCommandDTO(
            user_id="user_123",
            amount=Decimal("-5"),
            transaction_type=TransactionType.WITHDRAWAL,
            description="Used ai-image-edit service",
            related_order="usage_1",
        )

        # Act
        result = await ledger.execute(command)

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.transaction_type == "withdrawal"
        assert response.amount == Decimal("-5")
        assert response.previous_balance == Decimal("15.000000")
        assert response.current_balance == Decimal("10.000000")
        assert response.related_order == "usage_1"

        mock_account_repo.get_by_user_id.assert_called_once_with("user_123", for_update=True)
        mock_account_repo.update_balance.assert_called_once_with(sample_account, Decimal("10.000000"))
        mock_transaction_repo.create.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_deposit_increments_balance(
        self, ledger, mock_account_repo, mock_uow, sample_account
    ):
        # Arrange
        mock_account_repo.get_by_user_id = AsyncMock(return_value=sample_account)

        # Act
        result = await ledger.deposit("user_123", Decimal("100"), related_order="payment_1")

        # Assert
        assert result.is_ok()
        assert result.value.transaction_type == "deposit"
        assert result.value.amount == Decimal("100")
        assert result.value.current_balance == Decimal("115.000000")
        mock_uow.commit.assert_called_once()

    async def test_withdraw_wrapper_negates_amount(
        self, ledger, mock_account_repo, sample_account
    ):
        # Arrange
        mock_account_repo.get_by_user_id = AsyncMock(return_value=sample_account)

        # Act
        result = await ledger.withdraw("user_123", Decimal("15"))

        # Assert
        assert result.is_ok()
        assert result.value.amount == Decimal("-15")
        assert result.value.current_balance == Decimal("0")

    async def test_apply_does_not_commit(
        self, ledger, mock_account_repo, mock_uow, sample_account
    ):
        """
        Given: A caller composing the mutation into its own transaction
        When: apply() succeeds
        Then: Nothing is committed or rolled back by the ledger
        """
        # Arrange
        mock_account_repo.get_by_user_id = AsyncMock(return_value=sample_account)

        # Act
        result = await ledger.apply("user_123", Decimal("15"), TransactionType.REWARD)

        # Assert
        assert result.is_ok()
        assert result.value.previous_balance + result.value.amount == result.value.current_balance
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_not_called()


@pytest.mark.asyncio
class TestApplyCreditDeltaRejections:

    async def test_withdrawal_above_balance_is_rejected(
        self, ledger, mock_account_repo, mock_transaction_repo, mock_uow, sample_account
    ):
        """
        Given: Account with 15 credits
        When: A withdrawal of 20 is executed
        Then: INSUFFICIENT_BALANCE, nothing written, transaction rolled back
        """
        # Arrange
        mock_account_repo.get_by_user_id = AsyncMock(return_value=sample_account)

        # Act
        result = await ledger.withdraw("user_123", Decimal("20"))

        # Assert
        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_BALANCE"
        assert result.error.details == {"required_credits": "20", "current_balance": "15"}
        mock_transaction_repo.create.assert_not_called()
        mock_account_repo.update_balance.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_missing_account(self, ledger, mock_account_repo, mock_uow):
        # Arrange
        mock_account_repo.get_by_user_id = AsyncMock(return_value=None)

        # Act
        result = await ledger.deposit("ghost", Decimal("10"))

        # Assert
        assert result.is_err()
        assert result.error.code == "ACCOUNT_NOT_FOUND"
        mock_uow.commit.assert_not_called()

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
    async def test_non_positive_amount(self, ledger, mock_account_repo, amount):
        # Arrange
        mock_account_repo.get_by_user_id = AsyncMock()

        # Act
        result = await ledger.reward("user_123", amount)

        # Assert
        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        mock_account_repo.get_by_user_id.assert_not_called()

    async def test_unexpected_error_rolls_back(
        self, ledger, mock_account_repo, mock_uow, sample_account
    ):
        # Arrange
        mock_account_repo.get_by_user_id = AsyncMock(return_value=sample_account)
        mock_account_repo.update_balance = AsyncMock(side_effect=Exception("Database error"))

        # Act
        result = await ledger.deposit("user_123", Decimal("10"))

        # Assert
        assert result.is_err()
        assert result.error.code == "INTERNAL_ERROR"
        assert result.error.reason == "Database error"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
