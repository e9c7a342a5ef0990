"""Unit tests for user use cases

Tests cover:
- RegisterUser: account opening with signup bonus, validation, uniqueness
- LoginUser: username/email lookup, credential and verification checks
- ChangePassword and VerifyEmail
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from libs.result import Return, Error
from src.app.use_cases.user.register_user import RegisterUser
from src.app.use_cases.user.login_user import LoginUser
from src.app.use_cases.user.change_password import ChangePassword
from src.app.use_cases.user.verify_email import VerifyEmail
from src.app.use_cases.user.dtos import (
    ChangePasswordCommandDTO,
    LoginUserCommandDTO,
    RegisterUserCommandDTO,
)
from src.domain.credit_transaction import CreditTransaction, TransactionType
from src.domain.user import User

STRONG_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def mock_user_repo():
    repo = MagicMock()
    repo.get_by_email = AsyncMock(return_value=None)
    repo.get_by_username = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=lambda user: user)
    repo.update = AsyncMock(side_effect=lambda user: user)
    return repo


@pytest.fixture
def mock_account_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda account: account)
    return repo


@pytest.fixture
def mock_ledger():
    ledger = MagicMock()
    ledger.apply = AsyncMock(
        return_value=Return.ok(
            CreditTransaction(
                user_id="user_123",
                transaction_type=TransactionType.REWARD,
                amount=Decimal("15"),
                previous_balance=Decimal("0"),
                current_balance=Decimal("15"),
            )
        )
    )
    return ledger


@pytest.fixture
def mock_hasher():
    hasher = MagicMock()
    hasher.hash = MagicMock(side_effect=lambda password: f"hashed:{password}")
    hasher.verify = MagicMock(side_effect=lambda password, hashed: hashed == f"hashed:{password}")
    return hasher


@pytest.fixture
def mock_token_service():
    service = MagicMock()
    service.issue = MagicMock(return_value="signed.jwt.token")
    return service


def make_user(**overrides):
    values = dict(
        id="user_123",
        username="alice",
        email="alice@example.com",
        password_hash=f"hashed:{STRONG_PASSWORD}",
        is_verified=True,
    )
    values.update(overrides)
    return User(**values)


def register_command(**overrides):
    values = dict(username="alice", email="alice@example.com", password=STRONG_PASSWORD)
    values.update(overrides)
    return RegisterUserCommandDTO(**values)


@pytest.mark.asyncio
class TestRegisterUser:

    def _use_case(self, mock_uow, mock_user_repo, mock_account_repo, mock_ledger,
                  mock_hasher, mock_token_service, require_verification=False):
        return RegisterUser(
            mock_uow,
            mock_user_repo,
            mock_account_repo,
            mock_ledger,
            mock_hasher,
            mock_token_service,
            require_email_verification=require_verification,
        )

    async def test_registers_user_with_signup_bonus(
        self, mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
    ):
        """
        Given: A new username and email
        When: Registering
        Then: Account opens at 0, the bonus is a reward, and one commit happens
        """
        # Arrange
        use_case = self._use_case(
            mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
        )

        # Act
        result = await use_case.execute(register_command(phone="+8613800000000"))

        # Assert
        assert result.is_ok()
        assert result.value.token == "signed.jwt.token"
        assert result.value.user.username == "alice"
        assert result.value.user.phone == "+8613800000000"
        assert result.value.user.is_verified is True
        assert result.value.verification_required is False

        created_user = mock_user_repo.create.call_args[0][0]
        assert created_user.password_hash == f"hashed:{STRONG_PASSWORD}"
        assert created_user.verification_token is None

        account = mock_account_repo.create.call_args[0][0]
        assert account.balance == Decimal("0")
        assert account.user_id == created_user.id

        args, kwargs = mock_ledger.apply.call_args
        assert args == (created_user.id, Decimal("15"), TransactionType.REWARD)
        assert kwargs["description"] == "Signup bonus"
        mock_uow.commit.assert_called_once()

    async def test_verification_required_starts_unverified(
        self, mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
    ):
        # Arrange
        use_case = self._use_case(
            mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher,
            mock_token_service, require_verification=True,
        )

        # Act
        result = await use_case.execute(register_command())

        # Assert
        assert result.is_ok()
        assert result.value.user.is_verified is False
        assert result.value.verification_required is True
        created_user = mock_user_repo.create.call_args[0][0]
        assert len(created_user.verification_token) == 64

    @pytest.mark.parametrize("password", ["short1!", "alllowercase1!", "NoDigits!!", "NoSpecial12"])
    async def test_weak_password(
        self, mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher,
        mock_token_service, password
    ):
        # Arrange
        use_case = self._use_case(
            mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
        )

        # Act
        result = await use_case.execute(register_command(password=password))

        # Assert
        assert result.is_err()
        assert result.error.code == "WEAK_PASSWORD"
        mock_user_repo.create.assert_not_called()

    async def test_missing_fields(
        self, mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
    ):
        # Arrange
        use_case = self._use_case(
            mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
        )

        # Act
        result = await use_case.execute(register_command(username=""))

        # Assert
        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"

    async def test_email_in_use(
        self, mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
    ):
        # Arrange
        mock_user_repo.get_by_email = AsyncMock(return_value=make_user())
        use_case = self._use_case(
            mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
        )

        # Act
        result = await use_case.execute(register_command(username="alice2"))

        # Assert
        assert result.is_err()
        assert result.error.code == "EMAIL_IN_USE"
        mock_user_repo.create.assert_not_called()

    async def test_username_in_use(
        self, mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
    ):
        # Arrange
        mock_user_repo.get_by_username = AsyncMock(return_value=make_user())
        use_case = self._use_case(
            mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
        )

        # Act
        result = await use_case.execute(register_command(email="other@example.com"))

        # Assert
        assert result.is_err()
        assert result.error.code == "USERNAME_IN_USE"

    async def test_bonus_failure_rolls_back(
        self, mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
    ):
        # Arrange
        mock_ledger.apply = AsyncMock(
            return_value=Return.err(Error(code="ACCOUNT_NOT_FOUND", message="missing"))
        )
        use_case = self._use_case(
            mock_uow, mock_user_repo, mock_account_repo, mock_ledger, mock_hasher, mock_token_service
        )

        # Act
        result = await use_case.execute(register_command())

        # Assert
        assert result.is_err()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
        mock_token_service.issue.assert_not_called()


@pytest.mark.asyncio
class TestLoginUser:

    async def test_login_by_username(self, mock_user_repo, mock_hasher, mock_token_service):
        # Arrange
        mock_user_repo.get_by_username = AsyncMock(return_value=make_user())
        use_case = LoginUser(mock_user_repo, mock_hasher, mock_token_service)

        # Act
        result = await use_case.execute(
            LoginUserCommandDTO(identifier="alice", password=STRONG_PASSWORD)
        )

        # Assert
        assert result.is_ok()
        assert result.value.token == "signed.jwt.token"
        mock_user_repo.get_by_email.assert_not_called()

    async def test_login_by_email(self, mock_user_repo, mock_hasher, mock_token_service):
        # Arrange
        mock_user_repo.get_by_email = AsyncMock(return_value=make_user())
        use_case = LoginUser(mock_user_repo, mock_hasher, mock_token_service)

        # Act
        result = await use_case.execute(
            LoginUserCommandDTO(identifier="alice@example.com", password=STRONG_PASSWORD)
        )

        # Assert
        assert result.is_ok()
        assert result.value.user.email == "alice@example.com"

    async def test_wrong_password_and_unknown_user_look_the_same(
        self, mock_user_repo, mock_hasher, mock_token_service
    ):
        # Arrange
        use_case = LoginUser(mock_user_repo, mock_hasher, mock_token_service)

        # Act
        unknown = await use_case.execute(LoginUserCommandDTO(identifier="ghost", password="x"))
        mock_user_repo.get_by_username = AsyncMock(return_value=make_user())
        wrong = await use_case.execute(LoginUserCommandDTO(identifier="alice", password="wrong"))

        # Assert
        assert unknown.error.code == wrong.error.code == "INVALID_CREDENTIALS"
        assert unknown.error.message == wrong.error.message

    async def test_unverified_user_blocked_when_required(
        self, mock_user_repo, mock_hasher, mock_token_service
    ):
        # Arrange
        mock_user_repo.get_by_username = AsyncMock(return_value=make_user(is_verified=False))
        use_case = LoginUser(
            mock_user_repo, mock_hasher, mock_token_service, require_email_verification=True
        )

        # Act
        result = await use_case.execute(
            LoginUserCommandDTO(identifier="alice", password=STRONG_PASSWORD)
        )

        # Assert
        assert result.is_err()
        assert result.error.code == "EMAIL_NOT_VERIFIED"


@pytest.mark.asyncio
class TestChangePassword:

    async def test_changes_password(self, mock_uow, mock_user_repo, mock_hasher):
        # Arrange
        user = make_user()
        mock_user_repo.get_by_id = AsyncMock(return_value=user)
        use_case = ChangePassword(mock_uow, mock_user_repo, mock_hasher)

        # Act
        result = await use_case.execute(
            ChangePasswordCommandDTO(
                user_id="user_123", current_password=STRONG_PASSWORD, new_password="N3w!Password"
            )
        )

        # Assert
        assert result.is_ok()
        assert user.password_hash == "hashed:N3w!Password"
        mock_uow.commit.assert_called_once()

    async def test_wrong_current_password(self, mock_uow, mock_user_repo, mock_hasher):
        # Arrange
        mock_user_repo.get_by_id = AsyncMock(return_value=make_user())
        use_case = ChangePassword(mock_uow, mock_user_repo, mock_hasher)

        # Act
        result = await use_case.execute(
            ChangePasswordCommandDTO(
                user_id="user_123", current_password="Wr0ng!Pass", new_password="N3w!Password"
            )
        )

        # Assert
        assert result.is_err()
        assert result.error.code == "INVALID_CREDENTIALS"
        mock_user_repo.update.assert_not_called()

    async def test_weak_new_password(self, mock_uow, mock_user_repo, mock_hasher):
        # Arrange
        mock_user_repo.get_by_id = AsyncMock()
        use_case = ChangePassword(mock_uow, mock_user_repo, mock_hasher)

        # Act
        result = await use_case.execute(
            ChangePasswordCommandDTO(
                user_id="user_123", current_password=STRONG_PASSWORD, new_password="weak"
            )
        )

        # Assert
        assert result.is_err()
        assert result.error.code == "WEAK_PASSWORD"
        mock_user_repo.get_by_id.assert_not_called()


@pytest.mark.asyncio
class TestVerifyEmail:

    async def test_verifies_and_clears_token(self, mock_uow, mock_user_repo):
        # Arrange
        user = make_user(is_verified=False, verification_token="abc123")
        mock_user_repo.get_by_verification_token = AsyncMock(return_value=user)

        # Act
        result = await VerifyEmail(mock_uow, mock_user_repo).execute("abc123")

        # Assert
        assert result.is_ok()
        assert result.value.is_verified is True
        assert user.verification_token is None
        mock_uow.commit.assert_called_once()

    async def test_unknown_token(self, mock_uow, mock_user_repo):
        # Arrange
        mock_user_repo.get_by_verification_token = AsyncMock(return_value=None)

        # Act
        result = await VerifyEmail(mock_uow, mock_user_repo).execute("nope")

        # Assert
        assert result.is_err()
        assert result.error.code == "INVALID_TOKEN"
