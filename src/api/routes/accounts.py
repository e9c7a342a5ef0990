"""Account API Routes

Balance, transaction history, affordability checks and pricing rules.
"""

from decimal import Decimal, InvalidOperation
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.api.error import ClientError
from src.app.services.token_service import TokenClaims
from src.app.use_cases.ledger import (
    AccountResponseDTO,
    CheckBalance,
    CheckBalanceResponseDTO,
    GetAccount,
    ListTransactions,
    ListTransactionsResponseDTO,
)
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyUserAccountRepository,
)
from src.depends import get_current_user, get_session
from src.domain.pricing import (
    CREDITS_PER_CURRENCY_UNIT,
    REFUND_WINDOW,
    SERVICE_PRICING,
    SIGNUP_BONUS_CREDITS,
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("", response_model=AccountResponseDTO)
async def get_account(
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Get the current user's credit account.

    **Returns:**
    - 200: Balance and last update time
    - 404: Account not found
    """
    result = await GetAccount(SqlAlchemyUserAccountRepository(session)).execute(current_user.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/transactions", response_model=ListTransactionsResponseDTO)
async def list_transactions(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """List the current user's credit transactions, newest first."""
    use_case = ListTransactions(SqlAlchemyCreditTransactionRepository(session))
    result = await use_case.execute(current_user.user_id, limit=limit, offset=offset)
    return result.value


@router.get("/check-balance/{amount}", response_model=CheckBalanceResponseDTO)
async def check_balance(
    amount: str,
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    try:
        required = Decimal(amount)
    except InvalidOperation:
        required = None

    if required is None or not required.is_finite() or required <= 0:
        raise ClientError(Error(code="INVALID_AMOUNT", message="Invalid amount"))

    result = await CheckBalance(SqlAlchemyUserAccountRepository(session)).execute(
        current_user.user_id, required
    )
    return result.value


@router.get("/rules")
async def get_rules():
    """Exchange rate, signup bonus, refund window and service prices."""
    return {
        "exchange_rate": CREDITS_PER_CURRENCY_UNIT,
        "signup_bonus": SIGNUP_BONUS_CREDITS,
        "minimum_balance": Decimal("0"),
        "refund_window_hours": int(REFUND_WINDOW.total_seconds() // 3600),
        "service_pricing": SERVICE_PRICING,
    }
