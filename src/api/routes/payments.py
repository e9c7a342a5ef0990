"""Payment API Routes

Payment orders, gateway callback and local simulation of gateway outcomes.
"""

import hashlib
import hmac
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.api.error import ClientError
from src.api.schemas.payment_request import (
    CreatePaymentRequestSchema,
    PaymentCallbackRequestSchema,
)
from src.app.services.token_service import TokenClaims
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.app.use_cases.payment import (
    CompletePayment,
    CompletePaymentCommandDTO,
    CompletePaymentResponseDTO,
    CreatePayment,
    CreatePaymentCommandDTO,
    CreatePaymentResponseDTO,
    GetPayment,
    ListPayments,
    ListPaymentsResponseDTO,
    PaymentResponseDTO,
)
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyUserAccountRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_config, get_current_user, get_session
from src.domain.base import generate_uuid
from src.domain.payment import PaymentMethod, PaymentStatus
from src.domain.pricing import MAX_PAYMENT_AMOUNT, MIN_PAYMENT_AMOUNT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])

SIGNATURE_HEADER = "X-Callback-Signature"


def sign_callback(secret: str, payment_id: str, transaction_id: str, success: bool) -> str:
    """HMAC-SHA256 hex digest the gateway sends with a callback"""
    message = f"{payment_id}:{transaction_id}:{'true' if success else 'false'}"
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def _complete_payment_use_case(session: AsyncSession) -> CompletePayment:
    uow = SqlAlchemyUnitOfWork(session)
    ledger = ApplyCreditDelta(
        uow,
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    return CompletePayment(uow, SqlAlchemyPaymentRepository(session), ledger)


@router.post(
    "/create",
    response_model=CreatePaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment(
    request: CreatePaymentRequestSchema,
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Open a pending payment order.

    **Request body:**
    - `amount` (required): Amount in currency units (0.01 to 10000)
    - `payment_method` (required): wechat, alipay or other

    **Returns:**
    - 201: Pending payment with credits and gateway URL
    - 400: Invalid amount or method
    """
    use_case = CreatePayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyPaymentRepository(session),
        config.PAYMENT_GATEWAY_URL,
    )
    result = await use_case.execute(
        CreatePaymentCommandDTO(
            user_id=current_user.user_id,
            amount=request.amount,
            method=request.payment_method,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/user", response_model=ListPaymentsResponseDTO)
async def list_user_payments(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    use_case = ListPayments(SqlAlchemyPaymentRepository(session))
    result = await use_case.execute(
        current_user.user_id, limit=limit, offset=offset, status=payment_status
    )
    return result.value


@router.get("/gateway-config")
async def gateway_config():
    return {
        "supported_methods": [PaymentMethod.WECHAT.value, PaymentMethod.ALIPAY.value],
        "currencies": ["CNY"],
        "min_amount": MIN_PAYMENT_AMOUNT,
        "max_amount": MAX_PAYMENT_AMOUNT,
        "payment_expiry_minutes": 30,
    }


@router.post("/callback", response_model=CompletePaymentResponseDTO)
async def payment_callback(
    request: PaymentCallbackRequestSchema,
    signature: Optional[str] = Header(None, alias=SIGNATURE_HEADER),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Gateway confirmation of a payment.

    When PAYMENT_CALLBACK_SECRET is set the request must carry a valid
    X-Callback-Signature header. Replays of an already processed payment
    return 400 INVALID_STATE and deposit nothing.
    """
    secret = config.PAYMENT_CALLBACK_SECRET
    if secret:
        expected = sign_callback(secret, request.payment_id, request.transaction_id, request.success)
        if not signature or not hmac.compare_digest(signature, expected):
            logger.warning(f"Rejected callback for payment {request.payment_id}: bad signature")
            raise ClientError(
                Error(code="INVALID_SIGNATURE", message="Invalid signature"),
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

    result = await _complete_payment_use_case(session).execute(
        CompletePaymentCommandDTO(
            payment_id=request.payment_id,
            transaction_id=request.transaction_id,
            success=request.success,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{payment_id}", response_model=PaymentResponseDTO)
async def get_payment(
    payment_id: str,
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await GetPayment(SqlAlchemyPaymentRepository(session)).execute(
        payment_id, current_user.user_id
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


async def _simulate(
    payment_id: str,
    success: bool,
    current_user: TokenClaims,
    session: AsyncSession,
    config,
) -> CompletePaymentResponseDTO:
    if not config.ENABLE_PAYMENT_SIMULATION:
        raise ClientError(
            Error(code="NOT_FOUND", message="Payment simulation is disabled"),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    owned = await GetPayment(SqlAlchemyPaymentRepository(session)).execute(
        payment_id, current_user.user_id
    )
    if owned.is_err():
        raise ClientError(owned.error)

    result = await _complete_payment_use_case(session).execute(
        CompletePaymentCommandDTO(
            payment_id=payment_id,
            transaction_id=f"sim_{generate_uuid()}",
            success=success,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{payment_id}/simulate-success", response_model=CompletePaymentResponseDTO)
async def simulate_success(
    payment_id: str,
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Complete one of your own pending payments without a gateway (development only)."""
    return await _simulate(payment_id, True, current_user, session, config)


@router.post("/{payment_id}/simulate-failure", response_model=CompletePaymentResponseDTO)
async def simulate_failure(
    payment_id: str,
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    return await _simulate(payment_id, False, current_user, session, config)
