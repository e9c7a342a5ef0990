"""CreatePayment Use Case

Opens a pending payment order and builds the gateway URL for it.
"""

import logging
from urllib.parse import urlencode
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment, PaymentStatus
from src.domain.pricing import MAX_PAYMENT_AMOUNT, MIN_PAYMENT_AMOUNT, credits_for_amount
from .dtos import CreatePaymentCommandDTO, CreatePaymentResponseDTO, PaymentResponseDTO

logger = logging.getLogger(__name__)


class CreatePayment:
    """
    Use Case: Create a pending payment order

    Business Rules:
    1. Amount must lie within the gateway limits
    2. Credits are fixed at creation (amount * exchange rate)
    3. No credits move until the payment is completed
    """

    def __init__(self, uow: UnitOfWork, payment_repo: PaymentRepository, gateway_url: str):
        self.uow = uow
        self.payment_repo = payment_repo
        self.gateway_url = gateway_url

    async def execute(self, command: CreatePaymentCommandDTO) -> Result[CreatePaymentResponseDTO]:
        if command.amount < MIN_PAYMENT_AMOUNT or command.amount > MAX_PAYMENT_AMOUNT:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message=f"Amount must be between {MIN_PAYMENT_AMOUNT} and {MAX_PAYMENT_AMOUNT}",
                    reason=f"amount={command.amount}",
                )
            )

        try:
            payment = Payment(
                user_id=command.user_id,
                amount=command.amount,
                credits=credits_for_amount(command.amount),
                status=PaymentStatus.PENDING,
                method=command.method,
            )
            created = await self.payment_repo.create(payment)
            await self.uow.commit()

            logger.info(
                f"Created payment {created.id} for user {command.user_id}: "
                f"{created.amount} -> {created.credits} credits"
            )

            query = urlencode({"paymentId": created.id, "method": command.method.value})
            return Return.ok(
                CreatePaymentResponseDTO(
                    payment=PaymentResponseDTO.from_entity(created),
                    payment_url=f"{self.gateway_url}?{query}",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to create payment for user {command.user_id}")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to create payment",
                    reason=str(e),
                )
            )
