"""CompletePayment Use Case

Applies the gateway's confirmation to a pending payment and deposits the
credits in the same transaction.
"""

import logging
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.payment_repository import PaymentRepository
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.domain.credit_transaction import TransactionType
from src.domain.payment import PaymentMethod, PaymentStatus
from src.domain.base import utc_now
from .dtos import CompletePaymentCommandDTO, CompletePaymentResponseDTO, PaymentResponseDTO

logger = logging.getLogger(__name__)


class CompletePayment:
    """
    Use Case: Complete or fail a pending payment

    Business Rules:
    1. The payment row is locked and re-read inside the transaction
    2. Only pending payments can be completed; replays get INVALID_STATE
    3. On success the credits are deposited with related_order = payment id
    4. Status change and deposit commit together or not at all

    Flow:
    1. Lock payment (SELECT FOR UPDATE)
    2. Validate status
    3. Set status, gateway transaction id and updated_at
    4. Deposit credits (success only)
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_repo: PaymentRepository,
        ledger: ApplyCreditDelta,
    ):
        self.uow = uow
        self.payment_repo = payment_repo
        self.ledger = ledger

    async def execute(self, command: CompletePaymentCommandDTO) -> Result[CompletePaymentResponseDTO]:
        try:
            # Step 1: Lock payment
            payment = await self.payment_repo.get_by_id(command.payment_id, for_update=True)

            if not payment:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="PAYMENT_NOT_FOUND",
                        message=f"Payment {command.payment_id} not found",
                    )
                )

            # Step 2: Validate status
            current_status = PaymentStatus(payment.status)
            if current_status != PaymentStatus.PENDING:
                await self.uow.rollback()
                logger.warning(
                    f"Ignoring callback for payment {command.payment_id} in status {current_status.value}"
                )
                return Return.err(
                    Error(
                        code="INVALID_STATE",
                        message="Payment has already been processed",
                        reason=f"status={current_status.value}",
                    )
                )

            # Step 3: Apply gateway outcome
            payment.status = PaymentStatus.COMPLETED if command.success else PaymentStatus.FAILED
            payment.transaction_id = command.transaction_id
            payment.updated_at = utc_now()
            updated = await self.payment_repo.update(payment)

            credits_added = Decimal("0")
            current_balance = None

            # Step 4: Deposit credits
            if command.success:
                deposit = await self.ledger.apply(
                    payment.user_id,
                    payment.credits,
                    TransactionType.DEPOSIT,
                    description=f"Top-up of {payment.credits} credits via {PaymentMethod(payment.method).value}",
                    related_order=payment.id,
                )
                if deposit.is_err():
                    await self.uow.rollback()
                    return deposit

                credits_added = payment.credits
                current_balance = deposit.value.current_balance

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Payment {payment.id} {PaymentStatus(updated.status).value} "
                f"(gateway transaction {command.transaction_id})"
            )

            return Return.ok(
                CompletePaymentResponseDTO(
                    payment=PaymentResponseDTO.from_entity(updated),
                    credits_added=credits_added,
                    current_balance=current_balance,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to complete payment {command.payment_id}")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to process payment",
                    reason=str(e),
                )
            )
