"""RefundPayment Use Case

Reverses a completed payment and withdraws the credits it granted.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.payment_repository import PaymentRepository
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.domain.credit_transaction import TransactionType
from src.domain.payment import PaymentStatus
from src.domain.base import utc_now
from .dtos import PaymentResponseDTO, RefundPaymentResponseDTO

logger = logging.getLogger(__name__)


class RefundPayment:
    """
    Use Case: Refund a completed payment

    Business Rules:
    1. Only completed payments can be refunded (completed -> refunded)
    2. The granted credits are withdrawn; if they were already spent the
       refund fails with INSUFFICIENT_BALANCE and nothing changes
    3. Status change and withdrawal commit together
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

    async def execute(self, payment_id: str) -> Result[RefundPaymentResponseDTO]:
        try:
            payment = await self.payment_repo.get_by_id(payment_id, for_update=True)

            if not payment:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="PAYMENT_NOT_FOUND",
                        message=f"Payment {payment_id} not found",
                    )
                )

            current_status = PaymentStatus(payment.status)
            if not payment.can_transition_to(PaymentStatus.REFUNDED):
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="INVALID_STATE",
                        message="Only completed payments can be refunded",
                        reason=f"status={current_status.value}",
                    )
                )

            withdrawal = await self.ledger.apply(
                payment.user_id,
                -payment.credits,
                TransactionType.WITHDRAWAL,
                description=f"Refund of payment {payment.id}",
                related_order=payment.id,
            )
            if withdrawal.is_err():
                await self.uow.rollback()
                return withdrawal

            payment.status = PaymentStatus.REFUNDED
            payment.updated_at = utc_now()
            updated = await self.payment_repo.update(payment)

            await self.uow.commit()

            logger.info(f"Refunded payment {payment.id}: removed {payment.credits} credits")

            return Return.ok(
                RefundPaymentResponseDTO(
                    payment=PaymentResponseDTO.from_entity(updated),
                    credits_removed=payment.credits,
                    current_balance=withdrawal.value.current_balance,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to refund payment {payment_id}")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to refund payment",
                    reason=str(e),
                )
            )
