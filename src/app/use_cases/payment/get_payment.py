"""Get Payment Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.payment_repository import PaymentRepository
from .dtos import PaymentResponseDTO


class GetPayment:
    """
    Returns a payment to its owner.

    Errors:
        PAYMENT_NOT_FOUND: Unknown payment id
        FORBIDDEN: Payment belongs to another user
    """

    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(self, payment_id: str, user_id: str) -> Result[PaymentResponseDTO]:
        payment = await self.payment_repo.get_by_id(payment_id)

        if not payment:
            return Return.err(
                Error(
                    code="PAYMENT_NOT_FOUND",
                    message=f"Payment {payment_id} not found",
                )
            )

        if payment.user_id != user_id:
            return Return.err(
                Error(
                    code="FORBIDDEN",
                    message="You do not have access to this payment",
                    reason=f"owner={payment.user_id}, requester={user_id}",
                )
            )

        return Return.ok(PaymentResponseDTO.from_entity(payment))
