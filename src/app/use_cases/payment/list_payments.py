"""List Payments Use Case"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import PaymentStatus
from .dtos import ListPaymentsResponseDTO, PaymentResponseDTO


class ListPayments:
    """Paginated payment history of a user, newest first"""

    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        status: Optional[PaymentStatus] = None,
    ) -> Result[ListPaymentsResponseDTO]:
        payments, total = await self.payment_repo.get_by_user_id(
            user_id=user_id,
            limit=limit,
            offset=offset,
            status=status,
        )

        return Return.ok(
            ListPaymentsResponseDTO(
                payments=[PaymentResponseDTO.from_entity(p) for p in payments],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
