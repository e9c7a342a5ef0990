"""RefundServiceUsage Use Case

Returns the credits of a successful service usage within the refund window.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.service_usage_repository import ServiceUsageRepository
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.domain.credit_transaction import TransactionType
from src.domain.pricing import REFUND_WINDOW
from src.domain.service_usage import ServiceUsageStatus
from src.domain.base import utc_now
from .dtos import RefundServiceUsageResponseDTO, ServiceUsageResponseDTO

logger = logging.getLogger(__name__)


class RefundServiceUsage:
    """
    Use Case: Refund a service usage

    Business Rules:
    1. Only success usages can be refunded (success -> refunded)
    2. Only within REFUND_WINDOW of the usage's created_at
    3. Credits come back as a reward transaction with related_order = usage id
    4. Usage status and credit commit together; on any error nothing changes
    """

    def __init__(
        self,
        uow: UnitOfWork,
        usage_repo: ServiceUsageRepository,
        ledger: ApplyCreditDelta,
    ):
        self.uow = uow
        self.usage_repo = usage_repo
        self.ledger = ledger

    async def execute(
        self, usage_id: str, reason: Optional[str] = None
    ) -> Result[RefundServiceUsageResponseDTO]:
        try:
            # Step 1: Lock usage
            usage = await self.usage_repo.get_by_id(usage_id, for_update=True)

            if not usage:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="USAGE_NOT_FOUND",
                        message=f"Service usage {usage_id} not found",
                    )
                )

            # Step 2: Validate status and window
            current_status = ServiceUsageStatus(usage.status)
            created_at = usage.created_at
            if current_status != ServiceUsageStatus.SUCCESS:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="INVALID_STATE",
                        message="Only successful usages can be refunded",
                        reason=f"status={current_status.value}",
                    )
                )

            if not usage.is_refundable(utc_now(), REFUND_WINDOW):
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="REFUND_WINDOW_EXPIRED",
                        message="Service usage is older than the refund window",
                        reason=f"created_at={created_at}",
                    )
                )

            # Step 3: Credit back
            credit = await self.ledger.apply(
                usage.user_id,
                usage.credits_used,
                TransactionType.REWARD,
                description=f"Refund for {usage.service_key}" + (f": {reason}" if reason else ""),
                related_order=usage.id,
            )
            if credit.is_err():
                await self.uow.rollback()
                return credit

            # Step 4: Mark refunded
            usage.status = ServiceUsageStatus.REFUNDED
            if reason:
                usage.details = f"{usage.details} | Refunded: {reason}" if usage.details else f"Refunded: {reason}"
            updated = await self.usage_repo.update(usage)

            await self.uow.commit()

            logger.info(f"Refunded {usage.credits_used} credits for usage {usage.id}")

            return Return.ok(
                RefundServiceUsageResponseDTO(
                    usage=ServiceUsageResponseDTO.from_entity(updated),
                    credits_refunded=usage.credits_used,
                    current_balance=credit.value.current_balance,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to refund service usage {usage_id}")
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to refund service usage",
                    reason=str(e),
                )
            )
