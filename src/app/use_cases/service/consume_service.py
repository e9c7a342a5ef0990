"""ConsumeService Use Case

Charges a user for a paid action: debits the account and records the
service usage atomically.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.service_usage_repository import ServiceUsageRepository
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.domain.base import generate_uuid
from src.domain.credit_transaction import TransactionType
from src.domain.service_usage import ServiceUsage, ServiceUsageStatus
from .dtos import ConsumeServiceCommandDTO, ConsumeServiceResponseDTO, ServiceUsageResponseDTO

logger = logging.getLogger(__name__)


class ConsumeService:
    """
    Use Case: Consume credits for a service

    Business Rules:
    1. Debit and success usage record commit together
    2. The withdrawal references the usage id (related_order)
    3. Any failure rolls the debit back, then a failed usage is recorded
       in a fresh transaction with the failure reason

    Flow:
    1. Validate amount
    2. Withdraw credits (locks the account)
    3. Create success usage
    4. Commit
    On failure: rollback, record failed usage, return error
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

    async def execute(self, command: ConsumeServiceCommandDTO) -> Result[ConsumeServiceResponseDTO]:
        # Step 1: Validate amount
        if command.credits <= 0:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message="Credits must be greater than 0",
                    reason=f"credits={command.credits}",
                )
            )

        usage_id = generate_uuid()

        try:
            # Step 2: Withdraw credits
            withdrawal = await self.ledger.apply(
                command.user_id,
                -command.credits,
                TransactionType.WITHDRAWAL,
                description=f"Used {command.service_key} service",
                related_order=usage_id,
            )

            if withdrawal.is_err():
                await self.uow.rollback()
                error = withdrawal.error
                if error.code == "INSUFFICIENT_BALANCE":
                    error = Error(
                        code="INSUFFICIENT_BALANCE",
                        message="Insufficient balance",
                        reason=error.reason,
                        details={**(error.details or {}), "usage_id": usage_id},
                    )
                await self._record_failure(command, usage_id, error.message)
                return Return.err(error)

            # Step 3: Create success usage
            usage = ServiceUsage(
                id=usage_id,
                user_id=command.user_id,
                service_key=command.service_key,
                credits_used=command.credits,
                status=ServiceUsageStatus.SUCCESS,
                details=command.details,
            )
            created_usage = await self.usage_repo.create(usage)

            # Step 4: Commit
            await self.uow.commit()

            logger.info(
                f"User {command.user_id} consumed {command.credits} credits "
                f"for {command.service_key} (usage {usage_id})"
            )

            return Return.ok(
                ConsumeServiceResponseDTO(
                    usage=ServiceUsageResponseDTO.from_entity(created_usage),
                    current_balance=withdrawal.value.current_balance,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Failed to consume {command.service_key} for user {command.user_id}")
            await self._record_failure(command, usage_id, str(e))
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to consume service",
                    reason=str(e),
                    details={"usage_id": usage_id},
                )
            )

    async def _record_failure(
        self, command: ConsumeServiceCommandDTO, usage_id: str, reason: str
    ) -> None:
        """Persist a failed usage row in its own transaction"""
        try:
            details = f"{command.details} | Error: {reason}" if command.details else f"Error: {reason}"
            await self.usage_repo.create(
                ServiceUsage(
                    id=usage_id,
                    user_id=command.user_id,
                    service_key=command.service_key,
                    credits_used=command.credits,
                    status=ServiceUsageStatus.FAILED,
                    details=details,
                )
            )
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            logger.exception(f"Failed to record failed usage {usage_id}")
