"""Shared charge/refund flow for paid generation use cases"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.domain.pricing import get_service_price
from .consume_service import ConsumeService
from .refund_service_usage import RefundServiceUsage
from .dtos import ConsumeServiceCommandDTO, ConsumeServiceResponseDTO

logger = logging.getLogger(__name__)


class PaidGeneration:
    """
    Base for actions that call the generation API against the user's credits.

    Credits are debited before the external call. When the call fails the
    usage is refunded and the generation error is surfaced to the caller.
    """

    service_key: str = ""

    def __init__(self, consume_service: ConsumeService, refund_usage: RefundServiceUsage):
        self.consume_service = consume_service
        self.refund_usage = refund_usage

    async def _charge(self, user_id: str, details: Optional[str]) -> Result[ConsumeServiceResponseDTO]:
        price = get_service_price(self.service_key)
        if price is None:
            return Return.err(
                Error(
                    code="UNKNOWN_SERVICE",
                    message=f"Unknown service: {self.service_key}",
                )
            )

        return await self.consume_service.execute(
            ConsumeServiceCommandDTO(
                user_id=user_id,
                service_key=self.service_key,
                credits=price,
                details=details,
            )
        )

    async def _compensate(self, usage_id: str, error: Error) -> None:
        refund = await self.refund_usage.execute(usage_id, reason=error.message)
        if refund.is_err():
            logger.error(
                f"Could not refund usage {usage_id} after generation failure: "
                f"{refund.error.code} {refund.error.reason or refund.error.message}"
            )
        else:
            logger.info(f"Refunded usage {usage_id} after generation failure ({error.code})")
