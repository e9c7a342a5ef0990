"""GenerateVideo Use Case

Paid video generation with the same debit-first, refund-on-failure flow as
image edits.
"""

import logging
from libs.result import Result, Return
from src.app.services.generation_service import GenerationService
from .consume_service import ConsumeService
from .refund_service_usage import RefundServiceUsage
from .paid_generation import PaidGeneration
from .dtos import GenerateVideoCommandDTO, GenerateVideoResponseDTO

logger = logging.getLogger(__name__)


class GenerateVideo(PaidGeneration):
    service_key = "ai-video-generate"

    def __init__(
        self,
        consume_service: ConsumeService,
        refund_usage: RefundServiceUsage,
        generation_service: GenerationService,
    ):
        super().__init__(consume_service, refund_usage)
        self.generation_service = generation_service

    async def execute(self, command: GenerateVideoCommandDTO) -> Result[GenerateVideoResponseDTO]:
        charge = await self._charge(command.user_id, f"Video: {command.prompt[:200]}")
        if charge.is_err():
            return charge

        usage_id = charge.value.usage.usage_id

        generated = await self.generation_service.generate_video(
            command.prompt,
            image=command.image,
            aspect_ratio=command.aspect_ratio,
        )

        if generated.is_err():
            logger.warning(f"Video generation failed for usage {usage_id}: {generated.error.code}")
            await self._compensate(usage_id, generated.error)
            return generated

        return Return.ok(
            GenerateVideoResponseDTO(
                usage_id=usage_id,
                credits_used=charge.value.usage.credits_used,
                current_balance=charge.value.current_balance,
                video_url=generated.value.video_url,
            )
        )
