"""EditImage Use Case

Paid image edit: charges ai-image-edit, calls the generation service and
refunds the charge when generation fails.
"""

import logging
from typing import Tuple
from libs.result import Result, Return, Error
from src.app.services.generation_service import GenerationService, GeneratedContent
from .consume_service import ConsumeService
from .refund_service_usage import RefundServiceUsage
from .paid_generation import PaidGeneration
from .dtos import EditImageCommandDTO, EditImageResponseDTO

logger = logging.getLogger(__name__)


def split_data_url(data_url: str) -> Tuple[str, str]:
    """Split a base64 data URL into (base64, mime_type)"""
    header, _, data = data_url.partition(",")
    mime_type = header.split(";")[0].split(":")[-1] or "image/png"
    return data, mime_type


class EditImage(PaidGeneration):
    """
    Use Case: Edit an image for credits

    Flow:
    1. Debit the service price (ConsumeService)
    2. Run the edit; a two-step edit feeds the first result into a second
       prompt and returns the intermediate image as secondary_image_url
    3. On generation failure refund the usage and return the generation error
    """

    service_key = "ai-image-edit"

    def __init__(
        self,
        consume_service: ConsumeService,
        refund_usage: RefundServiceUsage,
        generation_service: GenerationService,
    ):
        super().__init__(consume_service, refund_usage)
        self.generation_service = generation_service

    async def execute(self, command: EditImageCommandDTO) -> Result[EditImageResponseDTO]:
        # Step 1: Charge
        charge = await self._charge(command.user_id, f"Image edit: {command.prompt[:200]}")
        if charge.is_err():
            return charge

        usage_id = charge.value.usage.usage_id

        # Step 2: Generate
        if command.is_two_step and command.step_two_prompt:
            generated = await self._two_step(command)
        else:
            generated = await self.generation_service.edit_image(
                command.image_base64,
                command.mime_type,
                command.prompt,
                mask_base64=command.mask_base64,
                secondary_image=command.secondary_image,
            )

        # Step 3: Compensate on failure
        if generated.is_err():
            logger.warning(f"Image edit failed for usage {usage_id}: {generated.error.code}")
            await self._compensate(usage_id, generated.error)
            return generated

        return Return.ok(
            EditImageResponseDTO(
                usage_id=usage_id,
                credits_used=charge.value.usage.credits_used,
                current_balance=charge.value.current_balance,
                result=generated.value,
            )
        )

    async def _two_step(self, command: EditImageCommandDTO) -> Result[GeneratedContent]:
        step_one = await self.generation_service.edit_image(
            command.image_base64, command.mime_type, command.prompt
        )
        if step_one.is_err():
            return step_one

        if not step_one.value.image_url:
            return Return.err(
                Error(
                    code="GENERATION_FAILED",
                    message="Step 1 failed to generate an image.",
                )
            )

        intermediate_base64, intermediate_mime = split_data_url(step_one.value.image_url)
        step_two = await self.generation_service.edit_image(
            intermediate_base64,
            intermediate_mime,
            command.step_two_prompt,
            secondary_image=command.secondary_image,
        )
        if step_two.is_err():
            return step_two

        return Return.ok(
            step_two.value.model_copy(
                update={"secondary_image_url": step_one.value.image_url}
            )
        )
