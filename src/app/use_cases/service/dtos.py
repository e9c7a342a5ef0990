"""Data Transfer Objects for Service Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.app.services.generation_service import GeneratedContent, InlineImage
from src.domain.service_usage import ServiceUsage, ServiceUsageStatus


class ConsumeServiceCommandDTO(BaseModel):
    """
    Command DTO for charging a paid action

    Used as input to ConsumeService use case.
    """

    user_id: str = Field(..., description="User invoking the service")
    service_key: str = Field(..., description="Pricing key (e.g. ai-image-edit)")
    credits: Decimal = Field(..., description="Credits to charge")
    details: Optional[str] = Field(default=None, description="Free-form usage details")


class ServiceUsageResponseDTO(BaseModel):
    """Response DTO for a service usage record"""

    usage_id: str
    user_id: str
    service_key: str
    credits_used: Decimal
    status: str = Field(..., description="success, failed or refunded")
    details: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, usage: ServiceUsage) -> "ServiceUsageResponseDTO":
        return cls(
            usage_id=usage.id,
            user_id=usage.user_id,
            service_key=usage.service_key,
            credits_used=usage.credits_used,
            status=ServiceUsageStatus(usage.status).value,
            details=usage.details,
            created_at=usage.created_at,
        )


class ConsumeServiceResponseDTO(BaseModel):
    usage: ServiceUsageResponseDTO
    current_balance: Decimal = Field(..., description="Balance after the debit")


class RefundServiceUsageResponseDTO(BaseModel):
    usage: ServiceUsageResponseDTO
    credits_refunded: Decimal
    current_balance: Decimal


class ListServiceUsagesResponseDTO(BaseModel):
    usages: List[ServiceUsageResponseDTO]
    total: int
    limit: int
    offset: int


class EditImageCommandDTO(BaseModel):
    """
    Command DTO for a paid image edit

    A two-step edit runs `prompt` first, then `step_two_prompt` on the
    intermediate image; the intermediate image is returned as
    secondary_image_url.
    """

    user_id: str
    image_base64: str
    mime_type: str
    prompt: str
    mask_base64: Optional[str] = None
    secondary_image: Optional[InlineImage] = None
    is_two_step: bool = False
    step_two_prompt: Optional[str] = None


class EditImageResponseDTO(BaseModel):
    usage_id: str
    credits_used: Decimal
    current_balance: Decimal
    result: GeneratedContent


class GenerateVideoCommandDTO(BaseModel):
    user_id: str
    prompt: str
    image: Optional[InlineImage] = None
    aspect_ratio: str = "16:9"


class GenerateVideoResponseDTO(BaseModel):
    usage_id: str
    credits_used: Decimal
    current_balance: Decimal
    video_url: str
