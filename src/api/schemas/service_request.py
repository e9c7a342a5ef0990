"""Request schemas for Service API"""

from typing import Optional
from pydantic import BaseModel, Field

from src.app.services.generation_service import InlineImage


class EditImageRequestSchema(BaseModel):
    """
    Request schema for a paid image edit

    Used for POST /services/edit-image endpoint.
    """

    image_base64: str = Field(..., min_length=1, description="Source image, base64 encoded")
    mime_type: str = Field(..., min_length=1, description="MIME type of the source image")
    prompt: str = Field(..., min_length=1, description="Edit instruction")
    mask_base64: Optional[str] = Field(default=None, description="Optional PNG mask")
    secondary_image: Optional[InlineImage] = Field(default=None, description="Optional reference image")
    is_two_step: bool = Field(default=False, description="Run prompt, then step_two_prompt on the result")
    step_two_prompt: Optional[str] = Field(default=None)


class GenerateVideoRequestSchema(BaseModel):
    prompt: str = Field(..., min_length=1)
    image: Optional[InlineImage] = None
    aspect_ratio: str = Field(default="16:9", pattern=r"^(16:9|9:16)$")
