"""Generation Service Interface

Defines the contract for the external generative image/video API.
"""

from abc import ABC, abstractmethod
from typing import Optional
from pydantic import BaseModel
from libs.result import Result


class InlineImage(BaseModel):
    """Base64 encoded image with its MIME type"""

    base64: str
    mime_type: str


class GeneratedContent(BaseModel):
    """Result of an image edit: a data URL and/or model text"""

    image_url: Optional[str] = None
    text: Optional[str] = None
    secondary_image_url: Optional[str] = None


class GeneratedVideo(BaseModel):
    video_url: str


class GenerationService(ABC):
    """
    Abstract client for the generation API

    Implementations return Result errors with codes:
    - GENERATION_BLOCKED: request refused (safety filters, no image returned)
    - GENERATION_QUOTA_EXCEEDED: rate limit or quota exhausted
    - GENERATION_FAILED: any other upstream failure
    """

    @abstractmethod
    async def edit_image(
        self,
        image_base64: str,
        mime_type: str,
        prompt: str,
        mask_base64: Optional[str] = None,
        secondary_image: Optional[InlineImage] = None,
    ) -> Result[GeneratedContent]:
        """
        Edit an image following a text instruction

        Args:
            image_base64: Source image bytes, base64 encoded
            mime_type: MIME type of the source image
            prompt: Edit instruction
            mask_base64: Optional PNG mask restricting the edit area
            secondary_image: Optional reference image

        Returns:
            Result[GeneratedContent]: generated image data URL and model text
        """
        pass

    @abstractmethod
    async def generate_video(
        self,
        prompt: str,
        image: Optional[InlineImage] = None,
        aspect_ratio: str = "16:9",
    ) -> Result[GeneratedVideo]:
        """
        Generate a video from a prompt and an optional starting image

        Returns:
            Result[GeneratedVideo]: URI of the generated video
        """
        pass
