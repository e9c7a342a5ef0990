"""Gemini implementation of GenerationService

Talks to the Gemini REST API with httpx: generateContent for image edits and
predictLongRunning (Veo) for videos.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional
import httpx
from libs.result import Result, Return, Error
from src.app.services.generation_service import (
    GenerationService,
    GeneratedContent,
    GeneratedVideo,
    InlineImage,
)

logger = logging.getLogger(__name__)

MASKED_EDIT_PROMPT = (
    'Apply the following instruction only to the masked area of the image: "{prompt}". '
    "Preserve the unmasked area."
)


class GeminiGenerationService(GenerationService):
    """
    Generation service backed by Google's Gemini / Veo REST endpoints

    Args:
        api_key: Gemini API key
        api_base: REST base URL (e.g. https://generativelanguage.googleapis.com/v1beta)
        image_model: Model used for image edits
        video_model: Model used for video generation
        timeout: Per-request timeout in seconds
        poll_interval: Seconds between polls of a video operation
        max_polls: Polls before a video operation is abandoned
        client: Optional preconfigured httpx.AsyncClient (tests inject a MockTransport)
    """

    def __init__(
        self,
        api_key: str,
        api_base: str,
        image_model: str,
        video_model: str,
        timeout: float = 120.0,
        poll_interval: float = 10.0,
        max_polls: int = 60,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.image_model = image_model
        self.video_model = video_model
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._client = client

    async def edit_image(
        self,
        image_base64: str,
        mime_type: str,
        prompt: str,
        mask_base64: Optional[str] = None,
        secondary_image: Optional[InlineImage] = None,
    ) -> Result[GeneratedContent]:
        if not self.api_key:
            return Return.err(
                Error(
                    code="GENERATION_FAILED",
                    message="Generation service is not configured",
                    reason="GEMINI_API_KEY is empty",
                )
            )

        full_prompt = prompt
        parts: List[Dict[str, Any]] = [
            {"inlineData": {"data": image_base64, "mimeType": mime_type}}
        ]

        if mask_base64:
            parts.append({"inlineData": {"data": mask_base64, "mimeType": "image/png"}})
            full_prompt = MASKED_EDIT_PROMPT.format(prompt=prompt)

        if secondary_image:
            parts.append(
                {
                    "inlineData": {
                        "data": secondary_image.base64,
                        "mimeType": secondary_image.mime_type,
                    }
                }
            )

        parts.append({"text": full_prompt})

        body = {
            "contents": [{"parts": parts}],
            "generationConfig": {"responseModalities": ["IMAGE", "TEXT"]},
        }

        result = await self._post(f"models/{self.image_model}:generateContent", body)
        if result.is_err():
            return result

        return self._parse_image_response(result.value)

    async def generate_video(
        self,
        prompt: str,
        image: Optional[InlineImage] = None,
        aspect_ratio: str = "16:9",
    ) -> Result[GeneratedVideo]:
        if not self.api_key:
            return Return.err(
                Error(
                    code="GENERATION_FAILED",
                    message="Generation service is not configured",
                    reason="GEMINI_API_KEY is empty",
                )
            )

        instance: Dict[str, Any] = {"prompt": prompt}
        if image:
            instance["image"] = {
                "bytesBase64Encoded": image.base64,
                "mimeType": image.mime_type,
            }

        body = {
            "instances": [instance],
            "parameters": {"aspectRatio": aspect_ratio, "sampleCount": 1},
        }

        logger.info("Initializing video generation...")
        started = await self._post(f"models/{self.video_model}:predictLongRunning", body)
        if started.is_err():
            return started

        operation = started.value
        operation_name = operation.get("name")
        if not operation_name:
            return Return.err(
                Error(
                    code="GENERATION_FAILED",
                    message="Video generation did not start",
                    reason=f"No operation name in response: {operation}",
                )
            )

        polls = 0
        while not operation.get("done"):
            if polls >= self.max_polls:
                return Return.err(
                    Error(
                        code="GENERATION_FAILED",
                        message="Video generation timed out",
                        reason=f"Operation {operation_name} not done after {polls} polls",
                    )
                )
            await asyncio.sleep(self.poll_interval)
            polls += 1
            logger.info(f"Checking video generation status ({polls})...")
            polled = await self._get(operation_name)
            if polled.is_err():
                return polled
            operation = polled.value

        if operation.get("error"):
            return self._api_error(operation["error"])

        samples = (
            operation.get("response", {})
            .get("generateVideoResponse", {})
            .get("generatedSamples", [])
        )
        uri = samples[0].get("video", {}).get("uri") if samples else None
        if not uri:
            return Return.err(
                Error(
                    code="GENERATION_BLOCKED",
                    message="Video generation completed, but no video was returned. "
                            "The prompt may have been blocked.",
                )
            )

        return Return.ok(GeneratedVideo(video_url=uri))

    async def _post(self, path: str, body: Dict[str, Any]) -> Result[Dict[str, Any]]:
        return await self._request("POST", path, body)

    async def _get(self, path: str) -> Result[Dict[str, Any]]:
        return await self._request("GET", path, None)

    async def _request(
        self, method: str, path: str, body: Optional[Dict[str, Any]]
    ) -> Result[Dict[str, Any]]:
        url = f"{self.api_base}/{path}"
        headers = {"x-goog-api-key": self.api_key}
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, json=body, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Error calling Gemini API: {e}")
            return Return.err(
                Error(
                    code="GENERATION_FAILED",
                    message="Could not reach the generation service. Please try again.",
                    reason=str(e),
                )
            )

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code >= 400:
            logger.error(f"Gemini API returned {response.status_code}: {response.text[:500]}")
            error = payload.get("error") if isinstance(payload, dict) else None
            return self._api_error(error or {"code": response.status_code})

        return Return.ok(payload)

    def _api_error(self, error: Dict[str, Any]) -> Result:
        status = error.get("status")
        code = error.get("code")
        if status == "RESOURCE_EXHAUSTED" or code == 429:
            return Return.err(
                Error(
                    code="GENERATION_QUOTA_EXCEEDED",
                    message="You've likely exceeded the request limit. "
                            "Please wait a moment before trying again.",
                    reason=str(error),
                )
            )
        if code == 500 or status == "UNKNOWN":
            return Return.err(
                Error(
                    code="GENERATION_FAILED",
                    message="An unexpected server error occurred. This might be a temporary "
                            "issue. Please try again in a few moments.",
                    reason=str(error),
                )
            )
        return Return.err(
            Error(
                code="GENERATION_FAILED",
                message=error.get("message") or "The generation service returned an error.",
                reason=str(error),
            )
        )

    def _parse_image_response(self, payload: Dict[str, Any]) -> Result[GeneratedContent]:
        content = GeneratedContent()
        candidates = payload.get("candidates") or []
        candidate = candidates[0] if candidates else {}

        for part in candidate.get("content", {}).get("parts", []) or []:
            if part.get("text"):
                content.text = f"{content.text}\n{part['text']}" if content.text else part["text"]
            elif part.get("inlineData"):
                inline = part["inlineData"]
                content.image_url = f"data:{inline.get('mimeType')};base64,{inline.get('data')}"

        if content.image_url:
            return Return.ok(content)

        if content.text:
            message = f'The model responded: "{content.text}"'
        elif candidate.get("finishReason") == "SAFETY":
            blocked = ", ".join(
                r.get("category", "")
                for r in candidate.get("safetyRatings", []) or []
                if r.get("blocked")
            )
            message = (
                f"The request was blocked for safety reasons. Categories: {blocked or 'Unknown'}. "
                "Please modify your prompt or image."
            )
        else:
            message = (
                "The model did not return an image. It might have refused the request. "
                "Please try a different image or prompt."
            )

        return Return.err(
            Error(
                code="GENERATION_BLOCKED",
                message=message,
                reason=f"finishReason={candidate.get('finishReason')}",
            )
        )
