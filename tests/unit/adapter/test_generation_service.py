"""Unit tests for GeminiGenerationService

The HTTP layer is replaced with httpx.MockTransport.
"""

import json
import pytest
import httpx

from src.adapter.services.generation_service import GeminiGenerationService
from src.app.services.generation_service import InlineImage

API_BASE = "https://gemini.test/v1beta"


def make_service(handler, api_key="test-key", max_polls=3):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiGenerationService(
        api_key=api_key,
        api_base=API_BASE,
        image_model="image-model",
        video_model="video-model",
        poll_interval=0,
        max_polls=max_polls,
        client=client,
    )


def image_response(parts, finish_reason="STOP", safety_ratings=None):
    candidate = {"content": {"parts": parts}, "finishReason": finish_reason}
    if safety_ratings is not None:
        candidate["safetyRatings"] = safety_ratings
    return {"candidates": [candidate]}


@pytest.mark.asyncio
class TestEditImage:

    async def test_returns_data_url_and_text(self):
        # Arrange
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(
                200,
                json=image_response(
                    [{"text": "Here you go"}, {"inlineData": {"mimeType": "image/png", "data": "T1VU"}}]
                ),
            )

        service = make_service(handler)

        # Act
        result = await service.edit_image("SU4=", "image/jpeg", "make it blue")

        # Assert
        assert result.is_ok()
        assert result.value.image_url == "data:image/png;base64,T1VU"
        assert result.value.text == "Here you go"

        request = requests[0]
        assert str(request.url) == f"{API_BASE}/models/image-model:generateContent"
        assert request.headers["x-goog-api-key"] == "test-key"
        body = json.loads(request.content)
        parts = body["contents"][0]["parts"]
        assert parts[0] == {"inlineData": {"data": "SU4=", "mimeType": "image/jpeg"}}
        assert parts[-1] == {"text": "make it blue"}

    async def test_mask_and_reference_image_are_sent(self):
        # Arrange
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(
                200, json=image_response([{"inlineData": {"mimeType": "image/png", "data": "T1VU"}}])
            )

        service = make_service(handler)

        # Act
        await service.edit_image(
            "SU4=",
            "image/png",
            "add a hat",
            mask_base64="TUFTSw==",
            secondary_image=InlineImage(base64="UkVG", mime_type="image/webp"),
        )

        # Assert
        parts = bodies[0]["contents"][0]["parts"]
        assert parts[1] == {"inlineData": {"data": "TUFTSw==", "mimeType": "image/png"}}
        assert parts[2] == {"inlineData": {"data": "UkVG", "mimeType": "image/webp"}}
        assert "masked area" in parts[3]["text"]
        assert "add a hat" in parts[3]["text"]

    async def test_safety_block(self):
        # Arrange
        def handler(request):
            return httpx.Response(
                200,
                json=image_response(
                    [],
                    finish_reason="SAFETY",
                    safety_ratings=[
                        {"category": "HARM_CATEGORY_DANGEROUS", "blocked": True},
                        {"category": "HARM_CATEGORY_OTHER", "blocked": False},
                    ],
                ),
            )

        service = make_service(handler)

        # Act
        result = await service.edit_image("SU4=", "image/png", "something bad")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_BLOCKED"
        assert "HARM_CATEGORY_DANGEROUS" in result.error.message
        assert "HARM_CATEGORY_OTHER" not in result.error.message

    async def test_text_only_answer_is_blocked(self):
        # Arrange
        service = make_service(
            lambda request: httpx.Response(200, json=image_response([{"text": "I can't edit faces"}]))
        )

        # Act
        result = await service.edit_image("SU4=", "image/png", "swap faces")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_BLOCKED"
        assert "I can't edit faces" in result.error.message

    async def test_quota_exceeded(self):
        # Arrange
        service = make_service(
            lambda request: httpx.Response(
                429, json={"error": {"code": 429, "status": "RESOURCE_EXHAUSTED", "message": "quota"}}
            )
        )

        # Act
        result = await service.edit_image("SU4=", "image/png", "x")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_QUOTA_EXCEEDED"

    async def test_upstream_server_error(self):
        # Arrange
        service = make_service(lambda request: httpx.Response(500, text="oops"))

        # Act
        result = await service.edit_image("SU4=", "image/png", "x")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_FAILED"

    async def test_network_error(self):
        # Arrange
        def handler(request):
            raise httpx.ConnectError("connection refused")

        service = make_service(handler)

        # Act
        result = await service.edit_image("SU4=", "image/png", "x")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_FAILED"
        assert "connection refused" in result.error.reason

    async def test_missing_api_key(self):
        # Arrange
        def handler(request):
            raise AssertionError("no request expected")

        service = make_service(handler, api_key="")

        # Act
        result = await service.edit_image("SU4=", "image/png", "x")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_FAILED"


@pytest.mark.asyncio
class TestGenerateVideo:

    async def test_polls_until_done(self):
        # Arrange
        calls = []

        def handler(request):
            calls.append((request.method, request.url.path))
            if request.method == "POST":
                return httpx.Response(200, json={"name": "operations/op1", "done": False})
            if len(calls) < 3:
                return httpx.Response(200, json={"name": "operations/op1", "done": False})
            return httpx.Response(
                200,
                json={
                    "name": "operations/op1",
                    "done": True,
                    "response": {
                        "generateVideoResponse": {
                            "generatedSamples": [{"video": {"uri": "https://videos.test/v.mp4"}}]
                        }
                    },
                },
            )

        service = make_service(handler)

        # Act
        result = await service.generate_video(
            "a cat surfing",
            image=InlineImage(base64="SU1H", mime_type="image/png"),
            aspect_ratio="9:16",
        )

        # Assert
        assert result.is_ok()
        assert result.value.video_url == "https://videos.test/v.mp4"
        assert calls[0] == ("POST", "/v1beta/models/video-model:predictLongRunning")
        assert calls[1] == ("GET", "/v1beta/operations/op1")
        assert len(calls) == 3

    async def test_times_out_after_max_polls(self):
        # Arrange
        service = make_service(
            lambda request: httpx.Response(200, json={"name": "operations/op1", "done": False}),
            max_polls=2,
        )

        # Act
        result = await service.generate_video("a cat surfing")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_FAILED"
        assert result.error.message == "Video generation timed out"

    async def test_done_without_video_is_blocked(self):
        # Arrange
        service = make_service(
            lambda request: httpx.Response(200, json={"name": "operations/op1", "done": True})
        )

        # Act
        result = await service.generate_video("something blocked")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_BLOCKED"

    async def test_operation_error(self):
        # Arrange
        service = make_service(
            lambda request: httpx.Response(
                200,
                json={"name": "operations/op1", "done": True, "error": {"code": 429, "message": "quota"}},
            )
        )

        # Act
        result = await service.generate_video("a cat surfing")

        # Assert
        assert result.is_err()
        assert result.error.code == "GENERATION_QUOTA_EXCEEDED"
