"""API tests for /services endpoints with a fake generation backend"""

import pytest
from decimal import Decimal

from libs.result import Error, Return
from src.app.services.generation_service import GeneratedContent

EDIT_BODY = {"image_base64": "SU1H", "mime_type": "image/png", "prompt": "make it blue"}


async def balance(client, headers):
    response = await client.get("/api/accounts", headers=headers)
    return Decimal(response.json()["balance"])


@pytest.mark.asyncio
class TestEditImageApi:

    async def test_edit_charges_price(self, client, signup, generation_service):
        # Arrange
        _, headers = await signup("alice")

        # Act
        response = await client.post("/api/services/edit-image", json=EDIT_BODY, headers=headers)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["credits_used"]) == Decimal("5")
        assert Decimal(data["current_balance"]) == Decimal("10")
        assert data["result"]["image_url"] == "data:image/png;base64,RURJVEVE"
        assert generation_service.calls == [("edit_image", "make it blue")]

        usages = (await client.get("/api/services/usages", headers=headers)).json()
        assert usages["total"] == 1
        assert usages["usages"][0]["usage_id"] == data["usage_id"]
        assert usages["usages"][0]["status"] == "success"

    async def test_insufficient_balance(self, client, signup, generation_service):
        """
        Given: A balance of 15
        When: Four edits of 5 credits are requested
        Then: The fourth gets 402 and the generation API is never called for it
        """
        # Arrange
        _, headers = await signup("alice")
        for _ in range(3):
            ok = await client.post("/api/services/edit-image", json=EDIT_BODY, headers=headers)
            assert ok.status_code == 200

        # Act
        response = await client.post("/api/services/edit-image", json=EDIT_BODY, headers=headers)

        # Assert
        assert response.status_code == 402
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_BALANCE"
        assert error["details"]["required_credits"] == "5"
        assert Decimal(error["details"]["current_balance"]) == Decimal("0")
        assert len(generation_service.calls) == 3
        assert await balance(client, headers) == Decimal("0")

        failed = (await client.get("/api/services/usages", headers=headers)).json()["usages"]
        assert [u["status"] for u in failed].count("failed") == 1

    async def test_blocked_generation_is_refunded(self, client, signup, generation_service):
        # Arrange
        _, headers = await signup("alice")
        generation_service.image_results = [
            Return.err(Error(code="GENERATION_BLOCKED", message="The request was blocked for safety reasons."))
        ]

        # Act
        response = await client.post("/api/services/edit-image", json=EDIT_BODY, headers=headers)

        # Assert
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "GENERATION_BLOCKED"
        assert await balance(client, headers) == Decimal("15")
        usages = (await client.get("/api/services/usages", headers=headers)).json()["usages"]
        assert usages[0]["status"] == "refunded"

        transactions = (await client.get("/api/accounts/transactions", headers=headers)).json()
        assert [t["transaction_type"] for t in transactions["transactions"]] == [
            "reward", "withdrawal", "reward"
        ]

    async def test_two_step_edit(self, client, signup, generation_service):
        # Arrange
        _, headers = await signup("alice")
        generation_service.image_results = [
            Return.ok(GeneratedContent(image_url="data:image/png;base64,U1RFUDE=")),
            Return.ok(GeneratedContent(image_url="data:image/png;base64,U1RFUDI=")),
        ]

        # Act
        response = await client.post(
            "/api/services/edit-image",
            json={**EDIT_BODY, "is_two_step": True, "step_two_prompt": "add a hat"},
            headers=headers,
        )

        # Assert
        assert response.status_code == 200
        result = response.json()["result"]
        assert result["image_url"] == "data:image/png;base64,U1RFUDI="
        assert result["secondary_image_url"] == "data:image/png;base64,U1RFUDE="
        assert Decimal(response.json()["credits_used"]) == Decimal("5")
        assert [call[1] for call in generation_service.calls] == ["make it blue", "add a hat"]

    async def test_missing_prompt(self, client, signup):
        _, headers = await signup("alice")

        response = await client.post(
            "/api/services/edit-image", json={"image_base64": "SU1H", "mime_type": "image/png"}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
class TestGenerateVideoApi:

    async def test_video_needs_thirty_credits(self, client, signup):
        # Arrange
        _, headers = await signup("alice")

        # Act
        response = await client.post(
            "/api/services/generate-video", json={"prompt": "a cat surfing"}, headers=headers
        )

        # Assert
        assert response.status_code == 402
        assert response.json()["error"]["code"] == "INSUFFICIENT_BALANCE"

    async def test_video_after_top_up(self, client, signup, generation_service):
        # Arrange
        _, headers = await signup("alice")
        created = await client.post(
            "/api/payments/create", json={"amount": "5", "payment_method": "wechat"}, headers=headers
        )
        payment_id = created.json()["payment"]["payment_id"]
        await client.post(f"/api/payments/{payment_id}/simulate-success", headers=headers)

        # Act
        response = await client.post(
            "/api/services/generate-video",
            json={"prompt": "a cat surfing", "aspect_ratio": "9:16"},
            headers=headers,
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["video_url"] == "https://videos.test/generated.mp4"
        assert Decimal(response.json()["current_balance"]) == Decimal("35")

    async def test_invalid_aspect_ratio(self, client, signup):
        _, headers = await signup("alice")

        response = await client.post(
            "/api/services/generate-video",
            json={"prompt": "a cat surfing", "aspect_ratio": "4:3"},
            headers=headers,
        )

        assert response.status_code == 400
