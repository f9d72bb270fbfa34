"""Tests for vision service."""

import asyncio
import base64

from protein_coach.domain.meals import MealType
from protein_coach.services.prompts import (
    COACHED_INSTRUCTION,
    ESTIMATE_ONLY_INSTRUCTION,
    build_hint,
)
from protein_coach.services.vision import (
    AnalysisProfile,
    FetchedImage,
    MealVisionService,
    to_data_url,
)
from tests.conftest import JPEG_BYTES, FakeVisionClient


def test_vision_service_returns_validated_estimate() -> None:
    client = FakeVisionClient()
    service = MealVisionService(client=client, model="gpt-4.1-mini", temperature=0.3)

    estimate = asyncio.run(
        service.analyze(FetchedImage(JPEG_BYTES, "image/jpeg"), "eggs", MealType.LUNCH)
    )

    assert estimate.protein_grams == 32
    assert client.calls[0]["instruction"] == COACHED_INSTRUCTION
    assert client.calls[0]["temperature"] == 0.3
    assert service.allows_model_coaching is True


def test_estimate_only_profile_uses_short_prompt() -> None:
    client = FakeVisionClient(payload={"protein_grams": 14, "confidence": "medium"})
    service = MealVisionService(
        client=client,
        model="gpt-4.1-mini",
        temperature=0.3,
        profile=AnalysisProfile.ESTIMATE_ONLY,
    )

    estimate = asyncio.run(service.analyze(FetchedImage(JPEG_BYTES)))

    assert estimate.protein_grams == 14
    assert client.calls[0]["instruction"] == ESTIMATE_ONLY_INSTRUCTION
    assert service.allows_model_coaching is False


def test_build_hint_defaults() -> None:
    assert build_hint(None, None) == (
        "Optional hints:\n- meal_type:unknown\n- text:none"
    )
    assert build_hint("  ", MealType.SNACK) == (
        "Optional hints:\n- meal_type:snack\n- text:none"
    )


def test_to_data_url_prefers_image_content_type() -> None:
    url = to_data_url(b"bytes", "image/webp; charset=binary")

    assert url == "data:image/webp;base64," + base64.b64encode(b"bytes").decode()


def test_to_data_url_ignores_non_image_content_type() -> None:
    data = b"\x89PNG\r\n\x1a\n" + b"rest"

    assert to_data_url(data, "application/octet-stream").startswith(
        "data:image/png;base64,"
    )


def test_to_data_url_sniffs_webp() -> None:
    data = b"RIFF\x00\x00\x00\x00WEBPVP8 "

    assert to_data_url(data).startswith("data:image/webp;base64,")


def test_to_data_url_defaults_to_jpeg() -> None:
    assert to_data_url(b"unknown").startswith("data:image/jpeg;base64,")
