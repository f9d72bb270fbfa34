"""Meal photo analysis via a vision-capable language model."""

import base64
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from protein_coach.domain.estimate import MealEstimate
from protein_coach.domain.meals import MealType
from protein_coach.services.prompts import (
    COACHED_INSTRUCTION,
    ESTIMATE_ONLY_INSTRUCTION,
    build_hint,
)
from protein_coach.services.validation import parse_model_output


class AnalysisProfile(StrEnum):
    """Which prompt contract the pipeline runs with."""

    COACHED = "coached"
    ESTIMATE_ONLY = "estimate_only"


@dataclass(frozen=True)
class FetchedImage:
    """Image bytes downloaded from the photo store."""

    content: bytes
    content_type: str | None = None


class VisionClient(Protocol):
    """Interface for a single vision model call."""

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        instruction: str,
        hint: str,
        image_data_url: str,
    ) -> str:
        """Return the model's raw output text."""


@dataclass
class MealVisionService:
    """Service that prepares vision prompts and validates results."""

    client: VisionClient
    model: str
    temperature: float
    profile: AnalysisProfile = AnalysisProfile.COACHED

    @property
    def allows_model_coaching(self) -> bool:
        """Whether model-written coaching may be shown to the user."""
        return self.profile == AnalysisProfile.COACHED

    async def analyze(
        self,
        image: FetchedImage,
        meal_text: str | None = None,
        meal_type: MealType | None = None,
    ) -> MealEstimate:
        """Estimate protein for a meal photo and validate the response."""
        instruction = (
            COACHED_INSTRUCTION
            if self.profile == AnalysisProfile.COACHED
            else ESTIMATE_ONLY_INSTRUCTION
        )
        raw = await self.client.analyze(
            model=self.model,
            temperature=self.temperature,
            instruction=instruction,
            hint=build_hint(meal_text, meal_type),
            image_data_url=to_data_url(image.content, image.content_type),
        )
        return parse_model_output(raw)


def to_data_url(image_bytes: bytes, content_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _clean_content_type(content_type) or _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _clean_content_type(content_type: str | None) -> str | None:
    if not content_type:
        return None
    mime_type = content_type.split(";", 1)[0].strip().lower()
    if not mime_type.startswith("image/"):
        return None
    return mime_type


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[4:12] in {b"ftypheic", b"ftypheix", b"ftypmif1"}:
        return "image/heic"
    return "image/jpeg"
