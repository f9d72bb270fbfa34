"""Meal analysis pipeline."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from protein_coach.domain.coaching import Coaching
from protein_coach.domain.daily import DailySummary
from protein_coach.domain.estimate import MealEstimate
from protein_coach.domain.meals import (
    MealAnalysisRecord,
    MealSubmission,
    MealType,
    NewMeal,
)
from protein_coach.errors import BadRequest
from protein_coach.services.coaching import choose_coaching
from protein_coach.services.daily_totals import DailyTotalsService
from protein_coach.services.photos import PhotoStorage
from protein_coach.services.vision import FetchedImage, MealVisionService

_logger = logging.getLogger(__name__)

DEFAULT_SIGNED_URL_TTL_SECONDS = 60 * 10


class MealRepository(Protocol):
    """Persistence interface for meals and their analyses."""

    def create_meal(self, meal: NewMeal) -> UUID:
        """Create a meal row and return its id."""

    def create_analysis(self, record: MealAnalysisRecord) -> UUID:
        """Create the analysis row for a meal and return its id."""


class ImageFetcher(Protocol):
    """Interface for downloading a photo by URL."""

    async def fetch(self, url: str) -> FetchedImage:
        """Download the image and return its bytes and content type."""


@dataclass(frozen=True)
class MealAnalysisResult:
    """Outcome of analyzing one meal."""

    meal_id: UUID
    estimate: MealEstimate
    coaching: Coaching
    daily: DailySummary


def parse_submission(payload: Mapping[str, object]) -> MealSubmission:
    """Turn a loosely typed request body into a ``MealSubmission``."""
    session_id = _clean_str(payload.get("session_id"))
    raw_date = _clean_str(payload.get("date"))
    photo_path = _clean_str(payload.get("photo_path"))
    if not session_id or not raw_date or not photo_path:
        raise BadRequest("Missing session_id, date, or photo_path")

    try:
        day = date.fromisoformat(raw_date)
    except ValueError as exc:
        raise BadRequest(f"Invalid date, expected YYYY-MM-DD: {raw_date}") from exc

    return MealSubmission(
        session_id=session_id,
        date=day,
        photo_path=photo_path,
        meal_text=_clean_str(payload.get("meal_text")),
        meal_type=_parse_meal_type(payload.get("meal_type")),
    )


@dataclass
class MealAnalysisService:
    """Service that analyzes a meal photo and updates the daily total."""

    meal_repository: MealRepository
    photo_storage: PhotoStorage
    image_fetcher: ImageFetcher
    vision_service: MealVisionService
    daily_totals_service: DailyTotalsService
    signed_url_ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SECONDS

    async def analyze(self, submission: MealSubmission) -> MealAnalysisResult:
        """Run the full pipeline for one submission.

        The meal row is written before inference so a failed analysis still
        leaves the submission visible. Nothing is rolled back on failure.
        """
        signed_url = self.photo_storage.create_signed_url(
            submission.photo_path, self.signed_url_ttl_seconds
        )
        meal_id = self.meal_repository.create_meal(
            NewMeal(
                session_id=submission.session_id,
                date=submission.date,
                photo_url=signed_url,
                meal_text=submission.meal_text,
                meal_type=submission.meal_type,
            )
        )
        _logger.info(
            "Meal created: meal_id=%s session=%s date=%s",
            meal_id,
            submission.session_id,
            submission.date.isoformat(),
        )

        try:
            return await self._analyze_meal(meal_id, signed_url, submission)
        except Exception:
            _logger.warning("Meal %s left incomplete", meal_id)
            raise

    async def _analyze_meal(
        self, meal_id: UUID, signed_url: str, submission: MealSubmission
    ) -> MealAnalysisResult:
        image = await self.image_fetcher.fetch(signed_url)
        estimate = await self.vision_service.analyze(
            image,
            meal_text=submission.meal_text,
            meal_type=submission.meal_type,
        )
        coaching = choose_coaching(
            estimate,
            submission.meal_type,
            allow_model_coaching=self.vision_service.allows_model_coaching,
        )
        self.meal_repository.create_analysis(
            MealAnalysisRecord(
                meal_id=meal_id,
                protein_grams=estimate.protein_grams,
                confidence=estimate.confidence,
                notes=estimate.notes,
                meal_summary=estimate.meal_summary or None,
                fat_risk=estimate.fat_risk,
                fibre_risk=estimate.fibre_risk,
                carb_type=estimate.carb_type,
                five_min_fix=coaching.five_min_fix,
                next_time_tweak=coaching.next_time_tweak,
                coaching_reason=coaching.reason,
            )
        )
        daily = self.daily_totals_service.accumulate(
            submission.session_id, submission.date, estimate.protein_grams
        )
        return MealAnalysisResult(
            meal_id=meal_id, estimate=estimate, coaching=coaching, daily=daily
        )


def _clean_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def _parse_meal_type(value: object) -> MealType | None:
    cleaned = _clean_str(value)
    if cleaned is None:
        return None
    try:
        return MealType(cleaned.lower())
    except ValueError:
        _logger.info("Ignoring unknown meal_type=%s", cleaned)
        return None
