"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from protein_coach.adapters.httpx_image_fetcher import HttpxImageFetcher
from protein_coach.adapters.openai_vision_client import OpenAIVisionClient
from protein_coach.adapters.supabase_daily_totals_repository import (
    SupabaseDailyTotalsRepository,
)
from protein_coach.adapters.supabase_meal_repository import SupabaseMealRepository
from protein_coach.adapters.supabase_photo_storage import SupabasePhotoStorage
from protein_coach.config import Settings
from protein_coach.services.daily_totals import DailyTotalsService
from protein_coach.services.meals import MealAnalysisService
from protein_coach.services.photos import PhotoUploadService
from protein_coach.services.vision import MealVisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_analysis_service: MealAnalysisService
    daily_totals_service: DailyTotalsService
    photo_upload_service: PhotoUploadService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    daily_totals_repository = SupabaseDailyTotalsRepository(supabase_client)
    photo_storage = SupabasePhotoStorage(
        supabase_client, bucket=resolved_settings.photo_bucket
    )
    image_fetcher = HttpxImageFetcher.create(
        timeout=resolved_settings.image_fetch_timeout_seconds
    )
    openai_client = OpenAIVisionClient.create(resolved_settings.openai_api_key)
    vision_service = MealVisionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.openai_temperature,
        profile=resolved_settings.analysis_profile,
    )
    daily_totals_service = DailyTotalsService(
        repository=daily_totals_repository,
        default_goal=resolved_settings.daily_protein_goal,
        atomic=resolved_settings.daily_totals_atomic,
    )
    meal_analysis_service = MealAnalysisService(
        meal_repository=meal_repository,
        photo_storage=photo_storage,
        image_fetcher=image_fetcher,
        vision_service=vision_service,
        daily_totals_service=daily_totals_service,
        signed_url_ttl_seconds=resolved_settings.signed_url_ttl_seconds,
    )
    photo_upload_service = PhotoUploadService(
        storage=photo_storage,
        max_bytes=resolved_settings.max_photo_bytes,
    )

    async def close_resources() -> None:
        await image_fetcher.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        meal_analysis_service=meal_analysis_service,
        daily_totals_service=daily_totals_service,
        photo_upload_service=photo_upload_service,
        close_resources=close_resources,
    )
