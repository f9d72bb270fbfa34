"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID, uuid4

import pytest

from protein_coach.config import Settings
from protein_coach.containers import AppContainer
from protein_coach.domain.daily import DailyTotalRow
from protein_coach.domain.meals import MealAnalysisRecord, NewMeal
from protein_coach.errors import InferenceError, PersistenceError, StorageError
from protein_coach.services.daily_totals import (
    DailyTotalsRepository,
    DailyTotalsService,
)
from protein_coach.services.meals import (
    ImageFetcher,
    MealAnalysisService,
    MealRepository,
)
from protein_coach.services.photos import PhotoStorage, PhotoUploadService
from protein_coach.services.vision import (
    FetchedImage,
    MealVisionService,
    VisionClient,
)

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


def model_output(**overrides: object) -> dict[str, object]:
    """Return a well-formed coached model response with overrides applied."""
    payload: dict[str, object] = {
        "protein_grams": 32.4,
        "confidence": "high",
        "notes": "Two eggs on toast with a side of yoghurt.",
        "fat_risk": "low",
        "fibre_risk": "high",
        "carb_type": "refined_heavy",
        "meal_summary": "Eggs (2) on white toast, Greek yoghurt",
        "coaching": {
            "five_min_fix": "Add a handful of cherry tomatoes from the fridge.",
            "next_time_tweak": "Next time, swap the white toast for a seeded loaf.",
            "reason": "The eggs carry the meal; the toast is doing little.",
        },
    }
    payload.update(overrides)
    return payload


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, NewMeal] = field(default_factory=dict)
    analyses: dict[UUID, MealAnalysisRecord] = field(default_factory=dict)
    fail_meal_insert: bool = False
    fail_analysis_insert: bool = False

    def create_meal(self, meal: NewMeal) -> UUID:
        if self.fail_meal_insert:
            raise PersistenceError("meals insert failed: boom")
        meal_id = uuid4()
        self.meals[meal_id] = meal
        return meal_id

    def create_analysis(self, record: MealAnalysisRecord) -> UUID:
        if self.fail_analysis_insert:
            raise PersistenceError("meal_analysis insert failed: boom")
        if record.meal_id not in self.meals:
            raise PersistenceError("meal_analysis insert failed: unknown meal")
        analysis_id = uuid4()
        self.analyses[analysis_id] = record
        return analysis_id


@dataclass
class InMemoryDailyTotalsRepository(DailyTotalsRepository):
    """In-memory daily totals repository keyed on session and date."""

    rows: dict[tuple[str, date], DailyTotalRow] = field(default_factory=dict)
    upserts: int = 0
    increments: int = 0

    def get_daily_total(self, session_id: str, day: date) -> DailyTotalRow | None:
        return self.rows.get((session_id, day))

    def upsert_daily_total(
        self,
        session_id: str,
        day: date,
        protein_total: float,
        protein_goal: float,
    ) -> None:
        self.upserts += 1
        existing = self.rows.get((session_id, day))
        self.rows[(session_id, day)] = DailyTotalRow(
            id=existing.id if existing else uuid4(),
            session_id=session_id,
            date=day,
            protein_total=protein_total,
            protein_goal=protein_goal,
        )

    def increment_daily_total(
        self,
        session_id: str,
        day: date,
        delta: float,
        default_goal: float,
    ) -> DailyTotalRow:
        self.increments += 1
        existing = self.rows.get((session_id, day))
        row = DailyTotalRow(
            id=existing.id if existing else uuid4(),
            session_id=session_id,
            date=day,
            protein_total=(existing.protein_total if existing else 0.0) + delta,
            protein_goal=(
                existing.protein_goal
                if existing and existing.protein_goal is not None
                else default_goal
            ),
        )
        self.rows[(session_id, day)] = row
        return row


@dataclass
class FakePhotoStorage(PhotoStorage):
    """Photo storage that hands out fake signed URLs and records uploads."""

    uploads: dict[str, tuple[bytes, str]] = field(default_factory=dict)
    signed: list[tuple[str, int]] = field(default_factory=list)
    fail_signing: bool = False

    def create_signed_url(self, path: str, expires_in: int) -> str:
        if self.fail_signing:
            raise StorageError("createSignedUrl failed: object not found")
        self.signed.append((path, expires_in))
        return f"https://storage.test/sign/meal_photos/{path}?token=abc"

    def upload(self, path: str, content: bytes, content_type: str) -> None:
        if path in self.uploads:
            raise StorageError("upload failed: duplicate")
        self.uploads[path] = (content, content_type)


@dataclass
class FakeImageFetcher(ImageFetcher):
    """Image fetcher that returns static bytes."""

    content: bytes = JPEG_BYTES
    content_type: str | None = "image/jpeg"
    urls: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> FetchedImage:
        self.urls.append(url)
        return FetchedImage(content=self.content, content_type=self.content_type)


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed payload."""

    payload: dict[str, object] | str = field(default_factory=model_output)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        instruction: str,
        hint: str,
        image_data_url: str,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "temperature": temperature,
                "instruction": instruction,
                "hint": hint,
                "image_data_url": image_data_url,
            }
        )
        if self.error is not None:
            raise self.error
        if isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.payload)


def failing_vision_client() -> FakeVisionClient:
    """Vision client that fails like an upstream 5xx."""
    return FakeVisionClient(error=InferenceError("OpenAI error 503: unavailable"))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZSJ9.c2ln",
        openai_api_key="openai-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def daily_totals_repository() -> InMemoryDailyTotalsRepository:
    return InMemoryDailyTotalsRepository()


@pytest.fixture
def photo_storage() -> FakePhotoStorage:
    return FakePhotoStorage()


@pytest.fixture
def image_fetcher() -> FakeImageFetcher:
    return FakeImageFetcher()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def meal_analysis_service(
    settings: Settings,
    meal_repository: InMemoryMealRepository,
    daily_totals_repository: InMemoryDailyTotalsRepository,
    photo_storage: FakePhotoStorage,
    image_fetcher: FakeImageFetcher,
    vision_client: FakeVisionClient,
) -> MealAnalysisService:
    return MealAnalysisService(
        meal_repository=meal_repository,
        photo_storage=photo_storage,
        image_fetcher=image_fetcher,
        vision_service=MealVisionService(
            client=vision_client,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
        ),
        daily_totals_service=DailyTotalsService(
            repository=daily_totals_repository,
            default_goal=settings.daily_protein_goal,
        ),
        signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
    )


@pytest.fixture
def container(
    settings: Settings,
    meal_analysis_service: MealAnalysisService,
    photo_storage: FakePhotoStorage,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_analysis_service=meal_analysis_service,
        daily_totals_service=meal_analysis_service.daily_totals_service,
        photo_upload_service=PhotoUploadService(
            storage=photo_storage, max_bytes=settings.max_photo_bytes
        ),
        close_resources=close_resources,
    )
