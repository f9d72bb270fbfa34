"""Meal logging API endpoints."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from fastapi import APIRouter, File, Form, Request, UploadFile

from protein_coach.api.models import (
    AnalyzeMealRequest,
    AnalyzeMealResponse,
    DailyOut,
    ErrorResponse,
    PhotoUploadResponse,
)
from protein_coach.errors import BadRequest
from protein_coach.services.meals import parse_submission

if TYPE_CHECKING:
    from protein_coach.containers import AppContainer

router = APIRouter(tags=["meals"])

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/meals/analyze",
    response_model=AnalyzeMealResponse,
    responses=_ERROR_RESPONSES,
)
@router.post(
    "/functions/v1/analyze_meal_protein_and_update_day",
    response_model=AnalyzeMealResponse,
    responses=_ERROR_RESPONSES,
    include_in_schema=False,
)
async def analyze_meal(
    payload: AnalyzeMealRequest, request: Request
) -> AnalyzeMealResponse:
    """Analyze a meal photo, store the result and update the daily total."""
    container: AppContainer = request.app.state.container
    submission = parse_submission(payload.model_dump())
    result = await container.meal_analysis_service.analyze(submission)
    return AnalyzeMealResponse.from_result(result)


@router.post(
    "/photos",
    response_model=PhotoUploadResponse,
    responses=_ERROR_RESPONSES,
)
async def upload_photo(
    request: Request,
    session_id: str | None = Form(default=None),
    file: UploadFile | None = File(default=None),
) -> PhotoUploadResponse:
    """Store a meal photo and return its bucket path."""
    container: AppContainer = request.app.state.container
    if file is None:
        raise BadRequest("No file provided")
    content = await file.read()
    path = container.photo_upload_service.upload(
        session_id=session_id,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
    )
    return PhotoUploadResponse(path=path)


@router.get(
    "/daily-totals/{session_id}/{day}",
    response_model=DailyOut,
    responses=_ERROR_RESPONSES,
)
async def get_daily_total(session_id: str, day: str, request: Request) -> DailyOut:
    """Return the running protein total for a session and date."""
    container: AppContainer = request.app.state.container
    try:
        parsed_day = date.fromisoformat(day)
    except ValueError as exc:
        raise BadRequest(f"Invalid date, expected YYYY-MM-DD: {day}") from exc
    summary = container.daily_totals_service.get_summary(session_id, parsed_day)
    return DailyOut.from_summary(summary)
