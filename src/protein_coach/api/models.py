"""Pydantic models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel

from protein_coach.domain.daily import DailySummary
from protein_coach.services.meals import MealAnalysisResult


class AnalyzeMealRequest(BaseModel):
    """Analyze-meal request body; required fields are checked downstream."""

    session_id: str | None = None
    date: str | None = None
    meal_text: str | None = None
    meal_type: str | None = None
    photo_path: str | None = None


class EstimateOut(BaseModel):
    """Protein estimate shown to the user."""

    protein_grams: int
    confidence: Literal["low", "medium", "high"]
    notes: str


class CoachingOut(BaseModel):
    """Coaching shown to the user."""

    scenario_id: str
    focus: str
    five_min_fix: str
    next_time_tweak: str
    reason: str


class DailyOut(BaseModel):
    """Running daily total."""

    date: str
    protein_total: float
    protein_goal: float
    remaining: float

    @classmethod
    def from_summary(cls, summary: DailySummary) -> "DailyOut":
        """Build the payload from a daily summary."""
        return cls(
            date=summary.date.isoformat(),
            protein_total=summary.protein_total,
            protein_goal=summary.protein_goal,
            remaining=summary.remaining,
        )


class AnalyzeMealResponse(BaseModel):
    """Successful analyze-meal response."""

    success: bool = True
    meal_id: str
    estimate: EstimateOut
    coaching: CoachingOut
    daily: DailyOut

    @classmethod
    def from_result(cls, result: MealAnalysisResult) -> "AnalyzeMealResponse":
        """Build the payload from a pipeline result."""
        estimate = result.estimate
        coaching = result.coaching
        return cls(
            meal_id=str(result.meal_id),
            estimate=EstimateOut(
                protein_grams=estimate.protein_grams,
                confidence=estimate.confidence.value,
                notes=estimate.notes,
            ),
            coaching=CoachingOut(
                scenario_id=coaching.scenario_id.value,
                focus=coaching.focus.value,
                five_min_fix=coaching.five_min_fix,
                next_time_tweak=coaching.next_time_tweak,
                reason=coaching.reason,
            ),
            daily=DailyOut.from_summary(result.daily),
        )


class PhotoUploadResponse(BaseModel):
    """Location of an uploaded photo inside the bucket."""

    path: str


class ErrorResponse(BaseModel):
    """Error payload for every failed request."""

    error: str
