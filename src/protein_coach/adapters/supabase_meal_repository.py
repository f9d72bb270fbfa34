"""Supabase repository for meals and meal analyses."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from protein_coach.domain.meals import MealAnalysisRecord, NewMeal
from protein_coach.errors import PersistenceError
from protein_coach.services.meals import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal persistence."""

    client: Client

    def create_meal(self, meal: NewMeal) -> UUID:
        """Create a meal row and return its id."""
        try:
            response = (
                self.client.table("meals")
                .insert(
                    {
                        "session_id": meal.session_id,
                        "date": meal.date.isoformat(),
                        "meal_text": meal.meal_text,
                        "meal_type": meal.meal_type.value if meal.meal_type else None,
                        "photo_url": meal.photo_url,
                    }
                )
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(f"meals insert failed: {exc.message}") from exc
        if not response.data:
            raise PersistenceError("meals insert failed: no row returned")
        return UUID(response.data[0]["id"])

    def create_analysis(self, record: MealAnalysisRecord) -> UUID:
        """Create the meal analysis row and return its id."""
        try:
            response = (
                self.client.table("meal_analysis")
                .insert(
                    {
                        "meal_id": str(record.meal_id),
                        "protein_grams": record.protein_grams,
                        "confidence": record.confidence.value,
                        "notes": record.notes,
                        "meal_summary": record.meal_summary,
                        "fat_risk": record.fat_risk.value,
                        "fibre_risk": record.fibre_risk.value,
                        "carb_type": record.carb_type.value,
                        "five_min_fix": record.five_min_fix,
                        "next_time_tweak": record.next_time_tweak,
                        "coaching_reason": record.coaching_reason,
                    }
                )
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(
                f"meal_analysis insert failed: {exc.message}"
            ) from exc
        if not response.data:
            raise PersistenceError("meal_analysis insert failed: no row returned")
        return UUID(response.data[0]["id"])
