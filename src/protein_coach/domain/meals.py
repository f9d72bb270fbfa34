"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from uuid import UUID


class MealType(StrEnum):
    """Meal slot the user tagged the photo with."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class Confidence(StrEnum):
    """Coarse reliability tier attached to a protein estimate."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MacroRisk(StrEnum):
    """Silent steering level for fat and fibre."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CarbType(StrEnum):
    """Silent steering flag for carbohydrate quality."""

    LOW = "low"
    MIXED = "mixed"
    REFINED_HEAVY = "refined_heavy"


@dataclass(frozen=True)
class MealSubmission:
    """Validated inbound request to analyze one meal photo."""

    session_id: str
    date: date
    photo_path: str
    meal_text: str | None = None
    meal_type: MealType | None = None


@dataclass(frozen=True)
class NewMeal:
    """Meal row values written before inference runs."""

    session_id: str
    date: date
    photo_url: str
    meal_text: str | None
    meal_type: MealType | None


@dataclass(frozen=True)
class MealAnalysisRecord:
    """Meal analysis row values, written once per meal."""

    meal_id: UUID
    protein_grams: int
    confidence: Confidence
    notes: str
    meal_summary: str | None
    fat_risk: MacroRisk
    fibre_risk: MacroRisk
    carb_type: CarbType
    five_min_fix: str
    next_time_tweak: str
    coaching_reason: str
