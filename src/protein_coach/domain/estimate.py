"""Validated model output for a single meal photo.

The inference service returns free-form text that is only loosely shaped like
the requested JSON. These models are the narrowing boundary: every field is
coerced into its permitted domain, except the protein estimate which must be
trustworthy or the whole response is rejected.
"""

import math
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from protein_coach.domain.meals import CarbType, Confidence, MacroRisk

MIN_PROTEIN_GRAMS = 0
MAX_PROTEIN_GRAMS = 500

NOTES_MAX_CHARS = 300
SUMMARY_MAX_CHARS = 140
COACHING_MAX_CHARS = 220

ELLIPSIS = "…"


def clamp_text(value: object, max_chars: int) -> str:
    """Collapse whitespace and truncate to ``max_chars`` with an ellipsis."""
    if value is None:
        return ""
    text = " ".join(str(value).split())
    if len(text) > max_chars:
        return text[: max_chars - 1].rstrip() + ELLIPSIS
    return text


def to_finite_number(value: object) -> float | None:
    """Return ``value`` as a finite float, or None if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


class CoachingDraft(BaseModel):
    """Coaching text as proposed by the model."""

    five_min_fix: str = ""
    next_time_tweak: str = ""
    reason: str = ""

    @field_validator("five_min_fix", "next_time_tweak", "reason", mode="before")
    @classmethod
    def _clamp(cls, value: object) -> str:
        return clamp_text(value, COACHING_MAX_CHARS)


class MealEstimate(BaseModel):
    """Protein estimate, steering flags and coaching draft for one meal."""

    protein_grams: int
    confidence: Confidence = Confidence.MEDIUM
    notes: str = ""
    fat_risk: MacroRisk = MacroRisk.MEDIUM
    fibre_risk: MacroRisk = MacroRisk.MEDIUM
    carb_type: CarbType = CarbType.MIXED
    meal_summary: str = ""
    coaching: CoachingDraft = Field(default_factory=CoachingDraft)

    @field_validator("protein_grams", mode="before")
    @classmethod
    def _check_protein(cls, value: object) -> int:
        grams = to_finite_number(value)
        if grams is None or not MIN_PROTEIN_GRAMS <= grams <= MAX_PROTEIN_GRAMS:
            raise ValueError(f"protein_grams out of range: {value!r}")
        return round_half_up(grams)

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: object) -> Confidence:
        return _coerce_enum(Confidence, value, Confidence.MEDIUM)

    @field_validator("fat_risk", "fibre_risk", mode="before")
    @classmethod
    def _coerce_risk(cls, value: object) -> MacroRisk:
        return _coerce_enum(MacroRisk, value, MacroRisk.MEDIUM)

    @field_validator("carb_type", mode="before")
    @classmethod
    def _coerce_carb_type(cls, value: object) -> CarbType:
        return _coerce_enum(CarbType, value, CarbType.MIXED)

    @field_validator("notes", mode="before")
    @classmethod
    def _clamp_notes(cls, value: object) -> str:
        return clamp_text(value, NOTES_MAX_CHARS)

    @field_validator("meal_summary", mode="before")
    @classmethod
    def _clamp_summary(cls, value: object) -> str:
        return clamp_text(value, SUMMARY_MAX_CHARS)

    @field_validator("coaching", mode="before")
    @classmethod
    def _coerce_coaching(cls, value: object) -> object:
        return value if isinstance(value, dict) else {}


def _coerce_enum(
    enum_cls: type[StrEnum], value: object, default: StrEnum
) -> StrEnum:
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            return default
    return default
