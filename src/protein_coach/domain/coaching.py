"""Domain models for meal coaching."""

from dataclasses import dataclass
from enum import StrEnum


class CoachingScenario(StrEnum):
    """Classification bucket that drives which coaching is shown."""

    UNKNOWN_MEAL = "UNKNOWN_MEAL"
    LOW_PROTEIN_BREAKFAST = "LOW_PROTEIN_BREAKFAST"
    LOW_PROTEIN_LUNCH = "LOW_PROTEIN_LUNCH"
    LOW_PROTEIN_DINNER = "LOW_PROTEIN_DINNER"
    LOW_PROTEIN_SNACK = "LOW_PROTEIN_SNACK"
    MEDIUM_PROTEIN = "MEDIUM_PROTEIN"
    HIGH_PROTEIN = "HIGH_PROTEIN"


class CoachingFocus(StrEnum):
    """What the coaching is steering towards."""

    PROTEIN = "protein"
    BALANCE = "balance"
    SNACK = "snack"
    PORTION = "portion"


@dataclass(frozen=True)
class CoachingText:
    """The three user-facing coaching lines."""

    five_min_fix: str
    next_time_tweak: str
    reason: str


@dataclass(frozen=True)
class Coaching:
    """Coaching attached to an analyzed meal."""

    scenario_id: CoachingScenario
    focus: CoachingFocus
    five_min_fix: str
    next_time_tweak: str
    reason: str
    from_model: bool = False
