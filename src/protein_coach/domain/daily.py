"""Domain models for per-day protein totals."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class DailyTotalRow:
    """Stored running total for one session and date."""

    id: UUID
    session_id: str
    date: date
    protein_total: float
    protein_goal: float | None


@dataclass(frozen=True)
class DailySummary:
    """Running total for a day as reported to the client."""

    date: date
    protein_total: float
    protein_goal: float

    @property
    def remaining(self) -> float:
        """Grams left until the goal; negative once it is exceeded."""
        return self.protein_goal - self.protein_total
