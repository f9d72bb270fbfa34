"""Per-session, per-date running protein totals."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from protein_coach.domain.daily import DailySummary, DailyTotalRow

_logger = logging.getLogger(__name__)

DEFAULT_PROTEIN_GOAL_G = 120


class DailyTotalsRepository(Protocol):
    """Persistence interface for daily totals."""

    def get_daily_total(self, session_id: str, day: date) -> DailyTotalRow | None:
        """Return the row for a session and date, if present."""

    def upsert_daily_total(
        self,
        session_id: str,
        day: date,
        protein_total: float,
        protein_goal: float,
    ) -> None:
        """Insert or update the row keyed on session and date."""

    def increment_daily_total(
        self,
        session_id: str,
        day: date,
        delta: float,
        default_goal: float,
    ) -> DailyTotalRow:
        """Atomically add ``delta`` to the row, creating it if absent."""


@dataclass
class DailyTotalsService:
    """Service that accumulates protein onto the running daily total.

    The default read-then-upsert path can lose an increment when two meals for
    the same session and date are analyzed concurrently. ``atomic`` switches to
    a single-statement increment in the database instead.
    """

    repository: DailyTotalsRepository
    default_goal: float = DEFAULT_PROTEIN_GOAL_G
    atomic: bool = False

    def accumulate(self, session_id: str, day: date, delta: float) -> DailySummary:
        """Add ``delta`` grams to the day's total and return the new summary."""
        if self.atomic:
            row = self.repository.increment_daily_total(
                session_id, day, delta, self.default_goal
            )
            return DailySummary(
                date=day,
                protein_total=row.protein_total,
                protein_goal=self._goal(row),
            )

        existing = self.repository.get_daily_total(session_id, day)
        current_total = existing.protein_total if existing else 0.0
        goal = self._goal(existing)
        new_total = current_total + delta
        self.repository.upsert_daily_total(session_id, day, new_total, goal)
        _logger.info(
            "Daily total updated: session=%s date=%s total=%s goal=%s",
            session_id,
            day.isoformat(),
            new_total,
            goal,
        )
        return DailySummary(date=day, protein_total=new_total, protein_goal=goal)

    def get_summary(self, session_id: str, day: date) -> DailySummary:
        """Return the day's total, or zero against the default goal."""
        existing = self.repository.get_daily_total(session_id, day)
        return DailySummary(
            date=day,
            protein_total=existing.protein_total if existing else 0.0,
            protein_goal=self._goal(existing),
        )

    def _goal(self, row: DailyTotalRow | None) -> float:
        if row is None or row.protein_goal is None:
            return self.default_goal
        return row.protein_goal
