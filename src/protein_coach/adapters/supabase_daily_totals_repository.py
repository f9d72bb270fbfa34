"""Supabase repository for daily protein totals."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from protein_coach.domain.daily import DailyTotalRow
from protein_coach.errors import PersistenceError
from protein_coach.services.daily_totals import DailyTotalsRepository


@dataclass
class SupabaseDailyTotalsRepository(DailyTotalsRepository):
    """Supabase implementation for daily totals."""

    client: Client

    def get_daily_total(self, session_id: str, day: date) -> DailyTotalRow | None:
        """Return the daily total row, if present."""
        try:
            response = (
                self.client.table("daily_totals")
                .select("id, session_id, date, protein_total, protein_goal")
                .eq("session_id", session_id)
                .eq("date", day.isoformat())
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise PersistenceError(
                f"daily_totals select failed: {exc.message}"
            ) from exc
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def upsert_daily_total(
        self,
        session_id: str,
        day: date,
        protein_total: float,
        protein_goal: float,
    ) -> None:
        """Insert or update the row for a session and date."""
        try:
            self.client.table("daily_totals").upsert(
                {
                    "session_id": session_id,
                    "date": day.isoformat(),
                    "protein_total": protein_total,
                    "protein_goal": protein_goal,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="session_id,date",
            ).execute()
        except APIError as exc:
            raise PersistenceError(
                f"daily_totals upsert failed: {exc.message}"
            ) from exc

    def increment_daily_total(
        self,
        session_id: str,
        day: date,
        delta: float,
        default_goal: float,
    ) -> DailyTotalRow:
        """Add to the total in a single statement via a database function."""
        try:
            response = self.client.rpc(
                "increment_daily_protein",
                {
                    "p_session_id": session_id,
                    "p_date": day.isoformat(),
                    "p_delta": delta,
                    "p_default_goal": default_goal,
                },
            ).execute()
        except APIError as exc:
            raise PersistenceError(
                f"daily_totals increment failed: {exc.message}"
            ) from exc
        data = response.data
        row = data[0] if isinstance(data, list) and data else data
        if not isinstance(row, dict):
            raise PersistenceError("daily_totals increment failed: no row returned")
        return _parse_row(row)


def _parse_row(row: dict[str, object]) -> DailyTotalRow:
    return DailyTotalRow(
        id=UUID(str(row["id"])),
        session_id=str(row.get("session_id", "")),
        date=date.fromisoformat(str(row["date"])),
        protein_total=float(row.get("protein_total") or 0.0),
        protein_goal=_to_float_or_none(row.get("protein_goal")),
    )


def _to_float_or_none(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
