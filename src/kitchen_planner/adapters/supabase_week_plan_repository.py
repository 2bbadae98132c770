"""Supabase repository for week plans."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from kitchen_planner.services.plans import WeekPlanRepository


@dataclass
class SupabaseWeekPlanRepository(WeekPlanRepository):
    """Supabase implementation storing one JSON payload per plan id."""

    client: Client
    table: str = "week_plans"

    def get_payload(self, plan_id: str) -> dict[str, object] | None:
        """Return the stored payload for a plan id."""
        response = (
            self.client.table(self.table)
            .select("payload")
            .eq("plan_id", plan_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        payload = response.data[0].get("payload")
        return payload if isinstance(payload, dict) else None

    def save_payload(self, plan_id: str, payload: dict[str, object]) -> None:
        """Create or replace the payload for a plan id."""
        self.client.table(self.table).upsert(
            {
                "plan_id": plan_id,
                "payload": payload,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="plan_id",
        ).execute()
