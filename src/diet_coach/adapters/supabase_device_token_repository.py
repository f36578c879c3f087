"""Supabase repository for push device tokens."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diet_coach.adapters.supabase_query import execute
from diet_coach.domain.dispatch import DispatchTarget
from diet_coach.services.devices import DeviceTokenRepository


@dataclass
class SupabaseDeviceTokenRepository(DeviceTokenRepository):
    """Supabase implementation for device tokens."""

    client: Client

    def upsert_token(self, user_id: UUID, token: str, updated_at: datetime) -> None:
        """Create or refresh the token row for a user."""
        execute(
            self.client.table("device_tokens").upsert(
                {
                    "user_id": str(user_id),
                    "token": token,
                    "updated_at": updated_at.isoformat(),
                },
                on_conflict="user_id",
            ),
            "device token upsert",
        )

    def list_active(
        self, since: datetime, limit: int | None
    ) -> list[DispatchTarget]:
        """Return tokens updated after ``since``, most recent first."""
        query = (
            self.client.table("device_tokens")
            .select("user_id, token")
            .gt("updated_at", since.isoformat())
            .order("updated_at", desc=True)
        )
        if limit is not None:
            query = query.limit(limit)
        response = execute(query, "active device token query")
        return [
            DispatchTarget(user_id=UUID(str(row["user_id"])), token=str(row["token"]))
            for row in response.data or []
            if row.get("token")
        ]
