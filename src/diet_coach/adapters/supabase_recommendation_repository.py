"""Supabase repository for generated recommendations."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diet_coach.adapters.supabase_query import execute, first_row
from diet_coach.domain.recommendations import (
    Recommendation,
    RecommendationItem,
    RecommendationReply,
)
from diet_coach.services.recommendations import RecommendationRepository

_COLUMNS = (
    "id, user_id, created_at, food_title, food_description, exercise_title, "
    "exercise_description, water_title, water_description"
)


@dataclass
class SupabaseRecommendationRepository(RecommendationRepository):
    """Supabase implementation for recommendations."""

    client: Client

    def create_recommendation(
        self, user_id: UUID, created_at: datetime, reply: RecommendationReply
    ) -> Recommendation:
        """Insert a recommendation row and return it."""
        response = execute(
            self.client.table("recommendations").insert(
                {
                    "user_id": str(user_id),
                    "created_at": created_at.isoformat(),
                    "food_title": reply.food.title,
                    "food_description": reply.food.description,
                    "exercise_title": reply.exercise.title,
                    "exercise_description": reply.exercise.description,
                    "water_title": reply.water.title,
                    "water_description": reply.water.description,
                }
            ),
            "recommendation insert",
        )
        row = first_row(response, "recommendation insert")
        return Recommendation(
            id=UUID(str(row["id"])),
            user_id=user_id,
            created_at=created_at,
            reply=reply,
        )

    def get_latest(self, user_id: UUID) -> Recommendation | None:
        """Return the newest recommendation for a user."""
        response = execute(
            self.client.table("recommendations")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(1),
            "latest recommendation query",
        )
        if not response.data:
            return None
        row = response.data[0]
        return Recommendation(
            id=UUID(str(row["id"])),
            user_id=UUID(str(row["user_id"])),
            created_at=datetime.fromisoformat(str(row["created_at"])),
            reply=RecommendationReply(
                food=_item(row, "food"),
                exercise=_item(row, "exercise"),
                water=_item(row, "water"),
            ),
        )


def _item(row: dict[str, object], prefix: str) -> RecommendationItem:
    return RecommendationItem(
        title=str(row.get(f"{prefix}_title") or ""),
        description=str(row.get(f"{prefix}_description") or ""),
    )
