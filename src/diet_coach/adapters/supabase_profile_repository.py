"""Supabase repository for profiles and weight targets."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_coach.adapters.supabase_query import execute
from diet_coach.domain.profiles import UserProfile, UserTarget
from diet_coach.services.history import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile lookups."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile row, if present."""
        response = execute(
            self.client.table("profiles")
            .select(
                "user_id, first_name, last_name, weight_kg, height_cm, gender, "
                "activity_level, medical_notes"
            )
            .eq("user_id", str(user_id))
            .limit(1),
            "profile query",
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProfile(
            user_id=UUID(str(row["user_id"])),
            first_name=row.get("first_name"),
            last_name=row.get("last_name"),
            weight_kg=_optional_float(row.get("weight_kg")),
            height_cm=_optional_float(row.get("height_cm")),
            gender=row.get("gender"),
            activity_level=row.get("activity_level"),
            medical_notes=row.get("medical_notes"),
        )

    def get_target(self, user_id: UUID) -> UserTarget | None:
        """Return the user's weight target, if present."""
        response = execute(
            self.client.table("user_targets")
            .select("user_id, target_weight_kg, duration_weeks")
            .eq("user_id", str(user_id))
            .limit(1),
            "target query",
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserTarget(
            user_id=UUID(str(row["user_id"])),
            target_weight_kg=_optional_float(row.get("target_weight_kg")),
            duration_weeks=_optional_float(row.get("duration_weeks")),
        )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
