"""Domain models for user profiles and targets."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserProfile:
    """Physical attributes supplied by the user."""

    user_id: UUID
    first_name: str | None
    last_name: str | None
    weight_kg: float | None
    height_cm: float | None
    gender: str | None
    activity_level: str | None
    medical_notes: str | None

    @property
    def bmi(self) -> float | None:
        """Body mass index, when weight and height are known."""
        if not self.weight_kg or not self.height_cm:
            return None
        height_m = self.height_cm / 100
        return self.weight_kg / (height_m * height_m)


@dataclass(frozen=True)
class UserTarget:
    """Weight goal and the period to reach it."""

    user_id: UUID
    target_weight_kg: float | None
    duration_weeks: float | None
