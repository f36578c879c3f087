"""Domain models for food, water and exercise logs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class LogKind(str, Enum):
    """Kinds of user-submitted log entries."""

    FOOD = "food"
    WATER = "water"
    EXERCISE = "exercise"


FOOD_NUTRIENT_FIELDS: tuple[str, ...] = (
    "calories",
    "fat_g",
    "saturated_fat_g",
    "unsaturated_fat_g",
    "trans_fat_g",
    "cholesterol_mg",
    "sodium_mg",
    "carbs_g",
    "protein_g",
    "sugar_g",
    "fiber_g",
)


@dataclass(frozen=True)
class FoodEntry:
    """A single logged food item."""

    user_id: UUID
    occurred_at: datetime
    name: str
    calories: float | None = None
    fat_g: float | None = None
    saturated_fat_g: float | None = None
    unsaturated_fat_g: float | None = None
    trans_fat_g: float | None = None
    cholesterol_mg: float | None = None
    sodium_mg: float | None = None
    carbs_g: float | None = None
    protein_g: float | None = None
    sugar_g: float | None = None
    fiber_g: float | None = None
    amount: float | None = None
    serving_type: str | None = None
    id: UUID | None = None

    kind = LogKind.FOOD


@dataclass(frozen=True)
class WaterEntry:
    """A single logged water intake."""

    user_id: UUID
    occurred_at: datetime
    volume_ml: float | None = None
    id: UUID | None = None

    kind = LogKind.WATER


@dataclass(frozen=True)
class ExerciseEntry:
    """A single logged exercise session."""

    user_id: UUID
    occurred_at: datetime
    name: str
    duration_minutes: float | None = None
    id: UUID | None = None

    kind = LogKind.EXERCISE


LogEntry = FoodEntry | WaterEntry | ExerciseEntry


@dataclass(frozen=True)
class DailySummary:
    """Same-day aggregation of entries of one kind."""

    kind: LogKind
    day: date
    entry_count: int
    totals: dict[str, float]
    breakdown: dict[str, float] = field(default_factory=dict)
