"""Domain models for weekly reports."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class WeeklyReport:
    """Seven-day overview of a user's logs."""

    bmi: float
    average_water_ml: float
    average_calories: float
    daily_exercise_minutes: list[float]


@dataclass(frozen=True)
class TodayFoodSummary:
    """Food totals for the current local day."""

    day: date
    entry_count: int
    calories: float
    carbs_g: float
    protein_g: float
    fat_g: float
    sugar_g: float
    sodium_mg: float
    cholesterol_mg: float
    fiber_g: float
