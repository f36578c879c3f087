"""Pydantic models for HTTP request and response bodies."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from diet_coach.domain.chat import ChatTurn
from diet_coach.domain.dispatch import BatchOutcome
from diet_coach.domain.logs import ExerciseEntry, FoodEntry, WaterEntry
from diet_coach.domain.recommendations import Recommendation, RecommendationItem
from diet_coach.domain.reports import TodayFoodSummary, WeeklyReport


class FoodLogRequest(BaseModel):
    """Payload for a new food log."""

    name: str = Field(min_length=1)
    occurred_at: datetime | None = None
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


class WaterLogRequest(BaseModel):
    """Payload for a new water log."""

    volume_ml: float
    occurred_at: datetime | None = None


class ExerciseLogRequest(BaseModel):
    """Payload for a new exercise log."""

    name: str = Field(min_length=1)
    duration_minutes: float
    occurred_at: datetime | None = None


class LogEntryResponse(BaseModel):
    """A stored log entry of any kind."""

    id: UUID | None
    kind: str
    occurred_at: datetime
    name: str | None = None
    calories: float | None = None
    volume_ml: float | None = None
    duration_minutes: float | None = None

    @classmethod
    def from_entry(
        cls, entry: FoodEntry | WaterEntry | ExerciseEntry
    ) -> "LogEntryResponse":
        return cls(
            id=entry.id,
            kind=entry.kind.value,
            occurred_at=entry.occurred_at,
            name=getattr(entry, "name", None),
            calories=getattr(entry, "calories", None),
            volume_ml=getattr(entry, "volume_ml", None),
            duration_minutes=getattr(entry, "duration_minutes", None),
        )


class DeviceTokenRequest(BaseModel):
    """Payload registering a push token."""

    token: str


class RecommendationResponse(BaseModel):
    """A recommendation as returned to clients."""

    id: UUID
    created_at: datetime
    food: RecommendationItem
    exercise: RecommendationItem
    water: RecommendationItem

    @classmethod
    def from_record(cls, record: Recommendation) -> "RecommendationResponse":
        return cls(
            id=record.id,
            created_at=record.created_at,
            food=record.reply.food,
            exercise=record.reply.exercise,
            water=record.reply.water,
        )


class ChatRequest(BaseModel):
    """Payload for a chatbot message."""

    message: str


class ChatTurnResponse(BaseModel):
    """A chat turn as returned to clients."""

    message: str
    reply: str
    replied_at: datetime

    @classmethod
    def from_turn(cls, turn: ChatTurn) -> "ChatTurnResponse":
        return cls(message=turn.message, reply=turn.reply, replied_at=turn.replied_at)


class WeeklyReportResponse(BaseModel):
    """Weekly report body."""

    bmi: float
    average_water_ml: float
    average_calories: float
    daily_exercise_minutes: list[float]

    @classmethod
    def from_report(cls, report: WeeklyReport) -> "WeeklyReportResponse":
        return cls(
            bmi=report.bmi,
            average_water_ml=report.average_water_ml,
            average_calories=report.average_calories,
            daily_exercise_minutes=report.daily_exercise_minutes,
        )


class BatchOutcomeResponse(BaseModel):
    """Aggregate counts of a batch job run."""

    total: int
    succeeded: int
    failed: int
    failures: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_outcome(cls, outcome: BatchOutcome) -> "BatchOutcomeResponse":
        return cls(
            total=outcome.total,
            succeeded=outcome.succeeded,
            failed=outcome.failed,
            failures={
                str(user_id): reason
                for user_id, reason in outcome.failure_reasons.items()
            },
        )


class TodayFoodSummaryResponse(BaseModel):
    """Food totals for the caller's current day."""

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

    @classmethod
    def from_summary(cls, summary: TodayFoodSummary) -> "TodayFoodSummaryResponse":
        return cls(
            day=summary.day,
            entry_count=summary.entry_count,
            calories=summary.calories,
            carbs_g=summary.carbs_g,
            protein_g=summary.protein_g,
            fat_g=summary.fat_g,
            sugar_g=summary.sugar_g,
            sodium_mg=summary.sodium_mg,
            cholesterol_mg=summary.cholesterol_mg,
            fiber_g=summary.fiber_g,
        )
