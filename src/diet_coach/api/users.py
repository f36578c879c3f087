"""User-facing endpoints for logs, recommendations, chat and reports."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from diet_coach.api.schemas import (
    ChatRequest,
    ChatTurnResponse,
    DeviceTokenRequest,
    ExerciseLogRequest,
    FoodLogRequest,
    LogEntryResponse,
    RecommendationResponse,
    TodayFoodSummaryResponse,
    WaterLogRequest,
    WeeklyReportResponse,
)
from diet_coach.config import is_valid_timezone
from diet_coach.domain.logs import ExerciseEntry, FoodEntry, LogKind, WaterEntry

if TYPE_CHECKING:
    from diet_coach.containers import AppContainer

router = APIRouter(prefix="/users/{user_id}", tags=["users"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/logs/food", status_code=status.HTTP_201_CREATED)
async def create_food_log(
    user_id: UUID, payload: FoodLogRequest, request: Request
) -> LogEntryResponse:
    """Store a food log entry."""
    fields = payload.model_dump(exclude={"occurred_at"})
    entry = FoodEntry(
        user_id=user_id, occurred_at=_occurred_at(payload.occurred_at), **fields
    )
    stored = _container(request).log_service.add_food(entry)
    return LogEntryResponse.from_entry(stored)


@router.post("/logs/water", status_code=status.HTTP_201_CREATED)
async def create_water_log(
    user_id: UUID, payload: WaterLogRequest, request: Request
) -> LogEntryResponse:
    """Store a water log entry."""
    entry = WaterEntry(
        user_id=user_id,
        occurred_at=_occurred_at(payload.occurred_at),
        volume_ml=payload.volume_ml,
    )
    stored = _container(request).log_service.add_water(entry)
    return LogEntryResponse.from_entry(stored)


@router.post("/logs/exercise", status_code=status.HTTP_201_CREATED)
async def create_exercise_log(
    user_id: UUID, payload: ExerciseLogRequest, request: Request
) -> LogEntryResponse:
    """Store an exercise log entry."""
    entry = ExerciseEntry(
        user_id=user_id,
        occurred_at=_occurred_at(payload.occurred_at),
        name=payload.name,
        duration_minutes=payload.duration_minutes,
    )
    stored = _container(request).log_service.add_exercise(entry)
    return LogEntryResponse.from_entry(stored)


@router.get("/logs/{kind}")
async def list_logs(
    user_id: UUID, kind: LogKind, request: Request, limit: int = 20
) -> dict[str, list[LogEntryResponse]]:
    """Return the newest entries of one kind."""
    entries = _container(request).log_service.list_entries(kind, user_id, limit)
    return {"entries": [LogEntryResponse.from_entry(entry) for entry in entries]}


@router.put("/device-token")
async def register_device_token(
    user_id: UUID, payload: DeviceTokenRequest, request: Request
) -> dict[str, str]:
    """Register or refresh the user's push token."""
    _container(request).device_service.register(user_id, payload.token)
    return {"status": "ok"}


@router.get("/recommendation")
async def current_recommendation(
    user_id: UUID, request: Request
) -> RecommendationResponse:
    """Return today's recommendation, generating one when stale."""
    service = _container(request).recommendation_service
    record = await service.get_current(user_id)
    return RecommendationResponse.from_record(record)


@router.post("/recommendation", status_code=status.HTTP_201_CREATED)
async def generate_recommendation(
    user_id: UUID, request: Request
) -> RecommendationResponse:
    """Generate a new recommendation now."""
    service = _container(request).recommendation_service
    record = await service.generate_for_user(user_id)
    return RecommendationResponse.from_record(record)


@router.get("/chat")
async def chat_history(
    user_id: UUID, request: Request
) -> dict[str, list[ChatTurnResponse]]:
    """Return the recent chat conversation."""
    turns = await _container(request).chat_service.history(user_id)
    return {"turns": [ChatTurnResponse.from_turn(turn) for turn in turns]}


@router.post("/chat")
async def send_chat(
    user_id: UUID, payload: ChatRequest, request: Request
) -> ChatTurnResponse:
    """Send a chatbot message and return the reply."""
    turn = await _container(request).chat_service.send(user_id, payload.message)
    return ChatTurnResponse.from_turn(turn)


@router.get("/report")
async def weekly_report(
    user_id: UUID, request: Request, timezone: str = "UTC"
) -> WeeklyReportResponse:
    """Return the weekly report in the caller's timezone."""
    _check_timezone(timezone)
    report = await _container(request).report_service.weekly(user_id, timezone)
    return WeeklyReportResponse.from_report(report)


@router.get("/summary/today")
async def today_food_summary(
    user_id: UUID, request: Request, timezone: str = "UTC"
) -> TodayFoodSummaryResponse:
    """Return today's food totals in the caller's timezone."""
    _check_timezone(timezone)
    service = _container(request).report_service
    summary = await service.today_food_summary(user_id, timezone)
    return TodayFoodSummaryResponse.from_summary(summary)


def _check_timezone(value: str) -> None:
    if not is_valid_timezone(value):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {value}",
        )


def _occurred_at(value: datetime | None) -> datetime:
    return value or datetime.now(tz=UTC)
