"""Supabase repository for food, water and exercise logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diet_coach.adapters.supabase_query import execute, first_row
from diet_coach.domain.logs import (
    FOOD_NUTRIENT_FIELDS,
    ExerciseEntry,
    FoodEntry,
    LogEntry,
    LogKind,
    WaterEntry,
)
from diet_coach.services.logs import LogRepository

_TABLES = {
    LogKind.FOOD: "food_logs",
    LogKind.WATER: "water_logs",
    LogKind.EXERCISE: "exercise_logs",
}

_COLUMNS = {
    LogKind.FOOD: ", ".join(
        [
            "id",
            "user_id",
            "occurred_at",
            "name",
            *FOOD_NUTRIENT_FIELDS,
            "amount",
            "serving_type",
        ]
    ),
    LogKind.WATER: "id, user_id, occurred_at, volume_ml",
    LogKind.EXERCISE: "id, user_id, occurred_at, name, duration_minutes",
}


@dataclass
class SupabaseLogRepository(LogRepository):
    """Supabase implementation for log entries."""

    client: Client

    def list_entries(
        self, kind: LogKind, user_id: UUID, start: datetime, end: datetime
    ) -> list[LogEntry]:
        """Return entries in the time range, oldest first."""
        response = execute(
            self.client.table(_TABLES[kind])
            .select(_COLUMNS[kind])
            .eq("user_id", str(user_id))
            .gte("occurred_at", start.isoformat())
            .lte("occurred_at", end.isoformat())
            .order("occurred_at", desc=False),
            f"{kind.value} log window query",
        )
        return [_parse_row(kind, row) for row in response.data or []]

    def list_recent(self, kind: LogKind, user_id: UUID, limit: int) -> list[LogEntry]:
        """Return the most recent entries for a user."""
        response = execute(
            self.client.table(_TABLES[kind])
            .select(_COLUMNS[kind])
            .eq("user_id", str(user_id))
            .order("occurred_at", desc=True)
            .limit(limit),
            f"recent {kind.value} log query",
        )
        return [_parse_row(kind, row) for row in response.data or []]

    def create_entry(self, entry: LogEntry) -> UUID:
        """Insert an entry row and return its id."""
        payload: dict[str, object] = {
            "user_id": str(entry.user_id),
            "occurred_at": entry.occurred_at.isoformat(),
        }
        if isinstance(entry, FoodEntry):
            payload["name"] = entry.name
            for name in FOOD_NUTRIENT_FIELDS:
                payload[name] = getattr(entry, name)
            payload["amount"] = entry.amount
            payload["serving_type"] = entry.serving_type
        elif isinstance(entry, WaterEntry):
            payload["volume_ml"] = entry.volume_ml
        else:
            payload["name"] = entry.name
            payload["duration_minutes"] = entry.duration_minutes
        action = f"{entry.kind.value} log insert"
        response = execute(
            self.client.table(_TABLES[entry.kind]).insert(payload), action
        )
        return UUID(str(first_row(response, action)["id"]))


def _parse_row(kind: LogKind, row: dict[str, object]) -> LogEntry:
    common = {
        "id": UUID(str(row["id"])) if row.get("id") else None,
        "user_id": UUID(str(row["user_id"])),
        "occurred_at": datetime.fromisoformat(str(row["occurred_at"])),
    }
    if kind is LogKind.FOOD:
        nutrients = {
            name: _optional_float(row.get(name)) for name in FOOD_NUTRIENT_FIELDS
        }
        return FoodEntry(
            name=str(row.get("name") or ""),
            amount=_optional_float(row.get("amount")),
            serving_type=row.get("serving_type"),
            **nutrients,
            **common,
        )
    if kind is LogKind.WATER:
        return WaterEntry(volume_ml=_optional_float(row.get("volume_ml")), **common)
    return ExerciseEntry(
        name=str(row.get("name") or ""),
        duration_minutes=_optional_float(row.get("duration_minutes")),
        **common,
    )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
