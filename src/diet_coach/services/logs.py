"""Food, water and exercise log service."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from diet_coach.domain.errors import InvalidLogEntry
from diet_coach.domain.logs import (
    FOOD_NUTRIENT_FIELDS,
    ExerciseEntry,
    FoodEntry,
    LogEntry,
    LogKind,
    WaterEntry,
)

MAX_PAGE_SIZE = 100


class LogRepository(Protocol):
    """Persistence interface for log entries."""

    def list_entries(
        self, kind: LogKind, user_id: UUID, start: datetime, end: datetime
    ) -> list[LogEntry]:
        """Return entries in ``[start, end]`` ordered by time ascending."""

    def list_recent(self, kind: LogKind, user_id: UUID, limit: int) -> list[LogEntry]:
        """Return the most recent entries, newest first."""

    def create_entry(self, entry: LogEntry) -> UUID:
        """Persist an entry and return its id."""


@dataclass
class LogService:
    """Validates and stores user log entries."""

    repository: LogRepository

    def add_food(self, entry: FoodEntry) -> FoodEntry:
        """Validate and store a food entry."""
        if not entry.name.strip():
            raise InvalidLogEntry("Food name is required")
        for name in FOOD_NUTRIENT_FIELDS:
            value = getattr(entry, name)
            if value is not None and value < 0:
                raise InvalidLogEntry(f"{name} must not be negative")
        if entry.amount is not None and entry.amount <= 0:
            raise InvalidLogEntry("amount must be a positive number")
        return self._store(entry)

    def add_water(self, entry: WaterEntry) -> WaterEntry:
        """Validate and store a water entry."""
        if entry.volume_ml is None or entry.volume_ml <= 0:
            raise InvalidLogEntry("volume_ml must be a positive number")
        return self._store(entry)

    def add_exercise(self, entry: ExerciseEntry) -> ExerciseEntry:
        """Validate and store an exercise entry."""
        if not entry.name.strip():
            raise InvalidLogEntry("Exercise name is required")
        if entry.duration_minutes is None or entry.duration_minutes <= 0:
            raise InvalidLogEntry("duration_minutes must be a positive number")
        return self._store(entry)

    def list_entries(
        self, kind: LogKind, user_id: UUID, limit: int = 20
    ) -> list[LogEntry]:
        """Return the newest entries of one kind."""
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise InvalidLogEntry(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        return self.repository.list_recent(kind, user_id, limit)

    def _store(self, entry):  # type: ignore[no-untyped-def]
        if entry.occurred_at.tzinfo is None:
            entry = replace(entry, occurred_at=entry.occurred_at.replace(tzinfo=UTC))
        if entry.occurred_at > datetime.now(tz=UTC):
            raise InvalidLogEntry("occurred_at must not be in the future")
        entry_id = self.repository.create_entry(entry)
        return replace(entry, id=entry_id)
