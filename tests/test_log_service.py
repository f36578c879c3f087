"""Tests for log entry validation and storage."""

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from diet_coach.domain.errors import InvalidLogEntry
from diet_coach.domain.logs import ExerciseEntry, LogEntry, LogKind
from diet_coach.services.logs import LogService
from tests.conftest import NOW, InMemoryLogRepository, exercise, food, water


def test_add_food_assigns_an_id(log_repository: InMemoryLogRepository) -> None:
    service = LogService(log_repository)

    stored = service.add_food(food(uuid4(), NOW, 450.0, protein_g=30.0))

    assert stored.id is not None
    assert log_repository.entries == [stored]


def test_naive_timestamps_are_stored_as_utc(
    log_repository: InMemoryLogRepository,
) -> None:
    service = LogService(log_repository)

    stored = service.add_water(water(uuid4(), datetime(2025, 3, 1, 8, 0), 250.0))

    assert stored.occurred_at == datetime(2025, 3, 1, 8, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "entry",
    [
        food(uuid4(), NOW, -5.0),
        replace(food(uuid4(), NOW, 100.0), name="   "),
        replace(food(uuid4(), NOW, 100.0), amount=0.0),
        water(uuid4(), NOW, 0.0),
        exercise(uuid4(), NOW, 0.0),
        exercise(uuid4(), NOW, 20.0, name=""),
    ],
)
def test_invalid_entries_are_rejected(
    log_repository: InMemoryLogRepository, entry: LogEntry
) -> None:
    service = LogService(log_repository)
    add = {
        LogKind.FOOD: service.add_food,
        LogKind.WATER: service.add_water,
        LogKind.EXERCISE: service.add_exercise,
    }[entry.kind]

    with pytest.raises(InvalidLogEntry):
        add(entry)

    assert log_repository.entries == []


def test_future_entries_are_rejected(log_repository: InMemoryLogRepository) -> None:
    service = LogService(log_repository)
    future = datetime.now(tz=UTC) + timedelta(hours=2)

    with pytest.raises(InvalidLogEntry, match="future"):
        service.add_exercise(
            ExerciseEntry(
                user_id=uuid4(), occurred_at=future, name="Run", duration_minutes=20
            )
        )


def test_list_entries_returns_newest_first(
    log_repository: InMemoryLogRepository,
) -> None:
    service = LogService(log_repository)
    user_id = uuid4()
    for hours in (5, 1, 3):
        service.add_water(water(user_id, NOW - timedelta(hours=hours), 100.0 * hours))

    entries = service.list_entries(LogKind.WATER, user_id, limit=2)

    assert [entry.volume_ml for entry in entries] == [100.0, 300.0]


def test_list_entries_validates_limit(log_repository: InMemoryLogRepository) -> None:
    service = LogService(log_repository)

    with pytest.raises(InvalidLogEntry):
        service.list_entries(LogKind.FOOD, uuid4(), limit=0)
    with pytest.raises(InvalidLogEntry):
        service.list_entries(LogKind.FOOD, uuid4(), limit=101)
