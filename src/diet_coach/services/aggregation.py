"""Time-window aggregation of log entries into daily summaries."""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from diet_coach.domain.logs import (
    FOOD_NUTRIENT_FIELDS,
    DailySummary,
    ExerciseEntry,
    LogEntry,
    LogKind,
)

DEFAULT_WINDOW_DAYS = 7


def history_window(
    now: datetime, days: int = DEFAULT_WINDOW_DAYS
) -> tuple[datetime, datetime]:
    """Return the trailing window ``[now - days, now]``, both bounds inclusive."""
    if days < 1:
        raise ValueError("Window must cover at least one day")
    end = _as_aware(now)
    return end - timedelta(days=days), end


def aggregate_daily(
    kind: LogKind, entries: Iterable[LogEntry], tz: ZoneInfo
) -> list[DailySummary]:
    """Group entries of one kind into per-day summaries.

    Entries are sorted by ``occurred_at`` first, so callers need not rely on
    query ordering. Each entry is bucketed by its calendar date in ``tz`` and
    summaries come back in chronological order. Missing numeric fields count
    as zero.
    """
    ordered = sorted(entries, key=lambda entry: _as_aware(entry.occurred_at))
    buckets: dict[date, _Bucket] = {}
    for entry in ordered:
        if entry.kind is not kind:
            raise ValueError(f"Expected {kind.value} entries, got {entry.kind.value}")
        day = local_day(entry.occurred_at, tz)
        bucket = buckets.get(day)
        if bucket is None:
            bucket = _Bucket(kind)
            buckets[day] = bucket
        bucket.add(entry)
    return [bucket.summary(day) for day, bucket in buckets.items()]


def local_day(moment: datetime, tz: ZoneInfo) -> date:
    """Return the calendar date of a timestamp in the given zone."""
    return _as_aware(moment).astimezone(tz).date()


def total(summaries: Iterable[DailySummary], field_name: str) -> float:
    """Sum a numeric field across summaries."""
    return sum(summary.totals.get(field_name, 0.0) for summary in summaries)


class _Bucket:
    def __init__(self, kind: LogKind) -> None:
        self.kind = kind
        self.count = 0
        self.totals: dict[str, float] = dict.fromkeys(_fields_for(kind), 0.0)
        self.breakdown: dict[str, float] = {}

    def add(self, entry: LogEntry) -> None:
        self.count += 1
        for name in self.totals:
            self.totals[name] += _number(getattr(entry, name))
        if isinstance(entry, ExerciseEntry):
            label = entry.name.strip() or "Exercise"
            self.breakdown[label] = self.breakdown.get(label, 0.0) + _number(
                entry.duration_minutes
            )

    def summary(self, day: date) -> DailySummary:
        return DailySummary(
            kind=self.kind,
            day=day,
            entry_count=self.count,
            totals=dict(self.totals),
            breakdown=dict(self.breakdown),
        )


def _fields_for(kind: LogKind) -> tuple[str, ...]:
    if kind is LogKind.FOOD:
        return FOOD_NUTRIENT_FIELDS
    if kind is LogKind.WATER:
        return ("volume_ml",)
    return ("duration_minutes",)


def _number(value: float | None) -> float:
    if value is None:
        return 0.0
    return float(value)


def _as_aware(moment: datetime) -> datetime:
    # naive timestamps are stored as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment
