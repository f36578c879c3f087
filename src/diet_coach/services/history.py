"""Loads and aggregates a user's recent history."""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from diet_coach.domain.history import UserHistory
from diet_coach.domain.logs import LogKind
from diet_coach.domain.profiles import UserProfile, UserTarget
from diet_coach.services.aggregation import (
    DEFAULT_WINDOW_DAYS,
    aggregate_daily,
    history_window,
)
from diet_coach.services.logs import LogRepository


class ProfileRepository(Protocol):
    """Persistence interface for profiles and targets."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's physical profile, if present."""

    def get_target(self, user_id: UUID) -> UserTarget | None:
        """Return the user's weight target, if present."""


@dataclass
class UserHistoryService:
    """Fetches profile, target and windowed logs for one user."""

    profile_repository: ProfileRepository
    log_repository: LogRepository
    timezone: ZoneInfo
    window_days: int = DEFAULT_WINDOW_DAYS

    async def load(self, user_id: UUID, now: datetime) -> UserHistory:
        """Load and aggregate the trailing window of a user's data."""
        start, end = history_window(now, self.window_days)
        profile = await asyncio.to_thread(self.profile_repository.get_profile, user_id)
        target = await asyncio.to_thread(self.profile_repository.get_target, user_id)
        summaries = {}
        for kind in LogKind:
            entries = await asyncio.to_thread(
                self.log_repository.list_entries, kind, user_id, start, end
            )
            summaries[kind] = aggregate_daily(kind, entries, self.timezone)
        return UserHistory(
            profile=profile,
            target=target,
            food=summaries[LogKind.FOOD],
            water=summaries[LogKind.WATER],
            exercise=summaries[LogKind.EXERCISE],
            window_start=start,
            window_end=end,
        )
