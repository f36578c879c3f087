"""Aggregated view of a user's recent history."""

from dataclasses import dataclass
from datetime import datetime

from diet_coach.domain.logs import DailySummary
from diet_coach.domain.profiles import UserProfile, UserTarget


@dataclass(frozen=True)
class UserHistory:
    """Facts fed to the prompt compiler."""

    profile: UserProfile | None
    target: UserTarget | None
    food: list[DailySummary]
    water: list[DailySummary]
    exercise: list[DailySummary]
    window_start: datetime
    window_end: datetime
