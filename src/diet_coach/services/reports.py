"""Weekly report and daily food summary of a user's logs."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from diet_coach.domain.errors import PreconditionMissing
from diet_coach.domain.logs import DailySummary, LogKind
from diet_coach.domain.reports import TodayFoodSummary, WeeklyReport
from diet_coach.services.aggregation import aggregate_daily, total
from diet_coach.services.history import ProfileRepository
from diet_coach.services.logs import LogRepository

REPORT_DAYS = 7


@dataclass
class ReportService:
    """Computes weekly averages in the user's timezone."""

    profile_repository: ProfileRepository
    log_repository: LogRepository

    async def weekly(
        self, user_id: UUID, timezone_name: str, now: datetime | None = None
    ) -> WeeklyReport:
        """Return BMI, daily averages and exercise minutes for the last 7 days.

        The window starts at local midnight six days ago so the final slot is
        today. Water and calorie averages divide by the number of days that
        have entries, not by the number of entries, so several small drinks on
        one day count as that day's intake.
        """
        tz = ZoneInfo(timezone_name)
        local_now = (now or datetime.now(tz=UTC)).astimezone(tz)
        start_day = local_now.date() - timedelta(days=REPORT_DAYS - 1)
        start = datetime.combine(start_day, datetime.min.time(), tzinfo=tz)
        end = local_now

        profile = await asyncio.to_thread(self.profile_repository.get_profile, user_id)
        bmi = profile.bmi if profile else None
        if bmi is None:
            raise PreconditionMissing("profile")

        water = await self._daily(LogKind.WATER, user_id, start, end, tz)
        food = await self._daily(LogKind.FOOD, user_id, start, end, tz)
        exercise = await self._daily(LogKind.EXERCISE, user_id, start, end, tz)

        minutes = [0.0] * REPORT_DAYS
        for summary in exercise:
            offset = (summary.day - start_day).days
            if 0 <= offset < REPORT_DAYS:
                minutes[offset] += summary.totals["duration_minutes"]

        return WeeklyReport(
            bmi=round(bmi, 1),
            average_water_ml=_average(total(water, "volume_ml"), len(water)),
            average_calories=_average(total(food, "calories"), len(food)),
            daily_exercise_minutes=minutes,
        )

    async def today_food_summary(
        self, user_id: UUID, timezone_name: str, now: datetime | None = None
    ) -> TodayFoodSummary:
        """Return food totals from local midnight until the next midnight."""
        tz = ZoneInfo(timezone_name)
        today = (now or datetime.now(tz=UTC)).astimezone(tz).date()
        start = datetime.combine(today, datetime.min.time(), tzinfo=tz)
        end = datetime.combine(
            today + timedelta(days=1), datetime.min.time(), tzinfo=tz
        )
        # entries exactly at the next midnight bucket into tomorrow
        days = await self._daily(LogKind.FOOD, user_id, start, end, tz)
        current = next((day for day in days if day.day == today), None)
        totals = current.totals if current else {}
        entry_count = current.entry_count if current else 0
        return TodayFoodSummary(
            day=today,
            entry_count=entry_count,
            calories=totals.get("calories", 0.0),
            carbs_g=totals.get("carbs_g", 0.0),
            protein_g=totals.get("protein_g", 0.0),
            fat_g=totals.get("fat_g", 0.0),
            sugar_g=totals.get("sugar_g", 0.0),
            sodium_mg=totals.get("sodium_mg", 0.0),
            cholesterol_mg=totals.get("cholesterol_mg", 0.0),
            fiber_g=totals.get("fiber_g", 0.0),
        )

    async def _daily(
        self,
        kind: LogKind,
        user_id: UUID,
        start: datetime,
        end: datetime,
        tz: ZoneInfo,
    ) -> list[DailySummary]:
        entries = await asyncio.to_thread(
            self.log_repository.list_entries, kind, user_id, start, end
        )
        return aggregate_daily(kind, entries, tz)


def _average(amount: float, days: int) -> float:
    if days == 0:
        return 0.0
    return amount / days
