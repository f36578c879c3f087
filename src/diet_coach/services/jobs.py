"""Scheduled batch jobs triggered once a day."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from diet_coach.domain.dispatch import BatchOutcome, DispatchTarget
from diet_coach.services.devices import DeviceTokenService
from diet_coach.services.dispatch import BatchDispatcher
from diet_coach.services.notifications import (
    RECOMMENDATION_READY,
    NotificationService,
    ReminderKind,
)
from diet_coach.services.recommendations import RecommendationService

_logger = logging.getLogger(__name__)


@dataclass
class ScheduledJobs:
    """Fan-out jobs over recently active users."""

    device_service: DeviceTokenService
    recommendation_service: RecommendationService
    notification_service: NotificationService
    recommendation_dispatcher: BatchDispatcher
    reminder_dispatcher: BatchDispatcher
    active_days: int = 3
    recommendation_batch_limit: int | None = 10

    async def run_recommendation_batch(
        self, now: datetime | None = None
    ) -> BatchOutcome:
        """Generate a recommendation for each active user and notify them."""
        resolved_now = now or datetime.now(tz=UTC)
        targets = await self._active_targets(
            resolved_now, self.recommendation_batch_limit
        )

        async def process(target: DispatchTarget) -> None:
            await self.recommendation_service.generate_for_user(
                target.user_id, now=resolved_now
            )
            await self.notification_service.send(
                target.user_id, target.token, RECOMMENDATION_READY
            )

        outcome = await self.recommendation_dispatcher.run(targets, process)
        _logger.info(
            "Generated recommendations for %s of %s users",
            outcome.succeeded,
            outcome.total,
        )
        return outcome

    async def run_reminder_batch(
        self, kind: ReminderKind, now: datetime | None = None
    ) -> BatchOutcome:
        """Send a reminder notification to each active user."""
        resolved_now = now or datetime.now(tz=UTC)
        targets = await self._active_targets(resolved_now, None)

        async def process(target: DispatchTarget) -> None:
            await self.notification_service.send(
                target.user_id, target.token, kind.value
            )

        outcome = await self.reminder_dispatcher.run(targets, process)
        _logger.info(
            "Sent %s reminders to %s of %s users",
            kind.name.lower(),
            outcome.succeeded,
            outcome.total,
        )
        return outcome

    async def _active_targets(
        self, now: datetime, limit: int | None
    ) -> list[DispatchTarget]:
        since = now - timedelta(days=self.active_days)
        return await asyncio.to_thread(self.device_service.list_active, since, limit)
