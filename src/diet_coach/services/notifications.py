"""Push notification sending."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from uuid import UUID

_logger = logging.getLogger(__name__)


class PushClient(Protocol):
    """Interface for a push notification provider."""

    async def send(self, token: str, title: str, body: str) -> None:
        """Deliver a notification to a device token."""


@dataclass(frozen=True)
class NotificationText:
    """Title and body of a push notification."""

    title: str
    body: str


class ReminderKind(Enum):
    """Daily reminders, one per log kind."""

    FOOD = NotificationText(
        "Don't forget to input your food!", "We need the data to help you!"
    )
    EXERCISE = NotificationText(
        "Do your daily routine!", "Remember to log your exercise activities!"
    )
    WATER = NotificationText(
        "Hey, don't forget to drink water today!",
        "Your body is 70% water, so make sure to hydrate!",
    )

    @classmethod
    def from_name(cls, name: str) -> "ReminderKind":
        """Look up a reminder by its lowercase name."""
        return cls[name.upper()]


RECOMMENDATION_READY = NotificationText(
    "Here's your To Do list for today", "Keep your body healthy and happy today!"
)


@dataclass
class NotificationService:
    """Sends notifications through the configured push client."""

    client: PushClient

    async def send(self, user_id: UUID, token: str, text: NotificationText) -> None:
        """Send a notification and log the delivery."""
        await self.client.send(token, text.title, text.body)
        _logger.info("Sent notification", extra={"user_id": str(user_id)})
