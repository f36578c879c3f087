"""Device token registration."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from diet_coach.domain.dispatch import DispatchTarget
from diet_coach.domain.errors import InvalidDeviceToken


class DeviceTokenRepository(Protocol):
    """Persistence interface for push tokens."""

    def upsert_token(self, user_id: UUID, token: str, updated_at: datetime) -> None:
        """Create or refresh the user's token."""

    def list_active(
        self, since: datetime, limit: int | None
    ) -> list[DispatchTarget]:
        """Return tokens refreshed after ``since``, most recent first."""


@dataclass
class DeviceTokenService:
    """Keeps track of which devices to notify."""

    repository: DeviceTokenRepository

    def register(self, user_id: UUID, token: str) -> None:
        """Store or refresh a push token for a user."""
        cleaned = token.strip()
        if not cleaned:
            raise InvalidDeviceToken("token must not be empty")
        self.repository.upsert_token(user_id, cleaned, datetime.now(tz=UTC))

    def list_active(
        self, since: datetime, limit: int | None = None
    ) -> list[DispatchTarget]:
        """Return a snapshot of users active since the given time."""
        return self.repository.list_active(since, limit)
