"""Firebase Cloud Messaging client adapter."""

from dataclasses import dataclass

import httpx

from diet_coach.domain.errors import TransportError
from diet_coach.services.notifications import PushClient


@dataclass
class HttpxPushClient(PushClient):
    """Push client for the FCM HTTP v1 API implemented with httpx."""

    project_id: str
    access_token: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, project_id: str, access_token: str, base_url: str
    ) -> "HttpxPushClient":
        """Create a push client with a managed httpx session."""
        return cls(
            project_id=project_id,
            access_token=access_token,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def send(self, token: str, title: str, body: str) -> None:
        """Send a notification message to a single device."""
        url = f"{self.base_url}/projects/{self.project_id}/messages:send"
        payload = {
            "message": {
                "token": token,
                "notification": {"title": title, "body": body},
                "android": {"notification": {"sound": "default"}},
            }
        }
        try:
            response = await self.http_client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=10,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"Push send failed: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
