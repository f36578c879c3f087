"""Admin endpoints with simple token auth, called by the daily scheduler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from diet_coach.api.schemas import BatchOutcomeResponse
from diet_coach.services.notifications import ReminderKind

if TYPE_CHECKING:
    from diet_coach.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/jobs/recommendations", dependencies=[Depends(require_admin)])
async def run_recommendation_job(request: Request) -> BatchOutcomeResponse:
    """Generate recommendations for recently active users."""
    container: AppContainer = request.app.state.container
    outcome = await container.jobs.run_recommendation_batch()
    return BatchOutcomeResponse.from_outcome(outcome)


@router.post("/jobs/reminders/{kind}", dependencies=[Depends(require_admin)])
async def run_reminder_job(kind: str, request: Request) -> BatchOutcomeResponse:
    """Send a daily food, water or exercise reminder."""
    try:
        reminder = ReminderKind.from_name(kind)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown reminder: {kind}"
        ) from exc
    container: AppContainer = request.app.state.container
    outcome = await container.jobs.run_reminder_batch(reminder)
    return BatchOutcomeResponse.from_outcome(outcome)
