"""Tests for container wiring."""

import asyncio

from diet_coach.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.jobs.recommendation_dispatcher.concurrency == 3
    assert container.jobs.reminder_dispatcher.concurrency == 10
    assert container.recommendation_service.history_service.window_days == 7
    asyncio.run(container.close_resources())
