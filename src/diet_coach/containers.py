"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from zoneinfo import ZoneInfo

from supabase import create_client

from diet_coach.adapters.openai_text_client import OpenAITextClient
from diet_coach.adapters.push_client import HttpxPushClient
from diet_coach.adapters.supabase_chat_repository import SupabaseChatRepository
from diet_coach.adapters.supabase_device_token_repository import (
    SupabaseDeviceTokenRepository,
)
from diet_coach.adapters.supabase_log_repository import SupabaseLogRepository
from diet_coach.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from diet_coach.adapters.supabase_recommendation_repository import (
    SupabaseRecommendationRepository,
)
from diet_coach.config import Settings
from diet_coach.services.chat import ChatService
from diet_coach.services.devices import DeviceTokenService
from diet_coach.services.dispatch import BatchDispatcher
from diet_coach.services.history import UserHistoryService
from diet_coach.services.jobs import ScheduledJobs
from diet_coach.services.logs import LogService
from diet_coach.services.notifications import NotificationService
from diet_coach.services.recommendations import (
    RecommendationGenerator,
    RecommendationService,
)
from diet_coach.services.reports import ReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    log_service: LogService
    device_service: DeviceTokenService
    recommendation_service: RecommendationService
    chat_service: ChatService
    report_service: ReportService
    jobs: ScheduledJobs
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    log_repository = SupabaseLogRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    recommendation_repository = SupabaseRecommendationRepository(supabase_client)
    device_repository = SupabaseDeviceTokenRepository(supabase_client)
    chat_repository = SupabaseChatRepository(supabase_client)

    text_client = OpenAITextClient.create(resolved_settings.openai_api_key)
    push_client = HttpxPushClient.create(
        project_id=resolved_settings.fcm_project_id,
        access_token=resolved_settings.fcm_access_token,
        base_url=resolved_settings.fcm_base_url,
    )

    history_service = UserHistoryService(
        profile_repository=profile_repository,
        log_repository=log_repository,
        timezone=ZoneInfo(resolved_settings.log_timezone),
        window_days=resolved_settings.history_days,
    )
    generator = RecommendationGenerator(
        client=text_client,
        repository=recommendation_repository,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    recommendation_service = RecommendationService(
        history_service=history_service,
        generator=generator,
        repository=recommendation_repository,
        max_age=timedelta(hours=resolved_settings.recommendation_max_age_hours),
    )
    chat_service = ChatService(
        client=text_client,
        repository=chat_repository,
        history_service=history_service,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        history_days=resolved_settings.history_days,
    )
    device_service = DeviceTokenService(device_repository)
    jobs = ScheduledJobs(
        device_service=device_service,
        recommendation_service=recommendation_service,
        notification_service=NotificationService(push_client),
        recommendation_dispatcher=BatchDispatcher(
            concurrency=resolved_settings.recommendation_concurrency,
            target_timeout_seconds=resolved_settings.batch_target_timeout_seconds,
        ),
        reminder_dispatcher=BatchDispatcher(
            concurrency=resolved_settings.notification_concurrency,
            target_timeout_seconds=resolved_settings.batch_target_timeout_seconds,
        ),
        active_days=resolved_settings.active_user_days,
        recommendation_batch_limit=resolved_settings.recommendation_batch_limit,
    )

    async def close_resources() -> None:
        await push_client.close()
        await text_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        log_service=LogService(log_repository),
        device_service=device_service,
        recommendation_service=recommendation_service,
        chat_service=chat_service,
        report_service=ReportService(profile_repository, log_repository),
        jobs=jobs,
        close_resources=close_resources,
    )
