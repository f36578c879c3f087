"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest

from diet_coach.config import Settings
from diet_coach.containers import AppContainer
from diet_coach.domain.chat import ChatTurn
from diet_coach.domain.dispatch import DispatchTarget
from diet_coach.domain.errors import TransportError
from diet_coach.domain.logs import (
    ExerciseEntry,
    FoodEntry,
    LogEntry,
    LogKind,
    WaterEntry,
)
from diet_coach.domain.profiles import UserProfile, UserTarget
from diet_coach.domain.recommendations import Recommendation, RecommendationReply
from diet_coach.services.chat import ChatClient, ChatRepository, ChatService
from diet_coach.services.devices import DeviceTokenRepository, DeviceTokenService
from diet_coach.services.dispatch import BatchDispatcher
from diet_coach.services.history import ProfileRepository, UserHistoryService
from diet_coach.services.jobs import ScheduledJobs
from diet_coach.services.logs import LogRepository, LogService
from diet_coach.services.notifications import NotificationService, PushClient
from diet_coach.services.recommendations import (
    RecommendationGenerator,
    RecommendationRepository,
    RecommendationService,
    TextGenerationClient,
)
from diet_coach.services.reports import ReportService

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)

REPLY_PAYLOAD: dict[str, object] = {
    "food": {"title": "Eat more greens", "description": "Today Target Calories: 1800"},
    "exercise": {"title": "Keep moving", "description": "Cardio: 2 more sessions"},
    "water": {"title": "Hydrate", "description": "Drink another 5 glasses"},
}


@dataclass
class InMemoryLogRepository(LogRepository):
    """In-memory log repository for tests."""

    entries: list[LogEntry] = field(default_factory=list)
    queries: list[tuple[LogKind, UUID, datetime, datetime]] = field(
        default_factory=list
    )

    def list_entries(
        self, kind: LogKind, user_id: UUID, start: datetime, end: datetime
    ) -> list[LogEntry]:
        self.queries.append((kind, user_id, start, end))
        matches = [
            entry
            for entry in self.entries
            if entry.kind is kind
            and entry.user_id == user_id
            and start <= entry.occurred_at <= end
        ]
        return sorted(matches, key=lambda entry: entry.occurred_at)

    def list_recent(self, kind: LogKind, user_id: UUID, limit: int) -> list[LogEntry]:
        matches = [
            entry
            for entry in self.entries
            if entry.kind is kind and entry.user_id == user_id
        ]
        matches.sort(key=lambda entry: entry.occurred_at, reverse=True)
        return matches[:limit]

    def create_entry(self, entry: LogEntry) -> UUID:
        entry_id = uuid4()
        self.entries.append(replace(entry, id=entry_id))
        return entry_id


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    targets: dict[UUID, UserTarget] = field(default_factory=dict)
    error: Exception | None = None

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        if self.error is not None:
            raise self.error
        return self.profiles.get(user_id)

    def get_target(self, user_id: UUID) -> UserTarget | None:
        return self.targets.get(user_id)


@dataclass
class InMemoryRecommendationRepository(RecommendationRepository):
    """In-memory recommendation repository for tests."""

    records: list[Recommendation] = field(default_factory=list)

    def create_recommendation(
        self, user_id: UUID, created_at: datetime, reply: RecommendationReply
    ) -> Recommendation:
        record = Recommendation(
            id=uuid4(), user_id=user_id, created_at=created_at, reply=reply
        )
        self.records.append(record)
        return record

    def get_latest(self, user_id: UUID) -> Recommendation | None:
        owned = [record for record in self.records if record.user_id == user_id]
        if not owned:
            return None
        return max(owned, key=lambda record: record.created_at)


@dataclass
class InMemoryDeviceTokenRepository(DeviceTokenRepository):
    """In-memory device token repository for tests."""

    tokens: dict[UUID, tuple[str, datetime]] = field(default_factory=dict)

    def upsert_token(self, user_id: UUID, token: str, updated_at: datetime) -> None:
        self.tokens[user_id] = (token, updated_at)

    def list_active(
        self, since: datetime, limit: int | None
    ) -> list[DispatchTarget]:
        active = sorted(
            (
                (updated_at, user_id, token)
                for user_id, (token, updated_at) in self.tokens.items()
                if updated_at > since
            ),
            key=lambda row: row[0],
            reverse=True,
        )
        if limit is not None:
            active = active[:limit]
        return [
            DispatchTarget(user_id=user_id, token=token)
            for _, user_id, token in active
        ]


@dataclass
class InMemoryChatRepository(ChatRepository):
    """In-memory chat repository for tests."""

    turns: dict[UUID, list[ChatTurn]] = field(default_factory=dict)

    def list_since(self, user_id: UUID, since: datetime, limit: int) -> list[ChatTurn]:
        recent = [
            turn for turn in self.turns.get(user_id, []) if turn.replied_at > since
        ]
        recent.sort(key=lambda turn: turn.replied_at, reverse=True)
        return recent[:limit]

    def create_turn(self, user_id: UUID, turn: ChatTurn) -> None:
        self.turns.setdefault(user_id, []).append(turn)


@dataclass
class FakeTextClient(TextGenerationClient, ChatClient):
    """Fake text client returning fixed payloads and recording calls."""

    payload: object = field(default_factory=lambda: dict(REPLY_PAYLOAD))
    chat_reply: str = "Try adding a salad to dinner."
    prompts: list[str] = field(default_factory=list)
    chat_calls: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        return self.payload  # type: ignore[return-value]

    async def chat(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        messages: list[dict[str, str]],
    ) -> str:
        if self.error is not None:
            raise self.error
        self.chat_calls.append({"instructions": instructions, "messages": messages})
        return self.chat_reply


@dataclass
class FakePushClient(PushClient):
    """Fake push client that records sends and fails for chosen tokens."""

    sent: list[tuple[str, str, str]] = field(default_factory=list)
    failing_tokens: set[str] = field(default_factory=set)

    async def send(self, token: str, title: str, body: str) -> None:
        if token in self.failing_tokens:
            raise TransportError(f"push rejected for {token}")
        self.sent.append((token, title, body))


def make_profile(user_id: UUID, **overrides: object) -> UserProfile:
    values: dict[str, object] = {
        "user_id": user_id,
        "first_name": "Ana",
        "last_name": "Putri",
        "weight_kg": 70.0,
        "height_cm": 175.0,
        "gender": "female",
        "activity_level": "moderate",
        "medical_notes": None,
    }
    values.update(overrides)
    return UserProfile(**values)  # type: ignore[arg-type]


def make_target(user_id: UUID) -> UserTarget:
    return UserTarget(user_id=user_id, target_weight_kg=65.0, duration_weeks=12)


def food(user_id: UUID, at: datetime, calories: float, **nutrients: float) -> FoodEntry:
    return FoodEntry(
        user_id=user_id, occurred_at=at, name="Meal", calories=calories, **nutrients
    )


def water(user_id: UUID, at: datetime, volume_ml: float) -> WaterEntry:
    return WaterEntry(user_id=user_id, occurred_at=at, volume_ml=volume_ml)


def exercise(
    user_id: UUID, at: datetime, minutes: float, name: str = "Running"
) -> ExerciseEntry:
    return ExerciseEntry(
        user_id=user_id, occurred_at=at, name=name, duration_minutes=minutes
    )


def seed_user(
    profiles: InMemoryProfileRepository, logs: InMemoryLogRepository, user_id: UUID
) -> None:
    """Give a user a profile, a target and one food log inside the window."""
    profiles.profiles[user_id] = make_profile(user_id)
    profiles.targets[user_id] = make_target(user_id)
    logs.entries.append(food(user_id, NOW - timedelta(hours=3), 600.0))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        openai_api_key="openai-key",
        fcm_project_id="diet-coach-test",
        fcm_access_token="fcm-token",
    )


@pytest.fixture
def log_repository() -> InMemoryLogRepository:
    return InMemoryLogRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def recommendation_repository() -> InMemoryRecommendationRepository:
    return InMemoryRecommendationRepository()


@pytest.fixture
def device_repository() -> InMemoryDeviceTokenRepository:
    return InMemoryDeviceTokenRepository()


@pytest.fixture
def chat_repository() -> InMemoryChatRepository:
    return InMemoryChatRepository()


@pytest.fixture
def text_client() -> FakeTextClient:
    return FakeTextClient()


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def history_service(
    profile_repository: InMemoryProfileRepository,
    log_repository: InMemoryLogRepository,
) -> UserHistoryService:
    return UserHistoryService(
        profile_repository=profile_repository,
        log_repository=log_repository,
        timezone=ZoneInfo("UTC"),
    )


@pytest.fixture
def recommendation_service(
    settings: Settings,
    history_service: UserHistoryService,
    text_client: FakeTextClient,
    recommendation_repository: InMemoryRecommendationRepository,
) -> RecommendationService:
    generator = RecommendationGenerator(
        client=text_client,
        repository=recommendation_repository,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    return RecommendationService(
        history_service=history_service,
        generator=generator,
        repository=recommendation_repository,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    log_repository: InMemoryLogRepository,
    profile_repository: InMemoryProfileRepository,
    device_repository: InMemoryDeviceTokenRepository,
    chat_repository: InMemoryChatRepository,
    text_client: FakeTextClient,
    push_client: FakePushClient,
    history_service: UserHistoryService,
    recommendation_service: RecommendationService,
) -> AppContainer:
    device_service = DeviceTokenService(device_repository)
    chat_service = ChatService(
        client=text_client,
        repository=chat_repository,
        history_service=history_service,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    jobs = ScheduledJobs(
        device_service=device_service,
        recommendation_service=recommendation_service,
        notification_service=NotificationService(push_client),
        recommendation_dispatcher=BatchDispatcher(concurrency=3),
        reminder_dispatcher=BatchDispatcher(concurrency=10),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        log_service=LogService(log_repository),
        device_service=device_service,
        recommendation_service=recommendation_service,
        chat_service=chat_service,
        report_service=ReportService(profile_repository, log_repository),
        jobs=jobs,
        close_resources=close_resources,
    )
