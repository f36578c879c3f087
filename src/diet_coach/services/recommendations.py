"""Recommendation generation backed by a generative text model."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from diet_coach.domain.errors import GenerationFormatError
from diet_coach.domain.recommendations import Recommendation, RecommendationReply
from diet_coach.services.history import UserHistoryService
from diet_coach.services.prompts import compile_recommendation_prompt

_logger = logging.getLogger(__name__)

_ITEM_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
    },
    "required": ["title", "description"],
    "additionalProperties": False,
}

RECOMMENDATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "food": _ITEM_SCHEMA,
        "exercise": _ITEM_SCHEMA,
        "water": _ITEM_SCHEMA,
    },
    "required": ["food", "exercise", "water"],
    "additionalProperties": False,
}

ADVISOR_INSTRUCTIONS = (
    "You are a diet and exercise advisor. "
    "Only reply to diet and exercise topics. "
    "Provide steps to improve diet and suggest exercises."
)


class TextGenerationClient(Protocol):
    """Interface for structured text generation."""

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
        """Return the model reply decoded from JSON."""


class RecommendationRepository(Protocol):
    """Persistence interface for recommendations."""

    def create_recommendation(
        self, user_id: UUID, created_at: datetime, reply: RecommendationReply
    ) -> Recommendation:
        """Append a recommendation and return the stored record."""

    def get_latest(self, user_id: UUID) -> Recommendation | None:
        """Return the most recent recommendation for a user."""


@dataclass
class RecommendationGenerator:
    """Calls the model, validates its reply and persists the result."""

    client: TextGenerationClient
    repository: RecommendationRepository
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate(
        self, user_id: UUID, prompt: str, now: datetime | None = None
    ) -> Recommendation:
        """Generate and store a new recommendation for a user.

        Raises ``GenerationFormatError`` without persisting anything when the
        reply does not match ``RECOMMENDATION_SCHEMA``.
        """
        raw = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            instructions=ADVISOR_INSTRUCTIONS,
            prompt=prompt,
            schema=RECOMMENDATION_SCHEMA,
        )
        reply = parse_reply(raw)
        created_at = now or datetime.now(tz=UTC)
        recommendation = await asyncio.to_thread(
            self.repository.create_recommendation, user_id, created_at, reply
        )
        _logger.info(
            "Recommendation generated",
            extra={
                "user_id": str(user_id),
                "recommendation_id": str(recommendation.id),
            },
        )
        return recommendation


def parse_reply(raw: object) -> RecommendationReply:
    """Validate a decoded model reply against the recommendation shape."""
    if not isinstance(raw, dict):
        raise GenerationFormatError("Model reply is not a JSON object")
    try:
        return RecommendationReply.model_validate(raw)
    except ValidationError as exc:
        raise GenerationFormatError(
            f"Model reply does not match the recommendation shape: {exc}"
        ) from exc


@dataclass
class RecommendationService:
    """Builds prompts from user history and applies the freshness policy."""

    history_service: UserHistoryService
    generator: RecommendationGenerator
    repository: RecommendationRepository
    max_age: timedelta = timedelta(hours=24)

    async def generate_for_user(
        self, user_id: UUID, now: datetime | None = None
    ) -> Recommendation:
        """Run the full pipeline for one user and return the new record."""
        resolved_now = now or datetime.now(tz=UTC)
        history = await self.history_service.load(user_id, resolved_now)
        prompt = compile_recommendation_prompt(history)
        _logger.debug("Recommendation prompt for %s:\n%s", user_id, prompt)
        return await self.generator.generate(user_id, prompt, now=resolved_now)

    async def get_current(
        self, user_id: UUID, now: datetime | None = None
    ) -> Recommendation:
        """Return the latest recommendation, regenerating when it is stale."""
        resolved_now = now or datetime.now(tz=UTC)
        latest = await asyncio.to_thread(self.repository.get_latest, user_id)
        if latest is not None and resolved_now - latest.created_at <= self.max_age:
            return latest
        return await self.generate_for_user(user_id, now=resolved_now)
