"""Models for generated recommendations."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class RecommendationItem(BaseModel):
    """Advice for a single category."""

    model_config = ConfigDict(extra="forbid")

    title: str
    description: str


class RecommendationReply(BaseModel):
    """Structured reply expected from the generative model."""

    model_config = ConfigDict(extra="forbid")

    food: RecommendationItem
    exercise: RecommendationItem
    water: RecommendationItem


@dataclass(frozen=True)
class Recommendation:
    """A persisted recommendation."""

    id: UUID
    user_id: UUID
    created_at: datetime
    reply: RecommendationReply
