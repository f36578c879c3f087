"""Domain models for batch dispatch runs."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID


class TargetState(str, Enum):
    """Lifecycle of a single dispatch target."""

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchTarget:
    """A user eligible for a scheduled batch operation."""

    user_id: UUID
    token: str


@dataclass(frozen=True)
class TargetOutcome:
    """Terminal result for one target."""

    target: DispatchTarget
    state: TargetState
    error: str | None = None


@dataclass(frozen=True)
class BatchOutcome:
    """Aggregate result of a batch run."""

    outcomes: list[TargetOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.state is TargetState.SUCCEEDED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.state is TargetState.FAILED)

    @property
    def failure_reasons(self) -> dict[UUID, str]:
        return {
            o.target.user_id: o.error or "unknown error"
            for o in self.outcomes
            if o.state is TargetState.FAILED
        }
