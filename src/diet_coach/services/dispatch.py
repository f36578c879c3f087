"""Bounded-concurrency batch dispatch over many users."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from diet_coach.domain.dispatch import (
    BatchOutcome,
    DispatchTarget,
    TargetOutcome,
    TargetState,
)

_logger = logging.getLogger(__name__)

TargetOperation = Callable[[DispatchTarget], Awaitable[object]]
TransitionHook = Callable[[DispatchTarget, TargetState], None]


@dataclass
class BatchDispatcher:
    """Runs one async operation per target with at most ``concurrency`` in flight.

    A fixed pool of workers pulls targets from a queue in submission order.
    Failures (including per-target timeouts) are recorded against the target
    and never stop the batch. No retries are attempted.
    """

    concurrency: int
    target_timeout_seconds: float | None = None
    on_transition: TransitionHook | None = None

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        timeout = self.target_timeout_seconds
        if timeout is not None and timeout <= 0:
            raise ValueError("target_timeout_seconds must be positive")

    async def run(
        self, targets: Sequence[DispatchTarget], operation: TargetOperation
    ) -> BatchOutcome:
        """Execute ``operation`` for every target and collect the outcomes."""
        snapshot = tuple(targets)
        if not snapshot:
            return BatchOutcome()
        outcomes: list[TargetOutcome | None] = [None] * len(snapshot)
        queue: asyncio.Queue[int] = asyncio.Queue()
        for index, target in enumerate(snapshot):
            self._transition(target, TargetState.PENDING)
            queue.put_nowait(index)

        async def worker() -> None:
            while True:
                try:
                    index = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                target = snapshot[index]
                self._transition(target, TargetState.IN_FLIGHT)
                outcome = await self._run_one(target, operation)
                outcomes[index] = outcome
                self._transition(target, outcome.state)

        workers = min(self.concurrency, len(snapshot))
        await asyncio.gather(*(worker() for _ in range(workers)))
        return BatchOutcome(outcomes=[outcome for outcome in outcomes if outcome])

    def _transition(self, target: DispatchTarget, state: TargetState) -> None:
        if self.on_transition is not None:
            self.on_transition(target, state)

    async def _run_one(
        self, target: DispatchTarget, operation: TargetOperation
    ) -> TargetOutcome:
        # a None delay never expires
        deadline = asyncio.timeout(self.target_timeout_seconds)
        try:
            async with deadline:
                await operation(target)
        except Exception as exc:
            if isinstance(exc, TimeoutError) and deadline.expired():
                _logger.warning(
                    "Dispatch target timed out",
                    extra={"user_id": str(target.user_id)},
                )
                return TargetOutcome(
                    target=target, state=TargetState.FAILED, error="timed out"
                )
            _logger.warning(
                "Dispatch target failed: %s",
                exc,
                extra={"user_id": str(target.user_id)},
            )
            return TargetOutcome(
                target=target,
                state=TargetState.FAILED,
                error=f"{type(exc).__name__}: {exc}",
            )
        return TargetOutcome(target=target, state=TargetState.SUCCEEDED)
