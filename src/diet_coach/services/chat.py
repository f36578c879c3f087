"""Chatbot conversations grounded on the user's history."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from diet_coach.domain.chat import ChatTurn
from diet_coach.domain.errors import InvalidChatMessage
from diet_coach.services.history import UserHistoryService
from diet_coach.services.prompts import compile_chat_instructions

_logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


class ChatClient(Protocol):
    """Interface for conversational text generation."""

    async def chat(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        messages: list[dict[str, str]],
    ) -> str:
        """Return the assistant reply to the conversation."""


class ChatRepository(Protocol):
    """Persistence interface for chat turns."""

    def list_since(self, user_id: UUID, since: datetime, limit: int) -> list[ChatTurn]:
        """Return turns replied after ``since``, newest first."""

    def create_turn(self, user_id: UUID, turn: ChatTurn) -> None:
        """Append a chat turn."""


@dataclass
class ChatService:
    """Keeps a short rolling conversation with the advisor model."""

    client: ChatClient
    repository: ChatRepository
    history_service: UserHistoryService
    model: str
    reasoning_effort: str | None
    store: bool
    history_days: int = 7
    history_limit: int = 10

    async def history(
        self, user_id: UUID, now: datetime | None = None
    ) -> list[ChatTurn]:
        """Return recent turns, oldest first."""
        resolved_now = now or datetime.now(tz=UTC)
        since = resolved_now - timedelta(days=self.history_days)
        turns = await asyncio.to_thread(
            self.repository.list_since, user_id, since, self.history_limit
        )
        return list(reversed(turns))

    async def send(
        self, user_id: UUID, message: str, now: datetime | None = None
    ) -> ChatTurn:
        """Send a message and persist the reply."""
        text = message.strip()
        if not text:
            raise InvalidChatMessage("message must not be empty")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise InvalidChatMessage(
                f"message must be at most {MAX_MESSAGE_LENGTH} characters"
            )
        resolved_now = now or datetime.now(tz=UTC)
        previous = await self.history(user_id, resolved_now)
        user_history = await self.history_service.load(user_id, resolved_now)
        messages: list[dict[str, str]] = []
        for turn in previous:
            messages.append({"role": "user", "content": turn.message})
            messages.append({"role": "assistant", "content": turn.reply})
        messages.append({"role": "user", "content": text})

        reply = await self.client.chat(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            instructions=compile_chat_instructions(user_history),
            messages=messages,
        )
        turn = ChatTurn(message=text, reply=reply, replied_at=resolved_now)
        await asyncio.to_thread(self.repository.create_turn, user_id, turn)
        _logger.info(
            "Chat reply stored",
            extra={"user_id": str(user_id), "history_turns": len(previous)},
        )
        return turn
