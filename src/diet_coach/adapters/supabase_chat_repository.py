"""Supabase repository for chatbot turns."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diet_coach.adapters.supabase_query import execute
from diet_coach.domain.chat import ChatTurn
from diet_coach.services.chat import ChatRepository


@dataclass
class SupabaseChatRepository(ChatRepository):
    """Supabase implementation for chat history."""

    client: Client

    def list_since(self, user_id: UUID, since: datetime, limit: int) -> list[ChatTurn]:
        """Return turns replied after ``since``, newest first."""
        response = execute(
            self.client.table("chat_turns")
            .select("message, reply, replied_at")
            .eq("user_id", str(user_id))
            .gt("replied_at", since.isoformat())
            .order("replied_at", desc=True)
            .limit(limit),
            "chat history query",
        )
        return [
            ChatTurn(
                message=str(row.get("message") or ""),
                reply=str(row.get("reply") or ""),
                replied_at=datetime.fromisoformat(str(row["replied_at"])),
            )
            for row in response.data or []
        ]

    def create_turn(self, user_id: UUID, turn: ChatTurn) -> None:
        """Insert a chat turn row."""
        execute(
            self.client.table("chat_turns").insert(
                {
                    "user_id": str(user_id),
                    "message": turn.message,
                    "reply": turn.reply,
                    "replied_at": turn.replied_at.isoformat(),
                }
            ),
            "chat turn insert",
        )
