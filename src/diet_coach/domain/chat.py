"""Domain models for chatbot conversations."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ChatTurn:
    """A user message and the assistant reply."""

    message: str
    reply: str
    replied_at: datetime
