"""Conversation data models."""
from dataclasses import dataclass, field
from datetime import datetime

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


@dataclass
class Turn:
    """Represents a single message in a chat session."""
    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
