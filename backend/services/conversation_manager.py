"""Conversation manager for per-session chat history."""
import logging
import threading
from typing import Dict, List

from models.conversation import Turn, USER_ROLE, ASSISTANT_ROLE

logger = logging.getLogger(__name__)

VALID_ROLES = (USER_ROLE, ASSISTANT_ROLE)


class ConversationManager:
    """Keeps an append-only, in-memory list of turns for every session."""

    def __init__(self):
        """Initialize an empty history map."""
        self._sessions: Dict[str, List[Turn]] = {}
        self._lock = threading.Lock()
        logger.info("ConversationManager initialized (in-memory)")

    def append_turn(self, session_id: str, role: str, content: str) -> Turn:
        """
        Append a message to a session, creating the session on first use.

        Args:
            session_id: Client-chosen session identifier
            role: "user" or "assistant"
            content: Message text

        Returns:
            The stored Turn

        Raises:
            ValueError: If role is not a known role
        """
        if role not in VALID_ROLES:
            raise ValueError(f"Unknown role '{role}', expected one of {VALID_ROLES}")

        turn = Turn(role=role, content=content)
        with self._lock:
            self._sessions.setdefault(session_id, []).append(turn)
        return turn

    def add_exchange(self, session_id: str, query: str, response: str) -> None:
        """
        Add a query-response pair to a session's history.

        Args:
            session_id: Session identifier
            query: User query as typed, mentions included
            response: Assistant answer
        """
        self.append_turn(session_id, USER_ROLE, query)
        self.append_turn(session_id, ASSISTANT_ROLE, response)
        logger.info(f"Added exchange to session {session_id}")

    def get_history(self, session_id: str) -> List[Turn]:
        """Return a copy of a session's turns; unknown sessions have none."""
        with self._lock:
            return list(self._sessions.get(session_id, []))

    def get_context(self, session_id: str, max_turns: int = 3) -> str:
        """
        Get formatted conversation history for prompt.

        Args:
            session_id: Session identifier
            max_turns: Maximum number of recent exchanges to include

        Returns:
            Formatted history, empty string when there is nothing to include
        """
        if max_turns <= 0:
            return ""

        recent = self.get_history(session_id)[-max_turns * 2:]
        lines = []
        for turn in recent:
            prefix = "Previous Q" if turn.role == USER_ROLE else "Previous A"
            lines.append(f"{prefix}: {turn.content}")

        if not lines:
            return ""
        return "Conversation history:\n" + "\n".join(lines)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
