"""
In-memory conversation storage, keyed by user id.

Process-local and unsynchronised: every conversation is lost on restart.
"""

import random
import string
import time
from datetime import date, datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConversationNotFoundError(KeyError):
    pass


class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: str = Field(default_factory=_now)


class Conversation(BaseModel):
    id: str
    user_id: str
    business_id: str
    business_name: str
    messages: List[Message] = []
    chat_id: Optional[str] = None  # Yelp AI chat id for multi-turn
    timestamp: str = Field(default_factory=_now)
    last_updated: str = Field(default_factory=_now)

    @property
    def started_on(self) -> date:
        return datetime.fromisoformat(self.timestamp).date()

    def display_date(self) -> str:
        """Start date as M/D/YYYY."""
        started = self.started_on
        return f"{started.month}/{started.day}/{started.year}"


class ConversationStore:
    def __init__(self):
        self._conversations: Dict[str, List[Conversation]] = {}
        self._active: Dict[str, str] = {}

    @staticmethod
    def generate_id() -> str:
        suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
        return f"conv_{int(time.time() * 1000)}_{suffix}"

    def create_conversation(self, user_id: str, business_id: str, business_name: str) -> Conversation:
        conversation = Conversation(
            id=self.generate_id(),
            user_id=user_id,
            business_id=business_id,
            business_name=business_name,
        )
        self._conversations.setdefault(user_id, []).append(conversation)
        self._active[user_id] = conversation.id
        return conversation

    def get_conversation(self, user_id: str, conversation_id: str) -> Optional[Conversation]:
        for conv in self._conversations.get(user_id, []):
            if conv.id == conversation_id:
                return conv
        return None

    def _require(self, user_id: str, conversation_id: str) -> Conversation:
        conversation = self.get_conversation(user_id, conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    def get_active_conversation(self, user_id: str) -> Optional[Conversation]:
        active_id = self._active.get(user_id)
        if not active_id:
            return None
        return self.get_conversation(user_id, active_id)

    def set_active_conversation(self, user_id: str, conversation_id: str) -> Conversation:
        conversation = self._require(user_id, conversation_id)
        self._active[user_id] = conversation_id
        return conversation

    def get_all_conversations(self, user_id: str) -> List[Conversation]:
        return list(self._conversations.get(user_id, []))

    def add_message(self, user_id: str, conversation_id: str, role: str, content: str) -> Conversation:
        conversation = self._require(user_id, conversation_id)
        message = Message(role=role, content=content)
        conversation.messages.append(message)
        conversation.last_updated = message.timestamp
        return conversation

    def update_chat_id(self, user_id: str, conversation_id: str, chat_id: str) -> Conversation:
        conversation = self._require(user_id, conversation_id)
        conversation.chat_id = chat_id
        return conversation

    def delete_conversation(self, user_id: str, conversation_id: str) -> bool:
        """Remove a conversation; returns False when there was nothing to remove."""
        conversations = self._conversations.get(user_id, [])
        remaining = [c for c in conversations if c.id != conversation_id]
        self._conversations[user_id] = remaining

        if self._active.get(user_id) == conversation_id:
            del self._active[user_id]
        return len(remaining) != len(conversations)

    def clear_user_conversations(self, user_id: str) -> None:
        self._conversations.pop(user_id, None)
        self._active.pop(user_id, None)


conversation_store = ConversationStore()


def get_conversation_store() -> ConversationStore:
    """FastAPI dependency returning the process-wide store."""
    return conversation_store
