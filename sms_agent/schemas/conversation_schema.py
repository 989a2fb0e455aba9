"""Conversation, message, and store report schemas."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps (e.g. from an old backup) as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Role(str, Enum):
    CUSTOMER = "customer"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single SMS in a conversation. Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: datetime
    id: str

    @field_validator("timestamp")
    @classmethod
    def coerce_utc(cls, value):
        return _ensure_utc(value)


class ConversationMetadata(BaseModel):
    """Per-conversation metadata. Extra fields merged by callers are kept."""

    model_config = ConfigDict(extra="allow")

    customer_id: str = ""
    created_at: Optional[datetime] = None
    message_count: int = 0

    @field_validator("created_at")
    @classmethod
    def coerce_utc(cls, value):
        return _ensure_utc(value)


class Conversation(BaseModel):
    """One customer's bounded message history."""

    customer_id: str
    messages: list[Message] = Field(default_factory=list)
    metadata: ConversationMetadata = Field(default_factory=ConversationMetadata)
    last_activity_at: datetime

    @field_validator("last_activity_at")
    @classmethod
    def coerce_utc(cls, value):
        return _ensure_utc(value)


class SearchHit(BaseModel):
    """A conversation with at least one message matching a search query."""

    customer_id: str
    matching_messages: list[Message]
    last_activity_at: datetime


class StoreStats(BaseModel):
    """Aggregate counters over all resident conversations."""

    active_conversations: int = 0
    total_messages: int = 0
    average_messages_per_conversation: float = 0.0
    oldest_created_at: Optional[datetime] = None
    newest_activity: Optional[datetime] = None
