"""Chat schemas for request/response serialization."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from pydantic import Field

from .base import BaseModelSchema, BaseSchema


class MessageRole(str, Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseSchema):
    """A message embedded in a chat."""

    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ChatCreateRequest(BaseSchema):
    """Schema for creating a chat."""

    messages: list[ChatMessage] = Field(..., description="Full message list")
    model: str | None = Field(None, max_length=255, description="Model identifier")
    title: str | None = Field(None, max_length=255, description="Optional chat title")


class ChatUpdateRequest(ChatCreateRequest):
    """Schema for replacing a chat's contents."""

    chat_id: str = Field(..., description="ID of the chat to update")


class ChatResponse(BaseModelSchema):
    """Schema for a stored chat."""

    user_id: UUID
    title: str
    messages: list[ChatMessage]
    model: str | None


class ChatDeleteResponse(BaseSchema):
    success: bool = True
