"""Completion proxy schemas."""

from typing import Literal

from pydantic import Field

from .base import BaseSchema


class CompletionMessage(BaseSchema):
    """Message forwarded to the completion service."""

    role: Literal["user", "assistant", "system"]
    content: str


class CompletionRequest(BaseSchema):
    """Body of ``POST /api/chat``."""

    messages: list[CompletionMessage]
    model: str | None = Field(None, description="Model identifier, provider default if omitted")
    max_tokens: int | None = Field(None, description="Requested max tokens, clamped server-side")
