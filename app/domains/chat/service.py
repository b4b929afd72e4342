"""Chat history persistence, scoped to the owning user."""

import logging
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.chat import ChatNotFoundError
from app.schemas.chat import ChatCreateRequest, ChatMessage, ChatUpdateRequest
from models.base import utcnow
from models.chat import Chat

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10
TITLE_LENGTH = 50


def derive_title(title: str | None, messages: list[ChatMessage], fallback: str) -> str:
    """Explicit title, else the start of the first message, else ``fallback``."""
    if title:
        return title
    if messages and messages[0].content:
        return messages[0].content[:TITLE_LENGTH]
    return fallback


def _parse_chat_id(chat_id: str | UUID) -> UUID | None:
    if isinstance(chat_id, UUID):
        return chat_id
    try:
        return UUID(str(chat_id))
    except ValueError:
        return None


def _dump_messages(messages: list[ChatMessage]) -> list[dict]:
    return [message.model_dump(mode="json") for message in messages]


class ChatService:
    """Service class for chat history CRUD."""

    def __init__(self, db: AsyncSession):
        """Initialize chat service with database session.

        Args:
            db: Async database session for data operations.
        """
        self.db = db

    async def list_recent(self, user_id: UUID, limit: int = HISTORY_LIMIT) -> list[Chat]:
        """Most recently updated chats owned by the user, newest first."""
        query = (
            select(Chat)
            .where(Chat.user_id == user_id)
            .order_by(Chat.updated_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_chat(self, request: ChatCreateRequest, user_id: UUID) -> Chat:
        chat = Chat(
            user_id=user_id,
            title=derive_title(request.title, request.messages, "New Chat"),
            messages=_dump_messages(request.messages),
            model=request.model,
        )
        try:
            self.db.add(chat)
            await self.db.commit()
            await self.db.refresh(chat)
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Created chat %s for user %s", chat.id, user_id)
        return chat

    async def update_chat(self, request: ChatUpdateRequest, user_id: UUID) -> Chat:
        """Replace a chat's messages, model and title.

        Last write wins; there is no version check.

        Raises:
            ChatNotFoundError: If the id does not resolve to a chat the user owns
        """
        chat_id = _parse_chat_id(request.chat_id)
        if chat_id is None:
            raise ChatNotFoundError()

        result = await self.db.execute(
            select(Chat).where(Chat.id == chat_id, Chat.user_id == user_id)
        )
        chat = result.scalar_one_or_none()
        if not chat:
            raise ChatNotFoundError()

        chat.messages = _dump_messages(request.messages)
        chat.model = request.model
        chat.title = derive_title(request.title, request.messages, "Updated Chat")
        chat.updated_at = utcnow()

        try:
            await self.db.commit()
            await self.db.refresh(chat)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return chat

    async def delete_chat(self, chat_id: str | UUID, user_id: UUID) -> None:
        """Delete a chat the user owns. Unknown or foreign ids are a no-op."""
        parsed = _parse_chat_id(chat_id)
        if parsed is None:
            return

        try:
            await self.db.execute(delete(Chat).where(Chat.id == parsed, Chat.user_id == user_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
