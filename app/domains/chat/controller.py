"""Chat history API controller with FastAPI endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_session
from app.core.security import SessionClaims
from app.domains.chat.service import ChatService
from app.exceptions.base import BadRequestError, InternalError
from app.schemas.chat import (
    ChatCreateRequest,
    ChatDeleteResponse,
    ChatResponse,
    ChatUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chat/history",
    tags=["chat"],
    dependencies=[Depends(get_session)],
)


@router.get("", response_model=list[ChatResponse])
async def list_chats(
    session: SessionClaims = Depends(get_session),
    db: AsyncSession = Depends(get_db),
):
    """Return the caller's 10 most recently updated chats, newest first."""
    try:
        chats = await ChatService(db).list_recent(session.user_id)
    except SQLAlchemyError as e:
        logger.error("Failed to fetch chat history: %s", e)
        raise InternalError("Failed to fetch chat history") from e
    return [ChatResponse.model_validate(chat) for chat in chats]


@router.post("", response_model=ChatResponse, status_code=status.HTTP_201_CREATED)
async def create_chat(
    chat_request: ChatCreateRequest = Body(...),
    session: SessionClaims = Depends(get_session),
    db: AsyncSession = Depends(get_db),
):
    """Persist a new chat owned by the caller."""
    try:
        chat = await ChatService(db).create_chat(chat_request, session.user_id)
    except SQLAlchemyError as e:
        logger.error("Failed to create chat: %s", e)
        raise InternalError("Failed to create chat") from e
    return ChatResponse.model_validate(chat)


@router.put("", response_model=ChatResponse)
async def update_chat(
    chat_request: ChatUpdateRequest = Body(...),
    session: SessionClaims = Depends(get_session),
    db: AsyncSession = Depends(get_db),
):
    """Replace the message list, model and title of one of the caller's chats."""
    try:
        chat = await ChatService(db).update_chat(chat_request, session.user_id)
    except SQLAlchemyError as e:
        logger.error("Failed to update chat: %s", e)
        raise InternalError("Failed to update chat") from e
    return ChatResponse.model_validate(chat)


@router.delete("", response_model=ChatDeleteResponse)
async def delete_chat(
    chat_id: str | None = Query(None, alias="id", description="Chat ID"),
    session: SessionClaims = Depends(get_session),
    db: AsyncSession = Depends(get_db),
):
    """Delete a chat. Succeeds even when the id does not exist."""
    if not chat_id:
        raise BadRequestError("Chat ID required")

    try:
        await ChatService(db).delete_chat(chat_id, session.user_id)
    except SQLAlchemyError as e:
        logger.error("Failed to delete chat: %s", e)
        raise InternalError("Failed to delete chat") from e
    return ChatDeleteResponse()
