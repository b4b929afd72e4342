"""Completion proxy endpoint."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from app.core.dependencies import get_session
from app.core.security import SessionClaims
from app.domains.ai.service import CompletionService
from app.exceptions.base import BadRequestError
from app.schemas.ai import CompletionRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["ai"])


def get_completion_service() -> CompletionService:
    return CompletionService()


@router.post("")
async def create_completion(
    request: Request,
    session: SessionClaims = Depends(get_session),
    service: CompletionService = Depends(get_completion_service),
) -> dict:
    """Forward the conversation to the completion service.

    Body: ``{messages, model?, maxTokens?}``. The upstream response is
    returned as-is.
    """
    try:
        body = await request.json()
        completion_request = CompletionRequest.model_validate(body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        logger.info("Rejected completion request from user %s: %s", session.id, e)
        raise BadRequestError("Invalid messages format") from e

    return await service.complete(completion_request)
