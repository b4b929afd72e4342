# app/core/dependencies.py
import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import SessionClaims, read_session
from app.database import get_db
from app.domains.user.service import UserService
from app.exceptions.base import UnauthorizedError
from models import User

logger = logging.getLogger(__name__)


async def get_session(request: Request) -> SessionClaims:
    """Decode the caller's session into a request-scoped claim set.

    Returns:
        SessionClaims: Claims copied from the verified token

    Raises:
        UnauthorizedError: If no valid session is present
    """
    claims = read_session(request)
    if claims is None:
        raise UnauthorizedError()

    request.state.user_id = claims.id
    return claims


async def get_optional_session(request: Request) -> SessionClaims | None:
    """Get the session if one is present, otherwise None."""
    return read_session(request)


async def get_current_user(
    claims: SessionClaims = Depends(get_session),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Load the user record behind the session.

    Raises:
        UnauthorizedError: If the token outlived its user record
    """
    user = await UserService(db).get_user_by_id(claims.user_id)
    if not user:
        logger.warning("Session for unknown user %s", claims.id)
        raise UnauthorizedError()
    return user
