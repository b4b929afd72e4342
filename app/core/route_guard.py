"""Request-time redirect filter for the browser-facing pages."""

import logging

from fastapi import Request
from fastapi.responses import RedirectResponse

from app.core.security import read_session

logger = logging.getLogger(__name__)

AUTH_PREFIX = "/api/auth"
CHAT_PATH = "/chat"
LOGIN_PATH = "/login"
GUEST_ONLY_PATHS = frozenset({"/login", "/signup", "/sign-in", "/"})


def evaluate_route(path: str, query: str, authenticated: bool) -> str | None:
    """Return the path to redirect to, or None to let the request through."""
    if path.startswith(AUTH_PREFIX) or "error=" in path or "error=" in query:
        return None
    if authenticated and path in GUEST_ONLY_PATHS:
        return CHAT_PATH
    if not authenticated and (path.startswith(CHAT_PATH) or path == "/"):
        return LOGIN_PATH
    return None


async def route_guard_middleware(request: Request, call_next):
    """Evaluated on every request; decisions are never cached."""
    authenticated = read_session(request) is not None
    target = evaluate_route(request.url.path, request.url.query, authenticated)
    if target is not None:
        logger.debug("Route guard: %s -> %s", request.url.path, target)
        return RedirectResponse(url=target, status_code=307)
    return await call_next(request)
