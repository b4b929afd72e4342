"""Session/auth provider endpoints."""

import logging
import secrets

import httpx
from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_optional_session
from app.core.security import SessionClaims, session_tokens
from app.database import get_db
from app.domains.auth.providers import (
    AuthProvider,
    CredentialsProvider,
    OAuthError,
    OAuthProvider,
)
from app.domains.auth.service import AuthService, resolve_callback_url
from app.exceptions.base import NotFoundError
from app.exceptions.user import UserAlreadyExistsError
from app.schemas.auth import (
    CredentialsSignInRequest,
    ProviderInfo,
    SessionResponse,
    SessionUser,
    SignInResponse,
    SignOutResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

STATE_COOKIE = "oauth-state"
CALLBACK_COOKIE = "oauth-callback-url"
SIGN_IN_ERROR_URL = "/sign-in?error=OAuthCallback"


def get_providers(request: Request) -> dict[str, AuthProvider]:
    return request.app.state.providers


def set_session_cookie(response: Response, claims: SessionClaims) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        session_tokens.issue(claims),
        max_age=session_tokens.max_age_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def _session_user(claims: SessionClaims) -> SessionUser:
    return SessionUser(
        id=claims.id,
        username=claims.username,
        email=claims.email,
        is_verified=claims.is_verified,
    )


def _oauth_provider(providers: dict[str, AuthProvider], provider_id: str) -> OAuthProvider:
    provider = providers.get(provider_id)
    if not isinstance(provider, OAuthProvider):
        raise NotFoundError(f"Unknown provider: {provider_id}")
    return provider


def _redirect_uri(provider_id: str) -> str:
    return f"{settings.app_url}/api/auth/callback/{provider_id}"


@router.get("/providers", response_model=list[ProviderInfo])
async def list_providers(providers: dict[str, AuthProvider] = Depends(get_providers)):
    """List the login providers enabled by configuration."""
    return [
        ProviderInfo(
            id=provider.id,
            name=provider.name,
            type=provider.type,
            signin_url=f"/api/auth/signin/{provider.id}",
            callback_url=f"/api/auth/callback/{provider.id}",
        )
        for provider in providers.values()
    ]


@router.post("/callback/credentials", response_model=SignInResponse)
async def sign_in_with_credentials(
    body: CredentialsSignInRequest,
    response: Response,
    callback_url: str | None = Query(None, alias="callbackUrl"),
    providers: dict[str, AuthProvider] = Depends(get_providers),
    db: AsyncSession = Depends(get_db),
):
    """Log in with email and password and start a provider session."""
    provider: CredentialsProvider = providers[CredentialsProvider.id]
    claims = await provider.authenticate(db, body.email, body.password)

    set_session_cookie(response, claims)
    logger.info("Credential login for user %s", claims.id)
    return SignInResponse(
        url=resolve_callback_url(callback_url or body.callback_url, settings.app_url),
        user=_session_user(claims),
    )


@router.get("/signin/{provider_id}")
async def start_oauth(
    provider_id: str,
    callback_url: str | None = Query(None, alias="callbackUrl"),
    providers: dict[str, AuthProvider] = Depends(get_providers),
):
    """Redirect the browser to the provider's consent page."""
    provider = _oauth_provider(providers, provider_id)
    state = secrets.token_urlsafe(32)

    response = RedirectResponse(
        provider.authorization_url(state, _redirect_uri(provider_id)), status_code=302
    )
    cookie_args = {
        "max_age": 600,
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": "lax",
    }
    response.set_cookie(STATE_COOKIE, state, **cookie_args)
    response.set_cookie(
        CALLBACK_COOKIE, resolve_callback_url(callback_url, settings.app_url), **cookie_args
    )
    return response


@router.get("/callback/{provider_id}")
async def finish_oauth(
    provider_id: str,
    request: Request,
    code: str | None = Query(None),
    state: str | None = Query(None),
    providers: dict[str, AuthProvider] = Depends(get_providers),
    db: AsyncSession = Depends(get_db),
):
    """Complete the OAuth handshake, upsert the user and start a session."""
    provider = _oauth_provider(providers, provider_id)
    expected_state = request.cookies.get(STATE_COOKIE)

    if not code or not state or not expected_state or not secrets.compare_digest(
        state.encode(), expected_state.encode()
    ):
        logger.warning("OAuth callback for %s with missing code or bad state", provider_id)
        return RedirectResponse(SIGN_IN_ERROR_URL, status_code=302)

    try:
        async with httpx.AsyncClient() as client:
            profile = await provider.authenticate(client, code, _redirect_uri(provider_id))
        claims = await AuthService(db).claims_for_oauth(profile)
    except (OAuthError, UserAlreadyExistsError, SQLAlchemyError) as e:
        logger.error("OAuth sign-in via %s failed: %s", provider_id, e)
        return RedirectResponse(SIGN_IN_ERROR_URL, status_code=302)

    target = resolve_callback_url(request.cookies.get(CALLBACK_COOKIE), settings.app_url)
    response = RedirectResponse(target, status_code=302)
    set_session_cookie(response, claims)
    response.delete_cookie(STATE_COOKIE)
    response.delete_cookie(CALLBACK_COOKIE)
    logger.info("OAuth login via %s for user %s", provider_id, claims.id)
    return response


@router.get("/session")
async def get_session_info(claims: SessionClaims | None = Depends(get_optional_session)) -> dict:
    """Session introspection; an empty object means no session."""
    if claims is None:
        return {}
    session = SessionResponse(user=_session_user(claims), expires=claims.expires)
    return session.model_dump(by_alias=True, mode="json")


@router.post("/signout", response_model=SignOutResponse)
async def sign_out(response: Response):
    """End the session, whichever login started it."""
    response.delete_cookie(settings.session_cookie_name, path="/")
    response.delete_cookie(settings.login_cookie_name, path="/")
    return SignOutResponse()
