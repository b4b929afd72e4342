"""Sign-in hooks shared by the login providers."""

import logging
import re
import secrets
from urllib.parse import urlsplit

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import SessionClaims
from app.domains.auth.providers import OAuthProfile
from app.domains.user.service import UserService
from models import User

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT = "/chat"
USERNAME_MIN = 3
USERNAME_MAX = 30
_USERNAME_STRIP = re.compile(r"[^a-z0-9_]")


def derive_username(name: str | None, email: str) -> str:
    """Build a username candidate from a display name or the email local part."""
    base = _USERNAME_STRIP.sub("", (name or "").lower())
    if len(base) < USERNAME_MIN:
        base = _USERNAME_STRIP.sub("", email.split("@", 1)[0].lower())
    if len(base) < USERNAME_MIN:
        base = (base + "user")[:USERNAME_MIN] if base else "user"
    return base[:USERNAME_MAX]


def resolve_callback_url(callback_url: str | None, app_url: str) -> str:
    """Pick the post-login redirect.

    Only same-origin targets are honoured: relative paths, or absolute URLs on
    the application's own origin.
    """
    if not callback_url:
        return DEFAULT_REDIRECT
    # browsers read a backslash as a slash, so "/\host" is protocol-relative
    if callback_url.startswith("/") and callback_url[1:2] not in ("/", "\\"):
        return callback_url

    target = urlsplit(callback_url)
    origin = urlsplit(app_url)
    if target.scheme in ("http", "https") and (target.scheme, target.netloc) == (
        origin.scheme,
        origin.netloc,
    ):
        return callback_url
    return DEFAULT_REDIRECT


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserService(db)

    async def _unique_username(self, candidate: str) -> str:
        username = candidate
        while await self.users.get_user_by_username(username):
            suffix = str(secrets.randbelow(10_000))
            username = f"{candidate[: USERNAME_MAX - len(suffix)]}{suffix}"
        return username

    async def sign_in_oauth(self, profile: OAuthProfile) -> User:
        """Upsert the account behind an OAuth login.

        New emails get a pre-verified account without a password; an existing
        unverified account is marked verified.
        """
        user = await self.users.get_user_by_email(profile.email)
        if user is None:
            username = await self._unique_username(derive_username(profile.name, profile.email))
            user = await self.users.create_user(
                username=username,
                email=profile.email,
                password=None,
                is_verified=True,
                profile_picture=profile.image,
            )
            logger.info("Provisioned user %s from %s login", user.id, profile.provider)
        elif not user.is_verified:
            user = await self.users.mark_verified(user)
            logger.info("Verified user %s through %s login", user.id, profile.provider)
        return user

    async def claims_for_oauth(self, profile: OAuthProfile) -> SessionClaims:
        user = await self.sign_in_oauth(profile)
        return SessionClaims.for_user(user)
