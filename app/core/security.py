"""Security related functions.

Password hashing, the typed session claim set, and the signed tokens that
carry it between requests.
"""

import logging
import uuid
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from fastapi import Request
from jwt import InvalidTokenError
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from app.core.config import settings
from app.exceptions.base import UnauthorizedError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


# compared against when an account has no hash, so failed logins take equally long
DUMMY_PASSWORD_HASH = hash_password("dummy-password")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a plaintext password against a stored hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash or over-long password
        return False


class SessionClaims(BaseModel):
    """Identity carried by a session token.

    Decoding is strict: a claim with the wrong type is rejected, never coerced.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: str
    username: str
    email: str
    is_verified: bool
    exp: int | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        uuid.UUID(v)
        return v

    @property
    def user_id(self) -> uuid.UUID:
        return uuid.UUID(self.id)

    @property
    def expires(self) -> datetime | None:
        if self.exp is None:
            return None
        return datetime.fromtimestamp(self.exp, UTC)

    @classmethod
    def for_user(cls, user) -> "SessionClaims":
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            is_verified=bool(user.is_verified),
        )


class SessionTokenManager:
    """
    Issues and decodes signed session tokens.

    :ivar lifetime: How long an issued token stays valid.
    :type lifetime: timedelta
    """

    def __init__(self, secret: str, lifetime: timedelta, algorithm: str = "HS256"):
        self.secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm

    @property
    def max_age_seconds(self) -> int:
        return int(self.lifetime.total_seconds())

    def issue(self, claims: SessionClaims) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": claims.id,
            "username": claims.username,
            "email": claims.email,
            "is_verified": claims.is_verified,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> SessionClaims:
        """Verify a token and return its claims.

        Raises:
            UnauthorizedError: If the signature, expiry or claim set is invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
            return SessionClaims(
                id=payload["sub"],
                username=payload.get("username"),
                email=payload.get("email"),
                is_verified=payload.get("is_verified"),
                exp=payload["exp"],
            )
        except (InvalidTokenError, ValidationError, ValueError) as e:
            raise UnauthorizedError("Invalid session token") from e


session_tokens = SessionTokenManager(
    settings.session_secret,
    timedelta(days=settings.session_max_age_days),
    settings.algorithm,
)
login_tokens = SessionTokenManager(
    settings.jwt_secret,
    timedelta(minutes=settings.login_token_expire_minutes),
    settings.algorithm,
)


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def read_session(request: Request) -> SessionClaims | None:
    """Decode whichever session the request carries, or return None.

    The provider session (cookie or bearer header) wins over the standalone
    login cookie.
    """
    candidates = (
        (request.cookies.get(settings.session_cookie_name), session_tokens),
        (_bearer_token(request), session_tokens),
        (request.cookies.get(settings.login_cookie_name), login_tokens),
    )
    for token, manager in candidates:
        if not token:
            continue
        try:
            return manager.decode(token)
        except UnauthorizedError:
            logger.debug("Rejected session token on %s", request.url.path)
    return None
