"""Login providers.

A closed set of variants, all selected from configuration by
:func:`build_providers`:

* :class:`CredentialsProvider` checks an email and password against the
  credential store.
* :class:`GoogleProvider` and :class:`GitHubProvider` run the OAuth 2.0
  authorization-code flow and hand back an :class:`OAuthProfile`.
"""

import logging
from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import urlencode

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.security import DUMMY_PASSWORD_HASH, SessionClaims, verify_password
from app.domains.user.service import UserService
from app.exceptions.user import InvalidCredentialsError

logger = logging.getLogger(__name__)


class OAuthError(Exception):
    """Raised when an OAuth handshake cannot be completed."""


@dataclass(frozen=True)
class OAuthProfile:
    """Identity returned by an OAuth provider."""

    provider: str
    email: str
    name: str | None = None
    image: str | None = None


class AuthProvider:
    """Common shape of every provider."""

    id: ClassVar[str]
    name: ClassVar[str]
    type: ClassVar[str]


class CredentialsProvider(AuthProvider):
    id = "credentials"
    name = "Credentials"
    type = "credentials"

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> SessionClaims:
        """Check an email/password pair.

        Every failure raises the same error so callers cannot tell whether the
        email exists.

        Raises:
            InvalidCredentialsError: On any mismatch
        """
        user = await UserService(db).get_user_by_email(email)
        if user is None or not user.password:
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("Credential login failed: unknown email or no password set")
            raise InvalidCredentialsError()
        password_ok = verify_password(password, user.password)
        if not user.is_verified:
            logger.info("Credential login failed: user %s not verified", user.id)
            raise InvalidCredentialsError()
        if not password_ok:
            logger.info("Credential login failed: bad password for user %s", user.id)
            raise InvalidCredentialsError()
        return SessionClaims.for_user(user)


class OAuthProvider(AuthProvider):
    """Authorization-code flow shared by the OAuth providers."""

    type = "oauth"
    authorize_url: ClassVar[str]
    token_url: ClassVar[str]
    userinfo_url: ClassVar[str]
    scope: ClassVar[str]

    def __init__(self, client_id: str, client_secret: str):
        self.client_id = client_id
        self.client_secret = client_secret

    def extra_authorize_params(self) -> dict[str, str]:
        return {}

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
            **self.extra_authorize_params(),
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, client: httpx.AsyncClient, code: str, redirect_uri: str) -> str:
        """Trade an authorization code for an access token."""
        response = await client.post(
            self.token_url,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": redirect_uri,
            },
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        access_token = response.json().get("access_token")
        if not access_token:
            raise OAuthError(f"{self.id} token response has no access_token")
        return access_token

    async def fetch_profile(self, client: httpx.AsyncClient, access_token: str) -> OAuthProfile:
        raise NotImplementedError

    async def authenticate(
        self, client: httpx.AsyncClient, code: str, redirect_uri: str
    ) -> OAuthProfile:
        """Complete the handshake and return the provider's view of the user.

        Raises:
            OAuthError: If the provider rejects the code or returns no email
        """
        try:
            access_token = await self.exchange_code(client, code, redirect_uri)
            profile = await self.fetch_profile(client, access_token)
        except (httpx.HTTPError, ValueError) as e:
            raise OAuthError(f"{self.id} handshake failed: {e}") from e
        if not profile.email:
            raise OAuthError(f"{self.id} returned no email address")
        return profile


class GoogleProvider(OAuthProvider):
    id = "google"
    name = "Google"
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    userinfo_url = "https://openidconnect.googleapis.com/v1/userinfo"
    scope = "openid email profile"

    def extra_authorize_params(self) -> dict[str, str]:
        return {"prompt": "consent", "access_type": "offline"}

    async def fetch_profile(self, client: httpx.AsyncClient, access_token: str) -> OAuthProfile:
        response = await client.get(
            self.userinfo_url, headers={"Authorization": f"Bearer {access_token}"}
        )
        response.raise_for_status()
        data = response.json()
        return OAuthProfile(
            provider=self.id,
            email=data.get("email") or "",
            name=data.get("name"),
            image=data.get("picture"),
        )


class GitHubProvider(OAuthProvider):
    id = "github"
    name = "GitHub"
    authorize_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    userinfo_url = "https://api.github.com/user"
    emails_url = "https://api.github.com/user/emails"
    scope = "read:user user:email"

    async def fetch_profile(self, client: httpx.AsyncClient, access_token: str) -> OAuthProfile:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github+json",
        }
        response = await client.get(self.userinfo_url, headers=headers)
        response.raise_for_status()
        data = response.json()

        email = data.get("email")
        if not email:
            # private email: pick the primary verified address
            emails = await client.get(self.emails_url, headers=headers)
            emails.raise_for_status()
            primary = [e for e in emails.json() if e.get("primary") and e.get("verified")]
            email = primary[0]["email"] if primary else None

        return OAuthProfile(
            provider=self.id,
            email=email or "",
            name=data.get("name") or data.get("login"),
            image=data.get("avatar_url"),
        )


OAUTH_PROVIDER_CLASSES: tuple[type[OAuthProvider], ...] = (GoogleProvider, GitHubProvider)


def build_providers(config: Settings) -> dict[str, AuthProvider]:
    """Credentials is always on; an OAuth provider needs both id and secret."""
    providers: dict[str, AuthProvider] = {CredentialsProvider.id: CredentialsProvider()}
    for provider_cls in OAUTH_PROVIDER_CLASSES:
        credentials = config.oauth_credentials(provider_cls.id)
        if credentials:
            providers[provider_cls.id] = provider_cls(*credentials)
        else:
            logger.debug("OAuth provider %s disabled: missing credentials", provider_cls.id)
    return providers
