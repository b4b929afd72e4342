# app/domains/user/service.py
import logging
import secrets
from datetime import timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.exceptions.user import InvalidTokenError, UserAlreadyExistsError
from models import User
from models.base import utcnow

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "User Email already exists"
USERNAME_TAKEN_MESSAGE = "UserName already in use. Please Try another"
TOKEN_LIFETIME = timedelta(hours=1)


class UserService:
    """Credential store over the ``users`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        result = await self.db.execute(select(User).where(User.email == email.strip()))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        result = await self.db.execute(select(User).where(User.username == username.strip()))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        username: str,
        email: str,
        password: str | None = None,
        is_verified: bool = False,
        profile_picture: str | None = None,
    ) -> User:
        """Create a new user.

        The plaintext password is hashed here and never stored.

        Raises:
            UserAlreadyExistsError: If the email or username is taken
        """
        email = email.strip()
        username = username.strip()

        if await self.get_user_by_email(email):
            raise UserAlreadyExistsError(EMAIL_TAKEN_MESSAGE, field="email")
        if await self.get_user_by_username(username):
            raise UserAlreadyExistsError(USERNAME_TAKEN_MESSAGE, field="username")

        user = User(
            username=username,
            email=email,
            password=hash_password(password) if password else None,
            is_verified=is_verified,
        )
        if profile_picture:
            user.profile_picture = profile_picture

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            # lost a race against a concurrent signup
            await self.db.rollback()
            logger.info("Duplicate user rejected by database: %s", e.orig)
            raise UserAlreadyExistsError(EMAIL_TAKEN_MESSAGE) from e
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Created user %s", user.id)
        return user

    async def save(self, user: User) -> User:
        """Persist changes made to a loaded user."""
        try:
            user.updated_at = utcnow()
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def mark_verified(self, user: User) -> User:
        user.is_verified = True
        user.verify_token = None
        user.verify_token_expiry = None
        return await self.save(user)

    async def update_profile(
        self,
        user: User,
        bio: str | None = None,
        profile_picture: str | None = None,
        social_links: dict[str, str] | None = None,
    ) -> User:
        """Update profile metadata; None leaves a field unchanged."""
        if bio is not None:
            user.bio = bio
        if profile_picture is not None:
            user.profile_picture = profile_picture
        if social_links is not None:
            user.social_links = dict(social_links)
        return await self.save(user)

    # ----- email verification -----

    async def issue_verify_token(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        user.verify_token = token
        user.verify_token_expiry = utcnow() + TOKEN_LIFETIME
        await self.save(user)
        return token

    async def verify_email(self, token: str) -> User:
        """Confirm an email address from a verification token.

        Raises:
            InvalidTokenError: If the token is unknown or expired
        """
        result = await self.db.execute(select(User).where(User.verify_token == token))
        user = result.scalar_one_or_none()
        if not user or not user.verify_token_expiry or user.verify_token_expiry < utcnow():
            raise InvalidTokenError()
        return await self.mark_verified(user)

    # ----- password reset -----

    async def issue_password_reset(self, email: str) -> tuple[User, str] | None:
        """Store a reset token for the account, if there is one."""
        user = await self.get_user_by_email(email)
        if not user:
            return None
        token = secrets.token_urlsafe(32)
        user.forgot_password_token = token
        user.forgot_password_token_expiry = utcnow() + TOKEN_LIFETIME
        await self.save(user)
        return user, token

    async def reset_password(self, token: str, new_password: str) -> User:
        """Replace the password hash using a reset token.

        Raises:
            InvalidTokenError: If the token is unknown or expired
        """
        result = await self.db.execute(select(User).where(User.forgot_password_token == token))
        user = result.scalar_one_or_none()
        if (
            not user
            or not user.forgot_password_token_expiry
            or user.forgot_password_token_expiry < utcnow()
        ):
            raise InvalidTokenError()

        user.password = hash_password(new_password)
        user.forgot_password_token = None
        user.forgot_password_token_expiry = None
        return await self.save(user)
