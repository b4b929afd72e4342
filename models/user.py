"""
Provides the User model for the application's database schema.

A user can log in with a password, through an OAuth provider, or both.
Accounts provisioned through OAuth have no password hash.

Attributes
----------
username : sqlalchemy.Column
    Unique handle, 3 to 30 characters.
email : sqlalchemy.Column
    Unique email address.
password : sqlalchemy.Column
    bcrypt hash, or NULL for OAuth-only accounts.
is_verified : sqlalchemy.Column
    Whether the email address has been confirmed.

Relationships
-------------
chats : sqlalchemy.orm.relationship
    One-to-many relationship with the `Chat` model.
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from .base import BaseModel

DEFAULT_PROFILE_PICTURE = "https://example.com/default-profile-picture.png"


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar username: Unique username.
    :type username: str
    :ivar email: Unique email address.
    :type email: str
    :ivar password: Salted bcrypt hash, absent for OAuth-only accounts.
    :type password: str | None
    :ivar is_verified: Email verification flag.
    :type is_verified: bool
    :ivar is_admin: Administrative flag.
    :type is_admin: bool
    """

    __tablename__ = "users"

    username = Column(String(30), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)

    # Profile metadata
    bio = Column(String(500), default="", nullable=False)
    profile_picture = Column(String(1024), default=DEFAULT_PROFILE_PICTURE)
    social_links = Column(JSON, default=dict, nullable=False)

    # One-shot tokens
    forgot_password_token = Column(String(255), nullable=True, index=True)
    forgot_password_token_expiry = Column(DateTime, nullable=True)
    verify_token = Column(String(255), nullable=True, index=True)
    verify_token_expiry = Column(DateTime, nullable=True)

    # Relationships
    chats = relationship("Chat", back_populates="user", cascade="all, delete-orphan")

    @property
    def has_password(self) -> bool:
        return bool(self.password)
