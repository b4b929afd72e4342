"""User-related Pydantic schemas for request/response validation."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .base import BaseModelSchema, BaseSchema

# bcrypt ignores everything after 72 bytes
MAX_PASSWORD_BYTES = 72


def _check_password(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")
    return v


class UserSignupRequest(BaseSchema):
    """Schema for user signup request."""

    username: str = Field(..., min_length=3, max_length=30, description="Unique username")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=6, description="Plaintext password")

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)


class UserLoginRequest(BaseSchema):
    """Schema for the standalone username/password login."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModelSchema):
    """Sanitized user data; never carries the password hash or tokens."""

    username: str
    email: str
    is_verified: bool
    is_admin: bool
    bio: str = ""
    profile_picture: Optional[str] = None
    social_links: dict[str, str] = Field(default_factory=dict)


class SignupResponse(BaseSchema):
    """Schema for signup response."""

    message: str = "User created successfully"
    success: bool = True
    user: UserResponse


class LoginResponse(BaseSchema):
    """Schema for login response."""

    message: str = "Login successful"
    success: bool = True
    user: UserResponse


class UserUpdateRequest(BaseSchema):
    """Schema for profile edits."""

    bio: Optional[str] = Field(None, max_length=500)
    profile_picture: Optional[str] = Field(None, max_length=1024)
    social_links: Optional[dict[str, str]] = None


class VerifyEmailRequest(BaseSchema):
    token: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseSchema):
    email: EmailStr


class ResetPasswordRequest(BaseSchema):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)
