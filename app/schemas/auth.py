"""Session and sign-in schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from .base import BaseSchema


class CredentialsSignInRequest(BaseSchema):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    callback_url: Optional[str] = None


class SessionUser(BaseSchema):
    id: str
    username: str
    email: str
    is_verified: bool


class SignInResponse(BaseSchema):
    url: str
    user: SessionUser


class SessionResponse(BaseSchema):
    user: SessionUser
    expires: Optional[datetime] = None


class ProviderInfo(BaseSchema):
    id: str
    name: str
    type: Literal["credentials", "oauth"]
    signin_url: str
    callback_url: str


class SignOutResponse(BaseSchema):
    url: str = "/login"
