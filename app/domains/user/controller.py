"""User account endpoints: signup, standalone login, profile, email flows."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_current_user
from app.core.security import (
    DUMMY_PASSWORD_HASH,
    SessionClaims,
    login_tokens,
    verify_password,
)
from app.database import get_db
from app.domains.user.service import UserService
from app.exceptions.user import InvalidCredentialsError
from app.schemas.base import MessageResponse
from app.schemas.user import (
    ForgotPasswordRequest,
    LoginResponse,
    ResetPasswordRequest,
    SignupResponse,
    UserLoginRequest,
    UserResponse,
    UserSignupRequest,
    UserUpdateRequest,
    VerifyEmailRequest,
)
from app.services.email_service import email_service
from models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: UserSignupRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    """Register a new user with a password.

    The account starts unverified; a verification link is mailed in the
    background.
    """
    user_service = UserService(db)
    user = await user_service.create_user(
        username=signup_data.username,
        email=str(signup_data.email),
        password=signup_data.password,
    )

    token = await user_service.issue_verify_token(user)
    background_tasks.add_task(
        email_service.send_verification_email, user.email, user.username, token
    )

    return SignupResponse(user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Username/password login issuing a short-lived token cookie.

    Unknown usernames and wrong passwords fail identically.
    """
    user = await UserService(db).get_user_by_username(login_data.username)
    has_hash = bool(user and user.password)
    password_ok = verify_password(
        login_data.password, user.password if has_hash else DUMMY_PASSWORD_HASH
    )
    if not has_hash or not password_ok:
        logger.info("Standalone login failed for username %r", login_data.username)
        raise InvalidCredentialsError()

    response.set_cookie(
        settings.login_cookie_name,
        login_tokens.issue(SessionClaims.for_user(user)),
        max_age=login_tokens.max_age_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )
    logger.info("Standalone login for user %s", user.id)
    return LoginResponse(user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the standalone login cookie."""
    response.delete_cookie(settings.login_cookie_name, path="/")
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return UserResponse.model_validate(current_user)


@router.put("/me", response_model=UserResponse)
async def update_current_user(
    update_data: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit profile metadata (bio, picture, social links)."""
    updated_user = await UserService(db).update_profile(
        current_user,
        bio=update_data.bio,
        profile_picture=update_data.profile_picture,
        social_links=update_data.social_links,
    )
    return UserResponse.model_validate(updated_user)


@router.post("/verifyemail", response_model=MessageResponse)
async def verify_email(body: VerifyEmailRequest, db: AsyncSession = Depends(get_db)):
    """Confirm an email address from the mailed token."""
    user = await UserService(db).verify_email(body.token)
    logger.info("Email verified for user %s", user.id)
    return MessageResponse(message="Email verified successfully")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    """Mail a reset link. The reply is the same whether the email exists or not."""
    issued = await UserService(db).issue_password_reset(str(body.email))
    if issued:
        user, token = issued
        background_tasks.add_task(
            email_service.send_password_reset_email, user.email, user.username, token
        )
    return MessageResponse(message="If that email is registered, a reset link has been sent")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    """Set a new password using a reset token."""
    user = await UserService(db).reset_password(body.token, body.password)
    logger.info("Password reset for user %s", user.id)
    return MessageResponse(message="Password reset successfully")
