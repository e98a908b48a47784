"""Signup, login, current identity, and the password-reset notice."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import get_credential_store, get_current_user
from app.core.errors import UnauthorizedError
from app.core.security import TokenService, get_token_service
from app.models.user import ROLE_ADMIN, User
from app.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    UserSummary,
)
from app.services.credentials import CredentialStore
from app.services.mailer import RESET_NOTICE_BODY, RESET_NOTICE_SUBJECT, Mailer, get_mailer

logger = logging.getLogger(__name__)
router = APIRouter()


def _auth_response(user: User, tokens: TokenService) -> AuthResponse:
    return AuthResponse(
        access_token=tokens.issue(user.id),
        token_type="bearer",
        user=UserSummary.model_validate(user),
        is_admin=user.role == ROLE_ADMIN,
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Create an account and return a JWT for it.
    Signing up with ADMIN_EMAIL grants the admin role. 409 if the email is taken.
    """
    user = store.create_user(body.name, body.email, body.password)
    return _auth_response(user, tokens)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    user = store.find_by_email(body.email)
    if not store.verify_password(user, body.password):
        raise UnauthorizedError("Invalid email or password.")
    return _auth_response(user, tokens)


@router.get("/me", response_model=UserSummary)
def me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserSummary:
    return UserSummary.model_validate(current_user)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    body: ForgotPasswordRequest,
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> MessageResponse:
    """Send the static reset notice. No reset token is issued."""
    mailer.send(str(body.email), RESET_NOTICE_SUBJECT, RESET_NOTICE_BODY)
    return MessageResponse(message="Reset link sent.")
