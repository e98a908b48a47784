"""Pydantic request/response schemas."""

from app.schemas.assets import ImageAssetOut, ImageCategory, UploadResponse
from app.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    UserSummary,
)
from app.schemas.contact import ContactRequest
from app.schemas.health import HealthResponse
from app.schemas.listings import ServiceListingOut, ServiceListingsResponse

__all__ = [
    "AuthResponse",
    "ContactRequest",
    "ForgotPasswordRequest",
    "HealthResponse",
    "ImageAssetOut",
    "ImageCategory",
    "LoginRequest",
    "MessageResponse",
    "ServiceListingOut",
    "ServiceListingsResponse",
    "SignupRequest",
    "UploadResponse",
    "UserSummary",
]
