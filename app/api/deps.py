"""Shared FastAPI dependencies: credential store, access guard, asset services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import TokenService, get_token_service
from app.models.user import ROLE_ADMIN, User
from app.services.access import authenticate, require_role
from app.services.asset_index import AssetIndex
from app.services.asset_manager import AssetManager
from app.services.asset_store import LocalAssetStore
from app.services.credentials import CredentialStore

security = HTTPBearer(auto_error=False)


def get_credential_store(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CredentialStore:
    return CredentialStore(
        db,
        admin_email=settings.ADMIN_EMAIL,
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> User:
    """Dependency: require a valid Bearer JWT and return the current user. Raises 401 otherwise."""
    raw_token = credentials.credentials if credentials is not None else None
    return authenticate(raw_token, tokens, store)


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    return require_role(current_user, ROLE_ADMIN)


def get_asset_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> LocalAssetStore:
    return LocalAssetStore(settings.UPLOAD_DIR)


def get_asset_manager(
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[LocalAssetStore, Depends(get_asset_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AssetManager:
    return AssetManager(
        store,
        AssetIndex(db),
        strategy=settings.UPLOAD_BATCH_STRATEGY,
        max_files=settings.MAX_FILES_PER_UPLOAD,
    )


def require_asset_writer(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User | None:
    """Admin gate for image upload/delete; open when ASSETS_REQUIRE_ADMIN is false."""
    if not settings.ASSETS_REQUIRE_ADMIN:
        return None
    raw_token = credentials.credentials if credentials is not None else None
    user = authenticate(raw_token, tokens, store)
    return require_role(user, ROLE_ADMIN)
