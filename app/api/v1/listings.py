"""Service listing endpoints: public list, admin-only create/update/delete."""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import AssetFileMissingError, AssetStoreError, InputValidationError
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.listings import ServiceListingOut, ServiceListingsResponse
from app.services import listings
from app.services.asset_store import LocalAssetStore

logger = logging.getLogger(__name__)

router = APIRouter()

# Listing images live in their own subdirectory so asset reconciliation ignores them.
LISTING_IMAGE_SUBDIR = "services"
LISTING_IMAGE_URL_PREFIX = f"/uploads/{LISTING_IMAGE_SUBDIR}/"


def get_listing_image_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> LocalAssetStore:
    return LocalAssetStore(Path(settings.UPLOAD_DIR) / LISTING_IMAGE_SUBDIR)


def _store_image(
    image: UploadFile | None,
    store: LocalAssetStore,
    settings: Settings,
) -> str | None:
    """Persist an uploaded listing image; return its public path, or None if no file was sent."""
    if image is None or not image.filename:
        return None
    # Read one byte past the limit to detect oversized parts.
    content = image.file.read(settings.MAX_UPLOAD_FILE_BYTES + 1)
    if len(content) > settings.MAX_UPLOAD_FILE_BYTES:
        raise InputValidationError(
            f"File size must not exceed {settings.MAX_UPLOAD_FILE_BYTES // (1024 * 1024)} MB."
        )
    key = store.put(content, image.filename)
    return LISTING_IMAGE_URL_PREFIX + key


def _discard_image(store: LocalAssetStore, image_path: str | None) -> None:
    """Remove a stored listing image. External URLs and already-missing files are left alone."""
    if not image_path or not image_path.startswith(LISTING_IMAGE_URL_PREFIX):
        return
    key = image_path[len(LISTING_IMAGE_URL_PREFIX):]
    try:
        store.remove(key)
    except AssetFileMissingError:
        logger.info("Listing image already gone: %s", key)
    except AssetStoreError:
        logger.warning("Could not remove listing image: %s", key)


@router.get("", response_model=ServiceListingsResponse)
def list_services(
    db: Annotated[Session, Depends(get_db)],
) -> ServiceListingsResponse:
    return ServiceListingsResponse(
        services=[ServiceListingOut.model_validate(s) for s in listings.list_active(db)]
    )


@router.post("", response_model=ServiceListingOut, status_code=status.HTTP_201_CREATED)
def create_service(
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[LocalAssetStore, Depends(get_listing_image_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    _admin: Annotated[User, Depends(require_admin)],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    link: Annotated[str | None, Form()] = None,
    image_url: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> ServiceListingOut:
    """
    Create a listing (admin only). Send multipart/form-data with title,
    description, optional link, and either an `image` file or an `image_url`.
    """
    if not title or not title.strip() or not description or not description.strip():
        raise InputValidationError("Title and description are required.")
    stored = _store_image(image, store, settings)
    image_path = stored or (image_url or "").strip()
    if not image_path:
        raise InputValidationError("An image file or image_url is required.")
    try:
        listing = listings.create_listing(db, title, description, image_path, link)
    except Exception:
        db.rollback()
        _discard_image(store, stored)
        raise
    return ServiceListingOut.model_validate(listing)


@router.put("/{listing_id}", response_model=ServiceListingOut)
def update_service(
    listing_id: int,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[LocalAssetStore, Depends(get_listing_image_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    _admin: Annotated[User, Depends(require_admin)],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    link: Annotated[str | None, Form()] = None,
    image_url: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> ServiceListingOut:
    """
    Update the fields that are sent (admin only). 404 if the listing does not exist.
    A replaced image that was uploaded here is deleted from disk.
    """
    if title is not None and not title.strip():
        raise InputValidationError("Title must not be empty.")
    if description is not None and not description.strip():
        raise InputValidationError("Description must not be empty.")
    previous_image = listings.get_listing(db, listing_id).image
    stored = _store_image(image, store, settings)
    image_path = stored
    if image_path is None and image_url is not None and image_url.strip():
        image_path = image_url.strip()
    try:
        listing = listings.update_listing(
            db,
            listing_id,
            title=title,
            description=description,
            image=image_path,
            link=link,
        )
    except Exception:
        db.rollback()
        _discard_image(store, stored)
        raise
    if image_path is not None and image_path != previous_image:
        _discard_image(store, previous_image)
    return ServiceListingOut.model_validate(listing)


@router.delete("/{listing_id}", response_model=MessageResponse)
def delete_service(
    listing_id: int,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[LocalAssetStore, Depends(get_listing_image_store)],
    _admin: Annotated[User, Depends(require_admin)],
) -> MessageResponse:
    image_path = listings.delete_listing(db, listing_id)
    _discard_image(store, image_path)
    return MessageResponse(message="Service deleted")
