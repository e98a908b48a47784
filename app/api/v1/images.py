"""Image asset endpoints: list by category, batch upload, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_asset_manager, require_asset_writer
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import EmptyBatchError, InputValidationError, InternalFailureError
from app.models.image_asset import ImageAsset
from app.models.user import User
from app.schemas.assets import ImageAssetOut, UploadResponse
from app.schemas.auth import MessageResponse
from app.services.asset_index import AssetIndex, validate_category
from app.services.asset_manager import AssetManager

router = APIRouter()

UPLOADS_URL_PREFIX = "/uploads"


def _to_out(record: ImageAsset) -> ImageAssetOut:
    return ImageAssetOut(
        id=record.id,
        storage_key=record.storage_key,
        original_name=record.original_name,
        category=record.category,
        created_at=record.created_at,
        url=f"{UPLOADS_URL_PREFIX}/{record.storage_key}",
    )


@router.get("/{category}", response_model=list[ImageAssetOut])
def list_images(
    category: str,
    db: Annotated[Session, Depends(get_db)],
) -> list[ImageAssetOut]:
    """Images in one category, newest first. 400 for an unknown category."""
    records = AssetIndex(db).list_by_category(category)
    return [_to_out(r) for r in records]


def _store_batch(
    manager: AssetManager,
    files: list[tuple[bytes, str]],
    category: str,
) -> UploadResponse:
    result = manager.upload(files, category)
    if not result.records:
        raise InternalFailureError("Upload failed.")
    message = (
        "Images uploaded successfully"
        if result.complete
        else "Some images could not be uploaded"
    )
    return UploadResponse(
        message=message,
        images=[_to_out(r) for r in result.records],
        errors=result.errors,
        skipped=result.skipped,
    )


@router.post("", response_model=UploadResponse)
async def upload_images(
    manager: Annotated[AssetManager, Depends(get_asset_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
    _writer: Annotated[User | None, Depends(require_asset_writer)],
    category: Annotated[str, Form()] = "",
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> UploadResponse:
    """
    Store a batch of images under one category.

    Send `multipart/form-data` with a `category` field and one or more `images`
    file parts. Files are stored in order; if one fails, earlier files stay
    stored (best_effort) and the response lists the error, or the whole batch
    is undone (all_or_nothing) and 500 is returned.
    """
    validate_category(category)
    uploads = [f for f in (images or []) if f.filename]
    if not uploads:
        raise EmptyBatchError("No files uploaded")
    if len(uploads) > settings.MAX_FILES_PER_UPLOAD:
        raise EmptyBatchError(f"At most {settings.MAX_FILES_PER_UPLOAD} files per upload.")

    files: list[tuple[bytes, str]] = []
    for upload in uploads:
        # Read one byte past the limit to detect oversized parts.
        content = await upload.read(settings.MAX_UPLOAD_FILE_BYTES + 1)
        if len(content) > settings.MAX_UPLOAD_FILE_BYTES:
            raise InputValidationError(
                f"File size must not exceed {settings.MAX_UPLOAD_FILE_BYTES // (1024 * 1024)} MB."
            )
        files.append((content, upload.filename or ""))

    # Disk writes and index reads/writes block; keep them off the event loop.
    return await run_in_threadpool(_store_batch, manager, files, category)


@router.delete("/{asset_id}", response_model=MessageResponse)
def delete_image(
    asset_id: int,
    manager: Annotated[AssetManager, Depends(get_asset_manager)],
    _writer: Annotated[User | None, Depends(require_asset_writer)],
) -> MessageResponse:
    """Remove the file and its index record. 404 if unknown, 503 if the file cannot be removed."""
    manager.delete(asset_id)
    return MessageResponse(message="Deleted successfully")
