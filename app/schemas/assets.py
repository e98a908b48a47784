"""Request/response schemas for image asset endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ImageCategory = Literal[
    "facades",
    "restauration",
    "immeuble",
    "professionel",
    "appartement",
    "fabrication",
]


class ImageAssetOut(BaseModel):
    """One index record; url is where the bytes are served from."""

    id: int
    storage_key: str
    original_name: str
    category: ImageCategory
    created_at: datetime
    url: str = Field(..., description="Public path of the stored file")


class UploadResponse(BaseModel):
    """Response after a batch upload; errors is non-empty on partial success."""

    message: str
    images: list[ImageAssetOut] = Field(default_factory=list)
    errors: list[str] = Field(
        default_factory=list,
        description="Per-file error messages (partial success).",
    )
    skipped: int = Field(
        default=0,
        ge=0,
        description="Files not attempted after the first failure.",
    )
