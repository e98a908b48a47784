"""ORM model for uploaded image metadata (the asset index)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base

# Closed set of display categories; order matches the site navigation.
IMAGE_CATEGORIES: tuple[str, ...] = (
    "facades",
    "restauration",
    "immeuble",
    "professionel",
    "appartement",
    "fabrication",
)


class ImageAsset(Base):
    """
    One uploaded image: storage key in the asset store plus display metadata.

    original_name is for display only; the file lives at UPLOAD_DIR/storage_key.
    """

    __tablename__ = "image_assets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    storage_key = Column(String(255), nullable=False, unique=True, index=True)
    original_name = Column(String(512), nullable=False, default="")
    category = Column(String(32), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
