"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.image_asset import IMAGE_CATEGORIES, ImageAsset
from app.models.service_listing import ServiceListing
from app.models.user import User

__all__ = ["Base", "IMAGE_CATEGORIES", "ImageAsset", "ServiceListing", "User"]
