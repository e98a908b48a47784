"""Asset index: metadata rows mapping storage keys to category and original name."""

from sqlalchemy.orm import Session

from app.core.errors import AssetNotFoundError, InvalidCategoryError
from app.models.image_asset import IMAGE_CATEGORIES, ImageAsset


def validate_category(category: str) -> str:
    """Return category unchanged if it is one of IMAGE_CATEGORIES; else raise InvalidCategoryError."""
    if category not in IMAGE_CATEGORIES:
        raise InvalidCategoryError(category)
    return category


class AssetIndex:
    """Single-record reads and writes on the image_assets table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert(self, storage_key: str, original_name: str, category: str) -> ImageAsset:
        validate_category(category)
        record = ImageAsset(
            storage_key=storage_key,
            original_name=original_name,
            category=category,
        )
        self.session.add(record)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(record)
        return record

    def list_by_category(self, category: str) -> list[ImageAsset]:
        """Newest first; id breaks ties between rows created in the same instant."""
        validate_category(category)
        return (
            self.session.query(ImageAsset)
            .filter(ImageAsset.category == category)
            .order_by(ImageAsset.created_at.desc(), ImageAsset.id.desc())
            .all()
        )

    def get(self, asset_id: int) -> ImageAsset | None:
        return self.session.get(ImageAsset, asset_id)

    def delete_by_id(self, asset_id: int) -> ImageAsset:
        record = self.get(asset_id)
        if record is None:
            raise AssetNotFoundError("Not found")
        self.session.delete(record)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return record

    def list_all(self) -> list[ImageAsset]:
        return self.session.query(ImageAsset).order_by(ImageAsset.id).all()
