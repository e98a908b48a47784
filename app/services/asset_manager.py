"""Asset manager: upload and delete across the asset store and asset index as one logical operation."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from app.core.errors import (
    AssetFileMissingError,
    AssetNotFoundError,
    BatchUploadError,
    EmptyBatchError,
)
from app.models.image_asset import ImageAsset
from app.services.asset_index import AssetIndex, validate_category
from app.services.asset_store import LocalAssetStore

logger = logging.getLogger(__name__)

BatchStrategy = Literal["best_effort", "all_or_nothing"]

DEFAULT_MAX_FILES = 10


@dataclass
class UploadResult:
    """Outcome of a batch upload; errors is non-empty on partial success."""

    records: list[ImageAsset] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    skipped: int = 0

    @property
    def complete(self) -> bool:
        return not self.errors and self.skipped == 0


class AssetManager:
    """
    Orchestrates store.put + index.insert per file, and file removal + index delete.

    The manager holds no state of its own. Batches are processed sequentially
    and stop at the first failing file. With strategy "best_effort" files
    already persisted stay persisted; with "all_or_nothing" they are removed
    again and BatchUploadError is raised.
    """

    def __init__(
        self,
        store: LocalAssetStore,
        index: AssetIndex,
        strategy: BatchStrategy = "best_effort",
        max_files: int = DEFAULT_MAX_FILES,
    ) -> None:
        self.store = store
        self.index = index
        self.strategy = strategy
        self.max_files = max_files

    def upload(self, files: Sequence[tuple[bytes, str]], category: str) -> UploadResult:
        validate_category(category)
        if not files:
            raise EmptyBatchError("No files uploaded")
        if len(files) > self.max_files:
            raise EmptyBatchError(f"At most {self.max_files} files per upload.")

        result = UploadResult()
        for position, (data, original_name) in enumerate(files):
            try:
                record = self._store_one(data, original_name, category)
            except Exception as e:
                logger.exception(
                    "Asset upload failed",
                    extra={
                        "category": category,
                        "file_index": position,
                        "stored_count": len(result.records),
                    },
                )
                result.errors.append(f"Failed to store {original_name!r}")
                result.skipped = len(files) - position - 1
                if self.strategy == "all_or_nothing":
                    self._roll_back(result.records)
                    raise BatchUploadError(
                        "Upload failed; no files were kept."
                    ) from e
                break
            result.records.append(record)

        logger.info(
            "Asset upload completed",
            extra={
                "category": category,
                "upload_status": "success" if result.complete else "partial",
                "stored_count": len(result.records),
                "error_count": len(result.errors),
                "skipped_count": result.skipped,
            },
        )
        return result

    def _store_one(self, data: bytes, original_name: str, category: str) -> ImageAsset:
        key = self.store.put(data, original_name)
        try:
            return self.index.insert(key, original_name, category)
        except Exception:
            # The file has no record yet; remove it so it does not become an orphan.
            try:
                self.store.remove(key)
            except Exception:
                logger.warning("Could not remove orphan file after index failure: %s", key)
            raise

    def _roll_back(self, records: list[ImageAsset]) -> None:
        for record in reversed(records):
            try:
                self.delete(record.id)
            except Exception:
                logger.exception("Rollback of asset %s failed", record.id)
        records.clear()

    def delete(self, asset_id: int) -> ImageAsset:
        """
        Remove the file, then the index record.

        A file that is already gone does not stop the index cleanup. Any other
        storage failure propagates (AssetStoreError) and the record is kept.
        """
        record = self.index.get(asset_id)
        if record is None:
            raise AssetNotFoundError("Not found")
        storage_key = record.storage_key
        try:
            self.store.remove(storage_key)
        except AssetFileMissingError:
            logger.warning(
                "Asset file already missing; removing index record",
                extra={"asset_id": asset_id, "storage_key": storage_key},
            )
        deleted = self.index.delete_by_id(asset_id)
        logger.info("Asset deleted", extra={"asset_id": asset_id, "storage_key": storage_key})
        return deleted
