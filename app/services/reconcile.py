"""Detect and repair drift between the asset index and the asset store."""

import logging
import time
from dataclasses import dataclass, field

from app.core.errors import AssetFileMissingError
from app.services.asset_index import AssetIndex
from app.services.asset_store import LocalAssetStore

logger = logging.getLogger(__name__)


@dataclass
class DriftReport:
    # Index rows whose file is gone: (asset id, storage key).
    missing_files: list[tuple[int, str]] = field(default_factory=list)
    # Files older than the grace window with no index row.
    orphan_files: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.missing_files and not self.orphan_files


def find_drift(
    index: AssetIndex,
    store: LocalAssetStore,
    grace_minutes: int,
    now: float | None = None,
) -> DriftReport:
    """
    Compare index rows against files on disk.

    Files younger than grace_minutes are ignored: an upload in progress has
    written its file but may not have inserted its row yet.
    """
    report = DriftReport()
    indexed_keys: set[str] = set()
    for record in index.list_all():
        indexed_keys.add(record.storage_key)
        if not store.exists(record.storage_key):
            report.missing_files.append((record.id, record.storage_key))

    cutoff = (now if now is not None else time.time()) - grace_minutes * 60
    for key in store.list_keys():
        if key in indexed_keys:
            continue
        try:
            if store.modified_at(key) <= cutoff:
                report.orphan_files.append(key)
        except FileNotFoundError:
            continue
    return report


def repair_drift(
    index: AssetIndex,
    store: LocalAssetStore,
    report: DriftReport,
) -> tuple[int, int]:
    """
    Drop index rows without files and delete orphan files.

    Returns (records_removed, files_removed). Idempotent: safe to run repeatedly.
    """
    records_removed = 0
    for asset_id, storage_key in report.missing_files:
        if store.exists(storage_key):
            continue
        if index.get(asset_id) is None:
            continue
        index.delete_by_id(asset_id)
        records_removed += 1

    files_removed = 0
    for key in report.orphan_files:
        try:
            store.remove(key)
        except AssetFileMissingError:
            continue
        files_removed += 1

    if records_removed or files_removed:
        logger.info(
            "Drift repaired: records_removed=%s, files_removed=%s",
            records_removed,
            files_removed,
        )
    return records_removed, files_removed
