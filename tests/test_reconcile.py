"""Tests for app.services.reconcile: drift detection and repair between index and store."""

import os
import tempfile
import time
import unittest
from pathlib import Path

from _support import make_session_factory

from app.models import ImageAsset
from app.services.asset_index import AssetIndex
from app.services.asset_manager import AssetManager
from app.services.asset_store import LocalAssetStore
from app.services.reconcile import find_drift, repair_drift


class TestReconcile(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.factory = make_session_factory(self._tmp.name)
        self.db = self.factory()
        self.store = LocalAssetStore(Path(self._tmp.name) / "uploads")
        self.index = AssetIndex(self.db)
        self.manager = AssetManager(self.store, self.index)

    def tearDown(self) -> None:
        self.db.close()
        self.factory.kw["bind"].dispose()
        self._tmp.cleanup()

    def _age(self, key: str, seconds: int) -> None:
        past = time.time() - seconds
        os.utime(self.store.path_for(key), (past, past))

    def test_consistent_state_is_clean(self) -> None:
        self.manager.upload([(b"a", "a.jpg"), (b"b", "b.jpg")], "facades")
        report = find_drift(self.index, self.store, grace_minutes=0)
        self.assertTrue(report.clean)

    def test_reports_record_without_file(self) -> None:
        record = self.manager.upload([(b"a", "a.jpg")], "facades").records[0]
        self.store.path_for(record.storage_key).unlink()
        report = find_drift(self.index, self.store, grace_minutes=0)
        self.assertEqual(report.missing_files, [(record.id, record.storage_key)])
        self.assertEqual(report.orphan_files, [])

    def test_orphan_file_respects_grace_window(self) -> None:
        key = self.store.put(b"orphan", "orphan.jpg")
        report = find_drift(self.index, self.store, grace_minutes=60)
        self.assertEqual(report.orphan_files, [])

        self._age(key, 2 * 60 * 60)
        report = find_drift(self.index, self.store, grace_minutes=60)
        self.assertEqual(report.orphan_files, [key])

    def test_repair_removes_both_kinds_and_is_idempotent(self) -> None:
        record = self.manager.upload([(b"a", "a.jpg")], "facades").records[0]
        kept = self.manager.upload([(b"k", "keep.jpg")], "facades").records[0]
        self.store.path_for(record.storage_key).unlink()
        orphan = self.store.put(b"orphan", "orphan.jpg")
        self._age(orphan, 2 * 60 * 60)

        report = find_drift(self.index, self.store, grace_minutes=60)
        self.assertEqual(repair_drift(self.index, self.store, report), (1, 1))

        self.assertEqual(
            [r.storage_key for r in self.db.query(ImageAsset).all()],
            [kept.storage_key],
        )
        self.assertEqual(self.store.list_keys(), [kept.storage_key])
        self.assertEqual(repair_drift(self.index, self.store, report), (0, 0))
        self.assertTrue(find_drift(self.index, self.store, grace_minutes=0).clean)


if __name__ == "__main__":
    unittest.main()
