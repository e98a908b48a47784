"""
CLI entrypoint for the asset drift check. Run from cron, e.g.:

  python -m app.reconcile            # report only
  python -m app.reconcile --repair   # drop dangling rows and orphan files

Or nightly: 0 3 * * * cd /path/to/superstaff && .venv/bin/python -m app.reconcile --repair
"""

import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.asset_index import AssetIndex
from app.services.asset_store import LocalAssetStore
from app.services.reconcile import find_drift, repair_drift

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Report drift between image_assets rows and UPLOAD_DIR; optionally repair it."""
    parser = argparse.ArgumentParser(description="Check asset index against the upload directory.")
    parser.add_argument(
        "--repair",
        action="store_true",
        help="Delete index rows whose file is missing and files with no index row.",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    store = LocalAssetStore(settings.UPLOAD_DIR)
    db = SessionLocal()
    try:
        index = AssetIndex(db)
        report = find_drift(index, store, grace_minutes=settings.ORPHAN_GRACE_MINUTES)
        logger.info(
            "Drift check: missing_files=%s, orphan_files=%s",
            len(report.missing_files),
            len(report.orphan_files),
        )
        for asset_id, key in report.missing_files:
            logger.info("Index row without file: id=%s key=%s", asset_id, key)
        for key in report.orphan_files:
            logger.info("File without index row: key=%s", key)
        if args.repair and not report.clean:
            records_removed, files_removed = repair_drift(index, store, report)
            logger.info(
                "Repair completed: records_removed=%s, files_removed=%s",
                records_removed,
                files_removed,
            )
        return 0
    except Exception as e:
        logger.exception("Drift check failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
