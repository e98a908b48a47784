"""Asset store: durable on-disk storage of uploaded bytes, addressed by generated keys."""

import logging
import os
import re
import time
import uuid
from pathlib import Path

from app.core.errors import AssetFileMissingError, AssetStoreError

logger = logging.getLogger(__name__)

MAX_NAME_SUFFIX_LEN = 100
MAX_KEY_ATTEMPTS = 5

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
# <epoch ms>-<12 hex>-<sanitized name>; no path separators, never starts with a dot.
_KEY_PATTERN = re.compile(r"^\d{13,}-[0-9a-f]{12}-[A-Za-z0-9._-]+$")


def sanitize_name(original_name: str) -> str:
    """Reduce an uploaded filename to a safe, human-traceable suffix."""
    base = os.path.basename((original_name or "").replace("\\", "/"))
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    if not cleaned:
        cleaned = "file"
    if len(cleaned) > MAX_NAME_SUFFIX_LEN:
        stem, dot, ext = cleaned.rpartition(".")
        if dot and 0 < len(ext) <= 10:
            cleaned = stem[: MAX_NAME_SUFFIX_LEN - len(ext) - 1] + "." + ext
        else:
            cleaned = cleaned[:MAX_NAME_SUFFIX_LEN]
    return cleaned


def generate_storage_key(original_name: str) -> str:
    """Timestamp + random component + original-name suffix."""
    millis = time.time_ns() // 1_000_000
    return f"{millis}-{uuid.uuid4().hex[:12]}-{sanitize_name(original_name)}"


def is_valid_key(storage_key: str) -> bool:
    return bool(storage_key) and _KEY_PATTERN.match(storage_key) is not None


class LocalAssetStore:
    """Stores each asset as one file directly under root."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, storage_key: str) -> Path:
        if not is_valid_key(storage_key):
            raise ValueError(f"Invalid storage key: {storage_key!r}")
        return self.root / storage_key

    def put(self, data: bytes, original_name: str) -> str:
        """
        Write bytes under a freshly generated key and fsync before returning.

        The file is opened exclusively, so a key collision is detected and
        retried with a new key rather than overwriting another upload.
        """
        for _ in range(MAX_KEY_ATTEMPTS):
            key = generate_storage_key(original_name)
            path = self.root / key
            try:
                fh = open(path, "xb")
            except FileExistsError:
                continue
            except OSError as e:
                logger.error("Could not create asset file %s: %s", path, e)
                raise AssetStoreError("Could not store file") from e
            try:
                with fh:
                    fh.write(data)
                    fh.flush()
                    os.fsync(fh.fileno())
            except OSError as e:
                logger.error("Could not write asset file %s: %s", path, e)
                self._discard(path)
                raise AssetStoreError("Could not store file") from e
            return key
        raise AssetStoreError("Could not allocate a unique storage key")

    def remove(self, storage_key: str) -> None:
        """
        Delete the bytes for storage_key.
        Raises AssetFileMissingError if already absent, AssetStoreError otherwise.
        """
        try:
            path = self.path_for(storage_key)
        except ValueError:
            raise AssetFileMissingError(storage_key) from None
        try:
            path.unlink()
        except FileNotFoundError:
            raise AssetFileMissingError(storage_key) from None
        except OSError as e:
            logger.error("Could not remove asset file %s: %s", path, e)
            raise AssetStoreError("Could not remove file; retry later") from e

    def exists(self, storage_key: str) -> bool:
        try:
            return self.path_for(storage_key).is_file()
        except ValueError:
            return False

    def list_keys(self) -> list[str]:
        """Keys of all files currently in the store (non-key files are ignored)."""
        return sorted(
            entry.name
            for entry in self.root.iterdir()
            if entry.is_file() and is_valid_key(entry.name)
        )

    def modified_at(self, storage_key: str) -> float:
        return self.path_for(storage_key).stat().st_mtime

    def _discard(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError:
            logger.warning("Could not discard partial file %s", path)


def check_upload_dir_writable(root: str | Path) -> bool:
    """Create and remove a scratch file to verify the upload directory accepts writes."""
    scratch = Path(root) / f".write-check-{uuid.uuid4().hex}"
    try:
        Path(root).mkdir(parents=True, exist_ok=True)
        scratch.write_bytes(b"")
        scratch.unlink()
        return True
    except OSError:
        return False
