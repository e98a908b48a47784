"""Test environment: settings need JWT_SECRET and a database URL before app modules import."""

import os
import tempfile

_TEST_ROOT = tempfile.mkdtemp(prefix="superstaff-tests-")

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_ROOT}/app.db")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_TEST_ROOT, "uploads"))
os.environ.setdefault("ADMIN_EMAIL", "admin@superstaff.fr")
os.environ.setdefault("BCRYPT_ROUNDS", "10")
