"""Tests for app.services.credentials against a temporary SQLite database."""

import tempfile
import unittest

from _support import make_session_factory

from app.core.errors import ConflictError
from app.models.user import ROLE_ADMIN, ROLE_USER
from app.services.credentials import CredentialStore


class CredentialStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.factory = make_session_factory(self._tmp.name)
        self.db = self.factory()
        self.store = CredentialStore(self.db, admin_email="Admin@SuperStaff.fr", bcrypt_rounds=10)

    def tearDown(self) -> None:
        self.db.close()
        self.factory.kw["bind"].dispose()
        self._tmp.cleanup()


class TestCreateUser(CredentialStoreTestCase):
    def test_creates_user_with_hashed_password(self) -> None:
        user = self.store.create_user("Alice", "alice@superstaff.fr", "s3cret-pass")
        self.assertIsNotNone(user.id)
        self.assertEqual(user.role, ROLE_USER)
        self.assertNotEqual(user.password_hash, "s3cret-pass")
        self.assertTrue(self.store.verify_password(user, "s3cret-pass"))
        self.assertFalse(self.store.verify_password(user, "wrong-pass"))

    def test_admin_role_derived_from_admin_email(self) -> None:
        user = self.store.create_user("Boss", " admin@superstaff.fr ", "s3cret-pass")
        self.assertEqual(user.role, ROLE_ADMIN)
        self.assertEqual(user.email, "admin@superstaff.fr")

    def test_no_admin_email_configured_means_plain_users(self) -> None:
        store = CredentialStore(self.db, admin_email=None, bcrypt_rounds=10)
        user = store.create_user("Boss", "admin@superstaff.fr", "s3cret-pass")
        self.assertEqual(user.role, ROLE_USER)

    def test_duplicate_email_conflicts_and_keeps_first(self) -> None:
        first = self.store.create_user("Alice", "alice@superstaff.fr", "first-pass")
        with self.assertRaises(ConflictError):
            self.store.create_user("Mallory", "ALICE@superstaff.fr", "second-pass")

        reloaded = self.store.find_by_email("alice@superstaff.fr")
        self.assertEqual(reloaded.id, first.id)
        self.assertEqual(reloaded.name, "Alice")
        self.assertTrue(self.store.verify_password(reloaded, "first-pass"))

    def test_conflict_from_separate_session_is_enforced_by_database(self) -> None:
        other_db = self.factory()
        try:
            other = CredentialStore(other_db, bcrypt_rounds=10)
            other.create_user("Alice", "alice@superstaff.fr", "first-pass")
            with self.assertRaises(ConflictError):
                self.store.create_user("Alice Again", "alice@superstaff.fr", "second-pass")
        finally:
            other_db.close()


class TestLookups(CredentialStoreTestCase):
    def test_find_by_email_is_case_insensitive(self) -> None:
        user = self.store.create_user("Alice", "alice@superstaff.fr", "s3cret-pass")
        self.assertEqual(self.store.find_by_email("Alice@SuperStaff.fr").id, user.id)

    def test_find_by_id(self) -> None:
        user = self.store.create_user("Alice", "alice@superstaff.fr", "s3cret-pass")
        self.assertEqual(self.store.find_by_id(user.id).email, "alice@superstaff.fr")
        self.assertIsNone(self.store.find_by_id(user.id + 100))

    def test_unknown_email_returns_none(self) -> None:
        self.assertIsNone(self.store.find_by_email("nobody@superstaff.fr"))

    def test_verify_password_for_missing_user_is_false(self) -> None:
        self.assertFalse(self.store.verify_password(None, "whatever"))


if __name__ == "__main__":
    unittest.main()
