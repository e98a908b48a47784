"""Unit tests for app.services.access: authenticate and require_role."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import TokenService
from app.models.user import ROLE_ADMIN, ROLE_USER, User
from app.services.access import authenticate, require_role, strip_bearer


def _user(user_id: int = 1, role: str = ROLE_USER) -> User:
    return User(id=user_id, name="Test", email=f"u{user_id}@superstaff.fr", password_hash="x", role=role)


class TestStripBearer(unittest.TestCase):
    def test_strips_prefix_any_case(self) -> None:
        self.assertEqual(strip_bearer("Bearer abc"), "abc")
        self.assertEqual(strip_bearer("bearer abc"), "abc")
        self.assertEqual(strip_bearer("BEARER   abc "), "abc")

    def test_bare_token_unchanged(self) -> None:
        self.assertEqual(strip_bearer("abc.def.ghi"), "abc.def.ghi")

    def test_empty_is_none(self) -> None:
        self.assertIsNone(strip_bearer(None))
        self.assertIsNone(strip_bearer(""))
        self.assertIsNone(strip_bearer("Bearer "))
        self.assertIsNone(strip_bearer("bearer"))
        self.assertIsNone(strip_bearer("  BEARER  "))


class TestAuthenticate(unittest.TestCase):
    """authenticate resolves a token to a user or raises UnauthorizedError."""

    def setUp(self) -> None:
        self.tokens = TokenService("access-test-secret")
        self.store = MagicMock()

    def test_valid_token_returns_user(self) -> None:
        user = _user(5)
        self.store.find_by_id.return_value = user
        result = authenticate("Bearer " + self.tokens.issue(5), self.tokens, self.store)
        self.assertIs(result, user)
        self.store.find_by_id.assert_called_once_with(5)

    def test_missing_token(self) -> None:
        with self.assertRaises(UnauthorizedError):
            authenticate(None, self.tokens, self.store)
        self.store.find_by_id.assert_not_called()

    def test_scheme_without_token_is_not_authenticated(self) -> None:
        with self.assertRaises(UnauthorizedError) as ctx:
            authenticate("Bearer ", self.tokens, self.store)
        self.assertEqual(ctx.exception.message, "Not authenticated")
        self.store.find_by_id.assert_not_called()

    def test_invalid_token_does_not_touch_store(self) -> None:
        with self.assertRaises(UnauthorizedError):
            authenticate("Bearer nonsense", self.tokens, self.store)
        self.store.find_by_id.assert_not_called()

    def test_expired_token(self) -> None:
        token = self.tokens.issue(5, now=datetime.now(UTC) - timedelta(days=60))
        with self.assertRaises(UnauthorizedError):
            authenticate(token, self.tokens, self.store)

    def test_deleted_user_is_unauthorized(self) -> None:
        self.store.find_by_id.return_value = None
        with self.assertRaises(UnauthorizedError) as ctx:
            authenticate(self.tokens.issue(99), self.tokens, self.store)
        self.assertEqual(ctx.exception.status_code, 401)


class TestRequireRole(unittest.TestCase):
    def test_admin_passes(self) -> None:
        admin = _user(1, ROLE_ADMIN)
        self.assertIs(require_role(admin, ROLE_ADMIN), admin)

    def test_non_admin_is_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError) as ctx:
            require_role(_user(2, ROLE_USER), ROLE_ADMIN)
        self.assertEqual(ctx.exception.status_code, 403)

    def test_unauthenticated_and_forbidden_are_distinct(self) -> None:
        tokens = TokenService("access-test-secret")
        store = MagicMock()
        store.find_by_id.return_value = _user(3, ROLE_USER)

        with self.assertRaises(UnauthorizedError) as unauth:
            require_role(authenticate(None, tokens, store), ROLE_ADMIN)
        with self.assertRaises(ForbiddenError) as forbidden:
            require_role(authenticate(tokens.issue(3), tokens, store), ROLE_ADMIN)

        self.assertNotIsInstance(unauth.exception, ForbiddenError)
        self.assertNotEqual(unauth.exception.status_code, forbidden.exception.status_code)


if __name__ == "__main__":
    unittest.main()
