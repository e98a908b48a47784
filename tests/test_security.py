"""Unit tests for app.core.security: password hashing and TokenService issue/verify."""

import os
import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt
from pydantic import ValidationError

from app.core.config import Settings
from app.core.security import (
    INVALID_TOKEN_MESSAGE,
    InvalidTokenError,
    TokenService,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret"


def _flip_signature(token: str) -> str:
    """Change the first signature character so the decoded signature bytes differ."""
    header, payload, signature = token.split(".")
    replacement = "A" if signature[0] != "A" else "B"
    return ".".join([header, payload, replacement + signature[1:]])


class TestPasswordHashing(unittest.TestCase):
    """hash_password produces salted bcrypt hashes; verify_password checks them."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("correct horse battery", rounds=10)
        self.assertNotIn("correct horse battery", hashed)
        self.assertTrue(hashed.startswith("$2"))
        self.assertTrue(verify_password("correct horse battery", hashed))

    def test_wrong_password_fails(self) -> None:
        hashed = hash_password("correct horse battery", rounds=10)
        self.assertFalse(verify_password("wrong horse battery", hashed))

    def test_same_password_gets_different_salts(self) -> None:
        self.assertNotEqual(
            hash_password("same-password", rounds=10),
            hash_password("same-password", rounds=10),
        )

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))


class TestTokenService(unittest.TestCase):
    """issue/verify round trip, tampering, expiry, and fail-fast on empty secret."""

    def setUp(self) -> None:
        self.tokens = TokenService(SECRET, expire_minutes=30 * 24 * 60)

    def test_round_trip_returns_user_id(self) -> None:
        token = self.tokens.issue(42)
        self.assertEqual(self.tokens.verify(token), 42)

    def test_expiry_is_thirty_days(self) -> None:
        now = datetime.now(UTC).replace(microsecond=0)
        token = self.tokens.issue(7, now=now)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["exp"] - payload["iat"], 30 * 24 * 60 * 60)

    def test_tampered_signature_is_rejected(self) -> None:
        token = self.tokens.issue(42)
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(_flip_signature(token))

    def test_expired_token_is_rejected(self) -> None:
        issued = datetime.now(UTC) - timedelta(days=31)
        token = self.tokens.issue(42, now=issued)
        # Signature is intact; only expiry fails.
        jwt.decode(token, SECRET, algorithms=["HS256"], options={"verify_exp": False})
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(token)

    def test_token_signed_with_other_secret_is_rejected(self) -> None:
        other = TokenService("another-secret")
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(other.issue(42))

    def test_malformed_token_is_rejected(self) -> None:
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify("not.a.jwt")

    def test_non_integer_subject_is_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "alice", "iat": now, "exp": now + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(token)

    def test_missing_subject_is_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode({"exp": now + timedelta(minutes=5)}, SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(token)

    def test_all_failures_share_one_message(self) -> None:
        expired = self.tokens.issue(1, now=datetime.now(UTC) - timedelta(days=40))
        messages = set()
        for bad in ("garbage", _flip_signature(self.tokens.issue(1)), expired):
            try:
                self.tokens.verify(bad)
            except InvalidTokenError as e:
                messages.add(e.message)
        self.assertEqual(messages, {INVALID_TOKEN_MESSAGE})

    def test_empty_secret_refuses_to_construct(self) -> None:
        with self.assertRaises(ValueError):
            TokenService("")
        with self.assertRaises(ValueError):
            TokenService("   ")


class TestSettingsRequireSecret(unittest.TestCase):
    """Settings fail validation when JWT_SECRET is absent or blank."""

    def test_missing_secret_fails(self) -> None:
        env = {k: v for k, v in os.environ.items() if k.upper() != "JWT_SECRET"}
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ValidationError):
                Settings(_env_file=None)

    def test_blank_secret_fails(self) -> None:
        with patch.dict(os.environ, {"JWT_SECRET": "  "}):
            with self.assertRaises(ValidationError):
                Settings(_env_file=None)

    def test_bcrypt_rounds_below_ten_rejected(self) -> None:
        with patch.dict(os.environ, {"BCRYPT_ROUNDS": "4"}):
            with self.assertRaises(ValidationError):
                Settings(_env_file=None)


if __name__ == "__main__":
    unittest.main()
