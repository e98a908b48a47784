"""Credential store: user records, salted password hashes, and role derivation."""

import logging
from functools import lru_cache

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.core.security import BCRYPT_ROUNDS, hash_password, verify_password
from app.models.user import ROLE_ADMIN, ROLE_USER, User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


@lru_cache
def _dummy_hash(rounds: int) -> str:
    # Checked on unknown-email logins so response timing matches a real account.
    return hash_password("not-a-real-password", rounds=rounds)


class CredentialStore:
    """
    Reads and writes User rows through a SQLAlchemy session.

    Email uniqueness is enforced by the unique index on users.email; create_user
    never checks-then-writes, so two concurrent signups cannot both succeed.
    """

    def __init__(
        self,
        session: Session,
        admin_email: str | None = None,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        self.session = session
        self.admin_email = normalize_email(admin_email) if admin_email else None
        self.bcrypt_rounds = bcrypt_rounds

    def role_for(self, email: str) -> str:
        if self.admin_email is not None and normalize_email(email) == self.admin_email:
            return ROLE_ADMIN
        return ROLE_USER

    def create_user(self, name: str, email: str, raw_password: str) -> User:
        """Hash the password and insert the user. Raises ConflictError if the email exists."""
        email_norm = normalize_email(email)
        user = User(
            name=name.strip(),
            email=email_norm,
            password_hash=hash_password(raw_password, rounds=self.bcrypt_rounds),
            role=self.role_for(email_norm),
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Email already exists.") from None
        self.session.refresh(user)
        logger.info("User created", extra={"user_id": user.id, "role": user.role})
        return user

    def find_by_email(self, email: str) -> User | None:
        return (
            self.session.query(User)
            .filter(User.email == normalize_email(email))
            .first()
        )

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def verify_password(self, user: User | None, raw_password: str) -> bool:
        """
        Check raw_password against the user's stored hash.
        With user=None a throwaway hash is checked so unknown accounts cost the same.
        """
        if user is None:
            verify_password(raw_password, _dummy_hash(self.bcrypt_rounds))
            return False
        return verify_password(raw_password, user.password_hash)
