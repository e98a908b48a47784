"""Access guard: resolve a bearer token to a user and enforce role requirements."""

from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import InvalidTokenError, TokenService
from app.models.user import User
from app.services.credentials import CredentialStore

BEARER_SCHEME = "bearer"


def strip_bearer(raw_token: str | None) -> str | None:
    """Return the token without a leading 'Bearer ' (any case), or None if empty."""
    if raw_token is None:
        return None
    token = raw_token.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        token = rest.strip()
    return token or None


def authenticate(
    raw_token: str | None,
    tokens: TokenService,
    credentials: CredentialStore,
) -> User:
    """
    Verify the token and load its user.

    Raises UnauthorizedError when the token is missing, invalid or expired, or
    when the user it names has since been deleted.
    """
    token = strip_bearer(raw_token)
    if token is None:
        raise UnauthorizedError("Not authenticated")
    try:
        user_id = tokens.verify(token)
    except InvalidTokenError as e:
        raise UnauthorizedError(e.message) from None
    user = credentials.find_by_id(user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def require_role(user: User, role: str) -> User:
    """Raise ForbiddenError unless the user holds the given role."""
    if user.role != role:
        raise ForbiddenError(f"{role.capitalize()} access required")
    return user
