"""Core app configuration, database, security and error taxonomy."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.errors import ServiceError
from app.core.security import TokenService, get_token_service

__all__ = ["get_settings", "settings", "get_db", "ServiceError", "TokenService", "get_token_service"]
