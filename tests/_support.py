"""Shared helpers for tests that need a real (SQLite) database."""

from pathlib import Path

from sqlalchemy.orm import sessionmaker

from app.core.database import build_engine
from app.models import Base


def make_session_factory(directory: str | Path) -> sessionmaker:
    """Create a fresh SQLite database under directory with all tables."""
    engine = build_engine(f"sqlite:///{Path(directory) / 'test.db'}")
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
