"""Pytest configuration and fixtures for yardtrack tests."""

import os
import tempfile

# Lightweight DB setup and no demo data; must run before yardtrack.core.config is imported.
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+pysqlite:///{os.path.join(tempfile.gettempdir(), f'yardtrack_test_{os.getpid()}.db')}",
)
os.environ.setdefault("AUTO_CREATE_DB", "true")
os.environ.setdefault("AUTO_SEED_YARD", "false")
os.environ.setdefault("YARD_ENV", "dev")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from yardtrack.models import Base


@pytest.fixture
def db():
    """In-memory database session with all yard tables created."""
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
