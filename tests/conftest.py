"""
============================================================================
Customer Service v1.0.0
Shared Test Configuration
============================================================================

Environment is fixed before any application module is imported:
    - in-memory SQLite instead of PostgreSQL
    - a 32+ character JWT secret
    - cheap bcrypt rounds
    - notifications disabled (tests inject their own publisher)

============================================================================
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-characters")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")
os.environ.setdefault("CONSUMER_PROCESSING_DELAY_SECONDS", "0")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.security import reset_user_store
from app.database.models import Base
from services.service_config import reset_service_config


@pytest.fixture(autouse=True)
def reset_global_state():
    """Fresh configuration and user store for every test."""
    reset_service_config()
    reset_user_store()
    yield
    reset_service_config()
    reset_user_store()


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across connections of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
