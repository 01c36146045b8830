"""
============================================================================
Customer Service v1.0.0
Database Session - SQLAlchemy Engine & Session Management
============================================================================

Reliability Level: L5 High
Input Constraints: PostgreSQL connection settings from the environment
Side Effects: Database connections

- One session per request (FastAPI dependency)
- Connection pooling for PostgreSQL
- All timestamps in UTC

============================================================================
"""

import logging
import os
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool
from dotenv import load_dotenv

from app.database.models import Base

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


# ============================================================================
# DATABASE CONFIGURATION
# ============================================================================

def get_database_url() -> str:
    """
    Resolve the database URL from environment variables.

    DATABASE_URL wins when set; otherwise a PostgreSQL URL is assembled.

    Environment Variables:
        DATABASE_URL: Full SQLAlchemy URL (optional)
        DB_HOST: Database host (default: localhost)
        DB_PORT: Database port (default: 5432)
        DB_NAME: Database name (default: customer_service)
        DB_USER: Database user (default: customer_app)
        DB_PASSWORD: Database password
    """
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "customer_service")
    user = os.getenv("DB_USER", "customer_app")
    password = os.getenv("DB_PASSWORD", "customer_app")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}"


def build_engine(url: str):
    """
    Create an engine for ``url``.

    PostgreSQL gets a tuned QueuePool and READ COMMITTED isolation; other
    dialects (SQLite in development) use SQLAlchemy defaults.
    """
    echo = os.getenv("DB_ECHO", "false").lower() == "true"

    if not url.startswith("postgresql"):
        return create_engine(url, echo=echo)

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=10,           # Maintain 10 connections
        max_overflow=20,        # Allow up to 20 additional connections under load
        pool_timeout=30,        # Wait up to 30s for a connection
        pool_recycle=1800,      # Recycle connections after 30 minutes
        pool_pre_ping=True,     # Verify connections before use
        echo=echo,
        execution_options={
            "isolation_level": "READ COMMITTED"
        }
    )


# ============================================================================
# SQLALCHEMY ENGINE
# ============================================================================

DATABASE_URL = get_database_url()

engine = build_engine(DATABASE_URL)


# ============================================================================
# SESSION FACTORY
# ============================================================================

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine
)


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database session injection.

    Yields:
        Session: SQLAlchemy database session

    The session is rolled back on exception and always closed, returning
    the connection to the pool.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ============================================================================
# CONNECTION EVENT LISTENERS
# ============================================================================

if engine.dialect.name == "postgresql":

    @event.listens_for(engine, "connect")
    def set_timezone(dbapi_connection, connection_record):
        """Ensure all connections use UTC timezone."""
        cursor = dbapi_connection.cursor()
        cursor.execute("SET timezone TO 'UTC'")
        cursor.close()


# ============================================================================
# SCHEMA & HEALTH
# ============================================================================

def init_db(bind=None) -> None:
    """Create the customers table if it does not exist."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("[DB] Schema initialised")


def check_database_connection(bind=None) -> bool:
    """
    Verify database connectivity.

    Returns:
        bool: True if database is reachable

    Raises:
        ConnectionError: If database connection fails
    """
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        raise ConnectionError(f"Database connection failed: {e}") from e
