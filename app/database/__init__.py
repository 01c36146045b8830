# ============================================================================
# Customer Service v1.0.0
# Database Module - SQLAlchemy Session Management
# ============================================================================

from app.database.session import get_db, engine, SessionLocal, init_db
from app.database.models import Base, Customer

__all__ = ["get_db", "engine", "SessionLocal", "init_db", "Base", "Customer"]
