"""
============================================================================
Customer Service v1.0.0
Database Models - SQLAlchemy ORM Mapping
============================================================================

Reliability Level: L5 High
Input Constraints: None
Side Effects: None (declarations only)

TABLE: customers
    id             INTEGER PK (assigned by the database)
    first_name     VARCHAR(100) NOT NULL
    last_name      VARCHAR(100) NOT NULL
    age            INTEGER NOT NULL
    date_of_birth  DATE NOT NULL
    created_at     TIMESTAMP WITH TIME ZONE NOT NULL (set on insert)

============================================================================
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    age = Column(Integer, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)

    def __repr__(self) -> str:
        return (
            f"Customer(id={self.id!r}, first_name={self.first_name!r}, "
            f"last_name={self.last_name!r}, age={self.age!r}, "
            f"date_of_birth={self.date_of_birth!r})"
        )
