"""
============================================================================
Customer Service v1.0.0
Customer Repository - SQLAlchemy Storage Collaborator
============================================================================

Reliability Level: L5 High
Input Constraints: Open SQLAlchemy session (one per request)
Side Effects: Database reads and writes on the customers table

UNIT OF WORK:
    Writes happen inside ``transaction()``. The block commits on success and
    rolls back on any exception before re-raising; SQLAlchemy failures are
    surfaced as CustomerStorageError (CUS-003). Repository methods flush but
    never commit on their own.

AGGREGATES:
    ``average_age()`` and ``age_standard_deviation()`` return None when the
    table is empty. The standard deviation is the sample form, computed from
    COUNT / SUM / SUM of squares so that it behaves the same on every
    database dialect.

============================================================================
"""

import logging
import math
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database.models import Customer
from services.customer_errors import CustomerErrorCode, CustomerStorageError

# Configure module logger
logger = logging.getLogger(__name__)


class CustomerRepository:
    """
    Storage collaborator for Customer records.

    Reliability Level: L5 High
    Input Constraints: session must be a live SQLAlchemy Session
    Side Effects: Database I/O
    """

    def __init__(self, session: Session):
        self._session = session

    # =========================================================================
    # Unit of Work
    # =========================================================================

    @contextmanager
    def transaction(self) -> Iterator["CustomerRepository"]:
        """
        Scoped unit of work: commit on success, rollback on failure.

        Raises:
            CustomerStorageError: If the database rejects the work or commit
        """
        try:
            yield self
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(
                f"[{CustomerErrorCode.STORAGE_FAILURE}] Transaction rolled back | error={e}"
            )
            raise CustomerStorageError(f"Transaction failed: {e}") from e
        except Exception:
            self._session.rollback()
            raise

    @contextmanager
    def _storage_guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(
                f"[{CustomerErrorCode.STORAGE_FAILURE}] Storage operation failed | "
                f"operation={operation} | error={e}"
            )
            raise CustomerStorageError(f"{operation} failed: {e}") from e

    # =========================================================================
    # CRUD
    # =========================================================================

    def save(self, customer: Customer) -> Customer:
        """
        Insert or update ``customer``.

        The identifier and creation timestamp are assigned on first save.
        """
        with self._storage_guard("save"):
            self._session.add(customer)
            self._session.flush()
            self._session.refresh(customer)
        return customer

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        with self._storage_guard("find_by_id"):
            return self._session.get(Customer, customer_id)

    def find_all(self) -> List[Customer]:
        """All customers in storage iteration order (primary key)."""
        with self._storage_guard("find_all"):
            return list(self._session.scalars(select(Customer).order_by(Customer.id)))

    def find_all_ages(self) -> List[int]:
        with self._storage_guard("find_all_ages"):
            return list(self._session.scalars(select(Customer.age).order_by(Customer.id)))

    def exists_by_id(self, customer_id: int) -> bool:
        with self._storage_guard("exists_by_id"):
            found = self._session.scalar(
                select(Customer.id).where(Customer.id == customer_id)
            )
        return found is not None

    def delete_by_id(self, customer_id: int) -> None:
        with self._storage_guard("delete_by_id"):
            customer = self._session.get(Customer, customer_id)
            if customer is not None:
                self._session.delete(customer)
                self._session.flush()

    def count(self) -> int:
        with self._storage_guard("count"):
            return int(self._session.scalar(select(func.count(Customer.id))) or 0)

    # =========================================================================
    # Finders
    # =========================================================================

    def find_by_last_name(self, last_name: str) -> List[Customer]:
        with self._storage_guard("find_by_last_name"):
            return list(self._session.scalars(
                select(Customer).where(Customer.last_name == last_name).order_by(Customer.id)
            ))

    def find_by_age_greater_than_equal(self, age: int) -> List[Customer]:
        with self._storage_guard("find_by_age_greater_than_equal"):
            return list(self._session.scalars(
                select(Customer).where(Customer.age >= age).order_by(Customer.id)
            ))

    def find_by_age_less_than_equal(self, age: int) -> List[Customer]:
        with self._storage_guard("find_by_age_less_than_equal"):
            return list(self._session.scalars(
                select(Customer).where(Customer.age <= age).order_by(Customer.id)
            ))

    # =========================================================================
    # Aggregates
    # =========================================================================

    def average_age(self) -> Optional[float]:
        with self._storage_guard("average_age"):
            value = self._session.scalar(select(func.avg(Customer.age)))
        return float(value) if value is not None else None

    def age_standard_deviation(self) -> Optional[float]:
        """Sample standard deviation of ages, None when there are no rows."""
        with self._storage_guard("age_standard_deviation"):
            row = self._session.execute(
                select(
                    func.count(Customer.age),
                    func.sum(Customer.age),
                    func.sum(Customer.age * Customer.age),
                )
            ).one()

        count, total, total_squares = row
        if not count:
            return None
        if count < 2:
            return 0.0

        count = int(count)
        total = float(total)
        total_squares = float(total_squares)
        variance = (total_squares - (total * total) / count) / (count - 1)
        # Cancellation can leave a tiny negative variance
        return math.sqrt(max(variance, 0.0))
