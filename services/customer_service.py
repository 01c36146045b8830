"""
============================================================================
Customer Service v1.0.0
Customer Record Service - Use-Case Orchestrator
============================================================================

Reliability Level: L5 High
Input Constraints: CustomerInput for create/update, integer identifiers
Side Effects:
    - Database writes through CustomerRepository
    - Creation notification through the publisher collaborator
    - Prometheus business metrics

OPERATIONS:
    create                         validate -> save + commit -> publish
    get_by_id                      read
    list_all_with_life_expectancy  read all, derive life expectancy
    compute_metrics                read ages, aggregate
    update                         validate -> read + apply + save + commit
    delete                         exists + delete + commit

TRANSACTIONS:
    Each write runs in ``repository.transaction()``. The creation
    notification is published only after the commit succeeds; a publish
    failure (NotificationError, CUS-006) is logged and counted but does not
    undo the committed record.

ERROR CODES:
    - CUS-001: Validation failure (propagated)
    - CUS-002: Customer not found (propagated)
    - CUS-003: Storage failure (propagated)
    - CUS-006: Notification publish failure (logged, not propagated)

============================================================================
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, List, Optional

from app.database.models import Customer
from app.observability.metrics import (
    record_customer_created,
    record_customer_deleted,
    record_customer_updated,
    record_notification_failed,
    set_active_customers,
    track_processing_time,
)
from services.customer_errors import (
    CustomerErrorCode,
    CustomerNotFoundError,
    NotificationError,
)
from services.customer_metrics import compute_metrics
from services.customer_models import (
    CustomerDetailView,
    CustomerInput,
    CustomerMetrics,
    CustomerView,
)
from services.customer_repository import CustomerRepository
from services.customer_validation import validate_customer_input
from services.life_expectancy import estimate_life_expectancy

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Notification Collaborator
# =============================================================================

class CustomerNotificationPublisher(ABC):
    """Publishes customer lifecycle notifications."""

    @abstractmethod
    def publish_customer_created(self, customer: CustomerView) -> None:
        """
        Hand a creation notification to the broker.

        Raises:
            NotificationError: If the notification could not be sent
        """


class NullCustomerPublisher(CustomerNotificationPublisher):
    """Publisher used when notifications are disabled."""

    def publish_customer_created(self, customer: CustomerView) -> None:
        logger.debug(
            f"[CUSTOMER-SERVICE] Notifications disabled, skipping publish | "
            f"customer_id={customer.id}"
        )


# =============================================================================
# Mapping Helpers
# =============================================================================

def to_view(customer: Customer) -> CustomerView:
    return CustomerView(
        id=customer.id,
        first_name=customer.first_name,
        last_name=customer.last_name,
        age=customer.age,
        date_of_birth=customer.date_of_birth,
    )


def to_detail_view(customer: Customer, today: date) -> CustomerDetailView:
    return CustomerDetailView(
        id=customer.id,
        first_name=customer.first_name,
        last_name=customer.last_name,
        age=customer.age,
        date_of_birth=customer.date_of_birth,
        created_at=customer.created_at,
        estimated_life_expectancy=estimate_life_expectancy(customer.age, today),
    )


# =============================================================================
# Customer Service
# =============================================================================

class CustomerService:
    """
    Orchestrates the customer use cases over storage and notification.

    Reliability Level: L5 High
    Input Constraints: repository bound to a live session
    Side Effects: See module docstring

    Args:
        repository: Storage collaborator
        publisher: Notification collaborator
        clock: Returns "today" for life-expectancy estimates
    """

    def __init__(
        self,
        repository: CustomerRepository,
        publisher: CustomerNotificationPublisher,
        clock: Optional[Callable[[], date]] = None,
    ):
        self._repository = repository
        self._publisher = publisher
        self._clock = clock or date.today

    def create(self, customer_input: CustomerInput) -> CustomerView:
        """
        Validate, persist and announce a new customer.

        Raises:
            CustomerValidationError: Missing or malformed input
            CustomerStorageError: Persistence failed (nothing published)
        """
        logger.info(
            f"[CUSTOMER-SERVICE] Creating customer | "
            f"first_name={customer_input.first_name} | last_name={customer_input.last_name}"
        )
        with track_processing_time("create"):
            validate_customer_input(customer_input)

            with self._repository.transaction() as repository:
                saved = repository.save(Customer(
                    first_name=customer_input.first_name,
                    last_name=customer_input.last_name,
                    age=customer_input.age,
                    date_of_birth=customer_input.date_of_birth,
                ))
                view = to_view(saved)

            self._publish_created(view)
            record_customer_created(view.age)

        logger.info(f"[CUSTOMER-SERVICE] Customer created | customer_id={view.id}")
        return view

    def get_by_id(self, customer_id: int) -> CustomerView:
        """
        Raises:
            CustomerNotFoundError: No customer with ``customer_id``
        """
        logger.info(f"[CUSTOMER-SERVICE] Fetching customer | customer_id={customer_id}")
        with track_processing_time("get_by_id"):
            customer = self._repository.find_by_id(customer_id)
            if customer is None:
                raise CustomerNotFoundError(customer_id)
            return to_view(customer)

    def list_all_with_life_expectancy(self) -> List[CustomerDetailView]:
        """All customers in storage order, each with its estimated life expectancy."""
        logger.info("[CUSTOMER-SERVICE] Fetching all customers with life expectancy")
        with track_processing_time("list_all"):
            customers = self._repository.find_all()
            set_active_customers(len(customers))
            today = self._clock()
            return [to_detail_view(customer, today) for customer in customers]

    def compute_metrics(self) -> CustomerMetrics:
        """Aggregate age metrics; all zero when there are no customers."""
        logger.info("[CUSTOMER-SERVICE] Calculating customer metrics")
        with track_processing_time("metrics"):
            return compute_metrics(self._repository.find_all_ages())

    def update(self, customer_id: int, customer_input: CustomerInput) -> CustomerView:
        """
        Replace names, age and date of birth of an existing customer.

        Raises:
            CustomerValidationError: Missing or malformed input
            CustomerNotFoundError: No customer with ``customer_id`` (no write)
            CustomerStorageError: Persistence failed (rolled back)
        """
        logger.info(f"[CUSTOMER-SERVICE] Updating customer | customer_id={customer_id}")
        with track_processing_time("update"):
            validate_customer_input(customer_input)

            with self._repository.transaction() as repository:
                customer = repository.find_by_id(customer_id)
                if customer is None:
                    raise CustomerNotFoundError(customer_id)

                customer.first_name = customer_input.first_name
                customer.last_name = customer_input.last_name
                customer.age = customer_input.age
                customer.date_of_birth = customer_input.date_of_birth

                view = to_view(repository.save(customer))

            record_customer_updated(view.age)

        logger.info(f"[CUSTOMER-SERVICE] Customer updated | customer_id={customer_id}")
        return view

    def delete(self, customer_id: int) -> None:
        """
        Physically delete a customer.

        Raises:
            CustomerNotFoundError: No customer with ``customer_id`` (no delete)
            CustomerStorageError: Persistence failed (rolled back)
        """
        logger.info(f"[CUSTOMER-SERVICE] Deleting customer | customer_id={customer_id}")
        with track_processing_time("delete"):
            with self._repository.transaction() as repository:
                if not repository.exists_by_id(customer_id):
                    raise CustomerNotFoundError(customer_id)
                repository.delete_by_id(customer_id)

            record_customer_deleted()

        logger.info(f"[CUSTOMER-SERVICE] Customer deleted | customer_id={customer_id}")

    def _publish_created(self, view: CustomerView) -> None:
        try:
            self._publisher.publish_customer_created(view)
        except NotificationError as e:
            record_notification_failed()
            logger.error(
                f"[{CustomerErrorCode.NOTIFICATION_FAILED}] Creation notification not sent, "
                f"record remains committed | customer_id={view.id} | error={e.message}"
            )
