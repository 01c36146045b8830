"""
============================================================================
Unit Tests - Customer Record Service
============================================================================

Reliability Level: L5 High
Test Coverage: Create/read/list/metrics/update/delete orchestration

Tests verify:
1. Create persists, then publishes the same view
2. Publish failure leaves the record committed (CUS-006 logged)
3. Storage failure publishes nothing
4. Not-found update/delete perform no writes
5. Life expectancy uses the injected clock
============================================================================
"""

import logging
import math
from datetime import date
from unittest.mock import MagicMock

import pytest
from prometheus_client import REGISTRY

from services.customer_errors import (
    CustomerNotFoundError,
    CustomerStorageError,
    CustomerValidationError,
    NotificationError,
)
from services.customer_models import CustomerInput, CustomerMetrics, CustomerView
from services.customer_repository import CustomerRepository
from services.customer_service import (
    CustomerNotificationPublisher,
    CustomerService,
    NullCustomerPublisher,
)


FIXED_TODAY = date(2024, 1, 1)


def john_doe() -> CustomerInput:
    return CustomerInput(first_name="John", last_name="Doe", age=30, date_of_birth=date(1993, 1, 1))


def jane_doe() -> CustomerInput:
    return CustomerInput(first_name="Jane", last_name="Doe", age=25, date_of_birth=date(1998, 1, 1))


def counter_value(name: str) -> float:
    return REGISTRY.get_sample_value(name) or 0.0


@pytest.fixture
def publisher():
    return MagicMock(spec=CustomerNotificationPublisher)


@pytest.fixture
def repository(db_session):
    return CustomerRepository(db_session)


@pytest.fixture
def service(repository, publisher):
    return CustomerService(repository, publisher, clock=lambda: FIXED_TODAY)


@pytest.fixture
def mock_repository():
    repository = MagicMock(spec=CustomerRepository)
    repository.transaction.return_value.__enter__.return_value = repository
    repository.transaction.return_value.__exit__.return_value = False
    return repository


# =============================================================================
# Create
# =============================================================================

class TestCreate:

    def test_create_returns_view_and_publishes_it(self, service, publisher):
        view = service.create(john_doe())

        assert view.id is not None
        assert (view.first_name, view.last_name, view.age) == ("John", "Doe", 30)
        assert view.date_of_birth == date(1993, 1, 1)
        publisher.publish_customer_created.assert_called_once_with(view)

    def test_created_customer_is_readable(self, service):
        view = service.create(john_doe())

        assert service.get_by_id(view.id) == view

    def test_create_increments_counter(self, service):
        before = counter_value("customers_created_total")

        service.create(john_doe())

        assert counter_value("customers_created_total") == before + 1

    def test_invalid_input_is_not_saved_or_published(self, service, repository, publisher):
        with pytest.raises(CustomerValidationError) as exc_info:
            service.create(CustomerInput(first_name="", last_name="Doe", age=-1, date_of_birth=None))

        assert set(exc_info.value.errors) == {"firstName", "age", "dateOfBirth"}
        assert repository.count() == 0
        publisher.publish_customer_created.assert_not_called()

    def test_publish_failure_keeps_record(self, service, repository, publisher, caplog):
        publisher.publish_customer_created.side_effect = NotificationError("broker down")
        failed_before = counter_value("customer_notifications_failed_total")

        with caplog.at_level(logging.ERROR):
            view = service.create(john_doe())

        assert repository.find_by_id(view.id) is not None
        assert counter_value("customer_notifications_failed_total") == failed_before + 1
        assert any("CUS-006" in record.getMessage() for record in caplog.records)

    def test_unexpected_publish_error_propagates(self, service, publisher):
        publisher.publish_customer_created.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            service.create(john_doe())

    def test_storage_failure_publishes_nothing(self, mock_repository, publisher):
        mock_repository.save.side_effect = CustomerStorageError("save failed")
        service = CustomerService(mock_repository, publisher)

        with pytest.raises(CustomerStorageError):
            service.create(john_doe())

        publisher.publish_customer_created.assert_not_called()

    def test_null_publisher_accepts_notifications(self, repository):
        service = CustomerService(repository, NullCustomerPublisher())

        view = service.create(john_doe())

        assert repository.exists_by_id(view.id)


# =============================================================================
# Read
# =============================================================================

class TestRead:

    def test_get_missing_customer(self, service):
        with pytest.raises(CustomerNotFoundError) as exc_info:
            service.get_by_id(42)

        assert exc_info.value.error_code == "CUS-002"
        assert exc_info.value.message == "Customer not found with ID: 42"

    def test_list_with_life_expectancy(self, service):
        service.create(john_doe())
        service.create(jane_doe())

        details = service.list_all_with_life_expectancy()

        assert [d.first_name for d in details] == ["John", "Jane"]
        assert details[0].estimated_life_expectancy == date(2074, 1, 1)
        assert details[1].estimated_life_expectancy == date(2079, 1, 1)
        assert all(d.created_at is not None for d in details)

    def test_list_empty(self, service):
        assert service.list_all_with_life_expectancy() == []

    def test_list_sets_active_gauge(self, service):
        service.create(john_doe())
        service.create(jane_doe())

        service.list_all_with_life_expectancy()

        assert REGISTRY.get_sample_value("customers_active") == 2.0

    def test_clock_defaults_to_today(self, repository, publisher):
        service = CustomerService(repository, publisher)
        service.create(john_doe())

        detail = service.list_all_with_life_expectancy()[0]

        assert detail.estimated_life_expectancy.year == date.today().year + 50


# =============================================================================
# Metrics
# =============================================================================

class TestMetrics:

    def test_metrics_empty(self, service):
        assert service.compute_metrics() == CustomerMetrics(0.0, 0.0, 0, 0, 0)

    def test_metrics_over_stored_ages(self, service):
        service.create(john_doe())
        service.create(jane_doe())

        metrics = service.compute_metrics()

        assert metrics.total_customers == 2
        assert metrics.average_age == 27.5
        assert metrics.youngest_customer_age == 25
        assert metrics.oldest_customer_age == 30
        assert metrics.age_standard_deviation == pytest.approx(math.sqrt(12.5))


# =============================================================================
# Update
# =============================================================================

class TestUpdate:

    def test_update_replaces_fields(self, service, repository):
        created = service.create(john_doe())
        created_at = repository.find_by_id(created.id).created_at

        updated = service.update(
            created.id,
            CustomerInput(first_name="Johnny", last_name="Dough", age=31, date_of_birth=date(1992, 2, 2)),
        )

        assert updated == CustomerView(created.id, "Johnny", "Dough", 31, date(1992, 2, 2))
        assert repository.find_by_id(created.id).created_at == created_at

    def test_update_does_not_publish(self, service, publisher):
        created = service.create(john_doe())
        publisher.reset_mock()

        service.update(created.id, jane_doe())

        publisher.publish_customer_created.assert_not_called()

    def test_update_missing_performs_no_write(self, mock_repository, publisher):
        mock_repository.find_by_id.return_value = None
        service = CustomerService(mock_repository, publisher)

        with pytest.raises(CustomerNotFoundError):
            service.update(7, john_doe())

        mock_repository.save.assert_not_called()

    def test_update_validates_first(self, mock_repository, publisher):
        service = CustomerService(mock_repository, publisher)

        with pytest.raises(CustomerValidationError):
            service.update(7, CustomerInput())

        mock_repository.find_by_id.assert_not_called()


# =============================================================================
# Delete
# =============================================================================

class TestDelete:

    def test_delete_removes_customer(self, service, repository):
        created = service.create(john_doe())

        service.delete(created.id)

        assert not repository.exists_by_id(created.id)
        with pytest.raises(CustomerNotFoundError):
            service.get_by_id(created.id)

    def test_delete_missing_performs_no_delete(self, mock_repository, publisher):
        mock_repository.exists_by_id.return_value = False
        service = CustomerService(mock_repository, publisher)

        with pytest.raises(CustomerNotFoundError):
            service.delete(7)

        mock_repository.delete_by_id.assert_not_called()

    def test_delete_increments_counter(self, service):
        created = service.create(john_doe())
        before = counter_value("customers_deleted_total")

        service.delete(created.id)

        assert counter_value("customers_deleted_total") == before + 1
