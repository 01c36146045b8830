"""
============================================================================
Customer Service v1.0.0
Prometheus Metrics - Customer Business Metrics
============================================================================

Reliability Level: L5 High
Input Constraints: None
Side Effects: Updates Prometheus metrics registry

METRICS EXPOSED
---------------
- customers_created_total: Counter of customers created
- customers_updated_total: Counter of customers updated
- customers_deleted_total: Counter of customers deleted
- customer_notifications_failed_total: Counter of failed creation notifications
- customers_age_distribution: Histogram of ages seen on create/update
- customers_processing_seconds: Histogram of service operation latency
- customers_active: Gauge of customers currently stored

Metric helpers never raise; a failure to record is logged and swallowed so
that observability can not break a request.

============================================================================
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Gauge, Histogram, REGISTRY

# Configure module logger
logger = logging.getLogger(__name__)


# ============================================================================
# PROMETHEUS METRICS DEFINITIONS
# ============================================================================

CUSTOMERS_CREATED = Counter(
    "customers_created_total",
    "Number of customers created"
)

CUSTOMERS_UPDATED = Counter(
    "customers_updated_total",
    "Number of customers updated"
)

CUSTOMERS_DELETED = Counter(
    "customers_deleted_total",
    "Number of customers deleted"
)

NOTIFICATIONS_FAILED = Counter(
    "customer_notifications_failed_total",
    "Number of customer creation notifications that could not be published"
)

CUSTOMER_AGE_HISTOGRAM = Histogram(
    "customers_age_distribution",
    "Distribution of customer ages",
    buckets=[10, 18, 25, 30, 40, 50, 60, 70, 80, 90, 100, 120]
)

PROCESSING_TIME_HISTOGRAM = Histogram(
    "customers_processing_seconds",
    "Time spent processing customer requests",
    ["operation"]
)

ACTIVE_CUSTOMERS_GAUGE = Gauge(
    "customers_active",
    "Number of active customers"
)


# ============================================================================
# METRIC UPDATE FUNCTIONS
# ============================================================================

def record_customer_created(age: int) -> None:
    """Count a created customer, record its age, bump the active gauge."""
    try:
        CUSTOMERS_CREATED.inc()
        ACTIVE_CUSTOMERS_GAUGE.inc()
        CUSTOMER_AGE_HISTOGRAM.observe(age)
    except Exception as e:
        logger.error(
            "[OBS-001] Failed to record customer_created metric | error=%s",
            str(e)
        )


def record_customer_updated(age: int) -> None:
    try:
        CUSTOMERS_UPDATED.inc()
        CUSTOMER_AGE_HISTOGRAM.observe(age)
    except Exception as e:
        logger.error(
            "[OBS-002] Failed to record customer_updated metric | error=%s",
            str(e)
        )


def record_customer_deleted() -> None:
    try:
        CUSTOMERS_DELETED.inc()
        ACTIVE_CUSTOMERS_GAUGE.dec()
    except Exception as e:
        logger.error(
            "[OBS-003] Failed to record customer_deleted metric | error=%s",
            str(e)
        )


def record_notification_failed() -> None:
    try:
        NOTIFICATIONS_FAILED.inc()
    except Exception as e:
        logger.error(
            "[OBS-004] Failed to record notification_failed metric | error=%s",
            str(e)
        )


def set_active_customers(count: int) -> None:
    try:
        ACTIVE_CUSTOMERS_GAUGE.set(count)
        logger.debug("Metric: customers_active updated | value=%s", count)
    except Exception as e:
        logger.error(
            "[OBS-005] Failed to update customers_active metric | error=%s",
            str(e)
        )


@contextmanager
def track_processing_time(operation: str) -> Iterator[None]:
    """
    Observe the wall-clock duration of the enclosed block.

    The duration is recorded whether the block succeeds or raises.
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        try:
            PROCESSING_TIME_HISTOGRAM.labels(operation=operation).observe(elapsed)
        except Exception as e:
            logger.error(
                "[OBS-006] Failed to record processing time | operation=%s | error=%s",
                operation, str(e)
            )


def get_created_total() -> float:
    """Current value of the created counter (for the monitoring summary)."""
    return REGISTRY.get_sample_value("customers_created_total") or 0.0
