"""
============================================================================
Customer Service v1.0.0
Observability Module - Prometheus Metrics
============================================================================
"""

from app.observability.metrics import (
    CUSTOMERS_CREATED,
    CUSTOMERS_UPDATED,
    CUSTOMERS_DELETED,
    NOTIFICATIONS_FAILED,
    CUSTOMER_AGE_HISTOGRAM,
    PROCESSING_TIME_HISTOGRAM,
    ACTIVE_CUSTOMERS_GAUGE,
    record_customer_created,
    record_customer_updated,
    record_customer_deleted,
    record_notification_failed,
    set_active_customers,
    track_processing_time,
)

__all__ = [
    "CUSTOMERS_CREATED",
    "CUSTOMERS_UPDATED",
    "CUSTOMERS_DELETED",
    "NOTIFICATIONS_FAILED",
    "CUSTOMER_AGE_HISTOGRAM",
    "PROCESSING_TIME_HISTOGRAM",
    "ACTIVE_CUSTOMERS_GAUGE",
    "record_customer_created",
    "record_customer_updated",
    "record_customer_deleted",
    "record_notification_failed",
    "set_active_customers",
    "track_processing_time",
]
