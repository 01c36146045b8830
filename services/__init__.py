"""
============================================================================
Customer Service v1.0.0 - Services Layer
============================================================================

Customer record use cases: validation, persistence, age metrics,
life-expectancy estimation and creation notifications.

Reliability Level: L5 High
============================================================================
"""

from services.customer_errors import (
    CustomerErrorCode,
    CustomerServiceError,
    CustomerValidationError,
    CustomerNotFoundError,
    CustomerStorageError,
    NotificationError,
)

from services.customer_models import (
    CustomerInput,
    CustomerView,
    CustomerDetailView,
    CustomerMetrics,
)

from services.customer_metrics import compute_metrics, EMPTY_METRICS

from services.life_expectancy import (
    estimate_life_expectancy,
    AVERAGE_LIFE_EXPECTANCY,
)

from services.customer_validation import validate_customer_input

from services.service_config import (
    ServiceConfig,
    ServiceConfigurationError,
    get_service_config,
    reset_service_config,
)

__all__ = [
    # Errors
    "CustomerErrorCode",
    "CustomerServiceError",
    "CustomerValidationError",
    "CustomerNotFoundError",
    "CustomerStorageError",
    "NotificationError",
    # Models
    "CustomerInput",
    "CustomerView",
    "CustomerDetailView",
    "CustomerMetrics",
    # Calculators
    "compute_metrics",
    "EMPTY_METRICS",
    "estimate_life_expectancy",
    "AVERAGE_LIFE_EXPECTANCY",
    "validate_customer_input",
    # Configuration
    "ServiceConfig",
    "ServiceConfigurationError",
    "get_service_config",
    "reset_service_config",
]
