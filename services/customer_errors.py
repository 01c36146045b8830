"""
============================================================================
Customer Service v1.0.0
Customer Errors - Exception Taxonomy for the Customer Record Service
============================================================================

Reliability Level: L5 High
Input Constraints: Error code and human-readable message
Side Effects: None

Every exception carries a stable error code so the HTTP boundary and the
log stream speak the same language.

ERROR CODES:
    - CUS-001: Validation failure (missing or malformed input)
    - CUS-002: Customer not found
    - CUS-003: Storage failure
    - CUS-006: Notification publish failure

============================================================================
"""

from typing import Dict, Optional


class CustomerErrorCode:
    """Customer Service error codes for audit logging."""
    VALIDATION_FAILED = "CUS-001"
    NOT_FOUND = "CUS-002"
    STORAGE_FAILURE = "CUS-003"
    NOTIFICATION_FAILED = "CUS-006"


class CustomerServiceError(Exception):
    """
    Base exception for the Customer Record Service.

    Attributes:
        error_code: Stable error code (CUS-xxx)
        message: Human-readable message
    """

    def __init__(self, error_code: str, message: str):
        self.error_code = error_code
        self.message = message
        super().__init__(f"[{error_code}] {message}")


class CustomerValidationError(CustomerServiceError):
    """
    Raised when create/update input is missing or malformed.

    The ``errors`` mapping holds one entry per offending field.
    """

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            message = "Validation failed: " + "; ".join(
                f"{field}: {reason}" for field, reason in sorted(self.errors.items())
            )
        super().__init__(CustomerErrorCode.VALIDATION_FAILED, message)


class CustomerNotFoundError(CustomerServiceError):
    """Raised when no customer exists for the requested identifier."""

    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        super().__init__(
            CustomerErrorCode.NOT_FOUND,
            f"Customer not found with ID: {customer_id}"
        )


class CustomerStorageError(CustomerServiceError):
    """Raised when the underlying persistence layer fails."""

    def __init__(self, message: str):
        super().__init__(CustomerErrorCode.STORAGE_FAILURE, message)


class NotificationError(CustomerServiceError):
    """Raised by a publisher when a notification cannot be handed to the broker."""

    def __init__(self, message: str):
        super().__init__(CustomerErrorCode.NOTIFICATION_FAILED, message)
