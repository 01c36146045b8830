# ============================================================================
# Customer Service v1.0.0
# Pydantic Schemas - Data Validation Layer
# ============================================================================

from app.schemas.customer import (
    CustomerIn,
    CustomerOut,
    CustomerDetailOut,
    CustomerMetricsOut,
    ErrorResponse,
)
from app.schemas.auth import LoginRequest, LoginResponse

__all__ = [
    "CustomerIn",
    "CustomerOut",
    "CustomerDetailOut",
    "CustomerMetricsOut",
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
]
