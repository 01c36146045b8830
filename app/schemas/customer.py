"""
============================================================================
Customer Service v1.0.0
Customer Schemas - Pydantic Models for the Customer API
============================================================================

Reliability Level: L5 High
Input Constraints: JSON bodies with camelCase keys (snake_case accepted)
Side Effects: None (pure validation)

Request models only enforce JSON types (age is a strict integer, so JSON
booleans and numeric strings are rejected); required-field and range rules are
applied by services.customer_validation so that every violation is reported
with field-level detail in one response.

============================================================================
"""

from datetime import date, datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel

from services.customer_models import (
    CustomerDetailView,
    CustomerInput,
    CustomerMetrics,
    CustomerView,
)


class CamelModel(BaseModel):
    """Base model serialising with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class CustomerIn(CamelModel):
    """Body of create and update requests. Unknown keys (e.g. ``id``) are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "firstName": "John",
                "lastName": "Doe",
                "age": 30,
                "dateOfBirth": "1993-01-01",
            }
        }
    )

    first_name: Optional[str] = Field(None, description="Customer first name (required)")
    last_name: Optional[str] = Field(None, description="Customer last name (required)")
    age: Optional[StrictInt] = Field(None, description="Customer age in years (required, >= 0)")
    date_of_birth: Optional[date] = Field(None, description="Date of birth (required, ISO 8601)")

    def to_input(self) -> CustomerInput:
        return CustomerInput(
            first_name=self.first_name,
            last_name=self.last_name,
            age=self.age,
            date_of_birth=self.date_of_birth,
        )


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class CustomerOut(CamelModel):
    id: int = Field(..., description="Database primary key")
    first_name: str
    last_name: str
    age: int
    date_of_birth: date

    @classmethod
    def from_view(cls, view: CustomerView) -> "CustomerOut":
        return cls(
            id=view.id,
            first_name=view.first_name,
            last_name=view.last_name,
            age=view.age,
            date_of_birth=view.date_of_birth,
        )


class CustomerDetailOut(CustomerOut):
    created_at: Optional[datetime] = Field(None, description="Creation timestamp (UTC)")
    estimated_life_expectancy: date = Field(
        ..., description="Derived end-of-life estimate, computed on read"
    )

    @classmethod
    def from_detail(cls, view: CustomerDetailView) -> "CustomerDetailOut":
        return cls(
            id=view.id,
            first_name=view.first_name,
            last_name=view.last_name,
            age=view.age,
            date_of_birth=view.date_of_birth,
            created_at=view.created_at,
            estimated_life_expectancy=view.estimated_life_expectancy,
        )


class CustomerMetricsOut(CamelModel):
    average_age: float
    age_standard_deviation: float
    total_customers: int
    youngest_customer_age: int
    oldest_customer_age: int

    @classmethod
    def from_metrics(cls, metrics: CustomerMetrics) -> "CustomerMetricsOut":
        return cls(
            average_age=metrics.average_age,
            age_standard_deviation=metrics.age_standard_deviation,
            total_customers=metrics.total_customers,
            youngest_customer_age=metrics.youngest_customer_age,
            oldest_customer_age=metrics.oldest_customer_age,
        )


class ErrorResponse(BaseModel):
    """Error body returned by every exception handler."""
    status: int
    error_code: str
    message: str
    timestamp: str
    errors: Optional[Dict[str, str]] = None
