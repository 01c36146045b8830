"""
============================================================================
Customer Service v1.0.0
Customer Models - Transfer Shapes for the Customer Record Service
============================================================================

Reliability Level: L5 High
Input Constraints: None
Side Effects: None

These dataclasses are the currency of the service layer. The HTTP layer
maps them onto Pydantic schemas; the messaging layer serialises
``CustomerView.to_dict()`` onto the wire.

============================================================================
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional


@dataclass
class CustomerInput:
    """
    Caller-supplied fields for create and update.

    Every field is optional at construction time so that validation can
    report each missing field individually instead of failing on the first.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    date_of_birth: Optional[date] = None


@dataclass
class CustomerView:
    """Customer as returned by create, read and update."""
    id: int
    first_name: str
    last_name: str
    age: int
    date_of_birth: date

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary (camelCase keys)."""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "age": self.age,
            "dateOfBirth": self.date_of_birth.isoformat() if self.date_of_birth else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomerView":
        """Rebuild a view from its ``to_dict`` form."""
        dob = data.get("dateOfBirth")
        return cls(
            id=data["id"],
            first_name=data["firstName"],
            last_name=data["lastName"],
            age=data["age"],
            date_of_birth=date.fromisoformat(dob) if dob else None,
        )


@dataclass
class CustomerDetailView:
    """CustomerView plus creation timestamp and derived life expectancy."""
    id: int
    first_name: str
    last_name: str
    age: int
    date_of_birth: date
    created_at: Optional[datetime]
    estimated_life_expectancy: date


@dataclass(frozen=True)
class CustomerMetrics:
    """Aggregate statistics over all customer ages."""
    average_age: float
    age_standard_deviation: float
    total_customers: int
    youngest_customer_age: int
    oldest_customer_age: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageAge": self.average_age,
            "ageStandardDeviation": self.age_standard_deviation,
            "totalCustomers": self.total_customers,
            "youngestCustomerAge": self.youngest_customer_age,
            "oldestCustomerAge": self.oldest_customer_age,
        }
