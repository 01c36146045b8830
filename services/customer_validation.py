"""
============================================================================
Customer Service v1.0.0
Customer Validation - Explicit Input Checks for Create and Update
============================================================================

Reliability Level: L5 High
Input Constraints: CustomerInput
Side Effects: None

Rules:
    - first_name, last_name: present, str, non-blank
    - age: present, int (bool rejected), 0 <= age <= MAX_AGE
    - date_of_birth: present, datetime.date

age and date_of_birth are NOT reconciled against each other; both are
stored exactly as supplied.

============================================================================
"""

from datetime import date, datetime
from typing import Dict

from services.customer_errors import CustomerValidationError
from services.customer_models import CustomerInput


# Column limits in the customers table (age is a 32-bit INTEGER)
MAX_NAME_LENGTH = 100
MAX_AGE = 2 ** 31 - 1


def _check_name(errors: Dict[str, str], field_name: str, value) -> None:
    if value is None:
        errors[field_name] = "is required"
    elif not isinstance(value, str):
        errors[field_name] = "must be a string"
    elif not value.strip():
        errors[field_name] = "must not be blank"
    elif len(value) > MAX_NAME_LENGTH:
        errors[field_name] = f"must be at most {MAX_NAME_LENGTH} characters"


def validate_customer_input(customer_input: CustomerInput) -> None:
    """
    Validate create/update input.

    Raises:
        CustomerValidationError: With one entry per offending field
    """
    errors: Dict[str, str] = {}

    _check_name(errors, "firstName", customer_input.first_name)
    _check_name(errors, "lastName", customer_input.last_name)

    age = customer_input.age
    if age is None:
        errors["age"] = "is required"
    elif isinstance(age, bool) or not isinstance(age, int):
        errors["age"] = "must be an integer"
    elif age < 0:
        errors["age"] = "must be non-negative"
    elif age > MAX_AGE:
        errors["age"] = f"must be at most {MAX_AGE}"

    dob = customer_input.date_of_birth
    if dob is None:
        errors["dateOfBirth"] = "is required"
    elif isinstance(dob, datetime) or not isinstance(dob, date):
        errors["dateOfBirth"] = "must be a calendar date"

    if errors:
        raise CustomerValidationError(errors)
