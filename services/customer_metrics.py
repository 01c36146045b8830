"""
============================================================================
Customer Service v1.0.0
Aggregate Statistics Calculator - Customer Age Metrics
============================================================================

Reliability Level: L5 High
Input Constraints: Sequence of non-negative integer ages
Side Effects: None (pure function)

STANDARD DEVIATION:
    Sample standard deviation (n - 1 denominator), the semantics of the
    PostgreSQL STDDEV aggregate. A single age has no sample spread and
    reports 0.0.

EMPTY INPUT:
    All-zero metrics. A zero result does not distinguish "no customers"
    from "every customer is aged 0"; callers needing that distinction read
    ``total_customers``.

============================================================================
"""

import math
from typing import Sequence

from services.customer_models import CustomerMetrics


EMPTY_METRICS = CustomerMetrics(
    average_age=0.0,
    age_standard_deviation=0.0,
    total_customers=0,
    youngest_customer_age=0,
    oldest_customer_age=0,
)


def sample_standard_deviation(values: Sequence[int], mean: float) -> float:
    """
    Sample standard deviation of ``values`` around a precomputed ``mean``.

    Returns 0.0 for fewer than two values.
    """
    count = len(values)
    if count < 2:
        return 0.0
    squared_deviation = math.fsum((value - mean) ** 2 for value in values)
    return math.sqrt(squared_deviation / (count - 1))


def compute_metrics(ages: Sequence[int]) -> CustomerMetrics:
    """
    Compute count, mean, sample standard deviation, min and max of ages.

    Args:
        ages: Customer ages in any order

    Returns:
        CustomerMetrics (all zero for an empty sequence)
    """
    ages = list(ages)
    if not ages:
        return EMPTY_METRICS

    total = len(ages)
    average = math.fsum(ages) / total

    return CustomerMetrics(
        average_age=float(average),
        age_standard_deviation=sample_standard_deviation(ages, average),
        total_customers=total,
        youngest_customer_age=min(ages),
        oldest_customer_age=max(ages),
    )
