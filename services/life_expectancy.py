"""
============================================================================
Customer Service v1.0.0
Life-Expectancy Estimator
============================================================================

Reliability Level: L5 High
Input Constraints: Integer age, explicit reference date
Side Effects: None (pure function, no clock access)

ALGORITHM:
    remaining = AVERAGE_LIFE_EXPECTANCY - current_age
    remaining = 1 if remaining <= 0
    result    = today + remaining calendar years

A 29 February reference date that lands on a non-leap year is clamped to
28 February.

============================================================================
"""

from datetime import date


# Average life expectancy in years (simplified model)
AVERAGE_LIFE_EXPECTANCY = 80

# Minimum number of years added, keeps the estimate strictly in the future
MINIMUM_REMAINING_YEARS = 1


def add_years(start: date, years: int) -> date:
    """Add calendar years to ``start``, clamping 29 February to 28 February."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


def estimate_life_expectancy(current_age: int, today: date) -> date:
    """
    Estimate the end-of-life date for a customer of ``current_age``.

    Args:
        current_age: Customer's stored age
        today: Reference date (injected by the caller)

    Returns:
        date strictly after ``today``
    """
    remaining_years = AVERAGE_LIFE_EXPECTANCY - current_age
    if remaining_years <= 0:
        remaining_years = MINIMUM_REMAINING_YEARS
    return add_years(today, remaining_years)
