"""
============================================================================
Unit Tests - Life Expectancy Estimator
============================================================================

Reliability Level: L5 High
Test Coverage: Remaining years, minimum of one year, leap days
============================================================================
"""

from datetime import date

import pytest

from services.life_expectancy import (
    AVERAGE_LIFE_EXPECTANCY,
    add_years,
    estimate_life_expectancy,
)


TODAY = date(2024, 1, 1)


class TestEstimateLifeExpectancy:

    def test_average_life_expectancy_is_eighty(self):
        assert AVERAGE_LIFE_EXPECTANCY == 80

    @pytest.mark.parametrize("age, expected", [
        (30, date(2074, 1, 1)),
        (25, date(2079, 1, 1)),
        (0, date(2104, 1, 1)),
        (79, date(2025, 1, 1)),
    ])
    def test_remaining_years_added_to_today(self, age, expected):
        assert estimate_life_expectancy(age, TODAY) == expected

    @pytest.mark.parametrize("age", [80, 81, 95, 120])
    def test_at_or_above_average_adds_one_year(self, age):
        assert estimate_life_expectancy(age, TODAY) == date(2025, 1, 1)

    def test_result_is_after_today(self):
        for age in range(0, 130):
            assert estimate_life_expectancy(age, TODAY) > TODAY

    def test_leap_day_clamps_to_february_28(self):
        leap_day = date(2024, 2, 29)

        assert estimate_life_expectancy(79, leap_day) == date(2025, 2, 28)

    def test_leap_day_kept_on_leap_target(self):
        leap_day = date(2024, 2, 29)

        # 80 - 76 = 4 years, 2028 is a leap year
        assert estimate_life_expectancy(76, leap_day) == date(2028, 2, 29)


class TestAddYears:

    def test_plain_date(self):
        assert add_years(date(2020, 6, 15), 10) == date(2030, 6, 15)

    def test_leap_day_to_non_leap_year(self):
        assert add_years(date(2020, 2, 29), 1) == date(2021, 2, 28)
