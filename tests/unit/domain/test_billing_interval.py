"""Tests for billing interval arithmetic."""

from datetime import datetime, timezone

from core.domain.enums import BillingInterval
from core.domain.services import add_billing_interval


def at(year, month, day) -> datetime:
    return datetime(year, month, day, 9, 30, tzinfo=timezone.utc)


def test_weekly():
    assert add_billing_interval(at(2024, 1, 1), BillingInterval.WEEKLY, 2) == at(2024, 1, 15)


def test_monthly_clamps_to_month_end():
    assert add_billing_interval(at(2024, 1, 31), BillingInterval.MONTHLY) == at(2024, 2, 29)
    assert add_billing_interval(at(2023, 1, 31), BillingInterval.MONTHLY) == at(2023, 2, 28)


def test_quarterly_crosses_year():
    assert add_billing_interval(at(2024, 11, 15), BillingInterval.QUARTERLY) == at(2025, 2, 15)


def test_yearly_from_leap_day():
    assert add_billing_interval(at(2024, 2, 29), BillingInterval.YEARLY) == at(2025, 2, 28)


def test_count_below_one_counts_as_one():
    assert add_billing_interval(at(2024, 3, 1), "monthly", 0) == at(2024, 4, 1)
