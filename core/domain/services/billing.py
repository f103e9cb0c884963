"""Billing interval arithmetic."""
import calendar
from datetime import datetime, timedelta

from ..enums import BillingInterval


def _add_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp to the last day of the target month (Jan 31 + 1 month -> Feb 28/29)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def add_billing_interval(moment: datetime, interval: BillingInterval, count: int = 1) -> datetime:
    """
    Advance ``moment`` by ``interval`` x ``count``.

    Args:
        moment: Starting point
        interval: Billing interval unit
        count: Number of units (values below 1 count as 1)

    Returns:
        The next billing moment
    """
    count = max(1, int(count or 1))
    interval = BillingInterval(interval)

    if interval == BillingInterval.WEEKLY:
        return moment + timedelta(days=7 * count)
    if interval == BillingInterval.MONTHLY:
        return _add_months(moment, count)
    if interval == BillingInterval.QUARTERLY:
        return _add_months(moment, 3 * count)
    return _add_months(moment, 12 * count)
