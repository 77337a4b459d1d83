import calendar
from datetime import datetime, timedelta
from typing import Optional

from faceyoga.core.constants import AccessTypeEnum


def add_months(value: datetime, months: int) -> datetime:
    """Shift ``value`` by whole calendar months, clamping to the month's last day."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def grant_expiry(
    access_type: AccessTypeEnum,
    starts_at: datetime,
    *,
    trial_duration_days: Optional[int] = None,
    subscription_duration_months: Optional[int] = None,
) -> Optional[datetime]:
    """``None`` means the grant never expires."""
    if access_type == AccessTypeEnum.SUBSCRIPTION and subscription_duration_months:
        return add_months(starts_at, subscription_duration_months)
    if access_type == AccessTypeEnum.TRIAL and trial_duration_days:
        return starts_at + timedelta(days=trial_duration_days)
    return None
