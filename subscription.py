"""Subscription expiry and overdue-fine arithmetic.

Everything here works in whole "day numbers": milliseconds since the Unix
epoch divided by the length of a day and rounded up.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

MS_PER_DAY = 1000 * 60 * 60 * 24
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SUBSCRIPTION_DAYS = {
    "Basic": 90,
    "Standard": 180,
    "Premium": 365,
}

OVERDUE_MESSAGE = "Book is overdue"
FINE_WITHIN_SUBSCRIPTION = 100
FINE_AFTER_EXPIRY = 200

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date, datetime, None]


class InvalidDateError(ValueError):
    pass


def parse_date(value: Union[str, date, datetime]) -> datetime:
    """Turn a stored date into an aware datetime.

    Bare ``YYYY-MM-DD`` dates are UTC midnight; naive date-times and
    ``MM/DD/YYYY`` dates are read in local time.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.astimezone()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    text = str(value).strip()
    try:
        if _ISO_DATE.match(text):
            parsed = datetime.strptime(text, "%Y-%m-%d")
            return parsed.replace(tzinfo=timezone.utc)
        if "/" in text:
            return datetime.strptime(text, "%m/%d/%Y").astimezone()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateError(f"Invalid date: {value}") from e
    return parsed if parsed.tzinfo else parsed.astimezone()


def day_number(value: DateLike = None, now: Optional[datetime] = None) -> int:
    """Whole days since the epoch for ``value``, or for ``now`` when it is empty."""
    if value:
        moment = parse_date(value)
    else:
        moment = now or datetime.now(timezone.utc)
        if moment.tzinfo is None:
            moment = moment.astimezone()
    millis = (moment - EPOCH) // timedelta(milliseconds=1)
    return -(-millis // MS_PER_DAY)


def expiry_day(start_day: int, subscription_type: Optional[str]) -> int:
    # Unknown tiers get no allowance at all
    return start_day + SUBSCRIPTION_DAYS.get(subscription_type, 0)


def calculate_fine(return_day: int, current_day: int, expiry: int) -> int:
    if return_day >= current_day:
        return 0
    if expiry <= current_day:
        return FINE_AFTER_EXPIRY
    return FINE_WITHIN_SUBSCRIPTION


def subscription_details(user: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Merge the computed subscription fields over a copy of ``user``.

    A user without ``returnDate`` is treated as due back today.
    """
    current_day = day_number(now=now)
    start_day = day_number(user.get("subscriptionDate"), now=now)
    return_day = day_number(user.get("returnDate"), now=now)
    expiry = expiry_day(start_day, user.get("subscriptionType"))

    return {
        **user,
        "subscriptionType": user.get("subscriptionType"),
        "subscriptionDate": user.get("subscriptionDate"),
        "subscriptionDaysLeft": expiry - current_day,
        "daysLeftForReturn": return_day - current_day,
        "returnDate": OVERDUE_MESSAGE if return_day < current_day else return_day,
        "fine": calculate_fine(return_day, current_day, expiry),
    }
