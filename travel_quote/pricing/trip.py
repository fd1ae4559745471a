# travel_quote/pricing/trip.py
from __future__ import annotations

from datetime import date, datetime
from typing import Union

from travel_quote.pricing.errors import InvalidDuration

DateLike = Union[date, datetime, str]


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as e:
        raise InvalidDuration(f"Not an ISO date (YYYY-MM-DD): {value!r}") from e


def trip_duration_days(departure: DateLike, return_date: DateLike) -> int:
    """
    Days billed for a trip: max(1, whole days between the dates).

    Same-day trips bill one day. A return before the departure is an error.
    """
    start = _to_date(departure)
    end = _to_date(return_date)
    days = (end - start).days
    if days < 0:
        raise InvalidDuration(f"Return date {end.isoformat()} is before departure {start.isoformat()}.")
    return max(1, days)
