# travel_quote/pricing/errors.py
"""
Failure taxonomy for quote computation.

Every error carries a stable `code` so the API and CLI can report it
without matching on class names.
"""

from __future__ import annotations


class QuoteError(Exception):
    code = "quote_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "detail": self.message}


class PlanNotFound(QuoteError):
    code = "plan_not_found"


class ZoneNotFound(QuoteError):
    code = "zone_not_found"


class EmptyTravelerList(QuoteError):
    code = "empty_traveler_list"


class InvalidDuration(QuoteError):
    code = "invalid_duration"


class InvalidTraveler(QuoteError):
    code = "invalid_traveler"


class InvalidConfiguration(QuoteError):
    code = "invalid_configuration"


class AgeBracketUnmatched(QuoteError):
    """Raised only when the unmatched-age policy is `reject`."""

    code = "age_bracket_unmatched"

    def __init__(self, message: str, *, traveler_index: int, age: int) -> None:
        super().__init__(message)
        self.traveler_index = traveler_index
        self.age = age
