# travel_quote/service/quotes.py
"""
End-to-end quote service.

Single source of truth:
- configuration source -> cached PricingConfig snapshot
- raw trip payload -> QuoteRequest -> engine -> JSON-ready dict (+ warnings)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from travel_quote.catalog.loader import load_config
from travel_quote.pricing.config import PricingConfig, QuotePolicy
from travel_quote.pricing.errors import EmptyTravelerList, InvalidDuration, InvalidTraveler
from travel_quote.pricing.quote import (
    AgeBracketWarning,
    QuoteRequest,
    Traveler,
    calculate_quote,
    quote_all_plans,
)
from travel_quote.pricing.trip import trip_duration_days
from travel_quote.utils.config import get_quote_policy

logger = logging.getLogger(__name__)


# In-process cache (useful for FastAPI startup + AWS Lambda warm invocations).
# Replaced wholesale on reload, never mutated.
_CACHED_CONFIG: Optional[PricingConfig] = None


def get_config(source: Optional[str] = None, force_reload: bool = False) -> PricingConfig:
    """
    Load and cache the pricing snapshot.
    """
    global _CACHED_CONFIG
    if force_reload or _CACHED_CONFIG is None:
        cfg = load_config(source, force_download=force_reload)
        logger.info(
            "Pricing snapshot loaded: %d plans, %d zones, %d age ranges (%s)",
            len(cfg.plans),
            len(cfg.zones),
            len(cfg.age_ranges),
            cfg.currency,
        )
        _CACHED_CONFIG = cfg
    return _CACHED_CONFIG


def _traveler_from_raw(raw: Any, index: int) -> Traveler:
    age = raw.get("age") if isinstance(raw, Mapping) else raw
    if isinstance(age, float) and age.is_integer():
        age = int(age)
    if not isinstance(age, int) or isinstance(age, bool):
        raise InvalidTraveler(f"Traveler #{index} has an invalid age: {age!r}")
    return Traveler(age=age)


def request_from_payload(payload: Mapping[str, Any]) -> QuoteRequest:
    """
    Build a QuoteRequest from a plain dict.

    Keys:
      category, zone
      duration                     (days) or departureDate + returnDate (ISO dates)
      travelers                    [{"age": 30}, ...] or [30, ...]
    """
    raw_travelers = payload.get("travelers") or []
    if not isinstance(raw_travelers, (list, tuple)):
        raise InvalidTraveler(f"travelers must be a list, got: {type(raw_travelers).__name__}")
    if not raw_travelers:
        raise EmptyTravelerList("At least one traveler is required.")
    travelers = tuple(_traveler_from_raw(t, i) for i, t in enumerate(raw_travelers))

    duration = payload.get("duration")
    if duration is None:
        departure = payload.get("departureDate") or payload.get("departure_date")
        ret = payload.get("returnDate") or payload.get("return_date")
        if departure is None or ret is None:
            raise InvalidDuration("Provide duration or both departureDate and returnDate.")
        duration = trip_duration_days(departure, ret)
    elif isinstance(duration, float) and duration.is_integer():
        duration = int(duration)

    return QuoteRequest(
        category=str(payload.get("category") or ""),
        zone=str(payload.get("zone") or ""),
        duration=duration,
        travelers=travelers,
    )


def _log_warnings(request: QuoteRequest, warnings: List[AgeBracketWarning]) -> None:
    for w in warnings:
        logger.warning("%s (zone=%s, category=%s)", w.message, request.zone, request.category)


def quote_from_payload(
    payload: Mapping[str, Any],
    *,
    config: Optional[PricingConfig] = None,
    policy: Optional[QuotePolicy] = None,
) -> Dict[str, Any]:
    """
    Full quote generation:
      raw payload -> QuoteRequest -> calculate_quote -> dict
    Returns {"quote": {...}, "warnings": [...]}.
    """
    cfg = config or get_config()
    request = request_from_payload(payload)

    result = calculate_quote(cfg, request, policy or get_quote_policy())
    _log_warnings(request, list(result.warnings))

    out = result.to_dict()
    warnings = out.pop("warnings")
    return {"quote": out, "warnings": warnings}


def compare_from_payload(
    payload: Mapping[str, Any],
    *,
    config: Optional[PricingConfig] = None,
    policy: Optional[QuotePolicy] = None,
) -> Dict[str, Any]:
    """
    Price the trip under every plan.
    Returns {"quotes": [...], "warnings": [...]}; warnings are per traveler, not per plan.
    """
    cfg = config or get_config()
    request = request_from_payload(payload)

    results = quote_all_plans(cfg, request, policy or get_quote_policy())
    warnings = list(results[0].warnings) if results else []
    _log_warnings(request, warnings)

    quotes = []
    for r in results:
        d = r.to_dict()
        d.pop("warnings")
        quotes.append(d)
    return {"quotes": quotes, "warnings": [w.to_dict() for w in warnings]}
