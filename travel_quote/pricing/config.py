# travel_quote/pricing/config.py
"""
Pricing configuration snapshot.

A PricingConfig is what the configuration store hands to the engine:
- plans: insurance tiers with a base price per traveler per day
- zones: destination regions with a price multiplier
- age_ranges: inclusive age brackets with a price multiplier
- payment: currency plus tax and commission rates (percentages, 0-100)

Everything is frozen and tuple-backed; a snapshot is never edited in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

import numpy as np

from travel_quote.pricing.errors import InvalidConfiguration


PlanMatch = Literal["substring", "exact"]
UnmatchedAgePolicy = Literal["fallback", "reject"]

PLAN_MATCH_MODES = ("substring", "exact")
UNMATCHED_AGE_POLICIES = ("fallback", "reject")


@dataclass(frozen=True)
class PlanCatalogEntry:
    name: str
    base_price: float
    id: Optional[str] = None


@dataclass(frozen=True)
class ZoneEntry:
    name: str
    price_multiplier: float
    id: Optional[str] = None
    # Carried from the store, not used by the arithmetic
    risk_level: Optional[str] = None
    countries: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AgeBracket:
    min_age: int
    max_age: int
    price_multiplier: float

    def contains(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class PaymentSettings:
    currency: str = "USD"
    tax_rate: float = 0.0
    commission_rate: float = 0.0


@dataclass(frozen=True)
class PricingConfig:
    plans: Tuple[PlanCatalogEntry, ...]
    zones: Tuple[ZoneEntry, ...]
    age_ranges: Tuple[AgeBracket, ...]
    payment: PaymentSettings = field(default_factory=PaymentSettings)

    @property
    def currency(self) -> str:
        return self.payment.currency

    @property
    def tax_rate(self) -> float:
        return self.payment.tax_rate

    @property
    def commission_rate(self) -> float:
        return self.payment.commission_rate


@dataclass(frozen=True)
class QuotePolicy:
    """
    Choice points the engine leaves to the deployment.

    - plan_match="substring": lowercased plan name contains the category
      (first match in catalog order wins)
    - plan_match="exact": lowercased plan name equals the category
    - unmatched_age="fallback": price the traveler at multiplier 1 and attach
      a warning to the result
    - unmatched_age="reject": fail the quote with AgeBracketUnmatched
    """

    plan_match: PlanMatch = "substring"
    unmatched_age: UnmatchedAgePolicy = "fallback"

    def __post_init__(self) -> None:
        if self.plan_match not in PLAN_MATCH_MODES:
            raise InvalidConfiguration(
                f"plan_match must be one of {PLAN_MATCH_MODES}, got: {self.plan_match!r}"
            )
        if self.unmatched_age not in UNMATCHED_AGE_POLICIES:
            raise InvalidConfiguration(
                f"unmatched_age must be one of {UNMATCHED_AGE_POLICIES}, got: {self.unmatched_age!r}"
            )


def _is_number(v: object) -> bool:
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        return False
    try:
        return bool(np.isfinite(v))
    except (OverflowError, TypeError):
        # ints beyond float range
        return False


def _is_int(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def validate_config(cfg: PricingConfig) -> None:
    """
    Reject malformed snapshots with InvalidConfiguration.

    Checks:
    - at least one plan; names non-blank; base_price finite and >= 0
    - zone and age multipliers finite and > 0
    - age bounds non-negative integers with min_age <= max_age
    - tax/commission rates finite and >= 0; currency non-blank
    """
    if not cfg.plans:
        raise InvalidConfiguration("Plan catalog is empty.")

    for i, plan in enumerate(cfg.plans):
        if not isinstance(plan.name, str) or not plan.name.strip():
            raise InvalidConfiguration(f"plans[{i}] has a blank name.")
        if not _is_number(plan.base_price) or plan.base_price < 0:
            raise InvalidConfiguration(
                f"plans[{i}] ({plan.name}) base_price must be a non-negative number, got: {plan.base_price!r}"
            )

    for i, zone in enumerate(cfg.zones):
        if not isinstance(zone.name, str) or not zone.name:
            raise InvalidConfiguration(f"zones[{i}] has a blank name.")
        if not _is_number(zone.price_multiplier) or zone.price_multiplier <= 0:
            raise InvalidConfiguration(
                f"zones[{i}] ({zone.name}) price_multiplier must be positive, got: {zone.price_multiplier!r}"
            )

    for i, bracket in enumerate(cfg.age_ranges):
        if not (_is_int(bracket.min_age) and _is_int(bracket.max_age)):
            raise InvalidConfiguration(f"age_ranges[{i}] bounds must be integers.")
        if bracket.min_age < 0 or bracket.min_age > bracket.max_age:
            raise InvalidConfiguration(
                f"age_ranges[{i}] has invalid bounds {bracket.min_age}-{bracket.max_age}."
            )
        if not _is_number(bracket.price_multiplier) or bracket.price_multiplier <= 0:
            raise InvalidConfiguration(
                f"age_ranges[{i}] price_multiplier must be positive, got: {bracket.price_multiplier!r}"
            )

    pay = cfg.payment
    if not isinstance(pay.currency, str) or not pay.currency.strip():
        raise InvalidConfiguration("Payment currency is blank.")
    for name in ("tax_rate", "commission_rate"):
        v = getattr(pay, name)
        if not _is_number(v) or v < 0:
            raise InvalidConfiguration(f"{name} must be a non-negative percentage, got: {v!r}")


def default_pricing_config() -> PricingConfig:
    """
    Built-in catalog used when no configuration source is set.
    Storefront launch rates (USD per day).
    """
    plans = (
        PlanCatalogEntry(name="Basic", base_price=5.0, id="basic"),
        PlanCatalogEntry(name="Standard", base_price=8.0, id="standard"),
        PlanCatalogEntry(name="Premium", base_price=12.0, id="premium"),
    )
    zones = tuple(
        ZoneEntry(name=name, price_multiplier=mult)
        for name, mult in [
            ("Sudamerica", 1.0),
            ("Caribe", 1.3),
            ("Norte America", 1.5),
            ("Europa", 1.4),
            ("Asia", 1.6),
            ("Sudeste Asiatico", 1.7),
            ("Oceania", 1.8),
            ("Africa", 1.9),
            ("Mediterraneo", 1.4),
        ]
    )
    age_ranges = (
        AgeBracket(min_age=0, max_age=11, price_multiplier=1.2),
        AgeBracket(min_age=12, max_age=64, price_multiplier=1.0),
        AgeBracket(min_age=65, max_age=120, price_multiplier=1.5),
    )
    return PricingConfig(plans=plans, zones=zones, age_ranges=age_ranges, payment=PaymentSettings())
