# travel_quote/pricing/quote.py
"""
Travel insurance quote engine.

Provides:
- plan / zone / age-bracket resolution
- quote calculation (subtotal, tax, commission, total, price per day)
- plan comparison for a single trip

Notes:
- Pure functions over a PricingConfig snapshot: no I/O, no logging, no globals.
- Summation follows traveler list order so results are reproducible bit for bit.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from travel_quote.pricing.config import (
    AgeBracket,
    PlanCatalogEntry,
    PricingConfig,
    QuotePolicy,
    ZoneEntry,
    validate_config,
)
from travel_quote.pricing.errors import (
    AgeBracketUnmatched,
    EmptyTravelerList,
    InvalidDuration,
    InvalidTraveler,
    PlanNotFound,
    ZoneNotFound,
)


@dataclass(frozen=True)
class Traveler:
    age: int


@dataclass(frozen=True)
class QuoteRequest:
    category: str
    zone: str
    duration: int
    travelers: Sequence[Traveler]


@dataclass(frozen=True)
class AgeBracketWarning:
    traveler_index: int
    age: int
    kind: str = "AgeBracketUnmatched"

    @property
    def message(self) -> str:
        return (
            f"No age bracket covers traveler #{self.traveler_index} (age {self.age}); "
            "priced at the plan's base daily price."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "traveler_index": self.traveler_index,
            "age": self.age,
            "message": self.message,
        }


@dataclass(frozen=True)
class QuoteResult:
    subtotal: float
    tax: float
    commission: float
    total: float
    price_per_day: float
    currency: str
    plan: str
    zone: str
    duration: int
    travelers: int
    warnings: Tuple[AgeBracketWarning, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["warnings"] = [w.to_dict() for w in self.warnings]
        return out

    def rounded(self, ndigits: int = 2) -> "QuoteResult":
        """Copy with money fields rounded for display."""
        return QuoteResult(
            subtotal=round(self.subtotal, ndigits),
            tax=round(self.tax, ndigits),
            commission=round(self.commission, ndigits),
            total=round(self.total, ndigits),
            price_per_day=round(self.price_per_day, ndigits),
            currency=self.currency,
            plan=self.plan,
            zone=self.zone,
            duration=self.duration,
            travelers=self.travelers,
            warnings=self.warnings,
        )


def format_money(amount: float, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def resolve_plan(
    plans: Iterable[PlanCatalogEntry],
    category: str,
    mode: str = "substring",
) -> PlanCatalogEntry:
    """
    First plan in catalog order whose lowercased name contains (substring mode)
    or equals (exact mode) the lowercased category. An empty category matches nothing.
    """
    wanted = (category or "").lower()
    if wanted:
        for plan in plans:
            name = plan.name.lower()
            if (mode == "exact" and name == wanted) or (mode != "exact" and wanted in name):
                return plan
    raise PlanNotFound(f"No plan matches category: {category!r}")


def resolve_zone(zones: Iterable[ZoneEntry], name: str) -> ZoneEntry:
    # Exact, case-sensitive
    for zone in zones:
        if zone.name == name:
            return zone
    raise ZoneNotFound(f"Unknown zone: {name!r}")


def resolve_age_bracket(brackets: Iterable[AgeBracket], age: int) -> Optional[AgeBracket]:
    for bracket in brackets:
        if bracket.contains(age):
            return bracket
    return None


def _validate_request(request: QuoteRequest) -> None:
    if not request.travelers:
        raise EmptyTravelerList("At least one traveler is required.")

    d = request.duration
    if not isinstance(d, int) or isinstance(d, bool) or d <= 0:
        raise InvalidDuration(f"Duration must be a positive number of days, got: {d!r}")

    for i, t in enumerate(request.travelers):
        age = t.age
        if not isinstance(age, int) or isinstance(age, bool) or age < 0:
            raise InvalidTraveler(f"Traveler #{i} has an invalid age: {age!r}")


def _price(
    cfg: PricingConfig,
    plan: PlanCatalogEntry,
    zone: ZoneEntry,
    request: QuoteRequest,
    policy: QuotePolicy,
) -> QuoteResult:
    base_daily_price = plan.base_price * zone.price_multiplier

    travelers_price = 0.0
    warnings: List[AgeBracketWarning] = []
    for i, traveler in enumerate(request.travelers):
        bracket = resolve_age_bracket(cfg.age_ranges, traveler.age)
        if bracket is None:
            if policy.unmatched_age == "reject":
                raise AgeBracketUnmatched(
                    f"No age bracket covers traveler #{i} (age {traveler.age}).",
                    traveler_index=i,
                    age=traveler.age,
                )
            warnings.append(AgeBracketWarning(traveler_index=i, age=traveler.age))
            multiplier = 1.0
        else:
            multiplier = bracket.price_multiplier
        travelers_price += base_daily_price * multiplier

    subtotal = travelers_price * request.duration
    tax = subtotal * cfg.tax_rate / 100
    commission = subtotal * cfg.commission_rate / 100

    return QuoteResult(
        subtotal=subtotal,
        tax=tax,
        commission=commission,
        total=subtotal + tax + commission,
        price_per_day=travelers_price,
        currency=cfg.currency,
        plan=plan.name,
        zone=zone.name,
        duration=request.duration,
        travelers=len(request.travelers),
        warnings=tuple(warnings),
    )


def calculate_quote(
    cfg: PricingConfig,
    request: QuoteRequest,
    policy: Optional[QuotePolicy] = None,
) -> QuoteResult:
    """
    Price one trip.

    base_daily_price = plan.base_price * zone.price_multiplier
    price_per_day    = sum(base_daily_price * age multiplier) over travelers
    subtotal         = price_per_day * duration
    tax, commission  = subtotal * rate / 100
    total            = subtotal + tax + commission
    """
    policy = policy or QuotePolicy()
    validate_config(cfg)
    _validate_request(request)

    plan = resolve_plan(cfg.plans, request.category, policy.plan_match)
    zone = resolve_zone(cfg.zones, request.zone)
    return _price(cfg, plan, zone, request, policy)


def quote_all_plans(
    cfg: PricingConfig,
    request: QuoteRequest,
    policy: Optional[QuotePolicy] = None,
) -> List[QuoteResult]:
    """
    Price the same trip under every plan, in catalog order.
    The request's category is ignored.
    """
    policy = policy or QuotePolicy()
    validate_config(cfg)
    _validate_request(request)

    zone = resolve_zone(cfg.zones, request.zone)
    return [_price(cfg, plan, zone, request, policy) for plan in cfg.plans]
