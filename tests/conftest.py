import pytest

from travel_quote.pricing.config import (
    AgeBracket,
    PaymentSettings,
    PlanCatalogEntry,
    PricingConfig,
    ZoneEntry,
)
from travel_quote.service import quotes as quote_service


@pytest.fixture
def pricing_config():
    """Standard plan in Europa with tax 19% and commission 10%."""
    return PricingConfig(
        plans=(
            PlanCatalogEntry(name="Basic", base_price=5.0, id="basic"),
            PlanCatalogEntry(name="Standard", base_price=8.0, id="standard"),
            PlanCatalogEntry(name="Premium", base_price=12.0, id="premium"),
        ),
        zones=(
            ZoneEntry(name="Sudamerica", price_multiplier=1.0),
            ZoneEntry(name="Europa", price_multiplier=1.4, risk_level="medium"),
        ),
        age_ranges=(
            AgeBracket(min_age=0, max_age=11, price_multiplier=1.2),
            AgeBracket(min_age=18, max_age=64, price_multiplier=1.0),
            AgeBracket(min_age=65, max_age=120, price_multiplier=1.5),
        ),
        payment=PaymentSettings(currency="USD", tax_rate=19.0, commission_rate=10.0),
    )


@pytest.fixture
def store_payload():
    """Configuration store JSON shape (camelCase columns)."""
    return {
        "plans": [
            {"id": "p1", "name": "Standard", "basePrice": 8},
            {"id": "p2", "name": "Standard Gold", "basePrice": 11},
        ],
        "zones": [
            {"id": "z1", "name": "Europa", "priceMultiplier": 1.4, "riskLevel": "medium", "countries": ["Spain", "France"]},
            {"id": "z2", "name": "Caribe", "priceMultiplier": 1.3, "riskLevel": "low"},
        ],
        "ageRanges": [
            {"minAge": 0, "maxAge": 11, "priceMultiplier": 1.2},
            {"minAge": 12, "maxAge": 64, "priceMultiplier": 1.0},
            {"minAge": 65, "maxAge": 120, "priceMultiplier": 1.5},
        ],
        "paymentSettings": {"currency": "EUR", "taxRate": 19, "commissionRate": 10},
    }


@pytest.fixture
def clean_env(monkeypatch):
    for key in [
        "QUOTE_CONFIG_PATH",
        "QUOTE_CONFIG_S3_URI",
        "QUOTE_CONFIG_LOCAL_PATH",
        "QUOTE_PLAN_MATCH",
        "QUOTE_UNMATCHED_AGE",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cached_config(monkeypatch, clean_env, pricing_config):
    """Make the service (and API) serve pricing_config without touching any source."""
    monkeypatch.setattr(quote_service, "_CACHED_CONFIG", pricing_config)
    return pricing_config
