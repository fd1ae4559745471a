# travel_quote/catalog/loader.py
"""
Configuration provider for the quote engine.

Responsibilities:
- Turn the configuration store's records (plans, zones, age ranges, payment
  settings) into a validated, immutable PricingConfig
- Read those records from a JSON snapshot, a directory of CSV/Parquet tables,
  or an s3:// URI
- Fall back to the built-in catalog when no source is configured

Accepted record keys follow the store's camelCase columns
(basePrice, priceMultiplier, minAge/maxAge, taxRate, ...); snake_case works too.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from botocore.exceptions import BotoCoreError, ClientError

from travel_quote.pricing.config import (
    AgeBracket,
    PaymentSettings,
    PlanCatalogEntry,
    PricingConfig,
    ZoneEntry,
    default_pricing_config,
    validate_config,
)
from travel_quote.pricing.errors import InvalidConfiguration
from travel_quote.utils.config import get_aws_region, get_config_source
from travel_quote.utils.config_store import ensure_config_downloaded
from travel_quote.utils.io import find_table, read_df, read_json


_MISSING = object()


def _pick(record: Mapping[str, Any], *keys: str, default: Any = _MISSING) -> Any:
    for k in keys:
        v = record.get(k)
        if v is not None and not (isinstance(v, float) and math.isnan(v)):
            return v
    if default is _MISSING:
        raise InvalidConfiguration(f"Missing field {keys[0]!r} in record: {dict(record)}")
    return default


def _as_float(v: Any, field_name: str) -> float:
    try:
        return float(v)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidConfiguration(f"{field_name} must be a number, got: {v!r}") from e


def _as_int(v: Any, field_name: str) -> int:
    f = _as_float(v, field_name)
    if not math.isfinite(f) or f != int(f):
        raise InvalidConfiguration(f"{field_name} must be a whole number, got: {v!r}")
    return int(f)


def _as_id(v: Any) -> Optional[str]:
    return None if v is None else str(v)


def _as_countries(v: Any) -> Tuple[str, ...]:
    if v is None:
        return ()
    if isinstance(v, str):
        # CSV exports join countries with ';'
        return tuple(c.strip() for c in v.split(";") if c.strip())
    return tuple(str(c) for c in v)


def _plan_from_record(r: Mapping[str, Any]) -> PlanCatalogEntry:
    return PlanCatalogEntry(
        name=str(_pick(r, "name")),
        base_price=_as_float(_pick(r, "basePrice", "base_price"), "basePrice"),
        id=_as_id(_pick(r, "id", default=None)),
    )


def _zone_from_record(r: Mapping[str, Any]) -> ZoneEntry:
    return ZoneEntry(
        name=str(_pick(r, "name")),
        price_multiplier=_as_float(_pick(r, "priceMultiplier", "price_multiplier"), "priceMultiplier"),
        id=_as_id(_pick(r, "id", default=None)),
        risk_level=_pick(r, "riskLevel", "risk_level", default=None),
        countries=_as_countries(_pick(r, "countries", default=None)),
    )


def _bracket_from_record(r: Mapping[str, Any]) -> AgeBracket:
    return AgeBracket(
        min_age=_as_int(_pick(r, "min", "minAge", "min_age"), "minAge"),
        max_age=_as_int(_pick(r, "max", "maxAge", "max_age"), "maxAge"),
        price_multiplier=_as_float(_pick(r, "priceMultiplier", "price_multiplier"), "priceMultiplier"),
    )


def _payment_from_record(r: Optional[Mapping[str, Any]]) -> PaymentSettings:
    if not r:
        return PaymentSettings()
    return PaymentSettings(
        currency=str(_pick(r, "currency", default="USD")),
        tax_rate=_as_float(_pick(r, "taxRate", "tax_rate", default=0.0), "taxRate"),
        commission_rate=_as_float(_pick(r, "commissionRate", "commission_rate", default=0.0), "commissionRate"),
    )


def _records(payload: Mapping[str, Any], *keys: str) -> List[Mapping[str, Any]]:
    raw = _pick(payload, *keys, default=[])
    if not isinstance(raw, (list, tuple)):
        raise InvalidConfiguration(f"{keys[0]!r} must be a list, got: {type(raw).__name__}")
    for item in raw:
        if not isinstance(item, Mapping):
            raise InvalidConfiguration(f"{keys[0]!r} entries must be objects, got: {item!r}")
    return list(raw)


def config_from_dict(payload: Mapping[str, Any]) -> PricingConfig:
    """
    Build and validate a PricingConfig from the store's JSON shape:

    {
      "plans": [{"id", "name", "basePrice"}],
      "zones": [{"id", "name", "priceMultiplier", "riskLevel", "countries"}],
      "ageRanges": [{"min", "max", "priceMultiplier"}],
      "paymentSettings": {"currency", "taxRate", "commissionRate"}
    }
    """
    if not isinstance(payload, Mapping):
        raise InvalidConfiguration(f"Configuration must be an object, got: {type(payload).__name__}")

    payment = _pick(payload, "paymentSettings", "payment_settings", "payment", default=None)
    if payment is not None and not isinstance(payment, Mapping):
        raise InvalidConfiguration("paymentSettings must be an object.")

    cfg = PricingConfig(
        plans=tuple(_plan_from_record(r) for r in _records(payload, "plans")),
        zones=tuple(_zone_from_record(r) for r in _records(payload, "zones")),
        age_ranges=tuple(_bracket_from_record(r) for r in _records(payload, "ageRanges", "age_ranges")),
        payment=_payment_from_record(payment),
    )
    validate_config(cfg)
    return cfg


def config_to_dict(cfg: PricingConfig) -> Dict[str, Any]:
    return {
        "plans": [{"id": p.id, "name": p.name, "basePrice": p.base_price} for p in cfg.plans],
        "zones": [
            {
                "id": z.id,
                "name": z.name,
                "priceMultiplier": z.price_multiplier,
                "riskLevel": z.risk_level,
                "countries": list(z.countries),
            }
            for z in cfg.zones
        ],
        "ageRanges": [
            {"min": b.min_age, "max": b.max_age, "priceMultiplier": b.price_multiplier}
            for b in cfg.age_ranges
        ],
        "paymentSettings": {
            "currency": cfg.payment.currency,
            "taxRate": cfg.payment.tax_rate,
            "commissionRate": cfg.payment.commission_rate,
        },
    }


def load_config_json(path: Union[str, Path]) -> PricingConfig:
    try:
        payload = read_json(path)
    except (OSError, ValueError) as e:
        raise InvalidConfiguration(f"Could not read configuration {path}: {e}") from e
    return config_from_dict(payload)


def _table_records(directory: Path, stem: str, required: bool) -> List[Dict[str, Any]]:
    path = find_table(directory, stem)
    if path is None:
        if required:
            raise InvalidConfiguration(f"Missing table {stem}.csv/.parquet in {directory}")
        return []
    df = read_df(path)
    return df.to_dict(orient="records")


def load_config_tables(directory: Union[str, Path]) -> PricingConfig:
    """
    Read a table export of the store:
      plans.(csv|parquet)       required
      zones.(csv|parquet)       required
      age_ranges.(csv|parquet)  optional
      payment_settings.json     optional
    """
    directory = Path(directory)
    payment_path = directory / "payment_settings.json"
    try:
        payload: Dict[str, Any] = {
            "plans": _table_records(directory, "plans", required=True),
            "zones": _table_records(directory, "zones", required=True),
            "ageRanges": _table_records(directory, "age_ranges", required=False),
        }
        if payment_path.exists():
            payload["paymentSettings"] = read_json(payment_path)
    except (OSError, ValueError) as e:
        raise InvalidConfiguration(f"Could not read configuration tables in {directory}: {e}") from e
    return config_from_dict(payload)


def load_config(source: Optional[str] = None, *, force_download: bool = False) -> PricingConfig:
    """
    Load a pricing snapshot.

    source may be:
      - s3://bucket/key.json  -> downloaded to QUOTE_CONFIG_LOCAL_PATH, then read
      - a directory           -> table export (see load_config_tables)
      - a file                -> JSON snapshot
    If source is not provided:
      - use QUOTE_CONFIG_PATH, then QUOTE_CONFIG_S3_URI
      - otherwise the built-in default catalog
    """
    env = get_config_source()
    if source is None:
        if not env.enabled:
            return default_pricing_config()
        source = env.path or env.s3_uri

    if source.startswith("s3://"):
        try:
            local = ensure_config_downloaded(
                config_s3_uri=source,
                local_path=env.local_cache_path,
                aws_region=get_aws_region(),
                force=force_download,
            )
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e
        except (BotoCoreError, ClientError, OSError) as e:
            raise InvalidConfiguration(f"Could not download configuration {source}: {e}") from e
        return load_config_json(local)

    path = Path(source)
    if path.is_dir():
        return load_config_tables(path)
    return load_config_json(path)
