# travel_quote/utils/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from travel_quote.pricing.config import QuotePolicy


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    return v if v is not None and v != "" else default


def _env_flag(key: str, default: str = "true") -> bool:
    return (_env(key, default) or default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class ConfigSource:
    path: Optional[str]
    s3_uri: Optional[str]
    local_cache_path: str

    @property
    def enabled(self) -> bool:
        return self.path is not None or self.s3_uri is not None


def get_config_source() -> ConfigSource:
    """
    Where the pricing snapshot comes from.

    Env:
      QUOTE_CONFIG_PATH        (optional) JSON file or directory of tables
      QUOTE_CONFIG_S3_URI      (optional) s3://bucket/key.json
      QUOTE_CONFIG_LOCAL_PATH  (default: /tmp/pricing_config.json)
    """
    return ConfigSource(
        path=_env("QUOTE_CONFIG_PATH", None),
        s3_uri=_env("QUOTE_CONFIG_S3_URI", None),
        local_cache_path=_env("QUOTE_CONFIG_LOCAL_PATH", "/tmp/pricing_config.json")
        or "/tmp/pricing_config.json",
    )


def get_quote_policy() -> QuotePolicy:
    """
    Env:
      QUOTE_PLAN_MATCH     substring | exact      (default: substring)
      QUOTE_UNMATCHED_AGE  fallback | reject      (default: fallback)
    """
    return QuotePolicy(
        plan_match=(_env("QUOTE_PLAN_MATCH", "substring") or "substring").lower(),  # type: ignore[arg-type]
        unmatched_age=(_env("QUOTE_UNMATCHED_AGE", "fallback") or "fallback").lower(),  # type: ignore[arg-type]
    )


def get_aws_region() -> Optional[str]:
    """
    Prefer AWS_REGION env var (works in Lambda).
    """
    return _env("AWS_REGION") or _env("AWS_DEFAULT_REGION")


def get_log_level() -> str:
    return (_env("LOG_LEVEL", "INFO") or "INFO").upper()


def preload_config_enabled() -> bool:
    return _env_flag("PRELOAD_CONFIG", "true")
