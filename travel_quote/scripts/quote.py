# travel_quote/scripts/quote.py
"""
Quote a trip from the command line.

Usage:
  python -m travel_quote.scripts.quote --zone Europa --category standard --duration 10 --ages 30 45

Optional:
  python -m travel_quote.scripts.quote --zone Europa --category gold \
    --departure 2026-01-10 --return 2026-01-20 --ages 10 70 \
    --config data/pricing_config.json --exact --strict-ages --json

  python -m travel_quote.scripts.quote --config s3://bucket/pricing.json --dump-config out.json

Env (optional):
  QUOTE_CONFIG_PATH / QUOTE_CONFIG_S3_URI  configuration source when --config is omitted
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from travel_quote.catalog.loader import config_to_dict, load_config
from travel_quote.pricing.config import QuotePolicy
from travel_quote.pricing.errors import InvalidDuration, QuoteError
from travel_quote.pricing.quote import QuoteRequest, Traveler, calculate_quote, format_money, quote_all_plans
from travel_quote.pricing.trip import trip_duration_days
from travel_quote.utils.io import write_json


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compute a travel insurance quote from a pricing snapshot.")
    p.add_argument("--config", type=str, default=None, help="JSON file, table directory or s3:// URI. Default: env or built-in catalog")
    p.add_argument("--zone", type=str, default=None, help="Zone name (exact match, e.g. Europa)")
    p.add_argument("--category", type=str, default=None, help="Plan category (e.g. standard). Omit to compare all plans")
    p.add_argument("--duration", type=int, default=None, help="Trip length in days")
    p.add_argument("--departure", type=str, default=None, help="Departure date YYYY-MM-DD (with --return)")
    p.add_argument("--return", dest="return_date", type=str, default=None, help="Return date YYYY-MM-DD (with --departure)")
    p.add_argument("--ages", type=int, nargs="+", default=[], help="Traveler ages")
    p.add_argument("--exact", action="store_true", help="Match plan names exactly instead of by substring")
    p.add_argument("--strict-ages", action="store_true", help="Fail when an age falls outside every bracket")
    p.add_argument("--json", action="store_true", help="Print the result as JSON")
    p.add_argument("--dump-config", type=str, default=None, help="Write the loaded snapshot to this JSON path and exit")
    return p.parse_args(argv)


def _duration(args: argparse.Namespace) -> int:
    if args.duration is not None:
        return args.duration
    if args.departure and args.return_date:
        return trip_duration_days(args.departure, args.return_date)
    raise InvalidDuration("Provide --duration or both --departure and --return.")


def run(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)

    if args.dump_config:
        out_path = Path(args.dump_config)
        write_json(config_to_dict(cfg), out_path)
        print(f"[OK] Snapshot saved     : {out_path}")
        print(f"Plans: {len(cfg.plans)} | Zones: {len(cfg.zones)} | Age ranges: {len(cfg.age_ranges)}")
        return 0

    if not args.zone:
        print("[ERROR] --zone is required unless --dump-config is given", file=sys.stderr)
        return 2

    policy = QuotePolicy(
        plan_match="exact" if args.exact else "substring",
        unmatched_age="reject" if args.strict_ages else "fallback",
    )
    request = QuoteRequest(
        category=args.category or "",
        zone=args.zone,
        duration=_duration(args),
        travelers=tuple(Traveler(age=a) for a in args.ages),
    )

    if args.category:
        results = [calculate_quote(cfg, request, policy)]
    else:
        results = quote_all_plans(cfg, request, policy)

    if args.json:
        payload = [r.to_dict() for r in results]
        print(json.dumps(payload[0] if args.category else payload, indent=2, ensure_ascii=False))
        return 0

    for r in results:
        shown = r.rounded()
        print(f"[OK] {shown.plan} / {shown.zone} / {shown.duration} days / {shown.travelers} traveler(s)")
        print(f"     Price per day : {format_money(shown.price_per_day, shown.currency)}")
        print(f"     Subtotal      : {format_money(shown.subtotal, shown.currency)}")
        print(f"     Tax           : {format_money(shown.tax, shown.currency)}")
        print(f"     Commission    : {format_money(shown.commission, shown.currency)}")
        print(f"     Total         : {format_money(shown.total, shown.currency)}")
    for w in results[0].warnings:
        print(f"[WARN] {w.message}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        return run(args)
    except QuoteError as e:
        print(f"[ERROR] {e.code}: {e.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
