# travel_quote/api/app.py
"""
FastAPI service for the Travel Insurance Quote Engine.

Endpoints:
- GET  /health       -> snapshot summary
- POST /quote        -> price breakdown for one plan
- POST /quote/plans  -> price breakdown for every plan (comparison grid)

Runtime flow:
trip JSON -> QuoteRequest -> calculate_quote(snapshot) -> quote + warnings
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from travel_quote.pricing.errors import (
    InvalidConfiguration,
    PlanNotFound,
    QuoteError,
    ZoneNotFound,
)
from travel_quote.service.quotes import compare_from_payload, get_config, quote_from_payload
from travel_quote.utils.config import get_log_level

logging.basicConfig(level=get_log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


app = FastAPI(title="Travel Insurance Quote Engine", version="0.1.0")


class TravelerInput(BaseModel):
    age: int


class TripInput(BaseModel):
    zone: str
    travelers: List[TravelerInput] = Field(default_factory=list)

    # Either duration (days) or both dates
    duration: Optional[int] = None
    departure_date: Optional[date] = None
    return_date: Optional[date] = None


class QuoteRequestBody(TripInput):
    category: str


class QuoteResponse(BaseModel):
    quote: Dict[str, Any]
    warnings: List[Dict[str, Any]] = Field(default_factory=list)


class CompareResponse(BaseModel):
    quotes: List[Dict[str, Any]]
    warnings: List[Dict[str, Any]] = Field(default_factory=list)


def _status_for(exc: QuoteError) -> int:
    if isinstance(exc, (PlanNotFound, ZoneNotFound)):
        return 404
    if isinstance(exc, InvalidConfiguration):
        return 503
    return 422


@app.exception_handler(QuoteError)
async def quote_error_handler(request: Request, exc: QuoteError) -> JSONResponse:
    status = _status_for(exc)
    if status == 503:
        logger.error("Pricing configuration unusable: %s", exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


@app.get("/health")
def health() -> Dict[str, Any]:
    cfg = get_config()
    return {
        "status": "ok",
        "plans": len(cfg.plans),
        "zones": len(cfg.zones),
        "currency": cfg.currency,
    }


@app.post("/quote", response_model=QuoteResponse)
def quote(req: QuoteRequestBody) -> QuoteResponse:
    out = quote_from_payload(req.model_dump())
    return QuoteResponse(quote=out["quote"], warnings=out["warnings"])


@app.post("/quote/plans", response_model=CompareResponse)
def compare_plans(req: TripInput) -> CompareResponse:
    out = compare_from_payload(req.model_dump())
    return CompareResponse(quotes=out["quotes"], warnings=out["warnings"])
