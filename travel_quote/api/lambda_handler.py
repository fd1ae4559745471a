# travel_quote/api/lambda_handler.py
"""
AWS Lambda handler for FastAPI using Mangum (ASGI adapter).

How it works:
- API Gateway invokes Lambda
- Mangum translates the event into an ASGI request
- FastAPI handles routing (/health, /quote, /quote/plans)
- Response is returned back to API Gateway

Configuration loading:
- get_config() runs at import time (cold start) so the pricing snapshot is ready.
  With QUOTE_CONFIG_S3_URI set, Lambda needs s3:GetObject on that key.
"""

from __future__ import annotations

from mangum import Mangum

from travel_quote.api.app import app
from travel_quote.service.quotes import get_config
from travel_quote.utils.config import preload_config_enabled


if preload_config_enabled():
    get_config()


handler = Mangum(app)
