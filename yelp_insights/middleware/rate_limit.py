"""
Per-client rate limiting for the endpoints that fan out to paid APIs.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from yelp_insights.config import settings

limiter = Limiter(key_func=get_remote_address)

QUERY_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
