"""Rate limiter for the public read endpoints.

Kept separate from main.py so routers can import the limiter without a
circular import. Contact submissions are limited by SubmissionRateLimiter
instead, which runs after bot verification.
"""

from slowapi import Limiter

from helpers.request_utils import get_caller_address
from models.config import settings

limiter = Limiter(
    key_func=get_caller_address,
    strategy="moving-window",
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)
