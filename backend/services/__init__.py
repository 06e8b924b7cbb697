"""
Services layer for business logic.

Services are constructed once per application (see helpers/dependencies.py)
and handed to routes through FastAPI dependencies.
"""

from .contact_service import ContactService
from .i18n_service import MessageCatalog
from .rate_limit_service import SubmissionRateLimiter
from .turnstile_service import TurnstileVerifier

__all__ = [
    "ContactService",
    "MessageCatalog",
    "SubmissionRateLimiter",
    "TurnstileVerifier",
]
