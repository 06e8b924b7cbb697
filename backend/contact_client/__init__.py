"""Client-side controller for the site's contact form."""

from contact_client.captcha import CaptchaWidget, ChallengeScript
from contact_client.controller import (
    COOLDOWN_SECONDS,
    COOLDOWN_STORAGE_KEY,
    ContactFormController,
    SubmissionResult,
    SubmissionStatus,
)
from contact_client.errors import (
    CaptchaRequiredError,
    ContactFormError,
    TransportError,
    ValidationError,
)
from contact_client.storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from contact_client.validation import validate

__all__ = [
    "COOLDOWN_SECONDS",
    "COOLDOWN_STORAGE_KEY",
    "CaptchaRequiredError",
    "CaptchaWidget",
    "ChallengeScript",
    "ContactFormController",
    "ContactFormError",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "SubmissionResult",
    "SubmissionStatus",
    "TransportError",
    "ValidationError",
    "validate",
]
