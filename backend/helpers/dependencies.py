"""Application-scoped services and their FastAPI dependencies.

`build_services` runs in the app lifespan; routes receive the instances
through `Depends`, and tests swap them with `app.dependency_overrides`.
"""

from dataclasses import dataclass

from fastapi import Request

from models.config import Settings
from services.config_service import get_contact_recipient
from services.contact_service import ContactService
from services.email_service import get_email_provider
from services.i18n_service import MessageCatalog
from services.rate_limit_service import SubmissionRateLimiter
from services.turnstile_service import TurnstileVerifier


@dataclass
class AppServices:
    contact: ContactService
    catalog: MessageCatalog


def build_services(settings: Settings) -> AppServices:
    """Construct every service the routes depend on."""
    contact = ContactService(
        verifier=TurnstileVerifier(settings),
        rate_limiter=SubmissionRateLimiter(
            limit=settings.RATE_LIMIT_MAX,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        ),
        email_provider=get_email_provider(settings),
        recipient=get_contact_recipient(),
    )
    catalog = MessageCatalog(
        settings.MESSAGES_DIR,
        default_locale=settings.DEFAULT_LOCALE,
        supported_locales=settings.SUPPORTED_LOCALES,
    )
    return AppServices(contact=contact, catalog=catalog)


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.services.contact


def get_message_catalog(request: Request) -> MessageCatalog:
    return request.app.state.services.catalog
