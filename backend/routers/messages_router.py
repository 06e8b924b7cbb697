"""Translated UI strings."""

from fastapi import APIRouter, Depends, Request

from helpers.dependencies import get_message_catalog
from helpers.rate_limiter import limiter
from models.schemas import MessageBundleResponse
from services.i18n_service import MessageCatalog

router = APIRouter(prefix="/messages", tags=["i18n"])


@router.get("/{locale}", response_model=MessageBundleResponse)
@limiter.limit("120/minute")
def get_messages(
    request: Request,
    locale: str,
    catalog: MessageCatalog = Depends(get_message_catalog),
) -> MessageBundleResponse:
    """Get the message bundle for a locale.

    Keys missing from the translation are filled from the default locale;
    unsupported locales get the default bundle.

    Args:
        request: FastAPI request object (required for rate limiter)
        locale: Locale code such as "fr" or "fr-CA"
    """
    resolved, messages = catalog.bundle(locale)
    return MessageBundleResponse(locale=resolved, messages=messages)
