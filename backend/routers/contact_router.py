"""Contact form router for site visitors."""

import json

from fastapi import APIRouter, Depends, Request
from loguru import logger
from pydantic import ValidationError

from helpers.dependencies import get_contact_service
from helpers.request_utils import get_caller_address
from models.exceptions import MethodNotAllowedException, MissingFieldsException
from models.schemas import ContactSubmission, ContactSuccessResponse
from services.contact_service import ContactService

router = APIRouter(prefix="/contact", tags=["contact"])

# Registered for every common verb so non-POST calls get the JSON 405
# body instead of the framework default
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def _read_submission(request: Request) -> ContactSubmission:
    """Parse the JSON body; anything unusable counts as missing fields."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise MissingFieldsException()

    if not isinstance(payload, dict):
        raise MissingFieldsException()

    try:
        return ContactSubmission.model_validate(payload)
    except ValidationError:
        raise MissingFieldsException()


@router.api_route("", methods=ROUTE_METHODS, response_model=ContactSuccessResponse)
async def submit_contact_form(
    request: Request,
    service: ContactService = Depends(get_contact_service),
) -> ContactSuccessResponse:
    """Submit a contact form.

    Sends a notification email to the site owner.
    No authentication required - public endpoint.
    Rate limited per caller address (5 per hour by default).

    Raises:
        MethodNotAllowedException: 405 for anything but POST
        MissingFieldsException: 400 if name, email or message is missing
        BotVerificationFailedException: 403 if Turnstile verification fails
        RateLimitExceededException: 429 when the caller's window is full
        EmailDeliveryException: 500 if email sending fails
    """
    if request.method != "POST":
        raise MethodNotAllowedException(request.method)

    submission = await _read_submission(request)
    caller_address = get_caller_address(request)

    logger.info(f"Contact form submitted from {caller_address}")

    await service.submit(submission, caller_address)

    return ContactSuccessResponse(success=True)
