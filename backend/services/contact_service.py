"""Contact form service.

Runs the server half of a contact submission: presence check, bot
verification, per-address rate limit, then one email to the site owner.
Each step raises a domain exception; main.py maps those onto HTTP.
"""

from typing import Any

from loguru import logger
from starlette.concurrency import run_in_threadpool

from models.exceptions import (
    BotVerificationFailedException,
    EmailDeliveryException,
    MissingFieldsException,
)
from models.schemas import ContactSubmission
from services.email_service import EmailProvider
from services.rate_limit_service import SubmissionRateLimiter
from services.turnstile_service import TurnstileVerifier


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _single_line(value: str) -> str:
    """Collapse CR/LF so visitor input cannot add mail headers."""
    return " ".join(value.splitlines()).strip()


class ContactService:
    """Service for handling contact form submissions."""

    def __init__(
        self,
        verifier: TurnstileVerifier,
        rate_limiter: SubmissionRateLimiter,
        email_provider: EmailProvider,
        recipient: str,
    ) -> None:
        self.verifier = verifier
        self.rate_limiter = rate_limiter
        self.email_provider = email_provider
        self.recipient = recipient

    @staticmethod
    def build_email(submission: ContactSubmission) -> tuple[str, str]:
        """Build the notification for the site owner.

        Plain text only, so the visitor's input goes in verbatim.

        Returns:
            Tuple of (subject, text_body)
        """
        name = _text(submission.name)
        subject = f"New Contact Form Submission from {_single_line(name)}"
        text_body = (
            f"Name: {name}\n"
            f"Email: {_text(submission.email)}\n"
            f"Message: {_text(submission.message)}"
        )
        return subject, text_body

    async def verify_bot(self, submission: ContactSubmission, caller_address: str) -> None:
        """Redeem the Turnstile token when verification is configured.

        Raises:
            BotVerificationFailedException: Token missing, malformed, rejected
                or unverifiable
        """
        if not self.verifier.enabled:
            return

        token = submission.turnstile_token
        if token is not None and not isinstance(token, str):
            logger.warning(f"Contact: non-string bot token ({type(token).__name__})")
            raise BotVerificationFailedException()

        try:
            verified = await self.verifier.verify(token, caller_address)
        except Exception as e:
            logger.error(f"Contact: bot verification raised {e!r}")
            verified = False

        if not verified:
            raise BotVerificationFailedException()

    async def send_notification(self, submission: ContactSubmission) -> None:
        """Deliver the submission to the site owner.

        The provider bounds its own work (SMTP_TIMEOUT_SECONDS for the SMTP
        relay), so a reported failure means nothing was handed over.

        Raises:
            EmailDeliveryException: Relay failed or exceeded the deadline
        """
        subject, text_body = self.build_email(submission)

        sent = await run_in_threadpool(
            self.email_provider.send,
            self.recipient,
            subject,
            text_body,
            _single_line(_text(submission.email)),
        )

        if not sent:
            logger.error(f"Contact: failed to notify {self.recipient}")
            raise EmailDeliveryException()

    async def submit(self, submission: ContactSubmission, caller_address: str) -> None:
        """Process a contact form submission.

        Args:
            submission: Parsed request body
            caller_address: Rate-limit key for the caller

        Raises:
            MissingFieldsException: name, email or message absent
            BotVerificationFailedException: Turnstile check failed
            RateLimitExceededException: Caller over the window limit
            EmailDeliveryException: Mail relay failed
        """
        if not submission.has_required_fields():
            raise MissingFieldsException()

        await self.verify_bot(submission, caller_address)

        self.rate_limiter.check_and_record(caller_address)

        await self.send_notification(submission)

        logger.info(f"Contact form delivered to {self.recipient}")
