"""Contact form controller.

Holds the form state and drives a submission through validation, the
captcha gate, the POST to /api/contact and the post-send cooldown.
Every call to `submit` returns a SubmissionResult, so each outcome
(including network and server failures) can be shown to the visitor.
"""

import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import httpx
from loguru import logger

from contact_client.captcha import CaptchaWidget
from contact_client.countdown import Countdown
from contact_client.errors import (
    CaptchaRequiredError,
    ContactFormError,
    TransportError,
    ValidationError,
)
from contact_client.storage import KeyValueStorage
from contact_client.validation import FORM_FIELDS, validate

COOLDOWN_SECONDS = 30
COOLDOWN_STORAGE_KEY = "contact_last_sent"
TURNSTILE_RESPONSE_FIELD = "cf-turnstile-response"
CAPTCHA_PROMPT = "Please complete the captcha to prove you're human."


def epoch_millis() -> int:
    return int(time.time() * 1000)


class SubmissionStatus(str, Enum):
    SUCCESS = "success"
    BLOCKED = "blocked"  # already sending or cooling down; nothing happened
    CAPTCHA_REQUIRED = "captcha_required"
    VALIDATION_ERROR = "validation_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class SubmissionResult:
    status: SubmissionStatus
    error: ContactFormError | None = None

    @property
    def ok(self) -> bool:
        return self.status is SubmissionStatus.SUCCESS


class ContactFormController:
    """
    Client half of the contact pipeline.

    Usage:
        async with ContactFormController(url, storage=JsonFileStorage(path)) as form:
            form.update_field("name", "Jane")
            ...
            result = await form.submit()
    """

    def __init__(
        self,
        endpoint: str,
        storage: KeyValueStorage,
        http_client: httpx.AsyncClient | None = None,
        captcha: CaptchaWidget | None = None,
        clock: Callable[[], int] = epoch_millis,
        tick_interval: float = 1.0,
        cooldown_seconds: int = COOLDOWN_SECONDS,
    ) -> None:
        self.endpoint = endpoint
        self.storage = storage
        self.captcha = captcha
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._http = http_client or httpx.AsyncClient()
        self._owns_http = http_client is None
        self._countdown = Countdown(self.tick, interval=tick_interval)
        # Only a cooldown started by a send resets the captcha when it ends
        self._reset_captcha_on_expiry = False

        self.form: dict[str, str] = {field: "" for field in FORM_FIELDS}
        self.errors: dict[str, str] = {}
        self.captcha_error: str | None = None
        self.sending = False
        self.cooldown = 0

    async def __aenter__(self) -> "ContactFormController":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def captcha_required(self) -> bool:
        return self.captcha is not None

    @property
    def can_submit(self) -> bool:
        if self.sending or self.cooldown > 0:
            return False
        return not (self.captcha_required and not self.captcha.token)

    def submit_label(self) -> str:
        if self.sending:
            return "Sending..."
        if self.cooldown > 0:
            return f"Wait {self.cooldown}s"
        if self.captcha_required and not self.captcha.token:
            return "Complete captcha"
        return "Send Message"

    async def initialize(self) -> None:
        """Resume a cooldown left over from an earlier session and mount the captcha."""
        self._restore_cooldown()
        if self.captcha is not None:
            await self.captcha.mount()

    async def close(self) -> None:
        """Stop the countdown and release the HTTP client."""
        self._countdown.cancel()
        if self._owns_http:
            await self._http.aclose()

    def update_field(self, name: str, value: str) -> None:
        if name not in self.form:
            return
        self.form[name] = value
        self.errors.pop(name, None)

    def validate(self) -> dict[str, str]:
        return validate(self.form)

    async def submit(self) -> SubmissionResult:
        """
        Send the form if every gate passes.

        Returns:
            SubmissionResult describing what happened. BLOCKED means the
            call was a no-op because a send is in flight or the cooldown runs.
        """
        if self.sending or self.cooldown > 0:
            return SubmissionResult(SubmissionStatus.BLOCKED)

        if self.captcha is not None:
            if not self.captcha.token:
                self.captcha_error = CAPTCHA_PROMPT
                return SubmissionResult(
                    SubmissionStatus.CAPTCHA_REQUIRED, CaptchaRequiredError()
                )
            self.captcha_error = None

        errors = self.validate()
        if errors:
            self.errors = errors
            return SubmissionResult(
                SubmissionStatus.VALIDATION_ERROR, ValidationError(errors)
            )

        self.sending = True
        try:
            return await self._send()
        finally:
            self.sending = False

    async def _send(self) -> SubmissionResult:
        payload = dict(self.form)
        if self.captcha is not None and self.captcha.token:
            payload[TURNSTILE_RESPONSE_FIELD] = self.captcha.token

        try:
            response = await self._http.post(
                self.endpoint,
                json=payload,
                headers={"X-Correlation-ID": uuid.uuid4().hex[:8]},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Contact form request failed: {e!r}")
            return SubmissionResult(
                SubmissionStatus.TRANSPORT_ERROR, TransportError(str(e) or "network error")
            )

        if not response.is_success:
            detail = _error_detail(response)
            logger.warning(f"Contact form rejected: {response.status_code} {detail}")
            return SubmissionResult(
                SubmissionStatus.TRANSPORT_ERROR,
                TransportError(detail, status_code=response.status_code),
            )

        self._on_sent()
        return SubmissionResult(SubmissionStatus.SUCCESS)

    def _on_sent(self) -> None:
        self.form = {field: "" for field in FORM_FIELDS}
        self.errors = {}
        self._persist_cooldown(self._clock())
        self._start_cooldown(self.cooldown_seconds, reset_captcha=True)
        if self.captcha is not None:
            self.captcha.reset()

    def tick(self) -> bool:
        """
        Advance the cooldown by one second.

        Returns:
            True while the cooldown is still running.
        """
        if self.cooldown <= 1:
            self.cooldown = 0
            self._countdown.cancel()
            self._clear_cooldown()
            if self._reset_captcha_on_expiry and self.captcha is not None:
                self.captcha.reset()
            self._reset_captcha_on_expiry = False
            return False

        self.cooldown -= 1
        return True

    def _start_cooldown(self, seconds: int, reset_captcha: bool) -> None:
        self.cooldown = seconds
        self._reset_captcha_on_expiry = reset_captcha
        self._countdown.start()

    def _restore_cooldown(self) -> None:
        try:
            stored = self.storage.get(COOLDOWN_STORAGE_KEY)
        except OSError as e:
            logger.warning(f"Could not read cooldown state: {e!r}")
            return
        if not stored:
            return

        try:
            last_sent = int(float(stored))
        except (ValueError, OverflowError):
            self._clear_cooldown()
            return

        elapsed = (self._clock() - last_sent) // 1000
        if elapsed < self.cooldown_seconds:
            remaining = min(self.cooldown_seconds, self.cooldown_seconds - elapsed)
            self._start_cooldown(remaining, reset_captcha=False)
        else:
            self._clear_cooldown()

    def _persist_cooldown(self, sent_at: int) -> None:
        try:
            self.storage.set(COOLDOWN_STORAGE_KEY, str(sent_at))
        except OSError as e:
            logger.warning(f"Could not persist cooldown state: {e!r}")

    def _clear_cooldown(self) -> None:
        try:
            self.storage.remove(COOLDOWN_STORAGE_KEY)
        except OSError as e:
            logger.warning(f"Could not clear cooldown state: {e!r}")


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"HTTP {response.status_code}"
