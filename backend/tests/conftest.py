"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_DIR"] = ""
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["TURNSTILE_SECRET"] = ""
os.environ["TURNSTILE_SITEKEY"] = ""

from helpers.dependencies import get_contact_service  # noqa: E402
from helpers.rate_limiter import limiter  # noqa: E402
from models.config import Settings  # noqa: E402
from services.contact_service import ContactService  # noqa: E402
from services.email_service import EmailProvider  # noqa: E402
from services.rate_limit_service import SubmissionRateLimiter  # noqa: E402
from services.turnstile_service import TurnstileVerifier  # noqa: E402

VALID_TOKEN = "valid-turnstile-token"
RECIPIENT = "owner@example.com"


class RecordingEmailProvider(EmailProvider):
    """Email provider that remembers what it was asked to send."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: list[dict] = []

    def send(self, to_email, subject, text_body, reply_to=None) -> bool:
        self.sent.append(
            {
                "to": to_email,
                "subject": subject,
                "text": text_body,
                "reply_to": reply_to,
            }
        )
        return self.succeed


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def siteverify_transport(calls: list | None = None) -> httpx.MockTransport:
    """Fake Cloudflare siteverify: only VALID_TOKEN passes."""

    def handler(request: httpx.Request) -> httpx.Response:
        form = dict(httpx.QueryParams(request.content.decode()))
        if calls is not None:
            calls.append(form)
        if form.get("response") == VALID_TOKEN:
            return httpx.Response(200, json={"success": True})
        return httpx.Response(
            200, json={"success": False, "error-codes": ["invalid-input-response"]}
        )

    return httpx.MockTransport(handler)


def make_settings(**overrides) -> Settings:
    values = {
        "TURNSTILE_SECRET": "",
        "RATE_LIMIT_MAX": 5,
        "RATE_LIMIT_WINDOW_SECONDS": 3600,
        "SMTP_TIMEOUT_SECONDS": 5.0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def email_provider() -> RecordingEmailProvider:
    return RecordingEmailProvider()


@pytest.fixture
def siteverify_calls() -> list:
    return []


@pytest.fixture
def make_contact_service(email_provider, clock, siteverify_calls):
    """Factory for ContactService wired to fakes."""

    def _make(turnstile_secret: str = "", **overrides) -> ContactService:
        settings = make_settings(TURNSTILE_SECRET=turnstile_secret, **overrides)
        return ContactService(
            verifier=TurnstileVerifier(
                settings, transport=siteverify_transport(siteverify_calls)
            ),
            rate_limiter=SubmissionRateLimiter(
                limit=settings.RATE_LIMIT_MAX,
                window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
                clock=clock,
            ),
            email_provider=email_provider,
            recipient=RECIPIENT,
        )

    return _make


@pytest.fixture
def contact_service(make_contact_service) -> ContactService:
    """Contact service with bot verification off."""
    return make_contact_service()


@pytest.fixture
def client(contact_service):
    """Test client with the contact service swapped for the fake-wired one."""
    from main import app

    limiter.reset()

    app.dependency_overrides[get_contact_service] = lambda: contact_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def protected_client(make_contact_service):
    """Test client with Turnstile verification enabled."""
    from main import app

    service = make_contact_service(turnstile_secret="test-secret")
    app.dependency_overrides[get_contact_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
