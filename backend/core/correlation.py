"""
Correlation IDs for tying a contact submission's log lines together.

The ID travels in the X-Correlation-ID header (the contact client sends one
per attempt), lands in every loguru record and is echoed in error bodies.
"""

import uuid
from contextvars import ContextVar

CORRELATION_HEADER = "X-Correlation-ID"

# Request-scoped, so concurrent requests never see each other's ID
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a short correlation ID.

    Returns:
        8 hexadecimal characters, short enough to read back from a log.
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the current context's correlation ID, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def resolve_correlation_id(incoming: str | None) -> str:
    """
    Accept a caller-supplied ID when it looks sane, otherwise mint one.

    Args:
        incoming: Raw X-Correlation-ID header value (may be None).

    Returns:
        The ID to use for this request.
    """
    if incoming:
        candidate = incoming.strip()
        if 0 < len(candidate) <= 64 and candidate.isalnum():
            return candidate
    return generate_correlation_id()
