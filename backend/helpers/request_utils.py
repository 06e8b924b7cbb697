"""
Request utilities for extracting client information.

The caller address keys the contact rate limit, so every path through
these helpers has to produce a string.
"""

from typing import Optional

from fastapi import Request

UNKNOWN_ADDRESS = "unknown"


def get_client_ip(request: Request) -> Optional[str]:
    """
    Extract the client's IP address from the request.

    Order of precedence:
    1. X-Forwarded-For (first entry is the original client)
    2. Direct client.host

    Args:
        request: FastAPI request object

    Returns:
        Client IP address or None if not available
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first_ip = forwarded_for.split(",")[0].strip()
        if first_ip:
            return first_ip

    if request.client and request.client.host:
        return request.client.host

    return None


def get_caller_address(request: Request) -> str:
    """
    Rate-limit key for a request.

    Callers with no resolvable address all share the "unknown" bucket.
    """
    return get_client_ip(request) or UNKNOWN_ADDRESS
