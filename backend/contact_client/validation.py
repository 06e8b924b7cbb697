"""Field rules for the contact form."""

import re
from collections.abc import Mapping

FORM_FIELDS = ("name", "email", "message")
MAX_MESSAGE_LENGTH = 1000

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

NAME_REQUIRED = "Name is required."
EMAIL_REQUIRED = "Email is required."
EMAIL_INVALID = "Email is invalid."
MESSAGE_REQUIRED = "Message is required."
MESSAGE_TOO_LONG = "Message is too long."


def message_length(message: str) -> int:
    """Length in UTF-16 code units, so characters outside the BMP count twice."""
    return len(message.encode("utf-16-le", "surrogatepass")) // 2


def validate(form: Mapping[str, str]) -> dict[str, str]:
    """
    Check a contact form.

    Args:
        form: Mapping with name, email and message (missing keys count as empty)

    Returns:
        Field name -> error message for every failing field; empty when valid.
    """
    errors: dict[str, str] = {}

    name = form.get("name") or ""
    email = form.get("email") or ""
    message = form.get("message") or ""

    if not name.strip():
        errors["name"] = NAME_REQUIRED

    if not email.strip():
        errors["email"] = EMAIL_REQUIRED
    elif not EMAIL_PATTERN.fullmatch(email):
        errors["email"] = EMAIL_INVALID

    if not message.strip():
        errors["message"] = MESSAGE_REQUIRED
    elif message_length(message) > MAX_MESSAGE_LENGTH:
        errors["message"] = MESSAGE_TOO_LONG

    return errors
