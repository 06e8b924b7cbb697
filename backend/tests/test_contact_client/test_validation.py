"""Tests for contact form field rules."""

import pytest

from contact_client.validation import (
    EMAIL_INVALID,
    EMAIL_REQUIRED,
    MAX_MESSAGE_LENGTH,
    MESSAGE_REQUIRED,
    MESSAGE_TOO_LONG,
    NAME_REQUIRED,
    message_length,
    validate,
)


def _form(**overrides) -> dict:
    form = {"name": "Jane", "email": "jane@example.com", "message": "Hello"}
    form.update(overrides)
    return form


class TestValidate:
    """validate() reports every failing field at once."""

    def test_valid_form(self) -> None:
        assert validate(_form()) == {}

    def test_all_empty(self) -> None:
        assert validate({"name": "", "email": "", "message": ""}) == {
            "name": NAME_REQUIRED,
            "email": EMAIL_REQUIRED,
            "message": MESSAGE_REQUIRED,
        }

    def test_missing_keys_count_as_empty(self) -> None:
        assert set(validate({})) == {"name", "email", "message"}

    def test_whitespace_only_is_empty(self) -> None:
        errors = validate(_form(name="   ", message="\n\t"))
        assert errors == {"name": NAME_REQUIRED, "message": MESSAGE_REQUIRED}

    @pytest.mark.parametrize(
        "email", ["jane", "jane@example", "@example.com", "jane @example.com", "a@b."]
    )
    def test_invalid_email(self, email: str) -> None:
        assert validate(_form(email=email)) == {"email": EMAIL_INVALID}

    @pytest.mark.parametrize("email", ["a@b.co", "first.last+tag@sub.example.org"])
    def test_valid_email(self, email: str) -> None:
        assert validate(_form(email=email)) == {}

    def test_email_with_trailing_newline_rejected(self) -> None:
        assert validate(_form(email="jane@example.com\n")) == {"email": EMAIL_INVALID}

    def test_message_at_limit(self) -> None:
        assert validate(_form(message="x" * MAX_MESSAGE_LENGTH)) == {}

    def test_message_over_limit(self) -> None:
        errors = validate(_form(message="x" * (MAX_MESSAGE_LENGTH + 1)))
        assert errors == {"message": MESSAGE_TOO_LONG}

    def test_astral_characters_count_twice(self) -> None:
        assert message_length("héllo") == 5
        assert message_length("\U0001F600") == 2

    def test_emoji_message_at_limit(self) -> None:
        assert validate(_form(message="\U0001F600" * 500)) == {}

    def test_emoji_message_over_limit(self) -> None:
        errors = validate(_form(message="\U0001F600" * 600))
        assert errors == {"message": MESSAGE_TOO_LONG}
