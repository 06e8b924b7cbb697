"""Outcomes of a contact submission that did not end in a sent message."""


class ContactFormError(Exception):
    """Base class for contact form failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ContactFormError):
    """One or more fields failed their constraint.

    Attributes:
        errors: Field name -> message, for every failing field.
    """

    def __init__(self, errors: dict[str, str], message: str = "invalid form"):
        self.errors = dict(errors)
        super().__init__(message)


class CaptchaRequiredError(ValidationError):
    """Bot verification is configured but no token has been issued yet."""

    def __init__(self, message: str = "captcha required"):
        super().__init__({"captcha": message}, message)


class TransportError(ContactFormError):
    """The request failed on the network or the endpoint answered non-2xx.

    Attributes:
        status_code: HTTP status, or None when no response arrived.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429
