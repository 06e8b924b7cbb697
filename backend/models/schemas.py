from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

TURNSTILE_RESPONSE_FIELD = "cf-turnstile-response"


# Contact Form Schemas
class ContactSubmission(BaseModel):
    """Contact form body as posted by the site.

    Fields are untyped here: the endpoint only checks presence, the
    format and length rules live in the client. Any truthy JSON value
    counts as present and is rendered with str() in the email.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Any = None
    email: Any = None
    message: Any = None
    turnstile_token: Any = Field(default=None, alias=TURNSTILE_RESPONSE_FIELD)

    def has_required_fields(self) -> bool:
        return bool(self.name and self.email and self.message)


class ContactSuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
    correlation_id: Optional[str] = None


# Site content schemas
class HealthResponse(BaseModel):
    status: str = "ok"


class MessageBundleResponse(BaseModel):
    """Merged message catalog for one locale."""

    locale: str
    messages: dict[str, Any]
