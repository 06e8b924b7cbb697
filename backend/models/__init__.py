"""Models package - settings, Pydantic schemas and domain exceptions."""

from .schemas import ContactSubmission, ContactSuccessResponse, ErrorResponse

__all__ = [
    "ContactSubmission",
    "ContactSuccessResponse",
    "ErrorResponse",
]
