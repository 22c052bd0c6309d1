"""
BizTime Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for each error scenario.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py turn them into JSON error
       responses with the matching status code.
Who:   Raised by services and routes; caught by the global handlers.

Exception Hierarchy:
    BizTimeError (base)
    ├── BadRequestError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class BizTimeError(Exception):
    """
    Base exception for all BizTime application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the
                  handler chooses to expose it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(BizTimeError):
    """
    Raised when the request payload is missing or unusable.

    HTTP: 400 Bad Request. FastAPI's own RequestValidationError is folded
    into this status by the handler in main.py, so an absent body on
    PUT /invoices/{id} and a body with a negative amount look the same to
    the client.
    """

    def __init__(
        self,
        message: str = "Bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BizTimeError):
    """
    Raised when a referenced company or invoice does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    this exception so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"No such {resource}: {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(BizTimeError):
    """
    Raised when a write violates a uniqueness or integrity constraint,
    e.g. creating a company whose code or name is already taken.
    """

    def __init__(
        self,
        message: str = "The request conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BizTimeError):
    """
    Raised when a database operation fails unexpectedly.

    The client always receives a generic message; the context (statement
    kind, identifiers, original exception type) is logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(BizTimeError):
    """Raised when a client exceeds the per-IP request rate limit (HTTP 429)."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
