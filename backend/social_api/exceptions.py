"""
Social API Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    SocialAPIError (base)
    ├── ValidationError               → 400 Bad Request
    │   └── AuthError                 → 400 Bad Request (bad credentials)
    ├── AuthenticationRequiredError   → 401 Unauthorized
    ├── ForbiddenError                → 403 Forbidden (ownership check)
    ├── RelationNotFoundError         → 403 Forbidden (unlike / unfollow)
    ├── NotFoundError                 → 404 Not Found
    ├── RateLimitExceededError        → 429 Too Many Requests
    └── FileStorageError              → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class SocialAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SocialAPIError):
    """
    Raised when client input fails validation.

    When:    Missing or malformed fields, duplicate username/email,
             a reference to a row that does not exist, self-follow.
    HTTP:    400 Bad Request

    Field-level messages are collected under context["fields"] so the
    response reads the same whether the failure came from a Pydantic
    schema or from a business rule:

        {"fields": {"email": ["The email has already been taken."]}}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        fields: Optional[Dict[str, List[str]]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = fields
        elif field:
            ctx["fields"] = {field: [message]}
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthError(ValidationError):
    """
    Raised when login credentials do not match a user.

    HTTP: 400, reported against the email field like any other
    validation failure.
    """

    def __init__(self, message: str = "The provided credentials are incorrect."):
        super().__init__(message=message, field="email")


class AuthenticationRequiredError(SocialAPIError):
    """
    Raised when a protected endpoint is called without a valid bearer token.

    When:    Missing Authorization header, unknown token, revoked token.
    HTTP:    401 Unauthorized
    """

    def __init__(self, message: str = "Unauthenticated."):
        super().__init__(message=message)


class ForbiddenError(SocialAPIError):
    """
    Raised when ownership enforcement is on and the actor does not own
    the entity it is trying to mutate.

    HTTP: 403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to modify this resource.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RelationNotFoundError(SocialAPIError):
    """
    Raised when unlike / unfollow targets a pair that does not exist.

    Kept distinct from NotFoundError: both entities exist, only the
    relationship between them is absent.
    HTTP: 403
    """

    def __init__(
        self,
        message: str = "Relation not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SocialAPIError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert
    None → NotFoundError so handlers can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class FileStorageError(SocialAPIError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, MIME detection unavailable.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(SocialAPIError):
    """
    A client exceeded the per-IP request rate limit.

    Built by RateLimitMiddleware, which answers 429 with a Retry-After header
    itself; the middleware runs outside the exception handlers.
    """

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
