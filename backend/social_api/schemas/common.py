"""
Social API Backend — Shared Schemas
=====================================

What:  Response shapes reused across resources, plus the helper that turns
       Pydantic errors into the field-level message map every 400 carries.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Iterable, List, Optional, Type, TypeVar

import pydantic
from pydantic import AfterValidator, BaseModel, Field, StringConstraints

from social_api.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Location prefixes FastAPI and Pydantic put in front of the field name
_LOCATION_PREFIXES = {"body", "query", "path", "form", "header", "cookie"}

# bcrypt refuses input longer than this many bytes
PASSWORD_MAX_BYTES = 72


# ══════════════════════════════════════════════════════════════════════════
# Error / message envelopes
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "The email has already been taken.",
            "details": {"fields": {"email": ["The email has already been taken."]}},
            "request_id": "3f2a9c1d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Summaries embedded in other resources' views
# ══════════════════════════════════════════════════════════════════════════


class ProfileSummary(BaseModel):
    """Author block embedded in post and comment views."""
    id: int
    username: str
    profile_picture: Optional[str] = None

    model_config = {"from_attributes": True}


class PostSummary(BaseModel):
    """Parent-post block embedded in comment views."""
    id: int
    content: str
    profile_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Validation helpers
# ══════════════════════════════════════════════════════════════════════════


def errors_to_fields(errors: Iterable[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Collapse Pydantic error dicts into {field: [messages]}.

    ("body", "email") → "email"; nested locations are dotted.
    """
    fields: Dict[str, List[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        name = ".".join(loc) or "body"
        fields.setdefault(name, []).append(error.get("msg", "Invalid value"))
    return fields


def build_form(model: Type[ModelT], **values: Any) -> ModelT:
    """
    Validate multipart form fields against a schema.

    Why: Post and profile endpoints take multipart bodies (for the image), so
    their fields arrive as individual Form() parameters rather than a JSON
    body FastAPI would validate for us. Unset fields (None) are dropped so
    partial-update schemas can tell "not sent" from "sent".

    Raises:
        ValidationError with field-level messages
    """
    supplied = {key: value for key, value in values.items() if value is not None}
    try:
        return model.model_validate(supplied)
    except pydantic.ValidationError as e:
        fields = errors_to_fields(e.errors())
        first = next(iter(fields.values()))[0]
        raise ValidationError(message=first, fields=fields)


# ══════════════════════════════════════════════════════════════════════════
# Field types
# ══════════════════════════════════════════════════════════════════════════


def _within_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"The password may not be greater than {PASSWORD_MAX_BYTES} bytes.")
    return value


# Display names and usernames: surrounding whitespace is dropped
DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

# Passwords are hashed exactly as sent; length is checked in UTF-8 bytes
Password = Annotated[str, AfterValidator(_within_password_bytes)]
