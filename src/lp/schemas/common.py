"""Common Pydantic schemas."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def require_text(value: Optional[str], label: str = "Title") -> str:
    """Reject missing or blank strings with a readable message."""
    if value is None or not value.strip():
        raise PydanticCustomError("required", "{label} is required", {"label": label})
    return value


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize instants to naive UTC so stored values compare consistently."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., examples=["Validation failed"])
    issues: Optional[Dict[str, Any]] = None


class Message(BaseModel):
    message: str


class DeleteResult(BaseModel):
    success: bool = True
