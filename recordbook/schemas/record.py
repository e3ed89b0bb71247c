"""
Recordbook — Pydantic Record Schemas
======================================

What:  Pydantic models for the stored Record, the create/update request body,
       and the small message/health documents the API returns.
How:   FastAPI validates request bodies against these models and serializes
       responses through them; the storage layer uses the same Record model
       to read and write the JSON file, so both sides agree on one shape.

Field naming:
    Python attributes are snake_case; the wire/file format keeps the
    historical camelCase keys (`startDate`, `endDate`) through aliases.
    Dump with `by_alias=True` whenever a dict leaves the process.

Timestamps:
    Dates arrive in whatever form a client sends and are normalized by
    `parse_timestamp`. They leave as UTC ISO 8601 with milliseconds and a
    trailing `Z` (e.g. `2024-01-01T00:00:00.000Z`).
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalize an incoming date value into an aware UTC datetime.

    Accepted inputs:
        - ISO 8601 strings: "2024-01-01", "2024-01-01T10:00:00",
          "2024-01-01T10:00:00.000Z", "2024-01-01T10:00:00+02:00"
        - int/float: milliseconds since the Unix epoch
        - datetime instances

    Naive values (including date-only strings) are taken as UTC.
    Anything else, or an unparseable value, yields None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime as `YYYY-MM-DDTHH:MM:SS.mmmZ` (UTC)."""
    if value is None:
        return None
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ══════════════════════════════════════════════════════════════════════════
# Stored Model — one entry of the JSON array on disk
# ══════════════════════════════════════════════════════════════════════════


class Record(BaseModel):
    """
    What:  One record of the collection, as stored and as returned by GET.

    Only `id` is required and must be an integer. Text fields hold any JSON
    value, since earlier writers stored whatever clients sent. Every other
    field may be null because updates replace fields wholesale from the
    request body without checking them.
    Unknown keys found in the data file are kept (extra="allow") so a
    hand-edited file round-trips through list/get unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int = Field(description="Unique record identifier (max existing + 1)")
    title: Optional[Any] = Field(default=None, description="Short title")
    description: Optional[Any] = Field(default=None, description="Free-text description")
    start_date: Optional[datetime] = Field(
        default=None,
        alias="startDate",
        description="Start timestamp (UTC ISO 8601)",
    )
    end_date: Optional[datetime] = Field(
        default=None,
        alias="endDate",
        description="End timestamp (UTC ISO 8601)",
    )
    status: Optional[Any] = Field(default=None, description="Free-form status label")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_timestamp(cls, v: Any) -> Optional[datetime]:
        return parse_timestamp(v)

    @field_serializer("start_date", "end_date")
    def serialize_timestamp(self, v: Optional[datetime]) -> Optional[str]:
        return format_timestamp(v)

    def to_document(self) -> dict:
        """JSON-ready dict using the on-disk key names."""
        return self.model_dump(mode="json", by_alias=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What clients send to PUT /records/{id} and POST /save
# ══════════════════════════════════════════════════════════════════════════


class RecordPayload(BaseModel):
    """
    What:  Body of create and update requests.

    All fields are optional at the schema level: the create path performs
    its own presence check (so a missing field yields 400, not 422), and the
    update path accepts missing fields as nulls. Date fields are kept raw
    here and normalized by the service, since "present" is judged on what
    the client actually sent. Values are not type-checked beyond presence.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[Any] = None
    description: Optional[Any] = None
    start_date: Optional[Any] = Field(default=None, alias="startDate")
    end_date: Optional[Any] = Field(default=None, alias="endDate")
    status: Optional[Any] = None

    def missing_fields(self) -> list:
        """Names (wire spelling) of required fields whose value is falsy."""
        values = {
            "title": self.title,
            "description": self.description,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "status": self.status,
        }
        return [name for name, value in values.items() if not value]


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Plain acknowledgement body, e.g. {"message": "Record saved successfully"}."""

    message: str = Field(description="Human-readable result message")


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing endpoint.

    Kept to a single `message` key so existing clients that read
    `response.message` keep working. The request correlation id travels in
    the X-Request-ID header instead of the body.
    """

    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """
    What:  Health check response for GET /health.
    """

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Data file status: available, unavailable")
    records: int = Field(description="Number of records currently stored")
    uptime_seconds: float = Field(description="Seconds since service started")
