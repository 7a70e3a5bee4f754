"""Pydantic schemas for request/response serialization in the short link API.

The input schemas are plain structs: they only fix the shape and types of the
payload. Content rules (URL policy, code charset and lengths, alias prefix)
are applied by the explicit functions in ``shortlinks.validation`` so that
every failure carries the offending field.

Schema Hierarchy
=================
::
    LinkCreate (Input)
    ├─ destination_url: str
    ├─ code: str | None
    └─ alias: str | None

    LinkResponse (Output)
    ├─ id: int
    ├─ code: str
    ├─ destination_url: str
    ├─ access_count: int
    ├─ created_at: datetime
    └─ public_url: str

    LinkCreated (Output)
    └─ LinkResponse + alias: str | None

    ExportResponse (Output)
    ├─ csv_url: str
    ├─ key: str
    └─ rows: int

Classes:
    LinkCreate:  Input schema for link creation.
    LinkResponse:  Output schema for a single link (metadata and listings).
    LinkCreated:  Output schema for a newly created link.
    HitResponse:  Acknowledgement of a manual hit.
    ExportResponse:  Reference to the generated CSV file.
    HealthResponse:  Output schema for health checks.
    ErrorResponse:  Error envelope.
"""

import datetime

from pydantic import BaseModel, Field

from shortlinks.enums import ErrorKind, HealthStatus

__all__ = [
    "LinkCreate",
    "LinkResponse",
    "LinkCreated",
    "HitResponse",
    "ExportResponse",
    "HealthResponse",
    "ErrorResponse",
]


class LinkCreate(BaseModel):
    destination_url: str = Field(..., description="Absolute http(s) URL, e.g. 'https://example.com/docs'")
    code: str | None = Field(None, description="Explicit short code, 3-50 chars of [A-Za-z0-9_-]")
    alias: str | None = Field(None, description="User alias; the service prefix is stripped before use")


class LinkResponse(BaseModel):
    id: int
    code: str
    destination_url: str
    access_count: int
    created_at: datetime.datetime
    public_url: str

    model_config = {"from_attributes": True}


class LinkCreated(LinkResponse):
    alias: str | None = None


class HitResponse(BaseModel):
    ok: bool = True


class ExportResponse(BaseModel):
    csv_url: str
    key: str
    rows: int


class HealthResponse(BaseModel):
    status: HealthStatus
    database: HealthStatus


class ErrorResponse(BaseModel):
    message: str
    kind: ErrorKind
    field: str | None = None
