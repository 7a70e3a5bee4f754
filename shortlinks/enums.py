"""Shared enums for the short link service.

This module defines all status and state enums used across the codebase.
Using enums instead of string literals provides type safety and prevents typos.
"""

from enum import StrEnum

__all__ = ["AppEnv", "ErrorKind", "HealthStatus", "RejectReason", "RequestStatus"]


class AppEnv(StrEnum):
    """Execution mode of the process."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ErrorKind(StrEnum):
    """Failure categories surfaced to callers."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    EMPTY_EXPORT = "empty_export"
    STORAGE_FAILURE = "storage_failure"
    INTERNAL = "internal"


class RejectReason(StrEnum):
    """Why a candidate value failed validation."""

    EMPTY = "empty"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    MALFORMED = "malformed"
    NOT_ALLOWED = "not_allowed"
    OUT_OF_RANGE = "out_of_range"


class RequestStatus(StrEnum):
    """Outcome label used on request counters."""

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    EMPTY = "empty"
    ERROR = "error"
