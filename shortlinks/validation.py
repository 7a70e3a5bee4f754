"""Validation and normalization of destination URLs, codes and page parameters.

All functions here are pure: they never touch the database and never raise for
bad input. Each returns a ``Check`` tagged result that is either a success
carrying the (normalized) value or a failure naming the offending field.

Flow Diagram — validate_destination_url()
=========================================
::
    ┌─────────────┐
    │ raw string  │
    └──────┬──────┘
           ▼
    ┌─────────────┐   no
    │ 1..2048     ├──────► EMPTY / TOO_LONG
    │ chars?      │
    └──────┬──────┘
           ▼
    ┌─────────────┐   no
    │ http(s) +   ├──────► MALFORMED
    │ hostname?   │
    └──────┬──────┘
           ▼
    ┌─────────────┐  yes
    │ production  ├──────► NOT_ALLOWED
    │ & private?  │
    └──────┬──────┘
           ▼
    ┌─────────────┐   no
    │ host rules  ├──────► MALFORMED
    │ + syntax ok?│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ normalize   │
    │ path slash  │
    └─────────────┘

How to Use
===========
::
    check = validate_destination_url("https://Example.com/docs/", production=True)
    if check.ok:
        store_value = check.value  # "https://example.com/docs"
    else:
        print(check.field, check.reason, check.message)
"""

import re
from dataclasses import dataclass
from urllib.parse import quote, urlsplit, urlunsplit

import validators

from shortlinks.enums import RejectReason
from shortlinks.models import CODE_MAX_LENGTH, URL_MAX_LENGTH

__all__ = [
    "Check",
    "CODE_MIN_LENGTH",
    "PAGE_SIZE_MIN",
    "PAGE_SIZE_MAX",
    "RESERVED_CODES",
    "is_private_host",
    "validate_destination_url",
    "validate_code",
    "validate_page",
]

CODE_MIN_LENGTH = 3
HOSTNAME_MAX_LENGTH = 253
PAGE_SIZE_MIN = 10
PAGE_SIZE_MAX = 100

ALLOWED_SCHEMES = ("http", "https")
CODE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

# Paths served by fixed routes; a link under one of them could never redirect.
RESERVED_CODES = frozenset({"health", "metrics", "docs", "redoc"})

# Characters left as-is when escaping a URL for the syntax check; "%" keeps
# existing escapes intact.
PATH_SAFE = "/:@!$&'()*+,;=%~"
FRAGMENT_SAFE = PATH_SAFE + "?#"

PRIVATE_HOST_PATTERNS = (
    re.compile(r"^localhost$", re.IGNORECASE),
    re.compile(r"^127\.0\.0\.1$"),
    re.compile(r"^0\.0\.0\.0$"),
    re.compile(r"^192\.168\."),
    re.compile(r"^10\."),
    re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\."),
    re.compile(r"^::1$"),
)


@dataclass(frozen=True)
class Check:
    """Tagged result of a validation function."""

    ok: bool
    value: str | None = None
    field: str | None = None
    reason: RejectReason | None = None
    message: str | None = None

    @classmethod
    def passed(cls, value: str | None = None) -> "Check":
        return cls(ok=True, value=value)

    @classmethod
    def failed(cls, field: str, reason: RejectReason, message: str) -> "Check":
        return cls(ok=False, field=field, reason=reason, message=message)


def is_private_host(hostname: str) -> bool:
    host = hostname.strip("[]")
    return any(pattern.search(host) for pattern in PRIVATE_HOST_PATTERNS)


def validate_destination_url(raw: str, *, production: bool, field: str = "destination_url") -> Check:
    if not raw:
        return Check.failed(field, RejectReason.EMPTY, "A destination URL is required")
    if len(raw) > URL_MAX_LENGTH:
        return Check.failed(
            field, RejectReason.TOO_LONG, f"URL is too long (max. {URL_MAX_LENGTH} characters)"
        )

    try:
        parts = urlsplit(raw)
        # Accessing .port validates it.
        parts.port
    except ValueError:
        return Check.failed(field, RejectReason.MALFORMED, "Invalid URL format")

    hostname = parts.hostname
    if parts.scheme not in ALLOWED_SCHEMES or not hostname:
        return Check.failed(field, RejectReason.MALFORMED, "URL must be an absolute http or https URL")

    if production and is_private_host(hostname):
        return Check.failed(field, RejectReason.NOT_ALLOWED, "URL host is not allowed")

    if "." not in hostname and hostname != "localhost":
        return Check.failed(field, RejectReason.MALFORMED, "URL host must be a domain name")
    if len(hostname) > HOSTNAME_MAX_LENGTH:
        return Check.failed(field, RejectReason.MALFORMED, "URL host is too long")
    if ".." in hostname or "<" in hostname or ">" in hostname:
        return Check.failed(field, RejectReason.MALFORMED, "URL host contains invalid characters")

    normalized = _normalize(parts)
    if not validators.url(_escaped(urlsplit(normalized)), simple_host=True, strict_query=False, rfc_2782=True):
        return Check.failed(field, RejectReason.MALFORMED, "Invalid URL format")

    return Check.passed(normalized)


def _normalize(parts) -> str:
    userinfo, _, hostport = parts.netloc.rpartition("@")
    netloc = f"{userinfo}@{hostport.lower()}" if userinfo else hostport.lower()

    path = parts.path or "/"
    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return urlunsplit((parts.scheme, netloc, path, parts.query, parts.fragment))


def _escaped(parts) -> str:
    return urlunsplit(
        (
            parts.scheme,
            parts.netloc,
            quote(parts.path, safe=PATH_SAFE),
            quote(parts.query, safe=FRAGMENT_SAFE),
            quote(parts.fragment, safe=FRAGMENT_SAFE),
        )
    )


def validate_code(value: str, *, field: str = "code") -> Check:
    if len(value) < CODE_MIN_LENGTH:
        return Check.failed(
            field, RejectReason.TOO_SHORT, f"{field.capitalize()} must be at least {CODE_MIN_LENGTH} characters"
        )
    if len(value) > CODE_MAX_LENGTH:
        return Check.failed(
            field, RejectReason.TOO_LONG, f"{field.capitalize()} must be at most {CODE_MAX_LENGTH} characters"
        )
    if not CODE_PATTERN.fullmatch(value):
        return Check.failed(
            field, RejectReason.MALFORMED, "Use only letters, digits, hyphen and underscore"
        )
    if value in RESERVED_CODES:
        return Check.failed(field, RejectReason.NOT_ALLOWED, f"'{value}' is reserved")
    return Check.passed(value)


def validate_page(page: int, page_size: int) -> Check:
    if page < 1:
        return Check.failed("page", RejectReason.OUT_OF_RANGE, "page must be 1 or greater")
    if not PAGE_SIZE_MIN <= page_size <= PAGE_SIZE_MAX:
        return Check.failed(
            "pageSize",
            RejectReason.OUT_OF_RANGE,
            f"pageSize must be between {PAGE_SIZE_MIN} and {PAGE_SIZE_MAX}",
        )
    return Check.passed()
