"""URL, code and page validation tests."""

import pytest

from shortlinks.enums import RejectReason
from shortlinks.validation import validate_code, validate_destination_url, validate_page


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("https://www.google.com", "https://www.google.com/"),
        ("https://www.google.com/", "https://www.google.com/"),
        ("https://example.com/docs/", "https://example.com/docs"),
        ("https://example.com/docs", "https://example.com/docs"),
        ("http://Example.COM/Path/", "http://example.com/Path"),
        ("https://example.com/a/b/?q=1", "https://example.com/a/b?q=1"),
        ("https://sub.example.co.uk:8443/x", "https://sub.example.co.uk:8443/x"),
        ("https://my_site.example.com/", "https://my_site.example.com/"),
        ("https://example.com/a path", "https://example.com/a path"),
        ("https://example.com/search?q=a b", "https://example.com/search?q=a b"),
        ("https://example.com/x|y", "https://example.com/x|y"),
        ("https://example.com/caf%C3%A9/", "https://example.com/caf%C3%A9"),
        ("https://example.com/page#section-2", "https://example.com/page#section-2"),
    ],
)
def test_valid_urls_are_normalized(raw: str, expected: str) -> None:
    check = validate_destination_url(raw, production=True)
    assert check.ok
    assert check.value == expected


def test_trailing_slash_variants_normalize_identically() -> None:
    with_slash = validate_destination_url("https://example.com/blog/post/", production=False)
    without_slash = validate_destination_url("https://example.com/blog/post", production=False)
    assert with_slash.value == without_slash.value == "https://example.com/blog/post"


def test_root_path_keeps_single_slash() -> None:
    assert validate_destination_url("https://example.com/", production=False).value == "https://example.com/"


def test_only_one_trailing_slash_is_stripped() -> None:
    assert validate_destination_url("https://example.com/a//", production=False).value == "https://example.com/a/"


def test_empty_url_rejected() -> None:
    check = validate_destination_url("", production=False)
    assert not check.ok
    assert check.reason is RejectReason.EMPTY
    assert check.field == "destination_url"


def test_url_length_limit() -> None:
    base = "https://example.com/"
    at_limit = base + "a" * (2048 - len(base))
    over_limit = at_limit + "a"

    assert validate_destination_url(at_limit, production=False).ok
    check = validate_destination_url(over_limit, production=False)
    assert not check.ok
    assert check.reason is RejectReason.TOO_LONG


@pytest.mark.parametrize(
    "raw",
    [
        "not-a-url",
        "example.com/path",
        "ftp://example.com/file",
        "javascript:alert(1)",
        "https://",
        "https://example",
        "https://exa..mple.com",
        "https://example.com:99999/",
    ],
)
def test_malformed_urls_rejected(raw: str) -> None:
    check = validate_destination_url(raw, production=False)
    assert not check.ok
    assert check.reason is RejectReason.MALFORMED


def test_hostname_length_limit() -> None:
    label = "a" * 60
    hostname = ".".join([label] * 5) + ".com"
    assert len(hostname) > 253
    check = validate_destination_url(f"https://{hostname}/", production=False)
    assert not check.ok
    assert check.reason is RejectReason.MALFORMED


@pytest.mark.parametrize(
    "raw",
    [
        "http://localhost",
        "http://localhost:3000/app",
        "http://127.0.0.1/",
        "http://0.0.0.0:8080",
        "http://192.168.1.10/admin",
        "http://10.0.0.5",
        "http://172.16.0.1",
        "http://172.31.255.255/x",
        "http://[::1]:8000/",
    ],
)
def test_private_hosts_not_allowed_in_production(raw: str) -> None:
    check = validate_destination_url(raw, production=True)
    assert not check.ok
    assert check.reason is RejectReason.NOT_ALLOWED
    assert check.message == "URL host is not allowed"


@pytest.mark.parametrize("raw", ["http://172.15.0.1/", "http://172.32.0.1/", "http://11.0.0.1/"])
def test_public_addresses_near_private_ranges_allowed(raw: str) -> None:
    assert validate_destination_url(raw, production=True).ok


def test_localhost_accepted_outside_production() -> None:
    check = validate_destination_url("http://localhost:3000/app/", production=False)
    assert check.ok
    assert check.value == "http://localhost:3000/app"


def test_private_ip_accepted_outside_production() -> None:
    assert validate_destination_url("http://192.168.0.10/", production=False).ok


@pytest.mark.parametrize("code", ["abc", "my-code", "my_code_2", "A" * 50])
def test_valid_codes(code: str) -> None:
    check = validate_code(code)
    assert check.ok
    assert check.value == code


def test_code_too_short_names_minimum() -> None:
    check = validate_code("ab")
    assert not check.ok
    assert check.reason is RejectReason.TOO_SHORT
    assert "at least 3" in check.message


def test_code_too_long() -> None:
    check = validate_code("a" * 51)
    assert not check.ok
    assert check.reason is RejectReason.TOO_LONG


@pytest.mark.parametrize("code", ["my code", "my-code!", "brev.ly", "abc\n", "ação"])
def test_code_charset(code: str) -> None:
    check = validate_code(code)
    assert not check.ok
    assert check.reason is RejectReason.MALFORMED


def test_page_bounds() -> None:
    assert validate_page(1, 10).ok
    assert validate_page(7, 100).ok
    assert validate_page(0, 10).field == "page"
    assert validate_page(1, 9).field == "pageSize"
    assert validate_page(1, 101).field == "pageSize"


@pytest.mark.parametrize("raw", ["https://exa mple.com/", "https://-example.com/", "https://example!.com/"])
def test_invalid_hostnames_rejected(raw: str) -> None:
    check = validate_destination_url(raw, production=False)
    assert not check.ok
    assert check.reason is RejectReason.MALFORMED


@pytest.mark.parametrize("code", ["health", "metrics", "docs", "redoc"])
def test_route_names_are_reserved(code: str) -> None:
    check = validate_code(code)
    assert not check.ok
    assert check.reason is RejectReason.NOT_ALLOWED
    assert check.field == "code"


def test_reserved_names_are_case_sensitive() -> None:
    assert validate_code("Health").ok
