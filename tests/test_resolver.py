"""Redirect resolution and access counting tests."""

import asyncio

import pytest

from shortlinks.resolver import RedirectResolver
from shortlinks.store import LinkStore


@pytest.fixture
def resolver(store: LinkStore) -> RedirectResolver:
    return RedirectResolver(store)


@pytest.mark.asyncio
async def test_resolve_returns_destination_and_counts(store: LinkStore, resolver: RedirectResolver) -> None:
    await store.insert("docs", "https://example.com/docs")

    assert await resolver.resolve("docs") == "https://example.com/docs"
    assert (await store.find_by_code("docs")).access_count == 1


@pytest.mark.asyncio
async def test_resolve_unknown_code(resolver: RedirectResolver) -> None:
    assert await resolver.resolve("missing") is None


@pytest.mark.asyncio
async def test_concurrent_resolutions_are_all_counted(store: LinkStore, resolver: RedirectResolver) -> None:
    await store.insert("hot", "https://example.com/hot")

    results = await asyncio.gather(*(resolver.resolve("hot") for _ in range(20)))

    assert results == ["https://example.com/hot"] * 20
    assert (await store.find_by_code("hot")).access_count == 20


@pytest.mark.asyncio
async def test_manual_hit_counts_without_resolving(store: LinkStore, resolver: RedirectResolver) -> None:
    await store.insert("visit", "https://example.com/")

    assert await resolver.hit("visit") is True
    assert (await store.find_by_code("visit")).access_count == 1


@pytest.mark.asyncio
async def test_manual_hit_and_redirect_both_count(store: LinkStore, resolver: RedirectResolver) -> None:
    await store.insert("both", "https://example.com/")

    await resolver.resolve("both")
    await resolver.hit("both")

    assert (await store.find_by_code("both")).access_count == 2


@pytest.mark.asyncio
async def test_manual_hit_unknown_code(resolver: RedirectResolver) -> None:
    assert await resolver.hit("missing") is False


@pytest.mark.asyncio
async def test_resolve_after_delete(store: LinkStore, resolver: RedirectResolver) -> None:
    await store.insert("temp", "https://example.com/")
    await store.delete_by_code("temp")

    assert await resolver.resolve("temp") is None
