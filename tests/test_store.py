"""LinkStore tests against a SQLite database."""

import pytest

from shortlinks.database import Database
from shortlinks.exceptions import CodeConflictError, StorageFailureError
from shortlinks.store import LinkStore


@pytest.mark.asyncio
async def test_insert_returns_full_record(store: LinkStore) -> None:
    link = await store.insert("abc123", "https://example.com/")

    assert link.id is not None
    assert link.code == "abc123"
    assert link.destination_url == "https://example.com/"
    assert link.access_count == 0
    assert link.created_at is not None


@pytest.mark.asyncio
async def test_insert_duplicate_code_conflicts(store: LinkStore) -> None:
    first = await store.insert("taken", "https://example.com/first")

    with pytest.raises(CodeConflictError) as exc_info:
        await store.insert("taken", "https://example.com/second")
    assert exc_info.value.code == "taken"

    found = await store.find_by_code("taken")
    assert found.id == first.id
    assert found.destination_url == "https://example.com/first"


@pytest.mark.asyncio
async def test_find_by_code_missing(store: LinkStore) -> None:
    assert await store.find_by_code("nope") is None


@pytest.mark.asyncio
async def test_increment_access_count(store: LinkStore) -> None:
    link = await store.insert("count", "https://example.com/")

    assert await store.increment_access_count(link.id)
    assert await store.increment_access_count(link.id)

    assert (await store.find_by_code("count")).access_count == 2


@pytest.mark.asyncio
async def test_increment_missing_record(store: LinkStore) -> None:
    assert await store.increment_access_count(999) is False


@pytest.mark.asyncio
async def test_list_page_newest_first(store: LinkStore) -> None:
    for i in range(15):
        await store.insert(f"code{i:02d}", f"https://example.com/{i}")

    first_page = await store.list_page(1, 10)
    second_page = await store.list_page(2, 10)

    assert [link.code for link in first_page] == [f"code{i:02d}" for i in range(14, 4, -1)]
    assert [link.code for link in second_page] == [f"code{i:02d}" for i in range(4, -1, -1)]
    assert await store.list_page(3, 10) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("page, page_size", [(0, 10), (1, 9), (1, 101)])
async def test_list_page_rejects_out_of_range(store: LinkStore, page: int, page_size: int) -> None:
    with pytest.raises(ValueError):
        await store.list_page(page, page_size)


@pytest.mark.asyncio
async def test_delete_by_code(store: LinkStore) -> None:
    link = await store.insert("gone", "https://example.com/")

    assert await store.delete_by_code("gone") == link.id
    assert await store.find_by_code("gone") is None
    assert await store.delete_by_code("gone") is None


@pytest.mark.asyncio
async def test_deleted_code_can_be_reused(store: LinkStore) -> None:
    await store.insert("again", "https://example.com/old")
    await store.delete_by_code("again")

    link = await store.insert("again", "https://example.com/new")
    assert link.destination_url == "https://example.com/new"
    assert link.access_count == 0


@pytest.mark.asyncio
async def test_all_newest_first(store: LinkStore) -> None:
    await store.insert("older", "https://example.com/1")
    await store.insert("newer", "https://example.com/2")

    assert [link.code for link in await store.all_newest_first()] == ["newer", "older"]


@pytest.mark.asyncio
async def test_database_failures_become_storage_errors(database: Database, store: LinkStore) -> None:
    link = await store.insert("present", "https://example.com/")
    # Without the table every statement fails at the driver.
    await database.drop_all()

    with pytest.raises(StorageFailureError):
        await store.insert("another", "https://example.com/")
    with pytest.raises(StorageFailureError):
        await store.find_by_code("present")
    with pytest.raises(StorageFailureError):
        await store.increment_access_count(link.id)
    with pytest.raises(StorageFailureError):
        await store.list_page(1, 10)
    with pytest.raises(StorageFailureError):
        await store.all_newest_first()
    with pytest.raises(StorageFailureError):
        await store.delete_by_code("present")
