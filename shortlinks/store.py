"""Durable code → link mapping on top of async SQLAlchemy.

Every public method is one unit of work: it opens its own session, runs inside
a single transaction and closes the session before returning. No state is kept
on the store between calls apart from the ``Database`` handle.

Flow Diagram — insert()
=======================
::
    ┌─────────────┐
    │ insert(code,│
    │ destination)│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ INSERT      │
    │ (optimistic)│
    └──────┬──────┘
    UNIQUE │ violated?
    ┌──────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌──────────────────┐
│ Return  │  │ CodeConflictError│
│ Link    │  └──────────────────┘
└─────────┘

Flow Diagram — increment_access_count()
=======================================
::
    UPDATE links
       SET access_count = access_count + 1
     WHERE id = :id

The arithmetic runs inside the database so concurrent increments on the same
row all apply.

Key Behaviours
===============
- Uniqueness of ``code`` is never pre-checked; the constraint violation is
  translated into ``CodeConflictError``.
- Listing is offset based and ordered newest first; no total count.
- Any other database failure surfaces as ``StorageFailureError``.
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shortlinks.database import Database
from shortlinks.exceptions import CodeConflictError, StorageFailureError
from shortlinks.metrics import DATABASE_READS_TOTAL, DATABASE_WRITES_TOTAL
from shortlinks.models import Link
from shortlinks.validation import PAGE_SIZE_MAX, PAGE_SIZE_MIN

__all__ = ["LinkStore"]

logger = logging.getLogger("shortlinks.store")


class LinkStore:
    """Persistence operations for ``Link`` records.

    Example:
        >>> store = LinkStore(database)
        >>> link = await store.insert("abc123", "https://example.com/")
        >>> await store.increment_access_count(link.id)
    """

    def __init__(self, database: Database):
        self._database = database

    async def insert(self, code: str, destination_url: str) -> Link:
        """Persist a new link and return it with id, created_at and a zero counter.

        Raises:
            CodeConflictError: ``code`` is already taken.
            StorageFailureError: the database could not complete the write.
        """
        link = Link(code=code, destination_url=destination_url)
        try:
            async with self._database.session() as session:
                async with session.begin():
                    session.add(link)
                    await session.flush()
                    await session.refresh(link)
        except IntegrityError as exc:
            logger.info(f"Insert rejected by unique constraint for code: {code}")
            raise CodeConflictError(code) from exc
        except SQLAlchemyError as exc:
            logger.error(f"Insert failed for code {code}: {exc}")
            raise StorageFailureError("Could not store link") from exc

        DATABASE_WRITES_TOTAL.inc()
        return link

    async def find_by_code(self, code: str) -> Link | None:
        try:
            async with self._database.session() as session:
                result = await session.execute(select(Link).where(Link.code == code))
                link = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error(f"Lookup failed for code {code}: {exc}")
            raise StorageFailureError("Could not read link") from exc

        DATABASE_READS_TOTAL.inc()
        return link

    async def increment_access_count(self, link_id: int) -> bool:
        """Add one to the access counter of exactly one record.

        Returns:
            bool: False when no record with ``link_id`` exists anymore.
        """
        statement = (
            update(Link)
            .where(Link.id == link_id)
            .values(access_count=Link.access_count + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._database.session() as session:
                async with session.begin():
                    result = await session.execute(statement)
        except SQLAlchemyError as exc:
            logger.error(f"Counter increment failed for link {link_id}: {exc}")
            raise StorageFailureError("Could not update access count") from exc

        DATABASE_WRITES_TOTAL.inc()
        return result.rowcount == 1

    async def list_page(self, page: int, page_size: int) -> list[Link]:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page!r}")
        if not PAGE_SIZE_MIN <= page_size <= PAGE_SIZE_MAX:
            raise ValueError(f"page_size must be in [{PAGE_SIZE_MIN}, {PAGE_SIZE_MAX}], got {page_size!r}")

        statement = (
            select(Link)
            .order_by(Link.created_at.desc(), Link.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return await self._fetch_all(statement)

    async def all_newest_first(self) -> list[Link]:
        return await self._fetch_all(select(Link).order_by(Link.created_at.desc(), Link.id.desc()))

    async def delete_by_code(self, code: str) -> int | None:
        """Remove the link for ``code``.

        Returns:
            int | None: id of the removed record, None when nothing matched.
        """
        try:
            async with self._database.session() as session:
                async with session.begin():
                    result = await session.execute(select(Link.id).where(Link.code == code))
                    link_id = result.scalar_one_or_none()
                    if link_id is None:
                        return None
                    deleted = await session.execute(
                        delete(Link).where(Link.id == link_id).execution_options(synchronize_session=False)
                    )
        except SQLAlchemyError as exc:
            logger.error(f"Delete failed for code {code}: {exc}")
            raise StorageFailureError("Could not delete link") from exc

        DATABASE_WRITES_TOTAL.inc()
        return link_id if deleted.rowcount == 1 else None

    async def ping(self) -> None:
        await self._database.ping()

    async def _fetch_all(self, statement) -> list[Link]:
        try:
            async with self._database.session() as session:
                result = await session.execute(statement)
                links = list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.error(f"Listing failed: {exc}")
            raise StorageFailureError("Could not read links") from exc

        DATABASE_READS_TOTAL.inc()
        return links
