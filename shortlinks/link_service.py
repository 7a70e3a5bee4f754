"""Short Link Service Layer - Core Business Logic

This module orchestrates the link lifecycle: validation, code assignment,
persistence, metadata lookup, listing and deletion. Redirects are handled by
``RedirectResolver`` and bulk export by ``ExportBuilder``; all three share one
``LinkStore``.

Architecture Overview
==================
::
    ┌─────────────────────────────────────────────────────────────┐
    │                    Service Layer                            │
    │  ┌─────────────────┐  ┌─────────────────┐  ┌──────────────┐ │
    │  │  Link Service   │  │    Resolver     │  │ Export       │ │
    │  │                 │  │                 │  │ Builder      │ │
    │  │ • Create links  │  │ • Resolve code  │  │ • Render CSV │ │
    │  │ • Get / list    │  │ • Count access  │  │ • Upload     │ │
    │  │ • Delete        │  │ • Manual hit    │  │              │ │
    │  └────────┬────────┘  └────────┬────────┘  └──────┬───────┘ │
    └───────────┼────────────────────┼──────────────────┼─────────┘
                ▼                    ▼                  ▼
    ┌─────────────────────────────────────────┐  ┌─────────────────┐
    │          LinkStore (PostgreSQL)         │  │ S3 object sink  │
    └─────────────────────────────────────────┘  └─────────────────┘

Link Creation Flow
------------------
::
    ┌─────────────┐
    │ POST /api/  │
    │ links       │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Validate &  │
    │ normalize   │
    │ URL         │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ alias > code│
    │ > nanoid    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ INSERT      │
    │ (optimistic)│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ 201 / 409   │
    └─────────────┘

Usage Examples
=============
```python
service = LinkService(store, settings, logger)
created = await service.create(LinkCreate(destination_url="https://example.com/", alias="brev.ly/docs"))
print(service.public_url(created.link.code))
```
"""

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shortlinks.config import Settings
from shortlinks.enums import RequestStatus
from shortlinks.exceptions import CodeConflictError, InvalidInputError
from shortlinks.metrics import LINK_CREATION_REQUESTS_TOTAL
from shortlinks.models import Link
from shortlinks.schemas import LinkCreate, LinkCreated, LinkResponse
from shortlinks.shortcode import resolve_code
from shortlinks.store import LinkStore
from shortlinks.validation import validate_destination_url, validate_page

if TYPE_CHECKING:
    from shortlinks.dependencies import RequestContext

__all__ = ["CreatedLink", "LinkService"]


@dataclass(frozen=True)
class CreatedLink:
    link: Link
    alias: str | None = None


class LinkService:
    """Create, read, list and delete links.

    Example:
        >>> service = LinkService.from_context(ctx)
        >>> created = await service.create(LinkCreate(destination_url="https://example.com"))
        >>> print(created.link.code)
    """

    def __init__(self, store: LinkStore, settings: Settings, logger: logging.Logger | logging.LoggerAdapter):
        self._store = store
        self._settings = settings
        self._logger = logger

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "LinkService":
        return cls(ctx.store, ctx.settings, ctx.logger)

    async def create(self, request: LinkCreate) -> CreatedLink:
        """Validate the request and persist a new link.

        Raises:
            InvalidInputError: URL, code or alias rejected; nothing was written.
            CodeConflictError: the chosen code is already in use.
            StorageFailureError: the database is unavailable.
        """
        start_time = time.perf_counter()
        try:
            check = validate_destination_url(request.destination_url, production=self._settings.is_production)
            if not check.ok:
                raise InvalidInputError(check.message, field=check.field)

            choice = resolve_code(
                request.alias,
                request.code,
                prefix=self._settings.ALIAS_PREFIX,
                length=self._settings.SHORT_CODE_LENGTH,
            )
            link = await self._store.insert(choice.code, check.value)

        except InvalidInputError as exc:
            LINK_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.VALIDATION_ERROR).inc()
            self._logger.warning(f"Link creation rejected ({exc.field}): {exc.message}")
            raise
        except CodeConflictError as exc:
            LINK_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.CONFLICT).inc()
            self._logger.warning(f"Link creation conflict for code: {exc.code}")
            raise
        except Exception as exc:
            LINK_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.ERROR).inc()
            self._logger.error(f"Link creation error: {exc}")
            raise

        duration = time.perf_counter() - start_time
        LINK_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(f"Link created: {link.code} -> {link.destination_url} in {duration:.3f}s")
        return CreatedLink(link=link, alias=choice.alias)

    async def get(self, code: str) -> Link | None:
        return await self._store.find_by_code(code)

    async def list_links(self, page: int = 1, page_size: int = 10) -> list[Link]:
        check = validate_page(page, page_size)
        if not check.ok:
            raise InvalidInputError(check.message, field=check.field)
        return await self._store.list_page(page, page_size)

    async def delete(self, code: str) -> bool:
        removed_id = await self._store.delete_by_code(code)
        if removed_id is None:
            self._logger.info(f"Delete miss for code: {code}")
            return False
        self._logger.info(f"Link {removed_id} deleted for code: {code}")
        return True

    def public_url(self, code: str) -> str:
        return f"{self._settings.PUBLIC_BASE_URL.rstrip('/')}/{code}"

    def to_response(self, link: Link) -> LinkResponse:
        return LinkResponse(
            id=link.id,
            code=link.code,
            destination_url=link.destination_url,
            access_count=link.access_count,
            created_at=link.created_at,
            public_url=self.public_url(link.code),
        )

    def to_created(self, created: CreatedLink) -> LinkCreated:
        return LinkCreated(**self.to_response(created.link).model_dump(), alias=created.alias)
