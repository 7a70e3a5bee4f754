"""Code → destination resolution with access counting.

Flow Diagram — resolve()
========================
::
    ┌─────────────┐
    │  GET /:code │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ find_by_code│
    └──────┬──────┘
    FOUND? │
    ┌──────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────────┐
│ None    │  │ increment   │
│ (404)   │  │ (atomic SQL)│
└─────────┘  └──────┬──────┘
                    ▼
             ┌─────────────┐
             │ destination │
             │ url         │
             └─────────────┘

The increment is awaited on the resolution path; a resolution that returns a
destination has already been counted.
"""

import logging

from shortlinks.enums import RequestStatus
from shortlinks.metrics import MANUAL_HITS_TOTAL, REDIRECT_REQUESTS_TOTAL
from shortlinks.store import LinkStore

__all__ = ["RedirectResolver"]


class RedirectResolver:
    def __init__(self, store: LinkStore, logger: logging.Logger | logging.LoggerAdapter | None = None):
        self._store = store
        self._logger = logger or logging.getLogger("shortlinks.resolver")

    async def resolve(self, code: str) -> str | None:
        """Return the destination for ``code`` after counting the access, or None."""
        link = await self._store.find_by_code(code)
        if link is None:
            REDIRECT_REQUESTS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            self._logger.info(f"Redirect miss for code: {code}")
            return None

        counted = await self._store.increment_access_count(link.id)
        if not counted:
            # Deleted between lookup and increment.
            self._logger.warning(f"Access for code {code} not counted, link {link.id} is gone")

        REDIRECT_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        return link.destination_url

    async def hit(self, code: str) -> bool:
        """Count a visit reported out of band (the caller performed the redirect)."""
        link = await self._store.find_by_code(code)
        if link is None:
            MANUAL_HITS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            return False

        counted = await self._store.increment_access_count(link.id)
        MANUAL_HITS_TOTAL.labels(status=RequestStatus.SUCCESS if counted else RequestStatus.NOT_FOUND).inc()
        return counted
