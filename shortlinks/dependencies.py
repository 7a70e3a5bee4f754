"""Dependency injection for the short link API.

Shared resources (settings, logger, database handle, store, object sink) are
built once by the application lifespan into an ``AppResources`` instance kept
on ``app.state``. Each request gets a lightweight ``RequestContext`` on top of
them with its own identifiers and a context-aware logger.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request

from shortlinks.config import Settings
from shortlinks.database import Database
from shortlinks.export import ExportBuilder, ObjectSink, S3ObjectSink
from shortlinks.link_service import LinkService
from shortlinks.resolver import RedirectResolver
from shortlinks.store import LinkStore


# ============================================================================
# PROCESS RESOURCES
# ============================================================================


def setup_logger(level: str = "INFO") -> logging.Logger:
    """Configure the ``shortlinks`` logger once."""
    logger = logging.getLogger("shortlinks")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


class AppResources:
    """Resources owned by the process for its whole lifetime.

    Built by the lifespan handler on startup and closed on shutdown. Tests
    build one directly with their own database and sink.
    """

    def __init__(self, settings: Settings, database: Database, sink: ObjectSink, logger: logging.Logger | None = None):
        self.settings = settings
        self.database = database
        self.sink = sink
        self.logger = logger or setup_logger(settings.LOG_LEVEL)
        self.store = LinkStore(database)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppResources":
        return cls(
            settings,
            Database.from_settings(settings),
            S3ObjectSink.from_settings(settings),
        )

    async def startup(self) -> None:
        await self.database.create_all()
        self.logger.info(f"{self.settings.APP_NAME} started in {self.settings.APP_ENV} mode")

    async def cleanup(self) -> None:
        await self.database.dispose()


# ============================================================================
# LIGHTWEIGHT REQUEST CONTEXT
# ============================================================================


@dataclass
class RequestContext:
    """Per-request view over the shared resources.

    Attributes:
        resources: Process-wide resources (database, store, sink, settings)
        request_id: Unique identifier for this request
        trace_id: Correlation ID for distributed tracing
        user_agent: Client user agent string
        client_ip: Client IP address
        start_time: Request start timestamp
    """

    resources: AppResources
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    trace_id: Optional[str] = None
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None
    start_time: float = field(default_factory=lambda: time.time())

    @property
    def store(self) -> LinkStore:
        return self.resources.store

    @property
    def settings(self) -> Settings:
        return self.resources.settings

    @property
    def logger(self) -> logging.LoggerAdapter:
        """Shared logger with request context attached."""
        return logging.LoggerAdapter(
            self.resources.logger,
            {
                "request_id": self.request_id,
                "trace_id": self.trace_id or self.request_id,
                "client_ip": self.client_ip,
                "user_agent": self.user_agent,
            },
        )

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_resources(request: Request) -> AppResources:
    return request.app.state.resources


def get_request_context(
    request: Request,
    resources: AppResources = Depends(get_resources),
) -> RequestContext:
    client_ip = request.client.host if request.client else None
    return RequestContext(
        resources=resources,
        trace_id=request.headers.get("x-trace-id"),
        user_agent=request.headers.get("user-agent"),
        client_ip=client_ip,
    )


def get_link_service(ctx: RequestContext = Depends(get_request_context)) -> LinkService:
    return LinkService.from_context(ctx)


def get_resolver(ctx: RequestContext = Depends(get_request_context)) -> RedirectResolver:
    return RedirectResolver(ctx.store, ctx.logger)


def get_export_builder(ctx: RequestContext = Depends(get_request_context)) -> ExportBuilder:
    return ExportBuilder(
        ctx.store,
        ctx.resources.sink,
        key_prefix=ctx.settings.EXPORT_KEY_PREFIX,
        logger=ctx.logger,
    )
