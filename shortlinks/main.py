"""FastAPI application entry point for the short link service.

Application Lifecycle Diagram
===========================
::
    ┌─────────────┐
    │  uvicorn    │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ create_app()│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ CORS, error │
    │ handlers,   │
    │ metrics     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ AppResources│
    │ create_all()│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ dispose()   │
    └─────────────┘

How to Use
===========
**Step 1 — Run with uvicorn**::
    uvicorn shortlinks.main:app --host 0.0.0.0 --port 3333

**Step 2 — Make API calls**::
    curl -X POST http://localhost:3333/api/links \
         -H "Content-Type: application/json" \
         -d '{"destination_url": "https://example.com", "alias": "brev.ly/example"}'

    curl -i http://localhost:3333/example

Key Behaviours
===============
- Database tables are created automatically on startup.
- Resources are built by the lifespan unless already present on ``app.state``.
- ``ShortLinksError`` subclasses map to their own status codes; anything else
  is logged and reported as an opaque 500.
- Prometheus metrics are exposed at /metrics.
"""

__all__ = ["app", "create_app"]

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from shortlinks.config import Settings, get_settings
from shortlinks.dependencies import AppResources
from shortlinks.enums import ErrorKind
from shortlinks.exceptions import ShortLinksError
from shortlinks.routes import router

logger = logging.getLogger("shortlinks")


async def handle_shortlinks_error(request: Request, exc: ShortLinksError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "kind": ErrorKind.INTERNAL.value},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        owned = getattr(app.state, "resources", None) is None
        if owned:
            app.state.resources = AppResources.from_settings(settings)
        resources: AppResources = app.state.resources
        await resources.startup()
        yield
        if owned:
            await resources.cleanup()
            app.state.resources = None

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Short links with access counting and CSV export",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(ShortLinksError, handle_shortlinks_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=False,
        should_respect_env_var=False,
    ).instrument(app).expose(app)

    app.include_router(router)
    return app


app = create_app()
