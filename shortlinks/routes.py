"""FastAPI route definitions for the short link REST API.

API Endpoint Overview
=====================
::
    GET    /health
        └─ HealthResponse (200)

    POST   /api/links
        ├─ LinkCreate (request body)
        └─ LinkCreated (201) or 400/409

    GET    /api/links?page=&pageSize=
        └─ list[LinkResponse] (200) or 400

    POST   /api/links/export/csv
        └─ ExportResponse (201) or 400/502

    GET    /api/links/:code
        └─ LinkResponse (200) or 404

    DELETE /api/links/:code
        └─ 204 or 404

    POST   /api/links/:code/hit
        └─ HitResponse (200) or 404

    GET    /:code
        └─ 301 Redirect or 404

Key Behaviours
===============
- Domain failures are raised as ``ShortLinksError`` subclasses and rendered
  by the handler registered in ``shortlinks.main``.
- The redirect counts the access before answering.
- Codes in paths must be at least 3 characters.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response
from fastapi.responses import RedirectResponse

from shortlinks.dependencies import (
    RequestContext,
    get_export_builder,
    get_link_service,
    get_request_context,
    get_resolver,
)
from shortlinks.enums import HealthStatus
from shortlinks.exceptions import LinkNotFoundError
from shortlinks.export import ExportBuilder
from shortlinks.link_service import LinkService
from shortlinks.resolver import RedirectResolver
from shortlinks.schemas import (
    ErrorResponse,
    ExportResponse,
    HealthResponse,
    HitResponse,
    LinkCreate,
    LinkCreated,
    LinkResponse,
)
from shortlinks.validation import CODE_MIN_LENGTH

__all__ = ["router"]

router = APIRouter()

CodePath = Annotated[str, Path(min_length=CODE_MIN_LENGTH)]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(ctx: RequestContext = Depends(get_request_context)) -> HealthResponse:
    db_status = HealthStatus.HEALTHY
    try:
        await ctx.store.ping()
    except Exception as e:
        ctx.logger.error(f"Database health check failed: {e}")
        db_status = HealthStatus.UNHEALTHY

    return HealthResponse(status=db_status, database=db_status)


@router.post("/api/links", response_model=LinkCreated, status_code=201, responses=ERROR_RESPONSES, tags=["links"])
async def create_link(
    payload: LinkCreate,
    ctx: RequestContext = Depends(get_request_context),
    service: LinkService = Depends(get_link_service),
) -> LinkCreated:
    ctx.logger.info(
        f"Link creation requested: {payload.destination_url}",
        extra={"operation": "create_link", "code": payload.code, "alias": payload.alias},
    )
    created = await service.create(payload)
    return service.to_created(created)


@router.get("/api/links", response_model=list[LinkResponse], responses=ERROR_RESPONSES, tags=["links"])
async def list_links(
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    service: LinkService = Depends(get_link_service),
) -> list[LinkResponse]:
    links = await service.list_links(page, page_size)
    return [service.to_response(link) for link in links]


@router.post("/api/links/export/csv", response_model=ExportResponse, status_code=201, tags=["export"])
async def export_links(
    ctx: RequestContext = Depends(get_request_context),
    builder: ExportBuilder = Depends(get_export_builder),
) -> ExportResponse:
    result = await builder.export_all()
    ctx.logger.info(f"CSV export ready: {result.url} ({ctx.get_duration():.1f}ms)")
    return ExportResponse(csv_url=result.url, key=result.key, rows=result.rows)


@router.get("/api/links/{code}", response_model=LinkResponse, responses=ERROR_RESPONSES, tags=["links"])
async def get_link(
    code: CodePath,
    service: LinkService = Depends(get_link_service),
) -> LinkResponse:
    link = await service.get(code)
    if link is None:
        raise LinkNotFoundError(code)
    return service.to_response(link)


@router.delete("/api/links/{code}", status_code=204, responses=ERROR_RESPONSES, tags=["links"])
async def delete_link(
    code: CodePath,
    service: LinkService = Depends(get_link_service),
) -> Response:
    if not await service.delete(code):
        raise LinkNotFoundError(code)
    return Response(status_code=204)


@router.post("/api/links/{code}/hit", response_model=HitResponse, responses=ERROR_RESPONSES, tags=["links"])
async def record_hit(
    code: CodePath,
    resolver: RedirectResolver = Depends(get_resolver),
) -> HitResponse:
    if not await resolver.hit(code):
        raise LinkNotFoundError(code)
    return HitResponse()


@router.get("/{code}", responses=ERROR_RESPONSES, tags=["redirect"])
async def redirect_to_destination(
    code: CodePath,
    ctx: RequestContext = Depends(get_request_context),
    resolver: RedirectResolver = Depends(get_resolver),
) -> RedirectResponse:
    destination = await resolver.resolve(code)
    if destination is None:
        raise LinkNotFoundError(code)

    ctx.logger.info(
        f"Redirect: {code} -> {destination}",
        extra={"operation": "redirect", "code": code, "duration_ms": ctx.get_duration()},
    )
    return RedirectResponse(url=destination, status_code=301)
