"""CSV export of every link, handed to an S3-compatible object sink.

Flow Diagram — export_all()
===========================
::
    ┌─────────────┐
    │ all links,  │
    │ newest first│
    └──────┬──────┘
    EMPTY? │
    ┌──────┴─────┐
    │ YES        │ NO
    ▼            ▼
┌──────────┐  ┌─────────────┐
│ EmptyEx- │  │ render CSV  │
│ portError│  └──────┬──────┘
└──────────┘         ▼
              ┌─────────────┐
              │ put_object  │
              │ exports/    │
              │ <uuid>.csv  │
              └──────┬──────┘
              FAILED?│
              ┌──────┴─────┐
              │ YES        │ NO
              ▼            ▼
      ┌──────────────┐ ┌─────────────┐
      │ ExportGener- │ │ public URL  │
      │ ationError   │ │ of the file │
      └──────────────┘ └─────────────┘

How to Use
===========
::
    sink = S3ObjectSink.from_settings(settings)
    builder = ExportBuilder(store, sink)
    result = await builder.export_all()
    print(result.url, result.rows)
"""

import asyncio
import csv
import datetime
import io
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from shortlinks.config import Settings
from shortlinks.enums import RequestStatus
from shortlinks.exceptions import EmptyExportError, ExportGenerationError
from shortlinks.metrics import EXPORT_REQUESTS_TOTAL
from shortlinks.models import Link
from shortlinks.store import LinkStore

__all__ = [
    "CSV_CONTENT_TYPE",
    "CSV_HEADER",
    "ExportBuilder",
    "ExportResult",
    "ObjectSink",
    "S3ObjectSink",
    "format_timestamp",
    "render_csv",
]

logger = logging.getLogger("shortlinks.export")

EXPORT_FAILED_MESSAGE = "Failed to generate the CSV file"
CSV_CONTENT_TYPE = "text/csv"
CSV_HEADER = ("Original URL", "Short code", "Access count", "Created at")


class ObjectSink(Protocol):
    async def put_object(self, key: str, body: bytes, content_type: str) -> str:
        """Store ``body`` under ``key`` and return a public URL for it."""
        ...


class S3ObjectSink:
    """Object sink backed by a boto3 S3 client (AWS S3, Cloudflare R2, MinIO)."""

    def __init__(self, bucket: str, public_url: str, s3_client: Any | None = None, **client_kwargs: Any):
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")
        self._client = s3_client or boto3.client("s3", **client_kwargs)

    @classmethod
    def from_settings(cls, settings: Settings, s3_client: Any | None = None) -> "S3ObjectSink":
        client_kwargs = {
            "endpoint_url": settings.S3_ENDPOINT_URL,
            "region_name": settings.S3_REGION,
            "aws_access_key_id": settings.S3_ACCESS_KEY_ID,
            "aws_secret_access_key": settings.S3_SECRET_ACCESS_KEY,
        }
        return cls(
            settings.EXPORT_BUCKET,
            settings.EXPORT_PUBLIC_URL,
            s3_client=s3_client,
            **{k: v for k, v in client_kwargs.items() if v is not None},
        )

    async def put_object(self, key: str, body: bytes, content_type: str) -> str:
        try:
            # boto3 is blocking; keep the event loop free for other requests.
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error(f"Upload of {key} to bucket {self.bucket} failed: {exc}")
            raise ExportGenerationError(EXPORT_FAILED_MESSAGE) from exc
        return f"{self.public_url}/{key}"


@dataclass(frozen=True)
class ExportResult:
    url: str
    key: str
    rows: int


def format_timestamp(value: datetime.datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. ``2024-01-01T12:00:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.UTC)
    value = value.astimezone(datetime.UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def render_csv(links: list[Link]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for link in links:
        writer.writerow((link.destination_url, link.code, link.access_count, format_timestamp(link.created_at)))
    return buffer.getvalue()


class ExportBuilder:
    def __init__(
        self,
        store: LinkStore,
        sink: ObjectSink,
        *,
        key_prefix: str = "exports",
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self._store = store
        self._sink = sink
        self._key_prefix = key_prefix.strip("/")
        self._logger = logger or logging.getLogger("shortlinks.export")

    async def export_all(self) -> ExportResult:
        """Serialize every link to CSV and upload it.

        Raises:
            EmptyExportError: there are no links.
            ExportGenerationError: the object sink rejected the upload.
        """
        links = await self._store.all_newest_first()
        if not links:
            EXPORT_REQUESTS_TOTAL.labels(status=RequestStatus.EMPTY).inc()
            raise EmptyExportError()

        body = render_csv(links).encode("utf-8")
        key = f"{self._key_prefix}/{uuid.uuid4()}.csv" if self._key_prefix else f"{uuid.uuid4()}.csv"

        try:
            url = await self._sink.put_object(key, body, CSV_CONTENT_TYPE)
        except Exception as exc:
            EXPORT_REQUESTS_TOTAL.labels(status=RequestStatus.ERROR).inc()
            self._logger.error(f"CSV export upload failed for {key}: {exc}")
            raise ExportGenerationError(EXPORT_FAILED_MESSAGE) from exc

        EXPORT_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(f"Exported {len(links)} links to {key}")
        return ExportResult(url=url, key=key, rows=len(links))
