"""Prometheus metrics shared by the service components."""

from prometheus_client import Counter

__all__ = [
    "LINK_CREATION_REQUESTS_TOTAL",
    "REDIRECT_REQUESTS_TOTAL",
    "MANUAL_HITS_TOTAL",
    "DATABASE_READS_TOTAL",
    "DATABASE_WRITES_TOTAL",
    "EXPORT_REQUESTS_TOTAL",
]

# Request metrics
LINK_CREATION_REQUESTS_TOTAL = Counter(
    "shortlinks_creation_requests_total",
    "Total link creation requests",
    ["status"],
)
REDIRECT_REQUESTS_TOTAL = Counter(
    "shortlinks_redirect_requests_total",
    "Total redirect resolutions",
    ["status"],
)
MANUAL_HITS_TOTAL = Counter(
    "shortlinks_manual_hits_total",
    "Total out-of-band visit reports",
    ["status"],
)
EXPORT_REQUESTS_TOTAL = Counter(
    "shortlinks_export_requests_total",
    "Total CSV export requests",
    ["status"],
)

# Database metrics
DATABASE_READS_TOTAL = Counter(
    "shortlinks_database_reads_total",
    "Total database read operations",
)
DATABASE_WRITES_TOTAL = Counter(
    "shortlinks_database_writes_total",
    "Total database write operations",
)
