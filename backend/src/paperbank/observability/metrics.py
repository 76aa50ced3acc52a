"""Prometheus metrics for PaperBank.

Counters for the paper lifecycle, exposed on GET /metrics.
"""

from prometheus_client import Counter, Histogram

papers_uploaded_total = Counter(
    "paperbank_papers_uploaded_total",
    "Total paper submissions",
    ["status"]  # status: success|validation_error|storage_error|registry_error
)

moderation_decisions_total = Counter(
    "paperbank_moderation_decisions_total",
    "Moderation outcomes",
    ["decision", "result"]  # decision: approve|reject, result: applied|conflict
)

paper_downloads_total = Counter(
    "paperbank_paper_downloads_total",
    "Granted paper downloads"
)

paper_deletions_total = Counter(
    "paperbank_paper_deletions_total",
    "Deleted papers by blob removal outcome",
    ["blob_deleted"]  # true|false
)

orphan_blobs_total = Counter(
    "paperbank_orphan_blobs_total",
    "Blobs written without a committed metadata record"
)

http_request_duration_seconds = Histogram(
    "paperbank_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)
