"""Prometheus metrics for the realtime service."""

from shared.metrics import get_counter, get_histogram

SERVICE = "realtime"

REPORTS_CREATED = get_counter("reports_created_total", "Reports created", SERVICE)
REPORTS_DELETED = get_counter("reports_deleted_total", "Reports deleted", SERVICE)
REPORT_READS = get_counter(
    "report_reads_total", "Report reads by result shape", SERVICE, ("shape",)
)
QUERY_FAILURES = get_counter(
    "query_failures_total", "Report queries the executor reported as failed", SERVICE
)
QUERY_LATENCY = get_histogram(
    "query_latency_seconds", "Time spent executing report queries", SERVICE
)
