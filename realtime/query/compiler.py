"""Query text for realtime reports.

``compile_continuous_query`` produces the query the continuous query service
keeps running over the event stream; its rows are ``(time, [dimension,]
value)`` with ``time`` the bucket index and ``value`` an aggregate state.
``compile_read_query`` reads a window of that table back, merged to one row
per bucket and optionally collapsed to one value per dimension.
"""

from __future__ import annotations

from realtime.core.config import settings
from realtime.domain.errors import InvalidArgumentError
from realtime.domain.models import AggregationType, RealTimeReport
from realtime.metrics.bucketing import WindowRange

from .aggregations import create_phase_function, read_phase_function


def check_measure(report: RealTimeReport) -> None:
    if report.measure is None and report.aggregation != AggregationType.COUNT:
        raise InvalidArgumentError(
            f"measure must be specified for {report.aggregation.value} reports"
        )


def bucket_expression(bucket_width: int | None = None) -> str:
    width = bucket_width or settings.realtime_bucket_width_seconds
    return f"intDiv(toUnixTimestamp({settings.realtime_event_time_column}), {width})"


def quote_identifier(name: str) -> str:
    return f"`{name}`"


def continuous_table(table_name: str) -> str:
    return quote_identifier(f"{settings.realtime_continuous_table_prefix}{table_name}")


def continuous_sort_key(report: RealTimeReport) -> list[str]:
    """Columns identifying one row of the report table."""
    if report.dimension is not None:
        return ["time", report.dimension]
    return ["time"]


def compile_continuous_query(
    report: RealTimeReport, bucket_width: int | None = None
) -> str:
    """Query maintaining the report table.

    ``value`` holds the aggregate state rather than the final value, so the
    partial rows each insert block produces for a bucket merge into one.
    """
    check_measure(report)

    columns = [f"{bucket_expression(bucket_width)} AS time"]
    if report.dimension is not None:
        columns.append(report.dimension)
    function = create_phase_function(report.aggregation)
    columns.append(f"{function}State({report.measure or 1}) AS value")

    parts = [
        f"SELECT {', '.join(columns)}",
        f"FROM {settings.realtime_stream_source}",
    ]
    if report.filter is not None:
        parts.append(f"WHERE {report.filter}")
    parts.append("GROUP BY 1, 2" if report.dimension is not None else "GROUP BY 1")
    return " ".join(parts)


def compile_read_query(
    report: RealTimeReport,
    table_name: str,
    window: WindowRange,
    filter: str | None = None,
    aggregate: bool = False,
    bounded_end: bool = False,
    limit: int | None = None,
) -> str:
    """Build the query reading ``window`` of a report table.

    Buckets always come back merged to one row per sort key. Without
    ``bounded_end`` the upper edge is left open so buckets filled after
    ``window`` was computed are still returned.
    """
    # Fail before building anything when the window cannot be summarised
    combine = read_phase_function(report.aggregation) if aggregate else None

    key = continuous_sort_key(report)
    merge = f"{create_phase_function(report.aggregation)}Merge(value)"

    conditions = [f"time >= {window.start_bucket}"]
    if bounded_end:
        conditions.append(f"time <= {window.end_bucket}")
    if filter is not None:
        conditions.append(f"({filter})")

    value = f"{merge} AS bucket_value" if combine else merge
    buckets = " ".join(
        [
            f"SELECT {', '.join(key + [value])}",
            f"FROM {continuous_table(table_name)}",
            f"WHERE {' AND '.join(conditions)}",
            f"GROUP BY {', '.join(key)}",
        ]
    )

    if combine is None:
        parts = [buckets]
    else:
        columns = [str(window.end_bucket)]
        if report.dimension is not None:
            columns.append(report.dimension)
        columns.append(f"{combine}(bucket_value)")
        parts = [f"SELECT {', '.join(columns)}", f"FROM ({buckets})"]
        if report.dimension is not None:
            parts.append(f"GROUP BY {report.dimension}")
    parts.append("ORDER BY 1 ASC")
    parts.append(f"LIMIT {limit or settings.realtime_query_limit}")
    return " ".join(parts)
