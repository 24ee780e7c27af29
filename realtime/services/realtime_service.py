from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from realtime.core.logger import get_logger
from realtime.core.metrics import (
    QUERY_FAILURES,
    QUERY_LATENCY,
    REPORT_READS,
    REPORTS_CREATED,
    REPORTS_DELETED,
)
from realtime.domain.errors import QueryExecutionError, ReportNotFoundError
from realtime.domain.models import (
    REALTIME_TYPE,
    ContinuousQuery,
    RealTimeQueryResult,
    RealTimeReport,
)
from realtime.metrics.bucketing import compute_range
from realtime.metrics.series import reconstruct, select_shape
from realtime.query.compiler import (
    compile_continuous_query,
    compile_read_query,
    continuous_sort_key,
)
from realtime.query.filters import normalize_filter
from realtime.services.ports import ContinuousQueryService, QueryExecutor
from shared.utils.slug import to_slug

logger = get_logger("realtime.service")


class RealtimeService:
    """Create, read, list and delete realtime reports.

    Holds no state of its own: every read looks the report up again and
    computes its window from ``clock``.
    """

    def __init__(
        self,
        continuous_queries: ContinuousQueryService,
        executor: QueryExecutor,
        clock: Callable[[], float] = time.time,
    ):
        self.continuous_queries = continuous_queries
        self.executor = executor
        self.clock = clock

    async def create(self, report: RealTimeReport) -> Dict[str, Any]:
        query = compile_continuous_query(report)
        continuous_query = ContinuousQuery(
            project=report.project,
            name=report.name,
            table_name=to_slug(report.name),
            query=query,
            sort_key=continuous_sort_key(report),
            collections=sorted(report.collections),
            options={
                "type": REALTIME_TYPE,
                "report": report.model_dump(mode="json"),
            },
        )
        await self.continuous_queries.create(continuous_query)
        REPORTS_CREATED.inc()
        logger.info(
            "report_created",
            extra={
                "project": report.project,
                "report": report.name,
                "table_name": continuous_query.table_name,
            },
        )
        return {
            "message": "successfully created",
            "table_name": continuous_query.table_name,
        }

    async def read(
        self,
        project: str,
        name: str,
        filter: Optional[str] = None,
        aggregate: bool = False,
        date_start: Optional[datetime] = None,
        date_end: Optional[datetime] = None,
    ) -> RealTimeQueryResult:
        filter = normalize_filter(filter)

        continuous_query = await self.continuous_queries.get(project, name)
        if continuous_query is None:
            raise ReportNotFoundError(project, name)
        report = continuous_query.report()

        window = compute_range(self.clock(), date_start, date_end)
        query = compile_read_query(
            report,
            continuous_query.table_name,
            window,
            filter=filter,
            aggregate=aggregate,
            bounded_end=date_end is not None,
        )
        has_dimension = report.dimension is not None

        if window.is_inverted:
            logger.info(
                "report_read_empty_range",
                extra={
                    "project": project,
                    "report": name,
                    "start_bucket": window.start_bucket,
                    "end_bucket": window.end_bucket,
                },
            )
            return reconstruct([], window, has_dimension, aggregate)

        started = time.perf_counter()
        result = await self.executor.execute_query(continuous_query.project, query)
        QUERY_LATENCY.observe(time.perf_counter() - started)
        if result.failed:
            QUERY_FAILURES.inc()
            logger.warning(
                "report_query_failed",
                extra={"project": project, "report": name, "error": result.error},
            )
            raise QueryExecutionError(result)

        REPORT_READS.labels(shape=select_shape(aggregate, has_dimension).value).inc()
        logger.debug(
            "report_read",
            extra={
                "project": project,
                "report": name,
                "start_bucket": window.start_bucket,
                "end_bucket": window.end_bucket,
                "rows": len(result.rows),
            },
        )
        return reconstruct(result.rows, window, has_dimension, aggregate)

    async def list(self, project: str) -> List[RealTimeReport]:
        return [
            cq.report()
            for cq in await self.continuous_queries.list(project)
            if cq.is_realtime()
        ]

    async def delete(self, project: str, name: str) -> Dict[str, Any]:
        # TODO: refuse to delete continuous queries not tagged as realtime reports
        await self.continuous_queries.delete(project, name)
        REPORTS_DELETED.inc()
        logger.info("report_deleted", extra={"project": project, "report": name})
        return {"message": "successfully deleted"}
