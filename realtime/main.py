import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from realtime.api.errors import register_exception_handlers
from realtime.api.router import api_router
from realtime.core.config import settings
from realtime.core.logger import configure_logging, get_logger
from realtime.infrastructure.clickhouse.client import ClickHouseClient
from realtime.infrastructure.clickhouse.continuous import (
    ClickHouseContinuousQueryService,
)
from realtime.infrastructure.clickhouse.executor import ClickHouseQueryExecutor
from realtime.services.realtime_service import RealtimeService
from shared.utils.retry import retry_async

configure_logging()
logger = get_logger("realtime.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("realtime_service_starting")
    app.state.clickhouse = await _init_clickhouse_with_retry()
    continuous_queries = ClickHouseContinuousQueryService(app.state.clickhouse)
    await asyncio.to_thread(continuous_queries.ensure_tables)
    app.state.executor = ClickHouseQueryExecutor()
    app.state.realtime_service = RealtimeService(continuous_queries, app.state.executor)
    try:
        yield
    finally:
        logger.info("realtime_service_stopping")
        app.state.executor.close()
        app.state.clickhouse.close()


app = FastAPI(title="Realtime Reports", version="0.1.0", lifespan=lifespan)
app.include_router(api_router)
register_exception_handlers(app)


async def _init_clickhouse_with_retry() -> ClickHouseClient:
    async def _connect():
        client = ClickHouseClient()
        await asyncio.to_thread(client.ping)
        return client

    def _on_retry(attempt: int, exc: BaseException, sleep_for: float):
        logger.warning(
            "clickhouse_connect_retry",
            extra={
                "attempt": attempt,
                "error": str(exc),
                "sleep_for": round(sleep_for, 2),
            },
        )

    client = await retry_async(
        _connect,
        retries=settings.clickhouse_connect_retries,
        base_delay=0.5,
        max_delay=8.0,
        jitter=0.2,
        on_retry=_on_retry,
    )
    logger.info("clickhouse_connected")
    return client


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
