from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from realtime.core.logger import get_logger
from realtime.domain.errors import (
    AggregationNotImplementedError,
    ContinuousQueryExistsError,
    InvalidArgumentError,
    InvalidConfigurationError,
    ProjectNotFoundError,
    QueryExecutionError,
    RealtimeError,
    ReportNotFoundError,
    UnsupportedAggregationError,
)

logger = get_logger("realtime.api")

STATUS_CODES: dict[type[RealtimeError], int] = {
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    ProjectNotFoundError: status.HTTP_400_BAD_REQUEST,
    ReportNotFoundError: status.HTTP_400_BAD_REQUEST,
    ContinuousQueryExistsError: status.HTTP_409_CONFLICT,
    UnsupportedAggregationError: status.HTTP_400_BAD_REQUEST,
    AggregationNotImplementedError: status.HTTP_501_NOT_IMPLEMENTED,
    InvalidConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    QueryExecutionError: status.HTTP_502_BAD_GATEWAY,
}


def status_code_for(exc: RealtimeError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def realtime_error_handler(request: Request, exc: RealtimeError) -> JSONResponse:
    code = status_code_for(exc)
    logger.info(
        "request_failed",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error": str(exc),
            "status_code": code,
        },
    )
    return JSONResponse(status_code=code, content={"error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RealtimeError, realtime_error_handler)  # type: ignore[arg-type]
