"""Error taxonomy for realtime reports.

Every error raised by the report core derives from :class:`RealtimeError` so
the HTTP layer can map the whole family in one place.
"""

from __future__ import annotations

from typing import Any


class RealtimeError(Exception):
    """Base class for realtime report failures."""


class InvalidArgumentError(RealtimeError, ValueError):
    """Malformed report definition or filter expression."""


class InvalidConfigurationError(RealtimeError):
    """An aggregation kind has no create-phase function."""


class ReportNotFoundError(RealtimeError):
    def __init__(self, project: str, name: str):
        super().__init__(f"Report '{name}' does not exist in project '{project}'")
        self.project = project
        self.name = name


class ProjectNotFoundError(RealtimeError):
    def __init__(self, project: str):
        super().__init__(f"Project '{project}' does not exist")
        self.project = project


class UnsupportedAggregationError(RealtimeError):
    """Aggregation cannot be recombined across buckets at read time."""


class AggregationNotImplementedError(RealtimeError, NotImplementedError):
    """Aggregation has no read-phase function."""


class QueryExecutionError(RealtimeError):
    """The query executor reported a failed query.

    The failed result is attached untouched as ``result``.
    """

    def __init__(self, result: Any):
        super().__init__(getattr(result, "error", None) or "query execution failed")
        self.result = result


class ContinuousQueryExistsError(RealtimeError):
    def __init__(self, project: str, name: str):
        super().__init__(f"Report '{name}' already exists in project '{project}'")
        self.project = project
        self.name = name
