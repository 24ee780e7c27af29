from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

REALTIME_TYPE = "realtime"


class AggregationType(str, Enum):
    """Aggregations a realtime report can maintain."""

    COUNT = "COUNT"
    SUM = "SUM"
    MINIMUM = "MINIMUM"
    MAXIMUM = "MAXIMUM"
    AVERAGE = "AVERAGE"
    APPROXIMATE_UNIQUE = "APPROXIMATE_UNIQUE"
    VARIANCE = "VARIANCE"
    POPULATION_VARIANCE = "POPULATION_VARIANCE"
    STANDARD_DEVIATION = "STANDARD_DEVIATION"


class RealTimeReport(BaseModel):
    """Definition of a continuously maintained aggregation.

    ``measure`` may only be omitted for COUNT.
    """

    project: str
    name: str
    aggregation: AggregationType
    measure: Optional[str] = None
    dimension: Optional[str] = None
    filter: Optional[str] = None
    collections: set[str] = Field(default_factory=set)

    @model_validator(mode="after")
    def _measure_required(self) -> "RealTimeReport":
        if self.measure is None and self.aggregation != AggregationType.COUNT:
            raise ValueError(
                f"measure must be specified for {self.aggregation.value} reports"
            )
        return self


class ContinuousQuery(BaseModel):
    """A continuous query as persisted by the continuous query service."""

    project: str
    name: str
    table_name: str
    query: str
    sort_key: List[str] = Field(default_factory=lambda: ["time"])
    collections: List[str] = Field(default_factory=list)
    options: Optional[Dict[str, Any]] = None

    def is_realtime(self) -> bool:
        return bool(self.options) and self.options.get("type") == REALTIME_TYPE

    def report(self) -> RealTimeReport:
        return RealTimeReport.model_validate(self.options["report"])


class QueryResult(BaseModel):
    """Rows returned by the query executor, or the reason it failed."""

    rows: List[List[Any]] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class RealTimeQueryResult(BaseModel):
    """Envelope returned for a report read; bounds are epoch seconds."""

    start: int
    end: int
    result: Any
