"""Aggregate functions used by realtime reports.

Two independent tables:

* ``CREATE_PHASE_FUNCTIONS`` aggregates raw events into a bucket while the
  continuous query maintains the report table.
* ``READ_PHASE_FUNCTIONS`` recombines already aggregated buckets into one
  value when a read asks for a summary.

An average of bucket averages is not the average of the events, and the
per-bucket count is not kept next to the value, so AVERAGE has no read-phase
function.
"""

from realtime.domain.errors import (
    AggregationNotImplementedError,
    InvalidConfigurationError,
    UnsupportedAggregationError,
)
from realtime.domain.models import AggregationType

CREATE_PHASE_FUNCTIONS: dict[AggregationType, str] = {
    AggregationType.COUNT: "count",
    AggregationType.SUM: "sum",
    AggregationType.MINIMUM: "min",
    AggregationType.MAXIMUM: "max",
    AggregationType.AVERAGE: "avg",
    AggregationType.APPROXIMATE_UNIQUE: "uniq",
    AggregationType.VARIANCE: "varSamp",
    AggregationType.POPULATION_VARIANCE: "varPop",
    AggregationType.STANDARD_DEVIATION: "stddevSamp",
}

READ_PHASE_FUNCTIONS: dict[AggregationType, str] = {
    AggregationType.COUNT: "sum",
    AggregationType.SUM: "sum",
    AggregationType.MINIMUM: "min",
    AggregationType.MAXIMUM: "max",
}


def create_phase_function(aggregation: AggregationType) -> str:
    try:
        return CREATE_PHASE_FUNCTIONS[aggregation]
    except KeyError:
        raise InvalidConfigurationError(
            f"aggregation type {aggregation!r} couldn't be found"
        ) from None


def read_phase_function(aggregation: AggregationType) -> str:
    if aggregation == AggregationType.AVERAGE:
        raise UnsupportedAggregationError(
            "AVERAGE reports cannot be aggregated over a window"
        )
    try:
        return READ_PHASE_FUNCTIONS[aggregation]
    except KeyError:
        raise AggregationNotImplementedError(
            f"{getattr(aggregation, 'value', aggregation)} reports cannot be "
            "aggregated over a window yet"
        ) from None
