"""Turn rows read from a report table into the shape returned to callers.

Rows come ordered by their first column. Four shapes exist, picked by whether
the read aggregates the window and whether the report has a dimension:

=============  ==============  ==========================================
aggregate      dimension       result
=============  ==============  ==========================================
yes            no              single value (``0`` when nothing matched)
yes            yes             ``[[dimension, value], ...]``
no             no              dense ``[[timestamp, value], ...]``
no             yes             sparse ``{bucket: [[dimension, value], ...]}``
=============  ==============  ==========================================

Dense series are zero-filled so they always cover every bucket of the
window. Dimensioned series only carry buckets that produced rows because
there is no list of every possible dimension value to fill with.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Sequence

from realtime.domain.models import RealTimeQueryResult
from realtime.metrics.bucketing import WindowRange

Row = Sequence[Any]


class SeriesShape(str, Enum):
    SCALAR = "scalar"
    GROUPED_SCALAR = "grouped_scalar"
    DENSE_SERIES = "dense_series"
    GROUPED_SERIES = "grouped_series"


_SHAPES: Dict[tuple[bool, bool], SeriesShape] = {
    (True, False): SeriesShape.SCALAR,
    (True, True): SeriesShape.GROUPED_SCALAR,
    (False, False): SeriesShape.DENSE_SERIES,
    (False, True): SeriesShape.GROUPED_SERIES,
}


def select_shape(aggregate: bool, has_dimension: bool) -> SeriesShape:
    return _SHAPES[(bool(aggregate), bool(has_dimension))]


def scalar(rows: Sequence[Row], window: WindowRange) -> Any:
    return rows[0][1] if rows else 0


def grouped_scalar(rows: Sequence[Row], window: WindowRange) -> List[List[Any]]:
    return [[row[1], row[2]] for row in rows]


def dense_series(rows: Sequence[Row], window: WindowRange) -> List[List[Any]]:
    series: List[List[Any]] = []
    cursor = 0
    for bucket in range(window.start_bucket, window.end_bucket):
        timestamp = bucket * window.bucket_width
        if cursor < len(rows) and int(rows[cursor][0]) == bucket:
            series.append([timestamp, rows[cursor][1]])
            cursor += 1
        else:
            series.append([timestamp, 0])
    return series


def grouped_series(
    rows: Sequence[Row], window: WindowRange
) -> Dict[Any, List[List[Any]]]:
    groups: Dict[Any, List[List[Any]]] = {}
    for row in rows:
        groups.setdefault(row[0], []).append([row[1], row[2]])
    return groups


RECONSTRUCTORS: Dict[SeriesShape, Callable[[Sequence[Row], WindowRange], Any]] = {
    SeriesShape.SCALAR: scalar,
    SeriesShape.GROUPED_SCALAR: grouped_scalar,
    SeriesShape.DENSE_SERIES: dense_series,
    SeriesShape.GROUPED_SERIES: grouped_series,
}


def reconstruct(
    rows: Sequence[Row],
    window: WindowRange,
    has_dimension: bool,
    aggregate: bool,
) -> RealTimeQueryResult:
    shape = select_shape(aggregate, has_dimension)
    return RealTimeQueryResult(
        start=window.start_timestamp,
        end=window.end_timestamp,
        result=RECONSTRUCTORS[shape](rows, window),
    )
