import pytest

from realtime.domain.errors import InvalidArgumentError, UnsupportedAggregationError
from realtime.domain.models import AggregationType, RealTimeReport
from realtime.metrics.bucketing import WindowRange
from realtime.query.aggregations import CREATE_PHASE_FUNCTIONS
from realtime.query.compiler import (
    bucket_expression,
    compile_continuous_query,
    compile_read_query,
    continuous_sort_key,
    continuous_table,
)

WINDOW = WindowRange(start_bucket=100, end_bucket=103, bucket_width=5)


def _report(**kwargs) -> RealTimeReport:
    fields = {"project": "demo", "name": "Events", "aggregation": "COUNT"}
    fields.update(kwargs)
    return RealTimeReport(**fields)


def test_bucket_expression_uses_width():
    assert bucket_expression() == "intDiv(toUnixTimestamp(_time), 5)"
    assert bucket_expression(60) == "intDiv(toUnixTimestamp(_time), 60)"


def test_continuous_count_without_measure():
    assert compile_continuous_query(_report()) == (
        "SELECT intDiv(toUnixTimestamp(_time), 5) AS time, countState(1) AS value "
        "FROM stream GROUP BY 1"
    )


def test_continuous_with_dimension_and_filter():
    report = _report(
        aggregation="SUM", measure="amount", dimension="country", filter="amount > 0"
    )
    assert compile_continuous_query(report) == (
        "SELECT intDiv(toUnixTimestamp(_time), 5) AS time, country, "
        "sumState(amount) AS value FROM stream WHERE amount > 0 GROUP BY 1, 2"
    )


@pytest.mark.parametrize(
    "aggregation", [a for a in AggregationType if a is not AggregationType.COUNT]
)
def test_continuous_requires_measure(aggregation):
    # Bypasses model validation to reach the compiler's own check
    report = RealTimeReport.model_construct(
        project="demo", name="Events", aggregation=aggregation
    )
    with pytest.raises(InvalidArgumentError):
        compile_continuous_query(report)


def test_continuous_count_with_measure():
    query = compile_continuous_query(_report(measure="user_id"))
    assert "countState(user_id) AS value" in query


@pytest.mark.parametrize("aggregation", list(AggregationType))
def test_state_and_merge_functions_pair_up(aggregation):
    report = _report(aggregation=aggregation, measure="amount")
    function = CREATE_PHASE_FUNCTIONS[aggregation]

    assert f"{function}State(amount) AS value" in compile_continuous_query(report)
    assert f"{function}Merge(value)" in compile_read_query(report, "events", WINDOW)


def test_read_merges_partial_rows_per_bucket():
    # Two insert blocks landing in one bucket leave two rows until a merge;
    # reads must still return one row per bucket
    query = compile_read_query(_report(), "events", WINDOW)
    assert "countMerge(value)" in query
    assert "GROUP BY time ORDER BY" in query


def test_read_series_open_ended():
    assert compile_read_query(_report(), "events", WINDOW) == (
        "SELECT time, countMerge(value) FROM `continuous_events` WHERE time >= 100 "
        "GROUP BY time ORDER BY 1 ASC LIMIT 5000"
    )


def test_read_series_bounded_end():
    query = compile_read_query(_report(), "events", WINDOW, bounded_end=True)
    assert "WHERE time >= 100 AND time <= 103 GROUP BY time ORDER BY" in query


def test_read_series_with_dimension_groups_by_sort_key():
    query = compile_read_query(_report(dimension="country"), "events", WINDOW)
    assert query == (
        "SELECT time, country, countMerge(value) FROM `continuous_events` "
        "WHERE time >= 100 GROUP BY time, country ORDER BY 1 ASC LIMIT 5000"
    )


def test_read_aggregate_scalar():
    assert compile_read_query(_report(), "events", WINDOW, aggregate=True) == (
        "SELECT 103, sum(bucket_value) FROM (SELECT time, countMerge(value) AS "
        "bucket_value FROM `continuous_events` WHERE time >= 100 GROUP BY time) "
        "ORDER BY 1 ASC LIMIT 5000"
    )


def test_read_aggregate_grouped_by_dimension():
    report = _report(aggregation="MAXIMUM", measure="load", dimension="device")
    assert compile_read_query(report, "load", WINDOW, aggregate=True) == (
        "SELECT 103, device, max(bucket_value) FROM (SELECT time, device, "
        "maxMerge(value) AS bucket_value FROM `continuous_load` WHERE time >= 100 "
        "GROUP BY time, device) GROUP BY device ORDER BY 1 ASC LIMIT 5000"
    )


def test_read_appends_filter():
    query = compile_read_query(
        _report(), "events", WINDOW, filter="country = 'TR'", bounded_end=True
    )
    assert "WHERE time >= 100 AND time <= 103 AND (country = 'TR')" in query


def test_read_respects_limit_override():
    query = compile_read_query(_report(), "events", WINDOW, limit=10)
    assert query.endswith("LIMIT 10")


@pytest.mark.parametrize("dimension", [None, "country"])
def test_read_aggregate_average_unsupported(dimension):
    report = _report(aggregation="AVERAGE", measure="amount", dimension=dimension)
    with pytest.raises(UnsupportedAggregationError):
        compile_read_query(report, "events", WINDOW, aggregate=True)


def test_read_average_series_is_allowed():
    report = _report(aggregation="AVERAGE", measure="amount")
    assert "SELECT time, avgMerge(value)" in compile_read_query(
        report, "events", WINDOW
    )


def test_continuous_table_prefix():
    assert continuous_table("events_by_collection") == (
        "`continuous_events_by_collection`"
    )


def test_hyphenated_table_name_is_quoted():
    assert continuous_table("page-views") == "`continuous_page-views`"
    query = compile_read_query(_report(name="Page Views"), "page-views", WINDOW)
    assert "FROM `continuous_page-views` WHERE" in query


def test_sort_key_follows_dimension():
    assert continuous_sort_key(_report()) == ["time"]
    assert continuous_sort_key(_report(dimension="country")) == ["time", "country"]
