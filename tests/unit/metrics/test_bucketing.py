from datetime import datetime, timezone

import pytest

from realtime.metrics.bucketing import WindowRange, bucket_index, compute_range

NOW = 1_735_689_600


def test_bucket_index_floors():
    assert bucket_index(504, 5) == 100
    assert bucket_index(505, 5) == 101
    assert bucket_index(-1, 5) == -1


@pytest.mark.parametrize("now", [NOW, NOW + 1, NOW + 4, NOW + 2.5])
def test_default_window_spans_nine_buckets(now):
    window = compute_range(now)
    assert window.end_bucket - window.start_bucket == 9


def test_explicit_bounds():
    start = datetime.fromtimestamp(500, tz=timezone.utc)
    end = datetime.fromtimestamp(517, tz=timezone.utc)
    window = compute_range(NOW, start, end)
    assert (window.start_bucket, window.end_bucket) == (100, 103)
    assert window.start_timestamp == 500
    assert window.end_timestamp == 515


def test_explicit_start_only_ends_now():
    window = compute_range(NOW, start=NOW - 60)
    assert window.end_bucket == NOW // 5
    assert window.start_bucket == (NOW - 60) // 5


def test_inverted_range_is_not_swapped():
    window = compute_range(NOW, start=NOW, end=NOW - 20)
    assert window.start_bucket > window.end_bucket
    assert window.is_inverted


def test_single_bucket_window_is_not_inverted():
    window = compute_range(NOW, start=500, end=503)
    assert window.start_bucket == window.end_bucket == 100
    assert not window.is_inverted


def test_naive_datetimes_are_read_as_utc():
    naive = compute_range(NOW, start=datetime(1970, 1, 1, 0, 8, 20))
    aware = compute_range(
        NOW, start=datetime(1970, 1, 1, 0, 8, 20, tzinfo=timezone.utc)
    )
    assert naive.start_bucket == aware.start_bucket == 100


def test_custom_width_and_window():
    window = compute_range(600, bucket_width=60, default_window=300)
    assert (window.start_bucket, window.end_bucket) == (5, 10)
    assert window.end_timestamp == 600


def test_window_range_is_frozen():
    window = WindowRange(start_bucket=1, end_bucket=2, bucket_width=5)
    with pytest.raises(Exception):
        window.start_bucket = 3  # type: ignore[misc]
