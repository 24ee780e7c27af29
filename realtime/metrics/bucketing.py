from datetime import datetime, timezone
from math import floor
from typing import Union

from pydantic import BaseModel, ConfigDict

from realtime.core.config import settings

Timestamp = Union[datetime, int, float]


def epoch_seconds(value: Timestamp) -> float:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            # Naive values carry no offset; read them as UTC, never server-local
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    return float(value)


def bucket_index(timestamp_seconds: float, granularity_seconds: int) -> int:
    return int(floor(timestamp_seconds / granularity_seconds))


class WindowRange(BaseModel):
    """Bucket indices covered by a read.

    ``start_bucket`` is inclusive. ``end_bucket`` bounds the dense series
    exclusively and the read query inclusively when an explicit end is given.
    """

    model_config = ConfigDict(frozen=True)

    start_bucket: int
    end_bucket: int
    bucket_width: int

    @property
    def start_timestamp(self) -> int:
        return self.start_bucket * self.bucket_width

    @property
    def end_timestamp(self) -> int:
        return self.end_bucket * self.bucket_width

    @property
    def is_inverted(self) -> bool:
        # Inverted ranges are kept as given and read back as an empty result
        return self.end_bucket < self.start_bucket


def compute_range(
    now: Timestamp,
    start: Timestamp | None = None,
    end: Timestamp | None = None,
    bucket_width: int | None = None,
    default_window: int | None = None,
) -> WindowRange:
    """Align a requested time range to bucket indices.

    Without ``start`` the window reaches ``default_window`` seconds back from
    ``now``; without ``end`` it stops at ``now``.
    """
    width = bucket_width or settings.realtime_bucket_width_seconds
    window = (
        default_window
        if default_window is not None
        else settings.realtime_default_window_seconds
    )
    now_s = epoch_seconds(now)
    start_s = epoch_seconds(start) if start is not None else now_s - window
    end_s = epoch_seconds(end) if end is not None else now_s
    return WindowRange(
        start_bucket=bucket_index(start_s, width),
        end_bucket=bucket_index(end_s, width),
        bucket_width=width,
    )
