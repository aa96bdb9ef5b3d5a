"""
Conversion of BSON oplog timestamps into calendar datetimes.

An oplog ``ts`` is a ``bson.Timestamp`` made of epoch seconds (``time``) and an
ordinal (``inc``) that orders writes applied within the same second. The
ordinal is placed into the sub-second slot as if it were nanoseconds. It is a
counter, not elapsed time; callers needing strict ordering should compare
``Operation.increment`` instead of the sub-second part of ``timestamp``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from bson.timestamp import Timestamp

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def timestamp_to_datetime(timestamp: Timestamp) -> datetime:
    """
    Convert a BSON timestamp into a UTC datetime.

    datetime only has microsecond resolution, so the nanosecond value is
    truncated. Ordinals of one billion or more carry into the seconds.

    Example:
        >>> timestamp_to_datetime(Timestamp(1479561394, 0))
        datetime.datetime(2016, 11, 19, 13, 16, 34, tzinfo=datetime.timezone.utc)
    """
    return EPOCH + timedelta(
        seconds=timestamp.time,
        microseconds=timestamp.inc // 1000,
    )
