"""Wall-clock source for publish timestamps.

Service functions that stamp times accept a zero-argument callable returning
an aware ``datetime`` so tests can pin the value.
"""
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
