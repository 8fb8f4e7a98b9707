"""Conversions for FILETIME timestamps: 100 ns ticks since 1601-01-01 UTC."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Optional

FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=UTC)
# Ticks between 1601-01-01 and the Unix epoch.
FILETIME_EPOCH_OFFSET = 116_444_736_000_000_000
TICKS_PER_SECOND = 10_000_000


def filetime_from_datetime(value: datetime) -> int:
    """Naive datetimes are taken as UTC."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    delta = value - FILETIME_EPOCH
    return (delta.days * 86_400 + delta.seconds) * TICKS_PER_SECOND + delta.microseconds * 10


def datetime_from_filetime(ticks: int) -> datetime:
    return FILETIME_EPOCH + timedelta(microseconds=ticks // 10)


def filetime_now(now: Optional[datetime] = None) -> int:
    return filetime_from_datetime(now or datetime.now(UTC))
