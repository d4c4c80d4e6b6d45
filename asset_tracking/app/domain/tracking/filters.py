"""
Asset filter classification.

Maps the optional (type, start, end) query inputs onto exactly one of
four filter modes. A time range only counts when both bounds are given;
a lone start or end bound is ignored.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from asset_tracking.app.core.exceptions import InvalidFilterError

logger = logging.getLogger(__name__)

# Representable range of epoch seconds: 1970-01-01 to 9999-12-31T23:59:59Z
MIN_EPOCH_SECONDS = 0
MAX_EPOCH_SECONDS = 253402300799


@dataclass(frozen=True)
class NoFilter:
    """Every asset."""


@dataclass(frozen=True)
class ByType:
    asset_type: str


class TimeWindowMixin:
    """Converts the epoch-second bounds of a time filter to UTC datetimes."""

    start_time: int
    end_time: int

    @property
    def window(self) -> tuple[datetime, datetime]:
        return to_datetime(self.start_time), to_datetime(self.end_time)


@dataclass(frozen=True)
class ByTime(TimeWindowMixin):
    start_time: int
    end_time: int


@dataclass(frozen=True)
class ByTypeAndTime(TimeWindowMixin):
    asset_type: str
    start_time: int
    end_time: int


FilterMode = Union[NoFilter, ByType, ByTime, ByTypeAndTime]


def to_datetime(timestamp: int) -> datetime:
    """Convert epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def classify_filter(
    asset_type: Optional[str],
    start_time: Optional[int],
    end_time: Optional[int]
) -> FilterMode:
    """
    Classify the supplied filters into a single filter mode.
    
    Args:
        asset_type: Asset type to match, empty or None for any type
        start_time: Window start in epoch seconds, or None
        end_time: Window end in epoch seconds, or None
    
    Returns:
        NoFilter, ByType, ByTime or ByTypeAndTime
    
    Raises:
        InvalidFilterError: If both bounds are given and start is after end,
            or a bound is outside the representable epoch range
    """
    has_type = bool(asset_type)
    has_time = start_time is not None and end_time is not None

    if not has_time:
        if start_time is not None or end_time is not None:
            # TODO: confirm with product whether a half-open range should be rejected
            logger.info("Partial time range [%s, %s] ignored", start_time, end_time)
        return ByType(asset_type) if has_type else NoFilter()

    if not all(MIN_EPOCH_SECONDS <= bound <= MAX_EPOCH_SECONDS for bound in (start_time, end_time)):
        logger.error("Time filter out of range %s, %s", start_time, end_time)
        raise InvalidFilterError(start_time, end_time, "Time filter bounds are out of range")

    if start_time > end_time:
        logger.error("Invalid time filter %s, %s", start_time, end_time)
        raise InvalidFilterError(start_time, end_time)

    if has_type:
        return ByTypeAndTime(asset_type, start_time, end_time)
    return ByTime(start_time, end_time)
