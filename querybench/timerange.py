"""Benchmark time range and uniformly random sub-windows."""

from dataclasses import dataclass
from typing import ClassVar
from datetime import datetime, timedelta, timezone

import numpy as np

from querybench.errors import InvalidTimeRangeError, WindowTooLargeError

_ONE_MICROSECOND = timedelta(microseconds=1)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_rfc3339(value: datetime) -> str:
    """Render a timestamp as RFC 3339 with a trailing Z."""
    value = _as_utc(value)
    if value.microsecond:
        return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_duration(duration: timedelta) -> str:
    """Render a duration the way Go prints time.Duration values.

    Example:
        >>> format_duration(timedelta(hours=12))
        '12h0m0s'
        >>> format_duration(timedelta(minutes=1))
        '1m0s'
    """
    total_us = duration // _ONE_MICROSECOND
    if total_us == 0:
        return "0s"
    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)
    hours, rest = divmod(total_us, 3600 * 1_000_000)
    minutes, rest = divmod(rest, 60 * 1_000_000)
    seconds, micros = divmod(rest, 1_000_000)

    sec_text = f"{seconds}"
    if micros:
        sec_text += f".{micros:06d}".rstrip("0")
    if hours:
        return f"{sign}{hours}h{minutes}m{sec_text}s"
    if minutes:
        return f"{sign}{minutes}m{sec_text}s"
    return f"{sign}{sec_text}s"


@dataclass(frozen=True)
class TimeRange:
    """Half-open span of benchmark time, [start, end).

    Naive datetimes are taken as UTC. A TimeRange is immutable, so one
    instance can be shared by every worker without synchronization.

    Attributes:
        start: First instant of the range
        end: Instant just past the range
    """

    start: datetime
    end: datetime

    allow_empty: ClassVar[bool] = False

    def __post_init__(self) -> None:
        start = _as_utc(self.start)
        end = _as_utc(self.end)
        if end < start or (end == start and not self.allow_empty):
            raise InvalidTimeRangeError(
                f"bad time order: start {format_rfc3339(start)} is not before end {format_rfc3339(end)}"
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def start_string(self) -> str:
        return format_rfc3339(self.start)

    def end_string(self) -> str:
        return format_rfc3339(self.end)

    def contains(self, other: "TimeRange") -> bool:
        """Whether other lies entirely inside this range."""
        return self.start <= other.start and other.end <= self.end

    def rand_window(self, duration: timedelta, rng: np.random.Generator) -> "RandomWindow":
        """Draw a window of exactly `duration` uniformly from this range.

        The window start is uniform over [start, end - duration], both ends
        inclusive, at microsecond resolution.

        Args:
            duration: Width of the window
            rng: Random generator owned by the caller

        Returns:
            A new window with end - start == duration

        Raises:
            WindowTooLargeError: If duration exceeds the range
            ValueError: If duration is negative
        """
        if duration < timedelta(0):
            raise ValueError(f"window duration must not be negative, got {duration}")
        if duration > self.duration:
            raise WindowTooLargeError(
                f"window {format_duration(duration)} exceeds time range "
                f"{format_duration(self.duration)} ({self.start_string()} - {self.end_string()})"
            )

        slack_us = (self.duration - duration) // _ONE_MICROSECOND
        offset_us = int(rng.integers(0, slack_us, endpoint=True))
        start = self.start + timedelta(microseconds=offset_us)
        return RandomWindow(start, start + duration)


class RandomWindow(TimeRange):
    """Window drawn from a TimeRange; may be a single instant (start == end)."""

    allow_empty = True
