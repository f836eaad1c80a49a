"""Shared value types: protobuf-style timestamps and service errors."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True, order=True)
class Timestamp:
    """A point in time as whole seconds and nanoseconds since the Unix epoch."""

    seconds: int = 0
    nanos: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.nanos < _NANOS_PER_SECOND:
            raise ValueError(f"nanos out of range: {self.nanos}")

    @classmethod
    def from_datetime(cls, dt: datetime) -> Timestamp:
        """Build a timestamp from a datetime; naive values are taken as UTC."""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        delta = dt - _EPOCH
        seconds = delta.days * 86400 + delta.seconds
        return cls(seconds=seconds, nanos=delta.microseconds * 1000)

    def to_datetime(self) -> datetime:
        """Return the timestamp as an aware UTC datetime (microsecond precision)."""
        return _EPOCH + timedelta(seconds=self.seconds, microseconds=self.nanos // 1000)


def now_timestamp() -> Timestamp:
    """Return the current time as a timestamp."""
    return Timestamp.from_datetime(datetime.now(timezone.utc))


class StatusCode(enum.IntEnum):
    """gRPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class ServiceError(Exception):
    """An error returned by a service call, carrying a status code."""

    def __init__(self, code: StatusCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.name}: {self.message}"

    @classmethod
    def internal(cls, message: str) -> ServiceError:
        return cls(StatusCode.INTERNAL, message)

    @classmethod
    def invalid_argument(cls, message: str) -> ServiceError:
        return cls(StatusCode.INVALID_ARGUMENT, message)

    @classmethod
    def unknown(cls, message: str) -> ServiceError:
        return cls(StatusCode.UNKNOWN, message)