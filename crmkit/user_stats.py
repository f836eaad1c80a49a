"""User statistics queries: query messages and their SQL rendering."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .common import Timestamp

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_SELECT_PREFIX = "SELECT email, name FROM user_stats WHERE "


@dataclass(frozen=True)
class User:
    """A user row returned by a statistics query."""

    email: str = ""
    name: str = ""


@dataclass(frozen=True)
class TimeQuery:
    """A time range; either bound may be absent."""

    lower: Timestamp | None = None
    upper: Timestamp | None = None


@dataclass
class IdQuery:
    """A set of ids that a column's array must contain."""

    ids: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.ids = list(self.ids)
        for value in self.ids:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"id must be a non-negative integer, got {value!r}")


@dataclass
class RawQueryRequest:
    """A query given directly as SQL text."""

    query: str = ""


def _rfc3339(ts: Timestamp) -> str:
    try:
        moment = _EPOCH + timedelta(seconds=ts.seconds)
    except OverflowError as exc:
        raise ValueError(f"timestamp out of range: {ts.seconds}") from exc
    base = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    nanos = ts.nanos
    if nanos == 0:
        fraction = ""
    elif nanos % 1_000_000 == 0:
        fraction = f".{nanos // 1_000_000:03d}"
    elif nanos % 1_000 == 0:
        fraction = f".{nanos // 1_000:06d}"
    else:
        fraction = f".{nanos:09d}"
    return f"{base}{fraction}+00:00"


def timestamp_query(name: str, lower: Timestamp | None, upper: Timestamp | None) -> str:
    """Render a SQL condition restricting column `name` to the given time range."""
    if lower is None and upper is None:
        return "TRUE"
    if lower is None:
        return f"{name} <= '{_rfc3339(upper)}'"
    if upper is None:
        return f"{name} >= '{_rfc3339(lower)}'"
    return f"{name} BETWEEN '{_rfc3339(lower)}' AND '{_rfc3339(upper)}'"


def ids_query(name: str, ids: list[int]) -> str:
    """Render a SQL condition requiring array column `name` to contain all ids."""
    if not ids:
        return "TRUE"
    return f"array{list(ids)!r} <@ {name}"


@dataclass
class QueryRequest:
    """A structured query over user statistics, keyed by column name."""

    timestamps: dict[str, TimeQuery] = field(default_factory=dict)
    ids: dict[str, IdQuery] = field(default_factory=dict)

    def to_sql(self) -> str:
        """Render the query as a SQL statement selecting email and name."""
        time_conditions = " AND ".join(
            timestamp_query(name, tq.lower, tq.upper) for name, tq in self.timestamps.items()
        )
        id_conditions = " AND ".join(
            ids_query(name, iq.ids) for name, iq in self.ids.items()
        )
        sql = _SELECT_PREFIX + time_conditions
        if id_conditions:
            sql += " AND " + id_conditions
        logger.info("Generated SQL: %s", sql)
        return sql

    def __str__(self) -> str:
        return self.to_sql()

    @classmethod
    def new_with_dt(cls, name: str, lower: datetime, upper: datetime) -> QueryRequest:
        """Build a query on one time column between two datetimes, truncated to seconds."""
        def whole_seconds(dt: datetime) -> Timestamp:
            return Timestamp(seconds=Timestamp.from_datetime(dt).seconds, nanos=0)

        tq = TimeQuery(lower=whole_seconds(lower), upper=whole_seconds(upper))
        return cls(timestamps={name: tq})