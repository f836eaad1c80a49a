"""Content metadata: content records, publishers and the materialize service."""

from __future__ import annotations

import enum
import random
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .common import ServiceError, Timestamp
from .config import AppConfig

CONTENT_PLACEHOLDER_URL = "https://placeholder.example.com/1600x900"
AVATAR_PLACEHOLDER_URL = "https://placeholder.example.com/400x400"

_FIRST_NAMES = (
    "Ada", "Bruno", "Clara", "Diego", "Elena", "Felix", "Greta", "Hugo",
    "Iris", "Jonas", "Kira", "Leo", "Mila", "Nico", "Olga", "Pavel",
)
_LAST_NAMES = (
    "Anders", "Brook", "Castell", "Dorn", "Ellis", "Fontaine", "Gray", "Hale",
    "Ivers", "Jansen", "Kowal", "Lind", "Moreau", "Noble", "Ortega", "Price",
)
_LOREM_WORDS = (
    "lorem", "ipsum", "dolor", "sit", "amet", "consectetur", "adipiscing",
    "elit", "sed", "do", "eiusmod", "tempor", "incididunt", "ut", "labore",
    "et", "dolore", "magna", "aliqua", "enim", "minim", "veniam", "quis",
)


def _fake_name() -> str:
    return f"{random.choice(_FIRST_NAMES)} {random.choice(_LAST_NAMES)}"


def _fake_sentence(min_words: int = 3, max_words: int = 7) -> str:
    count = random.randrange(min_words, max_words)
    words = random.choices(_LOREM_WORDS, k=count)
    return " ".join(words).capitalize() + "."


def _fake_created_at() -> Timestamp:
    now = datetime.now(timezone.utc)
    earliest = now - timedelta(days=365)
    span = (now - earliest).total_seconds()
    moment = earliest + timedelta(seconds=random.uniform(0, span))
    return Timestamp.from_datetime(moment)


class ContentType(enum.IntEnum):
    """The media format of a piece of content."""

    UNSPECIFIED = 0
    SHORT = 1
    VLOG = 2
    MOVIE = 3
    AI_GENERATED = 4

    def as_str_name(self) -> str:
        """Return the protobuf field name of this value."""
        return f"CONTENT_TYPE_{self.name}"

    @classmethod
    def from_str_name(cls, value: str) -> ContentType | None:
        """Return the value for a protobuf field name, or None if unknown."""
        prefix = "CONTENT_TYPE_"
        if not value.startswith(prefix):
            return None
        return cls.__members__.get(value[len(prefix):])


@dataclass
class Publisher:
    """A content publisher."""

    id: int = 0
    name: str = ""
    avatar: str = ""

    @classmethod
    def fake(cls) -> Publisher:
        return cls(
            id=random.randrange(10000, 2000000),
            name=_fake_name(),
            avatar=AVATAR_PLACEHOLDER_URL,
        )


@dataclass
class Content:
    """A content entity with its metadata."""

    id: int = 0
    name: str = ""
    description: str = ""
    publishers: list[Publisher] = field(default_factory=list)
    url: str = ""
    image: str = ""
    type: ContentType = ContentType.UNSPECIFIED
    created_at: Timestamp | None = None
    views: int = 0
    likes: int = 0
    dislikes: int = 0

    @classmethod
    def materialize(cls, id: int) -> Content:
        """Produce a content record for the given id filled with generated data."""
        publisher_count = random.randrange(2, 10) - 1
        return cls(
            id=id,
            name=_fake_name(),
            description=_fake_sentence(),
            publishers=[Publisher.fake() for _ in range(publisher_count)],
            url=CONTENT_PLACEHOLDER_URL,
            image=CONTENT_PLACEHOLDER_URL,
            type=random.choice(list(ContentType)),
            created_at=_fake_created_at(),
            views=random.randrange(123432, 10000000),
            likes=random.randrange(1234, 100000),
            dislikes=random.randrange(123, 10000),
        )

    def to_body(self) -> str:
        return f"Content: {self!r}"


@dataclass
class Tpl:
    """A template over a list of contents, rendered into a message body."""

    contents: Sequence[Content]

    def to_body(self) -> str:
        return f"Tpl: {list(self.contents)!r}"


@dataclass(frozen=True)
class MaterializeRequest:
    """A request to materialize the content with the given id."""

    id: int = 0

    @classmethod
    def from_ids(cls, ids: Iterable[int]) -> Iterator[MaterializeRequest]:
        """Yield one request per distinct id."""
        return iter(dict.fromkeys(cls(id=content_id) for content_id in ids))


async def _as_async(
    requests: Iterable[MaterializeRequest] | AsyncIterable[MaterializeRequest],
) -> AsyncIterator[MaterializeRequest]:
    if isinstance(requests, AsyncIterable):
        async for request in requests:
            yield request
    else:
        for request in requests:
            yield request


class MetadataService:
    """Turns a stream of content ids into a stream of content records."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    async def materialize(
        self,
        requests: Iterable[MaterializeRequest] | AsyncIterable[MaterializeRequest],
    ) -> AsyncIterator[Content]:
        """Yield a content record per request; stop at the first failed request."""
        source = _as_async(requests).__aiter__()
        while True:
            try:
                request = await source.__anext__()
            except (StopAsyncIteration, ServiceError):
                return
            yield Content.materialize(request.id)


from collections.abc import Iterator  # noqa: E402