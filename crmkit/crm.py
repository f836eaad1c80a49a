"""CRM service: welcomes, recalls and reminds users through the other services."""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from .common import ServiceError
from .config import AppConfig, ConfigError
from .crm_messages import (
    RecallRequest,
    RecallResponse,
    RemindRequest,
    RemindResponse,
    WelcomeRequest,
    WelcomeResponse,
)
from .messages import SendRequest
from .metadata import Content, MaterializeRequest
from .notification import welcome_request
from .user_stats import QueryRequest

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome"
REGISTRATION_COLUMN = "created_at"


async def _iterate(source: Iterable[Any] | AsyncIterable[Any]) -> AsyncIterator[Any]:
    if isinstance(source, AsyncIterable):
        async for item in source:
            yield item
    else:
        for item in source:
            yield item


async def _open(result: Any) -> AsyncIterator[Any]:
    """Resolve a call result (awaitable or not) into an async iterator of its items."""
    if inspect.isawaitable(result):
        result = await result
    return _iterate(result)


class CrmService:
    """Coordinates the user statistics, metadata and notification services.

    `user_stats` must offer `query(QueryRequest)`, `metadata` must offer
    `materialize(requests)` and `notification` must offer `process_send(requests)`;
    each may return an iterable, an async iterable, or an awaitable of either.
    Items that are `ServiceError` instances are skipped.
    """

    def __init__(self, config: AppConfig, user_stats: Any, notification: Any, metadata: Any) -> None:
        if config.server.sender_email is None:
            raise ConfigError("missing field: sender_email")
        self.config = config
        self.user_stats = user_stats
        self.notification = notification
        self.metadata = metadata

    async def _collect_contents(self, content_ids: Iterable[int]) -> list[Content]:
        stream = await _open(self.metadata.materialize(MaterializeRequest.from_ids(content_ids)))
        return [item async for item in stream if not isinstance(item, ServiceError)]

    async def welcome(self, req: WelcomeRequest) -> WelcomeResponse:
        """Send a welcome e-mail to users who registered `req.interval` days ago."""
        lower = datetime.now(timezone.utc) - timedelta(days=req.interval)
        upper = lower + timedelta(days=1)
        query = QueryRequest.new_with_dt(REGISTRATION_COLUMN, lower, upper)

        users = await _open(self.user_stats.query(query))
        contents = await self._collect_contents(req.content_ids)
        sender = self.config.server.sender_email

        async def requests() -> AsyncIterator[SendRequest]:
            async for user in users:
                if isinstance(user, ServiceError):
                    continue
                yield welcome_request(WELCOME_SUBJECT, sender, [user.email], contents)

        responses = await _open(self.notification.process_send(requests()))
        async for response in responses:
            if isinstance(response, ServiceError):
                logger.warning("Failed to send welcome message: %s", response)

        return WelcomeResponse(id=req.id)

    async def recall(self, req: RecallRequest) -> RecallResponse:
        return RecallResponse(id=f"recall-{req.id}")

    async def remind(self, req: RemindRequest) -> RemindResponse:
        return RemindResponse(id=f"remind-{req.id}")