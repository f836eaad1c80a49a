"""Notification service: accepts a stream of send requests and dispatches them."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Sequence
from typing import Any, Protocol

from .common import ServiceError, now_timestamp
from .config import AppConfig
from .messages import EmailMessage, InAppMessage, Message, SendRequest, SendResponse, SmsMessage
from .metadata import Content, Tpl

logger = logging.getLogger(__name__)

CHANNEL_SIZE = 1024
SEND_DELAY_SECONDS = 0.3


class _MessageSink(Protocol):
    async def send(self, msg: Message) -> None: ...


class DummySender:
    """A stand-in delivery backend that logs each queued message after a delay."""

    def __init__(self, delay: float = SEND_DELAY_SECONDS, capacity: int = CHANNEL_SIZE * 100) -> None:
        self.delay = delay
        self.capacity = capacity
        self._queue: asyncio.Queue[Message] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._closed = False

    def _ensure_worker(self) -> asyncio.Queue[Message]:
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self.capacity)
            self._worker = asyncio.get_running_loop().create_task(self._run(self._queue))
        return self._queue

    async def _run(self, queue: asyncio.Queue[Message]) -> None:
        while True:
            msg = await queue.get()
            try:
                logger.info("Sending message: %r", msg)
                await asyncio.sleep(self.delay)
            finally:
                queue.task_done()

    async def send(self, msg: Message) -> None:
        """Queue a message for delivery; raise RuntimeError once closed."""
        if self._closed:
            raise RuntimeError("sender is closed")
        await self._ensure_worker().put(msg)

    def close(self) -> None:
        """Stop accepting messages and stop the delivery worker."""
        self._closed = True
        if self._worker is not None:
            self._worker.cancel()
            self._worker = None


async def _as_async(
    requests: Iterable[SendRequest] | AsyncIterable[SendRequest],
) -> AsyncIterator[SendRequest]:
    if isinstance(requests, AsyncIterable):
        async for request in requests:
            yield request
    else:
        for request in requests:
            yield request


class NotificationService:
    """Dispatches e-mail, SMS and in-app messages to a delivery backend."""

    def __init__(self, config: AppConfig, sender: Any = None) -> None:
        self.config = config
        self.sender: _MessageSink = sender if sender is not None else DummySender()

    async def send_message(self, msg: Message) -> SendResponse:
        """Hand one message to the backend and report when it was accepted."""
        if not isinstance(msg, (EmailMessage, SmsMessage, InAppMessage)):
            raise ServiceError.invalid_argument("Invalid request")
        try:
            await self.sender.send(msg)
        except RuntimeError as exc:
            logger.warning("Failed to send message: %r", exc)
            raise ServiceError.internal("Failed to send message") from exc
        return SendResponse(message_id=msg.message_id, timestamp=now_timestamp())

    async def process_send(
        self,
        requests: Iterable[SendRequest] | AsyncIterable[SendRequest],
    ) -> AsyncIterator[SendResponse | ServiceError]:
        """Yield one result per request: a SendResponse, or the ServiceError it failed with.

        The stream ends when the input ends or when reading the input fails.
        """
        source = _as_async(requests).__aiter__()
        while True:
            try:
                request = await source.__anext__()
            except (StopAsyncIteration, ServiceError):
                return
            if request.msg is None:
                logger.warning("Invalid request")
                yield ServiceError.invalid_argument("Invalid request")
                continue
            try:
                yield await self.send_message(request.msg)
            except ServiceError as err:
                yield err


def welcome_request(
    subject: str,
    sender: str,
    recipients: Sequence[str],
    contents: Sequence[Content],
) -> SendRequest:
    """Build an e-mail send request whose body renders the given contents."""
    email = EmailMessage(
        message_id=str(uuid.uuid4()),
        subject=subject,
        sender=sender,
        recipients=list(recipients),
        body=Tpl(contents).to_body(),
    )
    return SendRequest(msg=email)