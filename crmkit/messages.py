"""Notification message types: e-mail, SMS, in-app, and send requests."""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field
from typing import Union

from .common import Timestamp

_FAKE_NAMES = ("alice", "bob", "carol", "dave", "erin", "frank", "grace", "heidi")


def _fake_email() -> str:
    return f"{random.choice(_FAKE_NAMES)}{random.randint(1, 9999)}@example.com"


def _fake_phone() -> str:
    return f"+1-555-01{random.randint(0, 99):02d}"


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class EmailMessage:
    """An e-mail to be sent."""

    message_id: str = ""
    subject: str = ""
    sender: str = ""
    recipients: list[str] = field(default_factory=list)
    body: str = ""

    @classmethod
    def fake(cls) -> EmailMessage:
        return cls(
            message_id=_new_id(),
            sender=_fake_email(),
            recipients=[_fake_email()],
            subject="Hello",
            body="Hello, world!",
        )


@dataclass
class SmsMessage:
    """An SMS to be sent."""

    message_id: str = ""
    sender: str = ""
    recipients: list[str] = field(default_factory=list)
    body: str = ""

    @classmethod
    def fake(cls) -> SmsMessage:
        return cls(
            message_id=_new_id(),
            sender=_fake_phone(),
            recipients=[_fake_phone()],
            body="Hello, world!",
        )


@dataclass
class InAppMessage:
    """An in-app message addressed to a device."""

    message_id: str = ""
    device_id: str = ""
    title: str = ""
    body: str = ""

    @classmethod
    def fake(cls) -> InAppMessage:
        return cls(
            message_id=_new_id(),
            device_id=_new_id(),
            title="Hello",
            body="Hello, world!",
        )


Message = Union[EmailMessage, SmsMessage, InAppMessage]


@dataclass
class SendRequest:
    """A request to send one message; msg may be absent in a malformed request."""

    msg: Message | None = None

    @classmethod
    def from_message(cls, msg: Message) -> SendRequest:
        if not isinstance(msg, (EmailMessage, SmsMessage, InAppMessage)):
            raise TypeError(f"unsupported message type: {type(msg).__name__}")
        return cls(msg=msg)


@dataclass
class SendResponse:
    """The result of sending a message."""

    message_id: str = ""
    timestamp: Timestamp | None = None