import uuid

import pytest

from crmkit.common import Timestamp
from crmkit.messages import (
    EmailMessage,
    InAppMessage,
    SendRequest,
    SendResponse,
    SmsMessage,
)


def test_fake_email():
    email = EmailMessage.fake()
    assert email.subject == "Hello"
    assert email.body == "Hello, world!"
    assert len(email.recipients) == 1
    assert email.sender.endswith("@example.com")
    assert email.recipients[0].endswith("@example.com")
    assert str(uuid.UUID(email.message_id)) == email.message_id


def test_fake_sms():
    sms = SmsMessage.fake()
    assert sms.body == "Hello, world!"
    assert len(sms.recipients) == 1
    assert sms.sender.startswith("+")
    assert str(uuid.UUID(sms.message_id)) == sms.message_id


def test_fake_in_app():
    msg = InAppMessage.fake()
    assert msg.title == "Hello"
    assert msg.body == "Hello, world!"
    assert str(uuid.UUID(msg.device_id)) == msg.device_id
    assert msg.device_id != msg.message_id


def test_fake_ids_are_unique():
    ids = {EmailMessage.fake().message_id for _ in range(20)}
    assert len(ids) == 20


@pytest.mark.parametrize("factory", [EmailMessage.fake, SmsMessage.fake, InAppMessage.fake])
def test_from_message_wraps(factory):
    msg = factory()
    req = SendRequest.from_message(msg)
    assert req.msg is msg


def test_from_message_rejects_other_types():
    with pytest.raises(TypeError):
        SendRequest.from_message("not a message")


def test_default_request_is_empty():
    assert SendRequest().msg is None


def test_messages_compare_by_value():
    a = EmailMessage(message_id="1", subject="s", sender="a@example.com", recipients=["b@example.com"], body="x")
    b = EmailMessage(message_id="1", subject="s", sender="a@example.com", recipients=["b@example.com"], body="x")
    assert a == b
    assert SendRequest.from_message(a) == SendRequest.from_message(b)


def test_default_recipients_not_shared():
    a = SmsMessage()
    b = SmsMessage()
    a.recipients.append("x")
    assert b.recipients == []


def test_send_response():
    ts = Timestamp(10, 20)
    resp = SendResponse(message_id="abc", timestamp=ts)
    assert resp.message_id == "abc"
    assert resp.timestamp == ts
    assert SendResponse().timestamp is None