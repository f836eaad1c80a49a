from datetime import datetime, timezone

import pytest

from crmkit.common import ServiceError
from crmkit.config import AppConfig, AuthConfig, ConfigError, ServerConfig
from crmkit.crm import CrmService
from crmkit.crm_messages import RecallRequest, RemindRequest, WelcomeRequest
from crmkit.messages import EmailMessage
from crmkit.metadata import MetadataService
from crmkit.notification import NotificationService
from crmkit.user_stats import User

SENDER_EMAIL = "crm@example.com"


def make_config(sender_email=SENDER_EMAIL):
    return AppConfig(
        server=ServerConfig(port=50000, sender_email=sender_email),
        auth=AuthConfig(pk="placeholder"),
    )


class RecordingSender:
    def __init__(self):
        self.sent = []

    async def send(self, msg):
        self.sent.append(msg)


class FailingSender:
    async def send(self, msg):
        raise RuntimeError("closed")


class FakeUserStats:
    def __init__(self, items):
        self.items = items
        self.queries = []

    def query(self, query):
        self.queries.append(query)
        return self._stream()

    async def _stream(self):
        for item in self.items:
            yield item


class BrokenUserStats:
    async def query(self, query):
        raise ServiceError.internal("query failed")


def make_service(user_stats, sender=None):
    config = make_config()
    notification = NotificationService(config, sender if sender is not None else RecordingSender())
    return CrmService(config, user_stats, notification, MetadataService(config))


@pytest.mark.asyncio
async def test_welcome_sends_one_email_per_user():
    users = FakeUserStats([
        User(email="a@example.com", name="A"),
        ServiceError.internal("bad row"),
        User(email="b@example.com", name="B"),
    ])
    sender = RecordingSender()
    svc = make_service(users, sender)
    resp = await svc.welcome(WelcomeRequest(id="user-1", interval=7, content_ids=[1, 2, 3]))
    assert resp.id == "user-1"
    assert [m.recipients for m in sender.sent] == [["a@example.com"], ["b@example.com"]]
    for msg in sender.sent:
        assert isinstance(msg, EmailMessage)
        assert msg.subject == "Welcome"
        assert msg.sender == SENDER_EMAIL
        assert msg.body.startswith("Tpl: ")
        assert msg.body.count("Content(id=") == 3


@pytest.mark.asyncio
async def test_welcome_deduplicates_content_ids():
    sender = RecordingSender()
    svc = make_service(FakeUserStats([User(email="a@example.com", name="A")]), sender)
    await svc.welcome(WelcomeRequest(id="u", interval=1, content_ids=[5, 5, 6]))
    assert len(sender.sent) == 1
    body = sender.sent[0].body
    assert body.count("Content(id=") == 2
    assert "Content(id=5," in body and "Content(id=6," in body


@pytest.mark.asyncio
async def test_welcome_queries_one_day_window():
    users = FakeUserStats([])
    svc = make_service(users)
    before = datetime.now(timezone.utc).timestamp()
    await svc.welcome(WelcomeRequest(id="u", interval=7, content_ids=[]))
    after = datetime.now(timezone.utc).timestamp()
    assert len(users.queries) == 1
    tq = users.queries[0].timestamps["created_at"]
    assert tq.upper.seconds - tq.lower.seconds == 86400
    assert before - 7 * 86400 - 1 <= tq.lower.seconds <= after - 7 * 86400
    assert users.queries[0].ids == {}


@pytest.mark.asyncio
async def test_welcome_with_no_users_sends_nothing():
    sender = RecordingSender()
    svc = make_service(FakeUserStats([]), sender)
    resp = await svc.welcome(WelcomeRequest(id="empty", interval=3, content_ids=[1]))
    assert resp.id == "empty"
    assert sender.sent == []


@pytest.mark.asyncio
async def test_welcome_propagates_query_error():
    svc = make_service(BrokenUserStats())
    with pytest.raises(ServiceError) as info:
        await svc.welcome(WelcomeRequest(id="u", interval=1, content_ids=[1]))
    assert info.value.message == "query failed"


@pytest.mark.asyncio
async def test_welcome_ignores_failed_sends():
    svc = make_service(FakeUserStats([User(email="a@example.com", name="A")]), FailingSender())
    resp = await svc.welcome(WelcomeRequest(id="u-2", interval=1, content_ids=[1]))
    assert resp.id == "u-2"


@pytest.mark.asyncio
async def test_recall_prefixes_id():
    svc = make_service(FakeUserStats([]))
    resp = await svc.recall(RecallRequest(id="user-1", last_visit_interval=10, content_ids=[1]))
    assert resp.id == "recall-user-1"


@pytest.mark.asyncio
async def test_remind_prefixes_id():
    svc = make_service(FakeUserStats([]))
    resp = await svc.remind(RemindRequest(id="user-1", last_visit_interval=10))
    assert resp.id == "remind-user-1"


def test_missing_sender_email_is_rejected():
    config = make_config(sender_email=None)
    with pytest.raises(ConfigError):
        CrmService(config, FakeUserStats([]), NotificationService(config, RecordingSender()), MetadataService(config))