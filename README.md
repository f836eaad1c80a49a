# crmkit

crmkit holds the building blocks of a small customer-relationship system,
written for asyncio. It has no command-line entry points; it is used as a
library.

## Modules

- `crmkit.common`: `Timestamp` (seconds and nanoseconds since the Unix
  epoch, with `from_datetime` and `to_datetime`), `now_timestamp()`,
  the gRPC-style `StatusCode` enum and `ServiceError`, an exception that
  carries a `code` and a `message`.
- `crmkit.config`: `AppConfig`, `ServerConfig`, `AuthConfig`,
  `parse_config(data)`, `load_config(service)` and `ConfigError`.
- `crmkit.messages`: `EmailMessage`, `SmsMessage`, `InAppMessage` (each
  with a `fake()` constructor producing sample data), `SendRequest` and
  `SendResponse`.
- `crmkit.metadata`: `ContentType`, `Publisher`, `Content`, `Tpl`,
  `MaterializeRequest` and `MetadataService`. `Content.materialize(id)`
  fills a content record with generated data (name, description,
  publishers, type, creation time, view/like/dislike counts);
  `MetadataService.materialize(requests)` is an async generator yielding
  one `Content` per request. `MaterializeRequest.from_ids(ids)` yields one
  request per distinct id.
- `crmkit.notification`: `NotificationService`, `DummySender` and
  `welcome_request(subject, sender, recipients, contents)`.
  `NotificationService.process_send(requests)` is an async generator that
  yields, for each `SendRequest`, either a `SendResponse` or the
  `ServiceError` that request failed with (a request without a message
  gives an `INVALID_ARGUMENT` error). `send_message(msg)` sends one message
  and raises `ServiceError` on failure. `DummySender` queues messages and
  logs each one after a short delay.
- `crmkit.crm_messages`: `WelcomeRequest`, `RecallRequest`,
  `RemindRequest` and their responses. Intervals and content ids are
  checked to be unsigned 32-bit integers.
- `crmkit.user_stats`: `User`, `TimeQuery`, `IdQuery`, `QueryRequest`,
  `RawQueryRequest`, `timestamp_query(name, lower, upper)` and
  `ids_query(name, ids)`. `QueryRequest.to_sql()` renders a
  `SELECT email, name FROM user_stats WHERE ...` statement;
  `QueryRequest.new_with_dt(name, lower, upper)` builds a query on one
  time column, truncated to whole seconds.
- `crmkit.crm`: `CrmService`, which ties the others together.
  `welcome(req)` queries users who registered `req.interval` days ago
  (a one-day window on `created_at`), materializes the requested contents
  and sends each user a "Welcome" e-mail through the notification service.
  `recall(req)` and `remind(req)` answer with ids `recall-<id>` and
  `remind-<id>`.

`CrmService(config, user_stats, notification, metadata)` takes the three
collaborators as objects: `user_stats` must offer `query(QueryRequest)`,
`metadata` must offer `materialize(requests)` and `notification` must offer
`process_send(requests)`. Each may return an iterable, an async iterable or
an awaitable of either; `ServiceError` items in the results are skipped.
`MetadataService` and `NotificationService` fit directly. The config must
set `server.sender_email`, or `ConfigError` is raised.

## Configuration

`load_config(service)` reads `./<service>.yml`, then
`/etc/config/<service>.yml`, and finally the file named by the environment
variable `<SERVICE>_CONFIG` (the service name upper-cased). `ConfigError`
is raised when no file is found or the content is invalid. For the crm
service:

```yaml
server:
  port: 50000
  sender_email: crm@example.com
  metadata: http://[::1]:50001
  user_stats: http://[::1]:50002
  notification: http://[::1]:50003
auth:
  pk: placeholder
```

`server.port` and `auth.pk` are required; `db_url`, `sender_email`,
`metadata`, `user_stats` and `notification` are optional strings.
`parse_config(data)` accepts YAML text or an already parsed mapping.

## Examples

Building a statistics query:

```python
from datetime import datetime, timedelta, timezone

from crmkit.user_stats import QueryRequest

upper = datetime.now(timezone.utc)
lower = upper - timedelta(days=1)
query = QueryRequest.new_with_dt("created_at", lower, upper)
print(query.to_sql())
```

Materializing content:

```python
import asyncio

from crmkit.config import parse_config
from crmkit.metadata import MaterializeRequest, MetadataService

config = parse_config({"server": {"port": 50001}, "auth": {"pk": "placeholder"}})


async def show():
    service = MetadataService(config)
    async for content in service.materialize(MaterializeRequest.from_ids([1, 2, 3])):
        print(content.to_body())


asyncio.run(show())
```

## What the package does not do

- It runs no network servers and opens no client connections; the
  addresses in the configuration are read but not used. Services are
  called in-process.
- It does not execute SQL. `QueryRequest.to_sql()` only produces the
  statement text, and there is no user statistics service backed by a
  database; a `user_stats` object for `CrmService` must be supplied by the
  caller.
- Content records are generated sample data, not looked up from storage.
- No real e-mail, SMS or in-app delivery: `DummySender` only logs.

## Tests

The test suite uses pytest with pytest-asyncio; install them with the
`test` extra.