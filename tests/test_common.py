from datetime import datetime, timedelta, timezone

import pytest

from crmkit.common import ServiceError, StatusCode, Timestamp, now_timestamp


def test_epoch_is_zero():
    assert Timestamp(0, 0).to_datetime() == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert Timestamp.from_datetime(datetime(1970, 1, 1, tzinfo=timezone.utc)) == Timestamp(0, 0)


def test_round_trip_datetime():
    dt = datetime(2024, 1, 1, 12, 30, 15, 123456, tzinfo=timezone.utc)
    ts = Timestamp.from_datetime(dt)
    assert ts.nanos == 123456 * 1000
    assert ts.to_datetime() == dt


def test_round_trip_timestamp():
    ts = Timestamp(seconds=1_700_000_000, nanos=5_000)
    assert Timestamp.from_datetime(ts.to_datetime()) == ts


def test_naive_datetime_is_utc():
    naive = datetime(2023, 6, 1, 8, 0, 0)
    aware = naive.replace(tzinfo=timezone.utc)
    assert Timestamp.from_datetime(naive) == Timestamp.from_datetime(aware)


def test_other_timezone_is_normalised():
    plus_two = timezone(timedelta(hours=2))
    local = datetime(2023, 6, 1, 10, 0, 0, tzinfo=plus_two)
    utc = datetime(2023, 6, 1, 8, 0, 0, tzinfo=timezone.utc)
    assert Timestamp.from_datetime(local) == Timestamp.from_datetime(utc)


def test_pre_epoch_has_positive_nanos():
    dt = datetime(1969, 12, 31, 23, 59, 59, 500000, tzinfo=timezone.utc)
    ts = Timestamp.from_datetime(dt)
    assert ts.seconds == -1
    assert ts.to_datetime() == dt


@pytest.mark.parametrize("nanos", [-1, 1_000_000_000])
def test_invalid_nanos(nanos):
    with pytest.raises(ValueError):
        Timestamp(0, nanos)


def test_now_timestamp_is_current():
    before = datetime.now(timezone.utc)
    ts = now_timestamp()
    after = datetime.now(timezone.utc)
    assert before <= ts.to_datetime() <= after


def test_service_error_carries_code():
    err = ServiceError.internal("Failed to send message")
    assert err.code is StatusCode.INTERNAL
    assert err.message == "Failed to send message"
    assert "Failed to send message" in str(err)


def test_service_error_invalid_argument():
    err = ServiceError.invalid_argument("Invalid request")
    assert err.code is StatusCode.INVALID_ARGUMENT
    assert err.message == "Invalid request"
    assert "Invalid request" in str(err)


def test_status_code_values_match_grpc():
    assert ServiceError.internal("x").code == 13
    assert ServiceError.invalid_argument("x").code == 3