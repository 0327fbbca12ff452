from datetime import datetime, timezone

from budget_sync.shared.utils.datetime_utils import DateTimeUtils


def test_to_iso_string_uses_z_and_milliseconds() -> None:
    dt = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-02T03:04:05.678Z"


def test_naive_datetimes_are_assumed_utc() -> None:
    dt = datetime(2024, 1, 1, 12, 0, 0)
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-01T12:00:00.000Z"


def test_from_iso_string_handles_nanoseconds() -> None:
    parsed = DateTimeUtils.from_iso_string("2024-01-01T00:00:00.123456789Z")
    assert parsed == datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)


def test_from_iso_string_normalizes_offsets() -> None:
    parsed = DateTimeUtils.from_iso_string("2024-01-01T02:00:00+02:00")
    assert parsed == datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def test_from_iso_string_invalid_returns_none() -> None:
    assert DateTimeUtils.from_iso_string("not-a-date") is None
    assert DateTimeUtils.from_iso_string("") is None
    assert DateTimeUtils.from_iso_string(None) is None


def test_to_iso_string_with_microseconds() -> None:
    dt = datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
    assert DateTimeUtils.to_iso_string(dt, "microseconds") == "2024-01-01T00:00:00.123456Z"
