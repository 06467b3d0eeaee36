"""Tests for time utilities."""

from datetime import date, datetime, timedelta, timezone

from klinik.utils.time import (
    from_storage_utc,
    local_midnight,
    local_today,
    parse_date_string,
    to_date_string,
    to_storage_utc,
)


def test_to_storage_utc_drops_tzinfo_after_conversion():
    wib = timezone(timedelta(hours=7))
    stored = to_storage_utc(datetime(2025, 1, 1, 0, 0, tzinfo=wib))
    assert stored == datetime(2024, 12, 31, 17, 0)
    assert stored.tzinfo is None


def test_from_storage_utc_attaches_utc():
    restored = from_storage_utc(datetime(2025, 1, 1, 8, 30))
    assert restored.tzinfo == timezone.utc
    assert from_storage_utc(None) is None


def test_local_midnight_is_start_of_today_in_zone():
    wib = timezone(timedelta(hours=7))
    midnight = local_midnight(wib)
    assert midnight.tzinfo is wib
    assert (midnight.hour, midnight.minute, midnight.second, midnight.microsecond) == (0, 0, 0, 0)
    assert midnight.date() == local_today(wib)
    assert midnight <= datetime.now(timezone.utc)


def test_local_midnight_defaults_to_server_zone():
    midnight = local_midnight()
    assert midnight.tzinfo is not None
    assert midnight.date() == datetime.now().date()


def test_date_string_round_trip_keeps_day():
    assert to_date_string(date(1990, 1, 1)) == "1990-01-01"
    assert to_date_string(datetime(1990, 1, 1, 23, 59)) == "1990-01-01"
    assert parse_date_string("1990-01-01") == date(1990, 1, 1)
    assert parse_date_string(None) is None
