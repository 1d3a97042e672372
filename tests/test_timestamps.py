"""Tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

from reservation_notifier.utils import ensure_utc, format_timestamp, parse_iso_datetime, utc_now


class TestUtcNow:
    def test_utc_now_returns_utc_datetime(self):
        assert utc_now().tzinfo == timezone.utc

    def test_utc_now_is_recent(self):
        delta = abs(datetime.now(timezone.utc) - utc_now())
        assert delta < timedelta(seconds=5)


class TestEnsureUtc:
    def test_none(self):
        assert ensure_utc(None) is None

    def test_naive_datetime_is_treated_as_utc(self):
        naive = datetime(2026, 10, 19, 12, 0, 0)
        assert ensure_utc(naive) == datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)

    def test_other_timezone_is_converted(self):
        eastern = datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone(timedelta(hours=-4)))
        converted = ensure_utc(eastern)

        assert converted.tzinfo == timezone.utc
        assert converted.hour == 12


class TestParseIsoDatetime:
    def test_z_suffix(self):
        assert parse_iso_datetime("2026-10-19T12:00:00Z") == datetime(
            2026, 10, 19, 12, 0, tzinfo=timezone.utc
        )

    def test_fractional_seconds(self):
        assert parse_iso_datetime("2026-10-19T12:00:00.123Z").microsecond == 123000

    def test_utc_offset(self):
        assert parse_iso_datetime("2026-10-19T14:00:00+02:00") == datetime(
            2026, 10, 19, 12, 0, tzinfo=timezone.utc
        )

    def test_date_only(self):
        assert parse_iso_datetime("2026-10-19") == datetime(2026, 10, 19, tzinfo=timezone.utc)

    def test_invalid_returns_none(self):
        assert parse_iso_datetime("tomorrow") is None
        assert parse_iso_datetime("") is None
        assert parse_iso_datetime(None) is None


class TestFormatTimestamp:
    def test_default_format(self):
        dt = datetime(2026, 10, 19, 12, 0, 0, 500, tzinfo=timezone.utc)
        assert format_timestamp(dt) == "2026-10-19T12:00:00Z"

    def test_with_microseconds(self):
        dt = datetime(2026, 10, 19, 12, 0, 0, 500, tzinfo=timezone.utc)
        assert format_timestamp(dt, include_microseconds=True) == "2026-10-19T12:00:00.000500Z"

    def test_naive_input(self):
        assert format_timestamp(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02T03:04:05Z"
