"""Tests for timezone helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from hotel_tenancy.utils.timezone import ensure_utc, local_day_bounds, to_local


class TestTimezone:

    def test_naive_is_utc(self):
        assert ensure_utc(datetime(2024, 3, 1, 10)).tzinfo == timezone.utc

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        assert ensure_utc(datetime(2024, 3, 1, 10, tzinfo=plus_two)).hour == 8

    def test_to_local(self):
        local = to_local(datetime(2024, 3, 1, 20, tzinfo=timezone.utc), "Asia/Kolkata")
        assert (local.day, local.hour, local.minute) == (2, 1, 30)

    def test_unknown_zone(self):
        with pytest.raises(ValueError):
            to_local(datetime(2024, 3, 1), "Mars/Olympus")

    def test_local_day_bounds(self):
        start, end = local_day_bounds(datetime(2024, 3, 1, 20, tzinfo=timezone.utc), "Asia/Kolkata")

        assert start == datetime(2024, 3, 1, 18, 30, tzinfo=timezone.utc)
        assert end == datetime(2024, 3, 2, 18, 30, tzinfo=timezone.utc)
