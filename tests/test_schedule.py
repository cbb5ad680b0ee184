"""Tests for weekly milestone schedule generation."""

from __future__ import annotations

import datetime as dt

import pytest

from gh_setup.schedule import due_instant, generate_schedule, local_date_key


@pytest.mark.unit
class TestGenerateSchedule:
    """Tests for generate_schedule()."""

    def test_single_week_in_utc(self) -> None:
        (descriptor,) = generate_schedule(dt.date(2026, 1, 4), 1, "UTC")

        assert descriptor.title == "Week 1: 2026-01-10"
        assert descriptor.description == "Period: 2026-01-04 - 2026-01-10"
        assert descriptor.date_key == "2026-01-10"
        assert descriptor.due_on_iso == "2026-01-10T23:59:59Z"

    def test_produces_requested_number_of_weeks(self) -> None:
        start = dt.date(2026, 1, 4)
        descriptors = generate_schedule(start, 10, "UTC")

        assert len(descriptors) == 10
        for i, descriptor in enumerate(descriptors):
            assert descriptor.week_start == start + dt.timedelta(days=7 * i)
            assert descriptor.week_end == start + dt.timedelta(days=7 * i + 6)
            assert descriptor.title == f"Week {i + 1}: {descriptor.week_end.isoformat()}"

    def test_due_instants_strictly_increase(self) -> None:
        descriptors = generate_schedule(dt.date(2026, 1, 4), 52, "America/New_York")
        instants = [d.due_on_utc for d in descriptors]
        assert all(a < b for a, b in zip(instants, instants[1:], strict=False))

    def test_weeks_cross_month_and_year_boundaries(self) -> None:
        descriptors = generate_schedule(dt.date(2025, 12, 21), 2, "UTC")
        assert [d.date_key for d in descriptors] == ["2025-12-27", "2026-01-03"]
        assert descriptors[1].description == "Period: 2025-12-28 - 2026-01-03"

    def test_fixed_offset_zone(self) -> None:
        (descriptor,) = generate_schedule(dt.date(2026, 1, 4), 1, "Asia/Tokyo")
        assert descriptor.due_on_iso == "2026-01-10T14:59:59Z"

    def test_daylight_saving_transition_changes_offset(self) -> None:
        # US DST starts on 2026-03-08, between the two Saturdays.
        before, after = generate_schedule(dt.date(2026, 3, 1), 2, "America/New_York")
        assert before.due_on_iso == "2026-03-08T04:59:59Z"
        assert after.due_on_iso == "2026-03-15T03:59:59Z"

    def test_due_instant_is_timezone_aware_utc(self) -> None:
        (descriptor,) = generate_schedule(dt.date(2026, 1, 4), 1, "Europe/Berlin")
        assert descriptor.due_on_utc.utcoffset() == dt.timedelta(0)
        assert descriptor.due_on_iso == "2026-01-10T22:59:59Z"

    @pytest.mark.parametrize("weeks", [0, -3])
    def test_non_positive_weeks_rejected(self, weeks: int) -> None:
        with pytest.raises(ValueError, match="positive integer"):
            generate_schedule(dt.date(2026, 1, 4), weeks, "UTC")

    def test_unknown_timezone_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown timezone"):
            generate_schedule(dt.date(2026, 1, 4), 1, "Mars/Olympus_Mons")


@pytest.mark.unit
class TestDateHelpers:
    """Tests for due_instant() and local_date_key()."""

    def test_due_instant_round_trips_to_local_date(self) -> None:
        instant = due_instant(dt.date(2026, 7, 11), "America/Los_Angeles")
        assert instant.isoformat() == "2026-07-12T06:59:59+00:00"
        assert local_date_key(instant, "America/Los_Angeles") == "2026-07-11"

    def test_local_date_key_uses_zone_not_utc_date(self) -> None:
        instant = dt.datetime(2026, 1, 11, 4, 59, 59, tzinfo=dt.UTC)
        assert local_date_key(instant, "UTC") == "2026-01-11"
        assert local_date_key(instant, "America/New_York") == "2026-01-10"

    def test_naive_datetime_is_treated_as_utc(self) -> None:
        assert local_date_key(dt.datetime(2026, 1, 10, 14, 59, 59), "Asia/Tokyo") == "2026-01-10"
