from datetime import date, datetime, timedelta

import pytz

from payroll.services.contracts import Point
from payroll.tests.conftest import (
    FRIDAY_SUMMER,
    FRIDAY_WINTER,
    REGULAR_DAY,
    make_shift,
)


class TestShiftPoint:
    def test_day_shift(self, local_time):
        shift = make_shift(REGULAR_DAY, "08:00", "16:00")
        assert local_time.shift_point(shift) == Point(480, 960)

    def test_midnight_crossing_shift_exceeds_full_day(self, local_time):
        shift = make_shift(REGULAR_DAY, "22:00", "06:00")
        assert local_time.shift_point(shift) == Point(1320, 1800)

    def test_utc_timestamps_are_converted_to_local(self, local_time):
        start = pytz.utc.localize(datetime(2024, 10, 1, 5, 0))  # 08:00 local
        end = start + timedelta(hours=8)
        point = local_time.shift_point(make_shift(REGULAR_DAY, "08:00", "16:00"))
        assert local_time.minutes_from_midnight(start, REGULAR_DAY) == point.start
        assert local_time.minutes_from_midnight(end, REGULAR_DAY) == point.end

    def test_naive_timestamps_are_local_wall_time(self, local_time):
        value = datetime(2024, 10, 1, 9, 30)
        assert local_time.minutes_from_midnight(value, REGULAR_DAY) == 570

    def test_explicit_reference_day(self, local_time):
        shift = make_shift(date(2024, 10, 2), "01:00", "03:00")
        assert local_time.shift_point(shift, REGULAR_DAY) == Point(1500, 1620)


class TestSpecialEntry:
    def test_summer_entry_is_18(self, local_time):
        assert local_time.utc_offset(FRIDAY_SUMMER) == timedelta(hours=3)
        assert local_time.special_entry_minutes(FRIDAY_SUMMER) == 1080

    def test_winter_entry_is_17(self, local_time):
        assert local_time.utc_offset(FRIDAY_WINTER) == timedelta(hours=2)
        assert local_time.special_entry_minutes(FRIDAY_WINTER) == 1020


class TestCalendarHelpers:
    def test_weekday_index_starts_on_sunday(self, local_time):
        assert local_time.weekday_index(date(2024, 10, 6)) == 0  # Sunday
        assert local_time.weekday_index(FRIDAY_SUMMER) == 5
        assert local_time.weekday_index(date(2024, 10, 12)) == 6

    def test_add_days_crosses_month(self, local_time):
        assert local_time.add_days(date(2024, 10, 31), 1) == date(2024, 11, 1)

    def test_combine_is_localized(self, local_time):
        value = local_time.combine(REGULAR_DAY, 8, 15)
        assert value.tzinfo is not None
        assert local_time.minutes_from_midnight(value, REGULAR_DAY) == 495
