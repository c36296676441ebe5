"""
Local time helpers for shift segmentation.

Converts absolute shift timestamps into minute offsets from the local
midnight of the day the shift belongs to, and supplies the Sabbath/holiday
entry minute derived from the local UTC offset of a date.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

import pytz

from django.conf import settings

from .contracts import FULL_DAY_MINUTES, MINUTES_PER_HOUR, Point, Shift


class LocalTimeService:
    """Date/time utility bound to one local time zone"""

    DEFAULT_TIME_ZONE = "Asia/Jerusalem"
    SUMMER_UTC_OFFSET = timedelta(hours=3)  # daylight saving in effect
    SUMMER_SPECIAL_ENTRY_HOUR = 18
    WINTER_SPECIAL_ENTRY_HOUR = 17

    def __init__(self, tz_name: Optional[str] = None):
        self.tz_name = tz_name or getattr(settings, "TIME_ZONE", None) or self.DEFAULT_TIME_ZONE
        self.tz = pytz.timezone(self.tz_name)

    def localize(self, value: datetime) -> datetime:
        """Return value in the local zone; naive values are taken as local wall time."""
        if value.tzinfo is None:
            return self.tz.localize(value)
        return value.astimezone(self.tz)

    def minutes_from_midnight(self, value: datetime, reference_day: date) -> int:
        """
        Minutes between the local midnight of reference_day and value.

        Wall-clock based: a timestamp on the following local day yields
        1440 plus its time of day, so the end of a midnight-crossing shift
        exceeds 1440. Timestamps are expected at minute resolution; the
        request serializer rejects seconds.
        """
        local = self.localize(value)
        day_offset = (local.date() - reference_day).days
        return (
            day_offset * FULL_DAY_MINUTES
            + local.hour * MINUTES_PER_HOUR
            + local.minute
        )

    def shift_point(self, shift: Shift, reference_day: Optional[date] = None) -> Point:
        """Project a shift onto minute offsets of its reference (start) day."""
        if reference_day is None:
            reference_day = self.localize(shift.start).date()
        return Point(
            self.minutes_from_midnight(shift.start, reference_day),
            self.minutes_from_midnight(shift.end, reference_day),
        )

    def utc_offset(self, day: date) -> timedelta:
        # Noon avoids the night-time DST transition hour
        return self.tz.localize(datetime.combine(day, time(12, 0))).utcoffset()

    def special_entry_minutes(self, day: date) -> int:
        """
        Minute at which Sabbath/holiday rates start on an eve day.

        18:00 while daylight saving (UTC+3) is in effect, 17:00 otherwise.
        """
        if self.utc_offset(day) == self.SUMMER_UTC_OFFSET:
            hour = self.SUMMER_SPECIAL_ENTRY_HOUR
        else:
            hour = self.WINTER_SPECIAL_ENTRY_HOUR
        return hour * MINUTES_PER_HOUR

    @staticmethod
    def add_days(day: date, days: int) -> date:
        return day + timedelta(days=days)

    @staticmethod
    def weekday_index(day: date) -> int:
        """Weekday with 0=Sunday ... 6=Saturday."""
        return (day.weekday() + 1) % 7

    def combine(self, day: date, hour: int = 0, minute: int = 0) -> datetime:
        """Localized datetime for a wall-clock time on day."""
        return self.tz.localize(datetime.combine(day, time(hour, minute)))
