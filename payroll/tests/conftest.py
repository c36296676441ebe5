"""
Test configuration and fixtures for payroll tests.

Provides the engine collaborators, dates with known weekdays and DST state,
and helpers building localized shifts.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest
import pytz

TZ = pytz.timezone("Asia/Jerusalem")

# October 2024: Tue 1st, Fri 4th, Sat 5th; daylight saving until the 27th
REGULAR_DAY = date(2024, 10, 1)
FRIDAY_SUMMER = date(2024, 10, 11)
SATURDAY_SUMMER = date(2024, 10, 12)
# December 2024: standard time, Fri 6th, Sat 7th
FRIDAY_WINTER = date(2024, 12, 6)
SATURDAY_WINTER = date(2024, 12, 7)

STANDARD_HOURS = Decimal("6.67")
RATE_2024_09_PER_DIEM = Decimal("36.30")


def hours(value) -> Decimal:
    return Decimal(str(value))


def make_shift(day, start, end, shift_id="s1", field_duty=False):
    """
    Build a localized Shift.

    start/end are "HH:MM"; an end not after start is taken on the next day.
    """
    from payroll.services.contracts import Shift

    start_dt = TZ.localize(datetime.combine(day, time.fromisoformat(start)))
    end_day = day
    if time.fromisoformat(end) <= time.fromisoformat(start):
        end_day = day + timedelta(days=1)
    end_dt = TZ.localize(datetime.combine(end_day, time.fromisoformat(end)))
    return Shift(id=shift_id, start=start_dt, end=end_dt, is_field_duty_shift=field_duty)


def make_meta(day, type_day=None, cross=False):
    from payroll.services.contracts import WorkDayMeta
    from payroll.services.enums import WorkDayType

    return WorkDayMeta(
        date=day,
        type_day=type_day or WorkDayType.REGULAR,
        cross_day_continuation=cross,
    )


@pytest.fixture
def local_time():
    from payroll.services.local_time import LocalTimeService

    return LocalTimeService("Asia/Jerusalem")


@pytest.fixture
def engine_config():
    from payroll.services.factory import PayrollEngineConfig

    return PayrollEngineConfig(time_zone="Asia/Jerusalem", standard_hours=STANDARD_HOURS)


@pytest.fixture
def engine(engine_config):
    from payroll.services.factory import build_payroll_engine

    return build_payroll_engine(engine_config)


@pytest.fixture
def breakdown_service(engine):
    from payroll.services.breakdown_service import MonthlyBreakdownService

    return MonthlyBreakdownService(engine)
