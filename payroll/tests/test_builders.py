"""
Tests for shift and day pay map builders.
"""

from decimal import Decimal

import pytest

from payroll.services.enums import AllocationMode, PerDiemTier, WorkDayStatus, WorkDayType
from payroll.services.factory import PayrollEngineConfig, build_payroll_engine
from payroll.tests.conftest import (
    FRIDAY_SUMMER,
    REGULAR_DAY,
    SATURDAY_SUMMER,
    hours,
    make_meta,
    make_shift,
)


def tiers(regular):
    return (regular.hours100.hours, regular.hours125.hours, regular.hours150.hours)


class TestShiftPayMapBuilder:
    def test_day_shift(self, engine):
        shift_map = engine.shift_builder.build(
            make_shift(REGULAR_DAY, "08:00", "16:00", shift_id="morning"),
            make_meta(REGULAR_DAY),
            hours("9"),
        )
        assert shift_map.shift_id == "morning"
        assert shift_map.total_hours == Decimal("8.00")
        assert tiers(shift_map.regular) == (hours("8"), hours("0"), hours("0"))
        assert shift_map.extra.hours20.hours == Decimal("2.00")
        assert shift_map.extra.hours50.hours == Decimal("0")
        assert shift_map.special.total_hours == Decimal("0")
        assert shift_map.per_diem_shift.hours == Decimal("8.00")
        assert shift_map.per_diem_shift.is_field_duty_shift is False

    def test_special_hours_are_not_regular(self, engine):
        meta = make_meta(FRIDAY_SUMMER, WorkDayType.SPECIAL_PARTIAL_START, cross=True)
        shift_map = engine.shift_builder.build(
            make_shift(FRIDAY_SUMMER, "16:00", "20:00"), meta, hours("8")
        )
        assert shift_map.total_hours == Decimal("4.00")
        assert shift_map.special.shabbat150.hours == Decimal("2.00")
        assert shift_map.regular.total_hours == Decimal("2.00")
        assert shift_map.extra.hours20.hours == Decimal("2.00")
        assert shift_map.extra.hours50.hours == Decimal("1.00")


class TestDayPayMapBuilder:
    def test_regular_day_end_to_end(self, engine):
        day = engine.day_builder.build(
            make_meta(REGULAR_DAY), [make_shift(REGULAR_DAY, "08:00", "16:00")], hours("9")
        )
        assert day.status is WorkDayStatus.NORMAL
        assert tiers(day.work_map.regular) == (hours("8"), hours("0"), hours("0"))
        assert day.work_map.extra.hours20.hours == Decimal("2.00")
        assert day.work_map.extra.hours50.hours == Decimal("0")
        assert day.extra100_shabbat.hours == Decimal("0")
        assert day.total_hours == Decimal("8.00")
        assert day.per_diem.is_field_duty_day is False
        assert day.meal_allowance.large.points == 0
        assert day.meal_allowance.small.points == 0

    def test_day_tiers_the_sum_of_shifts(self, engine):
        shifts = [
            make_shift(REGULAR_DAY, "13:00", "19:00", shift_id="b"),
            make_shift(REGULAR_DAY, "08:00", "12:00", shift_id="a"),
        ]
        day = engine.day_builder.build(make_meta(REGULAR_DAY), shifts, hours("8"))
        assert [s.shift_id for s in day.shifts] == ["a", "b"]
        assert tiers(day.work_map.regular) == (hours("8"), hours("2"), hours("0"))
        assert day.work_map.extra.hours20.hours == Decimal("5.00")
        assert day.work_map.extra.hours50.hours == Decimal("2.00")
        assert day.total_hours == Decimal("10.00")
        # 10 hours without field duty: large meal, no small meal
        assert day.meal_allowance.large.points == 1
        assert day.meal_allowance.large.amount == Decimal("21.10")
        assert day.meal_allowance.small.points == 0

    def test_allocation_by_shift_matches_by_day(self, engine):
        by_shift = build_payroll_engine(
            PayrollEngineConfig(
                time_zone="Asia/Jerusalem", allocation_mode=AllocationMode.BY_SHIFT
            )
        )
        shifts = [
            make_shift(REGULAR_DAY, "06:00", "12:00", shift_id="a"),
            make_shift(REGULAR_DAY, "13:00", "20:00", shift_id="b"),
        ]
        meta = make_meta(REGULAR_DAY)
        assert (
            by_shift.day_builder.build(meta, shifts, hours("8")).work_map.regular
            == engine.day_builder.build(meta, shifts, hours("8")).work_map.regular
        )

    def test_sabbath_day(self, engine):
        meta = make_meta(SATURDAY_SUMMER, WorkDayType.SPECIAL_FULL)
        day = engine.day_builder.build(
            meta, [make_shift(SATURDAY_SUMMER, "08:00", "16:00")], hours("8")
        )
        assert day.work_map.special.shabbat150.hours == Decimal("8.00")
        assert day.work_map.special.shabbat200.hours == Decimal("0")
        assert day.work_map.regular.total_hours == Decimal("0")
        assert day.extra100_shabbat.hours == Decimal("8.00")
        assert day.work_map.extra.hours20.hours == Decimal("0")

    def test_sabbath_exit_into_regular_morning_is_untiered(self, engine):
        meta = make_meta(SATURDAY_SUMMER, WorkDayType.SPECIAL_FULL)
        day = engine.day_builder.build(
            meta, [make_shift(SATURDAY_SUMMER, "20:00", "08:00")], hours("8")
        )
        assert day.work_map.special.shabbat150.hours == Decimal("2.00")
        assert day.work_map.special.shabbat200.hours == Decimal("8.00")
        assert tiers(day.work_map.regular) == (hours("0"), hours("0"), hours("2.00"))
        assert day.total_hours == Decimal("12.00")

    def test_night_shift_gets_small_meal(self, engine):
        day = engine.day_builder.build(
            make_meta(REGULAR_DAY), [make_shift(REGULAR_DAY, "22:00", "06:00")], hours("8")
        )
        assert day.work_map.extra.hours50.hours == Decimal("8.00")
        assert day.meal_allowance.small.points == 1
        assert day.meal_allowance.small.amount == Decimal("14.50")
        assert day.meal_allowance.large.points == 0

    def test_field_duty_day(self, engine):
        day = engine.day_builder.build(
            make_meta(REGULAR_DAY),
            [make_shift(REGULAR_DAY, "07:00", "19:30", field_duty=True)],
            hours("8"),
        )
        assert day.per_diem.is_field_duty_day is True
        assert day.per_diem.diem_info.tier is PerDiemTier.C
        assert day.per_diem.diem_info.amount == Decimal("108.90")
        # morning component on a field-duty day: no large meal
        assert day.meal_allowance.large.points == 0

    def test_field_duty_minutes_reach_per_diem_tier(self, engine):
        shifts = [
            make_shift(REGULAR_DAY, "08:00", "09:20", shift_id="a", field_duty=True),
            make_shift(REGULAR_DAY, "10:00", "11:20", shift_id="b", field_duty=True),
            make_shift(REGULAR_DAY, "12:00", "13:20", shift_id="c", field_duty=True),
        ]
        day = engine.day_builder.build(make_meta(REGULAR_DAY), shifts, hours("8"))
        assert [s.total_hours for s in day.shifts] == [Decimal("1.33")] * 3
        assert day.total_hours == Decimal("4.00")
        assert day.per_diem.diem_info.tier is PerDiemTier.A
        assert day.per_diem.diem_info.points == 1
        assert day.per_diem.diem_info.amount == Decimal("36.30")

    def test_worked_minutes_reach_large_meal(self, engine):
        shifts = [
            make_shift(REGULAR_DAY, "08:00", "11:20", shift_id="a"),
            make_shift(REGULAR_DAY, "12:00", "15:20", shift_id="b"),
            make_shift(REGULAR_DAY, "16:00", "19:20", shift_id="c"),
        ]
        day = engine.day_builder.build(make_meta(REGULAR_DAY), shifts, hours("8"))
        assert day.total_hours == Decimal("10.00")
        assert tiers(day.work_map.regular) == (hours("8"), hours("2"), hours("0"))
        assert day.meal_allowance.large.points == 1
        assert day.meal_allowance.small.points == 0

    @pytest.mark.parametrize("mode", [AllocationMode.BY_DAY, AllocationMode.BY_SHIFT])
    def test_allocation_modes_agree_on_odd_minutes(self, mode):
        engine = build_payroll_engine(
            PayrollEngineConfig(time_zone="Asia/Jerusalem", allocation_mode=mode)
        )
        shifts = [
            make_shift(REGULAR_DAY, "08:00", "11:20", shift_id="a"),
            make_shift(REGULAR_DAY, "12:00", "15:20", shift_id="b"),
            make_shift(REGULAR_DAY, "16:00", "19:20", shift_id="c"),
        ]
        day = engine.day_builder.build(make_meta(REGULAR_DAY), shifts, hours("8"))
        assert tiers(day.work_map.regular) == (hours("8"), hours("2"), hours("0"))

    def test_sabbath_exit_with_odd_minutes(self, engine):
        meta = make_meta(SATURDAY_SUMMER, WorkDayType.SPECIAL_FULL)
        day = engine.day_builder.build(
            meta, [make_shift(SATURDAY_SUMMER, "21:50", "06:10")], hours("8")
        )
        # 10 min at 150%, 480 min at 200%, 10 min into the regular morning
        assert day.work_map.special.shabbat150.hours == Decimal("0.17")
        assert day.work_map.special.shabbat200.hours == Decimal("8.00")
        assert tiers(day.work_map.regular) == (hours("0"), hours("0"), hours("0.17"))
        assert tiers(day.shifts[0].regular) == (hours("0"), hours("0"), hours("0.17"))
        assert day.total_hours == Decimal("8.33")

    def test_no_shifts(self, engine):
        day = engine.day_builder.build(make_meta(REGULAR_DAY), [], hours("8"))
        assert day.total_hours == Decimal("0")
        assert day.shifts == ()
        assert day.work_map.regular.total_hours == Decimal("0")

    @pytest.mark.parametrize(
        "status,sick,vacation",
        [
            (WorkDayStatus.SICK, "6.67", "0"),
            (WorkDayStatus.VACATION, "0", "6.67"),
        ],
    )
    def test_absence_day(self, engine, status, sick, vacation):
        day = engine.day_builder.build(
            make_meta(REGULAR_DAY),
            [make_shift(REGULAR_DAY, "08:00", "16:00")],
            hours("6.67"),
            status,
        )
        assert day.status is status
        assert day.hours100_sick.hours == hours(sick)
        assert day.hours100_vacation.hours == hours(vacation)
        assert day.work_map.total_hours == Decimal("0")
        assert day.total_hours == Decimal("6.67")
        assert day.shifts == ()
        assert day.meal_allowance.large.points == 0
