"""
Combine/uncombine reducers for breakdown values.

Every reducer exposes the same triple:

    create_empty()    - zero hours/points/amounts, category percents set
    accumulate(a, b)  - field-wise sum, percents taken from a
    subtract(a, b)    - field-wise difference clamped at zero per field

subtract is not an exact inverse of accumulate: a field that would go
negative stays at zero, which can hide a day removed twice. Callers that need
exactness must keep their own bookkeeping of what was accumulated.
"""

import logging
from dataclasses import fields
from decimal import Decimal
from typing import Generic, Optional, Type, TypeVar

from .contracts import (
    SHIFT_PERCENT,
    ZERO,
    DayPayMap,
    ExtraBreakdown,
    MonthPayMap,
    RegularBreakdown,
    Segment,
    SpecialBreakdown,
    WorkPayMap,
)
from .meal_allowance import MealAllowanceAccumulator
from .per_diem import PerDiemMonthAccumulator

logger = logging.getLogger(__name__)

B = TypeVar("B")


def clamp_at_zero(value: Decimal) -> Decimal:
    return value if value > ZERO else ZERO


def add_segment(base: Segment, add: Segment) -> Segment:
    return Segment(percent=base.percent, hours=base.hours + add.hours)


def subtract_segment(base: Segment, sub: Segment) -> Segment:
    return Segment(percent=base.percent, hours=clamp_at_zero(base.hours - sub.hours))


class SegmentReducer:
    """Reducer of a single fixed-percent field (sick, vacation, Sabbath 100%)"""

    def __init__(self, percent: Decimal = SHIFT_PERCENT["hours100"]):
        self.percent = percent

    def create(self, hours: Decimal = ZERO) -> Segment:
        return Segment(percent=self.percent, hours=clamp_at_zero(Decimal(hours)))

    def create_empty(self) -> Segment:
        return self.create(ZERO)

    def accumulate(self, base: Segment, add: Segment) -> Segment:
        return add_segment(base, add)

    def subtract(self, base: Segment, sub: Segment) -> Segment:
        return subtract_segment(base, sub)


class BreakdownReducer(Generic[B]):
    """Reducer of a dataclass whose fields are all Segments"""

    breakdown_class: Type[B]

    def create_empty(self) -> B:
        return self.breakdown_class()

    def accumulate(self, base: B, add: B) -> B:
        return self.breakdown_class(
            **{
                f.name: add_segment(getattr(base, f.name), getattr(add, f.name))
                for f in fields(self.breakdown_class)
            }
        )

    def subtract(self, base: B, sub: B) -> B:
        return self.breakdown_class(
            **{
                f.name: subtract_segment(getattr(base, f.name), getattr(sub, f.name))
                for f in fields(self.breakdown_class)
            }
        )


class RegularBreakdownReducer(BreakdownReducer[RegularBreakdown]):
    breakdown_class = RegularBreakdown


class ExtraBreakdownReducer(BreakdownReducer[ExtraBreakdown]):
    breakdown_class = ExtraBreakdown


class SpecialBreakdownReducer(BreakdownReducer[SpecialBreakdown]):
    breakdown_class = SpecialBreakdown


class WorkPayMapReducer:
    """Reducer of the regular/extra/special block shared by shift, day and month"""

    def __init__(
        self,
        regular: Optional[RegularBreakdownReducer] = None,
        extra: Optional[ExtraBreakdownReducer] = None,
        special: Optional[SpecialBreakdownReducer] = None,
    ):
        self.regular = regular or RegularBreakdownReducer()
        self.extra = extra or ExtraBreakdownReducer()
        self.special = special or SpecialBreakdownReducer()

    def create_empty(self) -> WorkPayMap:
        return WorkPayMap(
            regular=self.regular.create_empty(),
            extra=self.extra.create_empty(),
            special=self.special.create_empty(),
            total_hours=ZERO,
        )

    def accumulate(self, base: WorkPayMap, add: WorkPayMap) -> WorkPayMap:
        return WorkPayMap(
            regular=self.regular.accumulate(base.regular, add.regular),
            extra=self.extra.accumulate(base.extra, add.extra),
            special=self.special.accumulate(base.special, add.special),
            total_hours=base.total_hours + add.total_hours,
        )

    def subtract(self, base: WorkPayMap, sub: WorkPayMap) -> WorkPayMap:
        return WorkPayMap(
            regular=self.regular.subtract(base.regular, sub.regular),
            extra=self.extra.subtract(base.extra, sub.extra),
            special=self.special.subtract(base.special, sub.special),
            total_hours=clamp_at_zero(base.total_hours - sub.total_hours),
        )


class MonthPayMapReducer:
    """
    Month total folded from day pay maps.

    A month value is only ever built by accumulating days into
    create_empty(); editing a day is subtract(old) followed by
    accumulate(new), removing it is a single subtract.
    """

    def __init__(
        self,
        work: Optional[WorkPayMapReducer] = None,
        fixed: Optional[SegmentReducer] = None,
        per_diem: Optional[PerDiemMonthAccumulator] = None,
        meal_allowance: Optional[MealAllowanceAccumulator] = None,
    ):
        self.work = work or WorkPayMapReducer()
        self.fixed = fixed or SegmentReducer()
        self.per_diem = per_diem or PerDiemMonthAccumulator()
        self.meal_allowance = meal_allowance or MealAllowanceAccumulator()

    def create_empty(self) -> MonthPayMap:
        work = self.work.create_empty()
        return MonthPayMap(
            regular=work.regular,
            extra=work.extra,
            special=work.special,
            hours100_sick=self.fixed.create_empty(),
            hours100_vacation=self.fixed.create_empty(),
            extra100_shabbat=self.fixed.create_empty(),
            per_diem=self.per_diem.create_empty(),
            meal_allowance=self.meal_allowance.create_empty(),
            total_hours=ZERO,
        )

    @staticmethod
    def _work_map(month: MonthPayMap) -> WorkPayMap:
        return WorkPayMap(
            regular=month.regular,
            extra=month.extra,
            special=month.special,
            total_hours=month.total_hours,
        )

    def accumulate(self, month: MonthPayMap, day: DayPayMap) -> MonthPayMap:
        work = self.work.accumulate(self._work_map(month), day.work_map)
        return MonthPayMap(
            regular=work.regular,
            extra=work.extra,
            special=work.special,
            hours100_sick=self.fixed.accumulate(month.hours100_sick, day.hours100_sick),
            hours100_vacation=self.fixed.accumulate(
                month.hours100_vacation, day.hours100_vacation
            ),
            extra100_shabbat=self.fixed.accumulate(
                month.extra100_shabbat, day.extra100_shabbat
            ),
            per_diem=self.per_diem.accumulate(month.per_diem, day.per_diem.diem_info),
            meal_allowance=self.meal_allowance.accumulate(
                month.meal_allowance, day.meal_allowance
            ),
            total_hours=month.total_hours + day.total_hours,
        )

    def subtract(self, month: MonthPayMap, day: DayPayMap) -> MonthPayMap:
        if day.total_hours > month.total_hours:
            logger.debug(
                "Day total exceeds month total, clamping",
                extra={
                    "date": str(day.meta.date),
                    "day_total": str(day.total_hours),
                    "month_total": str(month.total_hours),
                },
            )

        work = self.work.subtract(self._work_map(month), day.work_map)
        return MonthPayMap(
            regular=work.regular,
            extra=work.extra,
            special=work.special,
            hours100_sick=self.fixed.subtract(month.hours100_sick, day.hours100_sick),
            hours100_vacation=self.fixed.subtract(
                month.hours100_vacation, day.hours100_vacation
            ),
            extra100_shabbat=self.fixed.subtract(
                month.extra100_shabbat, day.extra100_shabbat
            ),
            per_diem=self.per_diem.subtract(month.per_diem, day.per_diem.diem_info),
            meal_allowance=self.meal_allowance.subtract(
                month.meal_allowance, day.meal_allowance
            ),
            total_hours=clamp_at_zero(month.total_hours - day.total_hours),
        )
