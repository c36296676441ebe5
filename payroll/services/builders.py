"""
Shift and day pay map builders.

ShiftPayMapBuilder turns one shift into its segments and breakdowns.
DayPayMapBuilder folds the shift maps of a day, tiers the day's regular
hours and adds the status, Sabbath 100% supplement, per-diem and meal
allowance of the day.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from .accumulators import SegmentReducer, WorkPayMapReducer
from .contracts import (
    ZERO,
    DayPayMap,
    MealAllowance,
    MealAllowanceDayInfo,
    Shift,
    ShiftPayMap,
    WorkDayMeta,
    WorkPayMap,
    minutes_to_hours,
)
from .enums import AllocationMode, WorkDayStatus
from .local_time import LocalTimeService
from .meal_allowance import MealAllowanceResolver, day_flags
from .per_diem import PerDiemDayCalculator, PerDiemShiftCalculator
from .premiums import ExtraHoursCalculator, SpecialHoursCalculator
from .rate_timeline import (
    RateTimelineResolver,
    meal_allowance_rate_resolver,
    per_diem_rate_resolver,
)
from .regular_hours import RegularHoursAllocator
from .shift_segments import ShiftSegmentResolver

logger = logging.getLogger(__name__)


class ShiftPayMapBuilder:
    def __init__(
        self,
        segment_resolver: ShiftSegmentResolver,
        allocator: RegularHoursAllocator,
        extra_calculator: ExtraHoursCalculator,
        special_calculator: SpecialHoursCalculator,
        per_diem_shift_calculator: PerDiemShiftCalculator,
        local_time: LocalTimeService,
    ):
        self.segment_resolver = segment_resolver
        self.allocator = allocator
        self.extra_calculator = extra_calculator
        self.special_calculator = special_calculator
        self.per_diem_shift_calculator = per_diem_shift_calculator
        self.local_time = local_time

    def build(self, shift: Shift, meta: WorkDayMeta, standard_hours: Decimal) -> ShiftPayMap:
        point = self.local_time.shift_point(shift, meta.date)
        segments = self.segment_resolver.resolve(point, meta)

        extra = self.extra_calculator.calculate(segments)
        special = self.special_calculator.calculate(segments)

        # Sabbath/holiday hours are paid through the special breakdown only
        regular_minutes = max(
            point.minutes - self.special_calculator.special_minutes(segments), 0
        )
        regular = self.allocator.allocate_day(
            minutes_to_hours(regular_minutes), standard_hours, meta
        )

        return ShiftPayMap(
            shift_id=shift.id,
            point=point,
            segments=tuple(segments),
            regular=regular,
            extra=extra,
            special=special,
            total_hours=minutes_to_hours(point.minutes),
            per_diem_shift=self.per_diem_shift_calculator.calculate(
                point, shift.is_field_duty_shift
            ),
            total_minutes=point.minutes,
            regular_minutes=regular_minutes,
        )


class DayPayMapBuilder:
    """
    Build the DayPayMap of one calendar day.

    Sick and vacation days contribute standard_hours at 100% and nothing
    else. Normal days are built from their shifts, processed in start-time
    order.
    """

    def __init__(
        self,
        shift_builder: ShiftPayMapBuilder,
        allocator: RegularHoursAllocator,
        per_diem_calculator: PerDiemDayCalculator,
        meal_allowance_resolver: MealAllowanceResolver,
        per_diem_rates: Optional[RateTimelineResolver] = None,
        meal_allowance_rates: Optional[RateTimelineResolver] = None,
        work_reducer: Optional[WorkPayMapReducer] = None,
        fixed_reducer: Optional[SegmentReducer] = None,
        allocation_mode: AllocationMode = AllocationMode.BY_DAY,
    ):
        self.shift_builder = shift_builder
        self.allocator = allocator
        self.per_diem_calculator = per_diem_calculator
        self.meal_allowance_resolver = meal_allowance_resolver
        self.per_diem_rates = per_diem_rates or per_diem_rate_resolver()
        self.meal_allowance_rates = meal_allowance_rates or meal_allowance_rate_resolver()
        self.work_reducer = work_reducer or WorkPayMapReducer()
        self.fixed_reducer = fixed_reducer or SegmentReducer()
        self.allocation_mode = allocation_mode

    def build(
        self,
        meta: WorkDayMeta,
        shifts: Iterable[Shift],
        standard_hours: Decimal,
        status: WorkDayStatus = WorkDayStatus.NORMAL,
    ) -> DayPayMap:
        if status is not WorkDayStatus.NORMAL:
            return self._build_absence(meta, status, standard_hours)

        ordered = sorted(shifts, key=lambda shift: shift.start)
        shift_maps = [
            self.shift_builder.build(shift, meta, standard_hours) for shift in ordered
        ]

        day_segments = [
            segment for shift_map in shift_maps for segment in shift_map.segments
        ]
        work = WorkPayMap(
            regular=self._allocate(shift_maps, standard_hours, meta),
            extra=self.shift_builder.extra_calculator.calculate(day_segments),
            special=self.shift_builder.special_calculator.calculate(day_segments),
            total_hours=minutes_to_hours(
                sum(shift_map.total_minutes for shift_map in shift_maps)
            ),
        )

        year, month = meta.date.year, meta.date.month
        per_diem = self.per_diem_calculator.calculate(
            [shift_map.per_diem_shift for shift_map in shift_maps],
            rate=self.per_diem_rates.resolve(year, month),
        )

        has_morning, has_night = day_flags(shift_map.point for shift_map in shift_maps)
        meal_allowance = self.meal_allowance_resolver.resolve(
            MealAllowanceDayInfo(
                total_hours=work.total_hours,
                has_morning=has_morning,
                has_night=has_night,
                is_field_duty_day=per_diem.is_field_duty_day,
            ),
            self.meal_allowance_rates.resolve(year, month),
        )

        logger.debug(
            "Built day pay map",
            extra={
                "date": str(meta.date),
                "type_day": str(meta.type_day),
                "shifts": len(shift_maps),
                "total_hours": str(work.total_hours),
                "allocation_mode": str(self.allocation_mode),
            },
        )

        return DayPayMap(
            meta=meta,
            status=status,
            work_map=work,
            hours100_sick=self.fixed_reducer.create_empty(),
            hours100_vacation=self.fixed_reducer.create_empty(),
            extra100_shabbat=self.fixed_reducer.create(work.special.total_hours),
            per_diem=per_diem,
            meal_allowance=meal_allowance,
            total_hours=work.total_hours,
            shifts=tuple(shift_maps),
        )

    def _allocate(
        self, shift_maps: List[ShiftPayMap], standard_hours: Decimal, meta: WorkDayMeta
    ):
        running_minutes = 0
        hours_per_shift = []
        for shift_map in shift_maps:
            # Rounded running total, so the shift hours add up to the day hours
            before = minutes_to_hours(running_minutes)
            running_minutes += shift_map.regular_minutes
            hours_per_shift.append(minutes_to_hours(running_minutes) - before)

        if self.allocation_mode is AllocationMode.BY_SHIFT:
            return self.allocator.allocate_shifts(hours_per_shift, standard_hours, meta)
        return self.allocator.allocate_day(
            minutes_to_hours(running_minutes), standard_hours, meta
        )

    def _build_absence(
        self, meta: WorkDayMeta, status: WorkDayStatus, standard_hours: Decimal
    ) -> DayPayMap:
        hours = Decimal(standard_hours)
        return DayPayMap(
            meta=meta,
            status=status,
            work_map=self.work_reducer.create_empty(),
            hours100_sick=self.fixed_reducer.create(
                hours if status is WorkDayStatus.SICK else ZERO
            ),
            hours100_vacation=self.fixed_reducer.create(
                hours if status is WorkDayStatus.VACATION else ZERO
            ),
            extra100_shabbat=self.fixed_reducer.create_empty(),
            per_diem=self.per_diem_calculator.create_empty(),
            meal_allowance=MealAllowance(),
            total_hours=hours,
        )
