"""
Wiring of the pay breakdown engine.

Every call to build_payroll_engine() returns a fresh bundle of stateless
calculators configured from PayrollEngineConfig. There is no module-level
engine instance: callers own the bundle and the running breakdown values.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence, Tuple

from django.conf import settings

from .accumulators import MonthPayMapReducer, SegmentReducer, WorkPayMapReducer
from .builders import DayPayMapBuilder, ShiftPayMapBuilder
from .calendar_classifier import (
    PAID_HOLIDAYS,
    PARTIAL_START_EVENTS,
    CalendarDayClassifier,
    WorkDaysForMonthBuilder,
)
from .enums import AllocationMode
from .local_time import LocalTimeService
from .meal_allowance import MealAllowanceAccumulator, MealAllowanceResolver
from .per_diem import PerDiemDayCalculator, PerDiemMonthAccumulator, PerDiemShiftCalculator
from .premiums import ExtraHoursCalculator, SpecialHoursCalculator
from .rate_timeline import (
    DEFAULT_MEAL_ALLOWANCE_TIMELINE,
    DEFAULT_PER_DIEM_TIMELINE,
    RateTimelineResolver,
    meal_allowance_rate_resolver,
    per_diem_rate_resolver,
)
from .regular_hours import DEFAULT_MID_TIER_THRESHOLD, RegularHoursAllocator
from .shift_segments import ShiftSegmentResolver

logger = logging.getLogger(__name__)

DEFAULT_STANDARD_HOURS = Decimal("6.67")


@dataclass(frozen=True)
class PayrollEngineConfig:
    """Engine configuration, normally read from settings.PAYROLL_ENGINE"""

    time_zone: Optional[str] = None
    standard_hours: Decimal = DEFAULT_STANDARD_HOURS
    mid_tier_threshold: Decimal = DEFAULT_MID_TIER_THRESHOLD
    allocation_mode: AllocationMode = AllocationMode.BY_DAY
    per_diem_timeline: Sequence[Mapping[str, Any]] = DEFAULT_PER_DIEM_TIMELINE
    meal_allowance_timeline: Sequence[Mapping[str, Any]] = DEFAULT_MEAL_ALLOWANCE_TIMELINE
    paid_holidays: Tuple[str, ...] = PAID_HOLIDAYS
    partial_start_events: Tuple[str, ...] = PARTIAL_START_EVENTS

    @classmethod
    def from_settings(cls, **overrides) -> "PayrollEngineConfig":
        """
        Build the config from Django settings.

        Missing keys fall back to the defaults; keyword overrides win over
        settings (used for per-request standard hours).
        """
        engine = getattr(settings, "PAYROLL_ENGINE", {}) or {}
        values = {
            "time_zone": getattr(settings, "TIME_ZONE", None),
            "standard_hours": Decimal(
                str(engine.get("STANDARD_HOURS", DEFAULT_STANDARD_HOURS))
            ),
            "mid_tier_threshold": Decimal(
                str(engine.get("MID_TIER_THRESHOLD", DEFAULT_MID_TIER_THRESHOLD))
            ),
            "allocation_mode": AllocationMode.from_string(
                engine.get("ALLOCATION_MODE", AllocationMode.BY_DAY.value)
            ),
            "per_diem_timeline": tuple(
                engine.get("PER_DIEM_TIMELINE", DEFAULT_PER_DIEM_TIMELINE)
            ),
            "meal_allowance_timeline": tuple(
                engine.get("MEAL_ALLOWANCE_TIMELINE", DEFAULT_MEAL_ALLOWANCE_TIMELINE)
            ),
            "paid_holidays": tuple(engine.get("PAID_HOLIDAYS", PAID_HOLIDAYS)),
            "partial_start_events": tuple(
                engine.get("PARTIAL_START_EVENTS", PARTIAL_START_EVENTS)
            ),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass(frozen=True)
class PayrollEngine:
    """Bundle of the engine's collaborators"""

    config: PayrollEngineConfig
    local_time: LocalTimeService
    classifier: CalendarDayClassifier
    work_days_builder: WorkDaysForMonthBuilder
    segment_resolver: ShiftSegmentResolver
    allocator: RegularHoursAllocator
    extra_calculator: ExtraHoursCalculator
    special_calculator: SpecialHoursCalculator
    per_diem_shift_calculator: PerDiemShiftCalculator
    per_diem_day_calculator: PerDiemDayCalculator
    meal_allowance_resolver: MealAllowanceResolver
    per_diem_rates: RateTimelineResolver
    meal_allowance_rates: RateTimelineResolver
    shift_builder: ShiftPayMapBuilder
    day_builder: DayPayMapBuilder
    month_reducer: MonthPayMapReducer = field(default_factory=MonthPayMapReducer)


def build_payroll_engine(config: Optional[PayrollEngineConfig] = None) -> PayrollEngine:
    """
    Create a fully wired engine.

    Args:
        config: Engine configuration, read from settings when omitted

    Returns:
        PayrollEngine: New engine bundle
    """
    if config is None:
        config = PayrollEngineConfig.from_settings()

    local_time = LocalTimeService(config.time_zone)
    classifier = CalendarDayClassifier(
        paid_holidays=config.paid_holidays,
        partial_start_events=config.partial_start_events,
        local_time=local_time,
    )
    segment_resolver = ShiftSegmentResolver(local_time)
    allocator = RegularHoursAllocator(config.mid_tier_threshold)
    extra_calculator = ExtraHoursCalculator()
    special_calculator = SpecialHoursCalculator()
    per_diem_shift_calculator = PerDiemShiftCalculator()
    per_diem_day_calculator = PerDiemDayCalculator()
    meal_allowance_resolver = MealAllowanceResolver()
    per_diem_rates = per_diem_rate_resolver(config.per_diem_timeline)
    meal_allowance_rates = meal_allowance_rate_resolver(config.meal_allowance_timeline)

    work_reducer = WorkPayMapReducer(
        extra=extra_calculator, special=special_calculator
    )
    fixed_reducer = SegmentReducer()

    shift_builder = ShiftPayMapBuilder(
        segment_resolver=segment_resolver,
        allocator=allocator,
        extra_calculator=extra_calculator,
        special_calculator=special_calculator,
        per_diem_shift_calculator=per_diem_shift_calculator,
        local_time=local_time,
    )
    day_builder = DayPayMapBuilder(
        shift_builder=shift_builder,
        allocator=allocator,
        per_diem_calculator=per_diem_day_calculator,
        meal_allowance_resolver=meal_allowance_resolver,
        per_diem_rates=per_diem_rates,
        meal_allowance_rates=meal_allowance_rates,
        work_reducer=work_reducer,
        fixed_reducer=fixed_reducer,
        allocation_mode=config.allocation_mode,
    )
    month_reducer = MonthPayMapReducer(
        work=work_reducer,
        fixed=fixed_reducer,
        per_diem=PerDiemMonthAccumulator(),
        meal_allowance=MealAllowanceAccumulator(),
    )

    logger.debug(
        "Payroll engine built",
        extra={
            "time_zone": local_time.tz_name,
            "standard_hours": str(config.standard_hours),
            "mid_tier_threshold": str(config.mid_tier_threshold),
            "allocation_mode": str(config.allocation_mode),
            "per_diem_entries": len(per_diem_rates),
            "meal_allowance_entries": len(meal_allowance_rates),
        },
    )

    return PayrollEngine(
        config=config,
        local_time=local_time,
        classifier=classifier,
        work_days_builder=WorkDaysForMonthBuilder(classifier),
        segment_resolver=segment_resolver,
        allocator=allocator,
        extra_calculator=extra_calculator,
        special_calculator=special_calculator,
        per_diem_shift_calculator=per_diem_shift_calculator,
        per_diem_day_calculator=per_diem_day_calculator,
        meal_allowance_resolver=meal_allowance_resolver,
        per_diem_rates=per_diem_rates,
        meal_allowance_rates=meal_allowance_rates,
        shift_builder=shift_builder,
        day_builder=day_builder,
        month_reducer=month_reducer,
    )
