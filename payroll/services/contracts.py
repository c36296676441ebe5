"""
Data contracts for pay breakdown calculations.

This module defines the value objects passed between the segment resolver,
the calculators and the accumulators. All of them are immutable: a
breakdown is combined into a new value, never mutated in place.

Hours and amounts are Decimal, quantized to two places.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional, Tuple

from .enums import PerDiemTier, SegmentKey, WorkDayStatus, WorkDayType

ZERO = Decimal("0")
HOURS_QUANTUM = Decimal("0.01")
AMOUNT_QUANTUM = Decimal("0.01")

MINUTES_PER_HOUR = 60
FULL_DAY_MINUTES = 1440

# Fixed percent of every breakdown field
SHIFT_PERCENT: Dict[str, Decimal] = {
    "hours20": Decimal("0.2"),
    "hours50": Decimal("0.5"),
    "hours100": Decimal("1.0"),
    "hours125": Decimal("1.25"),
    "hours150": Decimal("1.5"),
    "hours200": Decimal("2.0"),
}


def minutes_to_hours(minutes: int) -> Decimal:
    """Convert a minute count to hours, quantized to HOURS_QUANTUM."""
    return (Decimal(minutes) / MINUTES_PER_HOUR).quantize(
        HOURS_QUANTUM, rounding=ROUND_HALF_UP
    )


def quantize_amount(value: Decimal) -> Decimal:
    return Decimal(value).quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Point:
    """Interval in minutes from a day's local midnight; end may exceed 1440"""

    start: int
    end: int

    @property
    def minutes(self) -> int:
        return max(self.end - self.start, 0)

    @property
    def is_empty(self) -> bool:
        return self.start >= self.end

    def shifted(self, minutes: int) -> "Point":
        return Point(self.start + minutes, self.end + minutes)

    def clip(self, other: "Point") -> "Point":
        return Point(max(self.start, other.start), min(self.end, other.end))

    def overlaps(self, other: "Point") -> bool:
        return not self.clip(other).is_empty


@dataclass(frozen=True)
class LabeledSegmentRange:
    """Projection of a shift onto one boundary table entry"""

    point: Point
    percent: Decimal
    key: SegmentKey

    @property
    def hours(self) -> Decimal:
        return minutes_to_hours(self.point.minutes)

    def clipped(self, target: Point) -> "LabeledSegmentRange":
        return LabeledSegmentRange(self.point.clip(target), self.percent, self.key)

    def shifted(self, minutes: int) -> "LabeledSegmentRange":
        return LabeledSegmentRange(self.point.shifted(minutes), self.percent, self.key)


@dataclass(frozen=True)
class WorkDayMeta:
    date: date
    type_day: WorkDayType = WorkDayType.REGULAR
    cross_day_continuation: bool = False


@dataclass(frozen=True)
class Shift:
    id: str
    start: datetime
    end: datetime
    is_field_duty_shift: bool = False


@dataclass(frozen=True)
class Segment:
    """One breakdown field: fixed percent, mutable-by-combination hours"""

    percent: Decimal
    hours: Decimal = ZERO


@dataclass(frozen=True)
class RegularBreakdown:
    hours100: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours100"]))
    hours125: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours125"]))
    hours150: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours150"]))

    @property
    def total_hours(self) -> Decimal:
        return self.hours100.hours + self.hours125.hours + self.hours150.hours


@dataclass(frozen=True)
class ExtraBreakdown:
    hours20: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours20"]))
    hours50: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours50"]))


@dataclass(frozen=True)
class SpecialBreakdown:
    shabbat150: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours150"]))
    shabbat200: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours200"]))

    @property
    def total_hours(self) -> Decimal:
        return self.shabbat150.hours + self.shabbat200.hours


@dataclass(frozen=True)
class PerDiemShiftInfo:
    is_field_duty_shift: bool = False
    minutes: int = 0

    @property
    def hours(self) -> Decimal:
        return minutes_to_hours(self.minutes)


@dataclass(frozen=True)
class PerDiemInfo:
    tier: Optional[PerDiemTier] = None
    points: int = 0
    amount: Decimal = ZERO


@dataclass(frozen=True)
class DailyPerDiemInfo:
    is_field_duty_day: bool = False
    diem_info: PerDiemInfo = field(default_factory=PerDiemInfo)


@dataclass(frozen=True)
class MealAllowanceEntry:
    points: int = 0
    amount: Decimal = ZERO


@dataclass(frozen=True)
class MealAllowance:
    large: MealAllowanceEntry = field(default_factory=MealAllowanceEntry)
    small: MealAllowanceEntry = field(default_factory=MealAllowanceEntry)


@dataclass(frozen=True)
class MealAllowanceDayInfo:
    total_hours: Decimal = ZERO
    has_morning: bool = False
    has_night: bool = False
    is_field_duty_day: bool = False


@dataclass(frozen=True)
class MealAllowanceRates:
    small: Decimal = ZERO
    large: Decimal = ZERO


@dataclass(frozen=True)
class WorkPayMap:
    """Fields shared by shift, day and month level results"""

    regular: RegularBreakdown = field(default_factory=RegularBreakdown)
    extra: ExtraBreakdown = field(default_factory=ExtraBreakdown)
    special: SpecialBreakdown = field(default_factory=SpecialBreakdown)
    total_hours: Decimal = ZERO


@dataclass(frozen=True)
class ShiftPayMap:
    shift_id: str
    point: Point
    segments: Tuple[LabeledSegmentRange, ...]
    regular: RegularBreakdown
    extra: ExtraBreakdown
    special: SpecialBreakdown
    total_hours: Decimal
    per_diem_shift: PerDiemShiftInfo
    # Unrounded durations; day totals are summed from these
    total_minutes: int = 0
    regular_minutes: int = 0


@dataclass(frozen=True)
class DayPayMap:
    meta: WorkDayMeta
    status: WorkDayStatus
    work_map: WorkPayMap
    hours100_sick: Segment
    hours100_vacation: Segment
    extra100_shabbat: Segment
    per_diem: DailyPerDiemInfo
    meal_allowance: MealAllowance
    total_hours: Decimal
    shifts: Tuple[ShiftPayMap, ...] = ()


@dataclass(frozen=True)
class MonthPayMap:
    regular: RegularBreakdown = field(default_factory=RegularBreakdown)
    extra: ExtraBreakdown = field(default_factory=ExtraBreakdown)
    special: SpecialBreakdown = field(default_factory=SpecialBreakdown)
    hours100_sick: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours100"]))
    hours100_vacation: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours100"]))
    extra100_shabbat: Segment = field(default_factory=lambda: Segment(SHIFT_PERCENT["hours100"]))
    per_diem: PerDiemInfo = field(default_factory=PerDiemInfo)
    meal_allowance: MealAllowance = field(default_factory=MealAllowance)
    total_hours: Decimal = ZERO


@dataclass(frozen=True)
class RateTimelineEntry:
    year: int
    month: int
    rates: object

    @property
    def period(self) -> Tuple[int, int]:
        return (self.year, self.month)
