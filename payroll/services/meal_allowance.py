"""
Meal allowance rules.

Two independent boolean-threshold rules produce points/amounts per day:

    Small - one point when the day has a night component
    Large - one point for days of 10 hours and more, except a field-duty
            day with a morning component

A day receives a single meal allowance: when the large one is awarded the
small one is not.
"""

from decimal import Decimal
from typing import Iterable

from .contracts import (
    FULL_DAY_MINUTES,
    ZERO,
    MealAllowance,
    MealAllowanceDayInfo,
    MealAllowanceEntry,
    MealAllowanceRates,
    Point,
    quantize_amount,
)

LARGE_MEAL_MIN_HOURS = Decimal("10")

# Windows in minutes from the day's local midnight
MORNING_WINDOWS = (Point(6 * 60, 14 * 60), Point(6 * 60, 14 * 60).shifted(FULL_DAY_MINUTES))
NIGHT_WINDOWS = (Point(0, 6 * 60), Point(22 * 60, 30 * 60))


def _awarded(rate: Decimal) -> MealAllowanceEntry:
    return MealAllowanceEntry(points=1, amount=quantize_amount(rate))


def _none() -> MealAllowanceEntry:
    return MealAllowanceEntry(points=0, amount=ZERO)


def day_flags(points: Iterable[Point]):
    """Return (has_morning, has_night) for the shift points of a day."""
    points = [p for p in points if not p.is_empty]
    has_morning = any(p.overlaps(w) for p in points for w in MORNING_WINDOWS)
    has_night = any(p.overlaps(w) for p in points for w in NIGHT_WINDOWS)
    return has_morning, has_night


class SmallMealAllowanceCalculator:
    def calculate(self, day: MealAllowanceDayInfo, rate: Decimal) -> MealAllowanceEntry:
        if day.has_night:
            return _awarded(rate)
        return _none()


class LargeMealAllowanceCalculator:
    def calculate(self, day: MealAllowanceDayInfo, rate: Decimal) -> MealAllowanceEntry:
        if day.total_hours < LARGE_MEAL_MIN_HOURS:
            return _none()

        # A morning component on a field-duty day is covered by per-diem
        if day.has_morning and day.is_field_duty_day:
            return _none()

        return _awarded(rate)


class MealAllowanceResolver:
    """Combine the small and large rules into the day's allowance"""

    def __init__(self, small=None, large=None):
        self.small = small or SmallMealAllowanceCalculator()
        self.large = large or LargeMealAllowanceCalculator()

    def resolve(self, day: MealAllowanceDayInfo, rates: MealAllowanceRates) -> MealAllowance:
        large = self.large.calculate(day, rates.large)
        if large.points:
            return MealAllowance(large=large, small=_none())
        return MealAllowance(large=large, small=self.small.calculate(day, rates.small))


class MealAllowanceAccumulator:
    """Month-level reducer of meal allowances"""

    def create_empty(self) -> MealAllowance:
        return MealAllowance()

    @staticmethod
    def _add(base: MealAllowanceEntry, add: MealAllowanceEntry) -> MealAllowanceEntry:
        return MealAllowanceEntry(
            points=base.points + add.points, amount=base.amount + add.amount
        )

    @staticmethod
    def _sub(base: MealAllowanceEntry, sub: MealAllowanceEntry) -> MealAllowanceEntry:
        return MealAllowanceEntry(
            points=max(base.points - sub.points, 0),
            amount=max(base.amount - sub.amount, ZERO),
        )

    def accumulate(self, base: MealAllowance, add: MealAllowance) -> MealAllowance:
        return MealAllowance(
            large=self._add(base.large, add.large),
            small=self._add(base.small, add.small),
        )

    def subtract(self, base: MealAllowance, sub: MealAllowance) -> MealAllowance:
        return MealAllowance(
            large=self._sub(base.large, sub.large),
            small=self._sub(base.small, sub.small),
        )
