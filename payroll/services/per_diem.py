"""
Field-duty per-diem (daily allowance) calculation.

Per-diem is tiered by the day's field-duty hours:

    [0, 4)   no tier, 0 points
    [4, 8)   tier A, 1 point
    [8, 12)  tier B, 2 points
    [12, .)  tier C, 3 points

amount = points x rate, with the rate resolved from the per-diem timeline.
Only shifts flagged as field duty count toward the tier. Their minutes are
summed before the conversion to hours.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from .contracts import (
    ZERO,
    DailyPerDiemInfo,
    PerDiemInfo,
    PerDiemShiftInfo,
    Point,
    minutes_to_hours,
    quantize_amount,
)
from .enums import PerDiemTier

logger = logging.getLogger(__name__)

# Lower bound (hours) of each tier, highest first
PER_DIEM_TIER_THRESHOLDS: Tuple[Tuple[Decimal, PerDiemTier], ...] = (
    (Decimal("12"), PerDiemTier.C),
    (Decimal("8"), PerDiemTier.B),
    (Decimal("4"), PerDiemTier.A),
)


def resolve_tier(field_duty_hours: Decimal) -> Optional[PerDiemTier]:
    for threshold, tier in PER_DIEM_TIER_THRESHOLDS:
        if field_duty_hours >= threshold:
            return tier
    return None


class PerDiemShiftCalculator:
    """Per-diem contribution of a single shift"""

    def create_empty(self) -> PerDiemShiftInfo:
        return PerDiemShiftInfo()

    def calculate(self, point: Point, is_field_duty_shift: bool) -> PerDiemShiftInfo:
        return PerDiemShiftInfo(
            is_field_duty_shift=bool(is_field_duty_shift),
            minutes=point.minutes,
        )


class PerDiemDayCalculator:
    """Tier the field-duty hours of one day"""

    def create_empty(self) -> DailyPerDiemInfo:
        return DailyPerDiemInfo()

    def calculate(
        self, shifts: Iterable[PerDiemShiftInfo], rate: Decimal = ZERO
    ) -> DailyPerDiemInfo:
        shifts = list(shifts)
        is_field_duty_day = any(shift.is_field_duty_shift for shift in shifts)
        if not is_field_duty_day:
            return DailyPerDiemInfo(is_field_duty_day=False, diem_info=PerDiemInfo())

        field_duty_hours = minutes_to_hours(
            sum(shift.minutes for shift in shifts if shift.is_field_duty_shift)
        )
        tier = resolve_tier(field_duty_hours)
        points = tier.points if tier else 0

        logger.debug(
            "Per-diem tier resolved",
            extra={
                "field_duty_hours": str(field_duty_hours),
                "tier": str(tier) if tier else None,
                "points": points,
            },
        )

        return DailyPerDiemInfo(
            is_field_duty_day=True,
            diem_info=PerDiemInfo(
                tier=tier,
                points=points,
                amount=quantize_amount(Decimal(points) * Decimal(rate)),
            ),
        )


class PerDiemMonthAccumulator:
    """
    Month-level per-diem reducer.

    Tier is a day-only concept: every accumulate/subtract result has tier None.
    """

    def create_empty(self) -> PerDiemInfo:
        return PerDiemInfo()

    def accumulate(self, base: PerDiemInfo, add: PerDiemInfo) -> PerDiemInfo:
        return PerDiemInfo(
            tier=None,
            points=base.points + add.points,
            amount=base.amount + add.amount,
        )

    def subtract(self, base: PerDiemInfo, sub: PerDiemInfo) -> PerDiemInfo:
        return PerDiemInfo(
            tier=None,
            points=max(base.points - sub.points, 0),
            amount=max(base.amount - sub.amount, ZERO),
        )
