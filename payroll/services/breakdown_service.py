"""
Monthly pay breakdown service.

Entry point used by the API and the management command. Classifies the days
of a month, builds a DayPayMap per worked/absent day and folds them into the
month total. Edits are applied incrementally: a replaced day is subtracted
and its new map accumulated, so the rest of the month is never recomputed.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from core.logging_utils import err_tag

from .calendar_classifier import EventMap
from .contracts import (
    ZERO,
    DayPayMap,
    MonthPayMap,
    Segment,
    Shift,
    WorkDayMeta,
    quantize_amount,
)
from .enums import WorkDayStatus
from .factory import PayrollEngine, build_payroll_engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkDayInput:
    """Shifts and status entered for one calendar day"""

    date: date
    shifts: Tuple[Shift, ...] = ()
    status: WorkDayStatus = WorkDayStatus.NORMAL


@dataclass(frozen=True)
class MonthBreakdown:
    year: int
    month: int
    work_days: Tuple[WorkDayMeta, ...]
    days: Dict[date, DayPayMap] = field(default_factory=dict)
    total: MonthPayMap = field(default_factory=MonthPayMap)
    standard_hours: Decimal = ZERO

    def meta_for(self, day: date) -> Optional[WorkDayMeta]:
        for meta in self.work_days:
            if meta.date == day:
                return meta
        return None


@dataclass(frozen=True)
class SalaryRow:
    key: str
    quantity: Decimal
    rate: Decimal
    total: Decimal


@dataclass(frozen=True)
class SalarySummary:
    base_rate: Decimal
    base_rows: Tuple[SalaryRow, ...]
    extra_rows: Tuple[SalaryRow, ...]
    allowance_rows: Tuple[SalaryRow, ...]
    total: Decimal


class MonthlyBreakdownService:
    """
    Compute and edit the pay breakdown of one worker's month.

    The service holds no month state: every operation takes the current
    MonthBreakdown and returns a new one.
    """

    def __init__(self, engine: Optional[PayrollEngine] = None):
        self.engine = engine or build_payroll_engine()

    @property
    def standard_hours(self) -> Decimal:
        return self.engine.config.standard_hours

    def build_work_days(
        self, year: int, month: int, event_map: Optional[EventMap] = None
    ) -> List[WorkDayMeta]:
        return self.engine.work_days_builder.build(year, month, event_map or {})

    def calculate_day(
        self,
        meta: WorkDayMeta,
        shifts: Iterable[Shift] = (),
        status: WorkDayStatus = WorkDayStatus.NORMAL,
        standard_hours: Optional[Decimal] = None,
    ) -> DayPayMap:
        if standard_hours is None:
            standard_hours = self.standard_hours
        return self.engine.day_builder.build(meta, shifts, standard_hours, status)

    def calculate_month(
        self,
        year: int,
        month: int,
        days: Iterable[WorkDayInput],
        event_map: Optional[EventMap] = None,
        standard_hours: Optional[Decimal] = None,
    ) -> MonthBreakdown:
        """
        Calculate the full month.

        Args:
            year: Calendar year
            month: Calendar month (1-12)
            days: Entered days; days outside the month are ignored
            event_map: ISO date -> holiday/event titles
            standard_hours: Daily 100% threshold, engine default when omitted

        Returns:
            MonthBreakdown: Per-day maps and the folded month total
        """
        if standard_hours is None:
            standard_hours = self.standard_hours

        work_days = self.build_work_days(year, month, event_map)
        breakdown = MonthBreakdown(
            year=year,
            month=month,
            work_days=tuple(work_days),
            days={},
            total=self.engine.month_reducer.create_empty(),
            standard_hours=Decimal(standard_hours),
        )

        for day_input in sorted(days, key=lambda d: d.date):
            meta = breakdown.meta_for(day_input.date)
            if meta is None:
                logger.warning(
                    "Day outside requested month ignored",
                    extra={"date": str(day_input.date), "year": year, "month": month},
                )
                continue
            day_map = self.calculate_day(
                meta, day_input.shifts, day_input.status, standard_hours
            )
            breakdown = self.add_day(breakdown, day_map)

        logger.info(
            "Monthly breakdown calculated",
            extra={
                "year": year,
                "month": month,
                "days": len(breakdown.days),
                "total_hours": str(breakdown.total.total_hours),
            },
        )
        return breakdown

    def add_day(self, breakdown: MonthBreakdown, day_map: DayPayMap) -> MonthBreakdown:
        """Accumulate a day; an already present date is replaced instead."""
        if day_map.meta.date in breakdown.days:
            return self.replace_day(breakdown, day_map)

        days = dict(breakdown.days)
        days[day_map.meta.date] = day_map
        return replace(
            breakdown,
            days=days,
            total=self.engine.month_reducer.accumulate(breakdown.total, day_map),
        )

    def remove_day(self, breakdown: MonthBreakdown, day: date) -> MonthBreakdown:
        previous = breakdown.days.get(day)
        if previous is None:
            logger.debug("Remove of absent day ignored", extra={"date": str(day)})
            return breakdown

        days = dict(breakdown.days)
        del days[day]
        return replace(
            breakdown,
            days=days,
            total=self.engine.month_reducer.subtract(breakdown.total, previous),
        )

    def replace_day(self, breakdown: MonthBreakdown, day_map: DayPayMap) -> MonthBreakdown:
        """Subtract the previous map of the date (if any), then accumulate the new one."""
        reducer = self.engine.month_reducer
        total = breakdown.total
        previous = breakdown.days.get(day_map.meta.date)
        if previous is not None:
            total = reducer.subtract(total, previous)

        days = dict(breakdown.days)
        days[day_map.meta.date] = day_map
        return replace(breakdown, days=days, total=reducer.accumulate(total, day_map))

    def edit_day(
        self,
        breakdown: MonthBreakdown,
        day_input: WorkDayInput,
    ) -> MonthBreakdown:
        """Recalculate one entered day and apply it to the month."""
        meta = breakdown.meta_for(day_input.date)
        if meta is None:
            raise ValueError(
                f"{day_input.date.isoformat()} is outside {breakdown.year}-{breakdown.month:02d}"
            )
        try:
            day_map = self.calculate_day(
                meta, day_input.shifts, day_input.status, breakdown.standard_hours
            )
        except Exception as e:
            logger.error(
                "Day recalculation failed",
                extra={"date": str(day_input.date), "err": err_tag(e)},
            )
            raise
        return self.replace_day(breakdown, day_map)

    def salary_summary(self, total: MonthPayMap, base_rate: Decimal) -> SalarySummary:
        """
        Price a month total at a base hourly rate.

        Each hour category is paid hours x percent x base rate; per-diem and
        meal allowances add their already resolved amounts.
        """
        base_rate = Decimal(base_rate)

        base_rows = tuple(
            self._hours_row(key, segment, base_rate)
            for key, segment in (
                ("hours100", total.regular.hours100),
                ("extra100_shabbat", total.extra100_shabbat),
                ("hours100_sick", total.hours100_sick),
                ("hours100_vacation", total.hours100_vacation),
            )
        )
        extra_rows = tuple(
            self._hours_row(key, segment, base_rate)
            for key, segment in (
                ("hours50", total.extra.hours50),
                ("hours150", total.regular.hours150),
                ("hours125", total.regular.hours125),
                ("shabbat150", total.special.shabbat150),
                ("shabbat200", total.special.shabbat200),
                ("hours20", total.extra.hours20),
            )
        )
        allowance_rows = (
            self._allowance_row("per_diem", total.per_diem.points, total.per_diem.amount),
            self._allowance_row(
                "meal_allowance_large",
                total.meal_allowance.large.points,
                total.meal_allowance.large.amount,
            ),
            self._allowance_row(
                "meal_allowance_small",
                total.meal_allowance.small.points,
                total.meal_allowance.small.amount,
            ),
        )

        grand_total = sum(
            (row.total for row in base_rows + extra_rows + allowance_rows), ZERO
        )
        return SalarySummary(
            base_rate=base_rate,
            base_rows=base_rows,
            extra_rows=extra_rows,
            allowance_rows=allowance_rows,
            total=quantize_amount(grand_total),
        )

    @staticmethod
    def _hours_row(key: str, segment: Segment, base_rate: Decimal) -> SalaryRow:
        rate = base_rate * segment.percent
        return SalaryRow(
            key=key,
            quantity=segment.hours,
            rate=quantize_amount(rate),
            total=quantize_amount(segment.hours * rate),
        )

    @staticmethod
    def _allowance_row(key: str, points: int, amount: Decimal) -> SalaryRow:
        rate = quantize_amount(amount / points) if points else ZERO
        return SalaryRow(
            key=key, quantity=Decimal(points), rate=rate, total=quantize_amount(amount)
        )


def summarize_days(days: Sequence[DayPayMap]) -> Mapping[str, int]:
    """Count days per status, used in log lines and command output."""
    counts: Dict[str, int] = {status.value: 0 for status in WorkDayStatus}
    for day in days:
        counts[day.status.value] += 1
    return counts
