"""
Tiered overtime allocation (100% / 125% / 150%).

The allocator is a pure fold step: it takes the caller-held running
breakdown of a day and returns a new one with the given hours added on top.
Room left in each tier is measured against the running value, so folding
several shifts in start-time order gives the same result as one call with
the day's total.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from .contracts import ZERO, RegularBreakdown, Segment, WorkDayMeta
from .enums import WorkDayType

logger = logging.getLogger(__name__)

DEFAULT_MID_TIER_THRESHOLD = Decimal("2")


def _add(segment: Segment, hours: Decimal) -> Segment:
    return Segment(percent=segment.percent, hours=segment.hours + hours)


class RegularHoursAllocator:
    """Greedy allocator of regular hours into overtime tiers"""

    def __init__(self, mid_tier_threshold: Optional[Decimal] = None):
        if mid_tier_threshold is None:
            mid_tier_threshold = DEFAULT_MID_TIER_THRESHOLD
        self.mid_tier_threshold = Decimal(str(mid_tier_threshold))

    def create_empty(self) -> RegularBreakdown:
        return RegularBreakdown()

    @staticmethod
    def is_untiered(meta: WorkDayMeta) -> bool:
        """Sabbath/holiday that does not continue into another one: no tiering."""
        return meta.type_day is WorkDayType.SPECIAL_FULL and not meta.cross_day_continuation

    def allocate(
        self,
        running: RegularBreakdown,
        total_hours: Decimal,
        standard_hours: Decimal,
        meta: WorkDayMeta,
    ) -> RegularBreakdown:
        """
        Add total_hours to the running breakdown.

        Args:
            running: Breakdown accumulated so far for the day
            total_hours: Hours to allocate (one shift or the whole day)
            standard_hours: Daily threshold of the 100% tier
            meta: Day classification

        Returns:
            RegularBreakdown: New running breakdown
        """
        total_hours = max(Decimal(total_hours), ZERO)
        if total_hours == ZERO:
            return running

        if self.is_untiered(meta):
            return RegularBreakdown(
                hours100=running.hours100,
                hours125=running.hours125,
                hours150=_add(running.hours150, total_hours),
            )

        room100 = max(Decimal(standard_hours) - running.hours100.hours, ZERO)
        to100 = min(total_hours, room100)
        remaining = total_hours - to100

        room125 = max(self.mid_tier_threshold - running.hours125.hours, ZERO)
        to125 = min(remaining, room125)
        to150 = remaining - to125

        return RegularBreakdown(
            hours100=_add(running.hours100, to100),
            hours125=_add(running.hours125, to125),
            hours150=_add(running.hours150, to150),
        )

    def allocate_day(
        self, total_hours: Decimal, standard_hours: Decimal, meta: WorkDayMeta
    ) -> RegularBreakdown:
        return self.allocate(self.create_empty(), total_hours, standard_hours, meta)

    def allocate_shifts(
        self,
        hours_per_shift: Iterable[Decimal],
        standard_hours: Decimal,
        meta: WorkDayMeta,
    ) -> RegularBreakdown:
        """Fold shift hours (already in start-time order) into one breakdown."""
        running = self.create_empty()
        for hours in hours_per_shift:
            running = self.allocate(running, hours, standard_hours, meta)

        logger.debug(
            "Allocated regular hours by shift",
            extra={
                "date": str(meta.date),
                "hours100": str(running.hours100.hours),
                "hours125": str(running.hours125.hours),
                "hours150": str(running.hours150.hours),
            },
        )
        return running
