"""
Shift segmentation against time-of-day boundary tables.

A shift, expressed as minute offsets from the local midnight of its day,
is projected onto the boundary table of its day type. Each table carries two
independent layers:

    exclusive - categories that tile the day without gaps or overlaps
                (night 50%, base 100%, Sabbath 150%/200%)
    stacking  - premiums paid on top of the base allocation (evening 20%)

Both layers are resolved separately and merged, so a stacking premium is
never lost to the partition of the exclusive categories.

Shifts that run past 06:00 of the following day are split there; the
remainder is resolved against the table of the following day and shifted
forward by a full day.
"""

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .contracts import (
    FULL_DAY_MINUTES,
    SHIFT_PERCENT,
    LabeledSegmentRange,
    Point,
    WorkDayMeta,
)
from .enums import SegmentKey, WorkDayType
from .local_time import LocalTimeService

logger = logging.getLogger(__name__)

MIN_06 = 6 * 60
MIN_14 = 14 * 60
MIN_17 = 17 * 60
MIN_22 = 22 * 60
FULL_DAY_LIMIT = MIN_06 + FULL_DAY_MINUTES


def _entry(start: int, end: int, percent: str, key: SegmentKey) -> LabeledSegmentRange:
    return LabeledSegmentRange(Point(start, end), SHIFT_PERCENT[percent], key)


@dataclass(frozen=True)
class SegmentTable:
    """Boundary table of one day type"""

    exclusive: Tuple[LabeledSegmentRange, ...]
    stacking: Tuple[LabeledSegmentRange, ...] = ()


REGULAR_TABLE = SegmentTable(
    exclusive=(
        _entry(0, MIN_06, "hours50", SegmentKey.HOURS50),
        _entry(MIN_06, MIN_17, "hours100", SegmentKey.HOURS100),
        _entry(MIN_17, FULL_DAY_LIMIT, "hours50", SegmentKey.HOURS50),
    ),
    stacking=(_entry(MIN_14, MIN_22, "hours20", SegmentKey.HOURS20),),
)

SPECIAL_TABLE = SegmentTable(
    exclusive=(
        _entry(0, MIN_06, "hours200", SegmentKey.SHABBAT200),
        _entry(MIN_06, MIN_22, "hours150", SegmentKey.SHABBAT150),
        _entry(MIN_22, FULL_DAY_LIMIT, "hours200", SegmentKey.SHABBAT200),
    ),
)


def find_segments(
    target: Point, table: Sequence[LabeledSegmentRange]
) -> List[LabeledSegmentRange]:
    """
    Clip a gapless, start-sorted table to the target interval.

    i is the last entry starting at or before the target start, j the first
    entry ending at or after the target end. Entries i..j are clipped and
    the positive-duration results kept. A target the table does not cover
    yields an empty list.
    """
    if target.is_empty or not table:
        return []

    starts = [entry.point.start for entry in table]
    ends = [entry.point.end for entry in table]

    i = bisect_right(starts, target.start) - 1
    j = bisect_left(ends, target.end)

    if i < 0 or j >= len(table) or i > j:
        return []

    result = []
    for entry in table[i : j + 1]:
        clipped = entry.clipped(target)
        if not clipped.point.is_empty:
            result.append(clipped)
    return result


def overlay_segments(
    target: Point, table: Iterable[LabeledSegmentRange]
) -> List[LabeledSegmentRange]:
    """Clip every stacking entry to the target, keeping positive durations."""
    if target.is_empty:
        return []
    result = []
    for entry in table:
        clipped = entry.clipped(target)
        if not clipped.point.is_empty:
            result.append(clipped)
    return result


def merge_segments(*groups: Iterable[LabeledSegmentRange]) -> List[LabeledSegmentRange]:
    merged = [segment for group in groups for segment in group]
    return sorted(merged, key=lambda s: (s.point.start, s.point.end))


class ShiftSegmentResolver:
    """
    Partition one shift interval into labeled, percent-tagged segments.

    The special entry minute of eve days comes from the injected local time
    service, computed per date from the local UTC offset.
    """

    def __init__(
        self,
        local_time: Optional[LocalTimeService] = None,
        regular_table: SegmentTable = REGULAR_TABLE,
        special_table: SegmentTable = SPECIAL_TABLE,
    ):
        self.local_time = local_time or LocalTimeService()
        self.regular_table = regular_table
        self.special_table = special_table

    def resolve(self, point: Point, meta: WorkDayMeta) -> List[LabeledSegmentRange]:
        if point.is_empty:
            logger.debug(
                "Empty shift interval, no segments",
                extra={"start": point.start, "end": point.end, "date": str(meta.date)},
            )
            return []

        next_table = (
            self.special_table if meta.cross_day_continuation else self.regular_table
        )

        if meta.type_day is WorkDayType.SPECIAL_FULL:
            return self._resolve_day_range(point, self.special_table, next_table)

        if meta.type_day is WorkDayType.SPECIAL_PARTIAL_START:
            return self._resolve_partial_start(
                point, self.local_time.special_entry_minutes(meta.date), next_table
            )

        return self._resolve_day_range(point, self.regular_table, next_table)

    def _resolve_table(self, target: Point, table: SegmentTable) -> List[LabeledSegmentRange]:
        return merge_segments(
            find_segments(target, table.exclusive),
            overlay_segments(target, table.stacking),
        )

    @staticmethod
    def _split_by_day(target: Point) -> Tuple[Point, Optional[Point]]:
        first = Point(target.start, min(target.end, FULL_DAY_LIMIT))
        second = None
        if target.end > FULL_DAY_LIMIT:
            second = Point(MIN_06, target.end % FULL_DAY_MINUTES)
        return first, second

    def _resolve_day_range(
        self, target: Point, table: SegmentTable, next_table: SegmentTable
    ) -> List[LabeledSegmentRange]:
        first, second = self._split_by_day(target)
        part1 = self._resolve_table(first, table)
        if second is None:
            return part1

        part2 = [
            segment.shifted(FULL_DAY_MINUTES)
            for segment in self._resolve_table(second, next_table)
        ]
        return merge_segments(part1, part2)

    def _resolve_partial_start(
        self, target: Point, special_entry: int, next_table: SegmentTable
    ) -> List[LabeledSegmentRange]:
        if target.end <= special_entry:
            return self._resolve_day_range(target, self.regular_table, next_table)

        if target.start >= special_entry:
            return self._resolve_day_range(target, self.special_table, next_table)

        before = Point(target.start, special_entry)
        after = Point(special_entry, target.end)
        return merge_segments(
            self._resolve_table(before, self.regular_table),
            self._resolve_day_range(after, self.special_table, next_table),
        )
