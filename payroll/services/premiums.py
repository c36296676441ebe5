"""
Evening/night and Sabbath premium calculators.

Both sum the durations of the segments with their keys, ignoring the rest.
Evening (20%) segments overlap the base segments on purpose and are never
deduplicated against them.
"""

from typing import Iterable

from .accumulators import ExtraBreakdownReducer, SpecialBreakdownReducer
from .contracts import (
    ExtraBreakdown,
    LabeledSegmentRange,
    Segment,
    SpecialBreakdown,
    minutes_to_hours,
)
from .enums import SegmentKey


def _sum_minutes(segments: Iterable[LabeledSegmentRange], key: SegmentKey) -> int:
    return sum(segment.point.minutes for segment in segments if segment.key is key)


class ExtraHoursCalculator(ExtraBreakdownReducer):
    """Evening (hours20) and night (hours50) premium hours"""

    def calculate(self, segments: Iterable[LabeledSegmentRange]) -> ExtraBreakdown:
        segments = list(segments)
        empty = self.create_empty()
        return ExtraBreakdown(
            hours20=Segment(
                empty.hours20.percent,
                minutes_to_hours(_sum_minutes(segments, SegmentKey.HOURS20)),
            ),
            hours50=Segment(
                empty.hours50.percent,
                minutes_to_hours(_sum_minutes(segments, SegmentKey.HOURS50)),
            ),
        )


class SpecialHoursCalculator(SpecialBreakdownReducer):
    """Sabbath/holiday 150% and 200% hours"""

    SPECIAL_KEYS = (SegmentKey.SHABBAT150, SegmentKey.SHABBAT200)

    def special_minutes(self, segments: Iterable[LabeledSegmentRange]) -> int:
        segments = list(segments)
        return sum(_sum_minutes(segments, key) for key in self.SPECIAL_KEYS)

    def calculate(self, segments: Iterable[LabeledSegmentRange]) -> SpecialBreakdown:
        segments = list(segments)
        empty = self.create_empty()
        return SpecialBreakdown(
            shabbat150=Segment(
                empty.shabbat150.percent,
                minutes_to_hours(_sum_minutes(segments, SegmentKey.SHABBAT150)),
            ),
            shabbat200=Segment(
                empty.shabbat200.percent,
                minutes_to_hours(_sum_minutes(segments, SegmentKey.SHABBAT200)),
            ),
        )
