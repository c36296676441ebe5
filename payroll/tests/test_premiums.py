from decimal import Decimal

from payroll.services.contracts import LabeledSegmentRange, Point
from payroll.services.enums import SegmentKey
from payroll.services.premiums import ExtraHoursCalculator, SpecialHoursCalculator


def seg(start, end, key, percent="1.0"):
    return LabeledSegmentRange(Point(start, end), Decimal(percent), key)


class TestExtraHoursCalculator:
    def test_sums_evening_and_night(self):
        segments = [
            seg(480, 960, SegmentKey.HOURS100),
            seg(840, 960, SegmentKey.HOURS20, "0.2"),
            seg(1020, 1110, SegmentKey.HOURS50, "0.5"),
            seg(1320, 1350, SegmentKey.HOURS50, "0.5"),
        ]
        extra = ExtraHoursCalculator().calculate(segments)
        assert extra.hours20.hours == Decimal("2.00")
        assert extra.hours50.hours == Decimal("2.00")
        assert extra.hours20.percent == Decimal("0.2")
        assert extra.hours50.percent == Decimal("0.5")

    def test_rounds_to_two_places(self):
        extra = ExtraHoursCalculator().calculate([seg(0, 20, SegmentKey.HOURS50)])
        assert extra.hours50.hours == Decimal("0.33")

    def test_no_segments(self):
        extra = ExtraHoursCalculator().calculate([])
        assert extra.hours20.hours == Decimal("0")
        assert extra.hours50.hours == Decimal("0")


class TestSpecialHoursCalculator:
    def test_sums_sabbath_segments(self):
        segments = [
            seg(1080, 1320, SegmentKey.SHABBAT150),
            seg(1320, 1800, SegmentKey.SHABBAT200),
            seg(1800, 1830, SegmentKey.SHABBAT150),
            seg(1830, 1900, SegmentKey.HOURS100),
        ]
        special = SpecialHoursCalculator().calculate(segments)
        assert special.shabbat150.hours == Decimal("4.50")
        assert special.shabbat200.hours == Decimal("8.00")
        assert special.total_hours == Decimal("12.50")

    def test_ignores_regular_segments(self):
        special = SpecialHoursCalculator().calculate([seg(480, 960, SegmentKey.HOURS100)])
        assert special.total_hours == Decimal("0")
