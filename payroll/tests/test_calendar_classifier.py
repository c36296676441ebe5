"""
Tests for calendar day classification and the month work-day builder.
"""

from datetime import date

import pytest

from payroll.services.calendar_classifier import (
    CalendarDayClassifier,
    WorkDaysForMonthBuilder,
)
from payroll.services.enums import WorkDayType


@pytest.fixture
def classifier(local_time):
    return CalendarDayClassifier(local_time=local_time)


class TestClassifyWeekday:
    @pytest.mark.parametrize("weekday", [0, 1, 2, 3, 4])
    def test_plain_weekdays_are_regular(self, classifier, weekday):
        assert classifier.classify(weekday, []) is WorkDayType.REGULAR

    def test_saturday_is_special_full(self, classifier):
        assert classifier.classify(6, []) is WorkDayType.SPECIAL_FULL

    def test_friday_is_partial_start(self, classifier):
        assert classifier.classify(5, []) is WorkDayType.SPECIAL_PARTIAL_START


class TestClassifyEvents:
    def test_paid_holiday_with_year_suffix(self, classifier):
        assert classifier.classify(3, ["Rosh Hashana 5785"]) is WorkDayType.SPECIAL_FULL

    def test_paid_holiday_outranks_friday(self, classifier):
        assert classifier.classify(5, ["Rosh Hashana II"]) is WorkDayType.SPECIAL_FULL

    def test_saturday_outranks_everything(self, classifier):
        assert classifier.classify(6, ["Erev Pesach"]) is WorkDayType.SPECIAL_FULL

    def test_erev_is_partial_start(self, classifier):
        assert classifier.classify(2, ["Erev Yom Kippur"]) is WorkDayType.SPECIAL_PARTIAL_START

    def test_named_partial_start_event(self, classifier):
        assert classifier.classify(1, ["Yom HaZikaron"]) is WorkDayType.SPECIAL_PARTIAL_START
        assert (
            classifier.classify(3, ["Sukkot VII (Hoshana Rabba)"])
            is WorkDayType.SPECIAL_PARTIAL_START
        )

    def test_holiday_name_prefix_needs_word_boundary(self, classifier):
        # "Sukkot I" must not match the intermediate days
        assert classifier.classify(2, ["Sukkot II (CH''M)"]) is WorkDayType.REGULAR
        assert classifier.classify(2, ["Sukkot III (CH''M)"]) is WorkDayType.REGULAR
        assert classifier.classify(2, ["Sukkot I"]) is WorkDayType.SPECIAL_FULL

    def test_erev_prefix_needs_word_boundary(self, classifier):
        assert classifier.classify(2, ["Erevsomething"]) is WorkDayType.REGULAR

    def test_typographic_apostrophe_is_normalized(self, classifier):
        assert classifier.classify(3, ["Yom HaAtzma’ut"]) is WorkDayType.SPECIAL_FULL

    def test_unknown_titles_are_ignored(self, classifier):
        assert classifier.classify(2, ["Chanukah: 3 Candles", "Rosh Chodesh Tevet"]) is (
            WorkDayType.REGULAR
        )
        assert classifier.classify(5, ["Tu BiShvat"]) is WorkDayType.SPECIAL_PARTIAL_START

    def test_custom_holiday_list(self, local_time):
        classifier = CalendarDayClassifier(paid_holidays=["Company Day"], local_time=local_time)
        assert classifier.classify(2, ["Company Day"]) is WorkDayType.SPECIAL_FULL
        assert classifier.classify(2, ["Yom Kippur"]) is WorkDayType.REGULAR


class TestClassifyDate:
    def test_friday_continues_into_saturday(self, classifier):
        meta = classifier.classify_date(date(2024, 10, 11), {})
        assert meta.type_day is WorkDayType.SPECIAL_PARTIAL_START
        assert meta.cross_day_continuation is True

    def test_saturday_followed_by_sunday(self, classifier):
        meta = classifier.classify_date(date(2024, 10, 12), {})
        assert meta.type_day is WorkDayType.SPECIAL_FULL
        assert meta.cross_day_continuation is False

    def test_holiday_eve_without_event_title(self, classifier):
        events = {"2024-10-03": ["Rosh Hashana 5785"], "2024-10-04": ["Rosh Hashana II"]}
        meta = classifier.classify_date(date(2024, 10, 2), events)
        assert meta.type_day is WorkDayType.REGULAR
        assert meta.cross_day_continuation is True

    def test_two_day_holiday_then_sabbath(self, classifier):
        events = {"2024-10-03": ["Rosh Hashana 5785"], "2024-10-04": ["Rosh Hashana II"]}
        first = classifier.classify_date(date(2024, 10, 3), events)
        second = classifier.classify_date(date(2024, 10, 4), events)
        assert first.type_day is WorkDayType.SPECIAL_FULL
        assert first.cross_day_continuation is True
        assert second.type_day is WorkDayType.SPECIAL_FULL
        assert second.cross_day_continuation is True


class TestWorkDaysForMonthBuilder:
    def test_builds_every_day(self, classifier):
        days = WorkDaysForMonthBuilder(classifier).build(2024, 11, {})
        assert len(days) == 30
        assert [d.date.day for d in days] == list(range(1, 31))

    def test_last_day_looks_into_next_month(self, classifier):
        # May 31st 2024 is a Friday, June 1st a Saturday
        days = WorkDaysForMonthBuilder(classifier).build(2024, 5, {})
        last = days[-1]
        assert last.date == date(2024, 5, 31)
        assert last.type_day is WorkDayType.SPECIAL_PARTIAL_START
        assert last.cross_day_continuation is True

    def test_next_month_event_sets_continuation(self, classifier):
        days = WorkDaysForMonthBuilder(classifier).build(
            2024, 9, {"2024-10-01": ["Yom Kippur"]}
        )
        assert days[-1].date == date(2024, 9, 30)
        assert days[-1].cross_day_continuation is True

    def test_matches_classify_date(self, classifier):
        events = {"2024-10-02": ["Erev Rosh Hashana"], "2024-10-03": ["Rosh Hashana 5785"]}
        days = WorkDaysForMonthBuilder(classifier).build(2024, 10, events)
        for meta in days:
            assert meta == classifier.classify_date(meta.date, events)
