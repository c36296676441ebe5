"""
Calendar day classification for Sabbath and holiday pay rules.

Classifies a date into Regular / SpecialPartialStart / SpecialFull from its
weekday and the holiday event titles published for it, and builds the
WorkDayMeta list of a whole month including the cross-day continuation flag.
"""

import calendar
import logging
from datetime import date
from typing import Iterable, List, Mapping, Optional, Sequence

from .contracts import WorkDayMeta
from .enums import WorkDayType
from .local_time import LocalTimeService

logger = logging.getLogger(__name__)

FRIDAY = 5
SATURDAY = 6

PAID_HOLIDAYS = (
    "Rosh Hashana",
    "Rosh Hashana II",
    "Yom Kippur",
    "Sukkot I",
    "Shmini Atzeret",
    "Pesach I",
    "Yom HaAtzma'ut",
    "Shavuot I",
)

PARTIAL_START_EVENTS = (
    "Yom HaZikaron",
    "Sukkot VII (Hoshana Rabba)",
)

EREV_PREFIX = "Erev"

# Event map: ISO date string -> event titles of that date
EventMap = Mapping[str, Sequence[str]]


def _normalize_title(title: str) -> str:
    # Hebcal publishes both the ASCII and the typographic apostrophe
    return title.replace("’", "'").strip()


def _matches_name(title: str, name: str) -> bool:
    """Title equals name or starts with it followed by a word break."""
    return title == name or title.startswith(name + " ")


class CalendarDayClassifier:
    """
    Resolve the WorkDayType of a calendar day.

    Priority, highest first: Saturday, paid holiday, Friday, eve/partial
    start event, regular. Unknown titles are ignored.
    """

    def __init__(
        self,
        paid_holidays: Optional[Iterable[str]] = None,
        partial_start_events: Optional[Iterable[str]] = None,
        local_time: Optional[LocalTimeService] = None,
    ):
        self.paid_holidays = tuple(
            _normalize_title(name) for name in (paid_holidays or PAID_HOLIDAYS)
        )
        self.partial_start_events = tuple(
            _normalize_title(name)
            for name in (partial_start_events or PARTIAL_START_EVENTS)
        )
        self.local_time = local_time or LocalTimeService()

    def is_paid_holiday(self, event_titles: Iterable[str]) -> bool:
        return any(
            _matches_name(_normalize_title(title), name)
            for title in event_titles
            for name in self.paid_holidays
        )

    def is_partial_start(self, event_titles: Iterable[str]) -> bool:
        for title in event_titles:
            title = _normalize_title(title)
            if _matches_name(title, EREV_PREFIX):
                return True
            if any(_matches_name(title, name) for name in self.partial_start_events):
                return True
        return False

    def classify(self, weekday: int, event_titles: Sequence[str] = ()) -> WorkDayType:
        """
        Classify a day.

        Args:
            weekday: 0=Sunday ... 6=Saturday
            event_titles: Holiday/event titles published for the date

        Returns:
            WorkDayType: Day classification
        """
        if weekday == SATURDAY or self.is_paid_holiday(event_titles):
            return WorkDayType.SPECIAL_FULL

        if weekday == FRIDAY or self.is_partial_start(event_titles):
            return WorkDayType.SPECIAL_PARTIAL_START

        return WorkDayType.REGULAR

    def classify_day(self, day: date, event_map: EventMap) -> WorkDayType:
        return self.classify(
            self.local_time.weekday_index(day),
            event_map.get(day.isoformat(), ()),
        )

    def classify_date(self, day: date, event_map: EventMap) -> WorkDayMeta:
        """Build the WorkDayMeta of a date, looking ahead one day for continuation."""
        next_day = self.local_time.add_days(day, 1)
        return WorkDayMeta(
            date=day,
            type_day=self.classify_day(day, event_map),
            cross_day_continuation=(
                self.classify_day(next_day, event_map) is WorkDayType.SPECIAL_FULL
            ),
        )


class WorkDaysForMonthBuilder:
    """Build the WorkDayMeta of every day of a month"""

    def __init__(self, classifier: CalendarDayClassifier):
        self.classifier = classifier

    def build(self, year: int, month: int, event_map: EventMap) -> List[WorkDayMeta]:
        _, days_in_month = calendar.monthrange(year, month)
        types = [
            self.classifier.classify_day(date(year, month, day), event_map)
            for day in range(1, days_in_month + 1)
        ]

        # Last day looks into the first day of the next month
        next_month_first = self.classifier.local_time.add_days(
            date(year, month, days_in_month), 1
        )
        types.append(self.classifier.classify_day(next_month_first, event_map))

        work_days = [
            WorkDayMeta(
                date=date(year, month, index + 1),
                type_day=types[index],
                cross_day_continuation=types[index + 1] is WorkDayType.SPECIAL_FULL,
            )
            for index in range(days_in_month)
        ]

        logger.debug(
            "Built work days for month",
            extra={
                "year": year,
                "month": month,
                "special_full_days": sum(
                    1 for d in work_days if d.type_day is WorkDayType.SPECIAL_FULL
                ),
                "partial_start_days": sum(
                    1
                    for d in work_days
                    if d.type_day is WorkDayType.SPECIAL_PARTIAL_START
                ),
            },
        )
        return work_days
