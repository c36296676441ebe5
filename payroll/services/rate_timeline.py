"""
Effective-date rate timelines.

Monetary rates (per-diem, meal allowance) change on published dates. A
timeline is an ascending list of (year, month, rates) entries; the rate in
force for a month is the one of the last entry not later than that month.
"""

from decimal import Decimal
from typing import Any, Callable, Generic, Iterable, List, Mapping, TypeVar

from .contracts import ZERO, MealAllowanceRates, RateTimelineEntry

R = TypeVar("R")

DEFAULT_PER_DIEM_TIMELINE = (
    {"year": 2000, "month": 1, "rates": "33.90"},
    {"year": 2024, "month": 9, "rates": "36.30"},
)

DEFAULT_MEAL_ALLOWANCE_TIMELINE = (
    {"year": 2000, "month": 1, "rates": {"small": "13.50", "large": "19.70"}},
    {"year": 2024, "month": 9, "rates": {"small": "14.50", "large": "21.10"}},
)


class RateTimelineResolver(Generic[R]):
    """
    Resolve the rates in force for a year/month.

    Comparison is lexicographic on (year, month), so out-of-range months
    still resolve to a best-effort entry instead of raising. Before the
    first entry the zero-valued default is returned.
    """

    def __init__(self, entries: Iterable[RateTimelineEntry], default: R):
        self.entries: List[RateTimelineEntry] = sorted(entries, key=lambda e: e.period)
        self.default = default

    def resolve(self, year: int, month: int) -> R:
        target = (year, month)
        resolved = self.default
        for entry in self.entries:
            if entry.period > target:
                break
            resolved = entry.rates
        return resolved

    def __len__(self):
        return len(self.entries)


def _entries(
    raw: Iterable[Mapping[str, Any]], parse: Callable[[Any], R]
) -> List[RateTimelineEntry]:
    return [
        RateTimelineEntry(
            year=int(item["year"]),
            month=int(item["month"]),
            rates=parse(item["rates"]),
        )
        for item in raw
    ]


def _parse_meal_rates(value: Any) -> MealAllowanceRates:
    if isinstance(value, MealAllowanceRates):
        return value
    return MealAllowanceRates(
        small=Decimal(str(value.get("small", 0))),
        large=Decimal(str(value.get("large", 0))),
    )


def per_diem_rate_resolver(
    timeline: Iterable[Mapping[str, Any]] = DEFAULT_PER_DIEM_TIMELINE,
) -> RateTimelineResolver[Decimal]:
    """Timeline of the per-diem rate (tier A unit amount)."""
    return RateTimelineResolver(
        _entries(timeline, lambda value: Decimal(str(value))), default=ZERO
    )


def meal_allowance_rate_resolver(
    timeline: Iterable[Mapping[str, Any]] = DEFAULT_MEAL_ALLOWANCE_TIMELINE,
) -> RateTimelineResolver[MealAllowanceRates]:
    """Timeline of the small/large meal allowance rates."""
    return RateTimelineResolver(
        _entries(timeline, _parse_meal_rates), default=MealAllowanceRates()
    )

