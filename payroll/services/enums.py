"""
Enumerations for the pay breakdown engine.

This module defines all enums used across the segmentation and allocation
code, ensuring type safety and preventing magic string errors.
"""

from enum import Enum


class WorkDayType(Enum):
    """Calendar classification of a work day"""

    REGULAR = "Regular"
    """Ordinary weekday"""

    SPECIAL_PARTIAL_START = "SpecialPartialStart"
    """Eve of Sabbath or holiday: special rates start at the entry minute"""

    SPECIAL_FULL = "SpecialFull"
    """Sabbath or paid holiday"""

    def __str__(self):
        return self.value

    @property
    def is_special(self) -> bool:
        return self is not WorkDayType.REGULAR


class WorkDayStatus(Enum):
    """Attendance status of a day"""

    NORMAL = "normal"
    SICK = "sick"
    VACATION = "vacation"

    def __str__(self):
        return self.value

    @classmethod
    def from_string(cls, value: str) -> "WorkDayStatus":
        """
        Parse status from string, falling back to NORMAL.

        Args:
            value: Status name (case-insensitive)

        Returns:
            WorkDayStatus: Parsed status
        """
        if not value:
            return cls.NORMAL
        try:
            return cls(value.lower())
        except ValueError:
            return cls.NORMAL


class PerDiemTier(Enum):
    """Field-duty day categories by cumulative field-duty hours"""

    A = "A"
    """4 to 8 hours"""

    B = "B"
    """8 to 12 hours"""

    C = "C"
    """12 hours and more"""

    def __str__(self):
        return self.value

    @property
    def points(self) -> int:
        return {
            PerDiemTier.A: 1,
            PerDiemTier.B: 2,
            PerDiemTier.C: 3,
        }[self]


class SegmentKey(Enum):
    """Labels attached to resolved shift segments"""

    HOURS20 = "hours20"
    """Evening premium, stacks on top of the base allocation"""

    HOURS50 = "hours50"
    """Night premium"""

    HOURS100 = "hours100"
    """Base daytime hours"""

    SHABBAT150 = "shabbat150"
    """Sabbath/holiday daytime rate"""

    SHABBAT200 = "shabbat200"
    """Sabbath/holiday night rate"""

    def __str__(self):
        return self.value

    @property
    def is_extra(self) -> bool:
        return self in (SegmentKey.HOURS20, SegmentKey.HOURS50)

    @property
    def is_special(self) -> bool:
        return self in (SegmentKey.SHABBAT150, SegmentKey.SHABBAT200)


class AllocationMode(Enum):
    """Granularity at which regular hours are tiered"""

    BY_DAY = "day"
    """One allocation with the day's total regular hours"""

    BY_SHIFT = "shift"
    """Fold allocation over the day's shifts in start-time order"""

    def __str__(self):
        return self.value

    @classmethod
    def from_string(cls, value: str) -> "AllocationMode":
        if not value:
            return cls.BY_DAY
        try:
            return cls(value.lower())
        except ValueError:
            return cls.BY_DAY
