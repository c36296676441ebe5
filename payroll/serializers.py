import calendar
from datetime import date, timedelta
from decimal import Decimal

from rest_framework import serializers

from django.utils import timezone

from core.exceptions import BreakdownInputError
from integrations.services.calendar_events import CalendarEventAdapter

from .services.breakdown_service import WorkDayInput
from .services.contracts import Shift
from .services.enums import WorkDayStatus

MAX_SHIFT_LENGTH = timedelta(hours=24)


# ---------------------------------------------------------------------------
# Request serializers
# ---------------------------------------------------------------------------


class ShiftInputSerializer(serializers.Serializer):
    """One clock-in/clock-out pair, at minute resolution"""

    id = serializers.CharField(required=False, allow_blank=True, max_length=64)
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    is_field_duty_shift = serializers.BooleanField(required=False, default=False)

    @staticmethod
    def _whole_minute(value):
        if value.second or value.microsecond:
            raise serializers.ValidationError("Clock times must not carry seconds")
        return value

    def validate_start(self, value):
        return self._whole_minute(value)

    def validate_end(self, value):
        return self._whole_minute(value)

    def validate(self, attrs):
        if attrs["start"] >= attrs["end"]:
            raise serializers.ValidationError(
                {"end": "Shift end must be after shift start"}
            )
        return attrs


class DayInputSerializer(serializers.Serializer):
    date = serializers.DateField()
    status = serializers.ChoiceField(
        choices=[s.value for s in WorkDayStatus],
        required=False,
        default=WorkDayStatus.NORMAL.value,
    )
    shifts = ShiftInputSerializer(many=True, required=False, default=list)

    def validate(self, attrs):
        if attrs["status"] != WorkDayStatus.NORMAL.value and attrs["shifts"]:
            raise serializers.ValidationError(
                {"shifts": "Sick and vacation days cannot have shifts"}
            )
        return attrs


class MonthBreakdownRequestSerializer(serializers.Serializer):
    """
    Request of a monthly pay breakdown.

    events accepts a Hebcal response ({"items": [...]}), a list of items or
    a {date: [titles]} mapping.
    """

    year = serializers.IntegerField(min_value=1900, max_value=2200)
    month = serializers.IntegerField(min_value=1, max_value=12)
    worker_id = serializers.CharField(required=False, allow_blank=True, max_length=64)
    events = serializers.JSONField(required=False, default=dict)
    days = DayInputSerializer(many=True)
    standard_hours = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("24"),
        required=False,
    )
    base_rate = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False
    )

    def validate_events(self, value):
        try:
            return CalendarEventAdapter.to_event_map(value)
        except TypeError as e:
            raise serializers.ValidationError(str(e))

    def validate(self, attrs):
        year, month = attrs["year"], attrs["month"]
        _, days_in_month = calendar.monthrange(year, month)
        first, last = date(year, month, 1), date(year, month, days_in_month)

        seen = set()
        errors = {}
        for index, day in enumerate(attrs["days"]):
            if not first <= day["date"] <= last:
                errors[str(index)] = f"{day['date'].isoformat()} is outside {year}-{month:02d}"
            elif day["date"] in seen:
                errors[str(index)] = f"Duplicate day {day['date'].isoformat()}"
            seen.add(day["date"])

        if errors:
            raise serializers.ValidationError({"days": errors})
        return attrs


def build_day_inputs(validated_data):
    """
    Convert validated request days into engine inputs.

    Raises:
        BreakdownInputError: a shift does not start on its day or spans more
            than 24 hours
    """
    day_inputs = []
    problems = []
    for day in validated_data["days"]:
        shifts = []
        for index, shift in enumerate(day["shifts"]):
            start_day = timezone.localtime(shift["start"]).date()
            if start_day != day["date"]:
                problems.append(
                    f"{day['date'].isoformat()} shift {index} starts on {start_day.isoformat()}"
                )
                continue
            if shift["end"] - shift["start"] > MAX_SHIFT_LENGTH:
                problems.append(
                    f"{day['date'].isoformat()} shift {index} is longer than 24 hours"
                )
                continue
            shifts.append(
                Shift(
                    id=shift.get("id") or f"{day['date'].isoformat()}-{index}",
                    start=shift["start"],
                    end=shift["end"],
                    is_field_duty_shift=shift["is_field_duty_shift"],
                )
            )
        day_inputs.append(
            WorkDayInput(
                date=day["date"],
                shifts=tuple(shifts),
                status=WorkDayStatus.from_string(day["status"]),
            )
        )

    if problems:
        raise BreakdownInputError(
            "Some shifts cannot be broken down", details={"shifts": problems}
        )
    return day_inputs


# ---------------------------------------------------------------------------
# Response serializers (read-only, over engine value objects)
# ---------------------------------------------------------------------------


def _hours():
    return serializers.DecimalField(max_digits=8, decimal_places=2, read_only=True)


def _amount():
    return serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class SegmentSerializer(serializers.Serializer):
    percent = _hours()
    hours = _hours()


class RegularBreakdownSerializer(serializers.Serializer):
    hours100 = SegmentSerializer()
    hours125 = SegmentSerializer()
    hours150 = SegmentSerializer()


class ExtraBreakdownSerializer(serializers.Serializer):
    hours20 = SegmentSerializer()
    hours50 = SegmentSerializer()


class SpecialBreakdownSerializer(serializers.Serializer):
    shabbat150 = SegmentSerializer()
    shabbat200 = SegmentSerializer()


class PerDiemInfoSerializer(serializers.Serializer):
    tier = serializers.SerializerMethodField()
    points = serializers.IntegerField(read_only=True)
    amount = _amount()

    def get_tier(self, obj):
        return obj.tier.value if obj.tier else None


class DailyPerDiemSerializer(serializers.Serializer):
    is_field_duty_day = serializers.BooleanField(read_only=True)
    diem_info = PerDiemInfoSerializer()


class MealAllowanceEntrySerializer(serializers.Serializer):
    points = serializers.IntegerField(read_only=True)
    amount = _amount()


class MealAllowanceSerializer(serializers.Serializer):
    large = MealAllowanceEntrySerializer()
    small = MealAllowanceEntrySerializer()


class LabeledSegmentSerializer(serializers.Serializer):
    start = serializers.IntegerField(source="point.start", read_only=True)
    end = serializers.IntegerField(source="point.end", read_only=True)
    percent = _hours()
    key = serializers.CharField(source="key.value", read_only=True)
    hours = _hours()


class ShiftPayMapSerializer(serializers.Serializer):
    shift_id = serializers.CharField(read_only=True)
    segments = LabeledSegmentSerializer(many=True)
    regular = RegularBreakdownSerializer()
    extra = ExtraBreakdownSerializer()
    special = SpecialBreakdownSerializer()
    total_hours = _hours()
    field_duty_hours = serializers.SerializerMethodField()

    def get_field_duty_hours(self, obj):
        info = obj.per_diem_shift
        return str(info.hours) if info.is_field_duty_shift else "0.00"


class DayPayMapSerializer(serializers.Serializer):
    date = serializers.DateField(source="meta.date", read_only=True)
    type_day = serializers.CharField(source="meta.type_day.value", read_only=True)
    cross_day_continuation = serializers.BooleanField(
        source="meta.cross_day_continuation", read_only=True
    )
    status = serializers.CharField(source="status.value", read_only=True)
    regular = RegularBreakdownSerializer(source="work_map.regular")
    extra = ExtraBreakdownSerializer(source="work_map.extra")
    special = SpecialBreakdownSerializer(source="work_map.special")
    hours100_sick = SegmentSerializer()
    hours100_vacation = SegmentSerializer()
    extra100_shabbat = SegmentSerializer()
    per_diem = DailyPerDiemSerializer()
    meal_allowance = MealAllowanceSerializer()
    total_hours = _hours()
    shifts = ShiftPayMapSerializer(many=True)


class MonthPayMapSerializer(serializers.Serializer):
    regular = RegularBreakdownSerializer()
    extra = ExtraBreakdownSerializer()
    special = SpecialBreakdownSerializer()
    hours100_sick = SegmentSerializer()
    hours100_vacation = SegmentSerializer()
    extra100_shabbat = SegmentSerializer()
    per_diem = PerDiemInfoSerializer()
    meal_allowance = MealAllowanceSerializer()
    total_hours = _hours()


class SalaryRowSerializer(serializers.Serializer):
    key = serializers.CharField(read_only=True)
    quantity = _hours()
    rate = _amount()
    total = _amount()


class SalarySummarySerializer(serializers.Serializer):
    base_rate = _amount()
    base_rows = SalaryRowSerializer(many=True)
    extra_rows = SalaryRowSerializer(many=True)
    allowance_rows = SalaryRowSerializer(many=True)
    total = _amount()


def serialize_breakdown(breakdown, salary_summary=None):
    """Response body of a MonthBreakdown and optional salary summary."""
    days = [breakdown.days[d] for d in sorted(breakdown.days)]
    return {
        "year": breakdown.year,
        "month": breakdown.month,
        "standard_hours": str(breakdown.standard_hours),
        "month_total": MonthPayMapSerializer(breakdown.total).data,
        "days": DayPayMapSerializer(days, many=True).data,
        "salary_summary": (
            SalarySummarySerializer(salary_summary).data if salary_summary else None
        ),
    }
