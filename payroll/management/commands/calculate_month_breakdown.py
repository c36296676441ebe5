import json
import logging
import sys
from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError
from django.core.serializers.json import DjangoJSONEncoder

from core.exceptions import BreakdownInputError
from core.logging_utils import breakdown_request_shape, public_worker_id
from payroll.serializers import (
    MonthBreakdownRequestSerializer,
    build_day_inputs,
    serialize_breakdown,
)
from payroll.services.breakdown_service import MonthlyBreakdownService, summarize_days
from payroll.services.factory import PayrollEngineConfig, build_payroll_engine

logger = logging.getLogger(__name__)


def _decimal_option(value, name):
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise CommandError(f"--{name} must be a number, got {value!r}")


class Command(BaseCommand):
    help = "Calculate the pay breakdown of one month from a JSON file of shifts"

    def add_arguments(self, parser):
        parser.add_argument(
            "--input",
            required=True,
            help="Path to the month JSON (same body as the breakdown API), '-' for stdin",
        )
        parser.add_argument("--base-rate", help="Base hourly rate for the salary summary")
        parser.add_argument(
            "--standard-hours", help="Daily 100%% threshold, overrides settings"
        )
        parser.add_argument(
            "--indent", type=int, default=2, help="JSON indent (default 2)"
        )

    def _load(self, path):
        try:
            if path == "-":
                return json.load(sys.stdin)
            with open(path, encoding="utf-8") as fh:
                return json.load(fh)
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e.strerror or e}")
        except json.JSONDecodeError as e:
            raise CommandError(f"Invalid JSON in {path}: {e}")

    def handle(self, *args, **options):
        payload = self._load(options["input"])
        if not isinstance(payload, dict):
            raise CommandError("Input must be a JSON object")

        base_rate = _decimal_option(options.get("base_rate"), "base-rate")
        standard_hours = _decimal_option(options.get("standard_hours"), "standard-hours")
        if base_rate is not None:
            payload["base_rate"] = str(base_rate)
        if standard_hours is not None:
            payload["standard_hours"] = str(standard_hours)

        serializer = MonthBreakdownRequestSerializer(data=payload)
        if not serializer.is_valid():
            raise CommandError(
                "Invalid input: " + json.dumps(serializer.errors, cls=DjangoJSONEncoder)
            )
        data = serializer.validated_data

        try:
            day_inputs = build_day_inputs(data)
        except BreakdownInputError as e:
            raise CommandError(f"{e.message}: {json.dumps(e.details)}")

        config = PayrollEngineConfig.from_settings(
            standard_hours=data.get("standard_hours")
        )
        service = MonthlyBreakdownService(build_payroll_engine(config))
        breakdown = service.calculate_month(
            data["year"],
            data["month"],
            day_inputs,
            event_map=data["events"],
            standard_hours=config.standard_hours,
        )
        summary = (
            service.salary_summary(breakdown.total, data["base_rate"])
            if data.get("base_rate") is not None
            else None
        )
        logger.info(
            "Month breakdown calculated from command line",
            extra={
                "worker": public_worker_id(data.get("worker_id")),
                **breakdown_request_shape(data),
            },
        )

        self.stdout.write(
            json.dumps(
                serialize_breakdown(breakdown, summary),
                cls=DjangoJSONEncoder,
                indent=options["indent"],
                ensure_ascii=False,
            )
        )

        counts = summarize_days(list(breakdown.days.values()))
        self.stderr.write(
            self.style.SUCCESS(
                f"{data['year']}-{data['month']:02d}: "
                f"{counts['normal']} worked, {counts['sick']} sick, "
                f"{counts['vacation']} vacation day(s), "
                f"{breakdown.total.total_hours} hours"
            )
        )
