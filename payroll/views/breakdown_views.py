"""
Monthly pay breakdown endpoint.

Accepts the shifts of one worker's month together with the calendar events
of that month and returns the per-day and month breakdowns, optionally
priced at a base hourly rate.
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.logging_utils import breakdown_request_shape, public_worker_id, safe_user_hash

from ..serializers import (
    MonthBreakdownRequestSerializer,
    build_day_inputs,
    serialize_breakdown,
)
from ..services.breakdown_service import MonthlyBreakdownService
from ..services.factory import PayrollEngineConfig, build_payroll_engine

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def month_breakdown(request):
    """
    Calculate the pay breakdown of a month.

    Validation errors and BreakdownInputError are turned into the common
    error body by core.exceptions.custom_exception_handler.
    """
    serializer = MonthBreakdownRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    day_inputs = build_day_inputs(data)

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

    base_rate = data.get("base_rate")
    summary = (
        service.salary_summary(breakdown.total, base_rate)
        if base_rate is not None
        else None
    )

    logger.info(
        "Month breakdown served",
        extra={
            "user": safe_user_hash(request.user),
            "worker": public_worker_id(data.get("worker_id")),
            **breakdown_request_shape(data),
        },
    )

    return Response(serialize_breakdown(breakdown, summary), status=status.HTTP_200_OK)
