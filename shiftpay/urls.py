# shiftpay/urls.py
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
)
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from django.urls import include, path
from django.utils import timezone


@api_view(["GET"])
@permission_classes([AllowAny])
@authentication_classes([])
def health_check(request):
    """Public health check endpoint"""
    return Response(
        {
            "status": "online",
            "version": "1.0",
            "timestamp": timezone.now().isoformat(),
        }
    )


urlpatterns = [
    path("api/health/", health_check, name="health-check"),
    path("api/v1/payroll/", include("payroll.urls")),
]
