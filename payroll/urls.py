from django.urls import path

from .views import month_breakdown

urlpatterns = [
    path("breakdown/", month_breakdown, name="payroll-breakdown"),
]
