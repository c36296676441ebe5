"""
Payroll views package.

- breakdown_views.py - Monthly pay breakdown calculation
"""

from .breakdown_views import month_breakdown

__all__ = ["month_breakdown"]
