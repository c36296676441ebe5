# Pay breakdown engine

from .breakdown_service import MonthlyBreakdownService, MonthBreakdown, WorkDayInput
from .factory import PayrollEngineConfig, build_payroll_engine

__all__ = [
    "MonthBreakdown",
    "MonthlyBreakdownService",
    "PayrollEngineConfig",
    "WorkDayInput",
    "build_payroll_engine",
]
