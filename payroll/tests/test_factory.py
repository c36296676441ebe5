from decimal import Decimal

from payroll.services.breakdown_service import MonthlyBreakdownService
from payroll.services.enums import AllocationMode, WorkDayType
from payroll.services.factory import PayrollEngineConfig, build_payroll_engine


class TestPayrollEngineConfig:
    def test_from_settings(self, payroll_engine_settings):
        config = PayrollEngineConfig.from_settings()
        assert config.time_zone == "Asia/Jerusalem"
        assert config.standard_hours == Decimal("6.67")
        assert config.mid_tier_threshold == Decimal("2")
        assert config.allocation_mode is AllocationMode.BY_DAY
        assert "Yom Kippur" in config.paid_holidays

    def test_settings_changes_are_picked_up(self, payroll_engine_settings):
        payroll_engine_settings.PAYROLL_ENGINE["STANDARD_HOURS"] = "8.5"
        payroll_engine_settings.PAYROLL_ENGINE["ALLOCATION_MODE"] = "SHIFT"
        config = PayrollEngineConfig.from_settings()
        assert config.standard_hours == Decimal("8.5")
        assert config.allocation_mode is AllocationMode.BY_SHIFT

    def test_unknown_allocation_mode_falls_back_to_day(self, payroll_engine_settings):
        payroll_engine_settings.PAYROLL_ENGINE["ALLOCATION_MODE"] = "weekly"
        assert PayrollEngineConfig.from_settings().allocation_mode is AllocationMode.BY_DAY

    def test_missing_keys_use_defaults(self, settings):
        settings.PAYROLL_ENGINE = {}
        config = PayrollEngineConfig.from_settings()
        assert config.standard_hours == Decimal("6.67")
        assert config.per_diem_timeline[-1]["rates"] == "36.30"

    def test_overrides_win_and_none_is_ignored(self, payroll_engine_settings):
        config = PayrollEngineConfig.from_settings(
            standard_hours=Decimal("9"), mid_tier_threshold=None
        )
        assert config.standard_hours == Decimal("9")
        assert config.mid_tier_threshold == Decimal("2")


class TestBuildPayrollEngine:
    def test_engine_uses_config(self):
        config = PayrollEngineConfig(
            time_zone="Asia/Jerusalem",
            mid_tier_threshold=Decimal("1"),
            paid_holidays=("Company Day",),
            per_diem_timeline=({"year": 2020, "month": 1, "rates": "50"},),
        )
        engine = build_payroll_engine(config)
        assert engine.config is config
        assert engine.allocator.mid_tier_threshold == Decimal("1")
        assert engine.per_diem_rates.resolve(2024, 10) == Decimal("50")
        assert engine.classifier.classify(2, ["Company Day"]) is WorkDayType.SPECIAL_FULL
        assert engine.day_builder.allocation_mode is AllocationMode.BY_DAY

    def test_engines_are_independent(self):
        first = build_payroll_engine(PayrollEngineConfig(time_zone="Asia/Jerusalem"))
        second = build_payroll_engine(PayrollEngineConfig(time_zone="Asia/Jerusalem"))
        assert first.allocator is not second.allocator

    def test_service_builds_engine_from_settings(self, payroll_engine_settings):
        payroll_engine_settings.PAYROLL_ENGINE["STANDARD_HOURS"] = "7"
        service = MonthlyBreakdownService()
        assert service.standard_hours == Decimal("7")
