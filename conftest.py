"""
Global pytest configuration and fixtures
"""

import pytest


@pytest.fixture
def payroll_engine_settings(settings):
    """Private copy of PAYROLL_ENGINE that a test may change"""
    settings.PAYROLL_ENGINE = dict(settings.PAYROLL_ENGINE)
    return settings
