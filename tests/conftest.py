"""Shared fixtures for the test suite."""

from __future__ import annotations

import pytest

from macro_brief.config import Settings
from tests.helpers import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        fred_api_key="test-key",
        fx_api_key="",
        fred_months=60,
        fx_months=14,
        fred_cache_ttl=300,
        fx_cache_ttl=3600,
        insufficient_data_policy="raise",
        resend_api_key="",
        smtp_host="smtp.test.local",
        smtp_port=587,
        smtp_user="user@test.local",
        smtp_password="secret",
        digest_from="alerts@test.local",
        digest_to=["reader@test.local"],
        timezone="America/New_York",
        dashboard_url="http://localhost:8501",
        output_dir=tmp_path / "exports",
    )
