"""
Tests for settings defaults, engine overrides and the production database guard.
"""
from unittest.mock import MagicMock

import pytest

import evcharge.db as db_module
from evcharge.core import env
from evcharge.core.config import Settings, settings
from evcharge.services import charging_math
from evcharge.services.charging_session_service import ChargingSessionService
from evcharge.services.charging_stats import ChargingStatsService


class TestChargingDefaults:
    def test_settings_default_to_module_constants(self):
        defaults = Settings()

        assert defaults.CHARGING_EFFICIENCY == charging_math.DEFAULT_EFFICIENCY
        assert defaults.ASSUMED_BATTERY_CAPACITY_KWH == charging_math.DEFAULT_BATTERY_CAPACITY_KWH
        assert defaults.DEFAULT_PRICE_PER_KWH == charging_math.DEFAULT_PRICE_PER_KWH
        assert defaults.POWER_TOLERANCE_RATIO == charging_math.POWER_TOLERANCE_RATIO

    def test_engine_uses_settings_when_not_overridden(self):
        service = ChargingSessionService(MagicMock(), MagicMock())

        assert service.efficiency == settings.CHARGING_EFFICIENCY
        assert service.battery_capacity_kwh == settings.ASSUMED_BATTERY_CAPACITY_KWH
        assert service.default_price_per_kwh == settings.DEFAULT_PRICE_PER_KWH
        assert service.power_tolerance_ratio == settings.POWER_TOLERANCE_RATIO

    def test_explicit_zero_overrides_are_kept(self):
        service = ChargingSessionService(
            MagicMock(),
            MagicMock(),
            efficiency=0.0,
            default_price_per_kwh=0.0,
            power_tolerance_ratio=0.0,
        )

        assert service.efficiency == 0.0
        assert service.default_price_per_kwh == 0.0
        assert service.power_tolerance_ratio == 0.0

    def test_zero_month_window_is_kept(self):
        stats = ChargingStatsService(MagicMock(), month_window=0)
        assert stats.month_window == 0


@pytest.fixture
def production_env(monkeypatch):
    """ENV=production with a fresh engine slot; env caches cleared around the test."""
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setattr(db_module, "_engine", None)
    env.get_env_name.cache_clear()
    env.is_production_env.cache_clear()
    env.is_local_env.cache_clear()
    yield
    env.get_env_name.cache_clear()
    env.is_production_env.cache_clear()
    env.is_local_env.cache_clear()


def test_production_rejects_sqlite(production_env, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", "sqlite:///./evcharge.db")

    assert env.is_production_env() is True
    with pytest.raises(ValueError, match="SQLite"):
        db_module.get_engine()
