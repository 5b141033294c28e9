"""
Tests for ChargingStatsService and its aggregation helpers.
"""
import uuid
from datetime import datetime
from types import SimpleNamespace

import pytest

from evcharge.models.charging_session import ChargingSession, ChargingSessionStatus
from evcharge.services.charging_stats import ChargingStatsService, favorite_station, monthly_usage
from evcharge.services.session_store import SessionStore


def _make_session(db, user_id="user-123", **overrides):
    defaults = dict(
        id=str(uuid.uuid4()),
        user_id=user_id,
        station_id="evliter-lagos-ikeja",
        station_name="EvLiter Charging Station - Ikeja",
        connector_id="CCS-1",
        start_time=datetime(2025, 3, 10, 9, 0),
        end_time=datetime(2025, 3, 10, 10, 0),
        duration=60,
        energy_delivered=40.0,
        total_cost=7200.0,
        average_power=40.0,
        battery_level=80.0,
        battery_level_start=20.0,
        status=ChargingSessionStatus.COMPLETED,
    )
    defaults.update(overrides)
    session = ChargingSession(**defaults)
    db.add(session)
    db.flush()
    return session


def _row(station_id="a", start_time=datetime(2025, 1, 1), energy=10.0, cost=1000.0):
    return SimpleNamespace(
        station_id=station_id,
        start_time=start_time,
        energy_delivered=energy,
        total_cost=cost,
    )


class TestFavoriteStation:
    def test_most_frequent(self):
        rows = [_row("b"), _row("a"), _row("b")]
        assert favorite_station(rows) == "b"

    def test_tie_goes_to_smallest_id(self):
        rows = [_row("station-z"), _row("station-a"), _row("station-z"), _row("station-a")]
        assert favorite_station(rows) == "station-a"

    def test_no_sessions(self):
        assert favorite_station([]) is None


class TestMonthlyUsage:
    def test_buckets_by_month_newest_first(self):
        rows = [
            _row(start_time=datetime(2025, 1, 31, 23, 0), energy=10, cost=1000),
            _row(start_time=datetime(2025, 2, 1, 0, 30), energy=5, cost=500),
            _row(start_time=datetime(2025, 1, 2, 8, 0), energy=2.5, cost=250),
        ]

        usage = monthly_usage(rows, 12)

        assert [m.month for m in usage] == ["2025-02", "2025-01"]
        assert usage[1].sessions == 2
        assert usage[1].energy_used == pytest.approx(12.5)
        assert usage[1].total_spent == pytest.approx(1250.0)

    def test_capped_to_window(self):
        rows = [_row(start_time=datetime(2024, month, 1)) for month in range(1, 13)]
        rows.append(_row(start_time=datetime(2025, 1, 1)))

        usage = monthly_usage(rows, 12)

        assert len(usage) == 12
        assert usage[0].month == "2025-01"
        assert usage[-1].month == "2024-02"


class TestComputeStats:
    def test_empty(self, db):
        stats = ChargingStatsService(SessionStore(db)).compute("user-123")

        assert stats.total_sessions == 0
        assert stats.total_energy_used == 0
        assert stats.total_spent == 0
        assert stats.average_session_duration == 0
        assert stats.favorite_station is None
        assert stats.monthly_usage == []

    def test_totals_over_completed_sessions(self, db):
        for energy, cost, duration in [(10, 1000, 20), (5, 500, 40), (20, 2000, 90)]:
            _make_session(db, energy_delivered=energy, total_cost=cost, duration=duration)
        _make_session(db, status=ChargingSessionStatus.ACTIVE, end_time=None, energy_delivered=7.0)

        stats = ChargingStatsService(SessionStore(db)).compute("user-123")

        assert stats.total_sessions == 3
        assert stats.total_energy_used == pytest.approx(35.0)
        assert stats.total_spent == pytest.approx(3500.0)
        assert stats.average_session_duration == pytest.approx(50.0)

    def test_aggregates_terminal_sessions_only(self, db):
        """Completed and cancelled sessions count; active sessions never do."""
        _make_session(db, duration=60, energy_delivered=40.0, total_cost=7200.0)
        _make_session(
            db,
            station_id="evliter-lagos-lekki",
            start_time=datetime(2025, 2, 3, 9, 0),
            duration=30,
            energy_delivered=10.0,
            total_cost=1700.0,
        )
        _make_session(
            db,
            status=ChargingSessionStatus.CANCELLED,
            start_time=datetime(2025, 3, 12, 9, 0),
            duration=0,
            energy_delivered=0.0,
            total_cost=0.0,
        )
        _make_session(
            db,
            status=ChargingSessionStatus.ACTIVE,
            end_time=None,
            duration=90,
            energy_delivered=99.0,
            total_cost=9999.0,
        )
        _make_session(db, user_id="user-456", energy_delivered=500.0)

        stats = ChargingStatsService(SessionStore(db)).compute("user-123")

        assert stats.total_sessions == 3
        assert stats.total_energy_used == pytest.approx(50.0)
        assert stats.total_spent == pytest.approx(8900.0)
        assert stats.average_session_duration == pytest.approx(30.0)
        assert stats.favorite_station == "evliter-lagos-ikeja"
        assert [(m.month, m.sessions) for m in stats.monthly_usage] == [("2025-03", 2), ("2025-02", 1)]

    def test_month_window_override(self, db):
        _make_session(db, start_time=datetime(2025, 1, 5, 9, 0))
        _make_session(db, start_time=datetime(2025, 2, 5, 9, 0))

        stats = ChargingStatsService(SessionStore(db), month_window=1).compute("user-123")

        assert [m.month for m in stats.monthly_usage] == ["2025-02"]
