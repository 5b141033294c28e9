"""
Charging Session Model

ChargingSession: one charging event for one user at one station connector,
from plug-in to completion.

Key design decisions:
- Station attributes are snapshotted at start so later directory changes
  never alter a past session's billing
- duration, average_power and total_cost are derived; they are recomputed
  from start_time/end_time, energy_delivered and the snapshotted price
- At most one ACTIVE session per user (partial unique index below)
"""
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Float, Integer, Boolean, DateTime, JSON, Index, text
from sqlalchemy import Enum as SQLEnum

from ..db import Base
from ..core.uuid_type import UUIDType


class ChargingSessionStatus(str, enum.Enum):
    """Charging session status"""
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = (ChargingSessionStatus.COMPLETED, ChargingSessionStatus.CANCELLED)


class ChargingSession(Base):
    """A user's charging session at a station connector."""
    __tablename__ = "charging_sessions"

    id = Column(UUIDType(), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)  # opaque id from the auth service

    # --- Station / connector ---
    station_id = Column(String, nullable=False)
    station_name = Column(String, nullable=False)
    connector_id = Column(String, nullable=False)

    # --- Timing ---
    start_time = Column(DateTime, nullable=False, default=datetime.utcnow)
    end_time = Column(DateTime, nullable=True)  # set iff status is terminal
    duration = Column(Integer, nullable=False, default=0)  # minutes

    # --- Energy & billing ---
    energy_delivered = Column(Float, nullable=False, default=0.0)  # kWh
    total_cost = Column(Float, nullable=False, default=0.0)  # Naira
    average_power = Column(Float, nullable=False, default=0.0)  # kW

    # --- Battery ---
    battery_level = Column(Float, nullable=False)  # 0-100
    battery_level_start = Column(Float, nullable=False)  # 0-100

    status = Column(
        SQLEnum(
            ChargingSessionStatus,
            name="charging_session_status",
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
        ),
        nullable=False,
        default=ChargingSessionStatus.ACTIVE,
        index=True,
    )
    station_rating = Column(Integer, nullable=True)  # 1-5

    # --- Station snapshot (captured once at start) ---
    station_address = Column(String, nullable=True)
    station_location = Column(JSON, nullable=True)  # {"lat": .., "lng": ..}
    station_price_per_kwh = Column(Float, nullable=True)
    station_power_output = Column(Float, nullable=True)  # rated kW
    station_connector_types = Column(JSON, nullable=True)
    station_amenities = Column(JSON, nullable=True)
    station_operating_hours = Column(String, nullable=True)
    station_is_company_station = Column(Boolean, nullable=True)
    station_realtime_availability = Column(String, nullable=True)

    # --- Metadata ---
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_charging_sessions_user_status", "user_id", "status"),
        Index("ix_charging_sessions_user_start", "user_id", "start_time"),
        # One active session per user, enforced by the database as well as in code
        Index(
            "uq_charging_sessions_one_active_per_user",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status == ChargingSessionStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<ChargingSession {self.id} user={self.user_id} status={self.status}>"
