"""
Schemas for the Charging Session API
"""
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_serializer
from pydantic.alias_generators import to_camel

from ..models.charging_session import ChargingSessionStatus
from .charging_station import ChargingStation, StationLocation


SessionFilter = Literal["recent", "this-month", "all-time"]


class ChargingSessionRead(BaseModel):
    id: str
    user_id: str
    station_id: str
    station_name: str
    connector_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: int  # minutes
    energy_delivered: float  # kWh
    total_cost: float  # Naira
    average_power: float  # kW
    battery_level: float
    battery_level_start: float
    status: ChargingSessionStatus
    station_rating: Optional[int] = None

    # Station snapshot
    station_address: Optional[str] = None
    station_location: Optional[StationLocation] = None
    station_price_per_kwh: Optional[float] = Field(default=None, alias="stationPricePerKWh")
    station_power_output: Optional[float] = None
    station_connector_types: Optional[List[str]] = None
    station_amenities: Optional[List[str]] = None
    station_operating_hours: Optional[str] = None
    station_is_company_station: Optional[bool] = None
    station_realtime_availability: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    @field_serializer("start_time", "end_time")
    def serialize_utc(self, value: Optional[datetime]) -> Optional[str]:
        """Timestamps are stored as naive UTC; send them with an explicit Z."""
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat() + "Z"


class StartChargingSessionRequest(BaseModel):
    station_id: str
    connector_id: str
    connector_type: Optional[str] = None  # inferred from connector_id when omitted
    battery_level_start: float = Field(..., ge=0, le=100)
    station: Optional[ChargingStation] = None  # snapshot; looked up when omitted

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class EndChargingSessionRequest(BaseModel):
    session_id: str
    battery_level_end: Optional[float] = Field(default=None, ge=0, le=100)
    station_rating: Optional[int] = Field(default=None, ge=1, le=5)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UpdateActiveSessionRequest(BaseModel):
    battery_level: float = Field(..., ge=0, le=100)
    energy_delivered: Optional[float] = Field(default=None, ge=0)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ChargingSessionResponse(BaseModel):
    success: bool = True
    data: ChargingSessionRead


class ActiveSessionResponse(BaseModel):
    session: Optional[ChargingSessionRead] = None


class SessionListResponse(BaseModel):
    sessions: List[ChargingSessionRead]


class MonthlyUsage(BaseModel):
    month: str  # "YYYY-MM"
    sessions: int
    energy_used: float  # kWh
    total_spent: float  # Naira

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserStats(BaseModel):
    total_sessions: int = 0
    total_energy_used: float = 0.0
    total_spent: float = 0.0
    average_session_duration: float = 0.0  # minutes
    favorite_station: Optional[str] = None
    monthly_usage: List[MonthlyUsage] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class DashboardResponse(BaseModel):
    sessions: List[ChargingSessionRead]
    stats: UserStats
    active_session: Optional[ChargingSessionRead] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
