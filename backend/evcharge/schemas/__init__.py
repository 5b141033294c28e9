# Schemas package
from .charging_session import (
    ChargingSessionRead,
    StartChargingSessionRequest,
    EndChargingSessionRequest,
    UpdateActiveSessionRequest,
    UserStats,
    MonthlyUsage,
)
from .charging_station import ChargingStation, StationLocation

__all__ = [
    "ChargingSessionRead", "StartChargingSessionRequest", "EndChargingSessionRequest",
    "UpdateActiveSessionRequest", "UserStats", "MonthlyUsage",
    "ChargingStation", "StationLocation",
]
