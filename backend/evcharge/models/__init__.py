"""
Models package
"""
from .charging_session import ChargingSession, ChargingSessionStatus, TERMINAL_STATUSES

__all__ = [
    "ChargingSession",
    "ChargingSessionStatus",
    "TERMINAL_STATUSES",
]
