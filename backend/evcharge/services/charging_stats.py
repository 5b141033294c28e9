"""
Charging statistics - per-user aggregates over finished sessions.

Recomputed on every request from COMPLETED and CANCELLED sessions; active
sessions never count.
"""
from collections import Counter, defaultdict
from typing import Dict, List, Optional

from ..core.config import settings
from ..models.charging_session import ChargingSession, TERMINAL_STATUSES
from ..schemas.charging_session import MonthlyUsage, UserStats
from .session_store import SessionStore


def favorite_station(sessions: List[ChargingSession]) -> Optional[str]:
    """Most frequent station id; ties go to the lexicographically smallest id."""
    counts = Counter(s.station_id for s in sessions)
    if not counts:
        return None
    return min(counts.items(), key=lambda item: (-item[1], item[0]))[0]


def monthly_usage(sessions: List[ChargingSession], months: int) -> List[MonthlyUsage]:
    """Per YYYY-MM buckets of start time, most recent month first, capped at `months`."""
    buckets: Dict[str, Dict[str, float]] = defaultdict(
        lambda: {"sessions": 0, "energy_used": 0.0, "total_spent": 0.0}
    )
    for s in sessions:
        bucket = buckets[s.start_time.strftime("%Y-%m")]
        bucket["sessions"] += 1
        bucket["energy_used"] += s.energy_delivered or 0
        bucket["total_spent"] += s.total_cost or 0

    return [
        MonthlyUsage(
            month=month,
            sessions=int(data["sessions"]),
            energy_used=data["energy_used"],
            total_spent=data["total_spent"],
        )
        for month, data in sorted(buckets.items(), reverse=True)[:months]
    ]


class ChargingStatsService:
    """Compute UserStats for a user from the session store."""

    def __init__(self, store: SessionStore, month_window: Optional[int] = None):
        self.store = store
        self.month_window = month_window if month_window is not None else settings.STATS_MONTH_WINDOW

    def compute(self, user_id: str) -> UserStats:
        sessions = self.store.list_by_user_and_statuses(user_id, TERMINAL_STATUSES)

        total_sessions = len(sessions)
        total_duration = sum(s.duration or 0 for s in sessions)

        return UserStats(
            total_sessions=total_sessions,
            total_energy_used=sum(s.energy_delivered or 0 for s in sessions),
            total_spent=sum(s.total_cost or 0 for s in sessions),
            average_session_duration=total_duration / total_sessions if total_sessions else 0.0,
            favorite_station=favorite_station(sessions),
            monthly_usage=monthly_usage(sessions, self.month_window),
        )
