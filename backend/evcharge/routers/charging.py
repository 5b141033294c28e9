# evcharge/routers/charging.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..dependencies.auth import AuthenticatedUser, get_current_user
from ..schemas.charging_session import (
    ActiveSessionResponse,
    ChargingSessionResponse,
    DashboardResponse,
    EndChargingSessionRequest,
    SessionFilter,
    SessionListResponse,
    StartChargingSessionRequest,
    UpdateActiveSessionRequest,
    UserStats,
)
from ..services.charging_session_service import ChargingSessionService
from ..services.charging_stats import ChargingStatsService
from ..services.session_store import SessionStore
from ..services.station_directory import station_directory

router = APIRouter()  # main_simple.py mounts with prefix="/v1/charging"


def get_session_service(db: Session = Depends(get_db)) -> ChargingSessionService:
    return ChargingSessionService(SessionStore(db), station_directory)


def get_stats_service(db: Session = Depends(get_db)) -> ChargingStatsService:
    return ChargingStatsService(SessionStore(db))


@router.get("/sessions", response_model=SessionListResponse)
def list_sessions(
    filter: SessionFilter = Query("all-time"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: AuthenticatedUser = Depends(get_current_user),
    service: ChargingSessionService = Depends(get_session_service),
):
    """Get the user's charging sessions, most recent first."""
    sessions = service.list_sessions(user.id, filter=filter, limit=limit, offset=offset)
    return SessionListResponse(sessions=sessions)


@router.get("/sessions/active", response_model=ActiveSessionResponse)
def get_active_session(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ChargingSessionService = Depends(get_session_service),
):
    """Get the user's active session with real-time values (not persisted)."""
    return ActiveSessionResponse(session=service.get_active(user.id))


@router.get("/stats", response_model=UserStats)
def get_stats(
    user: AuthenticatedUser = Depends(get_current_user),
    stats: ChargingStatsService = Depends(get_stats_service),
):
    return stats.compute(user.id)


@router.post("/sessions/start", response_model=ChargingSessionResponse, status_code=status.HTTP_201_CREATED)
def start_session(
    body: StartChargingSessionRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ChargingSessionService = Depends(get_session_service),
):
    return ChargingSessionResponse(data=service.start(user.id, body))


@router.post("/sessions/end", response_model=ChargingSessionResponse)
def end_session(
    body: EndChargingSessionRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ChargingSessionService = Depends(get_session_service),
):
    return ChargingSessionResponse(data=service.end(user.id, body))


@router.put("/sessions/active/update", response_model=ChargingSessionResponse)
def update_active_session(
    body: UpdateActiveSessionRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ChargingSessionService = Depends(get_session_service),
):
    """Ingest real-time battery level / energy telemetry for the active session."""
    return ChargingSessionResponse(data=service.update_active(user.id, body))


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    user: AuthenticatedUser = Depends(get_current_user),
    service: ChargingSessionService = Depends(get_session_service),
    stats: ChargingStatsService = Depends(get_stats_service),
):
    """Sessions, stats and the active session in one call."""
    return DashboardResponse(
        sessions=service.list_sessions(user.id, filter="all-time", limit=50),
        stats=stats.compute(user.id),
        active_session=service.get_active(user.id),
    )
