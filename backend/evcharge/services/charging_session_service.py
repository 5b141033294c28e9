"""
Charging Session Service - lifecycle and real-time accounting for charging sessions.

State machine: ACTIVE -> COMPLETED (end) and ACTIVE -> CANCELLED; terminal
states are never mutated.

Real-time values (energy, battery level, cost) are derived lazily from
wall-clock time whenever a session is read or updated; nothing ticks in the
background. Telemetry from the client is reconciled with the time-derived
projection by taking the maximum, so energy and battery level never regress
and re-polling update is safe.
"""
import logging
import re
from typing import List, Optional

from ..core.config import settings
from ..models.charging_session import ChargingSession, ChargingSessionStatus
from ..schemas.charging_session import (
    ChargingSessionRead,
    EndChargingSessionRequest,
    StartChargingSessionRequest,
    UpdateActiveSessionRequest,
)
from ..schemas.charging_station import ChargingStation
from .charging_math import (
    average_power,
    cost_for_energy,
    elapsed_minutes,
    energy_from_battery_change,
    energy_from_power,
    real_time_values,
    utcnow,
)
from .errors import ConflictError, DependencyError, NotFoundError, ValidationError
from .session_store import SessionStore
from .station_directory import StationDirectory

logger = logging.getLogger(__name__)


class ChargingSessionService:
    """Start, update, end and read charging sessions for a user."""

    def __init__(
        self,
        store: SessionStore,
        stations: StationDirectory,
        efficiency: Optional[float] = None,
        battery_capacity_kwh: Optional[float] = None,
        default_price_per_kwh: Optional[float] = None,
        power_tolerance_ratio: Optional[float] = None,
    ):
        self.store = store
        self.stations = stations
        self.efficiency = efficiency if efficiency is not None else settings.CHARGING_EFFICIENCY
        self.battery_capacity_kwh = (
            battery_capacity_kwh if battery_capacity_kwh is not None else settings.ASSUMED_BATTERY_CAPACITY_KWH
        )
        self.default_price_per_kwh = (
            default_price_per_kwh if default_price_per_kwh is not None else settings.DEFAULT_PRICE_PER_KWH
        )
        self.power_tolerance_ratio = (
            power_tolerance_ratio if power_tolerance_ratio is not None else settings.POWER_TOLERANCE_RATIO
        )

    def start(self, user_id: str, request: StartChargingSessionRequest) -> ChargingSessionRead:
        """
        Start a new charging session.

        Raises:
            ConflictError: the user already has an active session
            ValidationError: unknown station, station id mismatch or
                unsupported connector type
        """
        if self.store.find_active_by_user(user_id):
            raise ConflictError("User already has an active charging session")

        station = request.station or self._lookup_station(request.station_id)

        if station.id != request.station_id:
            raise ValidationError("Station ID mismatch between request and station data")

        connector_type = self._connector_type(request, station)
        if connector_type not in station.connector_types:
            raise ValidationError(
                f"Connector type {connector_type} is not available at this station. "
                f"Available types: {', '.join(station.connector_types)}"
            )

        session = ChargingSession(
            user_id=user_id,
            station_id=request.station_id,
            station_name=station.name,
            connector_id=request.connector_id,
            start_time=utcnow(),
            status=ChargingSessionStatus.ACTIVE,
            battery_level=request.battery_level_start,
            battery_level_start=request.battery_level_start,
            duration=0,
            energy_delivered=0.0,
            total_cost=0.0,
            average_power=0.0,
            station_address=station.address,
            station_location=station.location.model_dump(),
            station_price_per_kwh=station.price_per_kwh,
            station_power_output=station.power_output,
            station_connector_types=list(station.connector_types),
            station_amenities=list(station.amenities) if station.amenities is not None else None,
            station_operating_hours=station.operating_hours,
            station_is_company_station=station.is_company_station,
            station_realtime_availability=station.realtime_availability,
        )
        session = self.store.create(session)

        logger.info(
            f"Started charging session {session.id} for user {user_id} "
            f"at {session.station_id} connector={session.connector_id}"
        )
        return ChargingSessionRead.model_validate(session)

    def update_active(self, user_id: str, request: UpdateActiveSessionRequest) -> ChargingSessionRead:
        """
        Ingest real-time telemetry for the user's active session.

        Battery level and energy become the max of the reported value and the
        time-derived projection; duration, average power and cost are
        recomputed from the reconciled energy.

        Raises:
            NotFoundError: the user has no active session
        """
        session = self.store.find_active_by_user(user_id)
        if not session:
            raise NotFoundError("No active charging session found")

        price = self._price_for(session)
        projected = real_time_values(
            session,
            price,
            now=utcnow(),
            battery_capacity_kwh=self.battery_capacity_kwh,
            efficiency=self.efficiency,
        )

        session.battery_level = max(request.battery_level, projected.battery_level)
        if request.energy_delivered is not None:
            session.energy_delivered = max(request.energy_delivered, projected.energy_delivered)
        else:
            session.energy_delivered = projected.energy_delivered

        session.duration = projected.duration
        session.average_power = round(average_power(session.energy_delivered, session.duration), 2)
        session.total_cost = round(cost_for_energy(session.energy_delivered, price), 2)

        session = self.store.save(session)
        logger.info(
            f"Updated session {session.id}: battery={session.battery_level}% "
            f"energy={session.energy_delivered}kWh cost={session.total_cost}"
        )
        return ChargingSessionRead.model_validate(session)

    def end(self, user_id: str, request: EndChargingSessionRequest) -> ChargingSessionRead:
        """
        End an active session and compute its final billing.

        An explicit battery_level_end is authoritative. Sessions without any
        energy telemetry get an estimate, first from the battery change and
        otherwise from rated power x duration.

        Raises:
            NotFoundError: no active session with this id for the user
        """
        session = self.store.find_by_id(request.session_id, user_id)
        if not session or not session.is_active:
            raise NotFoundError("Active charging session not found")

        end_time = utcnow()
        duration = elapsed_minutes(session.start_time, end_time)
        rated_power = session.station_power_output or 0

        if request.battery_level_end is not None:
            session.battery_level = request.battery_level_end

        if session.energy_delivered == 0 and request.battery_level_end is not None:
            session.energy_delivered = round(
                energy_from_battery_change(
                    session.battery_level_start,
                    request.battery_level_end,
                    self.battery_capacity_kwh,
                ),
                2,
            )

        if duration > 0 and session.energy_delivered > 0:
            session.average_power = round(average_power(session.energy_delivered, duration), 2)
            if rated_power and session.average_power > rated_power * self.power_tolerance_ratio:
                logger.warning(
                    f"Average power ({session.average_power:.2f} kW) exceeds station power output "
                    f"({rated_power} kW) for session {session.id}"
                )
        elif rated_power and duration > 0 and session.energy_delivered == 0:
            # No telemetry at all: assume the charger ran at rated power
            session.energy_delivered = round(energy_from_power(rated_power, duration / 60, efficiency=1.0), 2)
            session.average_power = rated_power

        session.total_cost = round(cost_for_energy(session.energy_delivered, self._price_for(session)), 2)
        session.end_time = end_time
        session.duration = duration
        session.status = ChargingSessionStatus.COMPLETED
        if request.station_rating:
            session.station_rating = request.station_rating

        session = self.store.save(session)
        logger.info(
            f"Ended charging session {session.id}: {session.duration}min, "
            f"{session.energy_delivered}kWh, cost={session.total_cost}"
        )
        return ChargingSessionRead.model_validate(session)

    def get_active(self, user_id: str) -> Optional[ChargingSessionRead]:
        """
        Return the user's active session with values projected to now.

        Read-only: the projection is applied to the returned copy and never
        persisted.
        """
        session = self.store.find_active_by_user(user_id)
        if not session:
            return None

        projected = real_time_values(
            session,
            self._price_for(session),
            now=utcnow(),
            battery_capacity_kwh=self.battery_capacity_kwh,
            efficiency=self.efficiency,
        )
        return ChargingSessionRead.model_validate(session).model_copy(
            update={
                "energy_delivered": projected.energy_delivered,
                "average_power": projected.average_power,
                "total_cost": projected.total_cost,
                "battery_level": projected.battery_level,
                "duration": projected.duration,
            }
        )

    def list_sessions(
        self,
        user_id: str,
        filter: str = "all-time",
        limit: int = 50,
        offset: int = 0,
    ) -> List[ChargingSessionRead]:
        """Get a user's charging sessions, most recent first."""
        sessions = self.store.list_by_user(user_id, filter=filter, limit=limit, offset=offset)
        return [ChargingSessionRead.model_validate(s) for s in sessions]

    def _lookup_station(self, station_id: str) -> ChargingStation:
        try:
            station = self.stations.get_station_by_id(station_id)
        except Exception as e:
            logger.error(f"Station directory lookup failed for {station_id}: {e}")
            raise DependencyError("Station directory unavailable")
        if station is None:
            raise ValidationError(f"Station {station_id} not found")
        return station

    @staticmethod
    def _connector_type(request: StartChargingSessionRequest, station: ChargingStation) -> str:
        """Explicit connector type, else the connector id itself or its type prefix (e.g. "CCS-2")."""
        if request.connector_type:
            return request.connector_type
        if request.connector_id in station.connector_types:
            return request.connector_id
        return re.split(r"[-_:#]", request.connector_id, maxsplit=1)[0]

    def _price_for(self, session: ChargingSession) -> float:
        """Snapshotted price, else the directory's current price, else the default."""
        if session.station_price_per_kwh and session.station_price_per_kwh > 0:
            return session.station_price_per_kwh

        try:
            station = self.stations.get_station_by_id(session.station_id)
            if station and station.price_per_kwh:
                return station.price_per_kwh
        except Exception as e:
            logger.warning(f"Price lookup failed for station {session.station_id}: {e}")

        logger.warning(
            f"No price for station {session.station_id}, "
            f"using default {self.default_price_per_kwh}/kWh"
        )
        return self.default_price_per_kwh
