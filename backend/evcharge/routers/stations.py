# evcharge/routers/stations.py
from typing import List

from fastapi import APIRouter, HTTPException, Query

from ..core.config import settings
from ..schemas.charging_station import (
    ChargingEstimateResponse,
    ChargingStation,
    StationSearchRequest,
    StationSearchResponse,
)
from ..services.charging_math import cost_for_energy, estimate_charging_time_minutes
from ..services.station_directory import station_directory

router = APIRouter()  # main_simple.py mounts with prefix="/v1/stations"


@router.get("", response_model=List[ChargingStation])
def list_stations():
    return station_directory.list_stations()


@router.post("/search", response_model=StationSearchResponse)
def search_stations(body: StationSearchRequest):
    """Stations near the given coordinates, filtered and sorted by distance."""
    return station_directory.search(body)


@router.get("/{station_id}", response_model=ChargingStation)
def get_station(station_id: str):
    station = station_directory.get_station_by_id(station_id)
    if not station:
        raise HTTPException(status_code=404, detail="Station not found")
    return station


@router.get("/{station_id}/estimate", response_model=ChargingEstimateResponse)
def estimate_charging(
    station_id: str,
    energy_kwh: float = Query(..., gt=0, le=500),
    efficiency: float = Query(settings.CHARGING_EFFICIENCY, gt=0, le=1),
):
    """Estimated time and cost to deliver energy_kwh at this station."""
    station = station_directory.get_station_by_id(station_id)
    if not station:
        raise HTTPException(status_code=404, detail="Station not found")

    price = station.price_per_kwh or settings.DEFAULT_PRICE_PER_KWH
    return ChargingEstimateResponse(
        station_id=station.id,
        energy_needed_kwh=energy_kwh,
        power_output=station.power_output,
        efficiency=efficiency,
        estimated_minutes=estimate_charging_time_minutes(station.power_output, energy_kwh, efficiency),
        price_per_kwh=price,
        estimated_cost=round(cost_for_energy(energy_kwh, price), 2),
    )
