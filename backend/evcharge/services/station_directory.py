"""
Station Directory - the operator's own charging stations.

Provides lookup by id (price per kWh, rated power, connector types, ...) for
the session engine and a distance-sorted search for the stations API.
Geocoding of free-text locations is not done here: searches without
coordinates are centred on DEFAULT_SEARCH_COORDINATES.
"""
import logging
import math
from typing import List, Optional

from ..schemas.charging_station import (
    ChargingStation,
    StationLocation,
    StationSearchRequest,
    StationSearchResponse,
)

logger = logging.getLogger(__name__)

# Lagos city centre
DEFAULT_SEARCH_COORDINATES = StationLocation(lat=6.5244, lng=3.3792)

ALL_CONNECTOR_TYPES = "All Types"


def _station(**fields) -> ChargingStation:
    return ChargingStation(is_company_station=True, **fields)


COMPANY_CHARGING_STATIONS: List[ChargingStation] = [
    _station(
        id="evliter-lagos-victoria-island",
        name="EvLiter Charging Hub - Victoria Island",
        address="Ahmadu Bello Way, Victoria Island, Lagos",
        location=StationLocation(lat=6.4281, lng=3.4219),
        connector_types=["Type2", "CCS"],
        power_output=50,
        amenities=["WiFi", "Restroom", "Coffee Shop", "Parking"],
        operating_hours="24/7",
        price_per_kwh=165,
    ),
    _station(
        id="evliter-lagos-ikeja",
        name="EvLiter Charging Station - Ikeja",
        address="Oba Akran Avenue, Ikeja, Lagos",
        location=StationLocation(lat=6.5244, lng=3.3792),
        connector_types=["Type2", "CCS", "CHAdeMO"],
        power_output=150,
        amenities=["WiFi", "Restroom", "Supermarket", "Parking"],
        operating_hours="6:00 AM - 11:00 PM",
        price_per_kwh=180,
    ),
    _station(
        id="evliter-lagos-lekki",
        name="EvLiter Fast Charge - Lekki",
        address="Lekki-Epe Expressway, Lekki Phase 1, Lagos",
        location=StationLocation(lat=6.4654, lng=3.4939),
        connector_types=["CCS", "Type2"],
        power_output=75,
        amenities=["WiFi", "Restroom", "Restaurant", "Parking"],
        operating_hours="24/7",
        price_per_kwh=170,
    ),
    _station(
        id="evliter-abuja-wuse",
        name="EvLiter Charging Hub - Wuse 2",
        address="Ademola Adetokunbo Crescent, Wuse 2, Abuja",
        location=StationLocation(lat=9.0765, lng=7.3986),
        connector_types=["Type2", "CCS", "CHAdeMO"],
        power_output=120,
        amenities=["WiFi", "Restroom", "Shopping Mall", "Parking"],
        operating_hours="24/7",
        price_per_kwh=175,
    ),
    _station(
        id="evliter-abuja-maitama",
        name="EvLiter Charging Station - Maitama",
        address="Ibrahim Way, Maitama, Abuja",
        location=StationLocation(lat=9.0548, lng=7.4907),
        connector_types=["Type2", "CCS"],
        power_output=50,
        realtime_availability="Occupied",
        amenities=["WiFi", "Restroom", "Parking"],
        operating_hours="6:00 AM - 10:00 PM",
        price_per_kwh=165,
    ),
    _station(
        id="evliter-port-harcourt",
        name="EvLiter Charging Hub - Port Harcourt",
        address="Aba Road, GRA Phase 2, Port Harcourt, Rivers",
        location=StationLocation(lat=4.8156, lng=7.0498),
        connector_types=["Type2", "CCS"],
        power_output=60,
        amenities=["WiFi", "Restroom", "Parking"],
        operating_hours="6:00 AM - 11:00 PM",
        price_per_kwh=160,
    ),
    _station(
        id="evliter-kano",
        name="EvLiter Charging Station - Kano",
        address="Murtala Mohammed Way, Kano",
        location=StationLocation(lat=11.9964, lng=8.5167),
        connector_types=["Type2", "CCS"],
        power_output=45,
        amenities=["WiFi", "Restroom", "Parking"],
        operating_hours="7:00 AM - 9:00 PM",
        price_per_kwh=155,
    ),
    _station(
        id="evliter-ibadan",
        name="EvLiter Charging Hub - Ibadan",
        address="Dugbe Market Road, Ibadan, Oyo",
        location=StationLocation(lat=7.3775, lng=3.947),
        connector_types=["Type2", "CCS", "CHAdeMO"],
        power_output=55,
        amenities=["WiFi", "Restroom", "Market Access", "Parking"],
        operating_hours="6:00 AM - 10:00 PM",
        price_per_kwh=158,
    ),
    _station(
        id="evliter-enugu",
        name="EvLiter Charging Station - Enugu",
        address="Ogui Road, Enugu",
        location=StationLocation(lat=6.4584, lng=7.5464),
        connector_types=["Type2", "CCS"],
        power_output=50,
        amenities=["WiFi", "Restroom", "Parking"],
        operating_hours="6:00 AM - 10:00 PM",
        price_per_kwh=162,
    ),
    _station(
        id="evliter-nsukka",
        name="EvLiter Charging Hub - Nsukka",
        address="University Road, Nsukka, Enugu",
        location=StationLocation(lat=6.8567, lng=7.3958),
        connector_types=["Type2", "CCS"],
        power_output=40,
        amenities=["WiFi", "Restroom", "Parking", "Café"],
        operating_hours="7:00 AM - 9:00 PM",
        price_per_kwh=150,
    ),
]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate Haversine distance between two points in kilometers.
    """
    # Earth's radius in kilometers
    R = 6371

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return R * c


class StationDirectory:
    """Read-only directory over a list of stations."""

    def __init__(self, stations: Optional[List[ChargingStation]] = None):
        self._stations = {s.id: s for s in (stations if stations is not None else COMPANY_CHARGING_STATIONS)}

    def get_station_by_id(self, station_id: str) -> Optional[ChargingStation]:
        station = self._stations.get(station_id)
        return station.model_copy(deep=True) if station else None

    def list_stations(self) -> List[ChargingStation]:
        return [s.model_copy(deep=True) for s in self._stations.values()]

    def search(self, request: StationSearchRequest) -> StationSearchResponse:
        """
        Find stations near the requested coordinates.

        Filters by connector type ("All Types" disables it), minimum power
        and maximum distance (km), then sorts closest first.
        """
        origin = request.coordinates or DEFAULT_SEARCH_COORDINATES
        if request.coordinates is None:
            logger.info(f"No coordinates for '{request.location}', searching around default location")

        stations = []
        for station in self._stations.values():
            distance = haversine_km(origin.lat, origin.lng, station.location.lat, station.location.lng)
            stations.append(station.model_copy(update={"distance": round(distance, 2)}, deep=True))

        if request.connector_type and request.connector_type != ALL_CONNECTOR_TYPES:
            stations = [s for s in stations if request.connector_type in s.connector_types]
        if request.min_power:
            stations = [s for s in stations if s.power_output >= request.min_power]
        if request.max_distance:
            stations = [s for s in stations if (s.distance or 0) <= request.max_distance]

        stations.sort(key=lambda s: s.distance or 0)

        return StationSearchResponse(
            stations=stations,
            total_count=len(stations),
            company_stations_count=len([s for s in stations if s.is_company_station]),
        )


station_directory = StationDirectory()
