"""
Schemas for the station directory and charging estimates
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


ConnectorType = Literal["Type2", "CCS", "CHAdeMO", "Type1", "GB/T", "All Types"]
Availability = Literal["Available", "Occupied", "Out of Service"]


class StationLocation(BaseModel):
    lat: float
    lng: float


class ChargingStation(BaseModel):
    id: str
    name: str
    address: str
    location: StationLocation
    connector_types: List[str]
    power_output: float  # kW
    realtime_availability: Availability = "Available"
    is_company_station: bool = False
    distance: Optional[float] = None  # km from the search point
    amenities: Optional[List[str]] = None
    operating_hours: Optional[str] = None
    price_per_kwh: Optional[float] = Field(default=None, alias="pricePerKWh")  # Naira

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StationSearchRequest(BaseModel):
    location: str = Field(..., min_length=1)
    connector_type: ConnectorType = "All Types"
    min_power: Optional[float] = Field(default=None, ge=0)
    max_distance: Optional[float] = Field(default=None, ge=0)  # km
    coordinates: Optional[StationLocation] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StationSearchResponse(BaseModel):
    stations: List[ChargingStation]
    total_count: int
    company_stations_count: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ChargingEstimateResponse(BaseModel):
    station_id: str
    energy_needed_kwh: float = Field(alias="energyNeededKWh")
    power_output: float
    efficiency: float
    estimated_minutes: int
    price_per_kwh: float = Field(alias="pricePerKWh")
    estimated_cost: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True
