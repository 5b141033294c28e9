"""
Tests for the station directory lookup and search.
"""
import pytest

from evcharge.schemas.charging_station import StationLocation, StationSearchRequest
from evcharge.services.station_directory import (
    COMPANY_CHARGING_STATIONS,
    StationDirectory,
    haversine_km,
)


@pytest.fixture
def directory():
    return StationDirectory()


def test_haversine_same_point_is_zero():
    assert haversine_km(6.5244, 3.3792, 6.5244, 3.3792) == 0


def test_haversine_lagos_to_abuja():
    # Roughly 530 km as the crow flies
    assert 500 < haversine_km(6.5244, 3.3792, 9.0765, 7.3986) < 560


def test_get_station_by_id(directory):
    station = directory.get_station_by_id("evliter-lagos-ikeja")

    assert station.power_output == 150
    assert station.price_per_kwh == 180
    assert station.is_company_station is True
    assert directory.get_station_by_id("unknown") is None


def test_lookup_returns_a_copy(directory):
    station = directory.get_station_by_id("evliter-lagos-ikeja")
    station.connector_types.append("Type1")

    assert "Type1" not in directory.get_station_by_id("evliter-lagos-ikeja").connector_types


def test_list_stations(directory):
    assert len(directory.list_stations()) == len(COMPANY_CHARGING_STATIONS)


def test_search_sorted_by_distance(directory):
    result = directory.search(StationSearchRequest(location="Ikeja"))

    distances = [s.distance for s in result.stations]
    assert distances == sorted(distances)
    assert result.stations[0].id == "evliter-lagos-ikeja"
    assert result.stations[0].distance == 0
    assert result.total_count == len(COMPANY_CHARGING_STATIONS)
    assert result.company_stations_count == result.total_count


def test_search_filters(directory):
    request = StationSearchRequest(
        location="Lagos",
        connector_type="CHAdeMO",
        min_power=100,
        max_distance=50,
    )

    result = directory.search(request)

    assert [s.id for s in result.stations] == ["evliter-lagos-ikeja"]
    assert result.total_count == 1


def test_search_around_given_coordinates(directory):
    request = StationSearchRequest(
        location="Wuse 2",
        coordinates=StationLocation(lat=9.0765, lng=7.3986),
        max_distance=25,
    )

    result = directory.search(request)

    assert {s.id for s in result.stations} == {"evliter-abuja-wuse", "evliter-abuja-maitama"}
    assert result.stations[0].id == "evliter-abuja-wuse"
