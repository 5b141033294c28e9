"""
Tests for the /v1/stations endpoints and the health check.
"""


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_stations(client):
    response = client.get("/v1/stations")

    assert response.status_code == 200
    stations = response.json()
    assert len(stations) == 10
    assert {"id", "connectorTypes", "powerOutput", "pricePerKWh", "isCompanyStation"} <= set(stations[0])


def test_get_station(client):
    response = client.get("/v1/stations/evliter-lagos-lekki")

    assert response.status_code == 200
    assert response.json()["pricePerKWh"] == 170
    assert response.json()["powerOutput"] == 75


def test_get_unknown_station(client):
    assert client.get("/v1/stations/nowhere").status_code == 404


def test_search_stations(client):
    response = client.post(
        "/v1/stations/search",
        json={"location": "Lagos", "connectorType": "CHAdeMO", "minPower": 100, "maxDistance": 50},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["totalCount"] == 1
    assert body["companyStationsCount"] == 1
    assert body["stations"][0]["id"] == "evliter-lagos-ikeja"


def test_search_requires_location(client):
    assert client.post("/v1/stations/search", json={"location": ""}).status_code == 422


def test_estimate(client):
    """40 kWh at 150 kW and 90% efficiency takes just under 18 minutes."""
    response = client.get("/v1/stations/evliter-lagos-ikeja/estimate?energy_kwh=40")

    assert response.status_code == 200
    body = response.json()
    assert body["estimatedMinutes"] == 18
    assert body["pricePerKWh"] == 180
    assert body["estimatedCost"] == 7200.0
    assert body["energyNeededKWh"] == 40


def test_estimate_unknown_station(client):
    assert client.get("/v1/stations/nowhere/estimate?energy_kwh=40").status_code == 404
