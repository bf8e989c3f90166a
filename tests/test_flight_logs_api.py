"""
Test Flight Log API

Tests for:
- PUT /api/flight-logs/{trip_id}/{leg_index} - Save leg, accumulate component times
- Re-saving a leg replaces (not adds to) its contribution
- GET /api/flight-logs/{trip_id}/{leg_index}
- DELETE /api/flight-logs/{flight_log_id} - Reverses contribution
"""

import pytest


def leg_payload(aircraft_id: str, **overrides) -> dict:
    data = {
        "aircraft_id": aircraft_id,
        "taxi_out_time_mins": 12,
        "take_off_time": "14:05",
        "hobbs_take_off": 1000.0,
        "landing_time": "15:35",
        "hobbs_landing": 1001.5,
        "taxi_in_time_mins": 6,
        "day_landings": 1,
        "fob_starting_fuel": 3000,
        "fuel_purchased_amount": 0,
        "ending_fuel": 2100,
        "post_leg_apu_time_decimal": 0.5,
    }
    data.update(overrides)
    return data


class TestFlightLogsAPI:
    """Flight log legs and their effect on component times"""

    @pytest.fixture
    def aircraft_id(self, client, aircraft):
        client.put(f"/api/components/aircraft/{aircraft['_id']}", json={
            "component_times": {"Airframe": {"time": 100.0, "cycles": 50}}
        })
        return aircraft["_id"]

    def component_times(self, client, aircraft_id):
        response = client.get(f"/api/components/aircraft/{aircraft_id}")
        assert response.status_code == 200
        return response.json()["component_times"]

    def test_save_leg_accumulates(self, client, aircraft_id):
        response = client.put("/api/flight-logs/trip-1/0", json=leg_payload(aircraft_id))
        assert response.status_code == 200

        log = response.json()
        assert log["_id"] == "trip-1_0"
        assert log["trip_id"] == "trip-1"
        assert log["leg_index"] == 0
        assert log["calculated_flight_time_decimal"] == 1.5
        assert log["applied_to_component_times"] is True
        assert log["applied_components"] == ["Airframe", "Engine 1", "APU"]

        times = self.component_times(client, aircraft_id)
        assert times["Airframe"] == {"time": 101.5, "cycles": 51}
        assert times["Engine 1"] == {"time": 1.5, "cycles": 1}
        assert times["APU"] == {"time": 0.5, "cycles": 0}

    def test_resave_leg_replaces_contribution(self, client, aircraft_id):
        client.put("/api/flight-logs/trip-1/0", json=leg_payload(aircraft_id))
        response = client.put("/api/flight-logs/trip-1/0", json=leg_payload(aircraft_id, hobbs_landing=1002.0))
        assert response.status_code == 200
        assert response.json()["calculated_flight_time_decimal"] == 2.0

        times = self.component_times(client, aircraft_id)
        assert times["Airframe"] == {"time": 102.0, "cycles": 51}
        assert times["Engine 1"] == {"time": 2.0, "cycles": 1}

    def test_get_leg(self, client, aircraft_id):
        client.put("/api/flight-logs/trip-1/1", json=leg_payload(aircraft_id))

        response = client.get("/api/flight-logs/trip-1/1")
        assert response.status_code == 200
        assert response.json()["hobbs_landing"] == 1001.5

        missing = client.get("/api/flight-logs/trip-1/7")
        assert missing.status_code == 200
        assert missing.json() is None

    def test_delete_leg_reverses_contribution(self, client, aircraft_id):
        client.put("/api/flight-logs/trip-1/0", json=leg_payload(aircraft_id))

        response = client.delete("/api/flight-logs/trip-1_0")
        assert response.status_code == 200

        times = self.component_times(client, aircraft_id)
        assert times["Airframe"] == {"time": 100.0, "cycles": 50}
        assert times["Engine 1"] == {"time": 0.0, "cycles": 0}
        assert times["APU"] == {"time": 0.0, "cycles": 0}

        assert client.delete("/api/flight-logs/trip-1_0").status_code == 404

    def test_untracked_aircraft_not_accumulated(self, client):
        aircraft = client.post("/api/fleet", json={
            "tail_number": "N555XX", "model": "PC-12", "is_maintenance_tracked": False
        }).json()

        response = client.put("/api/flight-logs/trip-2/0", json=leg_payload(aircraft["_id"]))
        assert response.status_code == 200
        assert response.json()["applied_to_component_times"] is False
        assert self.component_times(client, aircraft["_id"]) == {}

    def test_unknown_aircraft(self, client):
        response = client.put("/api/flight-logs/trip-3/0", json=leg_payload("missing"))
        assert response.status_code == 404

    @pytest.mark.parametrize("overrides", [
        {"hobbs_landing": 999.0},
        {"ending_fuel": 5000},
        {"take_off_time": "25:00"},
    ])
    def test_invalid_leg_rejected(self, client, aircraft_id, overrides):
        response = client.put("/api/flight-logs/trip-4/0", json=leg_payload(aircraft_id, **overrides))
        assert response.status_code == 422
