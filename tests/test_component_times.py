"""
Test Component Times Accumulation

Tests for:
- Flight time / cycle accumulation per component family
- APU run time
- Reversal of a leg (clamped at zero)
- Leg duration from hobbs or clock times
"""

import pytest

from models.component_times import ComponentTime
from models.flight_log import FlightLogLegData
from services.component_times import apply_leg_usage, flight_duration_hours


def leg(**overrides) -> FlightLogLegData:
    data = {
        "taxi_out_time_mins": 10,
        "take_off_time": "10:00",
        "hobbs_take_off": 1000.0,
        "landing_time": "11:30",
        "hobbs_landing": 1001.5,
        "taxi_in_time_mins": 5,
        "fob_starting_fuel": 3000,
        "ending_fuel": 2000,
    }
    data.update(overrides)
    return FlightLogLegData(**data)


class TestApplyLegUsage:
    """Accumulation rule applied when a leg is saved"""

    def test_airframe_engine_propeller_accumulate(self):
        times = {
            "Airframe": ComponentTime(time=100.0, cycles=50),
            "Engine 1": ComponentTime(time=80.0, cycles=40),
        }
        updated = apply_leg_usage(times, ["Airframe", "Engine 1", "Propeller 1"], 1.5)

        assert updated["Airframe"] == ComponentTime(time=101.5, cycles=51)
        assert updated["Engine 1"] == ComponentTime(time=81.5, cycles=41)
        assert updated["Propeller 1"] == ComponentTime(time=1.5, cycles=1)

    def test_input_map_is_not_modified(self):
        times = {"Airframe": ComponentTime(time=100.0, cycles=50)}
        apply_leg_usage(times, ["Airframe"], 2.0)
        assert times["Airframe"] == ComponentTime(time=100.0, cycles=50)

    def test_apu_gets_run_time_only(self):
        times = {"APU": ComponentTime(time=10.0, cycles=3)}
        updated = apply_leg_usage(times, ["Airframe", "APU"], 2.0, apu_hours=0.4)
        assert updated["APU"] == ComponentTime(time=10.4, cycles=3)

    def test_apu_unchanged_without_run_time(self):
        updated = apply_leg_usage({}, ["APU"], 2.0)
        assert updated["APU"] == ComponentTime(time=0.0, cycles=0)

    def test_other_components_created_but_unchanged(self):
        updated = apply_leg_usage({}, ["Landing Gear"], 2.0)
        assert updated["Landing Gear"] == ComponentTime()

    def test_names_are_trimmed_and_blank_skipped(self):
        updated = apply_leg_usage({}, ["  Engine 2 ", "  "], 1.0)
        assert list(updated) == ["Engine 2"]

    def test_default_components_when_none_tracked(self):
        updated = apply_leg_usage({}, [], 1.0)
        assert set(updated) == {"Airframe", "Engine 1"}

    def test_times_rounded_to_two_decimals(self):
        updated = apply_leg_usage({"Airframe": ComponentTime(time=0.1)}, ["Airframe"], 0.2)
        assert updated["Airframe"].time == 0.3

    def test_reversal_restores_previous_values(self):
        times = {"Airframe": ComponentTime(time=100.0, cycles=50), "APU": ComponentTime(time=5.0)}
        added = apply_leg_usage(times, ["Airframe", "APU"], 1.5, apu_hours=0.5)
        removed = apply_leg_usage(added, ["Airframe", "APU"], 1.5, apu_hours=0.5, sign=-1)
        assert removed == times

    def test_reversal_clamps_at_zero(self):
        times = {"Airframe": ComponentTime(time=0.5, cycles=0)}
        updated = apply_leg_usage(times, ["Airframe"], 2.0, sign=-1)
        assert updated["Airframe"] == ComponentTime(time=0.0, cycles=0)


class TestFlightDuration:
    """Leg flight time in decimal hours"""

    def test_hobbs_difference(self):
        assert flight_duration_hours(leg()) == 1.5

    def test_hobbs_rounded(self):
        assert flight_duration_hours(leg(hobbs_take_off=100.0, hobbs_landing=101.333)) == 1.33

    @pytest.mark.parametrize("take_off,landing,expected", [
        ("10:00", "11:30", 1.5),
        ("23:30", "01:00", 1.5),
        ("08:15", "08:35", 0.33),
    ])
    def test_clock_times_when_hobbs_unusable(self, take_off, landing, expected):
        data = leg(take_off_time=take_off, landing_time=landing, hobbs_take_off=0, hobbs_landing=0)
        assert flight_duration_hours(data) == expected
