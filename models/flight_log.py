"""
Flight Log Models for FlightOps

One document per trip leg (_id = "{trip_id}_{leg_index}").
Saving a leg accumulates flight time and cycles onto the aircraft's
component times.

Collection: flight_logs
"""

from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime
from enum import Enum

TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"  # HH:MM 24h


class ApproachType(str, Enum):
    ILS = "ILS"
    GPS = "GPS"
    VOR = "VOR"
    RNAV = "RNAV"
    VISUAL = "Visual"
    NDB = "NDB"
    OTHER = "Other"


class FuelUnit(str, Enum):
    LBS = "Lbs"
    GAL = "Gal"
    KGS = "Kgs"
    LTRS = "Ltrs"


class FlightLogLegData(BaseModel):
    taxi_out_time_mins: int = Field(..., ge=0)
    take_off_time: str = Field(..., pattern=TIME_PATTERN)
    hobbs_take_off: float = Field(..., ge=0)
    landing_time: str = Field(..., pattern=TIME_PATTERN)
    hobbs_landing: float = Field(..., ge=0)
    taxi_in_time_mins: int = Field(..., ge=0)

    approaches: int = Field(default=0, ge=0)
    approach_type: Optional[ApproachType] = None
    day_landings: int = Field(default=0, ge=0)
    night_landings: int = Field(default=0, ge=0)

    night_time_decimal: float = Field(default=0.0, ge=0)
    instrument_time_decimal: float = Field(default=0.0, ge=0)

    fob_starting_fuel: float = Field(..., ge=0)
    fuel_purchased_amount: float = Field(default=0.0, ge=0)
    fuel_purchased_unit: FuelUnit = FuelUnit.LBS
    ending_fuel: float = Field(..., ge=0)
    fuel_cost: float = Field(default=0.0, ge=0)
    post_leg_apu_time_decimal: float = Field(default=0.0, ge=0)


class FlightLogLegCreate(FlightLogLegData):
    aircraft_id: str  # Aircraft flown on this leg (from the trip)

    @model_validator(mode="after")
    def check_consistency(self):
        if self.hobbs_landing <= self.hobbs_take_off:
            raise ValueError("Hobbs landing must be greater than hobbs take-off")
        if self.ending_fuel > self.fob_starting_fuel + (self.fuel_purchased_amount or 0):
            raise ValueError("Ending fuel cannot be more than starting fuel plus purchased fuel")
        return self


class FlightLogLeg(FlightLogLegData):
    id: str = Field(alias="_id")
    trip_id: str
    leg_index: int = Field(..., ge=0)
    aircraft_id: str

    # Contribution applied to component times (kept so it can be reversed)
    calculated_flight_time_decimal: float = 0.0
    applied_to_component_times: bool = False
    applied_components: List[str] = []

    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True
