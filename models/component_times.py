"""
Component Times Model for FlightOps

Current cumulative usage per named component (Airframe, Engine 1, APU...)
of one aircraft. Updated additively whenever a flight log leg is saved.

Collection: aircraft_component_times (one document per aircraft, _id = aircraft_id)
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import datetime


class ComponentTime(BaseModel):
    time: float = Field(default=0.0, ge=0)  # Hours
    cycles: int = Field(default=0, ge=0)


class AircraftComponentTimes(BaseModel):
    aircraft_id: str
    component_times: Dict[str, ComponentTime] = Field(default_factory=dict)
    updated_at: Optional[datetime] = None


class ComponentTimesUpdate(BaseModel):
    component_times: Dict[str, ComponentTime]
