from pydantic import BaseModel, Field, EmailStr
from typing import Optional, List
from datetime import datetime

DEFAULT_TRACKED_COMPONENTS = ["Airframe", "Engine 1"]


class EngineDetail(BaseModel):
    model: Optional[str] = None
    serial_number: Optional[str] = None


class PropellerDetail(BaseModel):
    model: Optional[str] = None
    serial_number: Optional[str] = None


class FleetAircraftBase(BaseModel):
    tail_number: str = Field(..., min_length=1)  # Format: N123AB (always uppercase)
    model: str = Field(..., min_length=1)
    serial_number: Optional[str] = None
    aircraft_year: Optional[int] = Field(None, ge=1900)
    base_location: Optional[str] = None  # ICAO, e.g. KTEB

    engine_details: List[EngineDetail] = []
    propeller_details: List[PropellerDetail] = []

    # Maintenance tracking
    is_maintenance_tracked: bool = True
    tracked_component_names: List[str] = Field(default_factory=lambda: list(DEFAULT_TRACKED_COMPONENTS))

    # Contact
    primary_contact_name: Optional[str] = None
    primary_contact_phone: Optional[str] = None
    primary_contact_email: Optional[EmailStr] = None

    internal_notes: Optional[str] = None


class FleetAircraftCreate(FleetAircraftBase):
    pass


class FleetAircraft(FleetAircraftBase):
    id: str = Field(alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True

    @property
    def default_component(self) -> Optional[str]:
        """First tracked component, used when a task names none"""
        for name in self.tracked_component_names:
            if name and name.strip():
                return name.strip()
        return None
