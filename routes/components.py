"""
Component Times Routes for FlightOps
Current hours/cycles per tracked component of an aircraft
"""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
import logging

from database.mongodb import get_database
from models.component_times import AircraftComponentTimes, ComponentTimesUpdate
from routes.fleet import get_aircraft_or_404
from services.component_times import fetch_component_times, save_component_times

router = APIRouter(prefix="/api/components", tags=["components"])
logger = logging.getLogger(__name__)


@router.get("/aircraft/{aircraft_id}", response_model=AircraftComponentTimes)
async def get_component_times(
    aircraft_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get component times for an aircraft"""
    await get_aircraft_or_404(db, aircraft_id)
    component_times = await fetch_component_times(db, aircraft_id)
    return AircraftComponentTimes(aircraft_id=aircraft_id, component_times=component_times)


@router.put("/aircraft/{aircraft_id}", response_model=AircraftComponentTimes)
async def update_component_times(
    aircraft_id: str,
    data: ComponentTimesUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Replace the component times of an aircraft (manual correction)"""
    await get_aircraft_or_404(db, aircraft_id)

    component_times = {name.strip(): ct for name, ct in data.component_times.items() if name.strip()}
    await save_component_times(db, aircraft_id, component_times)

    logger.info(f"Component times updated for aircraft {aircraft_id}")
    return AircraftComponentTimes(aircraft_id=aircraft_id, component_times=component_times)
