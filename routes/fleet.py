"""
Fleet Routes - Aircraft registry and fleet-wide maintenance overview
"""

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel
from datetime import datetime, date
from typing import Dict, List, Optional
import logging
import uuid

from config import Settings, get_settings
from database.mongodb import get_database
from models.aircraft import FleetAircraft, FleetAircraftCreate
from models.maintenance import TaskDueStatus
from services.maintenance_due import count_by_status, most_urgent
from services.maintenance_tasks import evaluate_aircraft_tasks

router = APIRouter(prefix="/api/fleet", tags=["fleet"])
logger = logging.getLogger(__name__)


class FleetOverviewItem(BaseModel):
    aircraft_id: str
    tail_number: str
    model: str
    next_due_item: str
    most_urgent: Optional[TaskDueStatus] = None
    status_counts: Dict[str, int] = {}


def format_tail_number(tail_number: str) -> str:
    """Format tail number to uppercase"""
    return tail_number.upper().strip()


async def get_aircraft_or_404(db: AsyncIOMotorDatabase, aircraft_id: str) -> FleetAircraft:
    aircraft = await db.fleet_aircraft.find_one({"_id": aircraft_id})
    if not aircraft:
        logger.warning(f"Aircraft {aircraft_id} not found")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Aircraft not found"
        )
    return FleetAircraft(**aircraft)


@router.get("", response_model=List[FleetAircraft])
async def get_fleet(db: AsyncIOMotorDatabase = Depends(get_database)):
    """Get all fleet aircraft"""
    cursor = db.fleet_aircraft.find({}).sort("tail_number", 1)
    aircraft_list = await cursor.to_list(length=500)
    return [FleetAircraft(**ac) for ac in aircraft_list]


@router.get("/overview", response_model=List[FleetOverviewItem])
async def get_fleet_overview(
    db: AsyncIOMotorDatabase = Depends(get_database),
    settings: Settings = Depends(get_settings)
):
    """
    Most urgent maintenance item per maintenance-tracked aircraft.
    Only active, alerting tasks are considered.
    """
    cursor = db.fleet_aircraft.find({"is_maintenance_tracked": True}).sort("tail_number", 1)
    aircraft_docs = await cursor.to_list(length=500)
    today = date.today()

    overview = []
    for doc in aircraft_docs:
        aircraft = FleetAircraft(**doc)
        evaluations = await evaluate_aircraft_tasks(db, aircraft, settings, today=today, alerting_only=True)
        urgent = most_urgent(evaluations)

        overview.append(FleetOverviewItem(
            aircraft_id=aircraft.id,
            tail_number=aircraft.tail_number,
            model=aircraft.model,
            next_due_item=urgent.item_title if urgent else "No items tracked",
            most_urgent=urgent,
            status_counts=count_by_status(evaluations)
        ))

    logger.info(f"Fleet overview built for {len(overview)} aircraft")
    return overview


@router.get("/{aircraft_id}", response_model=FleetAircraft)
async def get_fleet_aircraft(
    aircraft_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    return await get_aircraft_or_404(db, aircraft_id)


@router.post("", response_model=FleetAircraft, status_code=status.HTTP_201_CREATED)
async def create_fleet_aircraft(
    aircraft: FleetAircraftCreate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Add an aircraft to the fleet"""
    tail_number = format_tail_number(aircraft.tail_number)

    existing = await db.fleet_aircraft.find_one({"tail_number": tail_number})
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Aircraft with tail number {tail_number} already exists"
        )

    now = datetime.utcnow()
    aircraft_dict = {
        **aircraft.model_dump(),
        "_id": str(uuid.uuid4()),
        "tail_number": tail_number,
        "created_at": now,
        "updated_at": now
    }

    await db.fleet_aircraft.insert_one(aircraft_dict)
    logger.info(f"Aircraft {tail_number} added to fleet")

    return FleetAircraft(**aircraft_dict)


@router.put("/{aircraft_id}", response_model=FleetAircraft)
async def save_fleet_aircraft(
    aircraft_id: str,
    aircraft: FleetAircraftCreate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Create or replace an aircraft under a known id"""
    now = datetime.utcnow()
    update_data = {
        **aircraft.model_dump(),
        "tail_number": format_tail_number(aircraft.tail_number),
        "updated_at": now
    }

    await db.fleet_aircraft.update_one(
        {"_id": aircraft_id},
        {"$set": update_data, "$setOnInsert": {"created_at": now}},
        upsert=True
    )
    logger.info(f"Aircraft {aircraft_id} saved")

    return await get_aircraft_or_404(db, aircraft_id)


@router.delete("/{aircraft_id}")
async def delete_fleet_aircraft(
    aircraft_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Remove an aircraft from the fleet"""
    result = await db.fleet_aircraft.delete_one({"_id": aircraft_id})

    if result.deleted_count == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Aircraft not found"
        )

    logger.info(f"Aircraft {aircraft_id} deleted from fleet")
    return {"message": "Aircraft deleted", "aircraft_id": aircraft_id}
