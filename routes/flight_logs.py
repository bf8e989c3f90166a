"""
Flight Log Routes - One log per trip leg
Saving a leg adds its flight time and cycle to the aircraft's component times;
re-saving or deleting a leg first takes its previous contribution back out.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional
from datetime import datetime
import logging

from database.mongodb import get_database
from models.flight_log import FlightLogLeg, FlightLogLegCreate
from routes.fleet import get_aircraft_or_404
from services.component_times import (
    apply_leg_usage,
    fetch_component_times,
    flight_duration_hours,
    save_component_times,
)

router = APIRouter(prefix="/api/flight-logs", tags=["flight-logs"])
logger = logging.getLogger(__name__)


def leg_document_id(trip_id: str, leg_index: int) -> str:
    return f"{trip_id}_{leg_index}"


async def apply_to_component_times(
    db: AsyncIOMotorDatabase,
    aircraft_id: str,
    components: List[str],
    flight_hours: float,
    apu_hours: float,
    sign: int = 1
):
    current = await fetch_component_times(db, aircraft_id)
    updated = apply_leg_usage(current, components, flight_hours, apu_hours, sign=sign)
    await save_component_times(db, aircraft_id, updated)


async def reverse_leg_contribution(db: AsyncIOMotorDatabase, log_doc: dict):
    """Take a previously applied leg back out of the component times"""
    if not log_doc.get("applied_to_component_times"):
        return
    await apply_to_component_times(
        db,
        log_doc["aircraft_id"],
        log_doc.get("applied_components") or [],
        log_doc.get("calculated_flight_time_decimal", 0.0),
        log_doc.get("post_leg_apu_time_decimal", 0.0),
        sign=-1
    )
    logger.info(f"Reversed component time contribution of flight log {log_doc['_id']}")


@router.put("/{trip_id}/{leg_index}", response_model=FlightLogLeg)
async def save_flight_log_leg(
    trip_id: str,
    leg_index: int,
    leg: FlightLogLegCreate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Save (add or replace) the flight log of a trip leg and update component times"""
    if leg_index < 0:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Leg index cannot be negative"
        )

    aircraft = await get_aircraft_or_404(db, leg.aircraft_id)
    doc_id = leg_document_id(trip_id, leg_index)
    existing = await db.flight_logs.find_one({"_id": doc_id})

    if existing:
        await reverse_leg_contribution(db, existing)

    now = datetime.utcnow()
    flight_hours = flight_duration_hours(leg)
    applied_components = []

    if aircraft.is_maintenance_tracked:
        applied_components = [name.strip() for name in aircraft.tracked_component_names if name.strip()]
        await apply_to_component_times(
            db,
            aircraft.id,
            applied_components,
            flight_hours,
            leg.post_leg_apu_time_decimal
        )
        logger.info(f"Added {flight_hours}h / 1 cycle to aircraft {aircraft.tail_number} from flight log {doc_id}")
    else:
        logger.info(f"Aircraft {aircraft.tail_number} is not maintenance tracked. Skipping component time update.")

    log_doc = {
        **leg.model_dump(mode="json"),
        "_id": doc_id,
        "trip_id": trip_id,
        "leg_index": leg_index,
        "calculated_flight_time_decimal": flight_hours,
        "applied_to_component_times": aircraft.is_maintenance_tracked,
        "applied_components": applied_components,
        "created_at": existing["created_at"] if existing else now,
        "updated_at": now
    }

    await db.flight_logs.update_one(
        {"_id": doc_id},
        {"$set": log_doc},
        upsert=True
    )
    logger.info(f"Saved flight log {doc_id}")

    return FlightLogLeg(**log_doc)


@router.get("/{trip_id}/{leg_index}", response_model=Optional[FlightLogLeg])
async def get_flight_log_leg(
    trip_id: str,
    leg_index: int,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get the flight log for a trip leg (null if none recorded)"""
    log_doc = await db.flight_logs.find_one({"_id": leg_document_id(trip_id, leg_index)})
    if not log_doc:
        return None
    return FlightLogLeg(**log_doc)


@router.delete("/{flight_log_id}")
async def delete_flight_log_leg(
    flight_log_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Delete a flight log and remove its contribution from component times"""
    log_doc = await db.flight_logs.find_one({"_id": flight_log_id})
    if not log_doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Flight log not found"
        )

    await reverse_leg_contribution(db, log_doc)
    await db.flight_logs.delete_one({"_id": flight_log_id})

    logger.info(f"Deleted flight log {flight_log_id}")
    return {"success": True, "flight_log_id": flight_log_id}
