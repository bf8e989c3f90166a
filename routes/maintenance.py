"""
Maintenance Task Routes for FlightOps
"""

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List
from datetime import datetime, date
import logging
import uuid

from config import Settings, get_settings
from database.mongodb import get_database
from models.aircraft import FleetAircraft
from models.maintenance import (
    AircraftDueReport,
    MaintenanceTask,
    MaintenanceTaskCreate,
    TaskDueStatus,
)
from routes.fleet import get_aircraft_or_404
from services.component_times import fetch_component_times
from services.maintenance_due import evaluate_task
from services.maintenance_tasks import evaluate_aircraft_tasks, fetch_tasks_for_aircraft

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


def canonical_component(aircraft: FleetAircraft, component: str) -> str:
    """
    Match a task's component against the aircraft's tracked components
    (trimmed, case-insensitive) and return the tracked spelling.
    """
    wanted = component.strip().lower()
    for name in aircraft.tracked_component_names:
        if name.strip().lower() == wanted:
            return name.strip()
    raise HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"Component '{component}' is not tracked on aircraft {aircraft.tail_number}. "
               f"Tracked: {', '.join(aircraft.tracked_component_names)}"
    )


def build_task_doc(task: MaintenanceTaskCreate, aircraft: FleetAircraft) -> dict:
    doc = task.model_dump()
    for field in ("track_type", "item_type", "days_interval_type"):
        if doc[field] is not None:
            doc[field] = doc[field].value
    if task.associated_component and task.associated_component.strip():
        doc["associated_component"] = canonical_component(aircraft, task.associated_component)
    else:
        doc["associated_component"] = None
    return doc


async def get_task_or_404(db: AsyncIOMotorDatabase, task_id: str) -> MaintenanceTask:
    task = await db.maintenance_tasks.find_one({"_id": task_id})
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Maintenance task not found"
        )
    task["_id"] = str(task["_id"])
    return MaintenanceTask(**task)


@router.get("/aircraft/{aircraft_id}/tasks", response_model=List[MaintenanceTask])
async def get_maintenance_tasks(
    aircraft_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get all maintenance tasks for an aircraft"""
    await get_aircraft_or_404(db, aircraft_id)
    return await fetch_tasks_for_aircraft(db, aircraft_id)


@router.post("/aircraft/{aircraft_id}/tasks", response_model=MaintenanceTask, status_code=status.HTTP_201_CREATED)
async def create_maintenance_task(
    aircraft_id: str,
    task: MaintenanceTaskCreate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Create a new maintenance task"""
    aircraft = await get_aircraft_or_404(db, aircraft_id)

    now = datetime.utcnow()
    doc = build_task_doc(task, aircraft)
    doc["_id"] = str(uuid.uuid4())
    doc["aircraft_id"] = aircraft_id
    doc["created_at"] = now
    doc["updated_at"] = now

    await db.maintenance_tasks.insert_one(doc)
    logger.info(f"Maintenance task '{task.item_title}' created for aircraft {aircraft.tail_number}")

    return MaintenanceTask(**doc)


@router.get("/aircraft/{aircraft_id}/status", response_model=AircraftDueReport)
async def get_aircraft_due_status(
    aircraft_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    settings: Settings = Depends(get_settings)
):
    """All tasks of an aircraft with due projection and remaining status, most urgent first"""
    aircraft = await get_aircraft_or_404(db, aircraft_id)
    today = date.today()
    evaluations = await evaluate_aircraft_tasks(db, aircraft, settings, today=today)
    return AircraftDueReport(aircraft_id=aircraft_id, evaluated_at=today, tasks=evaluations)


@router.get("/tasks/{task_id}", response_model=MaintenanceTask)
async def get_maintenance_task(
    task_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    return await get_task_or_404(db, task_id)


@router.get("/tasks/{task_id}/status", response_model=TaskDueStatus)
async def get_task_due_status(
    task_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
    settings: Settings = Depends(get_settings)
):
    """Due projection and remaining status for a single task"""
    task = await get_task_or_404(db, task_id)
    aircraft = await get_aircraft_or_404(db, task.aircraft_id)
    component_times = await fetch_component_times(db, aircraft.id)

    return evaluate_task(
        task,
        component_times,
        default_component=aircraft.default_component or settings.maintenance_default_component,
        thresholds=settings.get_alert_thresholds(),
        fallback_to_today=settings.maintenance_baseline_fallback_to_today
    )


@router.put("/tasks/{task_id}", response_model=MaintenanceTask)
async def update_maintenance_task(
    task_id: str,
    task: MaintenanceTaskCreate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Replace a maintenance task's configuration"""
    existing = await get_task_or_404(db, task_id)
    aircraft = await get_aircraft_or_404(db, existing.aircraft_id)

    update_dict = build_task_doc(task, aircraft)
    update_dict["updated_at"] = datetime.utcnow()

    await db.maintenance_tasks.update_one(
        {"_id": task_id},
        {"$set": update_dict}
    )
    logger.info(f"Maintenance task {task_id} updated")

    return await get_task_or_404(db, task_id)


@router.delete("/tasks/{task_id}")
async def delete_maintenance_task(
    task_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Delete a maintenance task"""
    result = await db.maintenance_tasks.delete_one({"_id": task_id})

    if result.deleted_count == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Maintenance task not found"
        )

    logger.info(f"Maintenance task {task_id} deleted")
    return {"success": True, "task_id": task_id}
