"""
Maintenance Task Service

Store access for maintenance tasks and the wiring between the stores
and the due calculator. Every screen that shows due status goes through
evaluate_aircraft_tasks() so that fleet overview, aircraft detail and
notifications always agree.
"""

import logging
from datetime import date
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from config import Settings
from models.aircraft import FleetAircraft
from models.maintenance import MaintenanceTask, TaskDueStatus
from services.component_times import fetch_component_times
from services.maintenance_due import evaluate_tasks, rank_by_urgency

logger = logging.getLogger(__name__)


async def fetch_tasks_for_aircraft(db: AsyncIOMotorDatabase, aircraft_id: str) -> List[MaintenanceTask]:
    cursor = db.maintenance_tasks.find({"aircraft_id": aircraft_id})
    docs = await cursor.to_list(length=1000)

    tasks = []
    for doc in docs:
        doc["_id"] = str(doc["_id"])
        tasks.append(MaintenanceTask(**doc))

    logger.info(f"Fetched {len(tasks)} maintenance tasks for aircraft {aircraft_id}")
    return tasks


async def evaluate_aircraft_tasks(
    db: AsyncIOMotorDatabase,
    aircraft: FleetAircraft,
    settings: Settings,
    today: Optional[date] = None,
    alerting_only: bool = False
) -> List[TaskDueStatus]:
    """Project and evaluate every task of an aircraft, most urgent first"""
    tasks = await fetch_tasks_for_aircraft(db, aircraft.id)
    component_times = await fetch_component_times(db, aircraft.id)

    default_component = aircraft.default_component or settings.maintenance_default_component

    evaluations = evaluate_tasks(
        tasks,
        component_times,
        alerting_only=alerting_only,
        default_component=default_component,
        today=today or date.today(),
        thresholds=settings.get_alert_thresholds(),
        fallback_to_today=settings.maintenance_baseline_fallback_to_today,
    )
    return rank_by_urgency(evaluations)
