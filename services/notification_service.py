"""
Notification Service

Scans maintenance-tracked aircraft and raises one notification per task
that is Overdue or in its Grace Period.

IDEMPOTENT:
- Notification id is "maintenance-due-{task_id}"
- An existing notification with that id is never recreated
"""

import logging
from datetime import date, datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from config import Settings, get_settings
from models.aircraft import FleetAircraft
from models.maintenance import MaintenanceStatus, TaskDueStatus
from models.notification import NotificationCreate, NotificationType
from services.maintenance_tasks import evaluate_aircraft_tasks

logger = logging.getLogger(__name__)

NOTIFY_STATUSES = {MaintenanceStatus.OVERDUE, MaintenanceStatus.GRACE_PERIOD}


def maintenance_notification_id(task_id: str) -> str:
    return f"maintenance-due-{task_id}"


def build_maintenance_notification(aircraft: FleetAircraft, item: TaskDueStatus) -> NotificationCreate:
    remaining = item.remaining
    if item.projection.due_date:
        due_text = f"was due on {item.projection.due_date}"
    else:
        due_text = f"is past due ({remaining.text})"

    return NotificationCreate(
        type=NotificationType.MAINTENANCE,
        title=f"Maintenance Due: {item.item_title}",
        message=f'The maintenance task "{item.item_title}" for aircraft {aircraft.tail_number} '
                f'{due_text}. Status: {remaining.status.value}.',
        link=f"/aircraft/currency/{aircraft.tail_number}",
    )


async def create_notification(
    db: AsyncIOMotorDatabase,
    notification: NotificationCreate,
    notification_id: str
) -> bool:
    """Insert a notification unless one with the same id exists. Returns True if created."""
    existing = await db.notifications.find_one({"_id": notification_id})
    if existing:
        return False

    now = datetime.utcnow()
    await db.notifications.insert_one({
        **notification.model_dump(mode="json"),
        "_id": notification_id,
        "timestamp": now,
        "is_read": False,
        "created_at": now,
        "updated_at": now
    })
    return True


async def generate_maintenance_notifications(
    db: AsyncIOMotorDatabase,
    today: Optional[date] = None,
    settings: Optional[Settings] = None
) -> int:
    """Create notifications for overdue maintenance. Returns how many were created."""
    settings = settings or get_settings()
    today = today or date.today()
    created_count = 0

    cursor = db.fleet_aircraft.find({"is_maintenance_tracked": True})
    aircraft_docs = await cursor.to_list(length=500)

    for doc in aircraft_docs:
        try:
            aircraft = FleetAircraft(**doc)
            evaluations = await evaluate_aircraft_tasks(db, aircraft, settings, today=today, alerting_only=True)

            for item in evaluations:
                if item.remaining.status not in NOTIFY_STATUSES:
                    continue
                notification = build_maintenance_notification(aircraft, item)
                if await create_notification(db, notification, maintenance_notification_id(item.task_id)):
                    created_count += 1
                    logger.info(f"Maintenance notification created for task {item.task_id} ({aircraft.tail_number})")
        except Exception as e:
            logger.error(f"Error generating maintenance notifications for aircraft {doc.get('_id')}: {e}")

    logger.info(f"Notification generation finished. Created {created_count} new notifications.")
    return created_count
