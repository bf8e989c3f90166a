"""
Notification Routes

ENDPOINTS:
- GET /api/notifications - List notifications, newest first
- PUT /api/notifications/{notification_id}/read - Mark read/unread
- POST /api/notifications/generate - Raise notifications for overdue maintenance
"""

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel
from datetime import datetime
from typing import List
import logging

from config import Settings, get_settings
from database.mongodb import get_database
from models.notification import Notification, NotificationReadUpdate
from services.notification_service import generate_maintenance_notifications

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


class GenerateNotificationsResponse(BaseModel):
    created_count: int


@router.get("", response_model=List[Notification])
async def get_notifications(
    unread_only: bool = False,
    limit: int = 100,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    query = {"is_read": False} if unread_only else {}
    cursor = db.notifications.find(query).sort("timestamp", -1)
    docs = await cursor.to_list(length=limit)
    return [Notification(**doc) for doc in docs]


@router.put("/{notification_id}/read", response_model=Notification)
async def mark_notification_read(
    notification_id: str,
    data: NotificationReadUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Mark a notification as read (or back to unread)"""
    result = await db.notifications.update_one(
        {"_id": notification_id},
        {"$set": {"is_read": data.is_read, "updated_at": datetime.utcnow()}}
    )

    if result.matched_count == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )

    doc = await db.notifications.find_one({"_id": notification_id})
    return Notification(**doc)


@router.post("/generate", response_model=GenerateNotificationsResponse)
async def generate_notifications(
    db: AsyncIOMotorDatabase = Depends(get_database),
    settings: Settings = Depends(get_settings)
):
    """Scan maintenance-tracked aircraft and notify about overdue tasks"""
    created_count = await generate_maintenance_notifications(db, settings=settings)
    return GenerateNotificationsResponse(created_count=created_count)
