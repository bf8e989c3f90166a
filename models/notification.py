"""Notification Models for FlightOps"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    ALERT = "alert"
    INFO = "info"
    SUCCESS = "success"
    SYSTEM = "system"
    MAINTENANCE = "maintenance"
    TRAINING = "training"
    COMPLIANCE = "compliance"


class NotificationCreate(BaseModel):
    type: NotificationType = NotificationType.INFO
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    link: Optional[str] = None
    user_id: Optional[str] = None  # None = global


class Notification(NotificationCreate):
    id: str = Field(alias="_id")
    timestamp: datetime
    is_read: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True


class NotificationReadUpdate(BaseModel):
    is_read: bool
